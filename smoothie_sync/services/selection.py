# smoothie_sync/services/selection.py
from __future__ import annotations

import random
from typing import Iterable, Optional

from smoothie_sync.app.domain.models import FacetFlags, Recipe


def filter_recipes(
    catalog: Iterable[Recipe],
    flags: FacetFlags,
    favorites: set[str],
) -> list[Recipe]:
    """Aplica os filtros de gordura, castanhas e favoritos, mantendo a ordem."""
    return [
        recipe
        for recipe in catalog
        if (not flags.no_fat or not recipe.contains_fat)
        and (not flags.no_nuts or not recipe.contains_nuts)
        and (not flags.favorites_only or recipe.id in favorites)
    ]


def pick_random(
    recipes: list[Recipe],
    rng: Optional[random.Random] = None,
) -> Optional[Recipe]:
    """Escolha uniforme; None quando não há candidatas (estado vazio válido)."""
    if not recipes:
        return None
    chooser = rng or random
    return chooser.choice(recipes)


def recipes_by_contributor(catalog: Iterable[Recipe], contributor: str) -> list[Recipe]:
    return [recipe for recipe in catalog if recipe.contributor == contributor]

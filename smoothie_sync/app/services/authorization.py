# smoothie_sync/app/services/authorization.py
"""
Client-side ownership checks.

These are advisory: the community store remains the authority and may still
reject an update or delete the gate allowed.
"""
from __future__ import annotations

from typing import Optional

from smoothie_sync.app.domain.models import Recipe
from smoothie_sync.services.ids import LocalId, RemoteId, try_parse_recipe_id


def can_edit(recipe: Recipe, identity: Optional[str]) -> bool:
    """Only remote recipes written by the current identity."""
    if not identity:
        return False
    if not isinstance(try_parse_recipe_id(recipe.id), RemoteId):
        return False
    return recipe.contributor == identity


def can_delete(recipe: Recipe, identity: Optional[str]) -> bool:
    """Remote or local recipes written by the current identity. Seeds never."""
    if not identity:
        return False
    if not isinstance(try_parse_recipe_id(recipe.id), (RemoteId, LocalId)):
        return False
    return recipe.contributor == identity

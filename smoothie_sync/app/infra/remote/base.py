# smoothie_sync/app/infra/remote/base.py
"""
Abstract base class for the community recipe store.
This interface allows easy swapping between different record-store backends.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from smoothie_sync.app.domain.models import Recipe


class RecipeService(ABC):
    """
    Abstract interface for remote recipe operations.

    Implementations:
    - HttpRecipeService: Supabase edge function over HTTP

    Every method may raise NetworkUnreachableError (host unreachable) or a
    RecipeServiceError subclass (reachable, non-2xx).
    """

    @abstractmethod
    async def list_recipes(self) -> list[Recipe]:
        """
        Fetch the whole community catalog.

        Returns:
            All remote recipes. An empty list is an authoritative
            "zero recipes", never a stand-in for "unreachable".
        """
        pass

    @abstractmethod
    async def create_recipe(self, draft: dict[str, Any]) -> Recipe:
        """
        Persist a new recipe.

        Args:
            draft: Recipe fields without id/createdAt (the store assigns both)

        Returns:
            The stored recipe with its remote id
        """
        pass

    @abstractmethod
    async def update_recipe(self, recipe_id: str, draft: dict[str, Any]) -> Recipe:
        """
        Replace the fields of an existing recipe (last write wins).

        Args:
            recipe_id: Remote id, unencoded
            draft: Recipe fields without id/createdAt

        Returns:
            The updated recipe
        """
        pass

    @abstractmethod
    async def delete_recipe(self, recipe_id: str) -> None:
        """
        Delete a recipe.

        Args:
            recipe_id: Remote id, unencoded
        """
        pass

    async def aclose(self) -> None:
        """Release underlying connections, if any."""
        return None

# smoothie_sync/app/services/catalog.py
"""
Recipe catalog reconciliation.
Merges the community store with the local fallback store, migrates local-only
recipes once a contributor identity is available, and routes mutations to the
store that owns each id.
"""
from __future__ import annotations

import asyncio
import itertools
import logging
import random
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Coroutine, Optional

from smoothie_sync.app.domain.errors import (
    NotAuthorizedError,
    ReadOnlyRecipeError,
    RecipeError,
    RecipeNotFoundError,
    RecipeValidationError,
)
from smoothie_sync.app.domain.models import (
    FacetFlags,
    MigrationReport,
    Recipe,
    RemoteStatus,
)
from smoothie_sync.app.infra.remote.base import RecipeService
from smoothie_sync.app.infra.storage.favorites import FavoritesStore
from smoothie_sync.app.infra.storage.local_recipes import LocalRecipeStore
from smoothie_sync.app.services.authorization import can_delete, can_edit
from smoothie_sync.app.services.identity import IdentityResolver
from smoothie_sync.services.drafts import DraftInput, RecipeDraft, validate_draft
from smoothie_sync.services.ids import LocalId, SeedId, new_local_id, parse_recipe_id
from smoothie_sync.services.seed_recipes import seed_recipes
from smoothie_sync.services.selection import filter_recipes, pick_random, recipes_by_contributor

logger = logging.getLogger(__name__)

SKIP_ANONYMOUS = "anonymous"
SKIP_IN_FLIGHT = "in-flight"


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _dedupe(recipes: list[Recipe]) -> list[Recipe]:
    seen: set[str] = set()
    unique: list[Recipe] = []
    for recipe in recipes:
        if recipe.id in seen:
            continue
        seen.add(recipe.id)
        unique.append(recipe)
    return unique


@dataclass
class CatalogState:
    """Everything the UI renders from. Mutated only by RecipeCatalog commands."""
    remote_recipes: list[Recipe] = field(default_factory=list)
    local_recipes: list[Recipe] = field(default_factory=list)
    favorites: set[str] = field(default_factory=set)
    remote_status: RemoteStatus = RemoteStatus.PENDING
    current_recipe: Optional[Recipe] = None
    migration_in_flight: bool = False


class RecipeCatalog:
    """
    State container for the merged recipe catalog.

    Commands:
    - refresh: re-list the community store and reload local state
    - submit / update / delete: route by id namespace
    - run_migration: promote local-only recipes to the community store
    - toggle_favorite / shake / select: UI-facing selection state
    """

    def __init__(
        self,
        remote: RecipeService,
        local_store: LocalRecipeStore,
        favorites_store: FavoritesStore,
        identity: IdentityResolver,
        seeds: Optional[list[Recipe]] = None,
    ):
        self._remote = remote
        self._local = local_store
        self._favorites = favorites_store
        self._identity = identity
        self._seeds = seeds if seeds is not None else seed_recipes()
        self.state = CatalogState(
            local_recipes=local_store.load(),
            favorites=favorites_store.load(),
        )
        self._background: set[asyncio.Task[None]] = set()
        # ids removed locally whose remote DELETE has not settled yet
        self._pending_deletes: set[str] = set()
        # promotions a concurrent refresh may not have seen yet: id -> (seq, recipe)
        self._promotions: dict[str, tuple[int, Recipe]] = {}
        self._seq = itertools.count(1)
        self._last_seq = 0

    # ------------------------------------------------------------------ queries

    @property
    def identity(self) -> Optional[str]:
        return self._identity.current()

    def visible_recipes(self) -> list[Recipe]:
        """
        Seeds are shown only while the community store is not known to be reachable.
        Local recipes are always shown unless they lack a name or contributor.
        """
        if self.state.remote_status is RemoteStatus.AVAILABLE:
            base = self.state.remote_recipes
        else:
            base = self._seeds
        return [
            recipe
            for recipe in _dedupe([*base, *self.state.local_recipes])
            if recipe.is_displayable
        ]

    def get(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.visible_recipes():
            if recipe.id == recipe_id:
                return recipe
        return None

    def filtered(self, flags: FacetFlags) -> list[Recipe]:
        return filter_recipes(self.visible_recipes(), flags, self.state.favorites)

    def recipes_by(self, contributor: str) -> list[Recipe]:
        return recipes_by_contributor(self.visible_recipes(), contributor)

    def is_favorite(self, recipe_id: str) -> bool:
        return recipe_id in self.state.favorites

    def can_edit(self, recipe: Recipe) -> bool:
        return can_edit(recipe, self._identity.current())

    def can_delete(self, recipe: Recipe) -> bool:
        return can_delete(recipe, self._identity.current())

    # ------------------------------------------------------------------ selection

    def shake(self, flags: FacetFlags, rng: Optional[random.Random] = None) -> Optional[Recipe]:
        """Pick a random recipe from the filtered catalog and make it current."""
        recipe = pick_random(self.filtered(flags), rng)
        self.state.current_recipe = recipe
        return recipe

    def select(self, recipe_id: str) -> Optional[Recipe]:
        recipe = self.get(recipe_id)
        if recipe is not None:
            self.state.current_recipe = recipe
        return recipe

    def toggle_favorite(self, recipe_id: str) -> bool:
        favorites = set(self.state.favorites)
        if recipe_id in favorites:
            favorites.discard(recipe_id)
        else:
            favorites.add(recipe_id)
        self.state.favorites = favorites
        self._favorites.save(favorites)
        return recipe_id in favorites

    # ------------------------------------------------------------------ commands

    async def refresh(self) -> RemoteStatus:
        self._reload_local()
        started_seq = self._last_seq
        try:
            recipes = await self._remote.list_recipes()
        except RecipeError as exc:
            self.state.remote_status = RemoteStatus.UNAVAILABLE
            logger.warning("catalog.refresh_failed error=%s", exc)
            return self.state.remote_status

        merged = [recipe for recipe in _dedupe(recipes) if recipe.id not in self._pending_deletes]
        listed_ids = {recipe.id for recipe in merged}
        for recipe_id, (seq, recipe) in list(self._promotions.items()):
            if seq > started_seq:
                if recipe_id not in listed_ids:
                    merged.append(recipe)
            else:
                del self._promotions[recipe_id]

        self.state.remote_recipes = merged
        self.state.remote_status = RemoteStatus.AVAILABLE
        logger.info(
            "catalog.refreshed remote=%d local=%d", len(merged), len(self.state.local_recipes)
        )
        return self.state.remote_status

    async def submit(self, draft: DraftInput, guest_name: Optional[str] = None) -> Recipe:
        """
        Create a recipe, preferring the community store.

        Falls back to the local store when the remote create fails, so the call
        only raises if the draft is invalid or local persistence fails too.
        """
        fallback_name = guest_name
        if fallback_name is None:
            if isinstance(draft, RecipeDraft):
                fallback_name = draft.contributor
            else:
                fallback_name = draft.get("contributor")
        contributor = self._identity.contributor_for(fallback_name)
        if contributor is None:
            raise RecipeValidationError(["contributor: a contributor name is required"])

        payload = validate_draft(draft, contributor=contributor).to_payload()
        try:
            recipe = await self._remote.create_recipe(payload)
        except RecipeError as exc:
            logger.warning("catalog.submit_stored_locally error=%s", exc)
            recipe = self._create_local(payload)
        else:
            self._insert_remote(recipe)
            logger.info("catalog.submitted id=%s", recipe.id)

        self.state.current_recipe = recipe
        return recipe

    async def update(self, recipe_id: str, draft: DraftInput) -> Recipe:
        """
        Update a recipe in the store that owns its id.

        Remote failures are raised to the caller; a remote id has no local
        namespace to fall back into. Last write wins.
        """
        parsed = parse_recipe_id(recipe_id)
        if isinstance(parsed, SeedId):
            raise ReadOnlyRecipeError(recipe_id)
        if isinstance(parsed, LocalId):
            return self._update_local(recipe_id, draft)

        existing = self._find_remote(recipe_id)
        if existing is None:
            raise RecipeNotFoundError(recipe_id, operation="update")
        if not self.can_edit(existing):
            raise NotAuthorizedError("edit", recipe_id)

        # contributor is fixed at creation time
        payload = validate_draft(draft, contributor=existing.contributor).to_payload()
        updated = await self._remote.update_recipe(recipe_id, payload)
        if updated.created_at is None:
            updated.created_at = existing.created_at

        self.state.remote_recipes = [
            updated if recipe.id == recipe_id else recipe for recipe in self.state.remote_recipes
        ]
        self._replace_current(recipe_id, updated)
        logger.info("catalog.updated id=%s", recipe_id)
        return updated

    async def delete(self, recipe_id: str) -> Recipe:
        """
        Optimistic delete.

        The recipe leaves the catalog and the favorites in one step; the remote
        DELETE then runs in the background and a failure is only logged.
        """
        parsed = parse_recipe_id(recipe_id)
        if isinstance(parsed, SeedId):
            raise ReadOnlyRecipeError(recipe_id)

        if isinstance(parsed, LocalId):
            recipe = self._local.find(recipe_id)
        else:
            recipe = self._find_remote(recipe_id)
        if recipe is None:
            raise RecipeNotFoundError(recipe_id, operation="delete")
        if not self.can_delete(recipe):
            raise NotAuthorizedError("delete", recipe_id)

        if isinstance(parsed, LocalId):
            self._remove_local(recipe_id)
        else:
            self.state.remote_recipes = [
                item for item in self.state.remote_recipes if item.id != recipe_id
            ]
            self._promotions.pop(recipe_id, None)
            self._pending_deletes.add(recipe_id)

        if recipe_id in self.state.favorites:
            self.state.favorites = self.state.favorites - {recipe_id}
            self._favorites.save(self.state.favorites)
        if self.state.current_recipe is not None and self.state.current_recipe.id == recipe_id:
            self.state.current_recipe = None

        if not isinstance(parsed, LocalId):
            self._spawn(self._delete_remote(recipe_id))
        logger.info("catalog.deleted id=%s", recipe_id)
        return recipe

    async def run_migration(self) -> MigrationReport:
        """
        Promote local-only recipes to the community store, one at a time.

        Incomplete records are discarded. Records written under another
        contributor name (guest submissions) stay local, since the community
        store could never tie them to an owner. Create failures are left for
        the next pass. Nothing here is surfaced to the user.
        """
        identity = self._identity.current()
        if not identity:
            return MigrationReport(skipped_reason=SKIP_ANONYMOUS)
        if self.state.migration_in_flight:
            return MigrationReport(skipped_reason=SKIP_IN_FLIGHT)

        self.state.migration_in_flight = True
        report = MigrationReport()
        try:
            for local_id in [recipe.id for recipe in self._local.load()]:
                record = self._local.find(local_id)
                if record is None:
                    continue
                if not record.is_complete:
                    self._remove_local(local_id)
                    report.discarded.append(local_id)
                    logger.warning("migration.discarded_incomplete id=%s", local_id)
                    continue
                if record.contributor != identity:
                    report.not_owned.append(local_id)
                    logger.debug("migration.not_owned id=%s contributor=%s", local_id, record.contributor)
                    continue
                await self._promote(record, report)
        finally:
            self.state.migration_in_flight = False

        if report.promoted or report.discarded or report.failed:
            logger.info(
                "migration.pass_done promoted=%d discarded=%d failed=%d",
                len(report.promoted),
                len(report.discarded),
                len(report.failed),
            )
        return report

    async def wait_for_background(self) -> None:
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def aclose(self) -> None:
        await self.wait_for_background()
        await self._remote.aclose()

    # ------------------------------------------------------------------ internals

    async def _promote(self, record: Recipe, report: MigrationReport) -> None:
        try:
            created = await self._remote.create_recipe(record.to_draft_payload())
        except RecipeError as exc:
            report.failed.append(record.id)
            logger.warning("migration.create_failed id=%s error=%s", record.id, exc)
            return

        if self._local.find(record.id) is None:
            # deleted by the user while the create was in flight
            logger.info("migration.deleted_during_create local=%s remote=%s", record.id, created.id)
            self._spawn(self._delete_remote(created.id))
            return

        self._remove_local(record.id)
        self._insert_remote(created)
        self._replace_current(record.id, created)
        if record.id in self.state.favorites:
            self.state.favorites = (self.state.favorites - {record.id}) | {created.id}
            self._favorites.save(self.state.favorites)
        report.promoted[record.id] = created.id
        logger.info("migration.promoted local=%s remote=%s", record.id, created.id)

    def _insert_remote(self, recipe: Recipe) -> bool:
        """Append unless a concurrent refresh already pulled the same id in."""
        self._last_seq = next(self._seq)
        self._promotions[recipe.id] = (self._last_seq, recipe)
        if any(existing.id == recipe.id for existing in self.state.remote_recipes):
            return False
        self.state.remote_recipes = [*self.state.remote_recipes, recipe]
        return True

    def _find_remote(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.state.remote_recipes:
            if recipe.id == recipe_id:
                return recipe
        return None

    def _create_local(self, payload: dict[str, Any]) -> Recipe:
        local = self._local.load()
        local_id = new_local_id({recipe.id for recipe in local})
        recipe = Recipe.from_dict(
            {**payload, "id": str(local_id), "createdAt": _now_utc().isoformat()}
        )
        local.append(recipe)
        self._local.save(local)
        self.state.local_recipes = local
        logger.info("catalog.stored_locally id=%s", recipe.id)
        return recipe

    def _update_local(self, recipe_id: str, draft: DraftInput) -> Recipe:
        local = self._local.load()
        for index, existing in enumerate(local):
            if existing.id == recipe_id:
                break
        else:
            raise RecipeNotFoundError(recipe_id, operation="update")

        payload = validate_draft(draft, contributor=existing.contributor or "").to_payload()
        updated = Recipe.from_dict(
            {**payload, "id": existing.id, "createdAt": existing.created_at}
        )
        local[index] = updated
        self._local.save(local)
        self.state.local_recipes = local
        self._replace_current(recipe_id, updated)
        logger.info("catalog.updated_locally id=%s", recipe_id)
        return updated

    def _remove_local(self, recipe_id: str) -> None:
        local = [recipe for recipe in self._local.load() if recipe.id != recipe_id]
        self._local.save(local)
        self.state.local_recipes = local

    def _reload_local(self) -> None:
        self.state.local_recipes = self._local.load()
        self.state.favorites = self._favorites.load()

    def _replace_current(self, old_id: str, recipe: Recipe) -> None:
        if self.state.current_recipe is not None and self.state.current_recipe.id == old_id:
            self.state.current_recipe = recipe

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _delete_remote(self, recipe_id: str) -> None:
        try:
            await self._remote.delete_recipe(recipe_id)
        except RecipeNotFoundError:
            logger.info("catalog.remote_delete_already_gone id=%s", recipe_id)
        except RecipeError as exc:
            logger.warning("catalog.remote_delete_failed id=%s error=%s", recipe_id, exc)
        else:
            logger.info("catalog.remote_deleted id=%s", recipe_id)
        finally:
            self._pending_deletes.discard(recipe_id)

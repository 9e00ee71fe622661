# smoothie_sync/app/infra/storage/local_recipes.py
"""
Local fallback store for recipes created while the community store was unreachable.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from smoothie_sync.app.domain.models import DEFAULT_INSTRUCTIONS, Recipe
from smoothie_sync.app.infra.storage.base import LOCAL_RECIPES_KEY, KeyValueStorage

logger = logging.getLogger(__name__)


def _has_text(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def repair_record(row: dict[str, Any]) -> tuple[dict[str, Any], bool]:
    """
    Patch a structurally incomplete record.

    Only records that still carry a name and a contributor are repaired;
    anything else is returned untouched and left for the migration pass to discard.
    """
    if not _has_text(row.get("name")) or not _has_text(row.get("contributor")):
        return row, False

    changed = False
    patched = dict(row)
    if not isinstance(patched.get("ingredients"), list):
        patched["ingredients"] = []
        changed = True
    if not _has_text(patched.get("instructions")):
        patched["instructions"] = DEFAULT_INSTRUCTIONS
        changed = True
    return patched, changed


class LocalRecipeStore:
    def __init__(self, storage: KeyValueStorage, key: str = LOCAL_RECIPES_KEY):
        self._storage = storage
        self.key = key

    def load(self) -> list[Recipe]:
        rows = self._load_rows()
        repaired_rows: list[dict[str, Any]] = []
        repaired_ids: list[str] = []
        for row in rows:
            patched, changed = repair_record(row)
            repaired_rows.append(patched)
            if changed:
                repaired_ids.append(str(patched.get("id")))

        if repaired_ids:
            self._write_rows(repaired_rows)
            logger.info("local_store.repaired count=%d ids=%s", len(repaired_ids), repaired_ids)

        return [Recipe.from_dict(row) for row in repaired_rows]

    def save(self, recipes: list[Recipe]) -> None:
        """Replace the whole local set."""
        self._write_rows([recipe.to_dict() for recipe in recipes])

    def find(self, recipe_id: str) -> Optional[Recipe]:
        for recipe in self.load():
            if recipe.id == recipe_id:
                return recipe
        return None

    def _load_rows(self) -> list[dict[str, Any]]:
        raw = self._storage.get(self.key)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("local_store.invalid_json key=%s", self.key)
            return []
        if not isinstance(data, list):
            return []
        return [row for row in data if isinstance(row, dict)]

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        self._storage.set(self.key, json.dumps(rows, ensure_ascii=False))

# smoothie_sync/app/infra/storage/favorites.py
from __future__ import annotations

import json
import logging

from smoothie_sync.app.infra.storage.base import FAVORITES_KEY, KeyValueStorage

logger = logging.getLogger(__name__)


class FavoritesStore:
    """Set of favorited recipe ids. Ids are not checked against the catalog."""

    def __init__(self, storage: KeyValueStorage, key: str = FAVORITES_KEY):
        self._storage = storage
        self.key = key

    def load(self) -> set[str]:
        raw = self._storage.get(self.key)
        if not raw:
            return set()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("favorites.invalid_json key=%s", self.key)
            return set()
        if not isinstance(data, list):
            return set()
        # seed ids were stored as numbers by older clients
        return {str(item) for item in data if item is not None}

    def save(self, favorites: set[str]) -> None:
        self._storage.set(self.key, json.dumps(sorted(favorites)))

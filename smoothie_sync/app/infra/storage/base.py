# smoothie_sync/app/infra/storage/base.py
"""
Abstract base class for durable key-value storage.
This interface allows easy swapping between storage backends (JSON file, browser bridge, etc.)
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

FAVORITES_KEY = "favorites"
LOCAL_RECIPES_KEY = "local-recipes"


class KeyValueStorage(ABC):
    """
    Abstract interface for string key-value persistence.

    Implementations:
    - JsonFileStorage: single JSON document on local disk
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Namespace key (e.g. "favorites", "local-recipes")

        Returns:
            The stored string, or None if the key was never written
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Args:
            key: Namespace key
            value: Serialized payload
        """
        pass

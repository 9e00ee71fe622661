# smoothie_sync/app/infra/storage/file_provider.py
"""
JSON file implementation of KeyValueStorage.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from smoothie_sync.app.domain.errors import LocalStorageError
from smoothie_sync.app.infra.storage.base import KeyValueStorage

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStorage):
    """
    Keeps every key in one JSON object on disk.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(key, data)

    def _read_all(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LocalStorageError(str(self.path), str(exc)) from exc
        if not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("storage.corrupt_file path=%s, starting empty", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, key: str, data: dict[str, object]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            raise LocalStorageError(key, str(exc)) from exc

# smoothie_sync/services/ids.py
from __future__ import annotations

import re
import time
from dataclasses import dataclass
from typing import Optional, Union

from smoothie_sync.app.domain.errors import UnknownRecipeIdError

REMOTE_PREFIX = "recipe:"
LOCAL_PREFIX = "user-"

_REMOTE_RE = re.compile(r"^recipe:(\d+):([A-Za-z0-9]*)$")
_LOCAL_RE = re.compile(r"^user-(\d+)$")
_SEED_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class SeedId:
    """Built-in recipe bundled with the app. Never owned by anyone."""
    number: int

    def __str__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class LocalId:
    """Recipe persisted only in the local fallback store."""
    timestamp: int

    def __str__(self) -> str:
        return f"{LOCAL_PREFIX}{self.timestamp}"


@dataclass(frozen=True)
class RemoteId:
    """Recipe persisted in the community store."""
    timestamp: int
    suffix: str

    def __str__(self) -> str:
        return f"{REMOTE_PREFIX}{self.timestamp}:{self.suffix}"


RecipeId = Union[SeedId, LocalId, RemoteId]


def parse_recipe_id(raw: object) -> RecipeId:
    """Retorna a variante tipada de um id de receita.

    Seed ids may arrive as ints (older favorites files stored them that way).
    """
    value = str(raw).strip() if raw is not None else ""

    m = _REMOTE_RE.match(value)
    if m:
        return RemoteId(timestamp=int(m.group(1)), suffix=m.group(2))
    m = _LOCAL_RE.match(value)
    if m:
        return LocalId(timestamp=int(m.group(1)))
    if _SEED_RE.match(value):
        return SeedId(number=int(value))
    raise UnknownRecipeIdError(value)


def try_parse_recipe_id(raw: object) -> Optional[RecipeId]:
    try:
        return parse_recipe_id(raw)
    except UnknownRecipeIdError:
        return None


def is_remote_id(raw: object) -> bool:
    return isinstance(try_parse_recipe_id(raw), RemoteId)


def is_local_id(raw: object) -> bool:
    return isinstance(try_parse_recipe_id(raw), LocalId)


def is_seed_id(raw: object) -> bool:
    return isinstance(try_parse_recipe_id(raw), SeedId)


def new_local_id(taken: set[str] | None = None, now_ms: int | None = None) -> LocalId:
    """Gera um id local `user-<ms>` que não colide com os já usados."""
    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    taken = taken or set()
    candidate = LocalId(timestamp=timestamp)
    while str(candidate) in taken:
        candidate = LocalId(timestamp=candidate.timestamp + 1)
    return candidate

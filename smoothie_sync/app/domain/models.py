# smoothie_sync/app/domain/models.py
"""
Domain models for the recipe catalog.
These are pure data structures with no infrastructure dependencies.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from smoothie_sync.services.ids import RecipeId, parse_recipe_id

DEFAULT_EMOJI = "🥤"
DEFAULT_COLOR = "#9333EA"
DEFAULT_SERVINGS = 1
DEFAULT_PREP_TIME = "5 min"
DEFAULT_INSTRUCTIONS = "No instructions provided."


class RemoteStatus(str, Enum):
    """Outcome of the most recent list() call against the community store."""
    PENDING = "pending"
    AVAILABLE = "remote-available"
    UNAVAILABLE = "remote-unavailable"


def _safe_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def _safe_int(value: object, default: int) -> int:
    try:
        number = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def _safe_bool(value: object) -> bool:
    # "false" off the wire must not read as True
    return value if isinstance(value, bool) else False


def clean_ingredients(values: object) -> list[str]:
    """Drop blank entries, keep order."""
    if not isinstance(values, (list, tuple)):
        return []
    return [str(item).strip() for item in values if item is not None and str(item).strip()]


@dataclass
class Recipe:
    """
    A smoothie recipe as seen by the catalog.
    The id namespace decides which store owns the record.
    """
    id: str
    name: Optional[str]
    contributor: Optional[str]
    emoji: str = DEFAULT_EMOJI
    color: str = DEFAULT_COLOR
    ingredients: list[str] = field(default_factory=list)
    instructions: str = ""
    servings: int = DEFAULT_SERVINGS
    prep_time: str = DEFAULT_PREP_TIME
    contains_fat: bool = False
    contains_nuts: bool = False
    created_at: Optional[str] = None

    @property
    def recipe_id(self) -> RecipeId:
        return parse_recipe_id(self.id)

    @property
    def is_displayable(self) -> bool:
        """Records without a name or contributor are never shown."""
        return bool(self.name) and bool(self.contributor)

    @property
    def is_complete(self) -> bool:
        """Minimal completeness required before promoting to the remote store."""
        return (
            self.is_displayable
            and bool(clean_ingredients(self.ingredients))
            and bool(self.instructions and self.instructions.strip())
        )

    def to_draft_payload(self) -> dict[str, Any]:
        """Wire body for create/update: no id, no createdAt, blank ingredients removed."""
        return {
            "name": self.name,
            "contributor": self.contributor,
            "emoji": self.emoji,
            "color": self.color,
            "ingredients": clean_ingredients(self.ingredients),
            "instructions": self.instructions,
            "servings": self.servings,
            "prepTime": self.prep_time,
            "containsFat": self.contains_fat,
            "containsNuts": self.contains_nuts,
        }

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id}
        data.update(self.to_draft_payload())
        data["ingredients"] = list(self.ingredients)
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Recipe":
        ingredients = data.get("ingredients")
        return cls(
            id=str(data.get("id") or ""),
            name=_safe_str(data.get("name")),
            contributor=_safe_str(data.get("contributor")),
            emoji=_safe_str(data.get("emoji")) or DEFAULT_EMOJI,
            color=_safe_str(data.get("color")) or DEFAULT_COLOR,
            ingredients=[str(item) for item in ingredients] if isinstance(ingredients, list) else [],
            instructions=str(data.get("instructions") or ""),
            servings=_safe_int(data.get("servings"), DEFAULT_SERVINGS),
            prep_time=_safe_str(data.get("prepTime")) or DEFAULT_PREP_TIME,
            contains_fat=_safe_bool(data.get("containsFat")),
            contains_nuts=_safe_bool(data.get("containsNuts")),
            created_at=_safe_str(data.get("createdAt")),
        )


@dataclass(frozen=True)
class FacetFlags:
    """Boolean filters applied on top of the merged catalog."""
    no_fat: bool = False
    no_nuts: bool = False
    favorites_only: bool = False


@dataclass(frozen=True)
class AuthUser:
    """Minimal view of the authenticated session."""
    email: Optional[str] = None
    nickname: Optional[str] = None


@dataclass
class MigrationReport:
    """Result of one migration pass over the local fallback store."""
    promoted: dict[str, str] = field(default_factory=dict)  # local id -> remote id
    discarded: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    # written under another contributor name, left for its owner
    not_owned: list[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None

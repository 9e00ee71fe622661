# smoothie_sync/services/drafts.py
from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from smoothie_sync.app.domain.errors import RecipeValidationError
from smoothie_sync.app.domain.models import (
    DEFAULT_COLOR,
    DEFAULT_EMOJI,
    DEFAULT_PREP_TIME,
    clean_ingredients,
)

HEX_COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class RecipeDraft(BaseModel):
    """Campos editáveis de uma receita (sem id/createdAt), já validados."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    contributor: str = Field(..., min_length=1, max_length=50)
    emoji: str = Field(default=DEFAULT_EMOJI, min_length=1)
    color: str = Field(default=DEFAULT_COLOR, pattern=HEX_COLOR_PATTERN)
    ingredients: list[str] = Field(..., min_length=1)
    instructions: str = Field(..., min_length=10, max_length=2000)
    servings: int = Field(default=1, ge=1, le=100)
    prep_time: str = Field(default=DEFAULT_PREP_TIME, alias="prepTime", min_length=1, max_length=50)
    contains_fat: bool = Field(default=False, alias="containsFat")
    contains_nuts: bool = Field(default=False, alias="containsNuts")

    @field_validator("ingredients", mode="before")
    @classmethod
    def _drop_blank_ingredients(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return clean_ingredients(value)
        return value

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


DraftInput = Union[RecipeDraft, Mapping[str, Any]]


def validate_draft(data: DraftInput, **overrides: Any) -> RecipeDraft:
    """
    Validate a draft, applying overrides (e.g. contributor) first.

    Raises:
        RecipeValidationError: listing every failing field
    """
    if isinstance(data, RecipeDraft):
        raw = data.to_payload()
    else:
        raw = {key: value for key, value in data.items() if key not in ("id", "createdAt")}
    raw.update(overrides)
    try:
        return RecipeDraft.model_validate(raw)
    except ValidationError as exc:
        errors = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        raise RecipeValidationError(errors) from exc

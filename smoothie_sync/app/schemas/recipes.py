from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from smoothie_sync.app.domain.models import MigrationReport, Recipe, RemoteStatus
from smoothie_sync.services.ids import LocalId, RemoteId, try_parse_recipe_id

RecipeOrigin = Literal["seed", "local", "remote"]


def recipe_origin(recipe_id: str) -> RecipeOrigin:
    parsed = try_parse_recipe_id(recipe_id)
    if isinstance(parsed, RemoteId):
        return "remote"
    if isinstance(parsed, LocalId):
        return "local"
    return "seed"


class RecipeResponse(BaseModel):
    id: str
    name: Optional[str] = None
    contributor: Optional[str] = None
    emoji: str
    color: str
    ingredients: list[str] = Field(default_factory=list)
    instructions: str = ""
    servings: int = 1
    prepTime: str
    containsFat: bool = False
    containsNuts: bool = False
    createdAt: Optional[str] = None
    origin: RecipeOrigin
    isFavorite: bool = False
    canEdit: bool = False
    canDelete: bool = False

    @classmethod
    def build(
        cls,
        recipe: Recipe,
        *,
        is_favorite: bool = False,
        can_edit: bool = False,
        can_delete: bool = False,
    ) -> "RecipeResponse":
        return cls(
            **recipe.to_dict(),
            origin=recipe_origin(recipe.id),
            isFavorite=is_favorite,
            canEdit=can_edit,
            canDelete=can_delete,
        )


class CatalogResponse(BaseModel):
    remoteStatus: RemoteStatus
    count: int
    recipes: list[RecipeResponse] = Field(default_factory=list)


class RandomRecipeResponse(BaseModel):
    recipe: Optional[RecipeResponse] = None
    candidates: int = 0


class RecipeWriteRequest(BaseModel):
    """Raw form fields; validation happens in the catalog so errors come back as one list."""
    name: Optional[str] = None
    contributor: Optional[str] = None
    guestName: Optional[str] = None
    emoji: Optional[str] = None
    color: Optional[str] = None
    ingredients: list[str] = Field(default_factory=list)
    instructions: Optional[str] = None
    servings: Optional[Union[int, str]] = None
    prepTime: Optional[str] = None
    containsFat: bool = False
    containsNuts: bool = False

    def to_draft(self) -> dict[str, object]:
        return self.model_dump(exclude_none=True, exclude={"guestName"})


class FavoriteToggleResponse(BaseModel):
    recipeId: str
    isFavorite: bool


class FavoritesResponse(BaseModel):
    ids: list[str] = Field(default_factory=list)


class MigrationResponse(BaseModel):
    promoted: dict[str, str] = Field(default_factory=dict)
    discarded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    notOwned: list[str] = Field(default_factory=list)
    skippedReason: Optional[str] = None

    @classmethod
    def from_report(cls, report: MigrationReport) -> "MigrationResponse":
        return cls(
            promoted=report.promoted,
            discarded=report.discarded,
            failed=report.failed,
            notOwned=report.not_owned,
            skippedReason=report.skipped_reason,
        )


class SyncStatusResponse(BaseModel):
    remoteStatus: RemoteStatus
    identity: Optional[str] = None
    localPending: int = 0
    migrationInFlight: bool = False
    schedulerRunning: bool = False


class IdentityResponse(BaseModel):
    identity: Optional[str] = None
    email: Optional[str] = None
    nickname: Optional[str] = None


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class NicknameRequest(BaseModel):
    nickname: str = Field(..., min_length=1, max_length=50)


class ShareLinkResponse(BaseModel):
    title: str
    text: str
    url: str
    clipboardText: str


class SignUpRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    nickname: str = Field(..., min_length=1, max_length=50)


class PasswordChangeRequest(BaseModel):
    password: str = Field(..., min_length=6)
    confirmPassword: str

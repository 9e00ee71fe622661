# smoothie_sync/app/routers/recipes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from smoothie_sync.app.deps import get_catalog
from smoothie_sync.app.domain.errors import (
    LocalStorageError,
    NotAuthorizedError,
    ReadOnlyRecipeError,
    RecipeError,
    RecipeNotFoundError,
    RecipeValidationError,
    UnknownRecipeIdError,
)
from smoothie_sync.app.domain.models import FacetFlags, Recipe
from smoothie_sync.app.schemas.recipes import (
    CatalogResponse,
    FavoritesResponse,
    FavoriteToggleResponse,
    RandomRecipeResponse,
    RecipeResponse,
    RecipeWriteRequest,
    ShareLinkResponse,
)
from smoothie_sync.app.services.catalog import RecipeCatalog
from smoothie_sync.services.share import share_link

log = logging.getLogger("recipes")

router = APIRouter(tags=["recipes"])


def http_error(exc: RecipeError) -> HTTPException:
    """Traduz erros de domínio para o status HTTP da fachada."""
    if isinstance(exc, RecipeValidationError):
        return HTTPException(status_code=400, detail=exc.errors)
    if isinstance(exc, UnknownRecipeIdError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, RecipeNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, NotAuthorizedError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, ReadOnlyRecipeError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, LocalStorageError):
        return HTTPException(status_code=500, detail=str(exc))
    log.warning("recipes.upstream_error error=%s", exc)
    return HTTPException(status_code=502, detail=str(exc))


def _present(catalog: RecipeCatalog, recipe: Recipe) -> RecipeResponse:
    return RecipeResponse.build(
        recipe,
        is_favorite=catalog.is_favorite(recipe.id),
        can_edit=catalog.can_edit(recipe),
        can_delete=catalog.can_delete(recipe),
    )


def _flags(
    no_fat: bool = Query(False, alias="noFat"),
    no_nuts: bool = Query(False, alias="noNuts"),
    favorites_only: bool = Query(False, alias="favoritesOnly"),
) -> FacetFlags:
    return FacetFlags(no_fat=no_fat, no_nuts=no_nuts, favorites_only=favorites_only)


@router.get("/catalog", response_model=CatalogResponse)
async def list_catalog(
    flags: FacetFlags = Depends(_flags),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> CatalogResponse:
    recipes = catalog.filtered(flags)
    return CatalogResponse(
        remoteStatus=catalog.state.remote_status,
        count=len(recipes),
        recipes=[_present(catalog, recipe) for recipe in recipes],
    )


@router.get("/catalog/random", response_model=RandomRecipeResponse)
async def random_recipe(
    flags: FacetFlags = Depends(_flags),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> RandomRecipeResponse:
    candidates = len(catalog.filtered(flags))
    recipe = catalog.shake(flags)
    if recipe is None:
        return RandomRecipeResponse(recipe=None, candidates=0)
    return RandomRecipeResponse(recipe=_present(catalog, recipe), candidates=candidates)


@router.get("/recipes/{recipe_id}", response_model=RecipeResponse)
async def get_recipe(
    recipe_id: str,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> RecipeResponse:
    recipe = catalog.select(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
    return _present(catalog, recipe)


@router.get("/recipes/{recipe_id}/share", response_model=ShareLinkResponse)
async def get_share_link(
    recipe_id: str,
    base_url: str = Query(..., alias="baseUrl", min_length=1),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> ShareLinkResponse:
    recipe = catalog.get(recipe_id)
    if recipe is None:
        raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
    link = share_link(recipe, base_url)
    return ShareLinkResponse(
        title=link.title, text=link.text, url=link.url, clipboardText=link.clipboard_text
    )


@router.post("/recipes", response_model=RecipeResponse, status_code=status.HTTP_201_CREATED)
async def submit_recipe(
    payload: RecipeWriteRequest,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> RecipeResponse:
    try:
        recipe = await catalog.submit(payload.to_draft(), guest_name=payload.guestName)
    except RecipeError as exc:
        raise http_error(exc)
    return _present(catalog, recipe)


@router.put("/recipes/{recipe_id}", response_model=RecipeResponse)
async def update_recipe(
    recipe_id: str,
    payload: RecipeWriteRequest,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> RecipeResponse:
    try:
        recipe = await catalog.update(recipe_id, payload.to_draft())
    except RecipeError as exc:
        raise http_error(exc)
    return _present(catalog, recipe)


@router.delete("/recipes/{recipe_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_recipe(
    recipe_id: str,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> Response:
    try:
        await catalog.delete(recipe_id)
    except RecipeError as exc:
        raise http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/contributors/{contributor}/recipes", response_model=list[RecipeResponse])
async def contributor_recipes(
    contributor: str,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> list[RecipeResponse]:
    return [_present(catalog, recipe) for recipe in catalog.recipes_by(contributor)]


@router.get("/favorites", response_model=FavoritesResponse)
async def list_favorites(catalog: RecipeCatalog = Depends(get_catalog)) -> FavoritesResponse:
    return FavoritesResponse(ids=sorted(catalog.state.favorites))


@router.post("/favorites/{recipe_id}", response_model=FavoriteToggleResponse)
async def toggle_favorite(
    recipe_id: str,
    catalog: RecipeCatalog = Depends(get_catalog),
) -> FavoriteToggleResponse:
    try:
        is_favorite = catalog.toggle_favorite(recipe_id)
    except RecipeError as exc:
        raise http_error(exc)
    return FavoriteToggleResponse(recipeId=recipe_id, isFavorite=is_favorite)

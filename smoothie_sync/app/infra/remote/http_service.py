# smoothie_sync/app/infra/remote/http_service.py
"""
Community recipe store over HTTP (Supabase edge function `recipes`).

Routes:
- GET    {base}           -> {"recipes": [...]}
- POST   {base}           -> {"success": true, "recipe": {...}}
- PUT    {base}/{id}      -> {"success": true, "recipe": {...}}
- DELETE {base}/{id}      -> {"success": true}
"""
from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from smoothie_sync.app.config import Settings
from smoothie_sync.app.domain.errors import (
    NetworkUnreachableError,
    RecipeNotFoundError,
    RecipeServiceError,
    RecipeValidationError,
)
from smoothie_sync.app.domain.models import Recipe
from smoothie_sync.app.infra.remote.base import RecipeService

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


def recipe_path(recipe_id: str) -> str:
    """
    Percent-encode a recipe id for use as a single path segment.

    Every call site that puts an id in a URL goes through here, exactly once.
    `recipe:1:abc` becomes `recipe%3A1%3Aabc`.
    """
    return quote(str(recipe_id), safe="")


class HttpRecipeService(RecipeService):
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._headers = {
            "Content-Type": "application/json",
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def recipe_url(self, recipe_id: str) -> str:
        return f"{self.base_url}/{recipe_path(recipe_id)}"

    async def list_recipes(self) -> list[Recipe]:
        data = await self._request("fetch", "GET", self.base_url)
        rows = data.get("recipes") or []
        if not isinstance(rows, list):
            raise RecipeServiceError("fetch", 200, "'recipes' is not a list")
        return [Recipe.from_dict(row) for row in rows if isinstance(row, dict) and row.get("id")]

    async def create_recipe(self, draft: dict[str, Any]) -> Recipe:
        data = await self._request("submit", "POST", self.base_url, json=draft)
        return self._recipe_from_response("submit", data)

    async def update_recipe(self, recipe_id: str, draft: dict[str, Any]) -> Recipe:
        data = await self._request(
            "update", "PUT", self.recipe_url(recipe_id), json=draft, recipe_id=recipe_id
        )
        return self._recipe_from_response("update", data)

    async def delete_recipe(self, recipe_id: str) -> None:
        await self._request("delete", "DELETE", self.recipe_url(recipe_id), recipe_id=recipe_id)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        url: str,
        json: Optional[dict[str, Any]] = None,
        recipe_id: Optional[str] = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, headers=self._headers, json=json)
        except httpx.TransportError as error:
            logger.warning("recipes.unreachable method=%s url=%s error=%s", method, url, error)
            raise NetworkUnreachableError(url, str(error) or type(error).__name__) from error

        if response.is_success:
            return self._decode(operation, response)

        body = response.text
        logger.warning(
            "recipes.http_error method=%s url=%s status=%d", method, url, response.status_code
        )
        if response.status_code == 404:
            raise RecipeNotFoundError(recipe_id or url, operation=operation, body=body)
        if response.status_code == 400:
            raise RecipeValidationError([body or "Missing required fields"])
        raise RecipeServiceError(operation, response.status_code, body)

    @staticmethod
    def _decode(operation: str, response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as error:
            raise RecipeServiceError(operation, response.status_code, "invalid JSON body") from error
        if not isinstance(data, dict):
            raise RecipeServiceError(operation, response.status_code, "unexpected JSON shape")
        return data

    @staticmethod
    def _recipe_from_response(operation: str, data: dict[str, Any]) -> Recipe:
        payload = data.get("recipe")
        if not isinstance(payload, dict) or not payload.get("id"):
            raise RecipeServiceError(operation, 200, "response did not include a recipe")
        return Recipe.from_dict(payload)


def build_recipe_service(config: Settings) -> HttpRecipeService:
    return HttpRecipeService(
        base_url=config.recipes_base_url,
        api_key=config.SUPABASE_ANON_KEY,
        timeout=config.REQUEST_TIMEOUT_SECONDS,
    )

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Optional

import pytest
from fastapi.testclient import TestClient

from smoothie_sync.app.deps import get_auth_session, get_catalog, get_scheduler
from smoothie_sync.app.domain.errors import NetworkUnreachableError, RecipeServiceError
from smoothie_sync.app.domain.models import AuthUser, Recipe
from smoothie_sync.app.infra.auth.base import AuthSessionProvider
from smoothie_sync.app.infra.remote.base import RecipeService
from smoothie_sync.app.infra.storage.favorites import FavoritesStore
from smoothie_sync.app.infra.storage.file_provider import JsonFileStorage
from smoothie_sync.app.infra.storage.local_recipes import LocalRecipeStore
from smoothie_sync.app.main import app
from smoothie_sync.app.services.catalog import RecipeCatalog
from smoothie_sync.app.services.identity import IdentityResolver


class RemoteStub(RecipeService):
    def __init__(self) -> None:
        self.recipes: list[Recipe] = []
        self.list_error: Optional[Exception] = None
        self.create_error: Optional[Exception] = None
        self.update_error: Optional[Exception] = None
        self.created = 0

    async def list_recipes(self) -> list[Recipe]:
        if self.list_error is not None:
            raise self.list_error
        return list(self.recipes)

    async def create_recipe(self, draft: dict[str, Any]) -> Recipe:
        if self.create_error is not None:
            raise self.create_error
        self.created += 1
        recipe = Recipe.from_dict({**draft, "id": f"recipe:{self.created}:new"})
        self.recipes.append(recipe)
        return recipe

    async def update_recipe(self, recipe_id: str, draft: dict[str, Any]) -> Recipe:
        if self.update_error is not None:
            raise self.update_error
        return Recipe.from_dict({**draft, "id": recipe_id})

    async def delete_recipe(self, recipe_id: str) -> None:
        self.recipes = [r for r in self.recipes if r.id != recipe_id]


class AuthStub(AuthSessionProvider):
    def __init__(self) -> None:
        self.user: Optional[AuthUser] = None
        self.password = "secret"
        self.registered: list[str] = []

    def current_user(self) -> Optional[AuthUser]:
        return self.user

    def sign_in(self, email: str, password: str) -> Optional[AuthUser]:
        if password != self.password:
            raise RuntimeError("Invalid login credentials")
        self.user = AuthUser(email=email)
        return self.user

    def sign_out(self) -> None:
        self.user = None

    def sign_up(self, email: str, password: str, nickname: str) -> Optional[AuthUser]:
        if email in self.registered:
            raise RuntimeError("User already registered")
        self.registered.append(email)
        self.user = AuthUser(email=email, nickname=nickname.strip())
        return self.user

    def update_nickname(self, nickname: str) -> Optional[AuthUser]:
        self.user = AuthUser(email=self.user.email if self.user else None, nickname=nickname.strip())
        return self.user

    def change_password(self, new_password: str) -> None:
        self.password = new_password


class SchedulerStub:
    def __init__(self) -> None:
        self.running = False
        self.syncs = 0

    async def sync_identity(self) -> None:
        self.syncs += 1


class Env:
    def __init__(self, tmp_path: Path) -> None:
        self.remote = RemoteStub()
        self.auth = AuthStub()
        self.scheduler = SchedulerStub()
        storage = JsonFileStorage(tmp_path / "store.json")
        self.catalog = RecipeCatalog(
            self.remote,
            LocalRecipeStore(storage),
            FavoritesStore(storage),
            IdentityResolver(self.auth),
        )


@pytest.fixture
def env(tmp_path: Path) -> Iterator[Env]:
    env = Env(tmp_path)
    app.dependency_overrides[get_catalog] = lambda: env.catalog
    app.dependency_overrides[get_scheduler] = lambda: env.scheduler
    app.dependency_overrides[get_auth_session] = lambda: env.auth
    yield env
    app.dependency_overrides.clear()


@pytest.fixture
def client(env: Env) -> TestClient:
    return TestClient(app)


FORM = {
    "name": "Mango Sunrise",
    "ingredients": ["1 mango", "", "1 cup milk"],
    "instructions": "Blend everything for a minute.",
}


def _remote(recipe_id: str, contributor: str) -> Recipe:
    return Recipe.from_dict(
        {
            "id": recipe_id,
            "name": "Remote",
            "contributor": contributor,
            "ingredients": ["kiwi"],
            "instructions": "Blend until smooth.",
        }
    )


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"ok": True}


class TestCatalogRoutes:
    def test_seeds_before_first_refresh(self, client: TestClient) -> None:
        body = client.get("/catalog").json()

        assert body["remoteStatus"] == "pending"
        assert body["count"] == 8
        assert {recipe["origin"] for recipe in body["recipes"]} == {"seed"}

    def test_facet_flags(self, client: TestClient) -> None:
        body = client.get("/catalog", params={"noFat": "true", "noNuts": "true"}).json()

        assert [recipe["id"] for recipe in body["recipes"]] == ["5", "8"]

    def test_empty_remote_hides_seeds(self, client: TestClient) -> None:
        refreshed = client.post("/sync/refresh").json()
        body = client.get("/catalog").json()

        assert refreshed["remoteStatus"] == "remote-available"
        assert body == {"remoteStatus": "remote-available", "count": 0, "recipes": []}

    def test_unreachable_remote_shows_seeds(self, client: TestClient, env: Env) -> None:
        env.remote.list_error = NetworkUnreachableError("http://remote")

        refreshed = client.post("/sync/refresh").json()

        assert refreshed["remoteStatus"] == "remote-unavailable"
        assert client.get("/catalog").json()["count"] == 8

    def test_random_pick(self, client: TestClient, env: Env) -> None:
        body = client.get("/catalog/random", params={"noFat": "true"}).json()

        assert body["candidates"] == 2
        assert body["recipe"]["id"] in {"5", "8"}
        assert env.catalog.state.current_recipe.id == body["recipe"]["id"]

    def test_random_pick_with_no_candidates(self, client: TestClient) -> None:
        body = client.get("/catalog/random", params={"favoritesOnly": "true"}).json()

        assert body == {"recipe": None, "candidates": 0}

    def test_contributor_view(self, client: TestClient) -> None:
        body = client.get("/contributors/Sarah M./recipes").json()

        assert [recipe["id"] for recipe in body] == ["1"]


class TestRecipeRoutes:
    def test_get_recipe(self, client: TestClient) -> None:
        body = client.get("/recipes/3").json()

        assert body["name"] == "Berry Bliss"
        assert body["canEdit"] is False
        assert body["canDelete"] is False

    def test_get_unknown_recipe(self, client: TestClient) -> None:
        assert client.get("/recipes/recipe:9:zz").status_code == 404

    def test_share_link(self, client: TestClient, env: Env) -> None:
        env.remote.recipes = [_remote("recipe:1:a", "ana")]
        client.post("/sync/refresh")

        body = client.get(
            "/recipes/recipe%3A1%3Aa/share", params={"baseUrl": "https://smoothies.example.com/"}
        ).json()

        assert body["url"] == "https://smoothies.example.com/?recipe=recipe%3A1%3Aa"
        assert body["clipboardText"].endswith(body["url"])

    def test_submit_as_guest_falls_back_to_local(self, client: TestClient, env: Env) -> None:
        env.remote.create_error = NetworkUnreachableError("http://remote")

        response = client.post("/recipes", json={**FORM, "guestName": "Gina"})

        assert response.status_code == 201
        body = response.json()
        assert body["origin"] == "local"
        assert body["contributor"] == "Gina"
        assert body["ingredients"] == ["1 mango", "1 cup milk"]
        assert body["canDelete"] is False

    def test_submit_signed_in_goes_remote(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(email="ana@example.com", nickname="ana")

        body = client.post("/recipes", json={**FORM, "contributor": "someone else"}).json()

        assert body["origin"] == "remote"
        assert body["contributor"] == "ana"
        assert body["canEdit"] is True

    def test_submit_invalid_draft(self, client: TestClient) -> None:
        response = client.post("/recipes", json={**FORM, "guestName": "Gina", "instructions": "short"})

        assert response.status_code == 400
        assert any(error.startswith("instructions:") for error in response.json()["detail"])

    def test_submit_without_any_name(self, client: TestClient) -> None:
        assert client.post("/recipes", json=FORM).status_code == 400

    def test_update_seed_is_conflict(self, client: TestClient) -> None:
        response = client.put("/recipes/1", json={**FORM, "contributor": "x"})
        assert response.status_code == 409

    def test_update_someone_elses_recipe(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")
        env.remote.recipes = [_remote("recipe:1:a", "bob")]
        client.post("/sync/refresh")

        response = client.put("/recipes/recipe%3A1%3Aa", json=FORM)

        assert response.status_code == 403

    def test_update_upstream_failure(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")
        env.remote.recipes = [_remote("recipe:1:a", "ana")]
        client.post("/sync/refresh")
        env.remote.update_error = RecipeServiceError("update", 500, "boom")

        response = client.put("/recipes/recipe%3A1%3Aa", json=FORM)

        assert response.status_code == 502

    def test_update_own_recipe(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")
        env.remote.recipes = [_remote("recipe:1:a", "ana")]
        client.post("/sync/refresh")

        body = client.put("/recipes/recipe%3A1%3Aa", json={**FORM, "name": "Renamed"}).json()

        assert body["name"] == "Renamed"
        assert body["contributor"] == "ana"

    def test_update_unrecognized_id(self, client: TestClient) -> None:
        assert client.put("/recipes/legacy-1", json=FORM).status_code == 400

    def test_delete_favorited_recipe(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")
        env.remote.recipes = [_remote("recipe:1:a", "ana")]
        client.post("/sync/refresh")
        client.post("/favorites/recipe%3A1%3Aa")

        response = client.delete("/recipes/recipe%3A1%3Aa")

        assert response.status_code == 204
        assert client.get("/favorites").json() == {"ids": []}
        assert client.get("/recipes/recipe%3A1%3Aa").status_code == 404

    def test_delete_unknown(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")
        client.post("/sync/refresh")

        assert client.delete("/recipes/recipe%3A1%3Aa").status_code == 404


class TestFavoritesRoutes:
    def test_toggle(self, client: TestClient) -> None:
        assert client.post("/favorites/3").json() == {"recipeId": "3", "isFavorite": True}
        assert client.get("/favorites").json() == {"ids": ["3"]}
        assert client.get("/recipes/3").json()["isFavorite"] is True
        assert client.post("/favorites/3").json()["isFavorite"] is False


class TestSyncRoutes:
    def test_migrate_anonymous_is_skipped(self, client: TestClient) -> None:
        body = client.post("/sync/migrate").json()
        assert body["skippedReason"] == "anonymous"

    def test_migrate_promotes_local_recipes(self, client: TestClient, env: Env) -> None:
        env.remote.create_error = NetworkUnreachableError("http://remote")
        local_id = client.post("/recipes", json={**FORM, "guestName": "ana"}).json()["id"]
        env.remote.create_error = None
        env.auth.user = AuthUser(nickname="ana")

        body = client.post("/sync/migrate").json()

        assert list(body["promoted"]) == [local_id]
        assert body["promoted"][local_id].startswith("recipe:")

    def test_migrate_leaves_guest_recipes_local(self, client: TestClient, env: Env) -> None:
        env.remote.create_error = NetworkUnreachableError("http://remote")
        local_id = client.post("/recipes", json={**FORM, "guestName": "guest-bob"}).json()["id"]
        env.remote.create_error = None
        env.auth.user = AuthUser(nickname="ana")

        body = client.post("/sync/migrate").json()

        assert body["promoted"] == {}
        assert body["notOwned"] == [local_id]
        assert env.remote.created == 0

    def test_status(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")

        body = client.get("/sync/status").json()

        assert body["identity"] == "ana"
        assert body["remoteStatus"] == "pending"
        assert body["schedulerRunning"] is False

    def test_refresh_rebinds_scheduler(self, client: TestClient, env: Env) -> None:
        client.post("/sync/refresh")
        assert env.scheduler.syncs == 1


class TestAuthRoutes:
    def test_me_anonymous(self, client: TestClient) -> None:
        assert client.get("/auth/me").json() == {"identity": None, "email": None, "nickname": None}

    def test_sign_in_then_nickname(self, client: TestClient, env: Env) -> None:
        signed_in = client.post("/auth/sign-in", json={"email": "ana@example.com", "password": "secret"})
        assert signed_in.json()["identity"] == "ana@example.com"

        renamed = client.put("/auth/nickname", json={"nickname": "ana"}).json()

        assert renamed["identity"] == "ana"
        assert env.scheduler.syncs == 2

    def test_sign_in_failure(self, client: TestClient, env: Env) -> None:
        response = client.post("/auth/sign-in", json={"email": "ana@example.com", "password": "wrong"})

        assert response.status_code == 401
        assert env.scheduler.syncs == 0

    def test_sign_out(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(nickname="ana")

        assert client.post("/auth/sign-out").status_code == 204
        assert client.get("/auth/me").json()["identity"] is None

    def test_sign_up(self, client: TestClient, env: Env) -> None:
        payload = {"email": "bea@example.com", "password": "secret1", "nickname": " bea "}

        created = client.post("/auth/sign-up", json=payload)
        again = client.post("/auth/sign-up", json=payload)

        assert created.status_code == 201
        assert created.json() == {"identity": "bea", "email": "bea@example.com", "nickname": "bea"}
        assert again.status_code == 400
        assert env.scheduler.syncs == 1

    def test_sign_up_short_password(self, client: TestClient) -> None:
        response = client.post(
            "/auth/sign-up", json={"email": "bea@example.com", "password": "123", "nickname": "bea"}
        )

        assert response.status_code == 422

    def test_change_password(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(email="ana@example.com")

        response = client.put("/auth/password", json={"password": "newpass", "confirmPassword": "newpass"})

        assert response.status_code == 204
        assert env.auth.password == "newpass"

    def test_change_password_mismatch(self, client: TestClient, env: Env) -> None:
        env.auth.user = AuthUser(email="ana@example.com")

        response = client.put("/auth/password", json={"password": "newpass", "confirmPassword": "other"})

        assert response.status_code == 400
        assert env.auth.password == "secret"

    def test_change_password_anonymous(self, client: TestClient) -> None:
        response = client.put("/auth/password", json={"password": "newpass", "confirmPassword": "newpass"})

        assert response.status_code == 401

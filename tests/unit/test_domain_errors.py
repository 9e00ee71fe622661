from __future__ import annotations

import pytest

from smoothie_sync.app.domain.errors import (
    LocalStorageError,
    NetworkUnreachableError,
    NotAuthorizedError,
    ReadOnlyRecipeError,
    RecipeError,
    RecipeNotFoundError,
    RecipeServiceError,
    RecipeValidationError,
    SettingsError,
    UnknownRecipeIdError,
)


class TestRecipeError:
    def test_base_exception(self) -> None:
        error = RecipeError("Base error")
        assert str(error) == "Base error"
        assert isinstance(error, Exception)


class TestNetworkUnreachableError:
    def test_default_reason(self) -> None:
        error = NetworkUnreachableError("https://x.supabase.co/functions/v1/recipes")
        assert "Could not reach https://x.supabase.co/functions/v1/recipes" in str(error)
        assert error.reason == "Host unreachable"

    def test_custom_reason(self) -> None:
        error = NetworkUnreachableError("http://localhost", "timed out")
        assert str(error) == "Could not reach http://localhost: timed out"


class TestRecipeServiceError:
    def test_message_with_body(self) -> None:
        error = RecipeServiceError("submit", 500, "boom")
        assert str(error) == "Failed to submit recipe: 500 boom"
        assert error.operation == "submit"
        assert error.status_code == 500
        assert error.body == "boom"

    def test_message_without_body(self) -> None:
        error = RecipeServiceError("fetch", 503)
        assert str(error) == "Failed to fetch recipe: 503"


class TestRecipeNotFoundError:
    def test_is_service_error_with_404(self) -> None:
        error = RecipeNotFoundError("recipe:1:abc", operation="update")
        assert isinstance(error, RecipeServiceError)
        assert error.status_code == 404
        assert error.recipe_id == "recipe:1:abc"
        assert str(error) == "Failed to update recipe: 404"


class TestRecipeValidationError:
    def test_joins_errors(self) -> None:
        error = RecipeValidationError(["name: too short", "instructions: too short"])
        assert str(error) == "Invalid recipe: name: too short; instructions: too short"
        assert error.errors == ["name: too short", "instructions: too short"]


class TestReadOnlyAndAuthorization:
    def test_read_only(self) -> None:
        error = ReadOnlyRecipeError("3")
        assert error.recipe_id == "3"
        assert "read-only" in str(error)

    def test_not_authorized(self) -> None:
        error = NotAuthorizedError("edit", "recipe:1:abc")
        assert str(error) == "Not allowed to edit recipe recipe:1:abc"
        assert error.action == "edit"


class TestUnknownRecipeIdError:
    def test_is_also_value_error(self) -> None:
        error = UnknownRecipeIdError("nope")
        assert isinstance(error, ValueError)
        assert isinstance(error, RecipeError)
        assert error.raw == "nope"

    def test_can_be_caught_as_value_error(self) -> None:
        with pytest.raises(ValueError):
            raise UnknownRecipeIdError("x:y")


class TestStorageAndSettingsErrors:
    def test_local_storage_error(self) -> None:
        error = LocalStorageError("local-recipes", "disk full")
        assert str(error) == "Local storage error for local-recipes: disk full"
        assert error.key == "local-recipes"

    def test_settings_error(self) -> None:
        error = SettingsError(["SUPABASE_URL or SUPABASE_PROJECT_ID is required"])
        assert "SUPABASE_URL or SUPABASE_PROJECT_ID is required" in str(error)
        assert len(error.errors) == 1


class TestExceptionHierarchy:
    def test_all_inherit_from_base(self) -> None:
        errors = [
            NetworkUnreachableError("u"),
            RecipeServiceError("fetch", 500),
            RecipeNotFoundError("1"),
            RecipeValidationError([]),
            ReadOnlyRecipeError("1"),
            NotAuthorizedError("delete", "1"),
            UnknownRecipeIdError("x"),
            LocalStorageError("k", "r"),
            SettingsError([]),
        ]
        for error in errors:
            assert isinstance(error, RecipeError)

from __future__ import annotations


class RecipeError(Exception):
    pass


class NetworkUnreachableError(RecipeError):
    def __init__(self, url: str, reason: str = "Host unreachable"):
        super().__init__(f"Could not reach {url}: {reason}")
        self.url = url
        self.reason = reason


class RecipeServiceError(RecipeError):
    def __init__(self, operation: str, status_code: int, body: str = ""):
        message = f"Failed to {operation} recipe: {status_code}"
        if body:
            message = f"{message} {body}"
        super().__init__(message)
        self.operation = operation
        self.status_code = status_code
        self.body = body


class RecipeNotFoundError(RecipeServiceError):
    def __init__(self, recipe_id: str, operation: str = "find", body: str = ""):
        super().__init__(operation, 404, body)
        self.recipe_id = recipe_id


class RecipeValidationError(RecipeError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Invalid recipe: {'; '.join(errors)}")
        self.errors = errors


class ReadOnlyRecipeError(RecipeError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe is read-only: {recipe_id}")
        self.recipe_id = recipe_id


class NotAuthorizedError(RecipeError):
    def __init__(self, action: str, recipe_id: str):
        super().__init__(f"Not allowed to {action} recipe {recipe_id}")
        self.action = action
        self.recipe_id = recipe_id


class UnknownRecipeIdError(RecipeError, ValueError):
    def __init__(self, raw: str):
        super().__init__(f"Unrecognized recipe id: {raw!r}")
        self.raw = raw


class LocalStorageError(RecipeError):
    def __init__(self, key: str, reason: str):
        super().__init__(f"Local storage error for {key}: {reason}")
        self.key = key
        self.reason = reason


class SettingsError(RecipeError):
    def __init__(self, errors: list[str]):
        super().__init__(f"Configuration errors: {', '.join(errors)}")
        self.errors = errors

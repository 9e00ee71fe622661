from __future__ import annotations

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from smoothie_sync.app.domain.errors import SettingsError

RECIPES_FUNCTION_PATH = "/functions/v1/recipes"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8-sig",
        case_sensitive=False,
        extra="ignore",
    )

    SUPABASE_URL: Optional[str] = None
    SUPABASE_PROJECT_ID: Optional[str] = None
    SUPABASE_ANON_KEY: str = ""
    REQUEST_TIMEOUT_SECONDS: float = 10.0
    STORAGE_PATH: str = "data/smoothie-storage.json"
    MIGRATION_INITIAL_DELAY_SECONDS: float = 2.0
    MIGRATION_INTERVAL_SECONDS: float = 30.0
    APP_ENV: str = "local"
    FRONTEND_CORS_ORIGINS: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
    )

    @property
    def supabase_base_url(self) -> str:
        if self.SUPABASE_URL:
            return self.SUPABASE_URL.rstrip("/")
        if self.SUPABASE_PROJECT_ID:
            return f"https://{self.SUPABASE_PROJECT_ID}.supabase.co"
        raise SettingsError(["SUPABASE_URL or SUPABASE_PROJECT_ID is required"])

    @property
    def recipes_base_url(self) -> str:
        # local dev points SUPABASE_URL at http://localhost:54321
        return f"{self.supabase_base_url}{RECIPES_FUNCTION_PATH}"


settings = Settings()

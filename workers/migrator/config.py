# workers/migrator/config.py
"""
Configuration for the migration worker.
"""
from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class WorkerConfig:
    """Configuration for the migration worker."""

    # Worker identification
    worker_id: str = os.getenv("WORKER_ID", f"migrator-{os.getpid()}")

    # Timer
    initial_delay_seconds: float = float(os.getenv("MIGRATION_INITIAL_DELAY_SECONDS", "2"))
    interval_seconds: float = float(os.getenv("MIGRATION_INTERVAL_SECONDS", "30"))
    max_passes: int = int(os.getenv("WORKER_MAX_PASSES", "0"))  # 0 = infinite

    # Local fallback store shared with the app
    storage_path: str = os.getenv("STORAGE_PATH", "data/smoothie-storage.json")

    # Supabase (inherited from env)
    supabase_url: str = os.getenv("SUPABASE_URL", "")
    supabase_project_id: str = os.getenv("SUPABASE_PROJECT_ID", "")
    supabase_anon_key: str = os.getenv("SUPABASE_ANON_KEY", "")
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))

    # Account whose nickname becomes the contributor of migrated recipes
    sync_email: str = os.getenv("SYNC_EMAIL", "")
    sync_password: str = os.getenv("SYNC_PASSWORD", "")

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if not self.supabase_url and not self.supabase_project_id:
            errors.append("SUPABASE_URL or SUPABASE_PROJECT_ID is required")
        if not self.supabase_anon_key:
            errors.append("SUPABASE_ANON_KEY is required")
        if not self.sync_email:
            errors.append("SYNC_EMAIL is required")
        if not self.sync_password:
            errors.append("SYNC_PASSWORD is required")
        if self.interval_seconds <= 0:
            errors.append("MIGRATION_INTERVAL_SECONDS must be positive")
        if self.initial_delay_seconds < 0:
            errors.append("MIGRATION_INITIAL_DELAY_SECONDS cannot be negative")

        return errors


def get_config() -> WorkerConfig:
    """Get worker configuration from environment."""
    return WorkerConfig()

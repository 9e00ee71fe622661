# smoothie_sync/app/deps.py (singletons do processo, expostos como dependências)

from __future__ import annotations

from supabase import Client

from smoothie_sync.app.config import settings
from smoothie_sync.app.infra.auth.supabase_session import (
    SupabaseAuthSession,
    create_supabase_client,
)
from smoothie_sync.app.infra.remote.http_service import build_recipe_service
from smoothie_sync.app.infra.storage.favorites import FavoritesStore
from smoothie_sync.app.infra.storage.file_provider import JsonFileStorage
from smoothie_sync.app.infra.storage.local_recipes import LocalRecipeStore
from smoothie_sync.app.services.catalog import RecipeCatalog
from smoothie_sync.app.services.identity import IdentityResolver
from smoothie_sync.services.migration_scheduler import MigrationScheduler

_client: Client | None = None
_session: SupabaseAuthSession | None = None
_catalog: RecipeCatalog | None = None
_scheduler: MigrationScheduler | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_supabase_client(settings)
    return _client


def get_auth_session() -> SupabaseAuthSession:
    global _session
    if _session is None:
        _session = SupabaseAuthSession(get_supabase())
    return _session


def get_catalog() -> RecipeCatalog:
    global _catalog
    if _catalog is None:
        storage = JsonFileStorage(settings.STORAGE_PATH)
        _catalog = RecipeCatalog(
            remote=build_recipe_service(settings),
            local_store=LocalRecipeStore(storage),
            favorites_store=FavoritesStore(storage),
            identity=IdentityResolver(get_auth_session()),
        )
    return _catalog


def get_scheduler() -> MigrationScheduler:
    global _scheduler
    if _scheduler is None:
        _scheduler = MigrationScheduler(
            get_catalog(),
            initial_delay=settings.MIGRATION_INITIAL_DELAY_SECONDS,
            interval=settings.MIGRATION_INTERVAL_SECONDS,
        )
    return _scheduler


async def close_all() -> None:
    global _catalog, _scheduler
    if _scheduler is not None:
        await _scheduler.stop()
        _scheduler = None
    if _catalog is not None:
        await _catalog.aclose()
        _catalog = None

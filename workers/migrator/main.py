from __future__ import annotations

import asyncio
import logging
import signal
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from starlette.concurrency import run_in_threadpool

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

# WorkerConfig reads the environment at import time
load_dotenv(find_dotenv(usecwd=True))

from smoothie_sync.app.config import Settings
from smoothie_sync.app.domain.errors import SettingsError
from smoothie_sync.app.domain.models import MigrationReport
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
from workers.migrator.config import WorkerConfig, get_config

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger("migrator-worker")


class MigratorWorker:
    """
    Headless migration loop.

    Signs in as the configured account, lists the community store once, then
    promotes local-only recipes every `interval_seconds` until stopped.
    """

    def __init__(
        self,
        config: WorkerConfig,
        catalog: RecipeCatalog,
        sessions: SupabaseAuthSession | None = None,
    ):
        self.config = config
        self.catalog = catalog
        self.sessions = sessions
        self.running = False
        self.passes_run = 0
        self.last_report: MigrationReport | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._stop_event: asyncio.Event | None = None

    def start(self) -> None:
        self._validate_configuration()
        self._setup_signal_handlers()
        self._log_startup_info()
        asyncio.run(self.run())

    async def run(self) -> None:
        self._loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        self.running = True
        try:
            await self._sign_in()
            await self.catalog.refresh()
            delay = self.config.initial_delay_seconds
            while self.running:
                if await self._wait(delay):
                    break
                delay = self.config.interval_seconds
                await self.run_pass()
                if self._reached_max_passes():
                    break
        finally:
            await self._shutdown()

    async def run_pass(self) -> MigrationReport | None:
        try:
            # the app may have written local recipes since the last pass
            await self.catalog.refresh()
            report = await self.catalog.run_migration()
        except Exception:
            logger.exception("Migration pass failed unexpectedly")
            return None

        self.passes_run += 1
        self.last_report = report
        if report.skipped:
            logger.info("Migration pass skipped: reason=%s", report.skipped_reason)
        else:
            logger.info(
                "Migration pass %d done: promoted=%d, discarded=%d, failed=%d",
                self.passes_run,
                len(report.promoted),
                len(report.discarded),
                len(report.failed),
            )
        return report

    def stop(self) -> None:
        self.running = False
        if self._loop is not None and self._stop_event is not None:
            self._loop.call_soon_threadsafe(self._stop_event.set)

    def _validate_configuration(self) -> None:
        errors = self.config.validate()
        if errors:
            raise SettingsError(errors)

    def _setup_signal_handlers(self) -> None:
        signal.signal(signal.SIGTERM, self._handle_shutdown_signal)
        signal.signal(signal.SIGINT, self._handle_shutdown_signal)

    def _log_startup_info(self) -> None:
        logger.info(
            "Starting migration worker: id=%s, initial_delay=%.1fs, interval=%.1fs",
            self.config.worker_id,
            self.config.initial_delay_seconds,
            self.config.interval_seconds,
        )

    async def _sign_in(self) -> None:
        if self.sessions is None:
            return
        await run_in_threadpool(
            self.sessions.sign_in, self.config.sync_email, self.config.sync_password
        )
        identity = self.catalog.identity
        if identity is None:
            logger.warning("Signed in without a nickname or email; passes will be skipped")
        else:
            logger.info("Signed in as %s", identity)

    async def _wait(self, seconds: float) -> bool:
        """Sleep up to `seconds`; True when a stop was requested meanwhile."""
        if self._stop_event is None:
            await asyncio.sleep(seconds)
            return not self.running
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return not self.running
        return True

    def _reached_max_passes(self) -> bool:
        if self.config.max_passes <= 0:
            return False

        if self.passes_run >= self.config.max_passes:
            logger.info("Reached max passes per run (%d), shutting down", self.config.max_passes)
            return True
        return False

    def _handle_shutdown_signal(self, signum: int, frame: object) -> None:
        logger.info("Received shutdown signal %d", signum)
        self.stop()

    async def _shutdown(self) -> None:
        self.running = False
        logger.info("Worker shutting down: passes_run=%d", self.passes_run)
        await self.catalog.aclose()
        logger.info("Worker shutdown complete")


def create_default_dependencies(config: WorkerConfig) -> tuple[RecipeCatalog, SupabaseAuthSession]:
    settings = Settings(
        SUPABASE_URL=config.supabase_url or None,
        SUPABASE_PROJECT_ID=config.supabase_project_id or None,
        SUPABASE_ANON_KEY=config.supabase_anon_key,
        REQUEST_TIMEOUT_SECONDS=config.request_timeout_seconds,
        STORAGE_PATH=config.storage_path,
    )
    sessions = SupabaseAuthSession(create_supabase_client(settings))
    storage = JsonFileStorage(settings.STORAGE_PATH)
    catalog = RecipeCatalog(
        remote=build_recipe_service(settings),
        local_store=LocalRecipeStore(storage),
        favorites_store=FavoritesStore(storage),
        identity=IdentityResolver(sessions),
    )
    return catalog, sessions


def main() -> None:
    config = get_config()
    catalog, sessions = create_default_dependencies(config)

    worker = MigratorWorker(config=config, catalog=catalog, sessions=sessions)

    worker.start()


if __name__ == "__main__":
    main()

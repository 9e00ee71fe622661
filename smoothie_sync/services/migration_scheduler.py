from __future__ import annotations

import asyncio
import logging
from typing import Optional

from smoothie_sync.app.domain.models import MigrationReport
from smoothie_sync.app.services.catalog import RecipeCatalog

log = logging.getLogger("migration_scheduler")


class MigrationScheduler:
    """
    Background timer for the migration pass.

    One pass runs `initial_delay` seconds after start (the post-sign-in pass),
    then one every `interval` seconds. The timer is bound to the identity it
    was started for and stops on its own once that identity no longer resolves.
    """

    def __init__(
        self,
        catalog: RecipeCatalog,
        initial_delay: float = 2.0,
        interval: float = 30.0,
    ) -> None:
        self._catalog = catalog
        self._initial_delay = initial_delay
        self._interval = interval
        self._task: Optional[asyncio.Task[None]] = None
        self._lock = asyncio.Lock()
        self._identity: Optional[str] = None
        self.passes_run = 0
        self.last_report: Optional[MigrationReport] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def bound_identity(self) -> Optional[str]:
        return self._identity if self.running else None

    async def start(self) -> None:
        async with self._lock:
            identity = self._catalog.identity
            if identity is None:
                log.debug("migration.start_skipped anonymous")
                return
            if self.running and identity == self._identity:
                return
            await self._cancel()
            self._identity = identity
            self._task = asyncio.create_task(self._run(identity), name="migration-scheduler")
            log.info("migration.scheduler_started identity=%s interval=%.1fs", identity, self._interval)

    async def stop(self) -> None:
        async with self._lock:
            await self._cancel()
            self._identity = None

    async def sync_identity(self) -> None:
        """Call after sign-in, sign-out or a nickname change."""
        identity = self._catalog.identity
        if identity is None:
            await self.stop()
        elif identity != self._identity or not self.running:
            await self.start()

    async def _cancel(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
            log.info("migration.scheduler_stopped identity=%s", self._identity)

    async def _run(self, identity: str) -> None:
        delay = self._initial_delay
        while True:
            await asyncio.sleep(delay)
            delay = self._interval
            if self._catalog.identity != identity:
                log.info("migration.identity_changed stopping timer for %s", identity)
                return
            try:
                self.last_report = await self._catalog.run_migration()
                self.passes_run += 1
            except Exception:
                log.exception("migration.unexpected_error identity=%s", identity)

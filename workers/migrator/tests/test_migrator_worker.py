from __future__ import annotations

import asyncio
from typing import Callable, Optional

import pytest

from smoothie_sync.app.domain.errors import SettingsError
from smoothie_sync.app.domain.models import MigrationReport
from workers.migrator.config import WorkerConfig
from workers.migrator.main import MigratorWorker


class CatalogStub:
    def __init__(self) -> None:
        self.identity: Optional[str] = None
        self.refreshes = 0
        self.migrations = 0
        self.closed = False
        self.fail_migration = False
        self.on_migration: Optional[Callable[[], None]] = None

    async def refresh(self) -> None:
        self.refreshes += 1

    async def run_migration(self) -> MigrationReport:
        self.migrations += 1
        if self.on_migration is not None:
            self.on_migration()
        if self.fail_migration:
            raise RuntimeError("boom")
        if self.identity is None:
            return MigrationReport(skipped_reason="anonymous")
        return MigrationReport(promoted={f"user-{self.migrations}": f"recipe:{self.migrations}:x"})

    async def aclose(self) -> None:
        self.closed = True


class SessionStub:
    def __init__(self, catalog: CatalogStub, nickname: Optional[str] = "migrator") -> None:
        self.catalog = catalog
        self.nickname = nickname
        self.sign_ins: list[tuple[str, str]] = []

    def sign_in(self, email: str, password: str) -> None:
        self.sign_ins.append((email, password))
        self.catalog.identity = self.nickname


def _config(**overrides: object) -> WorkerConfig:
    values: dict[str, object] = {
        "worker_id": "test-migrator",
        "initial_delay_seconds": 0.0,
        "interval_seconds": 0.001,
        "max_passes": 2,
        "storage_path": "unused.json",
        "supabase_url": "http://localhost:54321",
        "supabase_project_id": "",
        "supabase_anon_key": "anon",
        "request_timeout_seconds": 10.0,
        "sync_email": "bot@example.com",
        "sync_password": "secret",
    }
    values.update(overrides)
    return WorkerConfig(**values)  # type: ignore[arg-type]


class TestMigratorWorkerConfiguration:
    def test_configuration_validation_passes(self) -> None:
        assert _config().validate() == []

    def test_missing_endpoint(self) -> None:
        errors = _config(supabase_url="", supabase_project_id="").validate()
        assert "SUPABASE_URL or SUPABASE_PROJECT_ID is required" in errors

    def test_project_id_is_enough(self) -> None:
        assert _config(supabase_url="", supabase_project_id="abcd").validate() == []

    def test_missing_credentials(self) -> None:
        errors = _config(sync_email="", sync_password="").validate()
        assert "SYNC_EMAIL is required" in errors
        assert "SYNC_PASSWORD is required" in errors

    def test_non_positive_interval(self) -> None:
        errors = _config(interval_seconds=0).validate()
        assert "MIGRATION_INTERVAL_SECONDS must be positive" in errors

    def test_invalid_configuration_raises(self) -> None:
        worker = MigratorWorker(_config(supabase_anon_key=""), CatalogStub())

        with pytest.raises(SettingsError) as exc_info:
            worker._validate_configuration()

        assert "SUPABASE_ANON_KEY is required" in exc_info.value.errors


class TestMigratorWorkerRun:
    def test_signs_in_refreshes_and_stops_after_max_passes(self) -> None:
        catalog = CatalogStub()
        sessions = SessionStub(catalog)
        worker = MigratorWorker(_config(max_passes=2), catalog, sessions)

        asyncio.run(worker.run())

        assert sessions.sign_ins == [("bot@example.com", "secret")]
        assert catalog.migrations == 2
        # one initial listing plus one per pass
        assert catalog.refreshes == 3
        assert worker.passes_run == 2
        assert worker.last_report is not None and len(worker.last_report.promoted) == 1
        assert catalog.closed is True
        assert worker.running is False

    def test_without_sessions_passes_are_skipped(self) -> None:
        catalog = CatalogStub()
        worker = MigratorWorker(_config(max_passes=1), catalog)

        asyncio.run(worker.run())

        assert worker.last_report is not None
        assert worker.last_report.skipped_reason == "anonymous"

    def test_unexpected_error_does_not_stop_loop(self) -> None:
        catalog = CatalogStub()
        catalog.fail_migration = True
        worker = MigratorWorker(_config(max_passes=1), catalog, SessionStub(catalog))

        def recover() -> None:
            if catalog.migrations >= 2:
                catalog.fail_migration = False

        catalog.on_migration = recover

        asyncio.run(worker.run())

        assert catalog.migrations == 2
        assert worker.passes_run == 1

    def test_stop_interrupts_wait(self) -> None:
        catalog = CatalogStub()
        worker = MigratorWorker(
            _config(initial_delay_seconds=60.0, interval_seconds=60.0, max_passes=0),
            catalog,
            SessionStub(catalog),
        )

        async def scenario() -> None:
            task = asyncio.create_task(worker.run())
            while catalog.refreshes == 0:
                await asyncio.sleep(0.005)
            worker.stop()
            await asyncio.wait_for(task, timeout=2)

        asyncio.run(scenario())

        assert catalog.migrations == 0
        assert catalog.closed is True

    def test_shutdown_signal_stops_worker(self) -> None:
        catalog = CatalogStub()
        worker = MigratorWorker(_config(max_passes=0), catalog)
        worker.running = True

        worker._handle_shutdown_signal(15, None)

        assert worker.running is False


class TestMigratorWorkerMaxPasses:
    def test_reached_max_passes_false_when_zero_limit(self) -> None:
        worker = MigratorWorker(_config(max_passes=0), CatalogStub())
        worker.passes_run = 100

        assert worker._reached_max_passes() is False

    def test_reached_max_passes_true_when_limit_reached(self) -> None:
        worker = MigratorWorker(_config(max_passes=3), CatalogStub())
        worker.passes_run = 3

        assert worker._reached_max_passes() is True

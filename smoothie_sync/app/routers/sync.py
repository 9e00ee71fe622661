# smoothie_sync/app/routers/sync.py
from __future__ import annotations

from fastapi import APIRouter, Depends

from smoothie_sync.app.deps import get_catalog, get_scheduler
from smoothie_sync.app.schemas.recipes import MigrationResponse, SyncStatusResponse
from smoothie_sync.app.services.catalog import RecipeCatalog
from smoothie_sync.services.migration_scheduler import MigrationScheduler

router = APIRouter(prefix="/sync", tags=["sync"])


def _status(catalog: RecipeCatalog, scheduler: MigrationScheduler) -> SyncStatusResponse:
    return SyncStatusResponse(
        remoteStatus=catalog.state.remote_status,
        identity=catalog.identity,
        localPending=len(catalog.state.local_recipes),
        migrationInFlight=catalog.state.migration_in_flight,
        schedulerRunning=scheduler.running,
    )


@router.get("/status", response_model=SyncStatusResponse)
async def sync_status(
    catalog: RecipeCatalog = Depends(get_catalog),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> SyncStatusResponse:
    return _status(catalog, scheduler)


@router.post("/refresh", response_model=SyncStatusResponse)
async def refresh(
    catalog: RecipeCatalog = Depends(get_catalog),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> SyncStatusResponse:
    await catalog.refresh()
    await scheduler.sync_identity()
    return _status(catalog, scheduler)


@router.post("/migrate", response_model=MigrationResponse)
async def migrate(catalog: RecipeCatalog = Depends(get_catalog)) -> MigrationResponse:
    report = await catalog.run_migration()
    return MigrationResponse.from_report(report)

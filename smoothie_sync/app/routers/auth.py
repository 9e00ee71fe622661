from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status
from starlette.concurrency import run_in_threadpool

from smoothie_sync.app.deps import get_auth_session, get_catalog, get_scheduler
from smoothie_sync.app.domain.models import AuthUser
from smoothie_sync.app.infra.auth.supabase_session import SupabaseAuthSession
from smoothie_sync.app.schemas.recipes import (
    IdentityResponse,
    NicknameRequest,
    PasswordChangeRequest,
    SignInRequest,
    SignUpRequest,
)
from smoothie_sync.app.services.catalog import RecipeCatalog
from smoothie_sync.services.migration_scheduler import MigrationScheduler

log = logging.getLogger("auth")

router = APIRouter(prefix="/auth", tags=["auth"])


def _identity(catalog: RecipeCatalog, user: AuthUser | None) -> IdentityResponse:
    return IdentityResponse(
        identity=catalog.identity,
        email=user.email if user else None,
        nickname=user.nickname if user else None,
    )


@router.get("/me", response_model=IdentityResponse)
async def me(
    session: SupabaseAuthSession = Depends(get_auth_session),
    catalog: RecipeCatalog = Depends(get_catalog),
) -> IdentityResponse:
    user = await run_in_threadpool(session.load_session)
    return _identity(catalog, user)


@router.post("/sign-in", response_model=IdentityResponse)
async def sign_in(
    payload: SignInRequest,
    session: SupabaseAuthSession = Depends(get_auth_session),
    catalog: RecipeCatalog = Depends(get_catalog),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> IdentityResponse:
    try:
        user = await run_in_threadpool(session.sign_in, payload.email, payload.password)
    except Exception as exc:
        log.warning("auth.sign_in_failed email=%s error=%s", payload.email, exc)
        raise HTTPException(status_code=401, detail="Invalid email or password")
    await scheduler.sync_identity()
    return _identity(catalog, user)


@router.post("/sign-up", response_model=IdentityResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    payload: SignUpRequest,
    session: SupabaseAuthSession = Depends(get_auth_session),
    catalog: RecipeCatalog = Depends(get_catalog),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> IdentityResponse:
    if not payload.nickname.strip():
        raise HTTPException(status_code=400, detail="Nickname cannot be blank")
    try:
        user = await run_in_threadpool(
            session.sign_up, payload.email, payload.password, payload.nickname
        )
    except Exception as exc:
        log.warning("auth.sign_up_failed email=%s error=%s", payload.email, exc)
        raise HTTPException(status_code=400, detail=str(exc))
    await scheduler.sync_identity()
    return _identity(catalog, user)


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: SupabaseAuthSession = Depends(get_auth_session),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> Response:
    await run_in_threadpool(session.sign_out)
    await scheduler.sync_identity()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/nickname", response_model=IdentityResponse)
async def update_nickname(
    payload: NicknameRequest,
    session: SupabaseAuthSession = Depends(get_auth_session),
    catalog: RecipeCatalog = Depends(get_catalog),
    scheduler: MigrationScheduler = Depends(get_scheduler),
) -> IdentityResponse:
    if not payload.nickname.strip():
        raise HTTPException(status_code=400, detail="Nickname cannot be blank")
    try:
        user = await run_in_threadpool(session.update_nickname, payload.nickname)
    except Exception as exc:
        log.warning("auth.nickname_update_failed error=%s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    # identity changed, so the migration timer is rebound
    await scheduler.sync_identity()
    return _identity(catalog, user)


@router.put("/password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    payload: PasswordChangeRequest,
    session: SupabaseAuthSession = Depends(get_auth_session),
) -> Response:
    if payload.password != payload.confirmPassword:
        raise HTTPException(status_code=400, detail="Passwords do not match")
    if await run_in_threadpool(session.load_session) is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        await run_in_threadpool(session.change_password, payload.password)
    except Exception as exc:
        log.warning("auth.password_change_failed error=%s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    return Response(status_code=status.HTTP_204_NO_CONTENT)

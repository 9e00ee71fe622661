# smoothie_sync/app/main.py
from __future__ import annotations
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from smoothie_sync.app import deps
from smoothie_sync.app.config import settings
from smoothie_sync.app.routers.auth import router as auth_router
from smoothie_sync.app.routers.recipes import router as recipes_router
from smoothie_sync.app.routers.sync import router as sync_router

# Logging simples no stdout (bom para dev e containers)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)

app = FastAPI(title="Smoothie Sync API", version="0.2.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recipes_router)
app.include_router(sync_router)
app.include_router(auth_router)


@app.on_event("startup")
async def startup() -> None:
    # restore any stored session off the loop, list the community store, then
    # start the post-sign-in timer if a session exists
    await run_in_threadpool(deps.get_auth_session().load_session)
    await deps.get_catalog().refresh()
    await deps.get_scheduler().sync_identity()


@app.on_event("shutdown")
async def shutdown() -> None:
    await deps.close_all()


@app.get("/health")
def health():
    return {"ok": True}

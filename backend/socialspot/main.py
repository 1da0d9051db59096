"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from socialspot.api import catalog, locations, ops, preferences
from socialspot.api.errors import install_error_handlers
from socialspot.domain.catalog.store import ensure_schema
from socialspot.infra import postgres
from socialspot.infra.redis import close_redis
from socialspot.obs import init as obs_init
from socialspot.settings import settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	if settings.store_backend == "postgres":
		pool = await postgres.init_pool()
		await ensure_schema(pool)
	logger.info("startup_complete", extra={"store_backend": settings.store_backend})
	try:
		yield
	finally:
		await postgres.close_pool()
		await close_redis()


app = FastAPI(title="Social Spot Search", lifespan=lifespan)
install_error_handlers(app)

allow_origins = list(settings.cors_allow_origins)
if not allow_origins:
	allow_origins = ["http://localhost:8081", "http://localhost:19006"] if settings.is_dev() else []

app.add_middleware(
	CORSMiddleware,
	allow_origins=allow_origins,
	allow_credentials=False,
	allow_methods=["GET", "PUT", "DELETE"],
	allow_headers=["*"],
	expose_headers=["X-Request-Id"],
)

obs_init(app)

app.include_router(catalog.router, tags=["discovery"])
app.include_router(locations.router, tags=["locations"])
app.include_router(preferences.router, tags=["preferences"])
app.include_router(ops.router, tags=["ops"])


def run() -> None:
	import uvicorn

	uvicorn.run("socialspot.main:app", host="0.0.0.0", port=8000, log_config=None)

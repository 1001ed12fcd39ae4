"""FastAPI app entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scout.core.config import settings
from scout.db.session import SessionLocal
from scout.routers import channels, scan, videos
from scout.services.scanner import build_scanner, create_http_client
from scout.services.scheduler import ScanScheduler

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build FastAPI application."""

    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="Channel Scout", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(channels.router)
    app.include_router(scan.router)
    app.include_router(videos.router)

    @app.on_event("startup")
    async def _startup() -> None:
        app.state.http_client = create_http_client()
        app.state.scanner = build_scanner(app.state.http_client, SessionLocal)
        app.state.scheduler = ScanScheduler(SessionLocal, app.state.scanner)
        if settings.scheduler_enabled:
            app.state.scheduler.start()
        else:
            logger.info("Background scheduler disabled; relying on external ticks")

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        await app.state.scheduler.stop()
        await app.state.http_client.aclose()

    @app.get("/healthz", tags=["health"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()

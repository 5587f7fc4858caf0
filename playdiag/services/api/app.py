# playdiag/services/api/app.py
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from playdiag.common.logging import get_logger
from playdiag.common.settings import get_settings
from playdiag.services.api.routers import diagnostics, health

cfg = get_settings()
dev = cfg.app_env.lower() == "development"
logger = get_logger(__name__)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Playdiag API",
        summary="Playback-compatibility diagnostics for media files",
        version="0.1.0",
        docs_url=f"{cfg.api.prefix}/docs",
        openapi_url=f"{cfg.api.prefix}/openapi.json",
    )

    # any origin in development
    origins = ["*"] if dev else cfg.api.cors_allow_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=cfg.api.cors_allow_methods,
        allow_headers=cfg.api.cors_allow_headers,
        allow_credentials=cfg.api.cors_allow_credentials,
    )

    app.include_router(health.router)
    app.include_router(diagnostics.router)

    logger.debug("%s API ready (env=%s, prefix=%s)", cfg.app_name, cfg.app_env, cfg.api.prefix)
    return app


app = create_app()

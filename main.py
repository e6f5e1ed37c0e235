"""
Identity service — application entry point.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from api.middleware import register_exception_handlers, register_middleware
from auth.jwt import TokenSigner
from auth.routes import router as auth_router
from config.settings import Settings, config
from database.session import build_engine, build_session_factory, init_models

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("sqlalchemy.engine", "asyncpg", "uvicorn.access"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    engine: Optional[AsyncEngine] = None,
) -> FastAPI:
    settings = settings or config
    engine = engine or build_engine(settings.database_url)

    app = FastAPI(
        title="Identity Service",
        version="1.0.0",
        description="User registration, credential verification and bearer tokens.",
    )

    # Read-only after startup.
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.token_signer = TokenSigner(
        settings.jwt_secret.get_secret_value(),
        expiry_seconds=settings.jwt_expiry_seconds,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=settings.cors_methods,
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router)

    @app.on_event("startup")
    async def on_startup():
        if settings.uses_default_secret:
            logger.warning("JWT_SECRET is not set; using the placeholder secret")
        if settings.bcrypt_rounds < 10:
            logger.warning("bcrypt cost factor is %d; consider raising BCRYPT_ROUNDS", settings.bcrypt_rounds)

        await init_models(engine)
        logger.info("Server listening on %s:%d", settings.host, settings.port)

    @app.on_event("shutdown")
    async def on_shutdown():
        await engine.dispose()

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.debug,
        log_level="debug" if config.debug else "info",
    )

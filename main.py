"""
To-do backend — application entry point.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import register_exception_handlers, register_middleware
from api.routes import router as todo_router
from auth.jwt import TokenIssuer
from auth.routes import router as auth_router
from config.settings import Settings, config
from core.auth_service import AuthService
from core.todo_service import TodoService
from database.base import TodoStore, UserStore
from database.session import build_stores

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
    stream=sys.stdout,
)
for _noisy in ("pymongo", "motor"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def create_app(
    settings: Settings = config,
    user_store: Optional[UserStore] = None,
    todo_store: Optional[TodoStore] = None,
) -> FastAPI:
    """
    Build the application.

    Stores may be injected (tests); otherwise they come from
    ``settings.storage_backend``.  Raises ``ConfigurationError`` when
    ``JWT_SECRET`` is unset.
    """
    tokens = TokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expiry_seconds=settings.jwt_expiry_seconds,
    )

    client = None
    if user_store is None or todo_store is None:
        user_store, todo_store, client = build_stores(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Ensuring store indexes…")
        await user_store.ensure_indexes()
        await todo_store.ensure_indexes()
        logger.info("Application ready to accept requests.")
        yield
        if client is not None:
            client.close()

    app = FastAPI(
        lifespan=lifespan,
        title="Todo Backend",
        version="1.0.0",
        description="Multi-user to-do lists with token-based sessions.",
    )
    app.state.token_issuer = tokens
    app.state.auth_service = AuthService(user_store, tokens, settings.bcrypt_rounds)
    app.state.todo_service = TodoService(todo_store)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_middleware(app)
    register_exception_handlers(app)

    # Routes
    app.include_router(auth_router, prefix="/api/auth")
    app.include_router(todo_router, prefix="/api/todos")

    @app.get("/health")
    async def health_check():
        return {"message": "healthy"}

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

"""
Store factory. Picks the backend from settings and owns the Motor client.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorClient

from config.settings import Settings
from database.base import TodoStore, UserStore
from database.memory import InMemoryTodoStore, InMemoryUserStore
from database.mongo import MongoTodoStore, MongoUserStore
from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


def create_mongo_client(url: str) -> AsyncIOMotorClient:
    """Motor connects lazily; nothing touches the network until the first operation."""
    return AsyncIOMotorClient(url, tz_aware=True)


def build_stores(
    settings: Settings,
) -> Tuple[UserStore, TodoStore, Optional[AsyncIOMotorClient]]:
    """
    Return ``(user_store, todo_store, client)``.

    ``client`` is ``None`` for the in-memory backend; otherwise the caller
    closes it on shutdown.
    """
    backend = settings.storage_backend.lower()
    if backend == "memory":
        logger.warning("Using in-memory storage; data is lost on restart")
        return InMemoryUserStore(), InMemoryTodoStore(), None
    if backend == "mongo":
        client = create_mongo_client(settings.mongo_url)
        db = client[settings.mongo_db_name]
        logger.info("Using MongoDB database %r", settings.mongo_db_name)
        return MongoUserStore(db), MongoTodoStore(db), client
    raise ConfigurationError(f"Unknown STORAGE_BACKEND {settings.storage_backend!r}")

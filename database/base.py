"""
Abstract interfaces for persistence.

Every ``TodoStore`` method takes the owner id and must restrict itself to
that owner's records.  Ids are opaque strings; an id the backend cannot
parse matches nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from utils.schemas import TodoRecord, TodoStats, UserRecord, to_millis


def utc_now() -> datetime:
    """Current UTC time at the millisecond precision every backend stores."""
    return to_millis(datetime.now(timezone.utc))


class UserStore(ABC):
    """Users keyed by unique, normalized email."""

    async def ensure_indexes(self) -> None:
        """Create backend indexes.  No-op unless overridden."""

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> UserRecord:
        """
        Persist a new user.

        Raises ``ConflictError`` when the normalized email already exists.
        """
        ...


class TodoStore(ABC):
    """Todos, each owned by exactly one user."""

    async def ensure_indexes(self) -> None:
        """Create backend indexes.  No-op unless overridden."""

    @abstractmethod
    async def list_for_owner(self, owner_id: str) -> List[TodoRecord]:
        """Newest ``created_at`` first, ties broken by id descending."""
        ...

    @abstractmethod
    async def create(self, owner_id: str, fields: Dict[str, Any]) -> TodoRecord:
        ...

    @abstractmethod
    async def update(
        self,
        owner_id: str,
        todo_id: str,
        changes: Dict[str, Any],
    ) -> Optional[TodoRecord]:
        """
        Apply ``changes`` atomically and return the updated record.

        A ``None`` value clears the field.  Returns ``None`` when no todo
        with ``todo_id`` belongs to ``owner_id``.
        """
        ...

    @abstractmethod
    async def delete(self, owner_id: str, todo_id: str) -> Optional[TodoRecord]:
        """Atomically remove and return the todo, or ``None``."""
        ...

    @abstractmethod
    async def stats(self, owner_id: str) -> TodoStats:
        ...

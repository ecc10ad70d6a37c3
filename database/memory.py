"""
In-memory stores for local development and tests.

Selected with ``STORAGE_BACKEND=memory``.  Every method runs without an
``await`` in between reads and writes, so each call is atomic on the
event loop the same way a single-document MongoDB operation is.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId

from database.base import TodoStore, UserStore, utc_now
from utils.errors import ConflictError
from utils.schemas import DEFAULT_PRIORITY, TodoRecord, TodoStats, UserRecord, normalize_email


class InMemoryUserStore(UserStore):
    def __init__(self) -> None:
        self._by_email: Dict[str, UserRecord] = {}

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self._by_email.get(normalize_email(email))

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> UserRecord:
        key = normalize_email(email)
        if key in self._by_email:
            raise ConflictError()
        user = UserRecord(
            id=str(ObjectId()),
            first_name=first_name,
            last_name=last_name,
            email=key,
            password_hash=password_hash,
            created_at=utc_now(),
        )
        self._by_email[key] = user
        return user


class InMemoryTodoStore(TodoStore):
    def __init__(self) -> None:
        self._todos: Dict[str, TodoRecord] = {}

    def _owned(self, owner_id: str, todo_id: str) -> Optional[TodoRecord]:
        todo = self._todos.get(todo_id)
        if todo is None or todo.owner_id != owner_id:
            return None
        return todo

    async def list_for_owner(self, owner_id: str) -> List[TodoRecord]:
        owned = [t for t in self._todos.values() if t.owner_id == owner_id]
        owned.sort(key=lambda t: (t.created_at, ObjectId(t.id)), reverse=True)
        return [t.model_copy() for t in owned]

    async def create(self, owner_id: str, fields: Dict[str, Any]) -> TodoRecord:
        now = utc_now()
        todo = TodoRecord(
            id=str(ObjectId()),
            title=fields["title"],
            description=fields.get("description"),
            completed=fields.get("completed", False),
            priority=fields.get("priority") or DEFAULT_PRIORITY,
            due_date=fields.get("due_date"),
            category=fields.get("category"),
            owner_id=owner_id,
            created_at=now,
            updated_at=now,
        )
        self._todos[todo.id] = todo
        return todo.model_copy()

    async def update(
        self,
        owner_id: str,
        todo_id: str,
        changes: Dict[str, Any],
    ) -> Optional[TodoRecord]:
        todo = self._owned(owner_id, todo_id)
        if todo is None:
            return None
        updated = todo.model_copy(
            update={**changes, "updated_at": utc_now()}
        )
        self._todos[todo_id] = updated
        return updated.model_copy()

    async def delete(self, owner_id: str, todo_id: str) -> Optional[TodoRecord]:
        if self._owned(owner_id, todo_id) is None:
            return None
        return self._todos.pop(todo_id)

    async def stats(self, owner_id: str) -> TodoStats:
        stats = TodoStats()
        for todo in self._todos.values():
            if todo.owner_id != owner_id:
                continue
            stats.total += 1
            if todo.completed:
                stats.completed += 1
            else:
                stats.pending += 1
            setattr(stats, todo.priority, getattr(stats, todo.priority) + 1)
        return stats

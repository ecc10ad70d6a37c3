"""
Owner-scoped CRUD and statistics.

``owner_id`` always comes from a verified session token.  A todo that
does not exist and a todo owned by someone else are both ``NotFoundError``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from database.base import TodoStore
from utils.errors import InvalidInputError, NotFoundError
from utils.schemas import DEFAULT_PRIORITY, TodoCreate, TodoRecord, TodoStats, TodoUpdate

logger = logging.getLogger(__name__)

_TITLE_REQUIRED = "Todo title is required"
_NOT_FOUND = "Todo not found"


def _trim_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _required_title(value: Optional[str]) -> str:
    title = _trim_or_none(value)
    if title is None:
        raise InvalidInputError(_TITLE_REQUIRED)
    return title


class TodoService:
    def __init__(self, todos: TodoStore) -> None:
        self._todos = todos

    async def list_todos(self, owner_id: str) -> List[TodoRecord]:
        return await self._todos.list_for_owner(owner_id)

    async def create_todo(self, owner_id: str, req: TodoCreate) -> TodoRecord:
        fields = {
            "title": _required_title(req.title),
            "description": _trim_or_none(req.description),
            "completed": False,
            "priority": req.priority or DEFAULT_PRIORITY,
            "due_date": req.due_date,
            "category": _trim_or_none(req.category),
        }
        todo = await self._todos.create(owner_id, fields)
        logger.info("New todo created by %s: %s", owner_id, todo.title)
        return todo

    async def update_todo(
        self, owner_id: str, todo_id: str, req: TodoUpdate
    ) -> TodoRecord:
        changes = self._changes_from(req)
        todo = await self._todos.update(owner_id, todo_id, changes)
        if todo is None:
            raise NotFoundError(_NOT_FOUND)
        logger.info("Todo updated by %s: %s", owner_id, todo.title)
        return todo

    async def delete_todo(self, owner_id: str, todo_id: str) -> TodoRecord:
        todo = await self._todos.delete(owner_id, todo_id)
        if todo is None:
            raise NotFoundError(_NOT_FOUND)
        logger.info("Todo deleted by %s: %s", owner_id, todo.title)
        return todo

    async def get_stats(self, owner_id: str) -> TodoStats:
        return await self._todos.stats(owner_id)

    @staticmethod
    def _changes_from(req: TodoUpdate) -> Dict[str, Any]:
        """
        Only keys present in the request body are returned.

        title            present → must be non-blank
        description,
        category         blank or null → cleared
        due_date         null or "" → cleared
        completed,
        priority         null is rejected
        """
        present = req.model_dump(exclude_unset=True)
        changes: Dict[str, Any] = {}
        for key, value in present.items():
            if key == "title":
                changes[key] = _required_title(value)
            elif key in ("description", "category"):
                changes[key] = _trim_or_none(value)
            elif key == "due_date":
                changes[key] = value
            elif value is None:
                raise InvalidInputError("Invalid todo update")
            else:
                changes[key] = value
        return changes

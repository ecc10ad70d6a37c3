"""
Todo API routes.  Every route requires a Bearer token.

Route prefix: /api/todos
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, status

from auth.dependencies import get_current_user_id, get_todo_service
from core.todo_service import TodoService
from utils.schemas import MessageResponse, TodoCreate, TodoRecord, TodoStats, TodoUpdate

router = APIRouter(tags=["todos"])


@router.get("", response_model=List[TodoRecord])
async def list_todos(
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
) -> List[TodoRecord]:
    """All of the caller's todos, newest first."""
    return await service.list_todos(user_id)


@router.post("", response_model=TodoRecord, status_code=status.HTTP_201_CREATED)
async def create_todo(
    req: TodoCreate,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
) -> TodoRecord:
    return await service.create_todo(user_id, req)


# Declared before the ``/{todo_id}`` routes.
@router.get("/stats", response_model=TodoStats)
async def todo_stats(
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
) -> TodoStats:
    return await service.get_stats(user_id)


@router.put("/{todo_id}", response_model=TodoRecord)
async def update_todo(
    todo_id: str,
    req: TodoUpdate,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
) -> TodoRecord:
    return await service.update_todo(user_id, todo_id, req)


@router.delete("/{todo_id}", response_model=MessageResponse)
async def delete_todo(
    todo_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TodoService = Depends(get_todo_service),
) -> MessageResponse:
    await service.delete_todo(user_id, todo_id)
    return MessageResponse(message="Todo deleted successfully")

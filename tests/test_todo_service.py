"""
Tests for TodoService: owner scoping, defaults, partial updates and stats.
"""

from datetime import datetime, timezone

import pytest

from core.todo_service import TodoService
from utils.errors import InvalidInputError, NotFoundError
from utils.schemas import TodoCreate, TodoStats, TodoUpdate

ALICE = "64b7f0c2a1b2c3d4e5f60718"
BOB = "64b7f0c2a1b2c3d4e5f60719"


@pytest.fixture
def service(todo_store):
    return TodoService(todo_store)


class TestCreate:
    @pytest.mark.asyncio
    async def test_defaults(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="buy milk"))
        assert todo.title == "buy milk"
        assert todo.priority == "medium"
        assert todo.completed is False
        assert todo.due_date is None
        assert todo.owner_id == ALICE

    @pytest.mark.asyncio
    async def test_trims_optional_fields(self, service):
        todo = await service.create_todo(
            ALICE,
            TodoCreate(title="  t  ", description="  d ", category="   ", priority="high"),
        )
        assert (todo.title, todo.description, todo.category) == ("t", "d", None)
        assert todo.priority == "high"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("title", [None, "", "   ", "\n\t"])
    async def test_blank_title_rejected_and_nothing_persisted(self, service, title):
        with pytest.raises(InvalidInputError) as excinfo:
            await service.create_todo(ALICE, TodoCreate(title=title))
        assert excinfo.value.public_message == "Todo title is required"
        assert await service.list_todos(ALICE) == []

    def test_due_date_normalized_to_utc_milliseconds(self):
        naive = TodoCreate.model_validate({"title": "t", "dueDate": "2030-01-01T00:00:00"})
        assert naive.due_date == datetime(2030, 1, 1, tzinfo=timezone.utc)

        offset = TodoUpdate.model_validate({"dueDate": "2030-01-01T02:00:00.987654+02:00"})
        assert offset.due_date == datetime(2030, 1, 1, 0, 0, 0, 987000, tzinfo=timezone.utc)
        assert offset.due_date.tzinfo == timezone.utc

    @pytest.mark.asyncio
    async def test_timestamps_are_millisecond_precision(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        assert todo.created_at == todo.updated_at
        assert todo.created_at.microsecond % 1000 == 0


class TestList:
    @pytest.mark.asyncio
    async def test_newest_first_and_owner_scoped(self, service):
        first = await service.create_todo(ALICE, TodoCreate(title="one"))
        second = await service.create_todo(ALICE, TodoCreate(title="two"))
        await service.create_todo(BOB, TodoCreate(title="bob's"))

        todos = await service.list_todos(ALICE)
        assert [t.id for t in todos] == [second.id, first.id]


class TestUpdate:
    @pytest.mark.asyncio
    async def test_only_present_fields_change(self, service):
        todo = await service.create_todo(
            ALICE, TodoCreate(title="t", description="d", category="home")
        )
        updated = await service.update_todo(ALICE, todo.id, TodoUpdate(completed=True))

        assert updated.completed is True
        assert (updated.title, updated.description, updated.category) == ("t", "d", "home")
        assert updated.updated_at >= todo.updated_at

    @pytest.mark.asyncio
    async def test_blank_optional_fields_clear(self, service):
        due = datetime(2030, 1, 1, tzinfo=timezone.utc)
        todo = await service.create_todo(
            ALICE, TodoCreate(title="t", description="d", category="c", due_date=due)
        )
        updated = await service.update_todo(
            ALICE,
            todo.id,
            TodoUpdate.model_validate({"description": "", "category": None, "dueDate": ""}),
        )
        assert updated.description is None
        assert updated.category is None
        assert updated.due_date is None

    @pytest.mark.asyncio
    async def test_title_cannot_be_blanked(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        with pytest.raises(InvalidInputError):
            await service.update_todo(ALICE, todo.id, TodoUpdate(title="  "))

    @pytest.mark.asyncio
    async def test_null_completed_rejected(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        with pytest.raises(InvalidInputError):
            await service.update_todo(ALICE, todo.id, TodoUpdate(completed=None))

    @pytest.mark.asyncio
    async def test_other_owner_gets_not_found(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        with pytest.raises(NotFoundError):
            await service.update_todo(BOB, todo.id, TodoUpdate(title="mine now"))
        assert (await service.list_todos(ALICE))[0].title == "t"

    @pytest.mark.asyncio
    async def test_unknown_and_malformed_ids(self, service):
        with pytest.raises(NotFoundError):
            await service.update_todo(ALICE, "64b7f0c2a1b2c3d4e5f6ffff", TodoUpdate(title="x"))
        with pytest.raises(NotFoundError):
            await service.update_todo(ALICE, "not-an-id", TodoUpdate(title="x"))


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_once(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        deleted = await service.delete_todo(ALICE, todo.id)
        assert deleted.id == todo.id
        with pytest.raises(NotFoundError):
            await service.delete_todo(ALICE, todo.id)

    @pytest.mark.asyncio
    async def test_other_owner_gets_not_found(self, service):
        todo = await service.create_todo(ALICE, TodoCreate(title="t"))
        with pytest.raises(NotFoundError):
            await service.delete_todo(BOB, todo.id)
        assert len(await service.list_todos(ALICE)) == 1


class TestStats:
    @pytest.mark.asyncio
    async def test_zero_when_empty(self, service):
        assert await service.get_stats(ALICE) == TodoStats()

    @pytest.mark.asyncio
    async def test_counts(self, service):
        a = await service.create_todo(ALICE, TodoCreate(title="a", priority="high"))
        await service.create_todo(ALICE, TodoCreate(title="b", priority="low"))
        await service.create_todo(ALICE, TodoCreate(title="c"))
        await service.create_todo(BOB, TodoCreate(title="d", priority="high"))
        await service.update_todo(ALICE, a.id, TodoUpdate(completed=True))

        stats = await service.get_stats(ALICE)
        assert stats.model_dump() == {
            "total": 3,
            "completed": 1,
            "pending": 2,
            "high": 1,
            "medium": 1,
            "low": 1,
        }

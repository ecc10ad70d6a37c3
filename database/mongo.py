"""
MongoDB-backed stores (Motor).

Document layout per collection:

  users: firstName, lastName, email (unique), password, createdAt
  todos: title, description, completed, priority, dueDate, category,
         userId (ObjectId), createdAt, updatedAt

Driver errors are logged here with full detail and re-raised as
``InternalError``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, OperationFailure, PyMongoError

from database.base import TodoStore, UserStore, utc_now
from utils.errors import ConflictError, InternalError
from utils.schemas import DEFAULT_PRIORITY, TodoRecord, TodoStats, UserRecord, normalize_email

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"
TODOS_COLLECTION = "todos"

# Left behind by an older schema that had a unique ``username``; every new
# user has no username, so the index rejects all registrations after the first.
_LEGACY_USER_INDEXES = ("username_1",)

# snake_case field -> document key
_TODO_FIELDS = {
    "title": "title",
    "description": "description",
    "completed": "completed",
    "priority": "priority",
    "due_date": "dueDate",
    "category": "category",
}


def _to_object_id(value: str | ObjectId) -> Optional[ObjectId]:
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None


@contextmanager
def _driver_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except PyMongoError as exc:
        logger.exception("MongoDB %s failed", operation)
        raise InternalError(f"{operation}: {exc}") from exc


def _user_from_doc(doc: Dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=str(doc["_id"]),
        first_name=doc.get("firstName", ""),
        last_name=doc.get("lastName", ""),
        email=doc["email"],
        password_hash=doc["password"],
        created_at=doc.get("createdAt") or doc["_id"].generation_time,
    )


def _todo_from_doc(doc: Dict[str, Any]) -> TodoRecord:
    created_at = doc.get("createdAt") or doc["_id"].generation_time
    return TodoRecord(
        id=str(doc["_id"]),
        title=doc["title"],
        description=doc.get("description"),
        completed=bool(doc.get("completed", False)),
        priority=doc.get("priority") or DEFAULT_PRIORITY,
        due_date=doc.get("dueDate"),
        category=doc.get("category"),
        owner_id=str(doc["userId"]),
        created_at=created_at,
        updated_at=doc.get("updatedAt") or created_at,
    )


class MongoUserStore(UserStore):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[USERS_COLLECTION]

    async def ensure_indexes(self) -> None:
        with _driver_errors("users.ensure_indexes"):
            existing = await self._collection.index_information()
            for name in _LEGACY_USER_INDEXES:
                if name in existing:
                    try:
                        await self._collection.drop_index(name)
                        logger.info("Dropped legacy index users.%s", name)
                    except OperationFailure as exc:
                        logger.warning("Could not drop users.%s: %s", name, exc)
            await self._collection.create_index(
                [("email", ASCENDING)], unique=True, name="email_1"
            )

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        with _driver_errors("users.find_one"):
            doc = await self._collection.find_one({"email": normalize_email(email)})
        return _user_from_doc(doc) if doc else None

    async def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        password_hash: str,
    ) -> UserRecord:
        doc = {
            "firstName": first_name,
            "lastName": last_name,
            "email": normalize_email(email),
            "password": password_hash,
            "createdAt": utc_now(),
        }
        with _driver_errors("users.insert_one"):
            try:
                result = await self._collection.insert_one(doc)
            except DuplicateKeyError as exc:
                raise ConflictError() from exc
        doc["_id"] = result.inserted_id
        return _user_from_doc(doc)


class MongoTodoStore(TodoStore):
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[TODOS_COLLECTION]

    async def ensure_indexes(self) -> None:
        with _driver_errors("todos.ensure_indexes"):
            await self._collection.create_index(
                [("userId", ASCENDING), ("createdAt", DESCENDING)],
                name="userId_1_createdAt_-1",
            )

    async def list_for_owner(self, owner_id: str) -> List[TodoRecord]:
        oid = _to_object_id(owner_id)
        if oid is None:
            return []
        with _driver_errors("todos.find"):
            cursor = self._collection.find({"userId": oid}).sort(
                [("createdAt", DESCENDING), ("_id", DESCENDING)]
            )
            docs = await cursor.to_list(length=None)
        return [_todo_from_doc(doc) for doc in docs]

    async def create(self, owner_id: str, fields: Dict[str, Any]) -> TodoRecord:
        oid = _to_object_id(owner_id)
        if oid is None:
            raise InternalError(f"invalid owner id {owner_id!r}")
        now = utc_now()
        doc: Dict[str, Any] = {
            "title": fields["title"],
            "description": fields.get("description"),
            "completed": fields.get("completed", False),
            "priority": fields.get("priority") or DEFAULT_PRIORITY,
            "dueDate": fields.get("due_date"),
            "category": fields.get("category"),
            "userId": oid,
            "createdAt": now,
            "updatedAt": now,
        }
        with _driver_errors("todos.insert_one"):
            result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return _todo_from_doc(doc)

    async def update(
        self,
        owner_id: str,
        todo_id: str,
        changes: Dict[str, Any],
    ) -> Optional[TodoRecord]:
        oid, tid = _to_object_id(owner_id), _to_object_id(todo_id)
        if oid is None or tid is None:
            return None
        update = {_TODO_FIELDS[key]: value for key, value in changes.items()}
        update["updatedAt"] = utc_now()
        with _driver_errors("todos.find_one_and_update"):
            doc = await self._collection.find_one_and_update(
                {"_id": tid, "userId": oid},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
        return _todo_from_doc(doc) if doc else None

    async def delete(self, owner_id: str, todo_id: str) -> Optional[TodoRecord]:
        oid, tid = _to_object_id(owner_id), _to_object_id(todo_id)
        if oid is None or tid is None:
            return None
        with _driver_errors("todos.find_one_and_delete"):
            doc = await self._collection.find_one_and_delete({"_id": tid, "userId": oid})
        return _todo_from_doc(doc) if doc else None

    async def stats(self, owner_id: str) -> TodoStats:
        oid = _to_object_id(owner_id)
        if oid is None:
            return TodoStats()
        pipeline = [
            {"$match": {"userId": oid}},
            {
                "$group": {
                    "_id": None,
                    "total": {"$sum": 1},
                    "completed": {"$sum": {"$cond": ["$completed", 1, 0]}},
                    "pending": {"$sum": {"$cond": ["$completed", 0, 1]}},
                    "high": {"$sum": {"$cond": [{"$eq": ["$priority", "high"]}, 1, 0]}},
                    "medium": {"$sum": {"$cond": [{"$eq": ["$priority", "medium"]}, 1, 0]}},
                    "low": {"$sum": {"$cond": [{"$eq": ["$priority", "low"]}, 1, 0]}},
                }
            },
        ]
        with _driver_errors("todos.aggregate"):
            rows = await self._collection.aggregate(pipeline).to_list(length=None)
        if not rows:
            return TodoStats()
        row = rows[0]
        row.pop("_id", None)
        return TodoStats(**row)

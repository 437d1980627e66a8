"""Local task stores: an in-memory dict and an SQLAlchemy-backed table."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from taskpwa.crud.local_task import local_task
from taskpwa.models.local_task import LocalTaskRecord
from taskpwa.sync.identifiers import LocalId, TaskIdentifier
from taskpwa.sync.task import Task

logger = logging.getLogger(__name__)


def _ordering(task: Task):
    return (task.created_at, task.identifier.sort_key())


class InMemoryTaskStore:
    """Dict-backed store keyed by task identifier."""

    def __init__(self, tasks: Optional[List[Task]] = None):
        self._tasks: Dict[TaskIdentifier, Task] = {}
        for task in tasks or []:
            self._tasks[task.identifier] = task.copy()

    async def load_all(self) -> List[Task]:
        return sorted((t.copy() for t in self._tasks.values()), key=_ordering)

    async def get(self, identifier: TaskIdentifier) -> Optional[Task]:
        task = self._tasks.get(identifier)
        return task.copy() if task else None

    async def save(self, task: Task) -> None:
        self._tasks[task.identifier] = task.copy()

    async def purge(self, identifier: TaskIdentifier) -> None:
        self._tasks.pop(identifier, None)

    async def remap(self, local_id: LocalId, task: Task) -> None:
        self._tasks.pop(local_id, None)
        self._tasks[task.identifier] = task.copy()

    async def clear(self) -> None:
        self._tasks.clear()


class SQLTaskStore:
    """Store persisted in the ``local_tasks`` table.

    Each method runs in its own session and commits before returning.
    """

    def __init__(self, session_factory: async_sessionmaker):
        self._session_factory = session_factory

    @staticmethod
    def _to_task(record: LocalTaskRecord) -> Task:
        return Task(
            identifier=local_task.identifier_of(record),
            title=record.title,
            description=record.description or "",
            completed=bool(record.completed),
            location=record.location,
            photo=record.photo,
            created_at=int(record.created_at),
            updated_at=int(record.updated_at),
            dirty=bool(record.dirty),
            deleted=bool(record.deleted),
        )

    @staticmethod
    def _to_columns(task: Task) -> dict:
        return {
            **local_task.identifier_columns(task.identifier),
            "title": task.title,
            "description": task.description,
            "completed": task.completed,
            "location": task.location,
            "photo": task.photo,
            "created_at": task.created_at,
            "updated_at": task.updated_at,
            "dirty": task.dirty,
            "deleted": task.deleted,
        }

    async def load_all(self) -> List[Task]:
        async with self._session_factory() as db:
            records = await local_task.list_ordered(db)
        return sorted((self._to_task(r) for r in records), key=_ordering)

    async def get(self, identifier: TaskIdentifier) -> Optional[Task]:
        async with self._session_factory() as db:
            record = await local_task.get_by_identifier(db, identifier=identifier)
            return self._to_task(record) if record else None

    async def save(self, task: Task) -> None:
        async with self._session_factory() as db:
            record = await local_task.get_by_identifier(db, identifier=task.identifier)
            if record is None:
                await local_task.create(db, obj_in=self._to_columns(task))
            else:
                await local_task.update(db, db_obj=record, obj_in=self._to_columns(task))

    async def purge(self, identifier: TaskIdentifier) -> None:
        async with self._session_factory() as db:
            record = await local_task.get_by_identifier(db, identifier=identifier)
            if record is not None:
                await local_task.remove(db, id=record.row_id)

    async def remap(self, local_id: LocalId, task: Task) -> None:
        """Turn the Local row into its Remote successor in one transaction."""
        async with self._session_factory() as db:
            record = await local_task.get_by_identifier(db, identifier=local_id)
            existing = await local_task.get_by_identifier(db, identifier=task.identifier)
            if existing is not None and (record is None or existing.row_id != record.row_id):
                await db.delete(existing)
                await db.flush()
            if record is None:
                db.add(LocalTaskRecord(**self._to_columns(task)))
            else:
                for field, value in self._to_columns(task).items():
                    setattr(record, field, value)
                db.add(record)
            await db.commit()
        logger.debug(f"Remapped {local_id} -> {task.identifier} in local store")

    async def clear(self) -> None:
        async with self._session_factory() as db:
            await local_task.remove_all(db)

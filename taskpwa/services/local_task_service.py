"""Client-side task journal: the offline mutations that feed the reconciler."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from taskpwa.core.exceptions import TaskValidationError
from taskpwa.sync.identifiers import LocalId, TaskIdentifier
from taskpwa.sync.ports import LocalTaskStore
from taskpwa.sync.task import Task, now_ms

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = {"title", "description", "completed", "location", "photo"}


class LocalTaskService:
    """Record task mutations locally and mark them for sync."""

    def __init__(self, store: LocalTaskStore, clock: Callable[[], int] = now_ms):
        self.store = store
        self.clock = clock

    async def create(
        self,
        title: str,
        description: str = "",
        *,
        location: Optional[Any] = None,
        photo: Optional[Any] = None,
    ) -> Task:
        """Create a task offline under a fresh local identifier."""
        title = (title or "").strip()
        if not title:
            raise TaskValidationError("Title is required")

        now = self.clock()
        task = Task(
            identifier=LocalId.new(),
            title=title,
            description=(description or "").strip(),
            completed=False,
            location=location,
            photo=photo,
            created_at=now,
            updated_at=now,
            dirty=True,
            deleted=False,
        )
        await self.store.save(task)
        logger.info(f"Task saved locally: {task.identifier}")
        return task

    async def get(self, identifier: TaskIdentifier) -> Optional[Task]:
        return await self.store.get(identifier)

    async def update(self, identifier: TaskIdentifier, **fields: Any) -> Task:
        """Apply content changes and mark the task dirty."""
        unknown = set(fields) - _EDITABLE_FIELDS
        if unknown:
            raise TaskValidationError(f"Unknown task fields: {', '.join(sorted(unknown))}")
        if "title" in fields:
            fields["title"] = (fields["title"] or "").strip()
            if not fields["title"]:
                raise TaskValidationError("Title is required")
        if "description" in fields:
            fields["description"] = (fields["description"] or "").strip()

        task = await self.store.get(identifier)
        if task is None or task.deleted:
            raise KeyError(identifier)

        updated = task.copy(**fields, dirty=True, updated_at=self.clock())
        await self.store.save(updated)
        return updated

    async def toggle(self, identifier: TaskIdentifier, completed: bool) -> Task:
        return await self.update(identifier, completed=completed)

    async def delete(self, identifier: TaskIdentifier) -> None:
        """Purge a Local task; tombstone a Remote one until the server confirms."""
        task = await self.store.get(identifier)
        if task is None:
            logger.warning(f"Task not found: {identifier}")
            return

        if task.is_local:
            await self.store.purge(identifier)
            logger.info(f"Task deleted locally: {identifier}")
        else:
            await self.store.save(task.copy(deleted=True, dirty=True, updated_at=self.clock()))
            logger.info(f"Task marked for deletion: {identifier}")

    async def list_visible(self) -> List[Task]:
        """Tasks to display, newest first."""
        tasks = [t for t in await self.store.load_all() if t.visible]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    async def has_pending_sync(self) -> bool:
        return any(t.dirty or t.deleted or t.is_local for t in await self.store.load_all())

    async def clear(self) -> None:
        await self.store.clear()
        logger.info("All local tasks removed")

"""In-memory authoritative task list held by the server."""
from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from taskpwa.schemas.task import RemoteTask, SyncItem, TaskContent, TaskUpdate
from taskpwa.sync.task import now_ms

logger = logging.getLogger(__name__)

DEMO_TASKS = (
    ("Buy milk", "Whole milk 1L", 3_600_000),
    ("Send report", "Weekly report to the team", 7_200_000),
)


class TaskRegistry:
    """Server-side task list living in process memory.

    One registry per application instance; ids are issued sequentially and
    never reused.
    """

    def __init__(self, clock: Callable[[], int] = now_ms):
        self.clock = clock
        self._tasks: Dict[int, RemoteTask] = {}
        self._next_id = 1

    def seed_demo(self) -> None:
        now = self.clock()
        for title, description, age in DEMO_TASKS:
            self._insert(
                TaskContent(title=title, description=description),
                created_at=now - age,
                updated_at=now - age,
            )

    def _insert(self, content: TaskContent, *, created_at: int, updated_at: int) -> RemoteTask:
        task = RemoteTask(
            id=self._next_id,
            title=content.title.strip(),
            description=(content.description or "").strip(),
            completed=bool(content.completed),
            location=content.location,
            photo=content.photo,
            created_at=created_at,
            updated_at=updated_at,
        )
        self._next_id += 1
        self._tasks[task.id] = task
        return task

    def list(self) -> List[RemoteTask]:
        """All tasks, newest first."""
        return sorted(self._tasks.values(), key=lambda t: t.created_at, reverse=True)

    def count(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Optional[RemoteTask]:
        return self._tasks.get(task_id)

    def create(self, content: TaskContent, *, created_at: Optional[int] = None) -> RemoteTask:
        if not content.title or not content.title.strip():
            raise ValueError("Title is required")
        now = self.clock()
        task = self._insert(content, created_at=created_at or now, updated_at=now)
        logger.info(f"Task created: #{task.id} - {task.title}")
        return task

    def update(self, task_id: int, changes: TaskUpdate) -> Optional[RemoteTask]:
        """Apply the fields present in ``changes``; None if the task does not exist."""
        task = self._tasks.get(task_id)
        if task is None:
            return None

        data = changes.model_dump(exclude_unset=True)
        # Content fields cannot be nulled; the opaque payloads can.
        for key in ("title", "description", "completed"):
            if key in data and data[key] is None:
                del data[key]
        if "title" in data:
            data["title"] = data["title"].strip()
        if "description" in data:
            data["description"] = data["description"].strip()

        updated = task.model_copy(update={**data, "updated_at": self.clock()})
        self._tasks[task_id] = updated
        logger.info(f"Task updated: #{task_id} - {updated.title}")
        return updated

    def delete(self, task_id: int) -> bool:
        deleted = self._tasks.pop(task_id, None) is not None
        if deleted:
            logger.info(f"Task deleted: #{task_id}")
        return deleted

    def clear(self) -> int:
        count = len(self._tasks)
        self._tasks.clear()
        logger.info(f"{count} tasks deleted")
        return count

    def apply_sync_batch(self, items: List[SyncItem]):
        """Create new client tasks and update known ones in one pass.

        Returns ``(created, updated, mapping)`` where ``mapping`` pairs each
        client local id with the id issued for it.
        """
        created: List[RemoteTask] = []
        updated: List[RemoteTask] = []
        mapping: List[tuple] = []

        for item in items:
            if item.local_id and not item.id:
                content = TaskContent(
                    title=item.title or "Untitled",
                    description=item.description or "",
                    completed=bool(item.completed),
                    location=item.location,
                    photo=item.photo,
                )
                task = self.create(content, created_at=item.created_at)
                created.append(task)
                mapping.append((item.local_id, task.id))
                logger.info(f"Synced (new): {item.local_id} -> #{task.id}")
            elif item.id:
                changes = TaskUpdate(**item.model_dump(include=set(TaskUpdate.model_fields), exclude_unset=True))
                task = self.update(item.id, changes)
                if task is not None:
                    updated.append(task)
                    logger.info(f"Synced (updated): #{task.id}")

        return created, updated, mapping

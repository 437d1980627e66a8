"""Test doubles for the remote side of sync."""
from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional, Tuple

from taskpwa.core.exceptions import RemoteNotFound, TransportError
from taskpwa.schemas.task import RemoteTask, TaskContent


class Clock:
    """Deterministic millisecond clock."""

    def __init__(self, start: int = 1_000):
        self.value = start

    def __call__(self) -> int:
        self.value += 1
        return self.value


class FakeGateway:
    """
    In-memory RemoteTaskGateway used by reconciler tests.

    - records every call in ``calls`` as ``(operation, key)``
    - failures can be injected per operation and key (title for create,
      id for update/delete, None for list)
    """

    def __init__(self, tasks: Optional[List[RemoteTask]] = None, next_id: int = 1):
        self.tasks: Dict[int, RemoteTask] = {t.id: t for t in tasks or []}
        self.next_id = max([next_id, *[t.id + 1 for t in self.tasks.values()]])
        self.clock = Clock(start=50_000)
        self.calls: List[Tuple[str, Any]] = []
        self._failures: Dict[Tuple[str, Any], List[Any]] = {}

    def fail(self, operation: str, key: Any = None, error: Optional[Exception] = None, times: Optional[int] = None):
        """Make ``operation`` on ``key`` raise ``error`` (``times`` calls, or always)."""
        self._failures[(operation, key)] = [error or TransportError(f"{operation} failed"), times]

    def _maybe_fail(self, operation: str, key: Any) -> None:
        self.calls.append((operation, key))
        entry = self._failures.get((operation, key))
        if entry is None:
            return
        error, times = entry
        if times is not None:
            if times <= 0:
                return
            entry[1] = times - 1
        raise error

    @property
    def mutations(self) -> List[Tuple[str, Any]]:
        return [c for c in self.calls if c[0] != "list"]

    def add(self, title: str, **fields: Any) -> RemoteTask:
        now = self.clock()
        task = RemoteTask(id=self.next_id, title=title, created_at=now, updated_at=now, **fields)
        self.tasks[task.id] = task
        self.next_id += 1
        return task

    async def list_remote(self) -> List[RemoteTask]:
        self._maybe_fail("list", None)
        return sorted(self.tasks.values(), key=lambda t: t.created_at, reverse=True)

    async def create_remote(self, content: TaskContent) -> RemoteTask:
        self._maybe_fail("create", content.title)
        return self.add(**content.model_dump())

    async def update_remote(self, remote_id: int, content: TaskContent) -> None:
        self._maybe_fail("update", remote_id)
        if remote_id not in self.tasks:
            raise RemoteNotFound(remote_id)
        self.tasks[remote_id] = self.tasks[remote_id].model_copy(
            update={**content.model_dump(), "updated_at": self.clock()}
        )

    async def delete_remote(self, remote_id: int) -> None:
        self._maybe_fail("delete", remote_id)
        if self.tasks.pop(remote_id, None) is None:
            raise RemoteNotFound(remote_id)


class BlockingGateway(FakeGateway):
    """FakeGateway whose list call waits until ``release`` is set."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def list_remote(self) -> List[RemoteTask]:
        self.entered.set()
        await self.release.wait()
        return await super().list_remote()

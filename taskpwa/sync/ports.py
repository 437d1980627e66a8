"""
Ports (interfaces) used by the reconciler.

The reconciler depends on Protocols instead of concrete implementations, so the
HTTP gateway and the SQL store can be swapped for in-memory fakes in tests.
"""
from __future__ import annotations

from typing import Awaitable, Callable, List, Optional, Protocol

from taskpwa.schemas.task import RemoteTask, TaskContent
from taskpwa.sync.identifiers import LocalId, TaskIdentifier
from taskpwa.sync.task import Task


class RemoteTaskGateway(Protocol):
    """The four remote capabilities; each call either succeeds or raises a SyncError."""

    async def list_remote(self) -> List[RemoteTask]: ...

    async def create_remote(self, content: TaskContent) -> RemoteTask: ...

    async def update_remote(self, remote_id: int, content: TaskContent) -> None: ...

    async def delete_remote(self, remote_id: int) -> None: ...


class LocalTaskStore(Protocol):
    """Keyed client-side store; every call is atomic."""

    async def load_all(self) -> List[Task]: ...

    async def get(self, identifier: TaskIdentifier) -> Optional[Task]: ...

    async def save(self, task: Task) -> None: ...

    async def purge(self, identifier: TaskIdentifier) -> None: ...

    async def remap(self, local_id: LocalId, task: Task) -> None: ...

    async def clear(self) -> None: ...


class CallableGateway:
    """Adapt four plain async callables to ``RemoteTaskGateway``."""

    def __init__(
        self,
        *,
        list_remote: Callable[[], Awaitable[List[RemoteTask]]],
        create_remote: Callable[[TaskContent], Awaitable[RemoteTask]],
        update_remote: Callable[[int, TaskContent], Awaitable[None]],
        delete_remote: Callable[[int], Awaitable[None]],
    ):
        self._list = list_remote
        self._create = create_remote
        self._update = update_remote
        self._delete = delete_remote

    async def list_remote(self) -> List[RemoteTask]:
        return await self._list()

    async def create_remote(self, content: TaskContent) -> RemoteTask:
        return await self._create(content)

    async def update_remote(self, remote_id: int, content: TaskContent) -> None:
        await self._update(remote_id, content)

    async def delete_remote(self, remote_id: int) -> None:
        await self._delete(remote_id)

"""Client-side task entity."""
from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import Any, Optional

from taskpwa.schemas.task import RemoteTask, TaskContent
from taskpwa.sync.identifiers import LocalId, RemoteId, TaskIdentifier


def now_ms() -> int:
    """Current wall clock in epoch milliseconds (the logical clock used for tasks)."""
    return int(time.time() * 1000)


@dataclass
class Task:
    identifier: TaskIdentifier
    title: str
    description: str = ""
    completed: bool = False
    location: Optional[Any] = None
    photo: Optional[Any] = None
    created_at: int = 0
    updated_at: int = 0
    dirty: bool = True
    deleted: bool = False

    @property
    def is_local(self) -> bool:
        return isinstance(self.identifier, LocalId)

    @property
    def visible(self) -> bool:
        """Tombstones are never listed."""
        return not self.deleted

    def content(self) -> TaskContent:
        return TaskContent(
            title=self.title,
            description=self.description,
            completed=self.completed,
            location=self.location,
            photo=self.photo,
        )

    def same_content(self, remote: RemoteTask) -> bool:
        """True if the record already mirrors ``remote``."""
        return (
            self.title == remote.title
            and self.description == remote.description
            and self.completed == remote.completed
            and self.location == remote.location
            and self.photo == remote.photo
            and self.created_at == remote.created_at
            and self.updated_at == remote.updated_at
        )

    def copy(self, **changes: Any) -> "Task":
        return replace(self, **changes)

    @classmethod
    def from_remote(cls, remote: RemoteTask) -> "Task":
        """Build a clean local record mirroring a server task."""
        return cls(
            identifier=RemoteId(remote.id),
            title=remote.title,
            description=remote.description,
            completed=remote.completed,
            location=remote.location,
            photo=remote.photo,
            created_at=remote.created_at,
            updated_at=remote.updated_at,
            dirty=False,
            deleted=False,
        )

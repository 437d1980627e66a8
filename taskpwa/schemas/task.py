"""Task schemas (wire format shared by the server API and the sync client)."""
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialised with camelCase keys, accepting both spellings."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class TaskContent(CamelModel):
    """The user-editable fields of a task, as sent on create/update."""

    title: str
    description: str = ""
    completed: bool = False
    location: Optional[Any] = None
    photo: Optional[Any] = None


class TaskUpdate(CamelModel):
    """Partial update; only fields present in the request are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    location: Optional[Any] = None
    photo: Optional[Any] = None


class RemoteTask(TaskContent):
    """A task as held by the server."""

    id: int
    created_at: int
    updated_at: int


class TaskListResponse(CamelModel):
    """Response of ``GET /api/tasks``."""

    ok: bool = True
    tasks: List[RemoteTask] = Field(default_factory=list)
    count: int = 0
    timestamp: int


class TaskResponse(CamelModel):
    """Response carrying a single task."""

    ok: bool = True
    task: RemoteTask
    message: Optional[str] = None


class TaskDeleteResponse(CamelModel):
    """Response of task deletion (``deleted`` is a flag or a count)."""

    ok: bool = True
    deleted: Any
    message: Optional[str] = None


class SyncItem(CamelModel):
    """One client task in a batch sync request."""

    id: Optional[int] = None
    # Browser clients send ``_localId``.
    local_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("localId", "_localId", "local_id"),
    )
    title: Optional[str] = None
    description: Optional[str] = None
    completed: Optional[bool] = None
    location: Optional[Any] = None
    photo: Optional[Any] = None
    created_at: Optional[int] = None

    @model_validator(mode="after")
    def check_identified(self) -> "SyncItem":
        if not self.id and not self.local_id:
            raise ValueError("Each task needs an id or a localId")
        return self


class SyncRequest(CamelModel):
    """Batch sync request body."""

    tasks: List[SyncItem] = Field(default_factory=list)


class IdMapping(CamelModel):
    """Local identifier to server identifier mapping."""

    local_id: str
    server_id: int


class SyncResponse(CamelModel):
    """Batch sync response."""

    ok: bool = True
    created: List[RemoteTask] = Field(default_factory=list)
    updated: List[RemoteTask] = Field(default_factory=list)
    mapping: List[IdMapping] = Field(default_factory=list)
    server_tasks: List[RemoteTask] = Field(default_factory=list)
    message: str = ""

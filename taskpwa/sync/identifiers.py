"""Task identifiers: client-generated placeholders and server-issued ids."""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class LocalId:
    """Client-generated identifier, never seen by the server."""

    token: str

    @classmethod
    def new(cls) -> "LocalId":
        return cls(uuid.uuid4().hex)

    def sort_key(self) -> Tuple[int, str]:
        return (0, self.token)

    def __str__(self) -> str:
        return f"Local({self.token})"


@dataclass(frozen=True)
class RemoteId:
    """Server-assigned integer identifier."""

    id: int

    def sort_key(self) -> Tuple[int, str]:
        return (1, f"{self.id:020d}")

    def __str__(self) -> str:
        return f"Remote({self.id})"


TaskIdentifier = Union[LocalId, RemoteId]

"""Local task CRUD operations."""
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskpwa.crud.base import CRUDBase
from taskpwa.models.local_task import LocalTaskRecord
from taskpwa.sync.identifiers import LocalId, RemoteId, TaskIdentifier


class CRUDLocalTask(CRUDBase[LocalTaskRecord, dict, dict]):
    """CRUD operations for LocalTaskRecord, addressed by task identifier."""

    @staticmethod
    def identifier_columns(identifier: TaskIdentifier) -> Dict[str, Any]:
        """Column values encoding ``identifier``."""
        if isinstance(identifier, LocalId):
            return {"local_token": identifier.token, "remote_id": None}
        return {"local_token": None, "remote_id": identifier.id}

    @staticmethod
    def identifier_of(record: LocalTaskRecord) -> TaskIdentifier:
        if record.remote_id is not None:
            return RemoteId(int(record.remote_id))
        return LocalId(record.local_token)

    async def get_by_identifier(self, db: AsyncSession, *, identifier: TaskIdentifier) -> Optional[LocalTaskRecord]:
        """Get the record holding ``identifier``."""
        if isinstance(identifier, LocalId):
            query = select(LocalTaskRecord).where(LocalTaskRecord.local_token == identifier.token)
        else:
            query = select(LocalTaskRecord).where(LocalTaskRecord.remote_id == identifier.id)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def list_ordered(self, db: AsyncSession) -> List[LocalTaskRecord]:
        """All records, oldest first."""
        return await self.get_multi(
            db,
            limit=None,
            order_by=LocalTaskRecord.created_at.asc(),
        )


local_task = CRUDLocalTask(LocalTaskRecord)

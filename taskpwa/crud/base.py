"""Generic CRUD operations."""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskpwa.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Base class with default async create/read/update/delete helpers."""

    def __init__(self, model: Type[ModelType]):
        self.model = model

    @staticmethod
    def _to_dict(obj_in: Union[BaseModel, Dict[str, Any]], *, exclude_unset: bool = False) -> Dict[str, Any]:
        if isinstance(obj_in, dict):
            return dict(obj_in)
        return obj_in.model_dump(exclude_unset=exclude_unset, mode="python")

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """Get a single row by primary key."""
        return await db.get(self.model, id)

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        limit: Optional[int] = 100,
        order_by: Optional[Any] = None,
    ) -> List[ModelType]:
        """List rows, optionally ordered and limited."""
        query = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        if limit is not None:
            query = query.limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """Insert a row."""
        db_obj = self.model(**self._to_dict(obj_in))
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        """Apply the given fields to ``db_obj``."""
        for field, value in self._to_dict(obj_in, exclude_unset=True).items():
            setattr(db_obj, field, value)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def remove(self, db: AsyncSession, *, id: Any) -> None:
        """Delete a row by primary key."""
        obj = await db.get(self.model, id)
        if obj is not None:
            await db.delete(obj)
            await db.commit()

    async def remove_all(self, db: AsyncSession) -> None:
        """Delete every row of the table."""
        await db.execute(delete(self.model))
        await db.commit()

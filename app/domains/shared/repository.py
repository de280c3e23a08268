"""Generic async repository over SQLAlchemy 2.0 models.

Concrete repositories bind a model class and add the queries their
domain needs on top of the CRUD primitives here.
"""

from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class GenericRepository(Generic[ModelType, CreateSchemaType]):
    """Async CRUD over a single model, keyed by its string id.

    Example:
        class ItineraryRepository(GenericRepository[ItineraryRecord, ItineraryCreate]):
            def __init__(self, session: AsyncSession):
                super().__init__(ItineraryRecord, session)
    """

    def __init__(self, model: type[ModelType], session: AsyncSession) -> None:
        self._model = model
        self._session = session

    @property
    def session(self) -> AsyncSession:
        """Get the database session."""
        return self._session

    @property
    def model(self) -> type[ModelType]:
        """Get the model class."""
        return self._model

    @staticmethod
    def _to_values(data: BaseModel | dict[str, Any]) -> dict[str, Any]:
        if isinstance(data, BaseModel):
            return data.model_dump(mode="python", exclude_unset=True)
        return dict(data)

    # ==================== CREATE ====================

    async def create(self, data: CreateSchemaType | dict[str, Any]) -> ModelType:
        """Insert a new row and return it with server defaults loaded."""
        db_obj = self._model(**self._to_values(data))
        self._session.add(db_obj)
        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj

    # ==================== READ ====================

    async def get_by_id(self, id: str) -> ModelType | None:
        """Get a record by its id, or None if it does not exist."""
        stmt = select(self._model).where(self._model.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def find_many(
        self,
        *conditions: Any,
        skip: int = 0,
        limit: int | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelType]:
        """Find records matching the conditions.

        Args:
            *conditions: SQLAlchemy filter conditions
            skip: Number of records to skip (offset)
            limit: Maximum number of records, or None for all
            order_by: Column or list of columns for ordering

        Returns:
            Sequence of model instances
        """
        stmt = select(self._model)
        if conditions:
            stmt = stmt.where(*conditions)
        stmt = self._apply_ordering(stmt, order_by)
        if skip:
            stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return result.scalars().all()

    # ==================== UPDATE ====================

    async def update(
        self,
        id: str,
        data: BaseModel | dict[str, Any],
    ) -> ModelType | None:
        """Apply a partial update to a record.

        Unknown keys are ignored. Returns None if the record does not exist.
        """
        db_obj = await self.get_by_id(id)
        if db_obj is None:
            return None

        for field, value in self._to_values(data).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await self._session.flush()
        await self._session.refresh(db_obj)
        return db_obj

    # ==================== Helpers ====================

    def _apply_ordering(
        self,
        stmt: Select[tuple[ModelType]],
        order_by: Any | None,
    ) -> Select[tuple[ModelType]]:
        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                return stmt.order_by(*order_by)
            return stmt.order_by(order_by)
        # Oldest first
        if hasattr(self._model, "created_at"):
            stmt = stmt.order_by(self._model.created_at.asc())
        return stmt

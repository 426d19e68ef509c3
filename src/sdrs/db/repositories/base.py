"""Generic DAO with common CRUD operations.

Every operation opens its own short-lived session from the session factory
and closes it before returning, so returned instances are detached. The
factory must be created with ``expire_on_commit=False``.

Usage:
    from sdrs.db.repositories.base import GenericDao

    class RuleDao(GenericDao[RetentionRule, int]):
        pass

    dao = RuleDao(session_factory)
    rule = await dao.get(rule_id)
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import structlog
from sqlalchemy import Select, func, select
from sqlalchemy.exc import MultipleResultsFound
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sdrs.core.exceptions import MultipleRecordsFoundError
from sdrs.db.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)
PKType = TypeVar("PKType", bound=int | str)

logger = structlog.get_logger("sdrs.db")


class GenericDao(Generic[ModelType, PKType]):
    """Generic data-access object for SQLAlchemy models.

    Type Parameters:
        ModelType: The SQLAlchemy model class
        PKType: The type of the primary key

    Attributes:
        model: The model class
        session_factory: Factory for the per-operation sessions
    """

    model: type[ModelType]

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        """Initialize the DAO.

        Args:
            session_factory: Async session factory (expire_on_commit=False)
        """
        self.session_factory = session_factory

    def __init_subclass__(cls, **kwargs):
        """Extract model type from generic parameter."""
        super().__init_subclass__(**kwargs)
        for base in getattr(cls, "__orig_bases__", []):
            args = getattr(base, "__args__", None)
            if args and len(args) >= 1:
                first_arg = args[0]
                if isinstance(first_arg, type) and issubclass(first_arg, Base):
                    cls.model = first_arg
                    break

    async def get(self, pk: PKType) -> ModelType | None:
        """Get a single record by primary key.

        Returns:
            Model instance or None if not found
        """
        async with self.session_factory() as session:
            return await session.get(self.model, pk)

    async def save(self, obj: ModelType) -> ModelType:
        """Insert a new record and return it with generated values loaded."""
        async with self.session_factory() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        logger.debug("record_saved", model=self.model.__name__)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Persist the state of a (possibly detached) instance.

        Returns:
            The persisted instance, refreshed from the database
        """
        async with self.session_factory() as session:
            merged = await session.merge(obj)
            await session.commit()
            await session.refresh(merged)
        logger.debug("record_updated", model=self.model.__name__)
        return merged

    async def delete(self, obj: ModelType) -> None:
        """Physically delete a record."""
        async with self.session_factory() as session:
            merged = await session.merge(obj)
            await session.delete(merged)
            await session.commit()

    async def list(
        self,
        *,
        limit: int = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[ModelType]:
        """List records with pagination.

        Args:
            limit: Maximum records to return
            offset: Number of records to skip
            order_by: Column name to order by (default: primary key)
            descending: Sort in descending order
        """
        stmt = select(self.model)

        col = getattr(self.model, order_by, None) if order_by else None
        if col is None:
            col = self._get_pk_column()
        stmt = stmt.order_by(col.desc() if descending else col)
        stmt = stmt.limit(limit).offset(offset)

        return await self._get_records(stmt)

    async def count(self) -> int:
        """Count total records."""
        stmt = select(func.count(self._get_pk_column()))
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar() or 0

    async def _get_single_record(self, stmt: Select[Any]) -> ModelType | None:
        """Execute a query expected to match at most one row.

        Returns:
            The matching instance, or None when nothing matches

        Raises:
            MultipleRecordsFoundError: If more than one row matches
        """
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            try:
                return result.scalar_one_or_none()
            except MultipleResultsFound as exc:
                raise MultipleRecordsFoundError(self.model.__name__) from exc

    async def _get_records(self, stmt: Select[Any]) -> list[Any]:
        """Execute a query and materialize all scalar results."""
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    def _get_pk_column(self):
        """Get the primary key column for this model.

        Raises:
            ValueError: If no primary key found
        """
        pk_cols = self.model.__mapper__.primary_key
        if not pk_cols:
            raise ValueError(f"No primary key found for {self.model.__name__}")
        return pk_cols[0]

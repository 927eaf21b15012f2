"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling, equality-filter queries and the
idempotent upsert shared by every mirrored entity.
"""

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from github_org_mirror.db.models import Base

# Generic type variable for model classes
ModelT = TypeVar("ModelT", bound=Base)

# (natural key, fields) pair accepted by bulk_upsert
UpsertOperation = tuple[Mapping[str, Any], Mapping[str, Any]]


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    All repositories inherit from this class to get consistent session
    management, equality-filter queries and upserts keyed by natural keys.

    Usage:
        class IssueRepository(BaseRepository[Issue]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Issue)

        issue, created = await repo.upsert(
            {"user_id": 1, "external_id": 42},
            {"title": "Crash on start", ...},
        )

    Concurrency:
        Runs for different users use separate sessions. When coroutines
        share one session, pass a shared write_lock to serialize flushes.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[ModelT],
        write_lock: asyncio.Lock | None = None,
    ) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
            write_lock: Optional lock to serialize write operations (shared across repos)
        """
        self._session = session
        self._model_class = model_class
        self._write_lock = write_lock

    @property
    def session(self) -> AsyncSession:
        """Access the underlying session."""
        return self._session

    @property
    def model_class(self) -> type[ModelT]:
        """The model class managed by this repository."""
        return self._model_class

    # -------------------------------------------------------------------------
    # Common Read Operations
    # -------------------------------------------------------------------------

    async def get_by_id(self, id: int) -> ModelT | None:
        """Get an entity by its primary key ID.

        Args:
            id: Primary key ID

        Returns:
            Entity or None if not found
        """
        return await self._session.get(self._model_class, id)

    def _filtered(self, filters: Mapping[str, Any]) -> Select[tuple[ModelT]]:
        """Build a SELECT with one equality condition per filter item."""
        stmt = select(self._model_class)
        for field_name, value in filters.items():
            column = getattr(self._model_class, field_name)
            stmt = stmt.where(column.is_(None) if value is None else column == value)
        return stmt

    async def find_one(self, **filters: Any) -> ModelT | None:
        """Get the first entity matching every filter.

        Args:
            **filters: Field name to value (equality)

        Returns:
            First matching entity or None
        """
        stmt = self._filtered(filters).order_by(self._model_class.id).limit(1)  # type: ignore[attr-defined]
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def find(self, limit: int | None = None, **filters: Any) -> list[ModelT]:
        """Get all entities matching every filter, in insertion order.

        Args:
            limit: Maximum number of entities to return
            **filters: Field name to value (equality)

        Returns:
            List of entities
        """
        stmt = self._filtered(filters).order_by(self._model_class.id)  # type: ignore[attr-defined]
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_documents(self, **filters: Any) -> int:
        """Count entities matching every filter.

        Args:
            **filters: Field name to value (equality)

        Returns:
            Number of matching entities
        """
        stmt = select(func.count()).select_from(self._filtered(filters).subquery())
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    # -------------------------------------------------------------------------
    # Common Write Operations
    # -------------------------------------------------------------------------

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (does not flush).

        Args:
            entity: Entity to add

        Returns:
            The same entity (for chaining)
        """
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes to the database.

        This executes SQL but does not commit the transaction.
        If a write_lock was provided, acquires it to serialize flushes.
        """
        if self._write_lock:
            async with self._write_lock:
                await self._session.flush()
        else:
            await self._session.flush()

    async def upsert(
        self,
        key: Mapping[str, Any],
        fields: Mapping[str, Any],
    ) -> tuple[ModelT, bool]:
        """Insert or update the entity identified by its natural key.

        Last write wins: every given field overwrites the stored value.
        Storage errors propagate to the caller without retry.

        Args:
            key: Natural key columns (e.g., user_id and external_id)
            fields: Remaining column values

        Returns:
            Tuple of (entity, created) where created is True if new
        """
        existing = await self.find_one(**key)
        if existing is None:
            entity = self._model_class(**key, **fields)
            self.add(entity)
            created = True
        else:
            entity = existing
            for field_name, value in fields.items():
                setattr(entity, field_name, value)
            created = False

        await self.flush()
        return entity, created

    async def bulk_upsert(
        self,
        operations: Iterable[UpsertOperation],
    ) -> list[tuple[ModelT, bool]]:
        """Apply several upserts in order.

        Operations are flushed one at a time so repeated keys inside the
        batch resolve to a single row.

        Args:
            operations: (key, fields) pairs

        Returns:
            (entity, created) per operation
        """
        return [await self.upsert(key, fields) for key, fields in operations]

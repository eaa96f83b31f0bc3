"""
Habit Tracker Backend — Habit Store
====================================

What:  Query/mutation interface over the `habits` table.
How:   Every public method opens its own session from the shared Database,
       runs one statement (or one select-then-write pair) and commits before
       returning. Nothing spans two method calls, so a caller that does
       delete_many() then insert_many() gets two independent commits.
Who:   Constructed once at startup with the Database; used by HabitService.

Filters are equality matches on the logical key:
    user_id   → Habit.user_id == user_id
    habit_id  → Habit.id == habit_id
Omitted filters match everything.

Error Handling:
    SQLAlchemy and driver connection errors are wrapped in StoreError with
    the driver's message. No retries.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from habittracker.database import Database
from habittracker.exceptions import StoreError
from habittracker.models.habit import Habit

logger = logging.getLogger(__name__)


def _error_message(exc: Exception) -> str:
    """Driver-level text for DBAPI errors, str(exc) for everything else."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc) or type(exc).__name__


class HabitStore:
    """Store-shaped operations on habit records."""

    def __init__(self, database: Database):
        self.database = database

    # ── Helpers ───────────────────────────────────────────────────────────

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self.database.session_factory() as session:
                yield session
        except (SQLAlchemyError, OSError) as exc:
            message = _error_message(exc)
            logger.error("Store %s failed: %s", operation, message)
            raise StoreError(message=message, operation=operation) from exc

    @staticmethod
    def _filtered(
        query: Select,
        user_id: Optional[str] = None,
        habit_id: Optional[int] = None,
    ) -> Select:
        if user_id is not None:
            query = query.where(Habit.user_id == user_id)
        if habit_id is not None:
            query = query.where(Habit.id == habit_id)
        return query

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find_many(
        self,
        user_id: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Habit]:
        """All records matching the filter, in store order."""
        query = self._filtered(select(Habit), user_id=user_id)
        if limit is not None:
            query = query.limit(limit)
        async with self._session("find_many") as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert_one(self, record: Dict[str, Any]) -> Habit:
        habit = Habit(**record)
        async with self._session("insert_one") as session:
            session.add(habit)
            await session.commit()
        return habit

    async def insert_many(self, records: Iterable[Dict[str, Any]]) -> List[Habit]:
        habits = [Habit(**record) for record in records]
        if not habits:
            return []
        async with self._session("insert_many") as session:
            session.add_all(habits)
            await session.commit()
        return habits

    async def find_one_and_update(
        self,
        user_id: str,
        habit_id: int,
        patch: Dict[str, Any],
    ) -> Optional[Habit]:
        """
        Apply `patch` to the first record matching (user_id, habit_id).

        Returns the updated record, or None when nothing matched.
        """
        query = self._filtered(select(Habit), user_id=user_id, habit_id=habit_id).limit(1)
        async with self._session("find_one_and_update") as session:
            habit = (await session.execute(query)).scalar_one_or_none()
            if habit is None:
                return None
            for field, value in patch.items():
                setattr(habit, field, value)
            await session.commit()
            await session.refresh(habit)
            return habit

    async def find_one_and_delete(self, user_id: str, habit_id: int) -> Optional[Habit]:
        """Remove the first record matching (user_id, habit_id), if any."""
        query = self._filtered(select(Habit), user_id=user_id, habit_id=habit_id).limit(1)
        async with self._session("find_one_and_delete") as session:
            habit = (await session.execute(query)).scalar_one_or_none()
            if habit is None:
                return None
            await session.delete(habit)
            await session.commit()
            return habit

    async def delete_many(self, user_id: str) -> int:
        """Delete every record owned by `user_id`. Returns the row count."""
        statement = delete(Habit).where(Habit.user_id == user_id)
        async with self._session("delete_many") as session:
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount or 0

    # ── Diagnostics ───────────────────────────────────────────────────────

    async def is_connected(self) -> bool:
        """True when a trivial query succeeds. Never raises."""
        try:
            await self.database.ping()
        except Exception as exc:
            logger.warning("Store connectivity check failed: %s", _error_message(exc))
            return False
        return True

    async def list_databases(self) -> List[str]:
        try:
            return await self.database.list_databases()
        except (SQLAlchemyError, OSError) as exc:
            message = _error_message(exc)
            logger.error("Store list_databases failed: %s", message)
            raise StoreError(message=message, operation="list_databases") from exc

    @property
    def database_name(self) -> Optional[str]:
        return self.database.name

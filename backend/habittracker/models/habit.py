"""
Habit Tracker Backend — Habit SQLAlchemy Model
===============================================

What:  ORM model representing the `habits` table.
How:   Inherits from the shared DeclarativeBase; created at startup by
       Database.create_all() when the table is missing.
Who:   Used by HabitStore for every find/insert/update/delete.

Table Design:
    - record_id: store-generated UUID primary key, exposed as `_id`.
      Lookups never use it; update/delete go through (user_id, id).
    - user_id + id: logical key. Indexed on user_id only and NOT unique;
      callers are responsible for not creating duplicates.
    - completion_history: JSON object of date-key → count.
    - created_at / updated_at: maintained here, never supplied by callers.
"""

import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from habittracker.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Habit(Base):
    """A single habit owned by one user."""

    __tablename__ = "habits"

    record_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)

    # Caller-assigned; unique only within a user, and only by convention.
    # BIGINT range, see schemas.habit.HABIT_ID_MIN/HABIT_ID_MAX
    id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    text: Mapped[str] = mapped_column(Text, nullable=False)

    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Caller-supplied display values, stored as given
    date_added: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    color_name: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)

    completion_history: Mapped[Dict[str, int]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        Index("idx_habits_user_id", "user_id"),
    )

    def __repr__(self) -> str:
        return f"<Habit(user_id='{self.user_id}', id={self.id}, completed={self.completed})>"

"""
Habit Tracker Backend — Pydantic Request/Response Schemas
==========================================================

What:  Pydantic models defining the JSON contract of the API.
How:   FastAPI validates request bodies against the request models and
       serializes responses through the response models (by alias, so the
       wire format is camelCase while Python code stays snake_case).

Request models perform the required-field checks that used to live in the
store's schema declarations. Coercion is lax on purpose: "5" is accepted
for an integer field and 123 for a string field.
"""

import uuid
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# Habit ids are stored as 64-bit signed integers (BIGINT)
HABIT_ID_MIN = -(2**63)
HABIT_ID_MAX = 2**63 - 1


class CamelModel(BaseModel):
    """Shared config: camelCase aliases, snake_case names also accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class HabitPayload(CamelModel):
    """Habit fields as sent by a client, without the owning user."""

    id: int = Field(
        ge=HABIT_ID_MIN,
        le=HABIT_ID_MAX,
        description="Caller-assigned identifier, unique per user",
    )
    text: str = Field(description="Habit description")
    completed: bool = Field(default=False)
    date_added: Optional[str] = Field(default=None, description="Uninterpreted date string")
    color_name: Optional[str] = Field(default=None, description="Display tag")
    completion_history: Dict[str, int] = Field(
        default_factory=dict,
        description="Date key → completion count",
    )


class HabitCreate(HabitPayload):
    """Body of POST /api/habits."""

    user_id: str = Field(description="Owning user")


# Fields that may legitimately be stored as null
_NULLABLE_FIELDS = {"date_added", "color_name"}


class HabitUpdate(CamelModel):
    """
    Body of PUT /api/habits/{id}.

    userId is required because it is half of the lookup key. Every other
    field is optional; only fields present in the body are written.
    """

    user_id: str = Field(description="Owning user, used to locate the record")
    id: Optional[int] = Field(default=None, ge=HABIT_ID_MIN, le=HABIT_ID_MAX)
    text: Optional[str] = None
    completed: Optional[bool] = None
    date_added: Optional[str] = None
    color_name: Optional[str] = None
    completion_history: Optional[Dict[str, int]] = None

    def to_patch(self) -> Dict[str, object]:
        """Fields to set on the matched record, keyed by column name."""
        patch = self.model_dump(exclude_unset=True, exclude={"user_id"})
        return {
            key: value
            for key, value in patch.items()
            if value is not None or key in _NULLABLE_FIELDS
        }


class SyncRequest(CamelModel):
    """Body of POST /api/habits/sync."""

    user_id: str
    habits: List[HabitPayload] = Field(default_factory=list)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class HabitResponse(CamelModel):
    """Full stored representation of a habit."""

    record_id: uuid.UUID = Field(alias="_id", description="Store-generated key")
    user_id: str
    id: int
    text: str
    completed: bool
    date_added: Optional[str] = None
    color_name: Optional[str] = None
    completion_history: Dict[str, int] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(CamelModel):
    message: str


class SyncResponse(CamelModel):
    """Count is the number of habits submitted, not a verified insert count."""

    message: str = "Habits synced successfully"
    count: int


class AdminHabitsResponse(CamelModel):
    total: int
    habits: List[HabitResponse]


class AdminUserHabitsResponse(CamelModel):
    user_id: str
    total: int
    habits: List[HabitResponse]


class DatabaseInfo(CamelModel):
    name: str


class DatabasesResponse(CamelModel):
    databases: List[DatabaseInfo]
    current_database: Optional[str] = None


class HealthResponse(CamelModel):
    """
    Process status plus store connectivity.

    The connectivity field keeps its historical name `mongodb` because
    existing clients read it.
    """

    status: str = "ok"
    mongodb: str = Field(description="Store connectivity: connected or disconnected")
    timestamp: datetime


class ErrorResponse(BaseModel):
    error: str = Field(description="Error message, exposed verbatim")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")

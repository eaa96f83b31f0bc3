"""
Habit Tracker Backend — Habit Service (Business Logic)
=======================================================

What:  The habit operations behind every route: list, create, update,
       delete, bulk sync, plus the diagnostic views.
How:   Translates validated request models into HabitStore calls and store
       records into response models. Holds no state besides the store.
Who:   Built per request by the `get_habit_service` dependency in routes.

Bulk Sync Consistency:
    sync_habits() runs delete_many() and insert_many() as two separate
    store commits. If the insert fails (or the process dies) after the
    delete, the user is left with zero habits. The reported count is the
    number of habits submitted, not the number inserted.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from habittracker.models.habit import Habit
from habittracker.schemas.habit import (
    AdminHabitsResponse,
    AdminUserHabitsResponse,
    DatabaseInfo,
    DatabasesResponse,
    HabitCreate,
    HabitResponse,
    HabitUpdate,
    HealthResponse,
    MessageResponse,
    SyncRequest,
    SyncResponse,
)
from habittracker.services.habit_store import HabitStore

logger = logging.getLogger(__name__)

# Upper bound for the "every user's habits" diagnostic listing
ADMIN_LIST_LIMIT = 100


def _to_response(habit: Habit) -> HabitResponse:
    return HabitResponse.model_validate(habit)


class HabitService:
    """
    Habit operations over a HabitStore.

    Error Handling Strategy:
        StoreError from the store propagates unchanged (→ 500). Payloads
        arrive already validated by the request models; the only extra
        check here is that sync habits are stamped with the sync user.
    """

    def __init__(self, store: HabitStore):
        self.store = store

    async def list_habits(self, user_id: str) -> List[HabitResponse]:
        """Every habit owned by `user_id`, in store order."""
        habits = await self.store.find_many(user_id=user_id)
        return [_to_response(habit) for habit in habits]

    async def create_habit(self, payload: HabitCreate) -> HabitResponse:
        """
        Insert one habit as given.

        Duplicate (userId, id) pairs are not rejected; the caller owns
        uniqueness of its own ids.
        """
        habit = await self.store.insert_one(payload.model_dump())
        logger.info("Created habit %s for user %s", habit.id, habit.user_id)
        return _to_response(habit)

    async def update_habit(
        self, habit_id: int, payload: HabitUpdate
    ) -> Optional[HabitResponse]:
        """
        Set the supplied fields on the first habit matching (habit_id, userId).

        Returns None when no habit matched; that is not an error.
        """
        habit = await self.store.find_one_and_update(
            user_id=payload.user_id,
            habit_id=habit_id,
            patch=payload.to_patch(),
        )
        if habit is None:
            logger.info("No habit %s for user %s to update", habit_id, payload.user_id)
            return None
        return _to_response(habit)

    async def delete_habit(self, habit_id: int, user_id: str) -> MessageResponse:
        """Remove the first matching habit. Confirms whether or not one existed."""
        deleted = await self.store.find_one_and_delete(user_id=user_id, habit_id=habit_id)
        if deleted is None:
            logger.info("No habit %s for user %s to delete", habit_id, user_id)
        return MessageResponse(message="Habit deleted")

    async def sync_habits(self, payload: SyncRequest) -> SyncResponse:
        """
        Replace all of a user's habits with the submitted list.

        Not transactional: see the module docstring.
        """
        removed = await self.store.delete_many(user_id=payload.user_id)

        if payload.habits:
            records = [
                {**habit.model_dump(), "user_id": payload.user_id}
                for habit in payload.habits
            ]
            await self.store.insert_many(records)

        logger.info(
            "Synced habits for user %s: removed %d, submitted %d",
            payload.user_id,
            removed,
            len(payload.habits),
        )
        return SyncResponse(message="Habits synced successfully", count=len(payload.habits))

    # ── Diagnostics ───────────────────────────────────────────────────────

    async def list_all_habits(self) -> AdminHabitsResponse:
        habits = await self.store.find_many(limit=ADMIN_LIST_LIMIT)
        return AdminHabitsResponse(
            total=len(habits),
            habits=[_to_response(habit) for habit in habits],
        )

    async def list_user_habits(self, user_id: str) -> AdminUserHabitsResponse:
        habits = await self.list_habits(user_id)
        return AdminUserHabitsResponse(user_id=user_id, total=len(habits), habits=habits)

    async def list_databases(self) -> DatabasesResponse:
        names = await self.store.list_databases()
        return DatabasesResponse(
            databases=[DatabaseInfo(name=name) for name in names],
            current_database=self.store.database_name,
        )

    async def health(self) -> HealthResponse:
        """Process status and store connectivity. Never raises."""
        connected = await self.store.is_connected()
        return HealthResponse(
            status="ok",
            mongodb="connected" if connected else "disconnected",
            timestamp=datetime.now(timezone.utc),
        )

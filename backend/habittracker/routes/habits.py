"""
Habit Tracker Backend — Habit Route Handlers
=============================================

What:  CRUD and bulk-sync endpoints under /api/habits.
How:   FastAPI validates path params and bodies against the request models,
       the handler delegates to HabitService, and the response model
       serializes the result as camelCase JSON.

Route Inventory:
    GET    /api/habits/{user_id}            list a user's habits
    POST   /api/habits                      create one habit (201)
    PUT    /api/habits/{habit_id}           update by (habit_id, body.userId)
    DELETE /api/habits/{habit_id}/{user_id} delete by (habit_id, user_id)
    POST   /api/habits/sync                 replace all of a user's habits

No route checks who the caller is. Update and delete trust the userId
they are given.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path

from habittracker.routes.dependencies import get_habit_service
from habittracker.schemas.habit import (
    HABIT_ID_MAX,
    HABIT_ID_MIN,
    ErrorResponse,
    HabitCreate,
    HabitResponse,
    HabitUpdate,
    MessageResponse,
    SyncRequest,
    SyncResponse,
)
from habittracker.services.habit_service import HabitService

router = APIRouter(prefix="/api/habits", tags=["Habits"])

_ERRORS = {
    400: {"description": "Malformed or incomplete payload", "model": ErrorResponse},
    500: {"description": "Habit store failure", "model": ErrorResponse},
}


@router.post(
    "/sync",
    response_model=SyncResponse,
    responses=_ERRORS,
    summary="Replace all habits of a user",
    description=(
        "Deletes every habit of `userId`, then inserts the submitted list with "
        "`userId` stamped onto each. The two steps are not atomic: a failure "
        "between them leaves the user with no habits."
    ),
)
async def sync_habits(
    payload: SyncRequest,
    service: HabitService = Depends(get_habit_service),
) -> SyncResponse:
    return await service.sync_habits(payload)


@router.get(
    "/{user_id}",
    response_model=List[HabitResponse],
    responses={500: _ERRORS[500]},
    summary="List a user's habits",
)
async def list_habits(
    user_id: str,
    service: HabitService = Depends(get_habit_service),
) -> List[HabitResponse]:
    return await service.list_habits(user_id)


@router.post(
    "",
    status_code=201,
    response_model=HabitResponse,
    responses=_ERRORS,
    summary="Create a habit",
)
async def create_habit(
    payload: HabitCreate,
    service: HabitService = Depends(get_habit_service),
) -> HabitResponse:
    return await service.create_habit(payload)


@router.put(
    "/{habit_id}",
    response_model=Optional[HabitResponse],
    responses=_ERRORS,
    summary="Update a habit",
    description=(
        "Finds the first habit matching the path id and the body's `userId` and "
        "sets the fields present in the body. Returns `null` when nothing matched."
    ),
)
async def update_habit(
    habit_id: Annotated[int, Path(ge=HABIT_ID_MIN, le=HABIT_ID_MAX)],
    payload: HabitUpdate,
    service: HabitService = Depends(get_habit_service),
) -> Optional[HabitResponse]:
    return await service.update_habit(habit_id, payload)


@router.delete(
    "/{habit_id}/{user_id}",
    response_model=MessageResponse,
    responses={500: _ERRORS[500]},
    summary="Delete a habit",
    description="Confirms deletion whether or not a matching habit existed.",
)
async def delete_habit(
    habit_id: Annotated[int, Path(ge=HABIT_ID_MIN, le=HABIT_ID_MAX)],
    user_id: str,
    service: HabitService = Depends(get_habit_service),
) -> MessageResponse:
    return await service.delete_habit(habit_id, user_id)

"""
Habit Tracker Backend — Admin/Diagnostic Route Handlers
========================================================

What:  Read-only diagnostic views across all users.
How:   Mounted by the application factory only when
       ADMIN_ENDPOINTS_ENABLED is set. There is no authentication, so the
       flag should stay off on any listener reachable from outside.

Route Inventory:
    GET /api/admin/all-habits        up to 100 habits of any user
    GET /api/admin/user/{user_id}    one user's habits with a total
    GET /api/admin/databases         logical databases on the store
"""

from fastapi import APIRouter, Depends

from habittracker.routes.dependencies import get_habit_service
from habittracker.schemas.habit import (
    AdminHabitsResponse,
    AdminUserHabitsResponse,
    DatabasesResponse,
    ErrorResponse,
)
from habittracker.services.habit_service import HabitService

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    responses={500: {"description": "Habit store failure", "model": ErrorResponse}},
)


@router.get(
    "/all-habits",
    response_model=AdminHabitsResponse,
    summary="List habits of every user (capped at 100)",
)
async def all_habits(
    service: HabitService = Depends(get_habit_service),
) -> AdminHabitsResponse:
    return await service.list_all_habits()


@router.get(
    "/user/{user_id}",
    response_model=AdminUserHabitsResponse,
    summary="List one user's habits with a total",
)
async def user_habits(
    user_id: str,
    service: HabitService = Depends(get_habit_service),
) -> AdminUserHabitsResponse:
    return await service.list_user_habits(user_id)


@router.get(
    "/databases",
    response_model=DatabasesResponse,
    summary="List logical databases visible to the store connection",
)
async def databases(
    service: HabitService = Depends(get_habit_service),
) -> DatabasesResponse:
    return await service.list_databases()

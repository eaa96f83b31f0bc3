"""
Habit Tracker Backend — Health Check Route
===========================================

What:  GET /api/health for monitoring and load balancer probes.
How:   Runs SELECT 1 against the store and reports the outcome.

The endpoint always answers 200 with status "ok"; an unreachable store is
reported as `"mongodb": "disconnected"` rather than as an error.
"""

from fastapi import APIRouter, Depends

from habittracker.routes.dependencies import get_habit_service
from habittracker.schemas.habit import HealthResponse
from habittracker.services.habit_service import HabitService

router = APIRouter(prefix="/api", tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="Reports process status, store connectivity and the current time.",
)
async def health_check(
    service: HabitService = Depends(get_habit_service),
) -> HealthResponse:
    return await service.health()

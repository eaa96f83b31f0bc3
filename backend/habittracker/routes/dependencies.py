"""
Habit Tracker Backend — Route Dependencies
===========================================

What:  FastAPI dependencies shared by the route modules.
How:   The application factory stores the single HabitStore on app.state;
       handlers receive a HabitService wrapping it through Depends().
"""

from fastapi import Request

from habittracker.services.habit_service import HabitService


def get_habit_service(request: Request) -> HabitService:
    """Per-request HabitService over the process-wide store."""
    return HabitService(request.app.state.store)

# Routes package init
"""
Habit Tracker Backend — API Routes Package
===========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - habits.py:  /api/habits CRUD and /api/habits/sync
    - admin.py:   /api/admin/* diagnostic views (behind a settings flag)
    - health.py:  GET /api/health

Routes stay thin: extract path params and bodies, call HabitService,
return the response model. Errors propagate to the global handlers.
"""

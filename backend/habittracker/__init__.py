"""
Habit Tracker Backend — Application Package
============================================

Layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        HabitService (logic)         │  ← request models → store calls
    ├─────────────────────────────────────┤
    │     HabitStore / Models & Schemas   │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │      Database (engine + pool)       │  ← one instance per process
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"

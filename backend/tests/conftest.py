"""
Habit Tracker Backend — Test Configuration (conftest.py)
=========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped):
    ├── test_settings:   Settings bound to a temp SQLite file, admin routes on
    ├── database:        Database with the habits table created
    ├── store:           HabitStore over `database`
    ├── mock_store:      HabitStore stand-in with AsyncMock methods
    ├── make_habit:      Factory for transient Habit ORM objects
    └── test_client:     HTTPX AsyncClient talking to an app built on `database`
"""

import os
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

# Override settings for testing BEFORE any app imports: importing
# habittracker.main builds a module-level app from the environment.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test-habits.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ADMIN_ENDPOINTS_ENABLED"] = "false"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from habittracker.config import Settings
from habittracker.database import Database
from habittracker.models.habit import Habit
from habittracker.services.habit_store import HabitStore


def sqlite_url(path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing at a fresh SQLite file, with admin routes mounted."""
    return Settings(
        database_url=sqlite_url(tmp_path / "habits.db"),
        admin_endpoints_enabled=True,
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database(test_settings):
    """A Database whose habits table exists; disposed after the test."""
    db = Database.from_settings(test_settings)
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
def store(database):
    return HabitStore(database)


@pytest.fixture
def mock_store():
    """
    A HabitStore stand-in for service unit tests.

    Every store coroutine is an AsyncMock; configure return values or
    side effects per test.
    """
    mocked = MagicMock(spec=HabitStore)
    mocked.find_many = AsyncMock(return_value=[])
    mocked.insert_one = AsyncMock()
    mocked.insert_many = AsyncMock(return_value=[])
    mocked.find_one_and_update = AsyncMock(return_value=None)
    mocked.find_one_and_delete = AsyncMock(return_value=None)
    mocked.delete_many = AsyncMock(return_value=0)
    mocked.is_connected = AsyncMock(return_value=True)
    mocked.list_databases = AsyncMock(return_value=[])
    mocked.database_name = "habittracker"
    return mocked


@pytest.fixture
def make_habit():
    """Build a transient Habit with every column populated."""

    def _make(user_id: str = "u1", habit_id: int = 1, text: str = "run", **fields) -> Habit:
        now = datetime.now(timezone.utc)
        values = {
            "record_id": uuid.uuid4(),
            "user_id": user_id,
            "id": habit_id,
            "text": text,
            "completed": False,
            "date_added": "2024-01-15",
            "color_name": "blue",
            "completion_history": {},
            "created_at": now,
            "updated_at": now,
        }
        values.update(fields)
        return Habit(**values)

    return _make


@pytest.fixture
def sample_habit_payload():
    """A complete create payload in wire (camelCase) form."""
    return {
        "userId": "u1",
        "id": 1,
        "text": "Drink water",
        "completed": False,
        "dateAdded": "2024-01-15",
        "colorName": "teal",
        "completionHistory": {"2024-01-15": 1, "2024-01-16": 2},
    }


@pytest_asyncio.fixture
async def test_client(test_settings, database):
    """
    Async HTTP client for endpoint tests.

    Uses ASGITransport to route requests straight into an app built on the
    test database (the lifespan does not run; the table already exists).
    """
    from habittracker.main import create_app

    app = create_app(settings=test_settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

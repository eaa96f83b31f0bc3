"""
Habit Tracker Backend — Habit Service Unit Tests
=================================================

What:  HabitService business rules with a mocked HabitStore.
How:   `mock_store` (conftest) replaces every store coroutine with an
       AsyncMock; `make_habit` builds the ORM objects the store would return.

What we test:
    ✅ Sync deletes then inserts, stamping the sync user onto every habit
    ✅ Sync count is the submitted count, not an insert count
    ✅ Sync insert failure after the delete leaves the delete applied
    ✅ Update/delete of a missing key are not errors
    ✅ Admin listing is capped, health never raises
"""

from unittest.mock import MagicMock, call

import pytest

from habittracker.exceptions import StoreError
from habittracker.schemas.habit import HabitCreate, HabitUpdate, SyncRequest
from habittracker.services.habit_service import ADMIN_LIST_LIMIT, HabitService


class TestCreateAndList:

    def setup_method(self):
        self.payload = HabitCreate(userId="u1", id=1, text="run")

    @pytest.mark.asyncio
    async def test_create_passes_full_record(self, mock_store, make_habit):
        mock_store.insert_one.return_value = make_habit("u1", 1, "run")
        service = HabitService(mock_store)

        result = await service.create_habit(self.payload)

        mock_store.insert_one.assert_awaited_once_with(
            {
                "user_id": "u1",
                "id": 1,
                "text": "run",
                "completed": False,
                "date_added": None,
                "color_name": None,
                "completion_history": {},
            }
        )
        assert result.user_id == "u1"
        assert result.text == "run"

    @pytest.mark.asyncio
    async def test_create_propagates_store_error(self, mock_store):
        mock_store.insert_one.side_effect = StoreError(message="connection refused")
        service = HabitService(mock_store)

        with pytest.raises(StoreError, match="connection refused"):
            await service.create_habit(self.payload)

    @pytest.mark.asyncio
    async def test_list_habits(self, mock_store, make_habit):
        mock_store.find_many.return_value = [make_habit("u1", 1), make_habit("u1", 2)]
        service = HabitService(mock_store)

        result = await service.list_habits("u1")

        mock_store.find_many.assert_awaited_once_with(user_id="u1")
        assert [h.id for h in result] == [1, 2]


class TestUpdateAndDelete:

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, mock_store):
        service = HabitService(mock_store)

        result = await service.update_habit(5, HabitUpdate(userId="u1", text="walk"))

        assert result is None
        mock_store.find_one_and_update.assert_awaited_once_with(
            user_id="u1", habit_id=5, patch={"text": "walk"}
        )

    @pytest.mark.asyncio
    async def test_update_returns_updated_habit(self, mock_store, make_habit):
        mock_store.find_one_and_update.return_value = make_habit("u1", 5, "walk", completed=True)
        service = HabitService(mock_store)

        result = await service.update_habit(5, HabitUpdate(userId="u1", completed=True))

        assert result.completed is True
        assert result.text == "walk"

    @pytest.mark.asyncio
    async def test_delete_missing_still_confirms(self, mock_store):
        service = HabitService(mock_store)

        result = await service.delete_habit(42, "u1")

        assert result.message == "Habit deleted"
        mock_store.find_one_and_delete.assert_awaited_once_with(user_id="u1", habit_id=42)

    @pytest.mark.asyncio
    async def test_delete_store_error_propagates(self, mock_store):
        mock_store.find_one_and_delete.side_effect = StoreError(message="boom")
        service = HabitService(mock_store)

        with pytest.raises(StoreError):
            await service.delete_habit(1, "u1")


class TestSync:

    @pytest.mark.asyncio
    async def test_sync_deletes_then_inserts_with_user_stamped(self, mock_store):
        mock_store.delete_many.return_value = 3
        order = MagicMock()
        order.attach_mock(mock_store.delete_many, "delete_many")
        order.attach_mock(mock_store.insert_many, "insert_many")
        service = HabitService(mock_store)

        payload = SyncRequest(
            userId="u1",
            habits=[{"id": 1, "text": "run"}, {"id": 2, "text": "read", "userId": "someone-else"}],
        )
        result = await service.sync_habits(payload)

        assert result.count == 2
        assert result.message == "Habits synced successfully"
        assert [name for name, _, _ in order.mock_calls] == ["delete_many", "insert_many"]
        assert order.mock_calls[0] == call.delete_many(user_id="u1")

        records = mock_store.insert_many.await_args.args[0]
        assert [r["user_id"] for r in records] == ["u1", "u1"]
        assert [r["id"] for r in records] == [1, 2]
        assert [r["text"] for r in records] == ["run", "read"]

    @pytest.mark.asyncio
    async def test_sync_empty_only_deletes(self, mock_store):
        service = HabitService(mock_store)

        result = await service.sync_habits(SyncRequest(userId="u1", habits=[]))

        assert result.count == 0
        mock_store.delete_many.assert_awaited_once_with(user_id="u1")
        mock_store.insert_many.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_sync_count_is_submitted_count(self, mock_store):
        """The store's own insert result is not consulted."""
        mock_store.insert_many.return_value = []
        service = HabitService(mock_store)

        result = await service.sync_habits(
            SyncRequest(userId="u1", habits=[{"id": i, "text": "t"} for i in range(4)])
        )

        assert result.count == 4

    @pytest.mark.asyncio
    async def test_sync_insert_failure_after_delete(self, mock_store):
        """No rollback: the delete has already been applied when the insert fails."""
        mock_store.insert_many.side_effect = StoreError(message="insert failed")
        service = HabitService(mock_store)

        with pytest.raises(StoreError, match="insert failed"):
            await service.sync_habits(
                SyncRequest(userId="u1", habits=[{"id": 1, "text": "run"}])
            )

        mock_store.delete_many.assert_awaited_once_with(user_id="u1")

    @pytest.mark.asyncio
    async def test_sync_delete_failure_skips_insert(self, mock_store):
        mock_store.delete_many.side_effect = StoreError(message="delete failed")
        service = HabitService(mock_store)

        with pytest.raises(StoreError):
            await service.sync_habits(
                SyncRequest(userId="u1", habits=[{"id": 1, "text": "run"}])
            )

        mock_store.insert_many.assert_not_awaited()


class TestDiagnostics:

    @pytest.mark.asyncio
    async def test_list_all_habits_is_capped(self, mock_store, make_habit):
        mock_store.find_many.return_value = [make_habit("u1", 1), make_habit("u2", 1)]
        service = HabitService(mock_store)

        result = await service.list_all_habits()

        mock_store.find_many.assert_awaited_once_with(limit=ADMIN_LIST_LIMIT)
        assert ADMIN_LIST_LIMIT == 100
        assert result.total == 2

    @pytest.mark.asyncio
    async def test_list_user_habits(self, mock_store, make_habit):
        mock_store.find_many.return_value = [make_habit("u3", 1)]
        service = HabitService(mock_store)

        result = await service.list_user_habits("u3")

        assert result.user_id == "u3"
        assert result.total == 1

    @pytest.mark.asyncio
    async def test_list_databases(self, mock_store):
        mock_store.list_databases.return_value = ["habittracker", "postgres"]
        service = HabitService(mock_store)

        result = await service.list_databases()

        assert [d.name for d in result.databases] == ["habittracker", "postgres"]
        assert result.current_database == "habittracker"

    @pytest.mark.asyncio
    async def test_health_connected(self, mock_store):
        result = await HabitService(mock_store).health()
        assert result.status == "ok"
        assert result.mongodb == "connected"
        assert result.timestamp is not None

    @pytest.mark.asyncio
    async def test_health_disconnected(self, mock_store):
        mock_store.is_connected.return_value = False
        result = await HabitService(mock_store).health()
        assert result.status == "ok"
        assert result.mongodb == "disconnected"

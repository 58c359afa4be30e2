import asyncio
import unittest
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

from leads import repository as leads_repository
from listings import importer


class FakeConnection:
    """
    Records BEGIN/COMMIT/ROLLBACK for the outer transaction and every
    nested `conn.transaction()` savepoint.
    """

    def __init__(self):
        self.events: list[str] = []

    def transaction(self):
        return FakeSavepoint(self)


class FakeSavepoint:
    def __init__(self, conn: FakeConnection):
        self.conn = conn

    async def __aenter__(self):
        self.conn.events.append("savepoint")
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.conn.events.append("rollback_savepoint" if exc_type else "release_savepoint")
        return False


def fake_transaction(conn: FakeConnection):
    @asynccontextmanager
    async def transaction():
        conn.events.append("begin")
        try:
            yield conn
        except BaseException:
            conn.events.append("rollback")
            raise
        conn.events.append("commit")

    return transaction


def place(place_id: str, **extra) -> dict:
    return dict({"place_id": place_id, "name": f"Place {place_id}", "types": ["cafe"]}, **extra)


class ImportTransactionTests(unittest.TestCase):
    def setUp(self):
        self.conn = FakeConnection()
        patcher = patch("core.db.transaction", new=fake_transaction(self.conn))
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_failed_item_rolls_back_only_its_savepoint(self):
        upsert = AsyncMock(side_effect=[True, RuntimeError("value too long"), False])
        with patch("listings.repository.upsert_place", new=upsert):
            stats = asyncio.run(importer.import_places([place("a"), place("b"), place("c")]))

        self.assertEqual(
            self.conn.events,
            [
                "begin",
                "savepoint",
                "release_savepoint",
                "savepoint",
                "rollback_savepoint",
                "savepoint",
                "release_savepoint",
                "commit",
            ],
        )
        self.assertEqual(upsert.await_count, 3)
        self.assertEqual((stats.processed, stats.inserted, stats.updated), (3, 1, 1))
        self.assertEqual(stats.errors, [{"google_place_id": "b", "error": "value too long"}])

        response = stats.as_response()
        self.assertEqual(response["failed"], 1)
        self.assertEqual(response["inserted"] + response["updated"] + response["failed"], response["processed"])

    def test_child_row_failure_discards_the_upserted_listing(self):
        raw = place("a", reviews=[{"author_name": "Kim", "rating": 5}])
        with patch("listings.repository.upsert_place", new=AsyncMock(return_value=True)), patch(
            "listings.repository.replace_reviews", new=AsyncMock(side_effect=RuntimeError("bad review"))
        ):
            stats = asyncio.run(importer.import_places([raw, place("b")]))

        self.assertIn("rollback_savepoint", self.conn.events)
        self.assertEqual(self.conn.events[-1], "commit")
        self.assertEqual((stats.inserted, stats.updated, len(stats.errors)), (1, 0, 1))

    def test_invalid_entries_are_reported_without_touching_the_database(self):
        upsert = AsyncMock(return_value=True)
        with patch("listings.repository.upsert_place", new=upsert):
            stats = asyncio.run(importer.import_places(["not-an-object", {"place_id": "x"}, place("ok")]))

        upsert.assert_awaited_once()
        self.assertEqual(stats.inserted, 1)
        self.assertEqual(len(stats.errors), 2)
        self.assertEqual(stats.errors[1]["google_place_id"], "x")

    def test_child_rows_replaced_on_the_batch_connection(self):
        raw = place(
            "a",
            photos=[{"photo_reference": "p1"}],
            opening_hours={"periods": [{"open": {"day": 1, "time": "0900"}, "close": {"day": 1, "time": "1700"}}]},
        )
        with patch("listings.repository.upsert_place", new=AsyncMock(return_value=False)), patch(
            "listings.repository.replace_photos", new=AsyncMock()
        ) as replace_photos, patch(
            "listings.repository.replace_opening_periods", new=AsyncMock()
        ) as replace_periods:
            stats = asyncio.run(importer.import_places([raw]))

        self.assertEqual(stats.updated, 1)
        self.assertIs(replace_photos.await_args.args[0], self.conn)
        self.assertEqual(replace_periods.await_args.args[1], "a")
        self.assertEqual(replace_periods.await_args.args[2][0]["open_time"], "0900")


class LeadUnreadFlagTests(unittest.TestCase):
    def setUp(self):
        self.conn = FakeConnection()
        patcher = patch("core.db.transaction", new=fake_transaction(self.conn))
        patcher.start()
        self.addCleanup(patcher.stop)

    def flag_recorder(self):
        async def execute(sql, *args, conn=None):
            self.conn.events.append(("execute", " ".join(sql.split()), args, conn))

        return AsyncMock(side_effect=execute)

    def flag_updates(self):
        return [event for event in self.conn.events if isinstance(event, tuple)]

    def test_create_flags_listing_inside_transaction(self):
        execute = self.flag_recorder()
        fetch_one = AsyncMock(side_effect=[{"ok": 1}, {"id": 31, "created_at": "2025-01-01"}])
        with patch("core.db.fetch_one", new=fetch_one), patch("core.db.execute", new=execute):
            row = asyncio.run(
                leads_repository.create_lead(listing_id=7, name="Ana", email="a@example.com", message="Hi")
            )

        self.assertEqual(row["id"], 31)
        updates = self.flag_updates()
        self.assertEqual(len(updates), 1)
        self.assertIn("SET has_unread_leads = TRUE", updates[0][1])
        self.assertEqual(updates[0][2], (7,))
        self.assertIs(updates[0][3], self.conn)
        self.assertEqual(self.conn.events[0], "begin")
        self.assertEqual(self.conn.events[-1], "commit")

    def test_create_for_missing_listing_writes_nothing(self):
        execute = self.flag_recorder()
        with patch("core.db.fetch_one", new=AsyncMock(return_value=None)) as fetch_one, patch(
            "core.db.execute", new=execute
        ):
            row = asyncio.run(
                leads_repository.create_lead(listing_id=70, name="Ana", email="a@example.com", message="Hi")
            )

        self.assertIsNone(row)
        fetch_one.assert_awaited_once()
        execute.assert_not_awaited()

    def test_status_change_recomputes_flag(self):
        execute = self.flag_recorder()
        row = {"id": 5, "listing_id": 3, "status": "read"}
        with patch("core.db.fetch_one", new=AsyncMock(return_value=row)), patch("core.db.execute", new=execute):
            asyncio.run(leads_repository.update_status(5, "read"))

        updates = self.flag_updates()
        self.assertEqual(len(updates), 1)
        self.assertIn("has_unread_leads = EXISTS", updates[0][1])
        self.assertEqual(updates[0][2], ([3],))
        self.assertIs(updates[0][3], self.conn)
        self.assertEqual(self.conn.events[-1], "commit")

    def test_bulk_status_recomputes_each_affected_listing_once(self):
        execute = self.flag_recorder()
        rows = [
            {"id": 1, "listing_id": 4, "status": "archived"},
            {"id": 2, "listing_id": 3, "status": "archived"},
            {"id": 3, "listing_id": 4, "status": "archived"},
        ]
        with patch("core.db.fetch_all", new=AsyncMock(return_value=rows)), patch("core.db.execute", new=execute):
            asyncio.run(leads_repository.bulk_update_status([1, 2, 3], "archived"))

        updates = self.flag_updates()
        self.assertEqual(len(updates), 1)
        self.assertEqual(updates[0][2], ([3, 4],))
        self.assertIs(updates[0][3], self.conn)

    def test_delete_recomputes_flag(self):
        execute = self.flag_recorder()
        with patch("core.db.fetch_one", new=AsyncMock(return_value={"listing_id": 9})), patch(
            "core.db.execute", new=execute
        ):
            self.assertTrue(asyncio.run(leads_repository.delete_lead(12)))

        updates = self.flag_updates()
        self.assertEqual(updates[0][2], ([9],))
        self.assertIs(updates[0][3], self.conn)

    def test_missing_lead_skips_recompute(self):
        execute = self.flag_recorder()
        with patch("core.db.fetch_one", new=AsyncMock(return_value=None)), patch("core.db.execute", new=execute):
            self.assertFalse(asyncio.run(leads_repository.delete_lead(12)))
            self.assertIsNone(asyncio.run(leads_repository.update_status(12, "read")))

        execute.assert_not_awaited()

    def test_failure_inside_transaction_rolls_back(self):
        with patch("core.db.fetch_one", new=AsyncMock(return_value={"listing_id": 9})), patch(
            "core.db.execute", new=AsyncMock(side_effect=RuntimeError("connection lost"))
        ):
            with self.assertRaises(RuntimeError):
                asyncio.run(leads_repository.delete_lead(12))

        self.assertEqual(self.conn.events, ["begin", "rollback"])


if __name__ == "__main__":
    unittest.main()

import sqlite3
import unittest

from packed_flags.examples.sqlite_users import (
    build_schema,
    create_users,
    find_users,
    load_record,
    save_record,
    update_users,
)


class TestSqliteUsers(unittest.TestCase):
    def setUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.schema = build_schema()
        create_users(
            self.conn,
            [("alice", 1), ("bob", 2), ("carol", 3), ("dave", 6), ("erin", 0)],
        )

    def tearDown(self) -> None:
        self.conn.close()

    def _bits(self) -> list[int]:
        return [row[0] for row in self.conn.execute("SELECT my_bits FROM users ORDER BY name")]

    def test_find_users_in_every_query_mode(self) -> None:
        desired = {"insane": True, "sensible": False}
        self.assertEqual(find_users(self.conn, self.schema, desired), ["bob", "carol"])
        self.assertEqual(
            find_users(self.conn, self.schema, desired, query_mode="in_list"), ["bob", "carol"]
        )
        self.assertEqual(
            find_users(
                self.conn, self.schema, {"seller": True, "sensible": True}, query_mode="bit_operator_or"
            ),
            ["alice", "carol", "dave"],
        )
        self.assertEqual(len(find_users(self.conn, self.schema, {})), 5)

    def test_update_users(self) -> None:
        count = update_users(self.conn, self.schema, {"insane": True, "sensible": False})
        self.assertEqual(count, 5)
        self.assertEqual(self._bits(), [3, 2, 3, 2, 2])

    def test_update_users_with_filter(self) -> None:
        count = update_users(
            self.conn, self.schema, {"seller": True}, where={"insane": True, "sensible": False}
        )
        self.assertEqual(count, 2)
        self.assertEqual(self._bits(), [1, 3, 3, 6, 0])
        self.assertEqual(update_users(self.conn, self.schema, {}), 0)

    def test_record_round_trip(self) -> None:
        record = load_record(self.conn, self.schema, "erin")
        record.set("sensible", True)
        save_record(self.conn, "erin", record)

        self.assertFalse(record.changed("sensible"))
        self.assertTrue(record.changed("sensible", scope="saved"))
        self.assertEqual(load_record(self.conn, self.schema, "erin").packed("my_bits"), 4)
        with self.assertRaises(LookupError):
            load_record(self.conn, self.schema, "nobody")


if __name__ == "__main__":
    unittest.main()

import unittest

from packed_flags.config import load_schema
from packed_flags.errors import ConfigurationError, UnknownFlagError
from packed_flags.record import BitfieldRecord


class TestAccessorRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.schema = load_schema(
            [
                {"column": "my_bits", "flags": {1: "seller", 2: "insane", 4: "sensible"}},
                {"column": "hidden", "flags": ["quiet"], "accessors": False, "scopes": False},
            ]
        )
        self.registry = self.schema.registry()

    def test_registry_is_built_once(self) -> None:
        self.assertIs(self.schema.registry(), self.registry)
        self.assertEqual(list(self.registry.accessors()), ["seller", "insane", "sensible"])
        self.assertEqual(list(self.registry.scopes()), ["seller", "insane", "sensible"])

    def test_scopes(self) -> None:
        scope = self.registry.scope("insane")
        self.assertEqual(scope.column, "my_bits")
        self.assertEqual(scope.where(), "(my_bits & 2) = 2")
        self.assertEqual(scope.where_not(), "(my_bits & 2) = 0")
        self.assertEqual(scope.where("users"), "(users.my_bits & 2) = 2")

    def test_accessors_drive_a_record(self) -> None:
        record = BitfieldRecord(self.schema, {"my_bits": 0, "hidden": 0})
        seller = self.registry.accessor("seller")

        self.assertFalse(seller.get(record))
        seller.set(record, True)
        self.assertTrue(seller.get(record))
        self.assertFalse(seller.was(record))
        self.assertTrue(seller.changed(record))
        self.assertEqual(seller.change(record), (False, True))
        self.assertTrue(seller.became_true(record))
        self.assertFalse(seller.became_false(record))

        record.commit()
        self.assertFalse(seller.changed(record))
        self.assertTrue(seller.changed(record, scope="saved"))
        self.assertTrue(seller.was(record))

    def test_disabled_kinds(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.registry.accessor("quiet")
        with self.assertRaises(ConfigurationError):
            self.registry.scope("quiet")

    def test_unknown_flag(self) -> None:
        with self.assertRaises(UnknownFlagError):
            self.registry.accessor("nope")
        with self.assertRaises(UnknownFlagError):
            self.registry.scope("nope")

    def test_duplicate_registration(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.registry.register_accessor(self.registry.accessor("seller"))
        with self.assertRaises(ConfigurationError):
            self.registry.register_scope(self.registry.scope("seller"))


if __name__ == "__main__":
    unittest.main()

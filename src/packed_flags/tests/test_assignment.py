import dataclasses
import unittest

from packed_flags.errors import ConfigurationError, UnknownFlagError
from packed_flags.schema.assignment import BitAssignment


class TestBitAssignment(unittest.TestCase):
    def test_explicit_weights(self) -> None:
        assignment = BitAssignment.build({1: "seller", 2: "insane", 4: "sensible"})
        self.assertEqual(assignment.weight_of("insane"), 2)
        self.assertEqual(assignment.name_of(4), "sensible")
        self.assertEqual(assignment.names(), ("seller", "insane", "sensible"))
        self.assertEqual(assignment.mask, 7)
        self.assertEqual(len(assignment), 3)
        self.assertIn("seller", assignment)
        self.assertNotIn("buyer", assignment)

    def test_names_follow_bit_position_not_declaration_order(self) -> None:
        assignment = BitAssignment.build({4: "c", 1: "a", 2: "b"})
        self.assertEqual(assignment.names(), ("a", "b", "c"))
        self.assertEqual(list(assignment), ["a", "b", "c"])
        self.assertEqual(assignment.items(), (("a", 1), ("b", 2), ("c", 4)))

    def test_list_is_auto_numbered(self) -> None:
        assignment = BitAssignment.build(["foo", "bar", "baz"])
        self.assertEqual(assignment.weight_of("foo"), 1)
        self.assertEqual(assignment.weight_of("bar"), 2)
        self.assertEqual(assignment.weight_of("baz"), 4)
        self.assertEqual(assignment.to_dict(), {1: "foo", 2: "bar", 4: "baz"})

    def test_gaps_are_allowed(self) -> None:
        assignment = BitAssignment.build({1: "a", 8: "d"})
        self.assertEqual(assignment.mask, 9)
        self.assertEqual(assignment.bit_of("d"), 3)
        self.assertEqual(assignment.mask_of(["d"]), 8)

    def test_equal_declarations_compare_equal(self) -> None:
        self.assertEqual(BitAssignment.build(["a", "b"]), BitAssignment.build({2: "b", 1: "a"}))
        self.assertNotEqual(
            BitAssignment.build(["a", "b"]), BitAssignment.build(["a", "b"], width=32)
        )

    def test_is_immutable(self) -> None:
        assignment = BitAssignment.build(["a"])
        with self.assertRaises(dataclasses.FrozenInstanceError):
            assignment.width = 8  # type: ignore[misc]

    def test_width_boundary(self) -> None:
        self.assertEqual(BitAssignment.build({128: "top"}, width=8).bit_of("top"), 7)
        with self.assertRaises(ConfigurationError):
            BitAssignment.build({256: "over"}, width=8)
        with self.assertRaises(ConfigurationError):
            BitAssignment.build([f"f{i}" for i in range(9)], width=8)
        self.assertEqual(len(BitAssignment.build([f"f{i}" for i in range(64)])), 64)

    def test_invalid_weights(self) -> None:
        for spec in ({3: "x"}, {0: "x"}, {-2: "x"}, {True: "x"}, {"1": "x"}):
            with self.subTest(spec=spec):
                with self.assertRaises(ConfigurationError):
                    BitAssignment.build(spec)

    def test_duplicates_are_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            BitAssignment.build({1: "a", 2: "a"})
        with self.assertRaises(ConfigurationError):
            BitAssignment.build(["a", "b", "a"])
        with self.assertRaises(ConfigurationError):
            BitAssignment(entries=(("a", 1), ("b", 1)))

    def test_invalid_specifications(self) -> None:
        for spec in ([], {}, "abc", [""], [None], 42):
            with self.subTest(spec=spec):
                with self.assertRaises(ConfigurationError):
                    BitAssignment.build(spec)  # type: ignore[arg-type]
        with self.assertRaises(ConfigurationError):
            BitAssignment.build(["a"], width=12)

    def test_unknown_lookups_carry_the_offender(self) -> None:
        assignment = BitAssignment.build(["a", "b"])
        with self.assertRaises(UnknownFlagError) as ctx:
            assignment.weight_of("nope")
        self.assertEqual(ctx.exception.flag, "nope")
        self.assertIn("nope", str(ctx.exception))
        self.assertIsInstance(ctx.exception, KeyError)

        with self.assertRaises(UnknownFlagError) as ctx:
            assignment.name_of(16)
        self.assertEqual(ctx.exception.flag, 16)
        self.assertIn("16", str(ctx.exception))
        self.assertEqual(ctx.exception.kind, "weight")

    def test_integer_used_as_a_name_is_reported_as_a_name(self) -> None:
        assignment = BitAssignment.build(["a", "b"])
        with self.assertRaises(UnknownFlagError) as ctx:
            assignment.weight_of(3)  # type: ignore[arg-type]
        self.assertEqual(ctx.exception.kind, "name")
        self.assertEqual(str(ctx.exception), "Unknown flag: 3")


if __name__ == "__main__":
    unittest.main()

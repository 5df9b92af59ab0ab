import typing
import unittest
from collections.abc import Mapping, Sequence

from tablecast import (
    RAW_MAPPING,
    RAW_SEQUENCE,
    RAW_TABLE,
    TEXT,
    DataTable,
    MappingOf,
    Scalar,
    SequenceOf,
    describe,
    mapping_of,
    nested_sequence_of,
    sequence_of,
    sequence_of_mapping,
    shape_of,
)


class TestShapeOf(unittest.TestCase):
    def test_plain_kinds_are_scalars(self) -> None:
        self.assertEqual(shape_of(int), Scalar(int))
        self.assertEqual(shape_of("Author"), Scalar("Author"))

    def test_shapes_pass_through(self) -> None:
        shape = SequenceOf(Scalar(int))
        self.assertIs(shape_of(shape), shape)

    def test_generic_hints(self) -> None:
        self.assertEqual(shape_of(list[int]), SequenceOf(Scalar(int)))
        self.assertEqual(shape_of(typing.List[str]), SequenceOf(TEXT))
        self.assertEqual(shape_of(typing.List["Thing"]), sequence_of("Thing"))
        self.assertEqual(shape_of(typing.Dict["Thing", int]), mapping_of("Thing", int))
        self.assertEqual(shape_of(Sequence[float]), SequenceOf(Scalar(float)))
        self.assertEqual(shape_of(dict[str, int]), MappingOf(TEXT, Scalar(int)))
        self.assertEqual(shape_of(Mapping[str, list[int]]), MappingOf(TEXT, SequenceOf(Scalar(int))))
        self.assertEqual(
            shape_of(list[dict[str, str]]), SequenceOf(MappingOf(TEXT, TEXT))
        )

    def test_bare_containers_are_raw(self) -> None:
        self.assertEqual(shape_of(list), RAW_SEQUENCE)
        self.assertEqual(shape_of(typing.List), RAW_SEQUENCE)
        self.assertEqual(shape_of(dict), RAW_MAPPING)
        self.assertEqual(shape_of(DataTable), RAW_TABLE)
        self.assertEqual(shape_of(list[list]), SequenceOf(RAW_SEQUENCE))


class TestShapeHelpers(unittest.TestCase):
    def test_helpers_build_structural_keys(self) -> None:
        self.assertEqual(sequence_of(int), SequenceOf(Scalar(int)))
        self.assertEqual(nested_sequence_of(int), SequenceOf(SequenceOf(Scalar(int))))
        self.assertEqual(mapping_of(str, int), MappingOf(TEXT, Scalar(int)))
        self.assertEqual(sequence_of_mapping(str, str), SequenceOf(MappingOf(TEXT, TEXT)))

    def test_shapes_are_hashable_keys(self) -> None:
        registry = {nested_sequence_of(int): "cells"}
        self.assertEqual(registry[SequenceOf(SequenceOf(Scalar(int)))], "cells")

    def test_describe(self) -> None:
        self.assertEqual(describe(TEXT), "str")
        self.assertEqual(describe(Scalar("Author")), "Author")
        self.assertEqual(describe(mapping_of(str, list[int])), "Map[str, List[int]]")
        self.assertEqual(describe(RAW_TABLE), "DataTable")
        self.assertEqual(describe(RAW_SEQUENCE), "List")
        self.assertEqual(describe(RAW_MAPPING), "Map")


if __name__ == "__main__":
    unittest.main()

import unittest
from decimal import Decimal

from tablecast import (
    CannotConvertToSequence,
    DuplicateTypeDefinition,
    TableCastConfig,
    TableTypeRegistry,
    cell_type,
    nested_sequence_of,
    sequence_of,
)


class TestTableTypeRegistry(unittest.TestCase):
    def test_lookup_is_by_structural_shape(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_cell(int, int)
        self.assertIs(registry.lookup(nested_sequence_of(int)), definition)
        self.assertIs(registry.lookup(list[list[int]]), definition)
        self.assertIsNone(registry.lookup(sequence_of(int)))

    def test_duplicate_definition_fails(self) -> None:
        registry = TableTypeRegistry([cell_type(int, int)])
        with self.assertRaises(DuplicateTypeDefinition):
            registry.define_cell(int, lambda cell: 0)

    def test_row_and_entry_share_a_shape(self) -> None:
        registry = TableTypeRegistry()
        registry.define_row("Point", tuple)
        with self.assertRaises(DuplicateTypeDefinition):
            registry.define_entry("Point", dict)

    def test_cell_converter_is_congruent(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_cell(int, int)
        self.assertEqual(definition.granularity, "cell")
        self.assertEqual(definition.transform([["1", "2"], ["3", "4"]]), [[1, 2], [3, 4]])

    def test_row_converter_calls_once_per_row(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_row("Pair", lambda row: "-".join(row))
        self.assertEqual(definition.transform([["a", "b"], ["c", "d"]]), ["a-b", "c-d"])

    def test_entry_converter_consumes_header(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_entry("Author", lambda entry: entry)
        result = definition.transform([["name", "born"], ["Ann", "1970"], ["Bo", None]])
        self.assertEqual(result, [{"name": "Ann", "born": "1970"}, {"name": "Bo", "born": None}])
        self.assertEqual(definition.transform([["name", "born"]]), [])

    def test_entry_converter_rejects_bad_headers(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_entry("Author", lambda entry: entry)
        with self.assertRaises(CannotConvertToSequence):
            definition.transform([["name", ""], ["Ann", "1970"]])
        with self.assertRaises(CannotConvertToSequence):
            definition.transform([["name", "name"], ["Ann", "1970"]])

    def test_table_converter_sees_whole_table(self) -> None:
        registry = TableTypeRegistry()
        definition = registry.define_table(int, lambda cells: len(cells))
        self.assertEqual(definition.granularity, "table")
        self.assertEqual(definition.transform([["a"], ["b"]]), 2)

    def test_placeholder_replacement_is_opt_in(self) -> None:
        registry = TableTypeRegistry(empty_placeholder="[blank]")
        plain = registry.define_cell(str, lambda cell: cell)
        replaced = registry.define_row("Row", list, replace_with_empty_string=True)
        self.assertEqual(plain.transform([["[blank]"]]), [["[blank]"]])
        self.assertEqual(replaced.transform([["[blank]", None, "x"]]), [["", None, "x"]])

    def test_placeholder_replacement_by_default(self) -> None:
        registry = TableTypeRegistry(replace_empty_by_default=True)
        definition = registry.define_cell(str, lambda cell: cell)
        self.assertEqual(definition.transform([["[empty]", "a"]]), [["", "a"]])


class TestBuiltinConverters(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = TableTypeRegistry.with_defaults(TableCastConfig())

    def test_builtins_are_cell_converters(self) -> None:
        for kind in (str, int, float, Decimal, bool):
            self.assertEqual(self.registry.lookup(nested_sequence_of(kind)).granularity, "cell")

    def test_builtin_parsing(self) -> None:
        ints = self.registry.lookup(nested_sequence_of(int))
        self.assertEqual(ints.transform([["1", "", None]]), [[1, None, None]])
        decimals = self.registry.lookup(nested_sequence_of(Decimal))
        self.assertEqual(decimals.transform([["1.10"]]), [[Decimal("1.10")]])
        bools = self.registry.lookup(nested_sequence_of(bool))
        self.assertEqual(bools.transform([["true", "False"]]), [[True, False]])
        text = self.registry.lookup(nested_sequence_of(str))
        self.assertEqual(text.transform([["", None]]), [["", None]])

    def test_invalid_cells_propagate_converter_errors(self) -> None:
        ints = self.registry.lookup(nested_sequence_of(int))
        with self.assertRaises(ValueError):
            ints.transform([["abc"]])

    def test_config_limits_builtins(self) -> None:
        registry = TableTypeRegistry.with_defaults(TableCastConfig(builtin_cell_kinds=("int",)))
        self.assertEqual(registry.shapes(), (nested_sequence_of(int),))

    def test_default_config_is_loaded_when_omitted(self) -> None:
        registry = TableTypeRegistry.with_defaults()
        self.assertEqual(len(registry.shapes()), 5)
        self.assertEqual(registry.empty_placeholder, "[empty]")


if __name__ == "__main__":
    unittest.main()

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from tablecast.config import TableCastConfig
from tablecast.errors import (
    CannotConvertTo,
    CannotConvertToMapping,
    CannotConvertToNestedSequence,
    CannotConvertToSequence,
    CannotConvertToSequenceOfMapping,
    ConversionError,
    InvalidArgument,
)
from tablecast.observability import Observability, get_observability
from tablecast.registry import Cells, TableTypeRegistry
from tablecast.shapes import (
    RAW_TABLE,
    MappingOf,
    RawMapping,
    SequenceOf,
    Shape,
    as_mapping,
    as_sequence,
    describe,
    shape_of,
)
from tablecast.table import DataTable


class TableConverter:
    """
    Converts a DataTable to the shape a caller asks for.

    The registry is consulted by exact shape. For a target of ``T`` the
    converter tries, in order: a converter registered for the whole target,
    a row (or entry) converter under ``List[T]``, then a cell converter under
    ``List[List[T]]``. Mappings split the table into a key column and value
    columns; lists of mappings split it into a header row and body rows.
    """

    def __init__(
        self, registry: TableTypeRegistry, observability: Observability | None = None
    ) -> None:
        self.registry = registry
        self._observability = observability

    @classmethod
    def with_defaults(
        cls,
        config: TableCastConfig | None = None,
        observability: Observability | None = None,
    ) -> TableConverter:
        return cls(TableTypeRegistry.with_defaults(config), observability)

    @property
    def observability(self) -> Observability:
        if self._observability is not None:
            return self._observability
        return get_observability()

    def convert(self, table: DataTable, shape: object, transposed: bool = False) -> Any:
        _require(table, "table")
        _require(shape, "shape")
        target = shape_of(shape)
        if transposed:
            table = table.transpose()
        path, action = self._dispatch(table, target)
        return self._observe(path, table, target, action, transposed=transposed)

    def to_scalar(self, table: DataTable, kind: object) -> Any:
        _require(table, "table")
        _require(kind, "kind")
        target = shape_of(kind)
        return self._observe("scalar", table, target, lambda: self._to_scalar(table, target))

    def to_sequence(self, table: DataTable, item: object) -> Sequence[Any]:
        _require(table, "table")
        _require(item, "item")
        target = shape_of(item)
        return self._observe(
            "sequence", table, SequenceOf(target), lambda: self._to_sequence(table, target)
        )

    def to_nested_sequence(self, table: DataTable, item: object) -> Sequence[Sequence[Any]]:
        _require(table, "table")
        _require(item, "item")
        target = shape_of(item)
        return self._observe(
            "nested_sequence",
            table,
            SequenceOf(SequenceOf(target)),
            lambda: self._to_nested_sequence(table, target),
        )

    def to_mapping(self, table: DataTable, key: object, value: object) -> Mapping[Any, Any]:
        _require(table, "table")
        _require(key, "key")
        _require(value, "value")
        key_shape, value_shape = shape_of(key), shape_of(value)
        return self._observe(
            "mapping",
            table,
            MappingOf(key_shape, value_shape),
            lambda: self._to_mapping(table, key_shape, value_shape),
        )

    def to_sequence_of_mapping(
        self, table: DataTable, key: object, value: object
    ) -> Sequence[Mapping[Any, Any]]:
        _require(table, "table")
        _require(key, "key")
        _require(value, "value")
        key_shape, value_shape = shape_of(key), shape_of(value)
        return self._observe(
            "sequence_of_mapping",
            table,
            SequenceOf(MappingOf(key_shape, value_shape)),
            lambda: self._to_sequence_of_mapping(table, key_shape, value_shape),
        )

    def _dispatch(self, table: DataTable, shape: Shape) -> tuple[str, Callable[[], Any]]:
        table_type = self.registry.lookup(shape)
        if table_type is not None:
            return "table", lambda: table_type.transform(table.cells())

        if shape == RAW_TABLE:
            return "raw", lambda: table

        mapping = as_mapping(shape)
        if mapping is not None:
            return "mapping", lambda: self._to_mapping(table, mapping.key, mapping.value)

        sequence = as_sequence(shape)
        if sequence is None:
            return "scalar", lambda: self._to_scalar(table, shape)

        item_mapping = as_mapping(sequence.item)
        if item_mapping is not None:
            return "sequence_of_mapping", lambda: self._to_sequence_of_mapping(
                table, item_mapping.key, item_mapping.value
            )

        item_sequence = as_sequence(sequence.item)
        if item_sequence is not None:
            return "nested_sequence", lambda: self._to_nested_sequence(table, item_sequence.item)

        return "sequence", lambda: self._to_sequence(table, sequence.item)

    def _observe(
        self,
        path: str,
        table: DataTable,
        target: Shape,
        action: Callable[[], Any],
        *,
        transposed: bool = False,
    ) -> Any:
        try:
            result = action()
        except ConversionError as exc:
            self.observability.record_failure(path=path, table=table, error=exc)
            raise
        self.observability.record_conversion(
            path=path, target=describe(target), table=table, transposed=transposed
        )
        return result

    def _to_scalar(self, table: DataTable, kind: Shape) -> Any:
        if table.is_empty():
            return None

        values = self._sequence_or_none(table.cells(), kind)
        if values is None:
            raise CannotConvertTo(
                kind,
                f"Please register a table, entry, row or cell converter for {describe(kind)}",
            )
        if not values:
            raise CannotConvertTo(kind, "The transform yielded no results")
        if len(values) == 1:
            return values[0]
        raise CannotConvertTo(kind, "The table contained more than one item")

    def _to_sequence(self, table: DataTable, item: Shape) -> Sequence[Any]:
        if table.is_empty():
            return ()

        values = self._sequence_or_none(table.cells(), item)
        if values is not None:
            return tuple(values)

        if table.width() > 1:
            raise CannotConvertToSequence(
                item, f"Please register an entry or row converter for {describe(item)}"
            )
        raise CannotConvertToSequence(
            item, f"Please register an entry, row or cell converter for {describe(item)}"
        )

    def _sequence_or_none(self, cells: Cells, item: Shape) -> list[Any] | None:
        row_type = self.registry.lookup(SequenceOf(item))
        if row_type is not None:
            return list(row_type.transform(cells))

        cell_type = self.registry.lookup(SequenceOf(SequenceOf(item)))
        if cell_type is not None:
            return _flatten(cell_type.transform(cells))
        return None

    def _to_nested_sequence(self, table: DataTable, item: Shape) -> Sequence[Sequence[Any]]:
        if table.is_empty():
            return ()

        cell_type = self.registry.lookup(SequenceOf(SequenceOf(item)))
        if cell_type is None:
            raise CannotConvertToNestedSequence(
                item, f"Please register a cell converter for {describe(item)}"
            )
        return tuple(tuple(row) for row in cell_type.transform(table.cells()))

    def _to_mapping(self, table: DataTable, key: Shape, value: Shape) -> Mapping[Any, Any]:
        _require_flat_key(key)
        if table.is_empty():
            return MappingProxyType({})

        key_column = table.columns(0, 1)
        value_columns = table.columns(1)
        first_header_cell = key_column.cell(0, 0)
        header_blank = first_header_cell is None or first_header_cell == ""

        keys = self._entry_keys(key_column, key, value, header_blank)

        if value_columns.is_empty():
            return _create_mapping(keys, [None] * len(keys), _mapping_error(key, value))

        keys_imply_row_converter = len(keys) == table.height() - 1
        values = self._entry_values(value_columns, key, value, keys_imply_row_converter)

        if len(keys) != len(values):
            raise _key_value_mismatch(header_blank, key, len(keys), value, len(values))
        return _create_mapping(keys, values, _mapping_error(key, value))

    def _entry_keys(
        self, key_column: DataTable, key: Shape, value: Shape, header_blank: bool
    ) -> list[Any]:
        if header_blank:
            cell_type = self.registry.lookup(SequenceOf(SequenceOf(key)))
            if cell_type is None:
                raise CannotConvertToMapping(
                    key, value, f"Please register a cell converter for {describe(key)}"
                )
            return _flatten(cell_type.transform(key_column.rows(1).cells()))

        keys = self._sequence_or_none(key_column.cells(), key)
        if keys is not None:
            return keys
        raise CannotConvertToMapping(
            key, value, f"Please register an entry, row or cell converter for {describe(key)}"
        )

    def _entry_values(
        self,
        value_columns: DataTable,
        key: Shape,
        value: Shape,
        keys_imply_row_converter: bool,
    ) -> list[Any]:
        # The value columns form a table of their own. Converting them
        # recurses at most once: mapping values become a list of mappings,
        # which only ever consults cell converters.
        value_mapping = as_mapping(value)
        if value_mapping is not None:
            return list(
                self._to_sequence_of_mapping(value_columns, value_mapping.key, value_mapping.value)
            )

        cells = value_columns.cells()
        row_type = self.registry.lookup(SequenceOf(value))
        if row_type is not None:
            return list(row_type.transform(cells))

        if keys_imply_row_converter:
            raise CannotConvertToMapping(
                key, value, f"Please register an entry converter for {describe(value)}"
            )

        # May produce several values per key when the table is wider than two columns.
        cell_type = self.registry.lookup(SequenceOf(SequenceOf(value)))
        if cell_type is not None:
            return _flatten(cell_type.transform(cells))

        raise CannotConvertToMapping(
            key, value, f"Please register an entry, row or cell converter for {describe(value)}"
        )

    def _to_sequence_of_mapping(
        self, table: DataTable, key: Shape, value: Shape
    ) -> Sequence[Mapping[Any, Any]]:
        _require_flat_key(key)
        if table.is_empty():
            return ()

        key_type = self.registry.lookup(SequenceOf(SequenceOf(key)))
        if key_type is None:
            raise CannotConvertToSequenceOfMapping(
                key, value, f"Please register a cell converter for {describe(key)}"
            )
        value_type = self.registry.lookup(SequenceOf(SequenceOf(value)))
        if value_type is None:
            raise CannotConvertToSequenceOfMapping(
                key, value, f"Please register a cell converter for {describe(value)}"
            )

        keys = _flatten(key_type.transform(table.rows(0, 1).cells()))
        body = table.rows(1)
        if body.is_empty():
            return ()

        def error(hint: str) -> ConversionError:
            return CannotConvertToSequenceOfMapping(key, value, hint)

        result = []
        for row_number, row in enumerate(value_type.transform(body.cells()), start=1):
            values = list(row)
            if len(keys) > len(values):
                raise error(
                    f"There are more keys than values in row {row_number}. "
                    f"The header has {len(keys)} keys but the row has {len(values)} values"
                )
            if len(values) > len(keys):
                raise error(
                    f"There are more values than keys in row {row_number}. "
                    f"The header has {len(keys)} keys but the row has {len(values)} values"
                )
            result.append(_create_mapping(keys, values, error))
        return tuple(result)


def _require(value: object, label: str) -> None:
    if value is None:
        raise InvalidArgument(f"{label} may not be None")


def _require_flat_key(key: Shape) -> None:
    if isinstance(key, (MappingOf, RawMapping)):
        raise InvalidArgument(f"mapping keys may not themselves be mappings: {describe(key)}")


def _flatten(rows: Iterable[Iterable[Any]]) -> list[Any]:
    flattened: list[Any] = []
    for row in rows:
        flattened.extend(row)
    return flattened


def _mapping_error(key: Shape, value: Shape) -> Callable[[str], ConversionError]:
    def error(hint: str) -> ConversionError:
        return CannotConvertToMapping(key, value, hint)

    return error


def _create_mapping(
    keys: Sequence[Any], values: Sequence[Any], error: Callable[[str], ConversionError]
) -> Mapping[Any, Any]:
    result: dict[Any, Any] = {}
    for key, value in zip(keys, values):
        try:
            duplicate = key in result
        except TypeError:
            raise error(f"Key {key!r} is not hashable") from None
        if duplicate:
            raise error(f"Encountered duplicate key {key} with values {result[key]} and {value}")
        result[key] = value
    return MappingProxyType(result)


def _key_value_mismatch(
    header_blank: bool, key: Shape, key_count: int, value: Shape, value_count: int
) -> ConversionError:
    if header_blank:
        return CannotConvertToMapping(
            key,
            value,
            "There are more values than keys. The first header cell was left blank. "
            "You can add a value there",
        )
    if key_count > value_count:
        return CannotConvertToMapping(
            key,
            value,
            "There are more keys than values. Did you use an entry converter for the value "
            "while using a row or cell converter for the keys?",
        )
    if key_count and value_count % key_count == 0:
        return CannotConvertToMapping(
            key,
            value,
            "There is more than one value per key. Did you mean to transform to "
            f"{describe(MappingOf(key, SequenceOf(value)))} instead?",
        )
    return CannotConvertToMapping(
        key,
        value,
        "There are more values than keys. Did you use an entry converter for the key "
        "while using a row or cell converter for the value?",
    )

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Literal

from tablecast.config import TableCastConfig, load_default_config
from tablecast.errors import CannotConvertToSequence, DuplicateTypeDefinition, InvalidArgument
from tablecast.shapes import (
    Shape,
    describe,
    nested_sequence_of,
    sequence_of,
    shape_of,
)
from tablecast.table import Cell

Granularity = Literal["table", "entry", "row", "cell"]
Cells = List[List[Cell]]
Transform = Callable[[Cells], object]


@dataclass(frozen=True)
class TableType:
    shape: Shape
    granularity: Granularity
    transform: Transform


def table_type(
    shape: object,
    fn: Callable[[Cells], object],
    *,
    placeholder: str | None = None,
) -> TableType:
    def transform(cells: Cells) -> object:
        return fn(_replace_placeholder(cells, placeholder))

    return TableType(shape=shape_of(shape), granularity="table", transform=transform)


def entry_type(
    kind: Hashable,
    fn: Callable[[Dict[str, Cell]], object],
    *,
    placeholder: str | None = None,
) -> TableType:
    """
    Row converter that consumes the header row.

    Every row below the header is handed to ``fn`` as a header-to-cell dict,
    so the output has one element fewer than the table has rows.
    """

    def transform(cells: Cells) -> list[object]:
        cells = _replace_placeholder(cells, placeholder)
        if not cells:
            return []
        header = _entry_header(kind, cells[0])
        return [fn(dict(zip(header, row))) for row in cells[1:]]

    return TableType(shape=sequence_of(kind), granularity="entry", transform=transform)


def row_type(
    kind: Hashable,
    fn: Callable[[List[Cell]], object],
    *,
    placeholder: str | None = None,
) -> TableType:
    def transform(cells: Cells) -> list[object]:
        return [fn(row) for row in _replace_placeholder(cells, placeholder)]

    return TableType(shape=sequence_of(kind), granularity="row", transform=transform)


def cell_type(
    kind: Hashable,
    fn: Callable[[Cell], object],
    *,
    placeholder: str | None = None,
) -> TableType:
    def transform(cells: Cells) -> list[list[object]]:
        return [[fn(cell) for cell in row] for row in _replace_placeholder(cells, placeholder)]

    return TableType(shape=nested_sequence_of(kind), granularity="cell", transform=transform)


def _replace_placeholder(cells: Cells, placeholder: str | None) -> Cells:
    if placeholder is None:
        return cells
    return [["" if cell == placeholder else cell for cell in row] for row in cells]


def _entry_header(kind: Hashable, header: Sequence[Cell]) -> list[str]:
    seen: set[str] = set()
    for cell in header:
        if not cell:
            raise CannotConvertToSequence(
                shape_of(kind), "The header row of an entry table may not contain blank cells"
            )
        if cell in seen:
            raise CannotConvertToSequence(
                shape_of(kind), f"The header row of an entry table contains duplicate column {cell}"
            )
        seen.add(cell)
    return list(header)  # type: ignore[arg-type]


@dataclass
class TableTypeRegistry:
    types: Dict[Shape, TableType]
    empty_placeholder: str
    replace_empty_by_default: bool

    def __init__(
        self,
        table_types: Sequence[TableType] = (),
        *,
        empty_placeholder: str = "[empty]",
        replace_empty_by_default: bool = False,
    ) -> None:
        self.types = {}
        self.empty_placeholder = empty_placeholder
        self.replace_empty_by_default = replace_empty_by_default
        for definition in table_types:
            self.define(definition)

    @classmethod
    def with_defaults(cls, config: TableCastConfig | None = None) -> TableTypeRegistry:
        if config is None:
            config = load_default_config()
        registry = cls(
            empty_placeholder=config.empty_placeholder,
            replace_empty_by_default=config.replace_empty_by_default,
        )
        for name in config.builtin_cell_kinds:
            kind, fn = _BUILTIN_CELL_CONVERTERS[name]
            registry.define_cell(kind, fn)
        return registry

    def define(self, definition: TableType) -> None:
        if definition.shape in self.types:
            existing = self.types[definition.shape]
            raise DuplicateTypeDefinition(
                f"a {existing.granularity} converter is already registered for "
                f"{describe(definition.shape)}"
            )
        self.types[definition.shape] = definition

    def define_table(
        self,
        shape: object,
        fn: Callable[[Cells], object],
        *,
        replace_with_empty_string: bool | None = None,
    ) -> TableType:
        definition = table_type(shape, fn, placeholder=self._placeholder(replace_with_empty_string))
        self.define(definition)
        return definition

    def define_entry(
        self,
        kind: Hashable,
        fn: Callable[[Dict[str, Cell]], object],
        *,
        replace_with_empty_string: bool | None = None,
    ) -> TableType:
        definition = entry_type(kind, fn, placeholder=self._placeholder(replace_with_empty_string))
        self.define(definition)
        return definition

    def define_row(
        self,
        kind: Hashable,
        fn: Callable[[List[Cell]], object],
        *,
        replace_with_empty_string: bool | None = None,
    ) -> TableType:
        definition = row_type(kind, fn, placeholder=self._placeholder(replace_with_empty_string))
        self.define(definition)
        return definition

    def define_cell(
        self,
        kind: Hashable,
        fn: Callable[[Cell], object],
        *,
        replace_with_empty_string: bool | None = None,
    ) -> TableType:
        definition = cell_type(kind, fn, placeholder=self._placeholder(replace_with_empty_string))
        self.define(definition)
        return definition

    def lookup(self, shape: object) -> TableType | None:
        if shape is None:
            raise InvalidArgument("shape may not be None")
        return self.types.get(shape_of(shape))

    def shapes(self) -> Sequence[Shape]:
        return tuple(self.types)

    def _placeholder(self, replace_with_empty_string: bool | None) -> str | None:
        if replace_with_empty_string is None:
            replace_with_empty_string = self.replace_empty_by_default
        return self.empty_placeholder if replace_with_empty_string else None


def _text(cell: Cell) -> Cell:
    return cell


def _optional(parse: Callable[[str], object]) -> Callable[[Cell], object]:
    def convert(cell: Cell) -> object:
        if cell is None or cell == "":
            return None
        return parse(cell)

    return convert


def _parse_bool(text: str) -> bool:
    lowered = text.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise ValueError(f"invalid bool cell: {text}")


_BUILTIN_CELL_CONVERTERS: Mapping[str, tuple[type, Callable[[Cell], object]]] = {
    "str": (str, _text),
    "int": (int, _optional(int)),
    "float": (float, _optional(float)),
    "decimal": (Decimal, _optional(Decimal)),
    "bool": (bool, _optional(_parse_bool)),
}

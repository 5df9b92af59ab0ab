from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional, Tuple

from tablecast.errors import InvalidArgument

Cell = Optional[str]
Row = Tuple[Cell, ...]


@dataclass(frozen=True)
class DataTable:
    """
    Immutable rectangular grid of text cells.

    Invariants:
    - every row has the same width.
    - a cell is either a string or None (an absent cell).
    - slicing and transposing return new tables; nothing mutates in place.
    """

    raw: Tuple[Row, ...]

    def __post_init__(self) -> None:
        widths = {len(row) for row in self.raw}
        if len(widths) > 1:
            raise InvalidArgument(
                f"table is not rectangular: found row widths {sorted(widths)}"
            )
        for row_index, row in enumerate(self.raw):
            for column_index, cell in enumerate(row):
                if cell is not None and not isinstance(cell, str):
                    raise InvalidArgument(
                        f"cell ({row_index}, {column_index}) must be str or None, "
                        f"got {type(cell).__name__}"
                    )

    @classmethod
    def from_rows(cls, rows: Iterable[Iterable[Cell]]) -> DataTable:
        if rows is None:
            raise InvalidArgument("rows may not be None")
        return cls(tuple(tuple(row) for row in rows))

    @classmethod
    def empty(cls) -> DataTable:
        return cls(())

    def is_empty(self) -> bool:
        return self.height() == 0 or self.width() == 0

    def height(self) -> int:
        return len(self.raw)

    def width(self) -> int:
        if not self.raw:
            return 0
        return len(self.raw[0])

    def cell(self, row: int, column: int) -> Cell:
        if not 0 <= row < self.height() or not 0 <= column < self.width():
            raise IndexError(
                f"cell ({row}, {column}) outside table of {self.height()}x{self.width()}"
            )
        return self.raw[row][column]

    def cells(self) -> list[list[Cell]]:
        return [list(row) for row in self.raw]

    def row(self, index: int) -> Row:
        if not 0 <= index < self.height():
            raise IndexError(f"row {index} outside table of height {self.height()}")
        return self.raw[index]

    def column(self, index: int) -> Row:
        if not 0 <= index < self.width():
            raise IndexError(f"column {index} outside table of width {self.width()}")
        return tuple(row[index] for row in self.raw)

    def rows(self, start: int, end: int | None = None) -> DataTable:
        end = self.height() if end is None else end
        _check_range(start, end, self.height(), "row")
        return DataTable(self.raw[start:end])

    def columns(self, start: int, end: int | None = None) -> DataTable:
        end = self.width() if end is None else end
        _check_range(start, end, self.width(), "column")
        return DataTable(tuple(row[start:end] for row in self.raw))

    def subtable(
        self, top: int, left: int, bottom: int | None = None, right: int | None = None
    ) -> DataTable:
        return self.rows(top, bottom).columns(left, right)

    def transpose(self) -> DataTable:
        if not self.raw:
            return self
        return DataTable(tuple(zip(*self.raw)))

    def __str__(self) -> str:
        lines = []
        for row in self.raw:
            rendered = " | ".join("" if cell is None else cell for cell in row)
            lines.append(f"| {rendered} |")
        return "\n".join(lines)


def _check_range(start: int, end: int, size: int, label: str) -> None:
    if start < 0 or end > size or start > end:
        raise IndexError(f"{label} range [{start}, {end}) outside [0, {size}]")

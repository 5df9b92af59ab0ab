from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

BUILTIN_CELL_KINDS: Sequence[str] = ("str", "int", "float", "decimal", "bool")


@dataclass(frozen=True)
class TableCastConfig:
    empty_placeholder: str = "[empty]"
    replace_empty_by_default: bool = False
    builtin_cell_kinds: Sequence[str] = BUILTIN_CELL_KINDS


def validate_config(config: TableCastConfig) -> None:
    if not isinstance(config.empty_placeholder, str) or not config.empty_placeholder:
        raise ValueError("empty_placeholder must be a non-empty string")
    if not isinstance(config.replace_empty_by_default, bool):
        raise ValueError("replace_empty_by_default must be a boolean")
    _validate_builtin_cell_kinds(config.builtin_cell_kinds)


def _validate_builtin_cell_kinds(kinds: Sequence[str]) -> None:
    seen: set[str] = set()
    for kind in kinds:
        if kind not in BUILTIN_CELL_KINDS:
            raise ValueError(f"unknown builtin cell kind: {kind}")
        if kind in seen:
            raise ValueError(f"duplicate builtin cell kind: {kind}")
        seen.add(kind)

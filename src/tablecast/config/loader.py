from __future__ import annotations

import importlib
from collections.abc import Mapping, Sequence
from importlib import resources
from pathlib import Path

from tablecast.config.schema import TableCastConfig, validate_config

_ROOT_KEYS = {"empty_placeholder", "replace_empty_by_default", "builtin_cell_kinds"}


def load_default_config() -> TableCastConfig:
    text = (
        resources.files("tablecast.config")
        .joinpath("default.yaml")
        .read_text(encoding="utf-8")
    )
    return parse_config(_load_payload(text, "tablecast default config"))


def load_config(path: str | Path) -> TableCastConfig:
    text = Path(path).read_text(encoding="utf-8")
    return parse_config(_load_payload(text, f"tablecast config {path}"))


def _load_payload(text: str, label: str) -> Mapping[str, object]:
    yaml = importlib.import_module("yaml")
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"{label} must be a mapping")
    return data


def parse_config(payload: Mapping[str, object]) -> TableCastConfig:
    _reject_unknown(payload, _ROOT_KEYS, "tablecast config")
    defaults = TableCastConfig()
    empty_placeholder = payload.get("empty_placeholder", defaults.empty_placeholder)
    replace_empty_by_default = payload.get(
        "replace_empty_by_default", defaults.replace_empty_by_default
    )
    builtin_cell_kinds = payload.get("builtin_cell_kinds", defaults.builtin_cell_kinds)
    if not isinstance(empty_placeholder, str) or not empty_placeholder:
        raise ValueError("empty_placeholder must be a non-empty string")
    if not isinstance(replace_empty_by_default, bool):
        raise ValueError("replace_empty_by_default must be a boolean")
    if not isinstance(builtin_cell_kinds, Sequence) or isinstance(
        builtin_cell_kinds, (str, bytes)
    ):
        raise ValueError("builtin_cell_kinds must be a list")
    config = TableCastConfig(
        empty_placeholder=empty_placeholder,
        replace_empty_by_default=replace_empty_by_default,
        builtin_cell_kinds=tuple(
            _require_str(item, "builtin_cell_kinds") for item in builtin_cell_kinds
        ),
    )
    validate_config(config)
    return config


def _require_str(value: object, label: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValueError(f"{label} entries must be non-empty strings")
    return value


def _reject_unknown(payload: Mapping[str, object], allowed: set[str], label: str) -> None:
    unknown = set(payload.keys()) - allowed
    if unknown:
        unknown_list = ", ".join(sorted(str(item) for item in unknown))
        raise ValueError(f"unknown {label} keys: {unknown_list}")

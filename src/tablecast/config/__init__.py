from tablecast.config.loader import load_config, load_default_config, parse_config
from tablecast.config.schema import BUILTIN_CELL_KINDS, TableCastConfig, validate_config

__all__ = [
    "BUILTIN_CELL_KINDS",
    "TableCastConfig",
    "load_config",
    "load_default_config",
    "parse_config",
    "validate_config",
]

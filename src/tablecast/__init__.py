"""tablecast: convert literal data tables into shaped values through registered converters."""

from tablecast.config import TableCastConfig, load_config, load_default_config, validate_config
from tablecast.converter import TableConverter
from tablecast.errors import (
    CannotConvertTo,
    CannotConvertToMapping,
    CannotConvertToNestedSequence,
    CannotConvertToSequence,
    CannotConvertToSequenceOfMapping,
    ConversionError,
    ConversionFailureDetail,
    DataTableError,
    DuplicateTypeDefinition,
    InvalidArgument,
)
from tablecast.observability import (
    NullLogger,
    NullMetrics,
    Observability,
    StdlibLogger,
    configure_logging,
    get_observability,
    set_observability,
)
from tablecast.registry import (
    TableType,
    TableTypeRegistry,
    cell_type,
    entry_type,
    row_type,
    table_type,
)
from tablecast.shapes import (
    RAW_MAPPING,
    RAW_SEQUENCE,
    RAW_TABLE,
    TEXT,
    MappingOf,
    RawMapping,
    RawSequence,
    RawTable,
    Scalar,
    SequenceOf,
    Shape,
    describe,
    mapping_of,
    nested_sequence_of,
    scalar,
    sequence_of,
    sequence_of_mapping,
    shape_of,
)
from tablecast.table import DataTable

__all__ = [
    "TableCastConfig",
    "load_config",
    "load_default_config",
    "validate_config",
    "TableConverter",
    "CannotConvertTo",
    "CannotConvertToMapping",
    "CannotConvertToNestedSequence",
    "CannotConvertToSequence",
    "CannotConvertToSequenceOfMapping",
    "ConversionError",
    "ConversionFailureDetail",
    "DataTableError",
    "DuplicateTypeDefinition",
    "InvalidArgument",
    "NullLogger",
    "NullMetrics",
    "Observability",
    "StdlibLogger",
    "configure_logging",
    "get_observability",
    "set_observability",
    "TableType",
    "TableTypeRegistry",
    "cell_type",
    "entry_type",
    "row_type",
    "table_type",
    "RAW_MAPPING",
    "RAW_SEQUENCE",
    "RAW_TABLE",
    "TEXT",
    "MappingOf",
    "RawMapping",
    "RawSequence",
    "RawTable",
    "Scalar",
    "SequenceOf",
    "Shape",
    "describe",
    "mapping_of",
    "nested_sequence_of",
    "scalar",
    "sequence_of",
    "sequence_of_mapping",
    "shape_of",
    "DataTable",
]

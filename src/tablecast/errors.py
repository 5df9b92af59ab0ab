from __future__ import annotations

from dataclasses import dataclass

from tablecast.shapes import Shape, describe, mapping_of, nested_sequence_of, sequence_of


class DataTableError(Exception):
    """Base class for every failure raised by tablecast."""


class InvalidArgument(DataTableError, ValueError):
    """Raised when a required input is absent or malformed."""


class DuplicateTypeDefinition(DataTableError):
    """Raised when a second converter is registered for an equal shape."""


@dataclass(frozen=True)
class ConversionFailureDetail:
    error_kind: str
    target: str
    hint: str


class ConversionError(DataTableError):
    error_kind = "conversion"

    def __init__(self, target: Shape, hint: str) -> None:
        self.detail = ConversionFailureDetail(
            error_kind=self.error_kind,
            target=describe(target),
            hint=hint,
        )
        super().__init__(f"Can't convert DataTable to {self.detail.target}.\n{hint}")

    @property
    def hint(self) -> str:
        return self.detail.hint


class CannotConvertTo(ConversionError):
    error_kind = "scalar"


class CannotConvertToSequence(ConversionError):
    error_kind = "sequence"

    def __init__(self, item: Shape, hint: str) -> None:
        super().__init__(sequence_of(item), hint)


class CannotConvertToNestedSequence(ConversionError):
    error_kind = "nested_sequence"

    def __init__(self, item: Shape, hint: str) -> None:
        super().__init__(nested_sequence_of(item), hint)


class CannotConvertToMapping(ConversionError):
    error_kind = "mapping"

    def __init__(self, key: Shape, value: Shape, hint: str) -> None:
        super().__init__(mapping_of(key, value), hint)


class CannotConvertToSequenceOfMapping(ConversionError):
    error_kind = "sequence_of_mapping"

    def __init__(self, key: Shape, value: Shape, hint: str) -> None:
        super().__init__(sequence_of(mapping_of(key, value)), hint)

"""Target shapes a table can be converted to.

Shapes are small frozen values with structural equality, so they double as
registry keys: ``sequence_of(int) == SequenceOf(Scalar(int))`` and a converter
registered under one is found by looking up the other.
"""

from __future__ import annotations

import collections.abc
import typing
from dataclasses import dataclass
from typing import Hashable, Union


@dataclass(frozen=True)
class Scalar:
    kind: Hashable


@dataclass(frozen=True)
class SequenceOf:
    item: Shape


@dataclass(frozen=True)
class MappingOf:
    key: Shape
    value: Shape


@dataclass(frozen=True)
class RawTable:
    pass


@dataclass(frozen=True)
class RawSequence:
    pass


@dataclass(frozen=True)
class RawMapping:
    pass


Shape = Union[Scalar, SequenceOf, MappingOf, RawTable, RawSequence, RawMapping]

TEXT = Scalar(str)
RAW_TABLE = RawTable()
RAW_SEQUENCE = RawSequence()
RAW_MAPPING = RawMapping()

_SHAPE_TYPES = (Scalar, SequenceOf, MappingOf, RawTable, RawSequence, RawMapping)
_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping)


def shape_of(hint: object) -> Shape:
    from tablecast.table import DataTable

    if isinstance(hint, _SHAPE_TYPES):
        return hint
    if hint is DataTable:
        return RAW_TABLE
    # typing.List["Thing"] wraps its argument; list["Thing"] does not.
    if isinstance(hint, typing.ForwardRef):
        return Scalar(hint.__forward_arg__)
    origin = typing.get_origin(hint)
    if origin is None:
        if hint in _SEQUENCE_ORIGINS:
            return RAW_SEQUENCE
        if hint in _MAPPING_ORIGINS:
            return RAW_MAPPING
        return Scalar(hint)
    args = typing.get_args(hint)
    if origin in _SEQUENCE_ORIGINS:
        if not args:
            return RAW_SEQUENCE
        return SequenceOf(shape_of(args[0]))
    if origin in _MAPPING_ORIGINS:
        if len(args) != 2:
            return RAW_MAPPING
        return MappingOf(shape_of(args[0]), shape_of(args[1]))
    return Scalar(hint)


def scalar(kind: Hashable) -> Scalar:
    return Scalar(kind)


def sequence_of(item: object) -> SequenceOf:
    return SequenceOf(shape_of(item))


def nested_sequence_of(item: object) -> SequenceOf:
    return SequenceOf(SequenceOf(shape_of(item)))


def mapping_of(key: object, value: object) -> MappingOf:
    return MappingOf(shape_of(key), shape_of(value))


def sequence_of_mapping(key: object, value: object) -> SequenceOf:
    return SequenceOf(mapping_of(key, value))


def as_sequence(shape: Shape) -> SequenceOf | None:
    """Return the typed sequence a shape stands for, or None for non-sequences."""
    if isinstance(shape, SequenceOf):
        return shape
    if isinstance(shape, RawSequence):
        return SequenceOf(TEXT)
    return None


def as_mapping(shape: Shape) -> MappingOf | None:
    if isinstance(shape, MappingOf):
        return shape
    if isinstance(shape, RawMapping):
        return MappingOf(TEXT, TEXT)
    return None


def describe(shape: Shape) -> str:
    if isinstance(shape, Scalar):
        return getattr(shape.kind, "__name__", None) or str(shape.kind)
    if isinstance(shape, SequenceOf):
        return f"List[{describe(shape.item)}]"
    if isinstance(shape, MappingOf):
        return f"Map[{describe(shape.key)}, {describe(shape.value)}]"
    if isinstance(shape, RawSequence):
        return "List"
    if isinstance(shape, RawMapping):
        return "Map"
    return "DataTable"

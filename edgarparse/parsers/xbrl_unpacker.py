"""
Populate caller-defined records from XBRL facts.

A record declares which concept each attribute comes from. The declaration
is turned once into a RecordSchema: a list of (concept tag, attribute,
converter) bindings. Populating walks that list, so no type inspection
happens per record.

Usage:
    @dataclass
    class BalanceSheet:
        assets: int = xbrl_field("us-gaap:Assets")
        liabilities: int = xbrl_field("us-gaap:Liabilities")
        shares: Int64 = xbrl_field("dei:EntityCommonStockSharesOutstanding")
        name: str = xbrl_field("dei:EntityRegistrantName", default="")

    sheet = BalanceSheet()
    XBRLDocument.parse(stream).unpack(sheet, cik=320193, instant="2023-09-30")
"""

import dataclasses
import re
import types
import typing
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Callable, Iterable, Optional, Union

from ..core.base_types import CIK, DateLike, Int32, Int64
from ..core.exceptions import (
    FactConversionError,
    UnsupportedFieldTypeError,
    UnsupportedTargetError,
)
from ..utils.logger import get_logger

logger = get_logger("edgarparse.parsers.xbrl_unpacker")

# Dataclass field metadata key holding the concept tag
XBRL_METADATA_KEY = "xbrl"

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def _parse_integer(raw: str, bits: int) -> int:
    text = raw.strip()
    if not _INTEGER_PATTERN.match(text):
        raise ValueError(f"not a decimal integer: {raw!r}")
    value = int(text)
    low, high = -(2 ** (bits - 1)), 2 ** (bits - 1) - 1
    if not low <= value <= high:
        raise ValueError(f"value {value} out of range for int{bits}")
    return value


class FieldKind(Enum):
    """Closed set of supported field value types."""
    TEXT = "text"
    INT32 = "int32"
    INT64 = "int64"

    def convert(self, raw: str) -> Any:
        return _CONVERTERS[self](raw)


_CONVERTERS: dict[FieldKind, Callable[[str], Any]] = {
    FieldKind.TEXT: lambda raw: raw,
    FieldKind.INT32: lambda raw: _parse_integer(raw, 32),
    FieldKind.INT64: lambda raw: _parse_integer(raw, 64),
}

_KIND_BY_TYPE: dict[Any, FieldKind] = {
    str: FieldKind.TEXT,
    int: FieldKind.INT64,
    Int64: FieldKind.INT64,
    Int32: FieldKind.INT32,
}


def kind_for_type(annotation: Any) -> FieldKind:
    """
    Map a declared attribute type to its converter.

    ``Optional[X]`` is accepted for any supported ``X``.

    Raises:
        UnsupportedFieldTypeError: No conversion exists for the type.
    """
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return kind_for_type(args[0])

    kind = _KIND_BY_TYPE.get(annotation)
    if kind is None:
        raise UnsupportedFieldTypeError(f"no conversion for type: {annotation!r}")
    return kind


@dataclass(frozen=True)
class FieldBinding:
    """One concept tag bound to one attribute of the target record."""
    tag: str
    attribute: str
    kind: FieldKind


class RecordSchema:
    """Explicit mapping table from concept tags to record attributes."""

    def __init__(self, bindings: Iterable[FieldBinding]) -> None:
        self.bindings = tuple(bindings)
        for binding in self.bindings:
            if not isinstance(binding.kind, FieldKind):
                raise UnsupportedFieldTypeError(
                    f"no conversion for type: {binding.kind!r} (field {binding.attribute})"
                )

    def __iter__(self):
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self.bindings)

    @classmethod
    def for_record(cls, record_type: type) -> "RecordSchema":
        """
        Build (and cache) the schema for a dataclass.

        Only fields with ``xbrl`` metadata participate.

        Raises:
            UnsupportedFieldTypeError: An annotated field has an unsupported type.
        """
        return _schema_for_dataclass(record_type)


@lru_cache(maxsize=None)
def _schema_for_dataclass(record_type: type) -> RecordSchema:
    if not dataclasses.is_dataclass(record_type):
        raise UnsupportedTargetError(
            f"{record_type.__name__} is not a dataclass; pass an explicit RecordSchema"
        )

    hints = typing.get_type_hints(record_type)
    bindings = []
    for f in dataclasses.fields(record_type):
        tag = f.metadata.get(XBRL_METADATA_KEY)
        if tag is None:
            continue
        try:
            kind = kind_for_type(hints.get(f.name, f.type))
        except UnsupportedFieldTypeError as e:
            raise UnsupportedFieldTypeError(
                f"{e.message} (field {record_type.__name__}.{f.name})"
            ) from e
        bindings.append(FieldBinding(tag=tag, attribute=f.name, kind=kind))

    logger.debug(f"Built XBRL schema for {record_type.__name__} with {len(bindings)} bindings")
    return RecordSchema(bindings)


def xbrl_field(tag: str, default: Any = 0, **kwargs: Any) -> Any:
    """Dataclass field bound to an XBRL concept; ``default`` is kept when the fact is missing."""
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[XBRL_METADATA_KEY] = tag
    return dataclasses.field(default=default, metadata=metadata, **kwargs)


def _check_target(target: Any) -> None:
    if isinstance(target, type):
        raise UnsupportedTargetError(
            "invalid target for unpacking -- must be a record instance, not a class"
        )
    if dataclasses.is_dataclass(target) and type(target).__dataclass_params__.frozen:
        raise UnsupportedTargetError(
            f"invalid target for unpacking -- {type(target).__name__} is frozen"
        )


def unpack(
    document,
    target: Any,
    cik: CIK,
    instant: Optional[DateLike] = None,
    schema: Optional[RecordSchema] = None,
) -> None:
    """
    Fill the bound attributes of ``target`` from an XBRL document.

    The context is resolved by CIK alone, or by CIK and reporting instant
    when ``instant`` is given. For each binding, a missing fact or a fact
    with empty text leaves the attribute at its current value.

    The call is all-or-nothing: every fact is converted before any
    attribute is assigned, so when an error is raised the target is
    unchanged.

    Raises:
        UnsupportedTargetError: ``target`` is a class or a frozen dataclass.
        UnsupportedFieldTypeError: The record declares an unsupported type.
        ContextNotFoundError: No matching context.
        FactConversionError: Fact text does not convert to the declared type.
    """
    _check_target(target)
    if schema is None:
        schema = RecordSchema.for_record(type(target))

    if instant is None:
        context_id = document.find_context(cik)
    else:
        context_id = document.find_instant_context(cik, instant)

    values: dict[str, Any] = {}
    for binding in schema:
        element = document.find_element(binding.tag, context_id)
        if element is None:
            continue

        raw = element.text or ""
        if not raw.strip():
            continue

        try:
            values[binding.attribute] = binding.kind.convert(raw)
        except ValueError as e:
            raise FactConversionError(
                f"cannot convert {binding.tag} to {binding.kind.value} for field "
                f"{binding.attribute}: {e}",
                {
                    "tag": binding.tag,
                    "field": binding.attribute,
                    "context": context_id,
                    "text": raw,
                },
            ) from e

    for attribute, value in values.items():
        setattr(target, attribute, value)

    logger.debug(
        f"Unpacked {len(values)}/{len(schema)} facts into {type(target).__name__} "
        f"from context {context_id}"
    )

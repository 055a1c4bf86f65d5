"""Mapping of C# properties to HTML input kinds.

Two ordered tables.  Annotation keywords are checked first because an
annotation states the author's intent; the declared type is only a
structural guess.  The first match in table order wins and anything left
over renders as plain text.
"""

from __future__ import annotations

import re
from typing import Iterable

from .models import InputKind, ModelProperty
from .normalizer import normalize_source

ATTRIBUTE_INPUT_KINDS: tuple[tuple[str, InputKind], ...] = (
    ("email", InputKind.EMAIL),
    ("phone", InputKind.TEL),
    ("password", InputKind.PASSWORD),
    ("url", InputKind.URL),
    ("color", InputKind.COLOR),
    ("range", InputKind.RANGE),
    ("file", InputKind.FILE),
    ("hidden", InputKind.HIDDEN),
)

TYPE_INPUT_KINDS: tuple[tuple[str, InputKind], ...] = (
    # Date and time, most specific first
    ("datetime", InputKind.DATETIME_LOCAL),
    ("datetimeoffset", InputKind.DATETIME_LOCAL),
    ("dateonly", InputKind.DATE),
    ("date", InputKind.DATE),
    ("timeonly", InputKind.TIME),
    ("time", InputKind.TIME),
    ("timespan", InputKind.TIME),
    # Integral, decimal and floating point
    ("int", InputKind.NUMBER),
    ("integer", InputKind.NUMBER),
    ("int16", InputKind.NUMBER),
    ("int32", InputKind.NUMBER),
    ("int64", InputKind.NUMBER),
    ("uint", InputKind.NUMBER),
    ("uint16", InputKind.NUMBER),
    ("uint32", InputKind.NUMBER),
    ("uint64", InputKind.NUMBER),
    ("long", InputKind.NUMBER),
    ("ulong", InputKind.NUMBER),
    ("short", InputKind.NUMBER),
    ("ushort", InputKind.NUMBER),
    ("byte", InputKind.NUMBER),
    ("sbyte", InputKind.NUMBER),
    ("nint", InputKind.NUMBER),
    ("nuint", InputKind.NUMBER),
    ("decimal", InputKind.NUMBER),
    ("double", InputKind.NUMBER),
    ("float", InputKind.NUMBER),
    ("single", InputKind.NUMBER),
    # Boolean
    ("bool", InputKind.CHECKBOX),
    ("boolean", InputKind.CHECKBOX),
    # Text
    ("string", InputKind.TEXT),
    ("char", InputKind.TEXT),
    ("guid", InputKind.TEXT),
    ("uuid", InputKind.TEXT),
)

_NULLABLE_WRAPPER_PATTERN = re.compile(r"^Nullable\s*<\s*(.+?)\s*>$", re.IGNORECASE)


def base_type_name(declared_type: str) -> str:
    """Lower-cased bare type name: ``System.Nullable<DateTime>`` -> ``datetime``."""
    name = declared_type.strip().rstrip("?").strip()
    name = re.sub(r"^(?:global::)?(?:System\.)?", "", name)
    wrapped = _NULLABLE_WRAPPER_PATTERN.match(name)
    if wrapped:
        name = re.sub(r"^(?:global::)?(?:System\.)?", "", wrapped.group(1))
    return name.rstrip("?").strip().lower()


def attribute_input_kind(attributes: Iterable[str]) -> InputKind | None:
    """Input kind implied by annotations, ignoring text inside quoted arguments."""
    lowered = [normalize_source(text).lower() for text in attributes]
    for keyword, kind in ATTRIBUTE_INPUT_KINDS:
        if any(keyword in text for text in lowered):
            return kind
    return None


def type_input_kind(declared_type: str) -> InputKind | None:
    """Input kind implied by the declared type, or ``None`` if it is not in the table."""
    base = base_type_name(declared_type)
    for type_name, kind in TYPE_INPUT_KINDS:
        if base == type_name:
            return kind
    return None


def resolve_input_kind(declared_type: str, attributes: Iterable[str]) -> InputKind:
    """Annotation table first, then the type table, then plain text."""
    return (
        attribute_input_kind(attributes)
        or type_input_kind(declared_type)
        or InputKind.TEXT
    )


def input_kind_for(prop: ModelProperty) -> InputKind:
    """Input kind for an extracted property.  Always succeeds."""
    return resolve_input_kind(prop.declared_type, prop.attributes)

"""Display and validation metadata mined from raw annotation text."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

_DISPLAY_NAME_PATTERN = re.compile(r'\bDisplay\s*\([^)]*?\bName\s*=\s*"([^"]+)"')
_DISPLAY_DESCRIPTION_PATTERN = re.compile(r'\bDisplay\s*\([^)]*?\bDescription\s*=\s*"([^"]+)"')
_DESCRIPTION_PATTERN = re.compile(r'\bDescription\s*\(\s*"([^"]+)"')
_MAX_LENGTH_PATTERN = re.compile(r"\b(?:MaxLength|StringLength)\s*\(\s*(\d+)")
_MIN_LENGTH_PATTERN = re.compile(r"\bMinLength\s*\(\s*(\d+)")
_MINIMUM_LENGTH_PATTERN = re.compile(r"\bStringLength\s*\([^)]*?\bMinimumLength\s*=\s*(\d+)")


@dataclass(frozen=True)
class AttributeMetadata:
    """Optional metadata; ``None`` means the annotation was absent, not zero."""

    display_name: Optional[str] = None
    description: Optional[str] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None


def extract_attribute_metadata(attributes: Iterable[str]) -> AttributeMetadata:
    """Scan annotation bodies for display name, description and length bounds.

    Each pattern is independent.  When several annotations supply the same
    field the last one in source order wins.
    """
    display_name: Optional[str] = None
    description: Optional[str] = None
    max_length: Optional[int] = None
    min_length: Optional[int] = None

    for text in attributes:
        display_match = _DISPLAY_NAME_PATTERN.search(text)
        if display_match:
            display_name = display_match.group(1)

        desc_match = _DESCRIPTION_PATTERN.search(text) or _DISPLAY_DESCRIPTION_PATTERN.search(text)
        if desc_match:
            description = desc_match.group(1)

        max_match = _MAX_LENGTH_PATTERN.search(text)
        if max_match:
            max_length = int(max_match.group(1))

        min_match = _MIN_LENGTH_PATTERN.search(text) or _MINIMUM_LENGTH_PATTERN.search(text)
        if min_match:
            min_length = int(min_match.group(1))

    return AttributeMetadata(
        display_name=display_name,
        description=description,
        max_length=max_length,
        min_length=min_length,
    )

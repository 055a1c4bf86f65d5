"""Class body location by brace-depth tracking.

Works on normalized source (see :mod:`viewscaffold.parser.normalizer`) so
braces inside strings and comments are already gone.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_CLASS_KEYWORD_PATTERN = re.compile(r"\bclass\s+[A-Za-z_]")


@dataclass(frozen=True)
class ClassRegion:
    """Line span (0-based, inclusive) of a class from its header to its closing brace."""

    start_line: int
    end_line: int
    balanced: bool = True


def class_header_pattern(class_name: str) -> re.Pattern[str]:
    """Build the header regex for *class_name*.

    Accepts access/partial modifiers, generic parameters, an inheritance
    clause and ``where`` constraints before the opening brace, which may sit
    on a later line.
    """
    return re.compile(
        r"(?:\b(?:public|internal|private|protected|static|sealed|abstract|partial|unsafe)\s+)*"
        rf"\bclass\s+{re.escape(class_name)}\b"
        r"(?:\s*<[^<>{};]*>)?"
        r"(?:\s*:\s*[\w<>,.\s]+?)?"
        r"(?:\s*where\s[^{;]*)?"
        r"\s*\{",
        re.IGNORECASE,
    )


def locate_class(normalized: str, class_name: str) -> ClassRegion | None:
    """Find the body of ``class <class_name>`` in *normalized* source.

    Returns ``None`` when no header matches, e.g. when the declaration lives
    in another file of a partial class.  An unbalanced body runs to the last
    line and is flagged with ``balanced=False``.
    """
    match = class_header_pattern(class_name).search(normalized)
    if match is None:
        return None

    start_line = normalized.count("\n", 0, match.start())
    depth = 0
    for pos in range(match.end() - 1, len(normalized)):
        ch = normalized[pos]
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return ClassRegion(start_line, normalized.count("\n", 0, pos))

    return ClassRegion(start_line, normalized.count("\n"), balanced=False)


def is_class_declaration(line: str) -> bool:
    """True when a normalized line contains a ``class <Identifier>`` keyword."""
    return _CLASS_KEYWORD_PATTERN.search(line) is not None

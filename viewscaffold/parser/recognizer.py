"""Line-oriented recognition of C# annotations and auto-properties.

The recognizer is a small state machine over the lines of normalized
source.  It carries an ordered buffer of pending annotations and an
"inside class" flag driven by brace depth:

* a line made only of bracketed annotations appends their bodies to the
  buffer (an annotation may span several lines until its brackets balance);
* a property signature line emits one candidate carrying the buffer, then
  clears it;
* blank, ``using`` and ``namespace`` lines are skipped and leave the buffer
  alone;
* any other line clears the buffer, so annotations never leak onto an
  unrelated later member.

Annotation bodies are read from the raw line at the same index whenever
possible, so quoted arguments such as ``Display(Name = "Unit price")``
survive normalization.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .locator import ClassRegion, is_class_declaration
from .models import CandidateProperty

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

_MODIFIERS = (
    "public|internal|protected|private|virtual|override|static|new|sealed|"
    "abstract|required|readonly|unsafe|extern"
)

_PROPERTY_PATTERN = re.compile(
    rf"^(?:(?:{_MODIFIERS})\s+)*"
    r"(?P<type>[A-Za-z_][\w.]*(?:\s*<[^{}]*>)?(?:\s*\[[\s,]*\])*\s*\??)"
    r"\s+(?P<name>[A-Za-z_]\w*)\s*"
    r"\{\s*(?:(?:public|internal|protected|private)\s+)*(?:get|set|init)\b[^}]*\}"
)

# Annotations longer than this are abandoned rather than swallowing the class.
_MAX_ANNOTATION_LINES = 12


# ---------------------------------------------------------------------------
# Annotation splitting
# ---------------------------------------------------------------------------

def split_annotations(line: str) -> tuple[list[str], str, bool]:
    """Split leading ``[...]`` groups off *line*.

    Brackets inside quoted arguments are ignored.  Returns the group bodies,
    the remaining text, and whether a group was left unterminated.
    """
    groups: list[str] = []
    i = 0
    n = len(line)
    while True:
        while i < n and line[i].isspace():
            i += 1
        if i >= n or line[i] != "[":
            return groups, line[i:].strip(), False

        depth = 0
        quote = ""
        close = -1
        j = i
        while j < n:
            c = line[j]
            if quote:
                if c == "\\":
                    j += 2
                    continue
                if c == quote:
                    quote = ""
            elif c in "\"'":
                quote = c
            elif c == "[":
                depth += 1
            elif c == "]":
                depth -= 1
                if depth == 0:
                    close = j
                    break
            j += 1

        if close < 0:
            return groups, line[i:].strip(), True
        body = line[i + 1:close].strip()
        if body:
            groups.append(body)
        i = close + 1


def _annotation_bodies(normalized: str, raw: str | None) -> list[str]:
    """Prefer raw-text bodies when they line up with the normalized ones."""
    groups, _, _ = split_annotations(normalized)
    if raw is not None:
        raw_groups, _, unterminated = split_annotations(raw)
        if not unterminated and len(raw_groups) == len(groups):
            return raw_groups
    return groups


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

@dataclass
class _ScanState:
    """Mutable scanner state: pending annotations plus class/brace tracking."""

    pending: list[str] = field(default_factory=list)
    in_class: bool = False
    depth: int = 0
    entry_depth: int = 0
    body_opened: bool = False
    partial: list[tuple[str, str | None]] = field(default_factory=list)


def _is_skippable(line: str) -> bool:
    return not line or line.startswith("using ") or line.startswith("namespace ")


def recognize_properties(
    normalized: str,
    raw: str | None = None,
    region: ClassRegion | None = None,
) -> list[CandidateProperty]:
    """Recognize ``(name, type, attributes)`` candidates in source order.

    Args:
        normalized: Output of :func:`normalize_source`.
        raw: The original text, used to recover annotation bodies with their
            quoted arguments intact.  Must have the same line structure as
            *normalized*.
        region: Limit scanning to a located class.  ``None`` scans the whole
            text and enters every top-level class it meets.
    """
    norm_lines = normalized.split("\n")
    raw_lines = raw.split("\n") if raw is not None else []
    if len(raw_lines) != len(norm_lines):
        raw_lines = []

    start, end = 0, len(norm_lines) - 1
    if region is not None:
        start, end = region.start_line, min(region.end_line, end)

    state = _ScanState()
    candidates: list[CandidateProperty] = []

    for index in range(start, end + 1):
        line = norm_lines[index].strip()
        raw_line = raw_lines[index].strip() if raw_lines else None

        if not state.in_class:
            entering = (region is not None and index == start) or is_class_declaration(line)
            if not entering:
                state.depth += _brace_delta(line)
                continue
            state.in_class = True
            state.entry_depth = state.depth
            state.body_opened = False
            state.pending = []

        if not state.body_opened:
            # Header lines up to the opening brace; members may follow it.
            brace = line.find("{")
            if brace < 0:
                state.depth += _brace_delta(line)
                continue
            state.depth += 1
            state.body_opened = True
            raw_line = _after_body_brace(line, raw_line, brace)
            line = line[brace + 1:].strip()

        if _is_skippable(line):
            state.depth += _brace_delta(line)
            continue

        state.depth += _brace_delta(line)
        closing = state.depth <= state.entry_depth

        candidate = _consume_line(state, line, raw_line, index)
        if candidate is not None:
            candidates.append(candidate)

        if closing:
            state.in_class = False
            state.pending = []
            state.partial = []

    return candidates


def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def _after_body_brace(line: str, raw_line: str | None, brace: int) -> str | None:
    """Raw text after the class body's opening brace, when it lines up."""
    if raw_line is None:
        return None
    raw_brace = raw_line.find("{")
    if raw_brace < 0 or raw_line[:raw_brace] != line[:brace]:
        return None
    return raw_line[raw_brace + 1:].strip()


def _consume_line(
    state: _ScanState, line: str, raw_line: str | None, index: int
) -> CandidateProperty | None:
    """Advance the annotation buffer for one in-class line."""
    if state.partial:
        state.partial.append((line, raw_line))
        if len(state.partial) > _MAX_ANNOTATION_LINES:
            state.partial = []
            state.pending = []
            return None
        line = " ".join(part for part, _ in state.partial)
        raw_parts = [part for _, part in state.partial if part is not None]
        raw_line = " ".join(raw_parts) if len(raw_parts) == len(state.partial) else None

    groups, rest, unterminated = split_annotations(line)
    if unterminated:
        if not state.partial:
            state.partial = [(line, raw_line)]
        return None
    state.partial = []

    if groups and not rest:
        state.pending.extend(_annotation_bodies(line, raw_line))
        return None

    match = _PROPERTY_PATTERN.match(rest)
    if match is None:
        state.pending = []
        return None

    attributes = state.pending + (_annotation_bodies(line, raw_line) if groups else [])
    state.pending = []
    return CandidateProperty(
        name=match.group("name"),
        raw_type=match.group("type").strip(),
        attributes=tuple(attributes),
        line=index,
    )

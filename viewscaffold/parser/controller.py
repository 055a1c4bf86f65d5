"""Controller and action detection from controller source text.

Given the text of a controller file and a cursor offset, works out which
controller and which action method the user is looking at so the matching
view can be generated.
"""

from __future__ import annotations

import re
from pathlib import PurePath

from .models import ControllerInfo, ControllerParameter

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

ACTION_RESULT_TYPES: tuple[str, ...] = (
    "IActionResult",
    "ActionResult",
    "ViewResult",
    "JsonResult",
    "ContentResult",
    "RedirectResult",
    "PartialViewResult",
)

_RESULT_TYPES = "|".join(ACTION_RESULT_TYPES)

CONTROLLER_CLASS_REGEX = re.compile(r"class\s+(\w+Controller)\s*(?::\s*[\w<>,.\s]+)?\s*\{")
NAMESPACE_REGEX = re.compile(r"namespace\s+([\w.]+)")
ACTION_METHOD_REGEX = re.compile(
    r"(?:(?:public|internal|protected)\s+)?(?:async\s+)?"
    rf"(?P<return_type>(?:Task\s*<\s*)?(?:{_RESULT_TYPES})(?:\s*<[^<>()]*>)?(?:\s*>)?)"
    r"\s+(?P<name>\w+)\s*\("
)
_PARAMETER_REGEX = re.compile(
    r"^(?:(?:\[[^\]]*\]\s*)*)(?:(?:ref|out|in|params|this)\s+)?"
    r"(?P<type>[\w.]+(?:\s*<.+>)?(?:\s*\[[\s,]*\])?\??)\s+(?P<name>\w+)"
    r"(?:\s*=\s*(?P<default>.+))?$",
    re.DOTALL,
)

DEFAULT_ACTION = "Index"


# ---------------------------------------------------------------------------
# Parameter parsing
# ---------------------------------------------------------------------------


def split_parameters(parameters: str) -> list[str]:
    """Split a parameter list on top-level commas.

    Commas inside generic arguments, brackets, parentheses and quoted
    default values do not split.
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    quote = ""
    escaped = False

    for char in parameters:
        if quote:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
            continue

        if char in "\"'":
            quote = char
        elif char in "<[(":
            depth += 1
        elif char in ">])":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)

    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def parameter_list(source: str, open_index: int) -> str:
    """Text between the parenthesis at *open_index* and its matching close.

    Parentheses inside quoted literals are ignored; an unclosed list runs to
    the end of *source*.
    """
    depth = 0
    quote = ""
    escaped = False
    for index in range(open_index, len(source)):
        char = source[index]
        if quote:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == quote:
                quote = ""
        elif char in "\"'":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return source[open_index + 1:index]
    return source[open_index + 1:]


def parse_parameters(parameters: str) -> tuple[ControllerParameter, ...]:
    """Parse ``int id, string? q = "x"`` into :class:`ControllerParameter` records.

    Fragments that do not look like ``Type name`` are ignored.
    """
    parsed: list[ControllerParameter] = []
    for part in split_parameters(parameters):
        match = _PARAMETER_REGEX.match(part)
        if match is None:
            continue
        default = match.group("default")
        parsed.append(
            ControllerParameter(
                name=match.group("name"),
                type=re.sub(r"\s+", "", match.group("type")),
                is_optional=default is not None,
                default_value=default.strip() if default is not None else None,
            )
        )
    return tuple(parsed)


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def controller_name_from_file(file_name: str) -> str:
    """``Controllers/ProductController.cs`` -> ``Product``."""
    stem = PurePath(file_name).name
    if stem.lower().endswith(".cs"):
        stem = stem[:-3]
    return re.sub(r"Controller$", "", stem)


def detect_controller_info(source: str, file_name: str, cursor_offset: int = 0) -> ControllerInfo:
    """Detect the controller and the action method nearest to *cursor_offset*.

    Args:
        source: Full text of the controller file.
        file_name: Path or name of the file; used for the controller name
            when no ``class XxxController`` declaration is present.
        cursor_offset: Character offset of the cursor in *source*.

    Returns:
        A :class:`ControllerInfo`.  The action defaults to ``Index`` when no
        action method is found.
    """
    controller_name = controller_name_from_file(file_name)
    class_match = CONTROLLER_CLASS_REGEX.search(source)
    if class_match:
        controller_name = re.sub(r"Controller$", "", class_match.group(1))

    namespace_match = NAMESPACE_REGEX.search(source)
    namespace = namespace_match.group(1) if namespace_match else None

    closest = None
    closest_distance = None
    for match in ACTION_METHOD_REGEX.finditer(source):
        distance = abs(match.start() - cursor_offset)
        if closest_distance is None or distance < closest_distance:
            closest = match
            closest_distance = distance

    if closest is None:
        return ControllerInfo(
            controller_name=controller_name,
            action_name=DEFAULT_ACTION,
            namespace=namespace,
        )

    return ControllerInfo(
        controller_name=controller_name,
        action_name=closest.group("name"),
        namespace=namespace,
        return_type=re.sub(r"\s+", "", closest.group("return_type")),
        parameters=parse_parameters(parameter_list(source, closest.end() - 1)),
    )

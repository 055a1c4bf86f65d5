"""Resolve a model type name to the file and line that declares it."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from viewscaffold.config import ParserConfig
from viewscaffold.errors import ModelParsingError

from .extractor import class_name_from_type, find_model_files, select_model_file
from .locator import locate_class
from .models import ModelLocation
from .normalizer import normalize_source

logger = logging.getLogger(__name__)


def locate_model_definition(
    type_name: str,
    search_root: str | Path,
    config: Optional[ParserConfig] = None,
) -> ModelLocation:
    """Find where *type_name* is declared under *search_root*.

    The line points at the class header when it can be found, otherwise at
    the top of the file.

    Raises:
        ModelParsingError: If the type name is empty or no file declares it.
    """
    class_name = class_name_from_type(type_name or "")
    if not class_name:
        raise ModelParsingError("Invalid model type", model_type=type_name or "")

    try:
        files = find_model_files(class_name, search_root, config)
    except OSError as exc:
        raise ModelParsingError(
            f"Cannot search {search_root} for {class_name}.cs", model_type=type_name, cause=exc
        ) from exc

    model_file = select_model_file(files, config)
    if model_file is None:
        raise ModelParsingError(
            f"Model file {class_name}.cs not found in workspace", model_type=type_name
        )

    line = 1
    try:
        source = model_file.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        logger.warning("Cannot read %s: %s", model_file, exc)
    else:
        region = locate_class(normalize_source(source), class_name)
        if region is not None:
            line = region.start_line + 1

    return ModelLocation(path=str(model_file), line=line)


_MODEL_DIRECTIVE_PATTERN = re.compile(r"@model\s+([\w.]+(?:<[^\r\n]*>)?\??)")


def find_model_directive(view_source: str) -> Optional[str]:
    """Type named by the first ``@model`` directive in a Razor view, if any."""
    match = _MODEL_DIRECTIVE_PATTERN.search(view_source)
    return match.group(1) if match else None

"""viewscaffold model parser.

Recovers typed property metadata from C# model classes by structural,
line-oriented scanning (no compiler front end), and detects controller and
action names from controller source.

Usage::

    from viewscaffold.parser import extract_properties, input_kind_for

    for prop in extract_properties("Shop.Models.Product", "path/to/project"):
        print(prop.name, prop.declared_type, input_kind_for(prop).value)
"""

from viewscaffold.parser.cache import (
    ExtractionCache,
    ExtractionCacheEntry,
    configure_default_cache,
    get_default_cache,
)
from viewscaffold.parser.controller import detect_controller_info
from viewscaffold.parser.extractor import ModelPropertyExtractor, extract_properties
from viewscaffold.parser.input_kinds import input_kind_for
from viewscaffold.parser.models import (
    ControllerInfo,
    ControllerParameter,
    InputKind,
    ModelLocation,
    ModelProperty,
)
from viewscaffold.parser.navigation import find_model_directive, locate_model_definition
from viewscaffold.parser.normalizer import normalize_source

__all__ = [
    "extract_properties",
    "input_kind_for",
    "normalize_source",
    "detect_controller_info",
    "locate_model_definition",
    "find_model_directive",
    "configure_default_cache",
    "get_default_cache",
    "ModelPropertyExtractor",
    "ExtractionCache",
    "ExtractionCacheEntry",
    "ModelProperty",
    "InputKind",
    "ControllerInfo",
    "ControllerParameter",
    "ModelLocation",
]

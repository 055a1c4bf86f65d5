"""Model property extraction for C# source files.

Locates the file that declares a model class, then runs the scanning
pipeline over its text:

    normalize -> locate class -> recognize candidates -> skip / classify
    -> annotation metadata -> input kind

Results are memoized in an :class:`ExtractionCache`.  Every degraded outcome
(no file found, unreadable file, no class or property recognized) produces an
empty list; only an empty type name is treated as a caller error.
"""

from __future__ import annotations

import glob
import logging
import re
from pathlib import Path
from typing import Optional

from viewscaffold.config import ParserConfig

from .cache import ExtractionCache, get_default_cache
from .classifier import classify, skip_reason
from .input_kinds import attribute_input_kind, resolve_input_kind, type_input_kind
from .locator import locate_class
from .metadata import extract_attribute_metadata
from .models import CandidateProperty, ModelProperty
from .normalizer import normalize_source
from .recognizer import recognize_properties

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SEARCH_PATTERNS: tuple[str, ...] = (
    "**/{name}.cs",
    "**/Models/{name}.cs",
    "**/Models/**/{name}.cs",
    "**/*Models*/{name}.cs",
    "**/Entities/{name}.cs",
    "**/Domain/{name}.cs",
)

_GENERIC_ARGUMENT_PATTERN = re.compile(r"<\s*([^<>]+?)\s*>")


# ---------------------------------------------------------------------------
# Type name and file helpers
# ---------------------------------------------------------------------------


def class_name_from_type(type_name: str) -> str:
    """Bare class name for a (possibly qualified or wrapped) type name.

    ``Shop.Models.Product`` -> ``Product``;
    ``IEnumerable<Shop.Models.Product>`` -> ``Product``;
    ``Product?`` -> ``Product``.
    """
    name = type_name.strip()
    wrapped = _GENERIC_ARGUMENT_PATTERN.search(name)
    while wrapped:
        name = wrapped.group(1).split(",")[-1].strip()
        wrapped = _GENERIC_ARGUMENT_PATTERN.search(name)
    name = name.rstrip("?").removeprefix("global::")
    return name.split(".")[-1].strip()


def find_model_files(
    class_name: str,
    search_root: str | Path,
    config: Optional[ParserConfig] = None,
) -> list[Path]:
    """Candidate source files for *class_name* under *search_root*.

    The search patterns are tried in order and the first one with any hit
    wins.  Wildcard characters in *class_name* match only themselves.  Paths inside excluded directories (``bin``, ``obj`` and
    ``node_modules`` by default) are ignored.
    """
    settings = config or ParserConfig()
    root = Path(search_root)
    if not root.is_dir():
        return []

    excluded = set(settings.excluded_dirs)
    for pattern in SEARCH_PATTERNS:
        hits = sorted(
            path for path in root.glob(pattern.format(name=glob.escape(class_name)))
            if path.is_file() and not excluded.intersection(path.relative_to(root).parts[:-1])
        )
        if hits:
            return hits
    return []


def select_model_file(
    files: list[Path],
    config: Optional[ParserConfig] = None,
) -> Optional[Path]:
    """Pick the most plausible declaration file among *files*.

    A file inside one of the conventional model folders is preferred, in
    folder order; otherwise the first candidate is used.
    """
    if not files:
        return None
    if len(files) == 1:
        return files[0]

    settings = config or ParserConfig()
    for folder in settings.model_folders:
        for path in files:
            if folder in path.parts[:-1]:
                return path
    return files[0]


# ---------------------------------------------------------------------------
# ModelPropertyExtractor
# ---------------------------------------------------------------------------


class ModelPropertyExtractor:
    """Recovers typed property metadata from C# model classes.

    Args:
        cache: Cache consulted before scanning a file.  Defaults to the
            process-wide cache from :func:`get_default_cache`.
        config: File search and classification settings.
    """

    def __init__(
        self,
        cache: Optional[ExtractionCache] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self._cache = cache
        self.config = config or ParserConfig()

    @property
    def cache(self) -> ExtractionCache:
        if self._cache is None:
            self._cache = get_default_cache()
        return self._cache

    # -- Public API ---------------------------------------------------------

    def extract_properties(
        self, type_name: str, search_root: str | Path
    ) -> list[ModelProperty]:
        """Ordered properties of the class named by *type_name*.

        Args:
            type_name: Fully qualified (or bare) type name, e.g.
                ``Shop.Models.Product``.
            search_root: Directory searched for the declaring ``.cs`` file.

        Returns:
            The recognized properties in declaration order.  Empty when the
            file cannot be found or read, or nothing is recognized.

        Raises:
            ValueError: If *type_name* is empty or blank.
        """
        if not type_name or not type_name.strip():
            raise ValueError("type_name must be a non-empty type name")

        type_name = type_name.strip()
        class_name = class_name_from_type(type_name)
        if not class_name:
            logger.warning("Cannot derive a class name from %r", type_name)
            return []

        try:
            files = find_model_files(class_name, search_root, self.config)
        except OSError as exc:
            logger.warning("Cannot search %s for %s: %s", search_root, class_name, exc)
            return []
        model_file = select_model_file(files, self.config)
        if model_file is None:
            logger.debug("No source file found for %s under %s", class_name, search_root)
            return []

        file_path = str(model_file)
        cached = self.cache.get(type_name, file_path)
        if cached is not None:
            logger.debug("Cache hit for %s (%s)", type_name, file_path)
            return cached

        try:
            source = model_file.read_text(encoding="utf-8-sig", errors="replace")
        except OSError as exc:
            logger.warning("Cannot read model file %s: %s", file_path, exc)
            return []

        properties = self.extract_from_source(source, class_name)
        self.cache.set(type_name, file_path, properties)
        return properties

    def extract_from_source(self, source: str, class_name: str) -> list[ModelProperty]:
        """Run the scanning pipeline over *source* without touching the cache."""
        normalized = normalize_source(source)
        region = locate_class(normalized, class_name)
        if region is None:
            logger.debug("Class %s not declared in source; scanning whole text", class_name)
        elif not region.balanced:
            logger.debug("Class %s body is unbalanced; scanning to end of text", class_name)

        properties: list[ModelProperty] = []
        for candidate in recognize_properties(normalized, source, region):
            reason = skip_reason(candidate, self.config.skip_identity)
            if reason is not None:
                logger.debug("Skipping %s.%s (%s)", class_name, candidate.name, reason)
                continue
            properties.append(self._build_property(candidate, class_name))

        if not properties:
            logger.debug("No properties recognized for %s", class_name)
        return properties

    # -- Internal helpers ---------------------------------------------------

    def _build_property(self, candidate: CandidateProperty, class_name: str) -> ModelProperty:
        flags = classify(candidate)
        metadata = extract_attribute_metadata(candidate.attributes)

        if (
            attribute_input_kind(candidate.attributes) is None
            and type_input_kind(flags.declared_type) is None
        ):
            logger.debug(
                "No input kind for %s.%s of type %s; rendering as text",
                class_name,
                candidate.name,
                flags.declared_type,
            )

        return ModelProperty(
            name=candidate.name,
            declared_type=flags.declared_type,
            is_nullable=flags.is_nullable,
            is_primary_key=flags.is_primary_key,
            is_required=flags.is_required,
            attributes=candidate.attributes,
            input_kind=resolve_input_kind(flags.declared_type, candidate.attributes),
            display_name=metadata.display_name,
            description=metadata.description,
            max_length=metadata.max_length,
            min_length=metadata.min_length,
        )


def extract_properties(type_name: str, search_root: str | Path) -> list[ModelProperty]:
    """Extract properties using the process-wide cache and default settings."""
    return ModelPropertyExtractor().extract_properties(type_name, search_root)

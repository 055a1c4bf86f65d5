"""Heuristic classification of recognized property candidates.

All naming and annotation heuristics live here as ordered rule tables that
are evaluated top to bottom:

``SKIP_RULES``
    Any match drops the candidate before metadata is extracted.
``PRIMARY_KEY_RULES``
    Any match marks the property as the entity key.
``REQUIRED_RULES``
    The first match decides required-ness; no match means required.

Annotation keywords are matched against annotation text with its string
literals erased, so ``Display(Name = "Required date")`` never reads as a
``Required`` annotation.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Callable

from .models import CandidateProperty
from .normalizer import normalize_source

# ---------------------------------------------------------------------------
# Keyword tables
# ---------------------------------------------------------------------------

AUDIT_NAME_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"CreatedAt$",
        r"UpdatedAt$",
        r"ModifiedAt$",
        r"DeletedAt$",
        r"Version$",
        r"Timestamp$",
        r"RowVersion$",
    )
)
EXCLUSION_KEYWORDS: tuple[str, ...] = ("NotMapped", "Computed", "DatabaseGenerated")

_KEY_PATTERN = re.compile(r"\bKey(?:Attribute)?\b", re.IGNORECASE)
_REQUIRED_PATTERN = re.compile(r"\bRequired(?:Attribute)?\b", re.IGNORECASE)
_OPT_OUT_PATTERN = re.compile(r"\bValidateNever(?:Attribute)?\b", re.IGNORECASE)
_WHITESPACE_PATTERN = re.compile(r"\s+")
_NAMESPACE_PREFIX_PATTERN = re.compile(r"^(?:global::)?(?:System\.)?")
_NULLABLE_WRAPPER_PATTERN = re.compile(r"^(?:global::)?(?:System\.)?Nullable\s*<.+>$")


# ---------------------------------------------------------------------------
# Facts & rules
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateFacts:
    """What the rule tables are allowed to look at."""

    name: str
    raw_type: str
    keywords: tuple[str, ...]
    is_nullable: bool = False
    is_primary_key: bool = False
    skip_identity: bool = False

    def has_annotation(self, pattern: re.Pattern[str]) -> bool:
        return any(pattern.search(text) for text in self.keywords)


@dataclass(frozen=True)
class Rule:
    """A named predicate with the outcome it yields when it matches."""

    name: str
    test: Callable[[CandidateFacts], bool]
    outcome: bool = True


SKIP_RULES: tuple[Rule, ...] = (
    Rule(
        "excluded-annotation",
        lambda f: any(kw in text for text in f.keywords for kw in EXCLUSION_KEYWORDS),
    ),
    Rule("audit-field", lambda f: any(p.search(f.name) for p in AUDIT_NAME_PATTERNS)),
    Rule("identity-field", lambda f: f.skip_identity and f.name.lower() == "id"),
)

PRIMARY_KEY_RULES: tuple[Rule, ...] = (
    Rule("named-id", lambda f: f.name.lower() == "id"),
    Rule("id-suffix", lambda f: f.name.lower().endswith("id")),
    Rule("key-annotation", lambda f: f.has_annotation(_KEY_PATTERN)),
)

REQUIRED_RULES: tuple[Rule, ...] = (
    Rule("required-annotation", lambda f: f.has_annotation(_REQUIRED_PATTERN), True),
    Rule("validation-opt-out", lambda f: f.has_annotation(_OPT_OUT_PATTERN), False),
    Rule("nullable-type", lambda f: f.is_nullable, False),
    Rule("primary-key", lambda f: f.is_primary_key, False),
)


@dataclass(frozen=True)
class Classification:
    """Derived flags for a candidate that survived the skip rules."""

    declared_type: str
    is_nullable: bool
    is_primary_key: bool
    is_required: bool


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def annotation_keywords(attributes: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Annotation bodies with string and char literal contents erased."""
    return tuple(normalize_source(text) for text in attributes)


def is_nullable_type(raw_type: str) -> bool:
    """``T?`` or ``Nullable<T>``; a nullable generic argument does not count."""
    stripped = raw_type.strip()
    return stripped.endswith("?") or _NULLABLE_WRAPPER_PATTERN.match(stripped) is not None


def clean_type(raw_type: str) -> str:
    """Collapse whitespace and drop ``global::``/``System.`` prefixes.

    The nullable marker is kept: ``System.DateTime ?`` becomes ``DateTime?``.
    """
    cleaned = _WHITESPACE_PATTERN.sub(" ", raw_type).strip()
    cleaned = re.sub(r"\s*([<>?\[\]])\s*", r"\1", cleaned)
    cleaned = re.sub(r"\s*,\s*", ", ", cleaned)
    return _NAMESPACE_PREFIX_PATTERN.sub("", cleaned)


def _facts(candidate: CandidateProperty, skip_identity: bool = False) -> CandidateFacts:
    return CandidateFacts(
        name=candidate.name,
        raw_type=candidate.raw_type,
        keywords=annotation_keywords(candidate.attributes),
        is_nullable=is_nullable_type(candidate.raw_type),
        skip_identity=skip_identity,
    )


def skip_reason(candidate: CandidateProperty, skip_identity: bool = False) -> str | None:
    """Name of the first skip rule that matches, or ``None`` to keep the candidate."""
    facts = _facts(candidate, skip_identity)
    for rule in SKIP_RULES:
        if rule.test(facts):
            return rule.name
    return None


def should_skip(candidate: CandidateProperty, skip_identity: bool = False) -> bool:
    return skip_reason(candidate, skip_identity) is not None


def classify(candidate: CandidateProperty) -> Classification:
    """Derive nullability, primary-key status and required-ness."""
    facts = _facts(candidate)
    is_primary_key = any(rule.test(facts) for rule in PRIMARY_KEY_RULES)
    facts = replace(facts, is_primary_key=is_primary_key)

    is_required = True
    for rule in REQUIRED_RULES:
        if rule.test(facts):
            is_required = rule.outcome
            break

    return Classification(
        declared_type=clean_type(candidate.raw_type),
        is_nullable=facts.is_nullable,
        is_primary_key=is_primary_key,
        is_required=is_required,
    )

"""Pydantic v2 models for the viewscaffold model parser.

Defines the records produced by the C# model property extraction engine and
by controller detection.  Every model is frozen: a property list handed to a
caller can never be mutated into (or out of) the extraction cache.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class InputKind(str, Enum):
    """HTML input type assigned to a property for form rendering."""
    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DATE = "date"
    TIME = "time"
    DATETIME_LOCAL = "datetime-local"
    EMAIL = "email"
    TEL = "tel"
    PASSWORD = "password"
    URL = "url"
    COLOR = "color"
    RANGE = "range"
    FILE = "file"
    HIDDEN = "hidden"


# ---------------------------------------------------------------------------
# Property Models
# ---------------------------------------------------------------------------

class CandidateProperty(BaseModel):
    """A raw ``(name, type, attributes)`` triple recognized by line scanning."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Member identifier")
    raw_type: str = Field(..., min_length=1, description="Type token as written in source")
    attributes: tuple[str, ...] = Field(
        default=(), description="Annotation bodies in source order"
    )
    line: int = Field(default=0, ge=0, description="0-based line index of the declaration")


class ModelProperty(BaseModel):
    """One recovered field of a scanned model class."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Property name, e.g. 'Price'")
    declared_type: str = Field(
        ..., min_length=1, description="Cleaned type token, e.g. 'int' or 'DateTime?'"
    )
    is_nullable: bool = Field(default=False, description="Type carries a trailing '?'")
    is_primary_key: bool = Field(default=False, description="Identified as the entity key")
    is_required: bool = Field(default=True, description="Must be supplied by the form")
    attributes: tuple[str, ...] = Field(
        default=(), description="Raw annotation bodies in source order"
    )
    input_kind: InputKind = Field(default=InputKind.TEXT, description="HTML input type")
    display_name: Optional[str] = Field(default=None, description="From [Display(Name = ...)]")
    description: Optional[str] = Field(default=None, description="From [Description(...)]")
    max_length: Optional[int] = Field(default=None, ge=0, description="From [MaxLength]/[StringLength]")
    min_length: Optional[int] = Field(default=None, ge=0, description="From [MinLength]")

    @property
    def label(self) -> str:
        """Text shown next to the form field."""
        return self.display_name or self.name


# ---------------------------------------------------------------------------
# Controller Models
# ---------------------------------------------------------------------------

class ControllerParameter(BaseModel):
    """A single parameter of a controller action method."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Parameter name")
    type: str = Field(..., description="Parameter type as written")
    is_optional: bool = Field(default=False, description="Has a default value")
    default_value: Optional[str] = Field(default=None, description="Default value expression")


class ControllerInfo(BaseModel):
    """Controller and action detected from a controller source file."""
    model_config = ConfigDict(frozen=True)

    controller_name: str = Field(..., description="Controller name without the suffix")
    action_name: str = Field(default="Index", description="Action nearest to the cursor")
    namespace: Optional[str] = Field(default=None, description="Declared namespace")
    return_type: Optional[str] = Field(default=None, description="Action return type")
    parameters: tuple[ControllerParameter, ...] = Field(
        default=(), description="Action parameters in declaration order"
    )


class ModelLocation(BaseModel):
    """Where a model class is declared on disk."""
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Source file path")
    line: int = Field(default=1, ge=1, description="1-based line of the class declaration")

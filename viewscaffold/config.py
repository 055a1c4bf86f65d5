"""viewscaffold configuration.

Centralised, typed configuration for the scaffolder and the model parser.
All settings use Pydantic v2 models so they can be validated at construction
time and serialised to/from JSON or environment variables without
boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


class CacheConfig(BaseModel):
    """Bounds for the in-memory extraction cache."""

    max_entries: int = Field(default=100, ge=1, description="Entries kept before eviction")
    expiration_seconds: float = Field(
        default=300.0, gt=0, description="Age after which an entry is discarded"
    )
    sweep_interval_seconds: float = Field(
        default=60.0, gt=0, description="How often expired entries are swept"
    )


class ParserConfig(BaseModel):
    """Knobs for locating and scanning model source files."""

    model_folders: list[str] = Field(
        default=["Models", "Entities", "Domain"],
        description="Preferred folders when several files declare the same class",
    )
    excluded_dirs: list[str] = Field(
        default=["bin", "obj", "node_modules"],
        description="Directories never searched for model files",
    )
    skip_identity: bool = Field(
        default=False, description="Drop a property named exactly 'Id' from extraction results"
    )


class Config(BaseModel):
    """Global viewscaffold configuration.

    Instances are typically created once by the CLI entry point and then
    passed to ``ViewGenerator`` and ``ModelPropertyExtractor``.
    """

    default_template_directory: str = Field(default="Views")
    use_layout_by_default: bool = Field(default=True)
    default_layout_name: str = Field(default="_Layout", min_length=1)
    enable_logging: bool = Field(default=False)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def default_layout(self) -> str | None:
        """Layout applied when the caller does not choose one."""
        return self.default_layout_name if self.use_layout_by_default else None

    def views_path(self, project_root: Path) -> Path:
        """Root of the Razor views tree inside *project_root*."""
        return Path(project_root) / self.default_template_directory

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.  Parent directories are created.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON.

        Args:
            path: The JSON file to read.

        Returns:
            A validated ``Config`` instance.
        """
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            VIEWSCAFFOLD_TEMPLATE_DIR, VIEWSCAFFOLD_USE_LAYOUT,
            VIEWSCAFFOLD_LAYOUT_NAME, VIEWSCAFFOLD_ENABLE_LOGGING,
            VIEWSCAFFOLD_CACHE_MAX_ENTRIES, VIEWSCAFFOLD_CACHE_EXPIRATION,
            VIEWSCAFFOLD_CACHE_SWEEP_INTERVAL, VIEWSCAFFOLD_MODEL_FOLDERS,
            VIEWSCAFFOLD_SKIP_IDENTITY.
        """
        cache_kwargs: dict[str, Any] = {}
        if os.environ.get("VIEWSCAFFOLD_CACHE_MAX_ENTRIES"):
            cache_kwargs["max_entries"] = int(os.environ["VIEWSCAFFOLD_CACHE_MAX_ENTRIES"])
        if os.environ.get("VIEWSCAFFOLD_CACHE_EXPIRATION"):
            cache_kwargs["expiration_seconds"] = float(os.environ["VIEWSCAFFOLD_CACHE_EXPIRATION"])
        if os.environ.get("VIEWSCAFFOLD_CACHE_SWEEP_INTERVAL"):
            cache_kwargs["sweep_interval_seconds"] = float(
                os.environ["VIEWSCAFFOLD_CACHE_SWEEP_INTERVAL"]
            )

        parser_kwargs: dict[str, Any] = {}
        if os.environ.get("VIEWSCAFFOLD_MODEL_FOLDERS"):
            folders = os.environ["VIEWSCAFFOLD_MODEL_FOLDERS"].split(",")
            parser_kwargs["model_folders"] = [f.strip() for f in folders if f.strip()]
        if os.environ.get("VIEWSCAFFOLD_SKIP_IDENTITY"):
            parser_kwargs["skip_identity"] = _env_flag("VIEWSCAFFOLD_SKIP_IDENTITY")

        kwargs: dict[str, Any] = {}
        if os.environ.get("VIEWSCAFFOLD_TEMPLATE_DIR"):
            kwargs["default_template_directory"] = os.environ["VIEWSCAFFOLD_TEMPLATE_DIR"]
        if os.environ.get("VIEWSCAFFOLD_USE_LAYOUT"):
            kwargs["use_layout_by_default"] = _env_flag("VIEWSCAFFOLD_USE_LAYOUT")
        if os.environ.get("VIEWSCAFFOLD_LAYOUT_NAME"):
            kwargs["default_layout_name"] = os.environ["VIEWSCAFFOLD_LAYOUT_NAME"]
        if os.environ.get("VIEWSCAFFOLD_ENABLE_LOGGING"):
            kwargs["enable_logging"] = _env_flag("VIEWSCAFFOLD_ENABLE_LOGGING")

        return cls(
            cache=CacheConfig(**cache_kwargs),
            parser=ParserConfig(**parser_kwargs),
            **kwargs,
        )


def _env_flag(name: str) -> bool:
    """Interpret ``1/true/yes/on`` (any case) as ``True``."""
    return os.environ.get(name, "").strip().lower() in {"1", "true", "yes", "on"}

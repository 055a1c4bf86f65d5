"""Razor view scaffolding orchestrator.

Takes a ``ViewGenerationOptions`` describing the controller, action and
optional model, extracts the model's properties and renders the matching
template into ``<project>/Views/<Controller>/<Action>.cshtml``.
"""

from __future__ import annotations

import asyncio
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import BaseModel, Field

from viewscaffold.config import Config
from viewscaffold.errors import FileSystemError
from viewscaffold.parser.extractor import ModelPropertyExtractor, class_name_from_type
from viewscaffold.parser.models import ModelProperty

from .project import detect_project_name, find_project_root
from .templates import TemplateRenderer, pluralize

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


class TemplateType(str, Enum):
    """View templates a user can pick from."""
    EMPTY = "empty"
    INDEX = "index"
    CREATE = "create"
    EDIT = "edit"
    DETAILS = "details"
    DELETE = "delete"


CRUD_TEMPLATES: tuple[TemplateType, ...] = (
    TemplateType.INDEX,
    TemplateType.CREATE,
    TemplateType.EDIT,
    TemplateType.DETAILS,
    TemplateType.DELETE,
)


class ViewGenerationOptions(BaseModel):
    """Everything needed to generate one view file."""

    workspace_path: str = Field(..., min_length=1, description="Workspace or project directory")
    controller_name: str = Field(..., min_length=1, description="Controller name without suffix")
    action_name: str = Field(..., min_length=1, description="Action and view file name")
    template_type: TemplateType = Field(default=TemplateType.EMPTY)
    model_type: Optional[str] = Field(default=None, description="Fully qualified model type")
    layout_page: Optional[str] = Field(
        default=None,
        description="Layout to reference; None uses the configured default, '' uses none",
    )
    active_file: Optional[str] = Field(
        default=None, description="File open in the editor, used to find the project"
    )
    overwrite: bool = Field(default=True, description="Replace an existing view file")


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ViewGenerator:
    """Generates Razor views and the shared MVC view files."""

    def __init__(
        self,
        config: Optional[Config] = None,
        extractor: Optional[ModelPropertyExtractor] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.config = config or Config()
        self.extractor = extractor or ModelPropertyExtractor(config=self.config.parser)
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    async def generate_view(self, options: ViewGenerationOptions) -> Path:
        """Generate a single view file.

        Returns:
            Path of the written ``.cshtml`` file.

        Raises:
            ProjectDetectionError: If the workspace does not exist.
            TemplateError: If the template cannot be rendered.
            FileSystemError: If the view cannot be written.
        """
        project_root = find_project_root(options.workspace_path, options.active_file)
        properties = await self._extract(options.model_type, project_root)
        return await self._write_view(options, project_root, properties)

    async def scaffold_crud(
        self,
        workspace_path: str | Path,
        model_type: str,
        controller_name: Optional[str] = None,
        layout_page: Optional[str] = None,
        overwrite: bool = True,
    ) -> list[Path]:
        """Generate Index, Create, Edit, Details and Delete views for a model.

        The controller name defaults to the plural of the model class name.
        The model is scanned once and shared by all five views.
        """
        if not model_type or not model_type.strip():
            raise ValueError("model_type is required for CRUD scaffolding")

        model_name = class_name_from_type(model_type)
        controller = controller_name or pluralize(model_name)
        project_root = find_project_root(workspace_path)
        properties = await self._extract(model_type, project_root)

        written: list[Path] = []
        for template in CRUD_TEMPLATES:
            options = ViewGenerationOptions(
                workspace_path=str(workspace_path),
                controller_name=controller,
                action_name=template.value.capitalize(),
                template_type=template,
                model_type=model_type,
                layout_page=layout_page,
                overwrite=overwrite,
            )
            written.append(await self._write_view(options, project_root, properties))

        logger.info("Scaffolded %d CRUD views for %s", len(written), model_name)
        return written

    async def generate_default_templates(
        self, workspace_path: str | Path, active_file: Optional[str] = None
    ) -> list[Path]:
        """Write ``_ViewStart``, ``_ViewImports``, ``Shared/_Layout`` and ``Shared/Error``."""
        project_root = find_project_root(workspace_path, active_file)
        project_name = detect_project_name(project_root)
        views = self.config.views_path(project_root)
        context = {
            "project_name": project_name,
            "root_namespace": root_namespace(project_name),
            "layout_name": self.config.default_layout_name,
        }

        targets = (
            ("_ViewStart", views / "_ViewStart.cshtml"),
            ("_ViewImports", views / "_ViewImports.cshtml"),
            ("_Layout", views / "Shared" / "_Layout.cshtml"),
            ("Error", views / "Shared" / "Error.cshtml"),
        )
        written: list[Path] = []
        for template_name, target in targets:
            written.append(await self._render_to(template_name, target, context))
        return written

    # -- Context -----------------------------------------------------------

    def build_context(
        self,
        options: ViewGenerationOptions,
        properties: Sequence[ModelProperty],
        project_name: str = "",
    ) -> dict[str, Any]:
        """Template variables for one view."""
        layout = options.layout_page
        if layout is None:
            layout = self.config.default_layout

        return {
            "action_name": options.action_name,
            "controller_name": options.controller_name,
            "model": options.model_type or "",
            "model_name": class_name_from_type(options.model_type) if options.model_type else "",
            "layout_page": layout or None,
            "properties": [_property_context(prop) for prop in properties],
            "primary_key_property": primary_key_name(properties),
            "project_name": project_name,
        }

    # -- Internal helpers --------------------------------------------------

    async def _extract(self, model_type: Optional[str], project_root: Path) -> list[ModelProperty]:
        if not model_type or not model_type.strip():
            return []
        return await asyncio.to_thread(
            self.extractor.extract_properties, model_type, project_root
        )

    async def _write_view(
        self,
        options: ViewGenerationOptions,
        project_root: Path,
        properties: Sequence[ModelProperty],
    ) -> Path:
        target = (
            self.config.views_path(project_root)
            / options.controller_name
            / f"{options.action_name}.cshtml"
        )
        if target.exists() and not options.overwrite:
            raise FileSystemError(f"View {target} already exists", path=str(target))

        context = self.build_context(options, properties, detect_project_name(project_root))
        path = await self._render_to(options.template_type.value, target, context)
        logger.info("Generated %s", path)
        return path

    async def _render_to(self, template_name: str, target: Path, context: dict[str, Any]) -> Path:
        try:
            return await self.renderer.render_to_file(template_name, target, context)
        except OSError as exc:
            raise FileSystemError(f"Cannot write {target}: {exc}", path=str(target), cause=exc) from exc


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def primary_key_name(properties: Sequence[ModelProperty]) -> Optional[str]:
    """Name of the entity key: an exact ``Id`` first, else the first key property."""
    keys = [prop for prop in properties if prop.is_primary_key]
    for prop in keys:
        if prop.name.lower() == "id":
            return prop.name
    return keys[0].name if keys else None


def root_namespace(project_name: str) -> str:
    """C# namespace derived from a project name (``My-App`` -> ``My_App``)."""
    parts = [re.sub(r"\W", "_", part) for part in project_name.split(".") if part]
    cleaned = ".".join(f"_{part}" if part[0].isdigit() else part for part in parts)
    return cleaned or "App"


def _property_context(prop: ModelProperty) -> dict[str, Any]:
    data = prop.model_dump(mode="json")
    data["input_type"] = prop.input_kind.value
    data["label"] = prop.label
    return data

"""viewscaffold scaffolder -- generates Razor views for ASP.NET Core MVC.

Quick usage::

    from viewscaffold.scaffolder import ViewGenerator, ViewGenerationOptions

    generator = ViewGenerator()
    path = await generator.generate_view(
        ViewGenerationOptions(
            workspace_path="/src/Shop",
            controller_name="Products",
            action_name="Create",
            template_type="create",
            model_type="Shop.Models.Product",
        )
    )
"""

from viewscaffold.scaffolder.generator import (
    CRUD_TEMPLATES,
    TemplateType,
    ViewGenerationOptions,
    ViewGenerator,
)
from viewscaffold.scaffolder.project import detect_project_name, find_project_root
from viewscaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "CRUD_TEMPLATES",
    "TemplateType",
    "ViewGenerationOptions",
    "ViewGenerator",
    "TemplateRenderer",
    "detect_project_name",
    "find_project_root",
]

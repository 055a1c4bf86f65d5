"""Jinja2 template rendering for Razor view scaffolding.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``viewscaffold/scaffolder/templates/`` directory and renders them with view
specific context data (controller, action, model and its properties).
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any

from jinja2 import (
    Environment,
    FileSystemLoader,
    TemplateNotFound,
    TemplateSyntaxError,
    select_autoescape,
)

from viewscaffold.errors import TemplateError


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"

TEMPLATE_SUFFIX = ".cshtml.j2"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates into Razor ``.cshtml`` files.

    Templates are addressed by name without the suffix, e.g. ``"create"`` or
    ``"_Layout"``.  Autoescaping is off: the output is Razor source, and
    Razor performs its own HTML encoding at runtime.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["pluralize"] = pluralize
        self.env.filters["capitalize"] = _capitalize_filter
        self.env.filters["lowercase"] = _lowercase_filter
        self.env.filters["uppercase"] = _uppercase_filter
        self.env.filters["humanize"] = humanize

    # -- Single template rendering -----------------------------------------

    def render(self, template_name: str, context: dict[str, Any]) -> str:
        """Render the template *template_name* with the provided context.

        Args:
            template_name: Name without suffix (``"index"``) or a path
                relative to the template directory (``"index.cshtml.j2"``).
            context: Dictionary of variables available inside the template.

        Raises:
            TemplateError: If the template does not exist or cannot be parsed.
        """
        path = template_name if template_name.endswith(".j2") else template_name + TEMPLATE_SUFFIX
        try:
            template = self.env.get_template(path)
        except TemplateNotFound as exc:
            raise TemplateError(
                f"Template {template_name} not found", template_name=template_name, cause=exc
            ) from exc
        except TemplateSyntaxError as exc:
            raise TemplateError(
                f"Template {template_name} is invalid: {exc.message}",
                template_name=template_name,
                cause=exc,
            ) from exc
        return template.render(**context)

    def render_string(self, template_string: str, context: dict[str, Any]) -> str:
        """Render an inline template string with the provided context."""
        template = self.env.from_string(template_string)
        return template.render(**context)

    # -- File-based rendering (async) --------------------------------------

    async def render_to_file(
        self,
        template_name: str,
        output_path: str | Path,
        context: dict[str, Any],
    ) -> Path:
        """Render a template and write the result to *output_path*.

        Parent directories are created automatically.
        """
        content = self.render(template_name, context)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    # -- Utility -----------------------------------------------------------

    def has_template(self, template_name: str) -> bool:
        return (self.template_dir / f"{template_name}{TEMPLATE_SUFFIX}").is_file()

    def list_templates(self) -> list[str]:
        """Sorted template names (without suffix) available to :meth:`render`."""
        if not self.template_dir.is_dir():
            return []
        return sorted(
            p.name[: -len(TEMPLATE_SUFFIX)]
            for p in self.template_dir.glob(f"*{TEMPLATE_SUFFIX}")
        )


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------

def pluralize(value: str) -> str:
    """Naive English plural: ``Category`` -> ``Categories``, ``Box`` -> ``Boxes``."""
    if not value:
        return value
    lower = value.lower()
    if lower.endswith("y") and len(value) > 1 and lower[-2] not in "aeiou":
        return value[:-1] + "ies"
    if lower.endswith(("s", "x", "z", "ch", "sh")):
        return value + "es"
    return value + "s"


def _capitalize_filter(value: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    return value[:1].upper() + value[1:]


def _lowercase_filter(value: str) -> str:
    return value.lower()


def _uppercase_filter(value: str) -> str:
    return value.upper()


def humanize(value: str) -> str:
    """``UnitPrice`` or ``unit_price`` -> ``Unit price``."""
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", " ", value)
    words = [word for word in re.split(r"[\s_-]+", spaced.strip()) if word]
    text = " ".join(word if word.isupper() and len(word) > 1 else word.lower() for word in words)
    return _capitalize_filter(text)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")

"""Exception hierarchy for viewscaffold.

Model extraction itself never raises these for missing or unreadable
sources (it degrades to an empty property list); they are raised by the
scaffolding and navigation layers and reported by the CLI.
"""

from __future__ import annotations

from typing import Any, Optional


class ScaffoldError(Exception):
    """Base class for errors surfaced to the user."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.code = code
        self.details = details or {}
        super().__init__(message)


class FileSystemError(ScaffoldError):
    """A view or template file could not be read or written."""

    def __init__(self, message: str, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        super().__init__(
            message,
            "FILESYSTEM_ERROR",
            {"path": path, "cause": str(cause) if cause else None},
        )


class TemplateError(ScaffoldError):
    """A view template is missing or failed to render."""

    def __init__(
        self, message: str, template_name: str, cause: Optional[BaseException] = None
    ) -> None:
        self.template_name = template_name
        super().__init__(
            message,
            "TEMPLATE_ERROR",
            {"template_name": template_name, "cause": str(cause) if cause else None},
        )


class ModelParsingError(ScaffoldError):
    """A model type could not be resolved to a source file or class."""

    def __init__(
        self, message: str, model_type: str, cause: Optional[BaseException] = None
    ) -> None:
        self.model_type = model_type
        super().__init__(
            message,
            "MODEL_PARSING_ERROR",
            {"model_type": model_type, "cause": str(cause) if cause else None},
        )


class ProjectDetectionError(ScaffoldError):
    """The workspace does not exist or is not a directory."""

    def __init__(self, message: str, workspace_path: str) -> None:
        self.workspace_path = workspace_path
        super().__init__(message, "PROJECT_DETECTION_ERROR", {"workspace_path": workspace_path})

"""ASP.NET Core project discovery.

A workspace may be the project directory itself or a solution folder that
holds one or more project directories; the project root is wherever the
``.csproj`` file lives.
"""

from __future__ import annotations

import logging
from pathlib import Path

from viewscaffold.errors import ProjectDetectionError

logger = logging.getLogger(__name__)


def _csproj_in(directory: Path) -> Path | None:
    """First ``.csproj`` file directly inside *directory*, if readable."""
    try:
        return next(iter(sorted(directory.glob("*.csproj"))), None)
    except OSError as exc:
        logger.debug("Cannot list %s: %s", directory, exc)
        return None


def find_project_root(workspace: str | Path, active_file: str | Path | None = None) -> Path:
    """Locate the directory holding the project's ``.csproj`` file.

    Search order:

    1. *workspace* itself;
    2. its direct subdirectories, alphabetically;
    3. the directories above *active_file*, stopping at *workspace*;
    4. *workspace* as a fallback.

    Raises:
        ProjectDetectionError: If *workspace* is not an existing directory.
    """
    root = Path(workspace)
    if not root.is_dir():
        raise ProjectDetectionError(f"Workspace {root} is not a directory", workspace_path=str(root))

    if _csproj_in(root) is not None:
        return root

    try:
        subdirs = sorted(p for p in root.iterdir() if p.is_dir())
    except OSError as exc:
        logger.debug("Cannot list %s: %s", root, exc)
        subdirs = []
    for subdir in subdirs:
        if _csproj_in(subdir) is not None:
            return subdir

    if active_file is not None:
        current = Path(active_file).parent
        while current != root and current != current.parent:
            if _csproj_in(current) is not None:
                return current
            current = current.parent

    logger.debug("No .csproj found under %s; using the workspace", root)
    return root


def detect_project_name(project_root: str | Path) -> str:
    """Project name from the ``.csproj`` file stem, else the directory name."""
    root = Path(project_root)
    csproj = _csproj_in(root)
    if csproj is not None:
        return csproj.stem
    return root.resolve().name

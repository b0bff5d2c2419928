"""Resolution of code block file paths against a project root."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

PROJECT_ROOT_ENV = "SEGMENTER_PROJECT_ROOT"


def resolve_path(path: str, project_root: Optional[Union[str, Path]] = None) -> Path:
    """Resolve a path taken from a fence header to an absolute path.

    Absolute paths are kept, ``~`` is expanded, and relative paths are joined
    to ``project_root`` (or the current directory when there is none).
    """
    candidate = Path(os.path.expanduser(path.strip()))
    if candidate.is_absolute():
        return candidate
    base = Path(os.path.expanduser(str(project_root))) if project_root else Path.cwd()
    return (base / candidate).absolute()


def default_project_root() -> Optional[Path]:
    value = os.environ.get(PROJECT_ROOT_ENV, "").strip()
    return Path(value) if value else None

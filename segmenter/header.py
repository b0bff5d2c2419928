"""Fence info-line parsing: ``lang``, ``lang:path`` or a bare path."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

LANG_PATH_RE = re.compile(r"^([\w\-]+):(.*)$")


@dataclass(frozen=True)
class FenceHeader:
    language: Optional[str] = None
    file_path: Optional[str] = None


def parse_header(header: str) -> FenceHeader:
    """Split a fence header into language and file path.

    Examples:
      "Python"           -> language="python"
      "go:pkg/main.go"   -> language="go", file_path="pkg/main.go"
      "src/app.ts"       -> file_path="src/app.ts"
      "mermaid"          -> language="mermaid"
    """
    header = header.strip()
    if not header:
        return FenceHeader()

    m = LANG_PATH_RE.match(header)
    if m:
        path = m.group(2).strip()
        return FenceHeader(language=m.group(1).lower(), file_path=path or None)

    if "/" in header or ("." in header and not header.lower().startswith("mermaid")):
        return FenceHeader(file_path=header)
    return FenceHeader(language=header.lower())


def split_header(text: str) -> Optional[Tuple[str, str]]:
    """Return ``(header_line, rest)`` once the header line is terminated."""
    idx = text.find("\n")
    if idx == -1:
        return None
    return text[:idx], text[idx + 1:]

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from segmenter.mermaid import MERMAID_KEYWORDS


@dataclass(frozen=True)
class SegmenterConfig:
    """Feature switches for a segmenter instance.

    Fences are always recognized; table and diagram auto-detection can be
    turned off for sources that never produce them.
    """

    detect_mermaid: bool = True
    detect_tables: bool = True
    mermaid_keywords: Tuple[str, ...] = MERMAID_KEYWORDS


DEFAULT_CONFIG = SegmenterConfig()

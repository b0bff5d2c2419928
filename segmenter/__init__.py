from __future__ import annotations

from typing import Iterable, Optional, Tuple

from segmenter.accumulator import StreamAccumulator
from segmenter.classifier import ContentClassifier, SegmenterState
from segmenter.config import SegmenterConfig
from segmenter.elements import (
    Alignment,
    CodeBlockElement,
    Element,
    ElementStore,
    ElementStoreError,
    TableElement,
    TextElement,
)
from segmenter.header import FenceHeader, parse_header
from segmenter.mermaid import MERMAID_KEYWORDS


def segment(deltas: Iterable[str], config: Optional[SegmenterConfig] = None) -> Tuple[Element, ...]:
    """Segment a finished list of deltas in one go and return the elements."""
    acc = StreamAccumulator(config)
    acc.catch_up(list(deltas))
    return acc.elements


__all__ = [
    "Alignment",
    "CodeBlockElement",
    "ContentClassifier",
    "Element",
    "ElementStore",
    "ElementStoreError",
    "FenceHeader",
    "MERMAID_KEYWORDS",
    "SegmenterConfig",
    "SegmenterState",
    "StreamAccumulator",
    "TableElement",
    "TextElement",
    "parse_header",
    "segment",
]

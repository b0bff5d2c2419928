"""Public entry point: feed streamed deltas, read back structured elements."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from segmenter.classifier import ContentClassifier, SegmenterState
from segmenter.config import DEFAULT_CONFIG, SegmenterConfig
from segmenter.elements import Element, ElementStore

logger = logging.getLogger(__name__)

ChangeHook = Callable[[Tuple[Element, ...]], None]


class StreamAccumulator:
    """Segments one streamed assistant reply into text, code and table elements.

    Usage:
        acc = StreamAccumulator()
        for delta in stream:
            acc.ingest(delta)
            render(acc.elements)

    The element sequence depends only on the ordered deltas, so a fresh
    instance given ``catch_up(all_deltas)`` ends in the same state as one that
    ingested them one at a time. Ingestion never raises on malformed input;
    unterminated constructs stay as an incomplete last element.
    """

    def __init__(self, config: Optional[SegmenterConfig] = None, on_change: Optional[ChangeHook] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.on_change = on_change
        self._store = ElementStore()
        self._classifier = ContentClassifier(self._store, self.config)
        self._deltas: List[str] = []
        self._text: Optional[str] = ""

    @property
    def deltas(self) -> Tuple[str, ...]:
        return tuple(self._deltas)

    @property
    def full_text(self) -> str:
        if self._text is None:
            self._text = "".join(self._deltas)
        return self._text

    @property
    def elements(self) -> Tuple[Element, ...]:
        """Snapshot of the elements so far, in stream order.

        When a table or diagram start is found in text that was already
        streamed, that text leaves the open text element. If nothing is left,
        the text element is dropped and the block takes over its id, so id 0
        can be a TextElement in one snapshot and a TableElement in the next.
        Match elements across snapshots on both ``id`` and ``kind``.
        """
        return self._store.snapshot()

    @property
    def state(self) -> SegmenterState:
        return self._classifier.state

    @property
    def unconsumed(self) -> str:
        """Text received but not yet moved into an element."""
        return self._classifier.buffer

    def ingest(self, delta: str) -> None:
        self._deltas.append(delta)
        if not delta:
            return
        self._text = None
        version = self._store.version
        self._classifier.feed(delta)
        if self.on_change is not None and self._store.version != version:
            self.on_change(self._store.snapshot())

    def catch_up(self, deltas: Sequence[str]) -> None:
        """Ingest the deltas past the ones already seen.

        Safe to call repeatedly with a growing list, e.g. when re-attaching to
        a stream in progress. A list no longer than what was already recorded
        is ignored.
        """
        seen = len(self._deltas)
        if len(deltas) <= seen:
            logger.debug("catch_up ignored: %d deltas given, %d already recorded", len(deltas), seen)
            return
        for delta in deltas[seen:]:
            self.ingest(delta)

"""Per-ingestion classification of buffered stream text into elements."""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import List, Optional

from segmenter.config import DEFAULT_CONFIG, SegmenterConfig
from segmenter.elements import CodeBlockElement, ElementStore, TableElement, TextElement
from segmenter.fence import FenceScan, scan_fence
from segmenter.header import parse_header, split_header
from segmenter.lines import Line, split_lines
from segmenter.mermaid import find_mermaid_start, is_mermaid_start, scan_mermaid
from segmenter.tables import find_table_start, scan_table

logger = logging.getLogger(__name__)

_INDENT_RE = re.compile(r"[^\S\n]*")


class SegmenterState(str, Enum):
    IDLE = "idle"
    CODE_HEADER = "code_header"
    CODE_BODY = "code_body"
    TABLE = "table"
    MERMAID = "mermaid"


def _strip_tail(content: str, tail: str) -> str:
    if content.endswith(tail):
        return content[: len(content) - len(tail)]
    # The element's leading trim already ate the tail's leading whitespace.
    return content[: max(0, len(content) - len(tail.lstrip()))]


class ContentClassifier:
    """Moves buffered text into the element store.

    Each call to :meth:`feed` runs steps until one has to wait for more input.
    Inside a fenced code block only the fence scan runs. An open table or
    mermaid block keeps its source at the head of ``buffer`` and is re-parsed
    from there. Otherwise diagram starts win over table starts, and both win
    over the fence scan for lines that come before the next fence.

    The carry (``_prev`` plus ``_line``) is the previous line and the part of
    the current line that already went into the open text element, so a table
    header followed by its separator, or a diagram keyword split across
    deltas, is still seen from the start of its line. Each terminated line is
    examined once; ``_checked`` counts the leading buffer characters whose
    lines already came up empty. The unterminated line is only ever checked
    by its first few characters.
    """

    def __init__(self, store: ElementStore, config: SegmenterConfig = DEFAULT_CONFIG) -> None:
        self.store = store
        self.config = config
        self.state = SegmenterState.IDLE
        self.buffer = ""
        self._prev = ""
        self._line = ""
        self._checked = 0
        self._head_len = max((len(kw) for kw in config.mermaid_keywords), default=0) + 1

    @property
    def carry(self) -> str:
        return self._prev + self._line

    def feed(self, text: str) -> None:
        self.buffer += text
        while self.buffer and self._step():
            pass

    # ---- steps ----
    def _step(self) -> bool:
        """Run one step; False means nothing more can happen until new text arrives."""
        if self.state is SegmenterState.CODE_HEADER:
            return self._read_header()
        if self.state is SegmenterState.CODE_BODY:
            return self._scan_code_body()
        if self.state is SegmenterState.TABLE:
            return self._continue_table()
        if self.state is SegmenterState.MERMAID:
            return self._continue_mermaid()
        return self._scan_idle()

    def _scan_idle(self) -> bool:
        scan = scan_fence(self.buffer)
        if self._detect_block(scan):
            return True
        if scan.found:
            self._open_code_block(scan)
            return True
        if scan.consumable:
            self._consume_text(self.buffer[: scan.consumable])
            self.buffer = self.buffer[scan.consumable:]
        return False

    def _read_header(self) -> bool:
        split = split_header(self.buffer)
        if split is None:
            return False
        header, self.buffer = split
        parsed = parse_header(header)
        code = self.store.last
        self.store.update(code.id, language=parsed.language, file_path=parsed.file_path)
        self._set_state(SegmenterState.CODE_BODY)
        return True

    def _scan_code_body(self) -> bool:
        scan = scan_fence(self.buffer)
        code = self.store.last
        if scan.found:
            body = self.buffer[: scan.fence_start]
            self.buffer = self.buffer[scan.fence_end:]
            self.store.update(code.id, content=code.content + body, complete=True)
            self._set_state(SegmenterState.IDLE)
            return True
        if scan.consumable:
            self.store.update(code.id, content=code.content + self.buffer[: scan.consumable])
            self.buffer = self.buffer[scan.consumable:]
        return False

    def _continue_table(self) -> bool:
        table = self.store.last
        scan = scan_table(self.buffer)
        if scan is None:
            # Buffer no longer opens with a header and separator; hand it back as text.
            self.store.discard_last()
            self._set_state(SegmenterState.IDLE)
            return True
        self.store.update(
            table.id,
            headers=scan.headers,
            alignments=scan.alignments,
            rows=scan.rows,
            complete=scan.complete,
        )
        if not scan.complete:
            return False
        self.buffer = self.buffer[scan.end:]
        self._set_state(SegmenterState.IDLE)
        return True

    def _continue_mermaid(self) -> bool:
        code = self.store.last
        scan = scan_mermaid(self.buffer)
        self.store.update(code.id, content=scan.content, complete=scan.complete)
        if not scan.complete:
            return False
        self.buffer = self.buffer[scan.end:]
        self._set_state(SegmenterState.IDLE)
        return True

    # ---- detection ----
    def _detect_block(self, scan: FenceScan) -> bool:
        """Open a mermaid block or table if one starts before the next fence.

        Offsets are positions in ``carry + buffer``.
        """
        if not (self.config.detect_mermaid or self.config.detect_tables):
            return False
        limit = scan.fence_start if scan.found else len(self.buffer)
        nl = self.buffer.rfind("\n", 0, limit)

        if nl + 1 > self._checked:
            if self._detect_in_lines(nl):
                return True
            self._checked = nl + 1

        if scan.found or not self.config.detect_mermaid:
            return False
        if nl == -1:
            start = len(self._prev)
            head = self._line_head()
        else:
            start = len(self._prev) + len(self._line) + nl + 1
            head = self.buffer[nl + 1:]
        if not is_mermaid_start(Line(head, 0, len(head), False), self.config.mermaid_keywords):
            return False
        self._open_block(start, mermaid=True)
        return True

    def _detect_in_lines(self, nl: int) -> bool:
        """Check the lines terminated in ``buffer[:nl + 1]`` not examined yet."""
        carry = self.carry
        lines: List[Line] = split_lines(carry + self.buffer[: nl + 1])[:-1]
        threshold = len(carry) + self._checked
        first_new = next(i for i, line in enumerate(lines) if line.end > threshold)
        # The line before the first new one can still be a table header.
        window = lines[max(0, first_new - 1):]

        mermaid_at: Optional[int] = None
        table_at: Optional[int] = None
        if self.config.detect_mermaid:
            mermaid_at = find_mermaid_start(window, self.config.mermaid_keywords)
        if self.config.detect_tables:
            table_at = find_table_start(window)
        if mermaid_at is None and table_at is None:
            return False

        if mermaid_at is not None and (table_at is None or mermaid_at <= table_at):
            self._open_block(window[mermaid_at].start, mermaid=True)
        else:
            self._open_block(window[table_at].start, mermaid=False)
        return True

    def _line_head(self) -> str:
        """Enough of the unterminated line to decide a diagram keyword."""
        indent = _INDENT_RE.match(self._line).end()
        head = self._line[: indent + self._head_len]
        if len(head) < indent + self._head_len:
            head += self.buffer
        return head

    def _open_block(self, offset: int, mermaid: bool) -> None:
        self._take_block_source(offset)
        if mermaid:
            self.store.append(CodeBlockElement(id=self.store.next_id, language="mermaid"))
            self._set_state(SegmenterState.MERMAID)
        else:
            self.store.append(TableElement(id=self.store.next_id))
            self._set_state(SegmenterState.TABLE)

    def _take_block_source(self, offset: int) -> None:
        """Make the text from ``offset`` on the buffer and flush what precedes it."""
        carry = self.carry
        if offset < len(carry):
            self._retract_carry(carry[offset:])
            self.buffer = carry[offset:] + self.buffer
            before = ""
        else:
            cut = offset - len(carry)
            before = self.buffer[:cut]
            self.buffer = self.buffer[cut:]
        self._flush_text(before)

    def _retract_carry(self, tail: str) -> None:
        """Take ``tail`` (the block's first lines) back out of the open text."""
        text = self.store.last
        remaining = _strip_tail(text.content, tail)
        if remaining.strip():
            self.store.update(text.id, content=remaining)
        else:
            self.store.discard_last()

    # ---- text ----
    def _open_code_block(self, scan: FenceScan) -> None:
        self._flush_text(self.buffer[: scan.fence_start])
        self.buffer = self.buffer[scan.fence_end:]
        self.store.append(CodeBlockElement(id=self.store.next_id))
        self._set_state(SegmenterState.CODE_HEADER)

    def _flush_text(self, text: str) -> None:
        """Append ``text`` to the open text element and complete it."""
        last = self.store.last
        if isinstance(last, TextElement) and not last.complete:
            self.store.update(last.id, content=last.content + text, complete=True)
        elif text.strip():
            self.store.append(TextElement(id=self.store.next_id, content=text, complete=True))
        self._prev = self._line = ""

    def _consume_text(self, chunk: str) -> None:
        last = self.store.last
        if isinstance(last, TextElement) and not last.complete:
            self.store.update(last.id, content=last.content + chunk)
        else:
            self.store.append(TextElement(id=self.store.next_id, content=chunk))

        nl = chunk.rfind("\n")
        if nl == -1:
            self._line += chunk
        else:
            prev_start = chunk.rfind("\n", 0, nl) + 1
            self._prev = self._line + chunk[: nl + 1] if prev_start == 0 else chunk[prev_start: nl + 1]
            self._line = chunk[nl + 1:]
        self._checked = max(0, self._checked - len(chunk))

    def _set_state(self, state: SegmenterState) -> None:
        self._checked = 0
        if state is not self.state:
            logger.debug("segmenter %s -> %s (element %s)", self.state.value, state.value, self.store.next_id - 1)
            self.state = state

from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class Line:
    """One line of buffered text, located by character offsets.

    ``end`` points just past the newline for terminated lines. The last line of
    a buffer is never terminated and may be empty.
    """

    text: str
    start: int
    end: int
    terminated: bool

    @property
    def blank(self) -> bool:
        return not self.text.strip()


def split_lines(text: str) -> List[Line]:
    lines: List[Line] = []
    pos = 0
    while True:
        idx = text.find("\n", pos)
        if idx == -1:
            lines.append(Line(text[pos:], pos, len(text), False))
            return lines
        lines.append(Line(text[pos:idx], pos, idx + 1, True))
        pos = idx + 1

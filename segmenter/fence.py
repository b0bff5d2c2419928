"""Character scan for triple-backtick fences.

The scan walks unconsumed text once, tracking backslash escapes and the
length of the current backtick run. It reports the first unescaped fence and
how much text before it is safe to hand to the open element: a position is
safe only after a later non-whitespace character has been seen, so trailing
whitespace, a dangling backslash or a partial backtick run stay buffered until
the next delta decides what they are.
"""

from __future__ import annotations

from dataclasses import dataclass

FENCE = "```"


@dataclass(frozen=True)
class FenceScan:
    consumable: int
    fence_start: int = -1
    fence_end: int = -1

    @property
    def found(self) -> bool:
        return self.fence_start >= 0


def scan_fence(text: str) -> FenceScan:
    """Scan ``text`` up to the first unescaped fence.

    Returns the watermark (number of leading characters safe to consume) and,
    when a fence was reached, its ``[fence_start, fence_end)`` span. The
    watermark never extends past ``fence_start``.
    """
    escaping = False
    run = 0
    consumable = 0
    for i, c in enumerate(text):
        if c == "`":
            if escaping:
                escaping = False
                run = 0
                continue
            run += 1
            if run == len(FENCE):
                return FenceScan(consumable=consumable, fence_start=i + 1 - run, fence_end=i + 1)
            continue
        run = 0
        if c == "\\":
            escaping = not escaping
            continue
        escaping = False
        if not c.isspace():
            consumable = i + 1
    return FenceScan(consumable=consumable)

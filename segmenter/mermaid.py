"""Auto-detection of unfenced mermaid diagrams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from segmenter.fence import FENCE
from segmenter.lines import Line, split_lines

MERMAID_KEYWORDS = (
    "graph TD", "graph LR", "graph TB", "graph BT", "graph RL", "graph DT",
    "flowchart TD", "flowchart LR", "flowchart TB", "flowchart BT", "flowchart RL",
    "sequenceDiagram", "classDiagram", "stateDiagram-v2", "stateDiagram", "erDiagram",
    "journey", "gantt", "pie", "gitGraph", "mindmap", "timeline",
    "quadrantChart", "requirementDiagram", "C4Context",
)


def is_mermaid_start(line: Line, keywords: Sequence[str] = MERMAID_KEYWORDS) -> bool:
    """True when ``line`` opens with a diagram keyword used as a whole word.

    An unterminated line needs something after the keyword, since ``pie``
    may still grow into ``pies``.
    """
    s = line.text.lstrip()
    for kw in keywords:
        if not s.startswith(kw):
            continue
        rest = s[len(kw):]
        if not rest:
            if line.terminated:
                return True
        elif rest[0].isspace() or rest[0] == ";":
            return True
    return False


def find_mermaid_start(lines: Sequence[Line], keywords: Sequence[str] = MERMAID_KEYWORDS) -> Optional[int]:
    for i, line in enumerate(lines):
        if is_mermaid_start(line, keywords):
            return i
    return None


@dataclass(frozen=True)
class MermaidScan:
    content: str
    end: int
    complete: bool


def scan_mermaid(text: str) -> MermaidScan:
    """Collect the diagram at the start of ``text``.

    The diagram ends at the first complete blank line, or at a line opening a
    code fence, after at least one content line.
    """
    content: List[str] = []
    end = 0
    for line in split_lines(text):
        if content and line.text.lstrip().startswith(FENCE):
            return MermaidScan("\n".join(content), end, True)
        if not line.terminated:
            if not line.blank:
                content.append(line.text)
            break
        if line.blank:
            if content:
                return MermaidScan("\n".join(content), end, True)
        else:
            content.append(line.text)
        end = line.end
    return MermaidScan("\n".join(content), end, False)

"""Element model and the ordered store the segmenter mutates."""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


_LEADING_BLANK_LINES = re.compile(r"\A(?:[^\S\n]*\n)+")


def trimmed(text: str, complete: bool) -> str:
    """Trim both ends of finished text, only the leading end while streaming."""
    return text.strip() if complete else text.lstrip()


def trimmed_code(text: str, complete: bool) -> str:
    """Like ``trimmed`` but keeps the indentation of the first code line."""
    text = _LEADING_BLANK_LINES.sub("", text)
    return text.rstrip() if complete else text


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"

    @classmethod
    def from_separator(cls, cell: str) -> "Alignment":
        """Derive alignment from one separator cell such as ``:---:``."""
        cell = cell.strip()
        if cell.startswith(":") and cell.endswith(":") and len(cell) > 1:
            return cls.CENTER
        if cell.endswith(":"):
            return cls.RIGHT
        return cls.LEFT


@dataclass(frozen=True)
class TextElement:
    id: int
    content: str = ""
    complete: bool = False

    kind = "text"

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", trimmed(self.content, self.complete))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "kind": self.kind, "complete": self.complete, "content": self.content}


@dataclass(frozen=True)
class CodeBlockElement:
    id: int
    content: str = ""
    complete: bool = False
    language: Optional[str] = None
    file_path: Optional[str] = None

    kind = "code_block"

    def __post_init__(self) -> None:
        object.__setattr__(self, "content", trimmed_code(self.content, self.complete))

    @property
    def is_mermaid(self) -> bool:
        return self.language == "mermaid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "complete": self.complete,
            "content": self.content,
            "language": self.language,
            "file_path": self.file_path,
        }


@dataclass(frozen=True)
class TableElement:
    id: int
    headers: Tuple[str, ...] = ()
    alignments: Tuple[Alignment, ...] = ()
    rows: Tuple[Tuple[str, ...], ...] = ()
    complete: bool = False

    kind = "table"

    def to_tsv(self) -> str:
        """Tab separated text, the form a table is copied to the clipboard in."""
        lines = ["\t".join(self.headers)]
        lines.extend("\t".join(row) for row in self.rows)
        return "\n".join(lines).strip()

    def to_csv(self) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(self.headers)
        writer.writerows(self.rows)
        return buf.getvalue().strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind,
            "complete": self.complete,
            "headers": list(self.headers),
            "alignments": [a.value for a in self.alignments],
            "rows": [list(r) for r in self.rows],
        }


Element = Union[TextElement, CodeBlockElement, TableElement]


class ElementStoreError(ValueError):
    """Raised when a finished or non-trailing element would be modified."""


@dataclass
class ElementStore:
    """Append-only, id-addressed sequence of elements.

    Element ids equal their position. Only the last element may change, and
    only while it is incomplete; changes replace the stored value so snapshots
    handed out earlier stay untouched.
    """

    _elements: List[Element] = field(default_factory=list)
    version: int = 0

    def __len__(self) -> int:
        return len(self._elements)

    def __getitem__(self, idx: int) -> Element:
        return self._elements[idx]

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    @property
    def last(self) -> Optional[Element]:
        return self._elements[-1] if self._elements else None

    @property
    def next_id(self) -> int:
        return len(self._elements)

    def snapshot(self) -> Tuple[Element, ...]:
        return tuple(self._elements)

    def append(self, element: Element) -> int:
        if element.id != len(self._elements):
            raise ElementStoreError(f"element id {element.id} out of order, expected {len(self._elements)}")
        last = self.last
        if last is not None and not last.complete:
            raise ElementStoreError(f"element {last.id} is still open")
        self._elements.append(element)
        self.version += 1
        return element.id

    def replace(self, element_id: int, element: Element) -> Element:
        self._check_open(element_id)
        if element.id != element_id:
            raise ElementStoreError(f"cannot move element {element.id} to id {element_id}")
        self._elements[element_id] = element
        self.version += 1
        return element

    def update(self, element_id: int, **changes: Any) -> Element:
        """Replace the open element with a copy carrying ``changes``.

        No-op (and no version bump) when the copy equals the current value.
        """
        current = self._check_open(element_id)
        updated = replace(current, **changes)
        if updated == current:
            return current
        return self.replace(element_id, updated)

    def discard_last(self) -> Element:
        last = self.last
        if last is None:
            raise ElementStoreError("store is empty")
        self._check_open(last.id)
        self._elements.pop()
        self.version += 1
        return last

    def _check_open(self, element_id: int) -> Element:
        if element_id != len(self._elements) - 1:
            raise ElementStoreError(f"element {element_id} is not the last element")
        current = self._elements[element_id]
        if current.complete:
            raise ElementStoreError(f"element {element_id} is complete")
        return current

"""Pipe-table detection and accumulation.

A table starts at a row line directly followed by a separator line::

    Name | Size
    :--- | ---:
    a    | 1

The open table's source stays at the head of the unconsumed buffer and is
re-parsed from its first line on every pass, so rows can arrive in any
chunking. The table ends at the first line that is not a row, or at a blank
line once it has a data row.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from segmenter.elements import Alignment
from segmenter.lines import Line, split_lines

_PIPE_RE = re.compile(r"(?<!\\)\|")
_SEPARATOR_CELL_RE = re.compile(r"^:?-+:?$")


def count_pipes(line: str) -> int:
    return len(_PIPE_RE.findall(line))


def split_row(line: str) -> List[str]:
    """Split a row on unescaped pipes, dropping the optional outer pipes."""
    s = line.strip()
    if s.startswith("|"):
        s = s[1:]
    if s.endswith("|") and not s.endswith("\\|"):
        s = s[:-1]
    return [cell.strip().replace("\\|", "|") for cell in _PIPE_RE.split(s)]


def is_table_row(line: str) -> bool:
    """A row has two pipes, or one pipe between two cells (``a | b``)."""
    pipes = count_pipes(line)
    if pipes == 0:
        return False
    return pipes >= 2 or len(split_row(line)) >= 2


def is_separator_row(line: str) -> bool:
    s = line.strip()
    if "|" not in s or "-" not in s:
        return False
    return all(_SEPARATOR_CELL_RE.match(cell) for cell in split_row(s))


def find_table_start(lines: Sequence[Line]) -> Optional[int]:
    """Index of the first header line followed by a finished separator line, or None."""
    for i in range(len(lines) - 1):
        sep = lines[i + 1]
        if sep.terminated and is_table_row(lines[i].text) and is_separator_row(sep.text):
            return i
    return None


def _fit(cells: Sequence[str], width: int) -> Tuple[str, ...]:
    cells = list(cells[:width])
    cells.extend([""] * (width - len(cells)))
    return tuple(cells)


@dataclass(frozen=True)
class TableScan:
    headers: Tuple[str, ...]
    alignments: Tuple[Alignment, ...]
    rows: Tuple[Tuple[str, ...], ...]
    end: int
    complete: bool


def scan_table(text: str) -> Optional[TableScan]:
    """Parse the table at the start of ``text``.

    Returns None when ``text`` does not start with a header and separator.
    ``end`` is the offset just past the table's last complete line; when
    ``complete`` is true, ``text[:end]`` is the table's source and the rest
    belongs to whatever follows.
    """
    lines = split_lines(text)
    if len(lines) < 2 or not is_table_row(lines[0].text) or not is_separator_row(lines[1].text):
        return None

    headers = tuple(split_row(lines[0].text))
    width = len(headers)
    seps = [Alignment.from_separator(cell) for cell in split_row(lines[1].text)]
    alignments = tuple(seps[:width]) + (Alignment.LEFT,) * max(0, width - len(seps))

    rows: List[Tuple[str, ...]] = []
    data_rows = 0
    end = lines[1].end
    complete = False
    if lines[1].terminated:
        for line in lines[2:]:
            if not line.terminated:
                # Unfinished last line: an empty one means the buffer ended on a
                # newline, which closes a table that already has data.
                if line.blank:
                    complete = data_rows > 0
                elif count_pipes(line.text):
                    rows.append(_fit(split_row(line.text), width))
                break
            if is_table_row(line.text):
                rows.append(_fit(split_row(line.text), width))
                data_rows += 1
                end = line.end
            elif line.blank and data_rows == 0:
                end = line.end
            else:
                complete = True
                break

    return TableScan(headers=headers, alignments=alignments, rows=tuple(rows), end=end, complete=complete)

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

from rich import box
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from render.highlight import lexer_name
from segmenter.elements import Alignment, CodeBlockElement, Element, TableElement, TextElement
from util.paths import resolve_path

STREAMING_MARK = "streaming…"

_JUSTIFY = {
    Alignment.LEFT: "left",
    Alignment.CENTER: "center",
    Alignment.RIGHT: "right",
}


def _code_title(element: CodeBlockElement, project_root: Optional[Union[str, Path]]) -> Optional[str]:
    parts = []
    if element.is_mermaid:
        parts.append("mermaid diagram")
    elif element.language:
        parts.append(element.language)
    if element.file_path:
        parts.append(str(resolve_path(element.file_path, project_root)))
    return " · ".join(parts) or None


def _render_code(element: CodeBlockElement, project_root) -> RenderableType:
    syntax = Syntax(element.content, lexer_name(element.language), word_wrap=True)
    return Panel(
        syntax,
        title=_code_title(element, project_root),
        title_align="left",
        subtitle=None if element.complete else Text(STREAMING_MARK, style="dim italic"),
        box=box.ROUNDED,
    )


def _render_table(element: TableElement) -> RenderableType:
    table = Table(box=box.SIMPLE_HEAVY, show_lines=False)
    for header, align in zip(element.headers, element.alignments):
        table.add_column(header, justify=_JUSTIFY[align])
    for row in element.rows:
        table.add_row(*row)
    if not element.complete:
        return Group(table, Text(STREAMING_MARK, style="dim italic"))
    return table


def render_element(element: Element, project_root: Optional[Union[str, Path]] = None) -> RenderableType:
    """Build the rich renderable for one element.

    Text goes through Markdown, code blocks become highlighted Syntax in a
    titled panel, tables become rich Tables. Incomplete elements carry a dim
    streaming marker.
    """
    if isinstance(element, CodeBlockElement):
        return _render_code(element, project_root)
    if isinstance(element, TableElement):
        return _render_table(element)
    if isinstance(element, TextElement):
        if element.complete:
            return Markdown(element.content)
        return Group(Markdown(element.content), Text(STREAMING_MARK, style="dim italic"))
    raise TypeError(f"Unsupported element: {element!r}")


def render_elements(elements: Sequence[Element], project_root: Optional[Union[str, Path]] = None) -> Group:
    return Group(*(render_element(e, project_root) for e in elements))


@dataclass
class ElementStream:
    """Live view over a growing element snapshot.

    Completed elements are printed once above the live region; only the
    trailing incomplete element is redrawn. Updates are throttled to
    ``min_delay`` unless ``final`` is set.
    """

    console: Optional[Console] = None
    project_root: Optional[Union[str, Path]] = None
    live: Optional[Live] = None
    when: float = 0.0
    min_delay: float = 1.0 / 20
    printed: int = 0

    def _ensure_live(self):
        if not self.live:
            self.live = Live(Text(""), console=self.console, refresh_per_second=1.0 / self.min_delay)
            self.live.start()

    def stop(self):
        if self.live:
            self.live.update(Text(""))
            self.live.stop()
            self.live = None

    def update(self, elements: Sequence[Element], final: bool = False) -> None:
        self._ensure_live()

        now = time.time()
        if not final and (now - self.when) < self.min_delay:
            return
        self.when = now

        # Everything before the last element is complete and never changes again.
        stable = len(elements)
        if not final and elements and not elements[-1].complete:
            stable -= 1

        if stable > self.printed and self.live:
            for element in elements[self.printed:stable]:
                self.live.console.print(render_element(element, self.project_root))
            self.printed = stable

        if final:
            self.stop()
            return

        if self.live:
            self.live.update(render_elements(elements[stable:], self.project_root))

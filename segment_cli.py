#!/usr/bin/env python3
"""
segment-cli: Split a streamed LLM reply into text, code block and table elements

Sources
- FILE (or stdin), replayed as deltas of --chunk-size characters
- --frames FILE: recorded SSE data lines, mapped through --provider
- --url URL --prompt TEXT: a live SSE endpoint, mapped through --provider

Output
- Rich rendering (Markdown text, highlighted code panels, tables); --live redraws
  while the stream arrives
- --json: one JSON document with the final element list
- --tables csv|tsv: tables printed as delimited text, ready to paste

Requirements
    pip install rich requests
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

import requests
from rich.console import Console
from rich.logging import RichHandler

from providers import get_provider
from render.elements import ElementStream, render_element, render_elements
from segmenter import SegmenterConfig, StreamAccumulator
from segmenter.elements import Element, TableElement
from util.paths import default_project_root
from util.sse_client import iter_sse_lines

# ---------------- Configuration ----------------
DEFAULT_CHUNK_SIZE = 16
DEFAULT_PROVIDER = "bedrock"
console = Console()

logger = logging.getLogger("segment_cli")


def chunked(text: str, size: int) -> Iterator[str]:
    """Split text into consecutive deltas of at most ``size`` characters."""
    size = max(1, size)
    for i in range(0, len(text), size):
        yield text[i:i + size]


def read_frames(path: Path) -> Iterator[str]:
    """Yield SSE data payloads from a recorded frames file, one per line."""
    with path.open("r", encoding="utf-8") as fh:
        for raw in fh:
            line = raw.strip()
            if not line or line.startswith(":"):
                continue
            yield line[5:].lstrip() if line.startswith("data:") else line


def iter_deltas(args: argparse.Namespace) -> Iterator[str]:
    if args.url:
        provider = get_provider(args.provider)
        payload = provider.build_payload(args.prompt or "")
        return provider.text_deltas(iter_sse_lines(args.url, json=payload, timeout=args.timeout))
    if args.frames:
        provider = get_provider(args.provider)
        return provider.text_deltas(read_frames(Path(args.frames)))
    if args.file and args.file != "-":
        text = Path(args.file).read_text(encoding="utf-8")
    else:
        text = sys.stdin.read()
    return chunked(text, args.chunk_size)


def _setup_logging(verbose: bool) -> None:
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(message)s", handlers=[handler], force=True)


def print_with_delimited_tables(elements: Sequence[Element], project_root: Optional[str], fmt: str) -> None:
    """Render elements, printing tables as CSV or TSV text for copying."""
    for element in elements:
        if isinstance(element, TableElement):
            text = element.to_csv() if fmt == "csv" else element.to_tsv()
            print(text, file=console.file)  # rich would expand the tabs
        else:
            console.print(render_element(element, project_root))


def run(args: argparse.Namespace) -> int:
    config = SegmenterConfig(detect_mermaid=not args.no_mermaid, detect_tables=not args.no_tables)
    project_root = args.project_root or default_project_root()

    stream: Optional[ElementStream] = None
    if args.live and not args.json:
        stream = ElementStream(console=console, project_root=project_root)

    acc = StreamAccumulator(config, on_change=stream.update if stream else None)
    try:
        for delta in iter_deltas(args):
            acc.ingest(delta)
    finally:
        if stream:
            stream.update(acc.elements, final=True)

    logger.debug("%d deltas, %d elements, final state %s", len(acc.deltas), len(acc.elements), acc.state.value)

    if args.json:
        doc = {"elements": [e.to_dict() for e in acc.elements], "state": acc.state.value}
        console.print_json(json.dumps(doc))
    elif not stream and args.tables != "grid":
        print_with_delimited_tables(acc.elements, project_root, args.tables)
    elif not stream:
        console.print(render_elements(acc.elements, project_root))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point with argument parsing and error reporting."""
    parser = argparse.ArgumentParser(prog="segment-cli", description="Segment a streamed LLM reply into text, code and table elements")
    parser.add_argument("file", nargs="?", help="Reply text to replay (default: stdin)")
    parser.add_argument("--chunk-size", type=int, default=DEFAULT_CHUNK_SIZE, help=f"Characters per replayed delta (default {DEFAULT_CHUNK_SIZE})")
    parser.add_argument("--frames", help="Recorded SSE data lines to replay through the provider mapper")
    parser.add_argument("--url", help="Live SSE endpoint URL")
    parser.add_argument("--prompt", help="Prompt sent to --url")
    parser.add_argument("--timeout", type=float, default=60.0, help="HTTP timeout in seconds for --url (default 60)")
    parser.add_argument("--provider", default=DEFAULT_PROVIDER, choices=["bedrock", "azure"], help=f"Provider adapter for --frames/--url (default: {DEFAULT_PROVIDER})")
    parser.add_argument("--json", action="store_true", help="Print the final elements as JSON")
    parser.add_argument("--live", action="store_true", help="Redraw the elements while the stream arrives")
    parser.add_argument("--project-root", help="Base directory for relative code block paths (default: $SEGMENTER_PROJECT_ROOT)")
    parser.add_argument("--no-mermaid", action="store_true", help="Do not auto-detect bare mermaid diagrams")
    parser.add_argument("--no-tables", action="store_true", help="Do not detect markdown tables")
    parser.add_argument("--tables", default="grid", choices=["grid", "csv", "tsv"], help="Print tables in the final static output as a grid, CSV or TSV (default: grid)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    if args.url and args.frames:
        parser.error("--url and --frames are mutually exclusive")

    _setup_logging(args.verbose)

    try:
        return run(args)
    except requests.RequestException as e:
        console.print(f"[red]Request failed: {e}[/red]")
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Cannot read input: {e}[/red]")
    except KeyboardInterrupt:
        console.print("[dim]Interrupted[/dim]")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())

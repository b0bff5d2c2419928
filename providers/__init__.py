from __future__ import annotations

from importlib import import_module
from typing import Iterator, Optional, Tuple


# Unified event type used by provider adapters
Event = Tuple[str, Optional[str]]  # ("model"|"text"|"done", value)


def get_provider(name: str):
    """Dynamically import a provider module by name.

    Valid names include: "bedrock" (Bedrock Anthropic) and "azure" (Azure OpenAI).
    Each module exposes ``build_payload``, ``map_events`` and ``text_deltas``.
    """
    mod_name = name.strip().lower()
    try:
        return import_module(f"providers.{mod_name}")
    except ImportError as e:
        raise ValueError(f"Unknown provider: {name}") from e


def only_text(events: Iterator[Event]) -> Iterator[str]:
    """Reduce a provider event stream to its text deltas, stopping at "done"."""
    for kind, value in events:
        if kind == "done":
            break
        if kind == "text" and value:
            yield value


__all__ = ["get_provider", "only_text", "Event"]

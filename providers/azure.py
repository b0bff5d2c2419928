from __future__ import annotations

import json
from typing import Dict, Iterator, Optional

from providers import Event, only_text


def build_payload(prompt: str, *, model: Optional[str] = None, max_tokens: Optional[int] = None, system_prompt: Optional[str] = None) -> dict:
    """Construct an Azure/OpenAI Chat Completions streaming payload for one prompt."""
    body: Dict = {
        "messages": [
            {"role": "system", "content": system_prompt or "Use Markdown formatting when appropriate."},
            {"role": "user", "content": prompt},
        ],
        "stream": True,
    }
    if model is not None:
        body["model"] = model
    if max_tokens is not None:
        body["max_completion_tokens"] = max_tokens
    return body


def map_events(lines: Iterator[str]) -> Iterator[Event]:
    """Map Azure/OpenAI Chat Completions SSE chunks to unified events.

    Emits:
    - ("model", name) on first chunk carrying `model`
    - ("text", delta) for each `choices[*].delta.content` string
    - ("done", None) on `[DONE]` or once a `finish_reason` is observed
    """
    sent_model = False
    for data in lines:
        if data == "[DONE]":
            yield ("done", None)
            break
        try:
            evt: Dict = json.loads(data)
        except json.JSONDecodeError:
            continue
        if not isinstance(evt, dict):
            continue

        model = evt.get("model")
        if not sent_model and isinstance(model, str) and model:
            yield ("model", model)
            sent_model = True

        finished = False
        for ch in evt.get("choices") or []:
            delta = ch.get("delta") or {}
            content = delta.get("content")
            if isinstance(content, str) and content:
                yield ("text", content)
            if ch.get("finish_reason"):
                finished = True
        if finished:
            yield ("done", None)
            break


def text_deltas(lines: Iterator[str]) -> Iterator[str]:
    return only_text(map_events(lines))

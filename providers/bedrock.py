from __future__ import annotations

import json
from typing import Dict, Iterator, Optional

from providers import Event, only_text


def build_payload(prompt: str, *, max_tokens: int = 4096, system_prompt: Optional[str] = None) -> dict:
    """Construct a Bedrock/Anthropic-style single-turn payload.

    No 'model' key; Bedrock endpoints select the model via path/config.
    """
    payload = {
        "anthropic_version": "bedrock-2023-05-31",
        "max_tokens": max_tokens,
        "messages": [{"role": "user", "content": prompt}],
    }
    if system_prompt:
        payload["system"] = system_prompt
    return payload


def map_events(lines: Iterator[str]) -> Iterator[Event]:
    """Map Bedrock/Anthropic JSON SSE frames to a simple event interface.

    Emits:
    - ("model", model_name) on message_start
    - ("text", text_chunk) on content_block_delta.text_delta
    - ("done", None) on message_stop or [DONE]

    Thinking and tool-use deltas carry no reply text and are skipped.
    """
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
        e_type = evt.get("type")
        if e_type == "message_start" and isinstance(evt.get("message"), dict):
            model = evt["message"].get("model")
            if model:
                yield ("model", model)
        elif e_type == "content_block_delta":
            delta = evt.get("delta") or {}
            if delta.get("type") == "text_delta":
                text = delta.get("text", "")
                if text:
                    yield ("text", text)
        elif e_type == "message_stop":
            yield ("done", None)
            break


def text_deltas(lines: Iterator[str]) -> Iterator[str]:
    return only_text(map_events(lines))

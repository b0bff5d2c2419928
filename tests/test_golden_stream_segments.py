import pytest

from providers import get_provider
from providers.azure import build_payload as build_azure_payload
from providers.azure import text_deltas as azure_text_deltas
from providers.bedrock import build_payload as build_bedrock_payload
from providers.bedrock import map_events as map_bedrock_events
from providers.bedrock import text_deltas as bedrock_text_deltas
from segmenter import CodeBlockElement, StreamAccumulator, TextElement

EXPECTED = (
    TextElement(0, "Intro line 1\nline 2", complete=True),
    CodeBlockElement(1, "print('hi')", complete=True, language="python"),
    TextElement(2, "Final para."),
)


def _replay(text_deltas, frames):
    acc = StreamAccumulator()
    for delta in text_deltas(iter(frames)):
        acc.ingest(delta)
    return acc


def test_golden_bedrock_stream_to_elements():
    frames = [
        '{"type":"message_start","message":{"model":"anthropic--claude-4-sonnet"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"Intro line 1\\n"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"line 2\\n\\n"}}',
        '{"type":"content_block_delta","delta":{"type":"thinking_delta","thinking":"hmm"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"```python\\n"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"print(\'hi\')\\n"}}',
        'not json at all',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"```\\n"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"Final para.\\n\\n"}}',
        '{"type":"message_stop","amazon-bedrock-invocationMetrics":{"inputTokenCount":10,"outputTokenCount":20}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"after stop"}}',
    ]

    acc = _replay(bedrock_text_deltas, frames)

    assert acc.elements == EXPECTED
    assert acc.full_text == "Intro line 1\nline 2\n\n```python\nprint('hi')\n```\nFinal para.\n\n"


def test_golden_azure_stream_to_elements():
    frames = [
        '{"id":"x","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"role":"assistant","content":"Intro line 1\\n"},"finish_reason":null}]}',
        '{"id":"y","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"content":"line 2\\n\\n"},"finish_reason":null}]}',
        '{"id":"z1","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"content":"```python\\n"},"finish_reason":null}]}',
        '{"id":"z2","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"content":"print(\'hi\')\\n"},"finish_reason":null}]}',
        '{"id":"z3","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"content":"```\\n"},"finish_reason":null}]}',
        '{"id":"w","object":"chat.completion.chunk","model":"gpt-5","choices":[{"index":0,"delta":{"content":"Final para.\\n\\n"},"finish_reason":"stop"}]}',
        '{"id":"w2","object":"chat.completion.chunk","model":"gpt-5","choices":[],"usage":{"completion_tokens":20,"prompt_tokens":10,"total_tokens":30}}',
    ]

    acc = _replay(azure_text_deltas, frames)

    assert acc.elements == EXPECTED


def test_bedrock_events_include_model_and_done():
    frames = [
        '{"type":"message_start","message":{"model":"m1"}}',
        '{"type":"content_block_delta","delta":{"type":"text_delta","text":"hi"}}',
        "[DONE]",
    ]
    assert list(map_bedrock_events(iter(frames))) == [("model", "m1"), ("text", "hi"), ("done", None)]


def test_build_payloads():
    bedrock = build_bedrock_payload("hello", max_tokens=100, system_prompt="be brief")
    assert bedrock["messages"] == [{"role": "user", "content": "hello"}]
    assert bedrock["max_tokens"] == 100
    assert bedrock["system"] == "be brief"
    assert "model" not in bedrock

    azure = build_azure_payload("hello", model="gpt-5", max_tokens=50)
    assert azure["stream"] is True
    assert azure["messages"][-1] == {"role": "user", "content": "hello"}
    assert azure["model"] == "gpt-5"
    assert azure["max_completion_tokens"] == 50


def test_get_provider():
    assert get_provider(" Bedrock ").text_deltas is bedrock_text_deltas
    assert get_provider("azure").text_deltas is azure_text_deltas
    with pytest.raises(ValueError):
        get_provider("nope")

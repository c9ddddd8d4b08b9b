from unittest.mock import AsyncMock

import pytest

from nativecall.events import TextDeltaEvent, ToolCallReadyEvent
from nativecall.provider import ModelProvider, OpenAIProvider, OpenRouter, normalize_chunk
from nativecall.streaming import ToolCallFragment

from tests.conftest import (
    FakeChoice,
    FakeChunk,
    FakeDelta,
    aiter_list,
    fake_tool_chunk,
)


# ---------------------------------------------------------------------------
# normalize_chunk
# ---------------------------------------------------------------------------

def test_normalize_text_chunk():
    chunk = normalize_chunk(FakeChunk(choices=[FakeChoice(delta=FakeDelta(content="hi"))]))
    assert chunk.content_delta == "hi"
    assert chunk.tool_call_fragments is None
    assert chunk.finish_reason is None


def test_normalize_tool_call_chunk():
    chunk = normalize_chunk(fake_tool_chunk(1, call_id="c1", name="echo", arguments="{"))
    assert chunk.tool_call_fragments == [
        ToolCallFragment(index=1, call_id="c1", name="echo", arguments_delta="{"),
    ]


def test_normalize_finish_reason_without_delta():
    chunk = normalize_chunk(FakeChunk(choices=[FakeChoice(finish_reason="tool_calls")]))
    assert chunk.finish_reason == "tool_calls"
    assert chunk.content_delta is None


def test_normalize_chunk_without_choices():
    assert normalize_chunk(FakeChunk()) is None


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

def test_openai_provider_reads_env_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    provider = OpenAIProvider()
    assert provider.client.api_key == "env-key"


def test_explicit_key_wins(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    provider = OpenAIProvider(api_key="explicit")
    assert provider.client.api_key == "explicit"


def test_openrouter_base_url(monkeypatch):
    monkeypatch.setenv("OPENROUTER_API_KEY", "or-key")
    provider = OpenRouter()
    assert provider.client.api_key == "or-key"
    assert "openrouter.ai" in str(provider.client.base_url)


def test_base_provider_requires_stream_complete():
    with pytest.raises(NotImplementedError):
        ModelProvider().stream_complete(model="m", messages=[])


# ---------------------------------------------------------------------------
# Streaming through the OpenAI client
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_stream_tool_calls_with_mocked_client():
    provider = OpenAIProvider(api_key="test")
    create = AsyncMock(return_value=aiter_list([
        FakeChunk(choices=[FakeChoice(delta=FakeDelta(content="Opening."))]),
        fake_tool_chunk(0, call_id="c1", name="browser_navigate"),
        fake_tool_chunk(0, arguments='{"url": '),
        fake_tool_chunk(0, arguments='"http://x"}'),
        FakeChunk(choices=[FakeChoice(finish_reason="tool_calls")]),
    ]))
    provider.client.chat.completions.create = create

    events = [
        e async for e in provider.stream_tool_calls(
            model="gpt-test",
            messages=[{"role": "user", "content": "go"}],
            tools=[{"type": "function", "function": {"name": "browser_navigate"}}],
        )
    ]

    assert isinstance(events[0], TextDeltaEvent)
    ready = [e for e in events if isinstance(e, ToolCallReadyEvent)]
    assert len(ready) == 1
    assert ready[0].invocation.typed_args.url == "http://x"

    kwargs = create.call_args.kwargs
    assert kwargs["stream"] is True
    assert kwargs["model"] == "gpt-test"
    assert "tools" in kwargs


@pytest.mark.asyncio
async def test_tools_omitted_when_empty():
    provider = OpenAIProvider(api_key="test")
    create = AsyncMock(return_value=aiter_list([]))
    provider.client.chat.completions.create = create

    events = [e async for e in provider.stream_tool_calls(model="m", messages=[])]

    assert events == []
    assert "tools" not in create.call_args.kwargs

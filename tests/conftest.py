import json
from dataclasses import dataclass, field

import pytest

from nativecall.names import CustomToolRegistry, ToolCatalog
from nativecall.parser import NativeToolCallParser
from nativecall.provider import ModelProvider
from nativecall.registry import StreamingCallRegistry
from nativecall.streaming import StreamChunk, ToolCallFragment


# ---------------------------------------------------------------------------
# Fake ChatCompletionChunk objects (mirrors OpenAI streaming shape)
# ---------------------------------------------------------------------------

@dataclass
class FakeFunctionDelta:
    name: str | None = None
    arguments: str | None = None


@dataclass
class FakeToolCallDelta:
    index: int
    id: str | None = None
    function: FakeFunctionDelta | None = None


@dataclass
class FakeDelta:
    content: str | None = None
    tool_calls: list[FakeToolCallDelta] | None = None


@dataclass
class FakeChoice:
    delta: FakeDelta | None = None
    finish_reason: str | None = None


@dataclass
class FakeChunk:
    choices: list[FakeChoice] = field(default_factory=list)


def fake_tool_chunk(index, call_id=None, name=None, arguments=None):
    """Fake OpenAI chunk carrying one tool call delta."""
    return FakeChunk(choices=[FakeChoice(delta=FakeDelta(tool_calls=[
        FakeToolCallDelta(
            index=index, id=call_id,
            function=FakeFunctionDelta(name=name, arguments=arguments),
        )
    ]))])


async def aiter_list(items):
    for item in items:
        yield item


# ---------------------------------------------------------------------------
# StreamChunk builders
# ---------------------------------------------------------------------------

def text_chunk(content: str) -> StreamChunk:
    return StreamChunk(content_delta=content)


def fragment_chunk(index, call_id=None, name=None, arguments=None) -> StreamChunk:
    return StreamChunk(tool_call_fragments=[ToolCallFragment(
        index=index, call_id=call_id, name=name, arguments_delta=arguments,
    )])


def finish_chunk(reason: str = "tool_calls") -> StreamChunk:
    return StreamChunk(finish_reason=reason)


def tool_call_chunks(index, call_id, name, args: dict, pieces: int = 3):
    """Chunks streaming one tool call, arguments split into *pieces*."""
    text = json.dumps(args)
    step = max(1, len(text) // pieces)
    parts = [text[i:i + step] for i in range(0, len(text), step)]
    chunks = [fragment_chunk(index, call_id=call_id, name=name)]
    chunks.extend(fragment_chunk(index, arguments=part) for part in parts)
    return chunks


def split_every(text: str, size: int) -> list[str]:
    return [text[i:i + size] for i in range(0, len(text), size)]


# ---------------------------------------------------------------------------
# Mock provider
# ---------------------------------------------------------------------------

class MockProvider(ModelProvider):
    """Provider that streams pre-queued chunks. No network calls."""

    def __init__(self):
        self.responses: list[list[StreamChunk]] = []
        self.call_log: list[dict] = []

    async def stream_complete(self, model, messages, tools=None):
        self.call_log.append({"model": model, "messages": messages, "tools": tools})
        for chunk in self.responses.pop(0):
            yield chunk


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def custom_tools():
    return CustomToolRegistry(["deploy_site"])


@pytest.fixture
def catalog(custom_tools):
    return ToolCatalog(is_custom_tool=custom_tools.has)


@pytest.fixture
def registry(catalog):
    return StreamingCallRegistry(catalog)


@pytest.fixture
def parser(catalog):
    return NativeToolCallParser(catalog)

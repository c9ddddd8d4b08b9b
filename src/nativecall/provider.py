"""OpenAI-compatible providers and the tool call stream loop."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from openai import AsyncOpenAI

from nativecall.errors import ToolCallError
from nativecall.events import (
    StreamEvent,
    TextDeltaEvent,
    ToolCallEndEvent,
    ToolCallFailedEvent,
    ToolCallLifecycleEvent,
    ToolCallPreviewEvent,
    ToolCallReadyEvent,
    ToolCallStartEvent,
)
from nativecall.parser import NativeToolCallParser
from nativecall.streaming import StreamChunk, ToolCallFragment

logger = logging.getLogger(__name__)

INVALID_ARGUMENTS_MESSAGE = (
    "Tool call could not be executed due to invalid arguments"
)


def normalize_chunk(chunk: Any) -> StreamChunk | None:
    """Convert an OpenAI ``ChatCompletionChunk`` into a :class:`StreamChunk`."""
    if not chunk.choices:
        return None
    choice = chunk.choices[0]
    delta = choice.delta
    fragments = None
    if delta is not None and delta.tool_calls:
        fragments = [
            ToolCallFragment(
                index=tc.index,
                call_id=tc.id,
                name=tc.function.name if tc.function else None,
                arguments_delta=tc.function.arguments if tc.function else None,
            )
            for tc in delta.tool_calls
        ]
    return StreamChunk(
        content_delta=delta.content if delta is not None else None,
        tool_call_fragments=fragments,
        finish_reason=choice.finish_reason,
    )


async def iter_tool_call_events(
    chunks: AsyncIterable[StreamChunk],
    parser: NativeToolCallParser,
) -> AsyncIterator[StreamEvent]:
    """Drive *parser* over one provider response.

    Yields text deltas, partial previews, finalised invocations and
    per-call failures.  A failing call never stops the others.
    """
    parser.reset()
    started: dict[str, str] = {}

    def apply(event: ToolCallLifecycleEvent) -> list[StreamEvent]:
        if isinstance(event, ToolCallStartEvent):
            started[event.id] = event.name
            parser.handle_event(event)
            return []
        if not isinstance(event, ToolCallEndEvent):
            preview = parser.handle_event(event)
            return [ToolCallPreviewEvent(invocation=preview)] if preview else []

        name = started.pop(event.id, None)
        try:
            invocation = parser.handle_event(event)
        except ToolCallError as e:
            return [ToolCallFailedEvent(
                id=event.id, name=name or "",
                error=f"{INVALID_ARGUMENTS_MESSAGE}: {e}",
            )]
        if invocation is None:
            if name is None:
                return []
            return [ToolCallFailedEvent(
                id=event.id, name=name,
                error=f"{INVALID_ARGUMENTS_MESSAGE}: arguments are not valid JSON",
            )]
        return [ToolCallReadyEvent(invocation=invocation)]

    async for chunk in chunks:
        if chunk.content_delta:
            yield TextDeltaEvent(content=chunk.content_delta)
        for fragment in chunk.tool_call_fragments or []:
            for event in parser.process_raw_chunk(fragment):
                for out in apply(event):
                    yield out
        if chunk.finish_reason:
            for event in parser.process_finish_reason(chunk.finish_reason):
                for out in apply(event):
                    yield out

    for event in parser.finalize_raw_chunks():
        for out in apply(event):
            yield out


class ModelProvider:
    """Base class for providers that stream :class:`StreamChunk` objects."""

    def stream_complete(
        self,
        model: str,
        messages: list[dict],
        tools: list[dict] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        raise NotImplementedError

    async def stream_tool_calls(
        self,
        model: str,
        messages: list[dict],
        tools: list[dict] | None = None,
        parser: NativeToolCallParser | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Stream a completion and yield parsed tool call events."""
        parser = parser or NativeToolCallParser()
        chunks = self.stream_complete(model=model, messages=messages, tools=tools)
        async for event in iter_tool_call_events(chunks, parser):
            yield event


class OpenAIProvider(ModelProvider):

    api_key_env = "OPENAI_API_KEY"
    default_base_url: str | None = None

    def __init__(self, api_key: str | None = None, base_url: str | None = None):
        if not api_key:
            api_key = os.getenv(self.api_key_env)
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url or self.default_base_url,
            max_retries=5,
            timeout=600.0,
        )

    async def stream_complete(
        self,
        model: str,
        messages: list[dict],
        tools: list[dict] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        kwargs: dict[str, Any] = {}
        if tools:
            kwargs["tools"] = tools
        stream = await self.client.chat.completions.create(
            model=model,
            messages=messages,
            stream=True,
            **kwargs,
        )
        async for raw in stream:
            chunk = normalize_chunk(raw)
            if chunk is not None:
                yield chunk


class OpenRouter(OpenAIProvider):

    api_key_env = "OPENROUTER_API_KEY"
    default_base_url = "https://openrouter.ai/api/v1"

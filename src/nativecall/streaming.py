"""Streaming primitives for provider responses.

Providers yield :class:`StreamChunk` objects.  The
:class:`RawChunkTracker` turns the index-addressed tool call fragments
they carry into ordered start/delta/end lifecycle events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from nativecall.events import (
    ToolCallDeltaEvent,
    ToolCallEndEvent,
    ToolCallLifecycleEvent,
    ToolCallStartEvent,
)

logger = logging.getLogger(__name__)


class FinishReason(str, Enum):
    STOP = "stop"
    LENGTH = "length"
    TOOL_CALLS = "tool_calls"
    CONTENT_FILTER = "content_filter"


@dataclass
class ToolCallFragment:
    """A fragment of a tool call from a streaming chunk."""

    index: int
    call_id: str | None = None
    name: str | None = None
    arguments_delta: str | None = None


@dataclass
class StreamChunk:
    """Normalised streaming chunk from any provider."""

    content_delta: str | None = None
    tool_call_fragments: list[ToolCallFragment] | None = None
    finish_reason: str | None = None


@dataclass
class _TrackedCall:
    id: str
    name: str = ""
    has_started: bool = False
    has_ended: bool = False
    delta_buffer: list[str] = field(default_factory=list)


class RawChunkTracker:
    """Reassembles fragments into lifecycle events, per stream index.

    A call is tracked once a fragment with an id arrives for its index.
    The start event is emitted as soon as the name is known; argument
    text received before that is buffered and flushed, in arrival order,
    right after the start event.
    """

    def __init__(self) -> None:
        self._tracked: dict[int, _TrackedCall] = {}

    def feed(self, fragment: ToolCallFragment) -> list[ToolCallLifecycleEvent]:
        events: list[ToolCallLifecycleEvent] = []
        tracked = self._tracked.get(fragment.index)

        if tracked is None:
            if not fragment.call_id:
                logger.warning(
                    f"Dropping tool call fragment for index {fragment.index}: "
                    "no call id received yet"
                )
                return events
            tracked = _TrackedCall(id=fragment.call_id)
            self._tracked[fragment.index] = tracked

        if fragment.name:
            tracked.name = fragment.name

        if not tracked.has_started and tracked.name:
            events.append(ToolCallStartEvent(id=tracked.id, name=tracked.name))
            tracked.has_started = True
            for buffered in tracked.delta_buffer:
                events.append(ToolCallDeltaEvent(id=tracked.id, text=buffered))
            tracked.delta_buffer = []

        if fragment.arguments_delta:
            if tracked.has_started:
                events.append(
                    ToolCallDeltaEvent(id=tracked.id, text=fragment.arguments_delta)
                )
            else:
                tracked.delta_buffer.append(fragment.arguments_delta)

        return events

    def finish_reason(
        self, reason: FinishReason | str | None
    ) -> list[ToolCallEndEvent]:
        """Emit end events when the model stopped to call tools.

        Only calls that have started get an end event, and each call ends
        at most once across this method and :meth:`finalize`.
        """
        if reason != FinishReason.TOOL_CALLS:
            return []
        if not self._tracked:
            logger.debug("Finish reason 'tool_calls' with no tracked tool calls")
            return []
        return self._end_open_calls()

    def finalize(self) -> list[ToolCallEndEvent]:
        """End every started call still open and clear all tracking."""
        events = self._end_open_calls()
        self._tracked.clear()
        return events

    def reset(self) -> None:
        self._tracked.clear()

    def _end_open_calls(self) -> list[ToolCallEndEvent]:
        events = []
        for index in sorted(self._tracked):
            tracked = self._tracked[index]
            if not tracked.has_started:
                logger.warning(
                    f"Tool call {tracked.id} at index {index} never received "
                    "a name; no end event emitted"
                )
                continue
            if tracked.has_ended:
                continue
            tracked.has_ended = True
            events.append(ToolCallEndEvent(id=tracked.id))
        return events

    def __len__(self) -> int:
        return len(self._tracked)

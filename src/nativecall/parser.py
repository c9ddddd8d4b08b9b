"""The parser facade used by stream consumers."""

from __future__ import annotations

import logging

from nativecall.events import (
    ToolCallDeltaEvent,
    ToolCallEndEvent,
    ToolCallLifecycleEvent,
    ToolCallStartEvent,
)
from nativecall.invocation import McpInvocation, ToolInvocation
from nativecall.names import ToolCatalog
from nativecall.registry import StreamingCallRegistry
from nativecall.streaming import FinishReason, RawChunkTracker, ToolCallFragment

logger = logging.getLogger(__name__)


class NativeToolCallParser:
    """Converts streamed native tool calls into typed invocations.

    One parser owns the state of one provider request at a time.  Call
    :meth:`reset` when a new request begins, including after an aborted
    one, so nothing leaks into the next turn.

    Providers that address calls by stream index feed
    :meth:`process_raw_chunk` and pass the resulting lifecycle events to
    :meth:`handle_event`.  Providers that already demultiplex by call id
    use :meth:`start_streaming_tool_call`,
    :meth:`process_streaming_chunk` and
    :meth:`finalize_streaming_tool_call` directly.

    Args:
        catalog: Static tool set, aliases and custom-tool predicate.
    """

    def __init__(self, catalog: ToolCatalog | None = None):
        self.catalog = catalog or ToolCatalog()
        self.tracker = RawChunkTracker()
        self.registry = StreamingCallRegistry(self.catalog)

    def reset(self) -> None:
        self.tracker.reset()
        self.registry.reset()

    # ------------------------------------------------------------------
    # Index-addressed raw chunks
    # ------------------------------------------------------------------

    def process_raw_chunk(self, fragment: ToolCallFragment) -> list[ToolCallLifecycleEvent]:
        return self.tracker.feed(fragment)

    def process_finish_reason(
        self, reason: FinishReason | str | None
    ) -> list[ToolCallEndEvent]:
        return self.tracker.finish_reason(reason)

    def finalize_raw_chunks(self) -> list[ToolCallEndEvent]:
        return self.tracker.finalize()

    # ------------------------------------------------------------------
    # Id-addressed streaming calls
    # ------------------------------------------------------------------

    def start_streaming_tool_call(self, call_id: str, name: str) -> None:
        self.registry.begin(call_id, name)

    def process_streaming_chunk(self, call_id: str, text: str) -> ToolInvocation | None:
        return self.registry.append_delta(call_id, text)

    def finalize_streaming_tool_call(
        self, call_id: str
    ) -> ToolInvocation | McpInvocation | None:
        return self.registry.finalize(call_id)

    def has_active_streaming_tool_calls(self) -> bool:
        return len(self.registry) > 0

    def handle_event(
        self, event: ToolCallLifecycleEvent
    ) -> ToolInvocation | McpInvocation | None:
        """Apply one lifecycle event to the registry.

        Returns the partial preview for a delta, the final record for an
        end, and ``None`` otherwise.
        """
        if isinstance(event, ToolCallStartEvent):
            self.registry.begin(event.id, event.name)
            return None
        if isinstance(event, ToolCallDeltaEvent):
            return self.registry.append_delta(event.id, event.text)
        if isinstance(event, ToolCallEndEvent):
            if event.id not in self.registry:
                logger.warning(f"End event for tool call never started: {event.id}")
                return None
            return self.registry.finalize(event.id)
        raise TypeError(f"Unsupported tool call event: {event!r}")

    # ------------------------------------------------------------------
    # Complete (non-streamed) tool calls
    # ------------------------------------------------------------------

    def parse_tool_call(
        self, call_id: str, name: str, arguments: str
    ) -> ToolInvocation | McpInvocation | None:
        """Strictly parse a tool call that arrived in one piece."""
        return self.registry.parse(call_id, name, arguments)

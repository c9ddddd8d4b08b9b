"""Events emitted while tool calls stream in."""

from __future__ import annotations

from dataclasses import dataclass, field

from nativecall.invocation import McpInvocation, ToolInvocation


@dataclass
class StreamEvent:
    """Base for all streaming events."""


# ---------------------------------------------------------------------------
# Per-call lifecycle, ordered per call id
# ---------------------------------------------------------------------------


@dataclass
class ToolCallStartEvent(StreamEvent):
    id: str
    name: str
    type: str = field(default="start", init=False)


@dataclass
class ToolCallDeltaEvent(StreamEvent):
    id: str
    text: str
    type: str = field(default="delta", init=False)


@dataclass
class ToolCallEndEvent(StreamEvent):
    id: str
    type: str = field(default="end", init=False)


ToolCallLifecycleEvent = ToolCallStartEvent | ToolCallDeltaEvent | ToolCallEndEvent


# ---------------------------------------------------------------------------
# Consumer-facing events
# ---------------------------------------------------------------------------


@dataclass
class TextDeltaEvent(StreamEvent):
    """Assistant text content from the provider stream."""

    content: str = ""


@dataclass
class ToolCallPreviewEvent(StreamEvent):
    """Partial invocation for live display; never executed."""

    invocation: ToolInvocation


@dataclass
class ToolCallReadyEvent(StreamEvent):
    """A finalised invocation, ready for execution."""

    invocation: ToolInvocation | McpInvocation


@dataclass
class ToolCallFailedEvent(StreamEvent):
    """A tool call that could not be turned into an invocation.

    ``error`` is the user-visible explanation.
    """

    id: str
    name: str
    error: str

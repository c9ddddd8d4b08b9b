from nativecall.errors import (
    InvalidToolArgumentsError,
    InvalidToolNameError,
    ToolCallError,
    UnknownToolError,
)
from nativecall.events import (
    TextDeltaEvent,
    ToolCallDeltaEvent,
    ToolCallEndEvent,
    ToolCallFailedEvent,
    ToolCallPreviewEvent,
    ToolCallReadyEvent,
    ToolCallStartEvent,
)
from nativecall.instrumentation import instrument, uninstrument
from nativecall.invocation import McpInvocation, ToolInvocation
from nativecall.names import CustomToolRegistry, ToolCatalog, ToolKind
from nativecall.parser import NativeToolCallParser
from nativecall.registry import StreamingCallRegistry
from nativecall.streaming import FinishReason, RawChunkTracker, ToolCallFragment

__all__ = [
    "CustomToolRegistry",
    "FinishReason",
    "InvalidToolArgumentsError",
    "InvalidToolNameError",
    "McpInvocation",
    "NativeToolCallParser",
    "RawChunkTracker",
    "StreamingCallRegistry",
    "TextDeltaEvent",
    "ToolCallDeltaEvent",
    "ToolCallEndEvent",
    "ToolCallError",
    "ToolCallFailedEvent",
    "ToolCallFragment",
    "ToolCallPreviewEvent",
    "ToolCallReadyEvent",
    "ToolCallStartEvent",
    "ToolCatalog",
    "ToolInvocation",
    "ToolKind",
    "UnknownToolError",
    "instrument",
    "uninstrument",
]

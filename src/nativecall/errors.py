"""Errors raised while finalising a tool call.

Every error is scoped to a single call id.  Callers of
:meth:`~nativecall.registry.StreamingCallRegistry.finalize` are expected
to turn them into a visible tool failure rather than aborting the turn.
"""


class ToolCallError(Exception):
    """Base class for all terminal, per-call parse failures."""

    def __init__(
        self,
        message: str,
        call_id: str | None = None,
        tool_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.call_id = call_id
        self.tool_name = tool_name


class InvalidToolArgumentsError(ToolCallError):
    """Raised when a payload does not satisfy a tool's argument contract."""

    def __init__(
        self,
        tool_name: str,
        reason: str,
        call_id: str | None = None,
    ) -> None:
        super().__init__(
            f"Invalid arguments for tool '{tool_name}': {reason}",
            call_id=call_id,
            tool_name=tool_name,
        )
        self.reason = reason


class UnknownToolError(ToolCallError):
    """Raised when a name resolves to neither a static nor a custom tool."""

    def __init__(
        self,
        name: str,
        resolved_name: str,
        call_id: str | None = None,
    ) -> None:
        super().__init__(
            f"Unknown tool name: '{name}' (resolved: '{resolved_name}')",
            call_id=call_id,
            tool_name=name,
        )
        self.resolved_name = resolved_name


class InvalidToolNameError(ToolCallError):
    """Raised when a dynamic tool name cannot be split into its parts."""

    def __init__(
        self,
        name: str,
        normalized_name: str,
        call_id: str | None = None,
    ) -> None:
        super().__init__(
            f"Invalid dynamic tool name format: '{name}' "
            f"(normalized: '{normalized_name}')",
            call_id=call_id,
            tool_name=name,
        )
        self.normalized_name = normalized_name

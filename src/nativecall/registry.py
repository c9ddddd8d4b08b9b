"""Per-call accumulation of streamed tool call arguments."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from nativecall import instrumentation as inst
from nativecall import mcp_names
from nativecall.decoding import decode_partial, decode_strict
from nativecall.errors import InvalidToolNameError, ToolCallError, UnknownToolError
from nativecall.invocation import McpInvocation, ToolInvocation, build_raw_params
from nativecall.names import CUSTOM_TOOL, ToolCatalog, ToolKind
from nativecall.projection import project

logger = logging.getLogger(__name__)


@dataclass
class _StreamingCall:
    id: str
    name: str
    accumulated_text: str = ""


class StreamingCallRegistry:
    """Tracks the argument text of every tool call open in a stream.

    Each delta produces a best-effort partial :class:`ToolInvocation` for
    display; :meth:`finalize` performs the strict parse that produces the
    executable record.  State is scoped to one provider request:
    :meth:`reset` must run before the next request starts.

    Args:
        catalog: Static tool set, aliases and custom-tool predicate.
    """

    def __init__(self, catalog: ToolCatalog | None = None):
        self.catalog = catalog or ToolCatalog()
        self._calls: dict[str, _StreamingCall] = {}

    def begin(self, call_id: str, name: str) -> None:
        """Start tracking *call_id*; a repeated begin replaces the entry."""
        self._calls[call_id] = _StreamingCall(id=call_id, name=name)

    def append_delta(self, call_id: str, text: str) -> ToolInvocation | None:
        """Append argument text and return a partial preview, if any.

        ``None`` means "no update yet": the id is unknown, the call is a
        dynamic external tool (previewed only once final), or nothing is
        decodable so far.
        """
        call = self._calls.get(call_id)
        if call is None:
            logger.warning(f"Received delta for unknown tool call: {call_id}")
            return None

        call.accumulated_text += text

        if mcp_names.is_mcp_tool_name(call.name):
            return None

        partial_args = decode_partial(call.accumulated_text)
        if partial_args is None:
            return None

        resolved = self.catalog.resolve(call.name)
        name = self._execution_name(resolved)
        return ToolInvocation(
            id=call.id,
            name=name,
            original_name=call.name if call.name != name else None,
            raw_params=build_raw_params(
                resolved, partial_args, strict=False,
                allow_unknown=name == CUSTOM_TOOL,
            ),
            typed_args=project(name, partial_args, strict=False),
            partial=True,
        )

    def finalize(self, call_id: str) -> ToolInvocation | McpInvocation | None:
        """Strictly parse the accumulated text and forget the call.

        Returns ``None`` for an unknown id or when the text is not valid
        JSON; both are logged.

        Raises:
            ToolCallError: If the name is unknown or malformed, or the
                arguments do not satisfy the tool's contract.
        """
        call = self._calls.pop(call_id, None)
        if call is None:
            logger.warning(f"Attempted to finalize unknown tool call: {call_id}")
            return None
        return self.parse(call.id, call.name, call.accumulated_text)

    def parse(
        self, call_id: str, name: str, arguments: str
    ) -> ToolInvocation | McpInvocation | None:
        """Strictly parse one complete tool call."""
        with inst.finalize_span(name, call_id) as span:
            try:
                invocation = self._parse(call_id, name, arguments)
            except ToolCallError as e:
                if e.call_id is None:
                    e.call_id = call_id
                logger.error(f"Tool call {call_id} failed: {e}")
                raise
            inst.record_invocation(span, invocation)
            return invocation

    def reset(self) -> None:
        self._calls.clear()

    def accumulated_text(self, call_id: str) -> str | None:
        call = self._calls.get(call_id)
        return call.accumulated_text if call else None

    def __contains__(self, call_id: object) -> bool:
        return call_id in self._calls

    def __len__(self) -> int:
        return len(self._calls)

    # ------------------------------------------------------------------
    # Strict parsing
    # ------------------------------------------------------------------

    def _execution_name(self, resolved: str) -> str:
        if not self.catalog.is_static(resolved) and self.catalog.is_custom_tool(resolved):
            return CUSTOM_TOOL
        return resolved

    def _parse(
        self, call_id: str, name: str, arguments: str
    ) -> ToolInvocation | McpInvocation | None:
        normalized = mcp_names.normalize(name)
        if self.catalog.classify(normalized) is ToolKind.DYNAMIC_EXTERNAL:
            return self._parse_mcp(call_id, name, normalized, arguments)

        resolved = self.catalog.resolve(name)
        if self.catalog.classify(resolved) is ToolKind.UNKNOWN:
            raise UnknownToolError(name, resolved, call_id=call_id)

        try:
            args = decode_strict(arguments)
        except ValueError as e:
            logger.error(f"Failed to parse arguments of tool call {call_id} ({name}): {e}")
            return None

        exec_name = self._execution_name(resolved)
        typed_args = project(exec_name, args, strict=True)
        return ToolInvocation(
            id=call_id,
            name=exec_name,
            original_name=name if name != exec_name else None,
            raw_params=build_raw_params(
                resolved, args, strict=True,
                allow_unknown=exec_name == CUSTOM_TOOL,
            ),
            typed_args=typed_args,
            partial=False,
        )

    def _parse_mcp(
        self, call_id: str, name: str, normalized: str, arguments: str
    ) -> McpInvocation | None:
        parsed = mcp_names.parse(normalized)
        if parsed is None:
            raise InvalidToolNameError(name, normalized, call_id=call_id)
        try:
            args = decode_strict(arguments)
        except ValueError as e:
            logger.error(f"Failed to parse arguments of dynamic tool {name}: {e}")
            return None
        return McpInvocation(
            id=call_id,
            name=name,
            namespace=parsed.namespace,
            tool_name=parsed.tool_name,
            arguments=args,
            partial=False,
        )

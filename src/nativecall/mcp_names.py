"""Names of dynamically registered external (MCP) tools.

Plugin tools are exposed to the model as ``mcp--<namespace>--<tool>``.
Some models cannot emit ``-`` in function names and use ``__`` instead;
:func:`normalize` rewrites that variant into the canonical form.
"""

from __future__ import annotations

from dataclasses import dataclass

MCP_TOOL_PREFIX = "mcp"
MCP_TOOL_SEPARATOR = "--"
MCP_ALT_SEPARATOR = "__"


@dataclass(frozen=True)
class McpToolName:
    """The two components of a dynamic tool name."""

    namespace: str
    tool_name: str


def is_mcp_tool_name(name: str) -> bool:
    """True when *name* carries the reserved prefix and separator."""
    return normalize(name).startswith(MCP_TOOL_PREFIX + MCP_TOOL_SEPARATOR)


def normalize(name: str) -> str:
    """Rewrite ``mcp__a__b`` into ``mcp--a--b``; other names pass through."""
    alt_prefix = MCP_TOOL_PREFIX + MCP_ALT_SEPARATOR
    if not name.startswith(alt_prefix):
        return name
    return name.replace(MCP_ALT_SEPARATOR, MCP_TOOL_SEPARATOR)


def parse(name: str) -> McpToolName | None:
    """Split a canonical dynamic name into namespace and tool name.

    Returns ``None`` when *name* does not have exactly two non-empty
    segments after the prefix.
    """
    prefix = MCP_TOOL_PREFIX + MCP_TOOL_SEPARATOR
    if not name.startswith(prefix):
        return None
    parts = name[len(prefix):].split(MCP_TOOL_SEPARATOR)
    if len(parts) != 2 or not all(parts):
        return None
    return McpToolName(namespace=parts[0], tool_name=parts[1])

"""Tool invocation records produced by the parser."""

from __future__ import annotations

import json
import logging
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, SerializeAsAny

from nativecall.args import ToolArgs

logger = logging.getLogger(__name__)

# Parameter names accepted into ``raw_params``.
PARAM_NAMES: frozenset[str] = frozenset({
    "command", "path", "content", "regex", "file_pattern", "recursive",
    "action", "url", "coordinate", "text", "server_name", "tool_name",
    "arguments", "uri", "question", "result", "diff", "mode_slug", "reason",
    "line", "mode", "message", "cwd", "follow_up", "task", "size", "query",
    "args", "start_line", "end_line", "todos", "prompt", "image", "files",
    "operations", "patch", "file_path", "old_string", "new_string",
    "expected_replacements", "artifact_id", "search", "offset", "limit",
    # IDE tools
    "selector", "includeInherited", "script", "ignoreCache", "type",
    "projectPath", "port", "name", "nameFilter", "sortBy", "sortDirection",
    "canvasId", "folderPath", "entryFile", "framework", "componentId",
    "deleteSourceCode", "components", "width", "height", "deviceScaleFactor",
    "mobile", "includeStaticAssets", "urlFilter", "method", "statusFilter",
    "key", "modifiers", "deltaX", "deltaY",
})


class ToolInvocation(BaseModel):
    """A call to a static (or registry-backed custom) tool.

    Only ``typed_args`` may be read to execute the call; ``raw_params`` is
    a string rendering for display.  ``partial`` records are previews and
    are never executed.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    original_name: str | None = None
    raw_params: dict[str, str] = Field(default_factory=dict)
    typed_args: SerializeAsAny[ToolArgs] | None = None
    partial: bool = False

    @property
    def history_name(self) -> str:
        """The name as the model emitted it, for conversation history."""
        return self.original_name or self.name


class McpInvocation(BaseModel):
    """A call to a dynamically named external tool."""

    model_config = ConfigDict(frozen=True)

    type: Literal["mcp_tool_use"] = "mcp_tool_use"
    id: str
    name: str
    namespace: str
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    partial: bool = False

    @property
    def history_name(self) -> str:
        return self.name


def build_raw_params(
    tool_name: str,
    args: dict[str, Any],
    *,
    strict: bool,
    allow_unknown: bool = False,
) -> dict[str, str]:
    """Render decoded arguments as strings keyed by known parameter names.

    Unknown keys are skipped (with a warning when *strict*) unless
    *allow_unknown* is set, which is the case for custom tools.
    """
    params: dict[str, str] = {}
    for key, value in args.items():
        # read_file entries only make sense in typed form
        if strict and tool_name == "read_file" and key == "files":
            continue
        if key not in PARAM_NAMES and not allow_unknown:
            if strict:
                logger.warning(f"Unknown parameter '{key}' for tool '{tool_name}'")
            continue
        params[key] = value if isinstance(value, str) else json.dumps(value)
    return params

"""Tool name resolution: aliases, the static tool set and custom tools."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from enum import Enum

from nativecall import mcp_names

TOOL_NAMES: tuple[str, ...] = (
    "execute_command",
    "read_file",
    "read_command_output",
    "write_to_file",
    "apply_diff",
    "search_and_replace",
    "search_replace",
    "edit_file",
    "apply_patch",
    "search_files",
    "list_files",
    "browser_action",
    "use_mcp_tool",
    "access_mcp_resource",
    "ask_followup_question",
    "attempt_completion",
    "switch_mode",
    "new_task",
    "fetch_instructions",
    "codebase_search",
    "update_todo_list",
    "run_slash_command",
    "generate_image",
    "custom_tool",
    # IDE browser tools
    "browser_open",
    "browser_close",
    "browser_action_input",
    "browser_navigate",
    "browser_reload",
    "browser_screenshot",
    "browser_execute_script",
    "browser_inspect_element",
    "browser_get_errors",
    "browser_get_console_logs",
    "browser_get_performance",
    "browser_get_state",
    "browser_set_viewport",
    "browser_get_network_requests",
    # IDE project tools
    "project_get_active",
    "project_start",
    "project_stop",
    # IDE canvas tools
    "canvas_list",
    "canvas_get_active",
    "canvas_create",
    "canvas_open",
    "canvas_validate_components",
    # IDE component tools
    "component_add",
    "component_add_batch",
    "component_remove",
    "component_get_info",
    "component_list",
    "component_rebuild",
)

# alias -> canonical name
TOOL_ALIASES: dict[str, str] = {
    "write_file": "write_to_file",
}

CUSTOM_TOOL = "custom_tool"


class ToolKind(Enum):
    STATIC = "static"
    DYNAMIC_EXTERNAL = "dynamic_external"
    UNKNOWN = "unknown"


class CustomToolRegistry:
    """Set-backed registry of ad-hoc tool names.

    Custom tools are known by name only; their argument shape is opaque
    to the parser.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._names: set[str] = set(names)

    def register(self, name: str) -> None:
        self._names.add(name)

    def unregister(self, name: str) -> None:
        self._names.discard(name)

    def has(self, name: str) -> bool:
        return name in self._names

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)


class ToolCatalog:
    """The closed tool set, its aliases and a custom-tool predicate.

    Args:
        tool_names: Canonical static tool names.
        aliases: Mapping of alternate spellings to canonical names.
        is_custom_tool: Predicate for registered ad-hoc tool names.
            Defaults to an empty :class:`CustomToolRegistry`.
    """

    def __init__(
        self,
        tool_names: Iterable[str] = TOOL_NAMES,
        aliases: Mapping[str, str] | None = None,
        is_custom_tool: Callable[[str], bool] | None = None,
    ):
        self.tool_names = frozenset(tool_names)
        self.aliases = dict(TOOL_ALIASES if aliases is None else aliases)
        if is_custom_tool is None:
            is_custom_tool = CustomToolRegistry().has
        self.is_custom_tool = is_custom_tool

    def resolve(self, name: str) -> str:
        """Return the canonical name for *name*, or *name* itself."""
        return self.aliases.get(name, name)

    def classify(self, name: str) -> ToolKind:
        if mcp_names.is_mcp_tool_name(name):
            return ToolKind.DYNAMIC_EXTERNAL
        if name in self.tool_names or self.is_custom_tool(name):
            return ToolKind.STATIC
        return ToolKind.UNKNOWN

    def is_static(self, name: str) -> bool:
        """True for names in the closed set (custom tools excluded)."""
        return name in self.tool_names

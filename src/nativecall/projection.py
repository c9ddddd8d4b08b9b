"""Projection of decoded JSON arguments onto typed argument models.

:data:`PROJECTIONS` is the single table consulted by both the partial
(streaming preview) and the strict (finalize) pipelines.  The two modes
differ only in how they treat missing or invalid values:

* partial mode keeps whatever fields can be derived and drops the rest;
* strict mode raises :class:`~nativecall.errors.InvalidToolArgumentsError`
  when a required field is missing or a value cannot be coerced.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from nativecall.args import (
    AccessMcpResourceArgs,
    ApplyDiffArgs,
    ApplyPatchArgs,
    AskFollowupQuestionArgs,
    AttemptCompletionArgs,
    BrowserActionArgs,
    BrowserActionInputArgs,
    BrowserExecuteScriptArgs,
    BrowserGetConsoleLogsArgs,
    BrowserGetErrorsArgs,
    BrowserGetNetworkRequestsArgs,
    BrowserInspectElementArgs,
    BrowserNavigateArgs,
    BrowserOpenArgs,
    BrowserReloadArgs,
    BrowserSetViewportArgs,
    CanvasCreateArgs,
    CanvasListArgs,
    CanvasOpenArgs,
    CanvasRefArgs,
    CodebaseSearchArgs,
    ComponentAddArgs,
    ComponentAddBatchArgs,
    ComponentRefArgs,
    ComponentRemoveArgs,
    CustomToolArgs,
    EditFileArgs,
    EmptyArgs,
    ExecuteCommandArgs,
    FetchInstructionsArgs,
    GenerateImageArgs,
    ListFilesArgs,
    NewTaskArgs,
    ProjectStartArgs,
    ReadCommandOutputArgs,
    ReadFileArgs,
    RunSlashCommandArgs,
    SearchAndReplaceArgs,
    SearchFilesArgs,
    SearchReplaceArgs,
    SwitchModeArgs,
    ToolArgs,
    UpdateTodoListArgs,
    UseMcpToolArgs,
    WriteToFileArgs,
)
from nativecall.errors import InvalidToolArgumentsError
from nativecall.names import CUSTOM_TOOL

logger = logging.getLogger(__name__)

Coercer = Callable[[Any], Any]


# ---------------------------------------------------------------------------
# Coercers
# ---------------------------------------------------------------------------
#
# A coercer returns the converted value, ``None`` to mean "absent", or
# raises ValueError/TypeError when the value cannot be used.


def text(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


def integer(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise TypeError(f"expected an integer, got {value!r}")


def number(value: Any) -> float:
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"expected a number, got {value!r}")


def boolean(value: Any) -> bool | None:
    """Booleans pass through; ``"true"``/``"false"`` in any case convert."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def json_list(value: Any) -> list:
    if isinstance(value, str):
        value = json.loads(value)
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return value


def json_object(value: Any) -> dict:
    if isinstance(value, str):
        value = json.loads(value)
    if not isinstance(value, dict):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    return value


_LEGACY_RANGE = re.compile(r"^(\d+)-(\d+)$")


def _line_range(value: Any) -> dict[str, int] | None:
    try:
        return _parse_line_range(value)
    except (TypeError, ValueError):
        return None


def _parse_line_range(value: Any) -> dict[str, int] | None:
    if isinstance(value, list) and len(value) >= 2:
        return {"start": int(value[0]), "end": int(value[1])}
    if isinstance(value, dict) and "start" in value and "end" in value:
        return {"start": int(value["start"]), "end": int(value["end"])}
    if isinstance(value, str):
        match = _LEGACY_RANGE.match(value)
        if match:
            return {"start": int(match.group(1)), "end": int(match.group(2))}
    return None


def file_entries(value: Any) -> list[dict[str, Any]]:
    """Normalise ``read_file`` entries.

    ``line_ranges`` may be ``[[1, 50]]``, ``[{"start": 1, "end": 50}]``
    or ``["1-50"]``; unrecognised ranges are dropped.
    """
    entries = []
    for raw in json_list(value):
        if not isinstance(raw, dict):
            raise TypeError(f"expected a file entry object, got {raw!r}")
        entry: dict[str, Any] = {"path": raw.get("path")}
        ranges = raw.get("line_ranges")
        if isinstance(ranges, list):
            entry["line_ranges"] = [
                r for r in (_line_range(item) for item in ranges) if r is not None
            ]
        entries.append(entry)
    return entries


def streamed_file_entries(value: Any) -> list[dict[str, Any]]:
    """Like :func:`file_entries`, skipping entries without a path yet."""
    return [
        entry for entry in file_entries(value)
        if isinstance(entry["path"], str)
    ]


# ---------------------------------------------------------------------------
# Projection table
# ---------------------------------------------------------------------------

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


@dataclass(frozen=True)
class FieldRule:
    coerce: Coercer = text
    target: str | None = None
    partial: Coercer | None = None

    def target_for(self, source_key: str) -> str:
        return self.target or snake_case(source_key)

    def coercer(self, strict: bool) -> Coercer:
        if strict or self.partial is None:
            return self.coerce
        return self.partial


@dataclass(frozen=True)
class Projection:
    """How one tool's JSON arguments map onto its typed model.

    Args:
        model: The argument model to build.
        fields: Source key (as emitted by the model) to field rule.
            The typed field name defaults to the snake_case source key.
        required: Source keys that a finalised call must carry.
    """

    model: type[ToolArgs]
    fields: Mapping[str, FieldRule] = field(default_factory=dict)
    required: tuple[str, ...] = ()

    def apply(
        self, tool_name: str, raw: Mapping[str, Any], strict: bool
    ) -> ToolArgs | None:
        values: dict[str, Any] = {}
        for key, rule in self.fields.items():
            if raw.get(key) is None:
                continue
            try:
                value = rule.coercer(strict)(raw[key])
            except (TypeError, ValueError) as e:
                if strict:
                    raise InvalidToolArgumentsError(
                        tool_name, f"cannot use value for '{key}': {e}"
                    ) from e
                continue
            if value is not None:
                values[rule.target_for(key)] = value

        if strict:
            missing = [
                key for key in self.required
                if self.fields[key].target_for(key) not in values
            ]
            if missing:
                raise InvalidToolArgumentsError(
                    tool_name,
                    f"missing required argument(s): {', '.join(missing)}",
                )
            try:
                return self.model(**values)
            except ValidationError as e:
                raise InvalidToolArgumentsError(tool_name, str(e)) from e

        return self._build_partial(values)

    def _build_partial(self, values: dict[str, Any]) -> ToolArgs | None:
        if not self.fields:
            return self.model()
        # Drop fields that fail validation until the rest builds.
        while values:
            try:
                return self.model(**values)
            except ValidationError as e:
                invalid = {err["loc"][0] for err in e.errors() if err["loc"]}
                if not invalid & values.keys():
                    return None
                values = {k: v for k, v in values.items() if k not in invalid}
        return None


def _rules(*keys: str, **coerced: Coercer) -> dict[str, FieldRule]:
    rules = {key: FieldRule() for key in keys}
    rules.update({key: FieldRule(coerce) for key, coerce in coerced.items()})
    return rules


_NO_ARGS = Projection(EmptyArgs)

PROJECTIONS: dict[str, Projection] = {
    "read_file": Projection(
        ReadFileArgs,
        {"files": FieldRule(file_entries, partial=streamed_file_entries)},
        required=("files",),
    ),
    "read_command_output": Projection(
        ReadCommandOutputArgs,
        _rules("artifact_id", "search", offset=integer, limit=integer),
        required=("artifact_id",),
    ),
    "attempt_completion": Projection(
        AttemptCompletionArgs, _rules("result"), required=("result",)
    ),
    "execute_command": Projection(
        ExecuteCommandArgs, _rules("command", "cwd"), required=("command",)
    ),
    "apply_diff": Projection(
        ApplyDiffArgs, _rules("path", "diff"), required=("path", "diff")
    ),
    "search_and_replace": Projection(
        SearchAndReplaceArgs,
        _rules("path", operations=json_list),
        required=("path", "operations"),
    ),
    "search_replace": Projection(
        SearchReplaceArgs,
        _rules("file_path", "old_string", "new_string"),
        required=("file_path", "old_string", "new_string"),
    ),
    "edit_file": Projection(
        EditFileArgs,
        _rules("file_path", "old_string", "new_string", expected_replacements=integer),
        required=("file_path", "old_string", "new_string"),
    ),
    "apply_patch": Projection(
        ApplyPatchArgs, _rules("patch"), required=("patch",)
    ),
    "search_files": Projection(
        SearchFilesArgs,
        _rules("path", "regex", "file_pattern"),
        required=("path", "regex"),
    ),
    "list_files": Projection(
        ListFilesArgs, _rules("path", recursive=boolean), required=("path",)
    ),
    "browser_action": Projection(
        BrowserActionArgs,
        _rules("action", "url", "coordinate", "size", "text", "path"),
        required=("action",),
    ),
    "use_mcp_tool": Projection(
        UseMcpToolArgs,
        _rules("server_name", "tool_name", arguments=json_object),
        required=("server_name", "tool_name"),
    ),
    "access_mcp_resource": Projection(
        AccessMcpResourceArgs,
        _rules("server_name", "uri"),
        required=("server_name", "uri"),
    ),
    "ask_followup_question": Projection(
        AskFollowupQuestionArgs,
        _rules("question", follow_up=json_list),
        required=("question", "follow_up"),
    ),
    "switch_mode": Projection(
        SwitchModeArgs, _rules("mode_slug", "reason"), required=("mode_slug", "reason")
    ),
    "new_task": Projection(
        NewTaskArgs, _rules("mode", "message", "todos"), required=("mode", "message")
    ),
    "fetch_instructions": Projection(
        FetchInstructionsArgs, _rules("task"), required=("task",)
    ),
    "codebase_search": Projection(
        CodebaseSearchArgs, _rules("query", "path"), required=("query",)
    ),
    "update_todo_list": Projection(
        UpdateTodoListArgs, _rules("todos"), required=("todos",)
    ),
    "run_slash_command": Projection(
        RunSlashCommandArgs, _rules("command", "args"), required=("command",)
    ),
    "generate_image": Projection(
        GenerateImageArgs,
        _rules("prompt", "path", "image"),
        required=("prompt", "path"),
    ),
    "write_to_file": Projection(
        WriteToFileArgs, _rules("path", "content"), required=("path", "content")
    ),
    # IDE browser tools
    "browser_open": Projection(BrowserOpenArgs, _rules("url")),
    "browser_close": _NO_ARGS,
    "browser_action_input": Projection(
        BrowserActionInputArgs,
        _rules(
            "action", "coordinate", "text", "key",
            modifiers=json_list, deltaX=number, deltaY=number,
        ),
        required=("action",),
    ),
    "browser_navigate": Projection(
        BrowserNavigateArgs, _rules("url"), required=("url",)
    ),
    "browser_reload": Projection(BrowserReloadArgs, _rules(ignoreCache=boolean)),
    "browser_screenshot": _NO_ARGS,
    "browser_execute_script": Projection(
        BrowserExecuteScriptArgs, _rules("script"), required=("script",)
    ),
    "browser_inspect_element": Projection(
        BrowserInspectElementArgs,
        _rules("selector", includeInherited=boolean),
        required=("selector",),
    ),
    "browser_get_errors": Projection(BrowserGetErrorsArgs, _rules(limit=integer)),
    "browser_get_console_logs": Projection(
        BrowserGetConsoleLogsArgs, _rules("type", limit=integer)
    ),
    "browser_get_performance": _NO_ARGS,
    "browser_get_state": _NO_ARGS,
    "browser_set_viewport": Projection(
        BrowserSetViewportArgs,
        _rules(width=integer, height=integer, deviceScaleFactor=number, mobile=boolean),
    ),
    "browser_get_network_requests": Projection(
        BrowserGetNetworkRequestsArgs,
        _rules(
            "urlFilter", "method", "statusFilter",
            includeStaticAssets=boolean, limit=integer,
        ),
    ),
    # IDE project tools
    "project_get_active": _NO_ARGS,
    "project_start": Projection(
        ProjectStartArgs, _rules("projectPath", port=integer), required=("projectPath",)
    ),
    "project_stop": _NO_ARGS,
    # IDE canvas tools
    "canvas_list": Projection(
        CanvasListArgs, _rules("nameFilter", "sortBy", "sortDirection")
    ),
    "canvas_get_active": _NO_ARGS,
    "canvas_create": Projection(CanvasCreateArgs, _rules("name"), required=("name",)),
    "canvas_open": Projection(CanvasOpenArgs, _rules("canvasId", "name")),
    "canvas_validate_components": Projection(CanvasRefArgs, _rules("canvasId")),
    # IDE component tools
    "component_add": Projection(
        ComponentAddArgs,
        _rules("folderPath", "canvasId", "name", "entryFile", "framework"),
        required=("folderPath",),
    ),
    "component_add_batch": Projection(
        ComponentAddBatchArgs, _rules(components=json_list), required=("components",)
    ),
    "component_remove": Projection(
        ComponentRemoveArgs,
        _rules("componentId", deleteSourceCode=boolean),
        required=("componentId",),
    ),
    "component_get_info": Projection(
        ComponentRefArgs, _rules("componentId"), required=("componentId",)
    ),
    "component_list": Projection(
        CanvasRefArgs, _rules("canvasId"), required=("canvasId",)
    ),
    "component_rebuild": Projection(
        ComponentRefArgs, _rules("componentId"), required=("componentId",)
    ),
}


def project(
    tool_name: str, raw: Mapping[str, Any], *, strict: bool
) -> ToolArgs | None:
    """Build the typed arguments of *tool_name* from decoded JSON.

    ``custom_tool`` arguments are passed through unchecked.  In partial
    mode the result may be ``None`` when nothing is derivable yet.

    Raises:
        InvalidToolArgumentsError: In strict mode, when a required field
            is missing, a value cannot be coerced, or the tool has no
            projection.
    """
    if tool_name == CUSTOM_TOOL:
        return CustomToolArgs(arguments=dict(raw))
    projection = PROJECTIONS.get(tool_name)
    if projection is None:
        if strict:
            raise InvalidToolArgumentsError(tool_name, "no argument projection defined")
        logger.debug(f"No argument projection for {tool_name}")
        return None
    return projection.apply(tool_name, raw, strict)

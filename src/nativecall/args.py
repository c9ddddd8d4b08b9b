"""Typed argument models, one per static tool.

Every field is optional at the model level: partial previews carry
whatever has streamed so far.  Which fields a finalised call must have
is declared in :mod:`nativecall.projection`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ToolArgs(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class EmptyArgs(ToolArgs):
    """Arguments of tools that take none."""


class CustomToolArgs(ToolArgs):
    """Opaque pass-through arguments of a registry-backed custom tool."""

    arguments: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Nested values
# ---------------------------------------------------------------------------


class LineRange(ToolArgs):
    start: int
    end: int


class FileEntry(ToolArgs):
    path: str
    line_ranges: list[LineRange] | None = None


class FollowUpSuggestion(ToolArgs):
    text: str
    mode: str | None = None


class SearchReplaceOperation(ToolArgs):
    search: str
    replace: str


class ComponentSpec(ToolArgs):
    folder_path: str = Field(alias="folderPath")
    canvas_id: str | None = Field(default=None, alias="canvasId")
    name: str | None = None
    entry_file: str | None = Field(default=None, alias="entryFile")
    framework: str | None = None


# ---------------------------------------------------------------------------
# Core tools
# ---------------------------------------------------------------------------


class ReadFileArgs(ToolArgs):
    files: list[FileEntry] | None = None


class ReadCommandOutputArgs(ToolArgs):
    artifact_id: str | None = None
    search: str | None = None
    offset: int | None = None
    limit: int | None = None


class AttemptCompletionArgs(ToolArgs):
    result: str | None = None


class ExecuteCommandArgs(ToolArgs):
    command: str | None = None
    cwd: str | None = None


class ApplyDiffArgs(ToolArgs):
    path: str | None = None
    diff: str | None = None


class SearchAndReplaceArgs(ToolArgs):
    path: str | None = None
    operations: list[SearchReplaceOperation] | None = None


class SearchReplaceArgs(ToolArgs):
    file_path: str | None = None
    old_string: str | None = None
    new_string: str | None = None


class EditFileArgs(SearchReplaceArgs):
    expected_replacements: int | None = None


class ApplyPatchArgs(ToolArgs):
    patch: str | None = None


class ListFilesArgs(ToolArgs):
    path: str | None = None
    recursive: bool | None = None


class NewTaskArgs(ToolArgs):
    mode: str | None = None
    message: str | None = None
    todos: str | None = None


class AskFollowupQuestionArgs(ToolArgs):
    question: str | None = None
    follow_up: list[FollowUpSuggestion] | None = None


class BrowserActionArgs(ToolArgs):
    action: str | None = None
    url: str | None = None
    coordinate: str | None = None
    size: str | None = None
    text: str | None = None
    path: str | None = None


class CodebaseSearchArgs(ToolArgs):
    query: str | None = None
    path: str | None = None


class FetchInstructionsArgs(ToolArgs):
    task: str | None = None


class GenerateImageArgs(ToolArgs):
    prompt: str | None = None
    path: str | None = None
    image: str | None = None


class RunSlashCommandArgs(ToolArgs):
    command: str | None = None
    args: str | None = None


class SearchFilesArgs(ToolArgs):
    path: str | None = None
    regex: str | None = None
    file_pattern: str | None = None


class SwitchModeArgs(ToolArgs):
    mode_slug: str | None = None
    reason: str | None = None


class UpdateTodoListArgs(ToolArgs):
    todos: str | None = None


class UseMcpToolArgs(ToolArgs):
    server_name: str | None = None
    tool_name: str | None = None
    arguments: dict[str, Any] | None = None


class AccessMcpResourceArgs(ToolArgs):
    server_name: str | None = None
    uri: str | None = None


class WriteToFileArgs(ToolArgs):
    path: str | None = None
    content: str | None = None


# ---------------------------------------------------------------------------
# IDE tools
# ---------------------------------------------------------------------------


class BrowserOpenArgs(ToolArgs):
    url: str | None = None


class BrowserActionInputArgs(ToolArgs):
    action: str | None = None
    coordinate: str | list[float] | None = None
    text: str | None = None
    key: str | None = None
    modifiers: list[str] | None = None
    delta_x: float | None = None
    delta_y: float | None = None


class BrowserNavigateArgs(ToolArgs):
    url: str | None = None


class BrowserReloadArgs(ToolArgs):
    ignore_cache: bool | None = None


class BrowserExecuteScriptArgs(ToolArgs):
    script: str | None = None


class BrowserInspectElementArgs(ToolArgs):
    selector: str | None = None
    include_inherited: bool | None = None


class BrowserGetErrorsArgs(ToolArgs):
    limit: int | None = None


class BrowserGetConsoleLogsArgs(ToolArgs):
    limit: int | None = None
    type: str | None = None


class BrowserSetViewportArgs(ToolArgs):
    width: int | None = None
    height: int | None = None
    device_scale_factor: float | None = None
    mobile: bool | None = None


class BrowserGetNetworkRequestsArgs(ToolArgs):
    include_static_assets: bool | None = None
    url_filter: str | None = None
    method: str | None = None
    status_filter: str | None = None
    limit: int | None = None


class ProjectStartArgs(ToolArgs):
    project_path: str | None = None
    port: int | None = None


class CanvasListArgs(ToolArgs):
    name_filter: str | None = None
    sort_by: str | None = None
    sort_direction: str | None = None


class CanvasCreateArgs(ToolArgs):
    name: str | None = None


class CanvasOpenArgs(ToolArgs):
    canvas_id: str | None = None
    name: str | None = None


class CanvasRefArgs(ToolArgs):
    """Arguments of tools addressing a canvas by id."""

    canvas_id: str | None = None


class ComponentAddArgs(ToolArgs):
    folder_path: str | None = None
    canvas_id: str | None = None
    name: str | None = None
    entry_file: str | None = None
    framework: str | None = None


class ComponentAddBatchArgs(ToolArgs):
    components: list[ComponentSpec] | None = None


class ComponentRemoveArgs(ToolArgs):
    component_id: str | None = None
    delete_source_code: bool | None = None


class ComponentRefArgs(ToolArgs):
    """Arguments of tools addressing a component by id."""

    component_id: str | None = None

"""Unit tests for the parser facade."""

import json

import pytest

from nativecall.errors import UnknownToolError
from nativecall.events import ToolCallDeltaEvent, ToolCallEndEvent, ToolCallStartEvent
from nativecall.invocation import McpInvocation, ToolInvocation
from nativecall.parser import NativeToolCallParser
from nativecall.streaming import ToolCallFragment

from tests.conftest import split_every


def run_events(parser, events):
    """Apply lifecycle events, returning the non-None results."""
    results = []
    for event in events:
        result = parser.handle_event(event)
        if result is not None:
            results.append(result)
    return results


class TestRawChunkPath:
    def test_chunks_to_final_invocation(self, parser):
        events = [
            *parser.process_raw_chunk(ToolCallFragment(
                index=0, call_id="c1", name="browser_navigate",
            )),
            *parser.process_raw_chunk(ToolCallFragment(
                index=0, arguments_delta='{"url": "http://x"}',
            )),
            *parser.process_finish_reason("tool_calls"),
        ]
        results = run_events(parser, events)

        assert results[-1].partial is False
        assert results[-1].typed_args.url == "http://x"
        assert not parser.has_active_streaming_tool_calls()

    def test_buffered_and_direct_paths_agree(self, parser):
        args = {"file_path": "a.py", "old_string": "x = 1", "new_string": "x = 2"}
        fragments = split_every(json.dumps(args), 5)

        # direct, id-addressed path
        parser.start_streaming_tool_call("direct", "search_replace")
        for fragment in fragments:
            parser.process_streaming_chunk("direct", fragment)
        direct = parser.finalize_streaming_tool_call("direct")

        # index-addressed path, name arriving after three fragments
        events = parser.process_raw_chunk(ToolCallFragment(index=0, call_id="raw"))
        for i, fragment in enumerate(fragments):
            events += parser.process_raw_chunk(ToolCallFragment(
                index=0,
                name="search_replace" if i == 3 else None,
                arguments_delta=fragment,
            ))
        deltas = [e.text for e in events if isinstance(e, ToolCallDeltaEvent)]
        assert "".join(deltas) == "".join(fragments)

        events += parser.finalize_raw_chunks()
        raw = run_events(parser, events)[-1]

        assert raw.model_dump(exclude={"id"}) == direct.model_dump(exclude={"id"})

    def test_end_for_never_started_call_is_a_no_op(self, parser):
        assert parser.handle_event(ToolCallEndEvent(id="ghost")) is None

    def test_reset_clears_both_stores(self, parser):
        parser.process_raw_chunk(ToolCallFragment(index=0, call_id="c1", name="browser_close"))
        parser.start_streaming_tool_call("c2", "browser_close")
        parser.reset()

        assert not parser.has_active_streaming_tool_calls()
        assert parser.finalize_raw_chunks() == []

    def test_unsupported_event(self, parser):
        with pytest.raises(TypeError):
            parser.handle_event(object())


class TestHandleEvent:
    def test_start_delta_end(self, parser):
        results = run_events(parser, [
            ToolCallStartEvent(id="c1", name="canvas_create"),
            ToolCallDeltaEvent(id="c1", text='{"name": "Ho'),
            ToolCallDeltaEvent(id="c1", text='me"}'),
            ToolCallEndEvent(id="c1"),
        ])

        assert [r.partial for r in results] == [True, True, False]
        assert results[0].typed_args.name == "Ho"
        assert results[-1].typed_args.name == "Home"


class TestParseToolCall:
    def test_complete_call(self, parser):
        result = parser.parse_tool_call("c1", "execute_command", '{"command": "ls", "cwd": "/tmp"}')

        assert isinstance(result, ToolInvocation)
        assert result.typed_args.command == "ls"
        assert result.typed_args.cwd == "/tmp"
        assert result.raw_params == {"command": "ls", "cwd": "/tmp"}

    def test_dynamic_call(self, parser):
        result = parser.parse_tool_call("m1", "mcp--fs--stat", '{"path": "/"}')

        assert isinstance(result, McpInvocation)
        assert result.namespace == "fs"

    def test_unknown_name(self, parser):
        with pytest.raises(UnknownToolError) as exc_info:
            parser.parse_tool_call("c1", "nope", "{}")
        assert exc_info.value.call_id == "c1"

    def test_does_not_touch_streaming_state(self, parser):
        parser.start_streaming_tool_call("c1", "browser_close")
        parser.parse_tool_call("c1", "browser_close", "{}")

        assert parser.has_active_streaming_tool_calls()


def test_default_catalog():
    parser = NativeToolCallParser()
    assert parser.registry.catalog is parser.catalog
    assert parser.catalog.resolve("write_file") == "write_to_file"

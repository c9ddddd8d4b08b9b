"""Optional OpenTelemetry spans around strict tool call parsing.

Tracing is off until :func:`instrument` is called. ``opentelemetry-api``
is only imported at that point, so the parser has no hard dependency on it.
"""

import importlib.util
import logging
from contextlib import contextmanager

from nativecall.errors import ToolCallError

logger = logging.getLogger(__name__)

_tracer = None

OPERATION_NAME = "parse_tool_call"


def instrument(*, tracer_name: str = "nativecall") -> None:
    """Emit a span for every finalised tool call.

    Configure a TracerProvider first, otherwise the spans are dropped.

    Raises:
        ImportError: ``opentelemetry-api`` is not installed
            (``pip install nativecall[otel]``).
    """
    global _tracer
    if importlib.util.find_spec("opentelemetry.trace") is None:
        raise ImportError(
            "Tool call tracing needs opentelemetry-api: "
            "pip install nativecall[otel]"
        )
    from opentelemetry import trace

    _tracer = trace.get_tracer(tracer_name)
    if isinstance(_tracer, trace.NoOpTracer):
        logger.info(f"Tracer '{tracer_name}' is a no-op, finalize spans will be dropped")
    else:
        logger.info(f"Tracing tool call finalisation with tracer '{tracer_name}'")


def uninstrument() -> None:
    global _tracer
    _tracer = None


@contextmanager
def finalize_span(tool_name: str, call_id: str):
    """Span covering the strict parse of one call.

    Yields ``None`` when tracing is off. A :class:`ToolCallError` raised
    inside the block marks the span as failed before propagating.
    """
    if _tracer is None:
        yield None
        return
    with _tracer.start_as_current_span(
        f"{OPERATION_NAME} {tool_name}",
        attributes={
            "gen_ai.operation.name": OPERATION_NAME,
            "gen_ai.tool.name": tool_name,
            "gen_ai.tool.call.id": call_id,
        },
    ) as span:
        try:
            yield span
        except ToolCallError as e:
            _mark_failed(span, e)
            raise


def record_invocation(span, invocation) -> None:
    """Attach the parsed record's resolved name and kind to *span*."""
    if span is None or invocation is None:
        return
    span.set_attribute("nativecall.tool.resolved_name", invocation.name)
    span.set_attribute("nativecall.tool.type", invocation.type)


def _mark_failed(span, error: ToolCallError) -> None:
    from opentelemetry.trace import StatusCode

    span.set_status(StatusCode.ERROR, str(error))
    span.record_exception(error)
    span.set_attribute("error.type", type(error).__name__)

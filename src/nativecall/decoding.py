"""JSON decoding for tool-call arguments.

Streaming previews use :func:`decode_partial`, which tolerates truncated
documents.  Finalisation uses :func:`decode_strict`, a plain
:func:`json.loads`; the two never share tolerance.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from partial_json_parser import loads as partial_loads

logger = logging.getLogger(__name__)


def decode_partial(text: str) -> dict[str, Any] | None:
    """Best-effort decode of a possibly incomplete JSON object.

    Returns whatever complete values are decodable, or ``None`` when
    nothing is (including when the document is not an object).
    """
    if not text.strip():
        return None
    try:
        result = partial_loads(text)
    except Exception as e:
        logger.debug(f"Partial decode failed, waiting for more input: {e}")
        return None
    if not isinstance(result, dict):
        return None
    return result


def decode_strict(text: str) -> dict[str, Any]:
    """Decode a complete JSON object; empty text decodes to ``{}``.

    Raises:
        ValueError: If *text* is not valid JSON or not an object.
    """
    if text == "":
        return {}
    result = json.loads(text)
    if not isinstance(result, dict):
        raise ValueError(
            f"expected a JSON object, got {type(result).__name__}"
        )
    return result

from __future__ import annotations

import json
from typing import Any

from valuation.errors import ParseError, ParseErrorKind


def locate_json_object(raw_text: str | None) -> str:
    """Return the substring from the first ``{`` to the last ``}``, stripped.

    The span assumes the payload is the only JSON-shaped fragment in the
    text. Two separate objects in one response are sliced together and will
    fail to decode.
    """
    if not raw_text:
        raise ParseError(ParseErrorKind.EMPTY_OR_MALFORMED, "Empty response from model")
    first = raw_text.find("{")
    last = raw_text.rfind("}")
    if first == -1 or last == -1 or last <= first:
        raise ParseError(ParseErrorKind.EMPTY_OR_MALFORMED, "No JSON object found in model response")
    return raw_text[first : last + 1].strip()


def parse_json_object(raw_text: str | None) -> dict[str, Any]:
    candidate = locate_json_object(raw_text)
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, RecursionError) as exc:
        raise ParseError(ParseErrorKind.INVALID_JSON, str(exc)) from exc

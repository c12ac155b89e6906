"""Defensive JSON extraction from generated text.

Model output routinely wraps JSON in markdown fences, surrounds it with
prose, or gets cut off at the token limit. :func:`parse_json_object` scans
for the first balanced ``{...}`` span (string- and escape-aware), repairs a
truncated tail where it can, and otherwise returns the caller's fallback.
"""

import json
import logging
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_json_object(text: str | None, fallback: T) -> dict[str, Any] | T:
    """Parse the first JSON object found in ``text``.

    Args:
        text: Raw generated text.
        fallback: Value returned when no object can be recovered.

    Returns:
        The parsed dict, or ``fallback``.
    """
    if not text:
        return fallback

    span, complete = _find_object_span(text)
    if span is None:
        logger.debug("No JSON object found in generated text")
        return fallback

    candidates = [span] if complete else [_repair_truncated(span)]
    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict):
            return parsed

    logger.debug("Generated text contained malformed JSON, using fallback")
    return fallback


def _find_object_span(text: str) -> tuple[str | None, bool]:
    """Locate the first ``{`` and its matching ``}``.

    Returns:
        Tuple of (span, complete). When braces never balance the span runs
        to the end of the text and ``complete`` is False.
    """
    start = text.find("{")
    if start == -1:
        return (None, False)

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return (text[start : i + 1], True)

    return (text[start:].rstrip().removesuffix("```").rstrip(), False)


def _repair_truncated(span: str) -> str:
    """Close an object that was cut off mid-stream.

    Drops a dangling partial token (unterminated key, trailing comma or
    colon), closes an open string, then closes brackets in reverse order.
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    last_safe = 0
    for i, ch in enumerate(span):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
                last_safe = i + 1
            continue
        if ch == '"':
            in_string = True
        elif ch in "{[":
            stack.append("}" if ch == "{" else "]")
            last_safe = i + 1
        elif ch in "}]":
            if stack:
                stack.pop()
            last_safe = i + 1
        elif ch not in " \t\r\n,:":
            last_safe = i + 1

    repaired = span if not in_string else span + '"'
    if in_string and _ends_in_key(span):
        repaired = span[:last_safe]
    repaired = repaired.rstrip().rstrip(",").rstrip()
    if repaired.endswith(":"):
        # Key without a value: drop the key as well.
        repaired = repaired[: repaired.rfind('"', 0, repaired.rfind('"'))].rstrip().rstrip(",")
    return repaired + "".join(reversed(stack))


def _ends_in_key(span: str) -> bool:
    """True when the open string at the end is an object key rather than a value."""
    quote = span.rfind('"')
    before = span[:quote].rstrip()
    return before.endswith("{") or before.endswith(",")

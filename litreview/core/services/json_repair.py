"""Recovery of JSON responses truncated by the model's output token limit.

A schema-constrained response that hits the token limit stops mid-value,
e.g. ``{"summary": "El estudio analiza`` or ``{"tags": ["IA", "docen``.
:func:`repair_truncated_json` scans the text with an explicit state machine
(string/escape state plus a stack of open containers, each tracking whether
it expects a key, a colon, a value or a separator) and closes whatever is
still open.

Text that already parses is returned untouched, and repairing a repaired
text is a no-op.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

OBJECT = "{"
ARRAY = "["
CLOSERS = {OBJECT: "}", ARRAY: "]"}

# Container phases
KEY = "key"
COLON = "colon"
VALUE = "value"
AFTER = "after"

_PARTIAL_UNICODE_ESCAPE = re.compile(r"\\u[0-9a-fA-F]{0,3}")
_SCALAR_END = set(',:]}" \t\r\n')


@dataclass
class _Frame:
    kind: str
    phase: str
    key_start: int = -1


def _is_valid(text: str) -> bool:
    try:
        json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return False
    return True


def _complete_value(stack: list[_Frame], start: int, is_string: bool) -> None:
    """Advance the enclosing container after a string or scalar token."""
    if not stack:
        return
    top = stack[-1]
    if top.kind == OBJECT and top.phase == KEY and is_string:
        top.phase = COLON
        top.key_start = start
    else:
        top.phase = AFTER


def repair_truncated_json(text: str) -> str:
    """Close the open strings, values and containers of a truncated JSON text.

    Args:
        text: Possibly truncated JSON.

    Returns:
        ``text`` unchanged if it is valid JSON, otherwise the repaired text.
    """
    if _is_valid(text):
        return text

    body = text.rstrip()
    stack: list[_Frame] = []
    in_string = False
    escape = False
    string_start = -1
    escape_start = -1
    scalar_start = -1

    for index, char in enumerate(body):
        if in_string:
            if escape:
                escape = False
            elif char == "\\":
                escape = True
                escape_start = index
            elif char == '"':
                in_string = False
                _complete_value(stack, string_start, is_string=True)
            continue

        if scalar_start >= 0:
            if char not in _SCALAR_END:
                continue
            _complete_value(stack, scalar_start, is_string=False)
            scalar_start = -1

        if char == '"':
            in_string = True
            string_start = index
            escape_start = -1
        elif char in (OBJECT, ARRAY):
            stack.append(_Frame(kind=char, phase=KEY if char == OBJECT else VALUE))
        elif char in ("}", "]"):
            if stack and CLOSERS[stack[-1].kind] == char:
                stack.pop()
                if stack:
                    stack[-1].phase = AFTER
        elif char == ":":
            if stack and stack[-1].kind == OBJECT:
                stack[-1].phase = VALUE
        elif char == ",":
            if stack:
                stack[-1].phase = KEY if stack[-1].kind == OBJECT else VALUE
        elif not char.isspace():
            scalar_start = index

    if in_string:
        if escape:
            body = body[:-1]
        elif escape_start >= 0 and _PARTIAL_UNICODE_ESCAPE.fullmatch(body, escape_start):
            # Only a real escape sequence, not an escaped backslash before a "u"
            body = body[:escape_start]
        body += '"'
        _complete_value(stack, string_start, is_string=True)
    elif scalar_start >= 0:
        if _is_valid(body[scalar_start:]):
            _complete_value(stack, scalar_start, is_string=False)
        else:
            body = body[:scalar_start].rstrip()

    if stack:
        top = stack[-1]
        if top.kind == OBJECT and top.phase == COLON:
            # A key with no colon cannot be completed; drop it
            body = body[: top.key_start].rstrip()
            top.phase = KEY
        if top.kind == OBJECT and top.phase == VALUE:
            body += " null"
        elif top.phase in (KEY, VALUE):
            body = body.rstrip()
            if body.endswith(","):
                body = body[:-1].rstrip()

    body += "".join(CLOSERS[frame.kind] for frame in reversed(stack))
    return body


def loads_lenient(text: str) -> Any:
    """Parse JSON, repairing a truncated document once if needed.

    Raises:
        json.JSONDecodeError: If the text is still invalid after repair.
    """
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        repaired = repair_truncated_json(text)
        logger.warning(f"Response JSON was invalid, retrying with repair ({len(text)} chars)")
        return json.loads(repaired)

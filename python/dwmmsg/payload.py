"""JSON payloads for the dwm IPC message types.

Command arguments arrive as untyped strings. Each one is classified on its
own: integer first, then float, otherwise it is sent as a string.
"""

import json
import math
import re
from typing import Iterable, Union

# ASCII digits only; str.isdigit() also accepts characters int() rejects.
_SIGNED_INT_RE = re.compile(r'-?[0-9]+')
_UNSIGNED_INT_RE = re.compile(r'[0-9]+')
# One optional leading minus, at most one dot, and the dot may not be the
# first or last character of the string.
_FLOAT_RE = re.compile(r'-?[0-9]+(?:\.[0-9]+)?|-\.[0-9]+')

# The server requires a non-empty payload even for queries without arguments.
QUERY_PLACEHOLDER = b"\0"

Arg = Union[int, float, str]


def is_signed_int(s: str) -> bool:
    """True for an optional leading '-' followed by one or more digits."""
    return _SIGNED_INT_RE.fullmatch(s) is not None


def is_unsigned_int(s: str) -> bool:
    return _UNSIGNED_INT_RE.fullmatch(s) is not None


def is_float(s: str) -> bool:
    """True for digits with at most one interior '.' and an optional leading '-'."""
    return _FLOAT_RE.fullmatch(s) is not None


def classify_arg(s: str) -> Arg:
    """Convert a command-line argument to the JSON value it is sent as.

    Numbers too long for int() or too large for a finite float are sent
    as strings.
    """
    if is_signed_int(s):
        try:
            return int(s)
        except ValueError:
            pass
    if is_float(s):
        value = float(s)
        if math.isfinite(value):
            return value
    return s


def _dumps(obj) -> bytes:
    # surrogateescape passes undecodable argv bytes through unchanged
    text = json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    return text.encode("utf-8", errors="surrogateescape")


def run_command_payload(name: str, args: Iterable[str] = ()) -> bytes:
    """{"command": name, "args": [...]} with each argument classified."""
    return _dumps({"command": name, "args": [classify_arg(a) for a in args]})


def get_client_payload(window_id: int) -> bytes:
    """{"client_window_id": id}. The caller validates the id."""
    return _dumps({"client_window_id": int(window_id)})


def subscribe_payload(event: str) -> bytes:
    return _dumps({"event": event, "action": "subscribe"})

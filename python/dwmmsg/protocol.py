"""Wire protocol for communicating with the dwm IPC socket.

Every message is a 12-byte header followed by the payload:

    magic[7]  "DWM-IPC"
    size u32  payload byte count
    type u8   MessageType tag

Fields are laid out contiguously in native byte order (client and server
share a host). Payloads are UTF-8 JSON, except for the zero-argument
queries which carry a one-byte placeholder.
"""

from __future__ import annotations

import json
import logging
import struct
from enum import IntEnum
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

MAGIC = b"DWM-IPC"

# magic, payload size, message type; "=" means native order with no padding.
HEADER = struct.Struct("=7sIB")
HEADER_SIZE = HEADER.size

MAX_PAYLOAD_SIZE = 0xFFFFFFFF

EVENT_TAG_CHANGE = "tag_change_event"
EVENT_CLIENT_FOCUS_CHANGE = "client_focus_change_event"
EVENT_LAYOUT_CHANGE = "layout_change_event"
EVENT_MONITOR_FOCUS_CHANGE = "monitor_focus_change_event"
EVENT_FOCUSED_TITLE_CHANGE = "focused_title_change_event"
EVENT_FOCUSED_STATE_CHANGE = "focused_state_change_event"

EVENTS = (
    EVENT_TAG_CHANGE,
    EVENT_CLIENT_FOCUS_CHANGE,
    EVENT_LAYOUT_CHANGE,
    EVENT_MONITOR_FOCUS_CHANGE,
    EVENT_FOCUSED_TITLE_CHANGE,
    EVENT_FOCUSED_STATE_CHANGE,
)


class MessageType(IntEnum):
    RUN_COMMAND = 0
    GET_MONITORS = 1
    GET_TAGS = 2
    GET_LAYOUTS = 3
    GET_DWM_CLIENT = 4
    SUBSCRIBE = 5
    EVENT = 6


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class DwmIpcError(Exception):
    """Base class for everything this package raises on purpose."""


class ProtocolError(DwmIpcError, ValueError):
    """The peer sent bytes that do not follow the wire format."""


class BadMagicError(ProtocolError):
    """Header does not start with MAGIC; the connection is unusable."""


class IpcConnectionError(DwmIpcError, ConnectionError):
    """Transport-level failure."""


class ConnectFailedError(IpcConnectionError):
    """Could not connect to the socket."""


class IOFailureError(IpcConnectionError):
    """Non-transient read or write error."""


class EarlyEOFError(IpcConnectionError):
    """Peer closed the connection before sending anything."""


class TruncatedMessageError(IpcConnectionError):
    """Peer closed the connection in the middle of a message."""


class ConfigError(DwmIpcError):
    """Configuration file could not be read or is malformed."""


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

class Message(NamedTuple):
    """One decoded frame. Compares equal to a plain (type, payload) tuple."""

    type: Any
    payload: bytes

    def text(self) -> str:
        return self.payload.decode("utf-8", errors="replace")

    def json(self) -> Any:
        """Parse the payload as JSON."""
        return json.loads(self.payload)


def _message_type(value: int):
    try:
        return MessageType(value)
    except ValueError:
        logger.debug("unknown message type %d", value)
        return value


def encode_message(msg_type: int, payload: bytes) -> bytes:
    """Encode a message as header + payload bytes.

    Raises ValueError if the type does not fit in a byte or the payload
    does not fit in a u32 length.
    """
    return encode_header(msg_type, len(payload)) + bytes(payload)


def encode_header(msg_type: int, size: int) -> bytes:
    """Encode just the 12-byte header for a payload of the given size."""
    if not 0 <= int(msg_type) <= 0xFF:
        raise ValueError(f"Message type out of range: {msg_type}")
    if size > MAX_PAYLOAD_SIZE:
        raise ValueError(f"Payload too large: {size} bytes")
    return HEADER.pack(MAGIC, size, int(msg_type))


def decode_header(data: bytes) -> tuple[Any, int]:
    """Decode a 12-byte header into (type, payload size).

    Raises BadMagicError if the magic string does not match.
    """
    if len(data) < HEADER_SIZE:
        raise TruncatedMessageError(
            f"Header too short: need {HEADER_SIZE} bytes, got {len(data)}"
        )
    magic, size, msg_type = HEADER.unpack(data[:HEADER_SIZE])
    if magic != MAGIC:
        logger.warning("invalid magic string %r, expected %r", magic, MAGIC)
        raise BadMagicError(f"Invalid magic string: got {magic!r}, expected {MAGIC!r}")
    return _message_type(msg_type), size


def decode_message(data: bytes) -> Message:
    """Decode a complete frame held in memory.

    Trailing bytes past the declared payload size are ignored.
    """
    msg_type, size = decode_header(data)
    payload = data[HEADER_SIZE:HEADER_SIZE + size]
    if len(payload) < size:
        raise TruncatedMessageError(
            f"Payload truncated: expected {size} bytes, got {len(payload)}"
        )
    return Message(msg_type, bytes(payload))



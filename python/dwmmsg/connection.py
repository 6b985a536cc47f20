"""Reliable byte-stream I/O over the dwm Unix domain socket.

Stream sockets may move fewer bytes than asked for on each call, so every
header and payload goes through read_exactly / write_exactly.
"""

from __future__ import annotations

import logging
import socket
from typing import Optional

from .config import DEFAULT_SOCKET_PATH
from .protocol import (
    HEADER_SIZE,
    ConnectFailedError,
    EarlyEOFError,
    IOFailureError,
    Message,
    TruncatedMessageError,
    decode_header,
    encode_header,
)

logger = logging.getLogger(__name__)

# Conditions that are retried rather than reported.
_TRANSIENT = (InterruptedError, BlockingIOError)

# Upper bound for a single recv() so a large declared size is not
# allocated up front.
_RECV_CHUNK = 64 * 1024


def read_exactly(sock, n: int) -> bytes:
    """Read exactly n bytes from a socket-like object.

    Raises EarlyEOFError if the peer closes before any byte arrives,
    TruncatedMessageError if it closes part way, IOFailureError on any
    other socket error.
    """
    buf = bytearray()
    while len(buf) < n:
        try:
            chunk = sock.recv(min(n - len(buf), _RECV_CHUNK))
        except _TRANSIENT:
            continue
        except OSError as exc:
            raise IOFailureError(f"Error reading from socket: {exc}") from exc
        if not chunk:
            if not buf:
                logger.warning("unexpected EOF: read 0 of %d bytes", n)
                raise EarlyEOFError(f"Connection closed before any data (expected {n} bytes)")
            logger.warning("unexpected EOF: read %d of %d bytes", len(buf), n)
            raise TruncatedMessageError(
                f"Connection closed after {len(buf)} of {n} bytes"
            )
        buf.extend(chunk)
    return bytes(buf)


def write_exactly(sock, data: bytes) -> int:
    """Write all of data to a socket-like object, returning the byte count.

    Raises IOFailureError on any non-transient socket error.
    """
    view = memoryview(data)
    written = 0
    while written < len(view):
        try:
            n = sock.send(view[written:])
        except _TRANSIENT:
            continue
        except OSError as exc:
            raise IOFailureError(f"Error writing to socket: {exc}") from exc
        written += n
    return written


def read_message(sock) -> Message:
    """Read one framed message from a socket-like object.

    The header is validated before any payload byte is read.
    """
    msg_type, size = decode_header(read_exactly(sock, HEADER_SIZE))
    try:
        payload = read_exactly(sock, size)
    except EarlyEOFError as exc:
        # The header already arrived, so the message was cut off.
        raise TruncatedMessageError(
            f"Connection closed after header; expected {size} payload bytes"
        ) from exc
    logger.debug("received %s (%d bytes)", msg_type, size)
    return Message(msg_type, payload)


def write_message(sock, msg_type: int, payload: bytes) -> None:
    """Write header then payload as two reliable writes."""
    header = encode_header(msg_type, len(payload))
    write_exactly(sock, header)
    if payload:
        write_exactly(sock, payload)
    logger.debug("sent type %d (%d bytes)", msg_type, len(payload))


class SocketConnection:
    """Manages a Unix domain socket connection to the dwm IPC socket."""

    def __init__(self, path: str = None):
        self.path = path or DEFAULT_SOCKET_PATH
        self._sock: Optional[socket.socket] = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self):
        """Connect to the dwm socket."""
        if self._sock is not None:
            return
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(self.path)
        except OSError as exc:
            sock.close()
            raise ConnectFailedError(f"Failed to connect to socket {self.path}: {exc}") from exc
        logger.debug("connected to %s", self.path)
        self._sock = sock

    def send_message(self, msg_type: int, payload: bytes) -> None:
        """Send one message. Connects first if needed."""
        if self._sock is None:
            self.connect()
        write_message(self._sock, msg_type, payload)

    def recv_message(self) -> Message:
        """Block until one full message has been read."""
        if self._sock is None:
            self.connect()
        return read_message(self._sock)

    def close(self):
        """Close the socket connection."""
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError:
                pass
            self._sock = None

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *args):
        self.close()

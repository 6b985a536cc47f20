"""dwmmsg -- client for the dwm IPC socket protocol."""

from .client import DwmClient
from .config import Config, DEFAULT_SOCKET_PATH, load_config
from .connection import SocketConnection, read_exactly, write_exactly, read_message, write_message
from .payload import classify_arg, is_float, is_signed_int, is_unsigned_int
from .protocol import (
    EVENTS,
    MAGIC,
    BadMagicError,
    ConfigError,
    ConnectFailedError,
    DwmIpcError,
    EarlyEOFError,
    IOFailureError,
    IpcConnectionError,
    Message,
    MessageType,
    ProtocolError,
    TruncatedMessageError,
    decode_message,
    encode_message,
)
from .watch import EventWatcher


def connect(socket_path: str = None, ignore_reply: bool = False) -> DwmClient:
    """Create and return a connected client."""
    return DwmClient(socket_path, ignore_reply=ignore_reply).connect()


__all__ = [
    'DwmClient', 'EventWatcher', 'SocketConnection', 'Config',
    'Message', 'MessageType', 'MAGIC', 'EVENTS', 'DEFAULT_SOCKET_PATH',
    'connect', 'load_config',
    'encode_message', 'decode_message', 'read_message', 'write_message',
    'read_exactly', 'write_exactly',
    'classify_arg', 'is_signed_int', 'is_float', 'is_unsigned_int',
    'DwmIpcError', 'ProtocolError', 'BadMagicError', 'IpcConnectionError',
    'ConnectFailedError', 'IOFailureError', 'EarlyEOFError',
    'TruncatedMessageError', 'ConfigError',
]

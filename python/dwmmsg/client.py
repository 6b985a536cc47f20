"""dwm IPC client -- one request, one reply, plus the event stream."""

import logging
from typing import Iterator, Optional, Union

from .connection import SocketConnection
from .payload import (
    QUERY_PLACEHOLDER,
    get_client_payload,
    is_unsigned_int,
    run_command_payload,
    subscribe_payload,
)
from .protocol import Message, MessageType

logger = logging.getLogger(__name__)


class DwmClient:
    """Client for the dwm IPC socket.

    One instance is the state of one session: the connection and whether
    replies to run_command/subscribe are suppressed. Requests are strictly
    sequential; each is followed by a blocking read of exactly one reply.
    After one or more subscribe() calls, read_event() / events() read the
    messages the server pushes without sending anything.
    """

    def __init__(self, socket_path: str = None, ignore_reply: bool = False):
        self._conn = SocketConnection(socket_path)
        self.ignore_reply = ignore_reply

    def _exchange(self, msg_type: MessageType, payload: bytes) -> Message:
        """Send one request and block for its reply."""
        self._conn.send_message(msg_type, payload)
        return self._conn.recv_message()

    def _exchange_quiet(self, msg_type: MessageType, payload: bytes) -> Optional[Message]:
        # The reply is always read so the next header lines up.
        reply = self._exchange(msg_type, payload)
        if self.ignore_reply:
            logger.debug("discarding %d byte reply", len(reply.payload))
            return None
        return reply

    def run_command(self, name: str, *args: str) -> Optional[Message]:
        """Run a dwm IPC command.

        Arguments are sent as integers, floats or strings depending on
        what they look like. Returns None when replies are ignored.
        """
        return self._exchange_quiet(MessageType.RUN_COMMAND, run_command_payload(name, args))

    def get_monitors(self) -> Message:
        return self._exchange(MessageType.GET_MONITORS, QUERY_PLACEHOLDER)

    def get_tags(self) -> Message:
        return self._exchange(MessageType.GET_TAGS, QUERY_PLACEHOLDER)

    def get_layouts(self) -> Message:
        return self._exchange(MessageType.GET_LAYOUTS, QUERY_PLACEHOLDER)

    def get_client(self, window_id: Union[int, str]) -> Message:
        """Get the properties of the dwm client for an X window id.

        Raises ValueError, before sending anything, if the id is not an
        unsigned integer.
        """
        if isinstance(window_id, str):
            if not is_unsigned_int(window_id):
                raise ValueError(f"Expected unsigned integer window id, got {window_id!r}")
            window_id = int(window_id)
        elif isinstance(window_id, bool) or not isinstance(window_id, int) or window_id < 0:
            raise ValueError(f"Expected unsigned integer window id, got {window_id!r}")
        return self._exchange(MessageType.GET_DWM_CLIENT, get_client_payload(window_id))

    def subscribe(self, event: str) -> Optional[Message]:
        """Subscribe to one event. Returns None when replies are ignored."""
        return self._exchange_quiet(MessageType.SUBSCRIBE, subscribe_payload(event))

    def read_event(self) -> Message:
        """Block until the server pushes the next message."""
        message = self._conn.recv_message()
        if message.type != MessageType.EVENT:
            logger.warning("expected an event, got message type %s", message.type)
        return message

    def events(self) -> Iterator[Message]:
        """Yield pushed messages until the connection breaks.

        The generator never finishes on its own; a closed or failed
        connection surfaces as an exception from the protocol layer.
        """
        while True:
            yield self.read_event()

    def connect(self) -> 'DwmClient':
        """Explicitly connect (also connects on first use)."""
        self._conn.connect()
        return self

    def close(self):
        """Close the socket connection."""
        self._conn.close()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, *args):
        self.close()

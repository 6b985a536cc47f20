"""Event watch -- route pushed dwm events to callbacks by event name."""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

from .protocol import Message, MessageType

logger = logging.getLogger(__name__)


class WatchEntry:
    """A registered watch."""

    def __init__(self, event: str, callback: Callable[[Any], Any]):
        self.event = event
        self.callback = callback


class EventWatcher:
    """Subscribes to dwm events and fires callbacks as they arrive.

    Event payloads are JSON objects keyed by the event name, e.g.
    ``{"tag_change_event": {"monitor_number": 0, ...}}``. Each callback
    registered for that name is called with the inner object.
    """

    def __init__(self, client):
        self._client = client
        self._watches: List[Optional[WatchEntry]] = []

    def watch(self, event: str, callback: Callable[[Any], Any]) -> int:
        """Register a callback for an event name. Returns the watch index."""
        self._watches.append(WatchEntry(event, callback))
        return len(self._watches) - 1

    def unwatch(self, index: int) -> None:
        """Remove a watch by index."""
        if 0 <= index < len(self._watches):
            self._watches[index] = None

    def events(self) -> List[str]:
        """Distinct watched event names, in registration order."""
        names: List[str] = []
        for entry in self._watches:
            if entry is not None and entry.event not in names:
                names.append(entry.event)
        return names

    def subscribe_all(self) -> None:
        """Send one subscribe request per watched event name."""
        for event in self.events():
            self._client.subscribe(event)

    def dispatch(self, message: Message) -> List[Dict[str, Any]]:
        """Fire the callbacks matching one event message.

        Returns a list of fired results. Callback exceptions are recorded
        in the result instead of propagating.
        """
        if message.type != MessageType.EVENT:
            logger.debug("not dispatching message type %s", message.type)
            return []
        try:
            data = json.loads(message.payload)
        except ValueError:
            logger.warning("event payload is not valid JSON: %r", message.payload[:80])
            return []
        if not isinstance(data, dict):
            logger.warning("event payload is not a JSON object")
            return []

        fired = []
        for name, body in data.items():
            for idx, entry in enumerate(self._watches):
                if entry is None or entry.event != name:
                    continue
                try:
                    result = entry.callback(body)
                    fired.append({"index": idx, "event": name, "result": result})
                except Exception as exc:
                    logger.warning("callback for %s failed: %s", name, exc)
                    fired.append({"index": idx, "event": name, "error": str(exc)})
        return fired

    def poll_once(self) -> List[Dict[str, Any]]:
        """Block for the next pushed message and dispatch it."""
        return self.dispatch(self._client.read_event())

    def run(self) -> None:
        """Subscribe, then dispatch events until the connection breaks."""
        self.subscribe_all()
        for message in self._client.events():
            self.dispatch(message)

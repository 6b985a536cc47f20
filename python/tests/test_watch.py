"""Tests for the EventWatcher."""

from unittest.mock import MagicMock, call

import pytest

from dwmmsg.protocol import EarlyEOFError, Message, MessageType
from dwmmsg.watch import EventWatcher


def _event(payload: bytes) -> Message:
    return Message(MessageType.EVENT, payload)


class TestWatchRegistration:
    def test_watch_registers_callback(self):
        """Register a watch, verify entry stored."""
        mgr = EventWatcher(MagicMock())

        def on_change(body):
            pass

        idx = mgr.watch("tag_change_event", on_change)
        assert idx == 0
        assert len(mgr._watches) == 1
        assert mgr._watches[0].callback is on_change

    def test_multiple_watches(self):
        """Multiple watches get sequential indices."""
        mgr = EventWatcher(MagicMock())

        assert mgr.watch("tag_change_event", lambda b: None) == 0
        assert mgr.watch("layout_change_event", lambda b: None) == 1
        assert mgr.watch("tag_change_event", lambda b: None) == 2
        assert mgr.events() == ["tag_change_event", "layout_change_event"]

    def test_unwatch(self):
        """Unwatching sets entry to None."""
        mgr = EventWatcher(MagicMock())

        idx = mgr.watch("tag_change_event", lambda b: None)
        mgr.unwatch(idx)
        assert mgr._watches[idx] is None
        assert mgr.events() == []


class TestSubscribeAll:
    def test_one_subscribe_per_event_name(self):
        client = MagicMock()
        mgr = EventWatcher(client)
        mgr.watch("tag_change_event", lambda b: None)
        mgr.watch("tag_change_event", lambda b: None)
        mgr.watch("client_focus_change_event", lambda b: None)

        mgr.subscribe_all()
        assert client.subscribe.call_args_list == [
            call("tag_change_event"),
            call("client_focus_change_event"),
        ]


class TestDispatch:
    def test_dispatch_fires_matching_callbacks(self):
        mgr = EventWatcher(MagicMock())
        seen = []
        mgr.watch("tag_change_event", lambda body: seen.append(body["monitor_number"]))
        mgr.watch("layout_change_event", lambda body: seen.append("layout"))

        fired = mgr.dispatch(_event(b'{"tag_change_event":{"monitor_number":1}}'))
        assert seen == [1]
        assert fired == [{"index": 0, "event": "tag_change_event", "result": None}]

    def test_callback_error_recorded(self):
        mgr = EventWatcher(MagicMock())

        def boom(body):
            raise RuntimeError("boom")

        mgr.watch("tag_change_event", boom)
        fired = mgr.dispatch(_event(b'{"tag_change_event":{}}'))
        assert fired == [{"index": 0, "event": "tag_change_event", "error": "boom"}]

    @pytest.mark.parametrize("message", [
        Message(MessageType.SUBSCRIBE, b'{"tag_change_event":{}}'),
        _event(b"not json"),
        _event(b"[1, 2]"),
    ])
    def test_ignored_messages(self, message):
        mgr = EventWatcher(MagicMock())
        callback = MagicMock()
        mgr.watch("tag_change_event", callback)
        assert mgr.dispatch(message) == []
        callback.assert_not_called()

    def test_poll_once_reads_one_event(self):
        client = MagicMock()
        client.read_event.return_value = _event(b'{"layout_change_event":{"new_symbol":"[M]"}}')
        mgr = EventWatcher(client)
        results = []
        mgr.watch("layout_change_event", lambda body: results.append(body["new_symbol"]))

        fired = mgr.poll_once()
        assert len(fired) == 1
        assert results == ["[M]"]
        client.read_event.assert_called_once()


class TestRun:
    def test_run_until_connection_breaks(self):
        client = MagicMock()

        def stream():
            yield _event(b'{"tag_change_event":{"n":1}}')
            yield _event(b'{"tag_change_event":{"n":2}}')
            raise EarlyEOFError("closed")

        client.events.return_value = stream()
        mgr = EventWatcher(client)
        seen = []
        mgr.watch("tag_change_event", lambda body: seen.append(body["n"]))

        with pytest.raises(EarlyEOFError):
            mgr.run()
        client.subscribe.assert_called_once_with("tag_change_event")
        assert seen == [1, 2]

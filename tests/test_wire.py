"""Tests for panetrack.session.wire (Wire, WireEvent, EventType)."""

from __future__ import annotations

import asyncio

from panetrack.session.wire import EventType, Wire, WireEvent


# ---------------------------------------------------------------------------
# EventType
# ---------------------------------------------------------------------------


class TestEventType:
    def test_all_variants_exist(self) -> None:
        expected = {
            "COMMAND_DISPATCHED",
            "COMMAND_COMPLETED",
            "COMMAND_FAILED",
            "COMMANDS_REAPED",
            "SHELL_CHANGED",
            "HELPER_INSTALLED",
        }
        assert {e.name for e in EventType} == expected

    def test_values_are_lowercase(self) -> None:
        for e in EventType:
            assert e.value == e.name.lower()


# ---------------------------------------------------------------------------
# Wire: send/subscribe
# ---------------------------------------------------------------------------


class TestWire:
    def test_event_defaults(self) -> None:
        assert WireEvent(type=EventType.SHELL_CHANGED).data == {}

    def test_send_to_multiple_subscribers(self) -> None:
        wire = Wire()
        q1 = wire.subscribe()
        q2 = wire.subscribe()
        wire.send(WireEvent(type=EventType.HELPER_INSTALLED, data={"pane_id": "%1"}))
        e1 = q1.get_nowait()
        e2 = q2.get_nowait()
        assert e1 is not None and e2 is not None
        assert e1.type == e2.type == EventType.HELPER_INSTALLED

    def test_unsubscribe(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.unsubscribe(q)
        wire.send_reaped(["a"])
        assert q.empty()

    def test_unsubscribe_nonexistent_is_safe(self) -> None:
        wire = Wire()
        q: asyncio.Queue[WireEvent | None] = asyncio.Queue()
        wire.unsubscribe(q)


# ---------------------------------------------------------------------------
# Wire: closed-state guard
# ---------------------------------------------------------------------------


class TestWireClosedGuard:
    def test_close_sends_sentinel_to_all_subscribers(self) -> None:
        wire = Wire()
        q1 = wire.subscribe()
        q2 = wire.subscribe()
        wire.close()
        assert q1.get_nowait() is None
        assert q2.get_nowait() is None

    def test_sends_after_close_are_dropped(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.close()
        q.get_nowait()  # drain sentinel
        wire.send_dispatched("id", "%1", "ls", 1)
        wire.send_finished("id", "%1", 0)
        wire.send_reaped(["id"])
        wire.send_shell_changed("zsh", None)
        wire.send_helper_installed("%1")
        assert q.empty()


# ---------------------------------------------------------------------------
# Wire: convenience methods
# ---------------------------------------------------------------------------


class TestWireConvenience:
    def test_send_dispatched(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.send_dispatched("abc", "%3", "make", 7)
        event = q.get_nowait()
        assert event is not None
        assert event.type == EventType.COMMAND_DISPATCHED
        assert event.data == {
            "command_id": "abc",
            "pane_id": "%3",
            "command": "make",
            "sequence_number": 7,
        }

    def test_send_finished_success(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.send_finished("abc", "%3", 0)
        event = q.get_nowait()
        assert event is not None
        assert event.type == EventType.COMMAND_COMPLETED
        assert event.data["exit_code"] == 0

    def test_send_finished_failure(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.send_finished("abc", "%3", 2)
        event = q.get_nowait()
        assert event is not None
        assert event.type == EventType.COMMAND_FAILED

    def test_send_shell_changed(self) -> None:
        wire = Wire()
        q = wire.subscribe()
        wire.send_shell_changed("fish", "%2")
        event = q.get_nowait()
        assert event is not None
        assert event.data == {"shell_type": "fish", "pane_id": "%2"}

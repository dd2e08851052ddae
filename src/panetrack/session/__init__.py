"""Event wire for command lifecycle notifications."""

from panetrack.session.wire import EventType, Wire, WireEvent

__all__ = ["EventType", "Wire", "WireEvent"]

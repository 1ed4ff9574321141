"""Events — publish/subscribe delivery of named events to handlers."""

from switchyard.events.bus import Event, EventBus, HandlerBox

__all__ = ["Event", "EventBus", "HandlerBox"]

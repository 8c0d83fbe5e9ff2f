# src/formflow/core/events.py
"""Synchronous fan-out of builder events to the views that render them.

The builder publishes the frozen events in contracts/events.py; a canvas, a
diagnostics panel or a toast area subscribes to the ones it draws.
"""

from collections import defaultdict
from collections.abc import Callable
from typing import Any

from formflow.contracts.events import BuilderEvent


class EventBus:
    """Dispatch each event to the handlers registered for its exact type.

    Handlers run in subscription order. A handler exception propagates to the
    builder action that emitted the event.

    Example:
        bus = EventBus()
        detach = bus.subscribe(ConnectionRejected, lambda e: toast(e.reason))
        builder = FormBuilder(event_bus=bus)
        ...
        detach()
    """

    def __init__(self) -> None:
        self._handlers: defaultdict[type, list[Callable[[Any], None]]] = defaultdict(list)

    def subscribe[E: BuilderEvent](self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register ``handler``; the returned callable detaches it again."""
        handlers = self._handlers[event_type]
        handlers.append(handler)

        def detach() -> None:
            if handler in handlers:
                handlers.remove(handler)

        return detach

    def emit(self, event: BuilderEvent) -> None:
        # Copy: a handler may detach itself while being called
        for handler in tuple(self._handlers.get(type(event), ())):
            handler(event)

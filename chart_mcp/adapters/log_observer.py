"""
Logging observers for chart delivery.

Turns delivery events into log records. Output of the delivery chain never
depends on them.

Key behaviors:
- Routine events log at DEBUG, or INFO when debug mode is on
- Failed fallback steps and render failures log at WARNING
- RecordingObserver keeps events in memory for test assertions
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from chart_mcp.components.delivery import DeliveryEvent, DeliveryObserver, EventKind

logger = logging.getLogger(__name__)

_WARNING_KINDS = frozenset({EventKind.STEP_FAILED, EventKind.RENDER_FAILED})


@dataclass
class LoggingObserver:
    """Writes delivery events to the standard logging system."""

    debug: bool = False
    log: logging.Logger = field(default=logger)

    def level_for(self, event: DeliveryEvent) -> int:
        if event.kind in _WARNING_KINDS:
            return logging.WARNING
        return logging.INFO if self.debug else logging.DEBUG

    def notify(self, event: DeliveryEvent) -> None:
        mode = f" [{event.mode.value}]" if event.mode else ""
        self.log.log(
            self.level_for(event),
            "%s %s%s: %s",
            event.label,
            event.kind.value,
            mode,
            event.details,
        )


@dataclass
class RecordingObserver:
    """Stores events in memory."""

    events: list[DeliveryEvent] = field(default_factory=list)

    def notify(self, event: DeliveryEvent) -> None:
        self.events.append(event)

    def kinds(self) -> list[EventKind]:
        return [e.kind for e in self.events]


class CompositeObserver:
    """Fans each event out to several observers."""

    def __init__(self, observers: Iterable[DeliveryObserver]) -> None:
        self._observers = list(observers)

    def notify(self, event: DeliveryEvent) -> None:
        for observer in self._observers:
            observer.notify(event)

"""Structured progress events emitted while a deployment plan runs.

Sinks decouple progress reporting from orchestration: the executor emits a
:class:`DeploymentEvent` for every phase of every attempt and leaves it to
the sink to log, collect or display it.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional, Protocol

__all__ = [
    "Phase",
    "DeploymentEvent",
    "EventSink",
    "LoggingEventSink",
    "InMemoryEventSink",
    "CompositeEventSink",
]

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    STARTED = "started"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class DeploymentEvent:
    """
    A progress event for one component.

    Attributes:
        component: Name of the component the event is about.
        phase: Which phase of the attempt this event reports.
        sequence: Position of the component in the plan, starting at 1.
        address: Deployed address, for ``succeeded`` events.
        error: Error description, for ``failed`` and ``skipped`` events.
    """

    component: str
    phase: Phase
    sequence: int
    address: Optional[str] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["phase"] = self.phase.value
        return {key: value for key, value in data.items() if value is not None}


class EventSink(Protocol):
    def emit(self, event: DeploymentEvent) -> None:
        ...


class LoggingEventSink:
    """Write each event as one line to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger or logging.getLogger("dagdeploy.progress")
        self._level = level

    def emit(self, event: DeploymentEvent) -> None:
        line = f"[{event.sequence}] {event.component} {event.phase.value}"
        if event.address:
            line += f" at {event.address}"
        if event.error:
            line += f": {event.error}"
        self._logger.log(
            logging.ERROR if event.phase is Phase.FAILED else self._level, line
        )


class InMemoryEventSink:
    """Collect events in memory (useful for tests)."""

    def __init__(self) -> None:
        self.events: list[DeploymentEvent] = []

    def emit(self, event: DeploymentEvent) -> None:
        self.events.append(event)

    def phases_for(self, component: str) -> list[Phase]:
        return [event.phase for event in self.events if event.component == component]


class CompositeEventSink:
    """
    Send events to several sinks.

    A sink that raises is logged at debug level and does not prevent the
    remaining sinks from receiving the event.
    """

    def __init__(self, sinks: list[EventSink]):
        self._sinks = [sink for sink in sinks if sink is not None]

    def emit(self, event: DeploymentEvent) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event)
            except Exception as e:
                logger.debug(f"CompositeEventSink sink {sink!r} failed: {e}")

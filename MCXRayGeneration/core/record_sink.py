"""Per-step accumulation and publication of emission records."""

from typing import Callable, List, Tuple

from .data_models import EmissionRecord, EmissionEvent, EventKind
from ..utils.logging import get_logger


logger = get_logger()

EmissionListener = Callable[[EmissionEvent], None]


class EmissionRecordSink:
    """Accumulates the photons of one transport step and publishes them.

    Records live until the next ``reset()``. Listeners receive the batch as
    an immutable tuple, once per published step.

    Attributes:
        listeners: Registered emission listeners, called in registration order
    """

    def __init__(self):
        self._records: List[EmissionRecord] = []
        self.listeners: List[EmissionListener] = []

    def add_listener(self, listener: EmissionListener) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)
            logger.debug(f"Emission listener registered: {listener!r}")

    def remove_listener(self, listener: EmissionListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def reset(self) -> None:
        """Discard the previous step's records."""
        self._records = []

    def add(self, record: EmissionRecord) -> None:
        self._records.append(record)

    @property
    def records(self) -> Tuple[EmissionRecord, ...]:
        """Current batch."""
        return tuple(self._records)

    def total_weight(self) -> float:
        return sum(record.weight for record in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def publish(self, event_id: int, kind: EventKind) -> EmissionEvent:
        """Notify listeners that the current batch is ready.

        Args:
            event_id: Identifier of the transport notification being answered
            kind: Kind of that notification

        Returns:
            The event delivered to listeners
        """
        event = EmissionEvent(event_id=event_id, kind=kind, records=self.records)
        self._notify(event)
        return event

    def forward(self, event_id: int) -> EmissionEvent:
        """Pass a non-step notification through to listeners with no records."""
        event = EmissionEvent(event_id=event_id, kind=EventKind.OTHER)
        self._notify(event)
        return event

    def _notify(self, event: EmissionEvent) -> None:
        # Snapshot so a listener may unregister itself while being notified
        for listener in list(self.listeners):
            listener(event)

"""Core data structures for X-ray generation."""

from .data_models import (
    Element,
    MaterialComposition,
    TransportStep,
    EventKind,
    LifecycleEvent,
    TransportEvent,
    EmissionRecord,
    EmissionEvent,
    PhotonBank,
    SCATTER_EVENT_ID,
    NON_SCATTER_EVENT_ID
)
from .record_sink import EmissionRecordSink, EmissionListener

__all__ = [
    'Element',
    'MaterialComposition',
    'TransportStep',
    'EventKind',
    'LifecycleEvent',
    'TransportEvent',
    'EmissionRecord',
    'EmissionEvent',
    'PhotonBank',
    'SCATTER_EVENT_ID',
    'NON_SCATTER_EVENT_ID',
    'EmissionRecordSink',
    'EmissionListener'
]

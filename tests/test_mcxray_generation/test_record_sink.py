"""
Tests for MCXRayGeneration.core.record_sink module.
"""
import numpy as np
import pytest

from MCXRayGeneration.core import (
    EmissionRecord,
    EmissionRecordSink,
    EventKind,
    LifecycleEvent,
    SCATTER_EVENT_ID,
)


@pytest.fixture
def record(copper):
    return EmissionRecord(
        position=np.zeros(3),
        energy=2000.0,
        weight=0.5,
        element=copper,
        direction=np.array([1.0, 0.0, 0.0]),
        generating_energy=5000.0,
    )


@pytest.fixture
def sink():
    return EmissionRecordSink()


class TestEmissionRecordSink:
    def test_accumulates_until_reset(self, sink, record):
        sink.add(record)
        sink.add(record)
        assert len(sink) == 2
        assert sink.total_weight() == pytest.approx(1.0)

        sink.reset()
        assert len(sink) == 0
        assert sink.records == ()

    def test_publish_delivers_batch(self, sink, record):
        received = []
        sink.add_listener(received.append)
        sink.add(record)

        event = sink.publish(SCATTER_EVENT_ID, EventKind.SCATTER)

        assert received == [event]
        assert event.records == (record,)
        assert event.event_id == SCATTER_EVENT_ID
        assert event.kind is EventKind.SCATTER

    def test_published_batch_survives_reset(self, sink, record):
        received = []
        sink.add_listener(received.append)
        sink.add(record)
        sink.publish(SCATTER_EVENT_ID, EventKind.SCATTER)
        sink.reset()
        assert len(received[0].records) == 1

    def test_forward_carries_identifier_only(self, sink, record):
        received = []
        sink.add_listener(received.append)
        sink.add(record)

        sink.forward(LifecycleEvent.TRAJECTORY_END)

        assert received[0].event_id == LifecycleEvent.TRAJECTORY_END
        assert received[0].is_lifecycle
        assert received[0].records == ()

    def test_listeners_called_in_registration_order(self, sink):
        calls = []
        sink.add_listener(lambda event: calls.append('first'))
        sink.add_listener(lambda event: calls.append('second'))
        sink.forward(LifecycleEvent.RUN_START)
        assert calls == ['first', 'second']

    def test_duplicate_listener_registered_once(self, sink):
        received = []
        sink.add_listener(received.append)
        sink.add_listener(received.append)
        sink.forward(LifecycleEvent.RUN_START)
        assert len(received) == 1

    def test_listener_may_remove_itself(self, sink):
        calls = []

        def once(event):
            calls.append(event.event_id)
            sink.remove_listener(once)

        sink.add_listener(once)
        sink.forward(LifecycleEvent.RUN_START)
        sink.forward(LifecycleEvent.RUN_END)
        assert calls == [LifecycleEvent.RUN_START]

    def test_listener_errors_propagate(self, sink):
        def failing(event):
            raise RuntimeError("listener failed")

        sink.add_listener(failing)
        with pytest.raises(RuntimeError, match="listener failed"):
            sink.forward(LifecycleEvent.RUN_START)

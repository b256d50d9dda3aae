"""
Unit tests for listener error isolation.

Tests for:
- Isolation of failing listeners during dispatch and replay
- Error callbacks registered with on_listener_error()
- ListenerFailure / ListenerErrorStats serialization
- isolate_listener_errors=False propagation
- Logging of failures
"""

import logging
from typing import Any
from uuid import uuid4

import pytest

from eventchannel import (
    DeliveryPhase,
    DispatchState,
    EventChannel,
    ListenerErrorHandler,
    ListenerErrorStats,
    ListenerFailure,
)
from eventchannel.testing import PayloadRecorder


def broken(payload: Any) -> None:
    raise ValueError(f"cannot handle {payload}")


class TestIsolation:
    """Tests for failing listeners with isolation enabled (default)."""

    def test_failing_listener_does_not_stop_others(
        self, channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        channel.add_listener(broken)
        channel.add_listener(recorder)

        channel.fire("a")
        channel.fire("b")

        recorder.assert_received("a", "b")
        assert channel.dispatch_state is DispatchState.IDLE
        assert channel.get_stats()["listener_errors"] == 2

    def test_failure_during_replay_is_isolated(self, history_channel: EventChannel[Any]) -> None:
        history_channel.fire(1)
        history_channel.fire(2)

        subscription = history_channel.add_listener(broken)

        assert subscription.active is True
        phases = [failure.phase for failure in history_channel.recent_failures]
        assert phases == [DeliveryPhase.REPLAY, DeliveryPhase.REPLAY]

    def test_failing_filter_is_reported(
        self, channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        channel.add_filtered_listener(recorder, lambda payload: 1 / payload > 0)
        channel.fire(0)
        channel.fire(1)

        recorder.assert_received(1)
        assert channel.error_stats.errors_by_type == {"ZeroDivisionError": 1}

    def test_failure_details(self, channel: EventChannel[Any]) -> None:
        subscription = channel.add_listener(broken)
        channel.fire("x")

        failure = channel.recent_failures[0]
        assert failure.channel_name == "test"
        assert failure.listener_name == "broken"
        assert failure.subscription_id == subscription.id
        assert failure.payload == "x"
        assert failure.error_type == "ValueError"
        assert failure.error_message == "cannot handle x"
        assert failure.phase is DeliveryPhase.DISPATCH
        assert "ValueError" in failure.error_stacktrace

    def test_failure_logged_with_traceback(
        self, channel: EventChannel[Any], caplog: pytest.LogCaptureFixture
    ) -> None:
        channel.add_listener(broken)
        with caplog.at_level(logging.ERROR, logger="eventchannel.error_handling"):
            channel.fire("x")

        records = [r for r in caplog.records if r.name == "eventchannel.error_handling"]
        assert len(records) == 1
        assert records[0].exc_info is not None
        assert records[0].channel == "test"  # type: ignore[attr-defined]
        assert "failed during dispatch" in records[0].getMessage()


class TestErrorCallbacks:
    """Tests for on_listener_error()."""

    def test_callback_receives_failures(self, channel: EventChannel[Any]) -> None:
        failures: list[ListenerFailure] = []
        channel.on_listener_error(failures.append)
        channel.add_listener(broken)

        channel.fire("x")

        assert len(failures) == 1
        assert isinstance(failures[0].error, ValueError)

    def test_remove_callback(self, channel: EventChannel[Any]) -> None:
        failures: list[ListenerFailure] = []
        remove = channel.on_listener_error(failures.append)
        remove()
        remove()
        channel.add_listener(broken)

        channel.fire("x")

        assert failures == []

    def test_failing_callback_does_not_propagate(
        self, channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        def bad_callback(failure: ListenerFailure) -> None:
            raise RuntimeError("callback broke")

        channel.on_listener_error(bad_callback)
        channel.add_listener(broken)
        channel.add_listener(recorder)

        channel.fire("x")

        recorder.assert_received("x")

    def test_non_callable_callback_rejected(self, channel: EventChannel[Any]) -> None:
        with pytest.raises(TypeError):
            channel.on_listener_error("alert")  # type: ignore[arg-type]


class TestPropagation:
    """Tests for isolate_listener_errors=False."""

    @pytest.fixture
    def strict_channel(self) -> EventChannel[Any]:
        return EventChannel(name="strict", enable_tracing=False, isolate_listener_errors=False)

    def test_failure_propagates_to_fire(
        self, strict_channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        strict_channel.add_listener(broken)
        strict_channel.add_listener(recorder)

        with pytest.raises(ValueError, match="cannot handle x"):
            strict_channel.fire("x")

        recorder.assert_not_received()
        assert strict_channel.dispatch_state is DispatchState.IDLE
        # Still reported before propagating
        assert strict_channel.error_stats.total_errors == 1

    def test_remaining_queue_delivered_by_next_drain(
        self, strict_channel: EventChannel[Any]
    ) -> None:
        delivered: list[str] = []

        def listener(payload: str) -> None:
            delivered.append(payload)
            if payload == "first":
                strict_channel.fire("queued")
                raise RuntimeError("stop")

        strict_channel.add_listener(listener)
        with pytest.raises(RuntimeError):
            strict_channel.fire("first")
        assert strict_channel.queue_length == 1

        strict_channel.fire("next")
        assert delivered == ["first", "queued", "next"]

    def test_failure_propagates_from_replay(self) -> None:
        channel = EventChannel[int](
            name="strict", history_limit=0, enable_tracing=False, isolate_listener_errors=False
        )
        channel.fire(1)
        with pytest.raises(ValueError):
            channel.add_listener(broken)

    def test_failed_replay_leaves_no_registration(self) -> None:
        """A listener whose replay raises is not left registered."""
        channel = EventChannel[int](
            name="strict", history_limit=0, enable_tracing=False, isolate_listener_errors=False
        )
        channel.fire(1)
        with pytest.raises(ValueError):
            channel.add_listener(broken)

        assert channel.listeners_count == 0
        assert channel.subscriptions == ()
        # Later payloads do not reach it
        channel.fire(2)
        assert channel.error_stats.total_errors == 1

    def test_replay_failure_keeps_other_listeners(
        self, recorder: PayloadRecorder[Any]
    ) -> None:
        channel = EventChannel[int](
            name="strict", history_limit=0, enable_tracing=False, isolate_listener_errors=False
        )
        channel.fire(1)
        channel.add_listener(recorder)
        with pytest.raises(ValueError):
            channel.add_listener(broken)

        channel.fire(2)
        assert recorder.payloads == [1, 2]
        assert channel.listeners_count == 1


class TestErrorStats:
    """Tests for ListenerErrorStats and ListenerErrorHandler."""

    def _failure(self, listener_name: str, error: BaseException) -> ListenerFailure:
        return ListenerFailure(
            channel_name="orders",
            listener_name=listener_name,
            subscription_id=uuid4(),
            payload={"id": 1},
            error=error,
        )

    def test_stats_aggregate_by_type_and_listener(self) -> None:
        stats = ListenerErrorStats()
        stats.record(self._failure("a", ValueError("x")))
        stats.record(self._failure("a", KeyError("y")))
        stats.record(self._failure("b", ValueError("z")))

        assert stats.total_errors == 3
        assert stats.errors_by_type == {"ValueError": 2, "KeyError": 1}
        assert stats.errors_by_listener == {"a": 2, "b": 1}
        assert stats.first_error_at is not None
        assert stats.last_error_at is not None
        assert stats.first_error_at <= stats.last_error_at

    def test_stats_to_dict(self) -> None:
        stats = ListenerErrorStats()
        assert stats.to_dict()["first_error_at"] is None
        stats.record(self._failure("a", ValueError("x")))
        data = stats.to_dict()
        assert data["total_errors"] == 1
        assert isinstance(data["last_error_at"], str)

    def test_failure_to_dict(self) -> None:
        failure = self._failure("a", ValueError("bad"))
        data = failure.to_dict()
        assert data["channel_name"] == "orders"
        assert data["payload_type"] == "dict"
        assert data["error_type"] == "ValueError"
        assert data["error_message"] == "bad"
        assert data["phase"] == "dispatch"

    def test_handler_keeps_last_hundred(self) -> None:
        handler = ListenerErrorHandler("orders")
        for index in range(105):
            handler.handle(self._failure(f"listener-{index}", ValueError("x")))

        recent = handler.recent_failures
        assert len(recent) == 100
        assert recent[0].listener_name == "listener-5"
        assert handler.stats.total_errors == 105

    def test_handler_clear(self) -> None:
        handler = ListenerErrorHandler("orders")
        handler.handle(self._failure("a", ValueError("x")))
        handler.clear()
        assert handler.stats.total_errors == 0
        assert handler.recent_failures == []

"""
Unit tests for payload history.

Tests for:
- HistoryBuffer modes (disabled, unbounded, bounded)
- FIFO eviction
- Channel history accessors and replay on subscription
"""

from typing import Any

import pytest

from eventchannel import EmptyHistoryError, EventChannel, HistoryBuffer, HistoryMode
from eventchannel.testing import PayloadRecorder

# =============================================================================
# HistoryBuffer
# =============================================================================


class TestHistoryBuffer:
    """Tests for the HistoryBuffer data structure."""

    def test_negative_limit_disables_history(self) -> None:
        buffer = HistoryBuffer[int](limit=-1)
        assert buffer.mode is HistoryMode.DISABLED
        assert buffer.enabled is False
        assert buffer.append(1) is False
        assert len(buffer) == 0

    def test_zero_limit_is_unbounded(self) -> None:
        buffer = HistoryBuffer[int](limit=0)
        for value in range(500):
            buffer.append(value)
        assert buffer.mode is HistoryMode.UNBOUNDED
        assert len(buffer) == 500
        assert buffer.snapshot() == tuple(range(500))

    @pytest.mark.parametrize("limit", [1, 2, 5])
    def test_bounded_keeps_last_entries(self, limit: int) -> None:
        buffer = HistoryBuffer[int](limit=limit)
        for value in range(10):
            buffer.append(value)
        assert buffer.mode is HistoryMode.BOUNDED
        assert len(buffer) == limit
        assert buffer.snapshot() == tuple(range(10 - limit, 10))

    def test_snapshot_is_a_copy(self) -> None:
        buffer = HistoryBuffer[str](limit=0)
        buffer.append("a")
        snapshot = buffer.snapshot()
        buffer.append("b")
        assert snapshot == ("a",)

    def test_last_raises_when_empty(self) -> None:
        buffer = HistoryBuffer[str](limit=0, owner="names")
        with pytest.raises(EmptyHistoryError) as exc_info:
            _ = buffer.last
        assert exc_info.value.channel_name == "names"

    def test_clear(self) -> None:
        buffer = HistoryBuffer[str](limit=0)
        buffer.append("a")
        buffer.clear()
        assert len(buffer) == 0


# =============================================================================
# Channel history
# =============================================================================


class TestChannelHistory:
    """Tests for history recorded by fire()."""

    @pytest.mark.parametrize("limit,fired", [(1, 5), (3, 2), (3, 3), (4, 10)])
    def test_bounded_history_holds_last_n_in_order(self, limit: int, fired: int) -> None:
        channel = EventChannel[int](history_limit=limit, enable_tracing=False)
        for value in range(fired):
            channel.fire(value)
        assert channel.history_length == min(fired, limit)
        assert channel.history == tuple(range(fired))[-limit:]

    def test_unbounded_history_keeps_everything(self, history_channel: EventChannel[Any]) -> None:
        for value in ["a", "b", "c", "d"]:
            history_channel.fire(value)
        assert history_channel.history == ("a", "b", "c", "d")

    def test_disabled_history_stays_empty(self, channel: EventChannel[Any]) -> None:
        channel.fire("a", use_history=True)
        channel.fire("b")
        assert channel.history == ()
        assert channel.history_length == 0
        assert channel.history_mode is HistoryMode.DISABLED

    def test_use_history_false_skips_recording(self, history_channel: EventChannel[Any]) -> None:
        history_channel.fire("kept")
        history_channel.fire("skipped", use_history=False)
        assert history_channel.history == ("kept",)

    def test_last_payload(self, history_channel: EventChannel[Any]) -> None:
        history_channel.fire("first")
        history_channel.fire("second")
        assert history_channel.last_payload == "second"

    def test_last_payload_raises_on_empty_history(self, history_channel: EventChannel[Any]) -> None:
        with pytest.raises(EmptyHistoryError):
            _ = history_channel.last_payload

    def test_last_payload_raises_when_history_disabled(self, channel: EventChannel[Any]) -> None:
        channel.fire("x")
        with pytest.raises(EmptyHistoryError):
            _ = channel.last_payload

    def test_last_payload_or_none(self, history_channel: EventChannel[Any]) -> None:
        assert history_channel.last_payload_or_none() is None
        history_channel.fire(1)
        assert history_channel.last_payload_or_none() == 1

    def test_history_snapshot_cannot_mutate_channel(
        self, history_channel: EventChannel[Any]
    ) -> None:
        history_channel.fire("a")
        snapshot = history_channel.history
        assert isinstance(snapshot, tuple)
        history_channel.fire("b")
        assert snapshot == ("a",)

    def test_clear_history_keeps_listeners(
        self, history_channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        history_channel.add_listener(recorder)
        history_channel.fire("a")
        history_channel.clear_history()

        assert history_channel.history_length == 0
        assert history_channel.listeners_count == 1
        history_channel.fire("b")
        recorder.assert_received("a", "b")


# =============================================================================
# History replay
# =============================================================================


class TestHistoryReplay:
    """Tests for replay of history to newly added listeners."""

    def test_replay_is_synchronous_and_ordered(self, history_channel: EventChannel[Any]) -> None:
        history_channel.fire("a")
        history_channel.fire("b")

        received: list[str] = []
        history_channel.add_listener(received.append)

        # Replay happened before add_listener returned
        assert received == ["a", "b"]

    def test_replay_skipped_with_use_history_false(
        self, history_channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        history_channel.fire("a")
        history_channel.add_listener(recorder, use_history=False)
        recorder.assert_not_received()

    def test_no_replay_when_history_disabled(
        self, channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        channel.fire("a")
        channel.add_listener(recorder)
        recorder.assert_not_received()

    def test_replay_then_live_delivery(
        self, history_channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        history_channel.fire("payload 1")
        history_channel.fire("payload 2")
        history_channel.add_listener(recorder)
        history_channel.fire("payload 3")
        recorder.assert_received("payload 1", "payload 2", "payload 3")

    def test_replay_uses_snapshot_at_subscription(self, history_channel: EventChannel[Any]) -> None:
        history_channel.fire("a")
        history_channel.fire("b")
        received: list[str] = []

        def listener(payload: str) -> None:
            received.append(payload)
            if payload == "a":
                # Fired during replay: delivered through dispatch, not replay
                history_channel.fire("c")

        history_channel.add_listener(listener)
        assert received == ["a", "c", "b"]
        assert history_channel.history == ("a", "b", "c")

    def test_bounded_replay(
        self, bounded_channel: EventChannel[Any], recorder: PayloadRecorder[Any]
    ) -> None:
        for value in range(6):
            bounded_channel.fire(value)
        bounded_channel.add_listener(recorder)
        recorder.assert_received(3, 4, 5)

    def test_replay_stops_when_listener_removes_itself(
        self, history_channel: EventChannel[Any]
    ) -> None:
        for value in range(5):
            history_channel.fire(value)
        received: list[int] = []

        def take_two(payload: int) -> None:
            received.append(payload)
            if len(received) == 2:
                history_channel.remove_listener(take_two)

        history_channel.add_listener(take_two)
        assert received == [0, 1]
        assert history_channel.listeners_count == 0

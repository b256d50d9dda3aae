"""
Unit tests for the PayloadRecorder testing utility.
"""

import pytest

from eventchannel.testing import PayloadRecorder


class TestPayloadRecorder:
    """Tests for PayloadRecorder."""

    def test_records_in_order(self, channel, recorder):
        channel.add_listener(recorder)
        channel.fire(1)
        channel.fire(2)
        assert recorder.payloads == [1, 2]
        assert recorder.count == 2
        assert recorder.last == 2

    def test_assert_received_mismatch(self):
        recorder = PayloadRecorder(name="names")
        recorder("John")
        with pytest.raises(AssertionError, match="names expected payloads"):
            recorder.assert_received("Doe")

    def test_assert_received_is_exact(self):
        """Extra payloads fail the assertion."""
        recorder = PayloadRecorder()
        recorder("a")
        recorder("b")
        with pytest.raises(AssertionError):
            recorder.assert_received("a")

    def test_assert_not_received(self):
        recorder = PayloadRecorder()
        recorder.assert_not_received()
        recorder(None)
        with pytest.raises(AssertionError):
            recorder.assert_not_received()

    def test_last_when_empty(self):
        with pytest.raises(AssertionError, match="received no payloads"):
            _ = PayloadRecorder().last

    def test_clear(self):
        recorder = PayloadRecorder()
        recorder("a")
        recorder.clear()
        assert recorder.count == 0

"""
Test utilities for eventchannel.

Components:
    PayloadRecorder: Listener that records payloads and asserts on them

Example:
    >>> from eventchannel.testing import PayloadRecorder
    >>>
    >>> recorder = PayloadRecorder()
    >>> channel.add_listener(recorder)
    >>> channel.fire("hello")
    >>> recorder.assert_received("hello")

Note:
    This module is intended for test code only. It should not
    be imported in production code paths.
"""

from eventchannel.testing.recorder import PayloadRecorder

__all__ = ["PayloadRecorder"]

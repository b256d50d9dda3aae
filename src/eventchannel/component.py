"""
Convenience base class owning a single event channel.

Subclass EventComponent to give an object its own event stream with short
method names (on, off, fire, notify). Every call is forwarded unchanged to
the owned channel; the component keeps no queue, history, or listeners of its own.

Example:
    >>> class Session(EventComponent[SessionEvent]):
    ...     def __init__(self) -> None:
    ...         super().__init__(name="session_event")
    ...
    ...     def start(self) -> None:
    ...         self.fire(SessionStarted())
    >>>
    >>> session = Session()
    >>> session.on_type(SessionStarted, lambda _: print("session started"))
    >>> session.start()
    session started
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any, Generic

from eventchannel.channel import EventChannel
from eventchannel.listeners.registry import Subscription
from eventchannel.types import Delay, P, R


class EventComponent(Generic[P]):
    """
    Object that owns exactly one EventChannel.

    Attributes:
        event: The owned channel
    """

    def __init__(self, name: str = "event", history_limit: int = -1, **channel_options: Any) -> None:
        """
        Create the owned channel.

        Args:
            name: Channel name
            history_limit: Channel history limit (see EventChannel)
            **channel_options: Further EventChannel keyword options
        """
        self.event: EventChannel[P] = EventChannel(
            name=name, history_limit=history_limit, **channel_options
        )

    @property
    def last_payload(self) -> P:
        """Latest recorded payload. Raises EmptyHistoryError when there is none."""
        return self.event.last_payload

    def notify(self, delay: Delay | None = None) -> asyncio.Task[None] | None:
        """Fire a None payload without history. See EventChannel.notify."""
        return self.event.notify(delay)

    def fire(
        self,
        payload: P,
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> asyncio.Task[None] | None:
        """Fire ``payload``. See EventChannel.fire."""
        return self.event.fire(payload, use_history=use_history, delay=delay, silent=silent)

    def on(
        self,
        listener: Callable[[P], Any],
        use_history: bool = True,
        filter: Callable[[P], bool] | None = None,
    ) -> Subscription:
        """
        Add ``listener``, filtered by ``filter`` when given.

        See EventChannel.add_listener and EventChannel.add_filtered_listener.
        """
        if filter is None:
            return self.event.add_listener(listener, use_history=use_history)
        return self.event.add_filtered_listener(listener, filter, use_history=use_history)

    def on_type(
        self,
        variant: type,
        listener: Callable[[Any], Any],
        use_history: bool = True,
        use_runtime_type: bool = False,
        excluded_types: Iterable[type | str] = (),
    ) -> Subscription:
        """Add a typed listener. See EventChannel.add_typed_listener."""
        return self.event.add_typed_listener(
            variant,
            listener,
            use_history=use_history,
            use_runtime_type=use_runtime_type,
            excluded_types=excluded_types,
        )

    def off(self, listener: Any) -> bool:
        """Remove ``listener``. See EventChannel.remove_listener."""
        return self.event.remove_listener(listener)

    def link_to(
        self,
        event: EventChannel[R],
        converter: Callable[[P], R],
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> Subscription:
        """Forward converted payloads to ``event``. See EventChannel.link_to."""
        return self.event.link_to(
            event,
            converter,
            use_history=use_history,
            delay=delay,
            silent=silent,
        )

    def listen_to(
        self,
        event: EventChannel[P],
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> Subscription:
        """Re-fire payloads of ``event`` on the owned channel. See EventChannel.listen_to."""
        return self.event.listen_to(
            event,
            use_history=use_history,
            delay=delay,
            silent=silent,
        )


__all__ = ["EventComponent"]

"""
Ordered listener registry.

Each registration is a Subscription with its own identifier. Removal is a
lookup by identifier, so wrapped (filtered or typed) listeners never have to
be compared by closure identity.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from eventchannel.listeners.adapter import ListenerAdapter
from eventchannel.listeners.matching import PayloadMatcher


class ListenerKind(Enum):
    """How a subscription selects payloads."""

    PLAIN = "plain"
    FILTERED = "filtered"
    TYPED = "typed"


class Subscription:
    """
    One listener registration.

    A subscription is its own disposer: calling it (or ``dispose()``)
    removes exactly this registration. Disposing twice is a no-op.

    Example:
        >>> subscription = channel.add_listener(print)
        >>> subscription.active
        True
        >>> subscription()
        >>> subscription.active
        False
    """

    def __init__(
        self,
        adapter: ListenerAdapter,
        *,
        kind: ListenerKind = ListenerKind.PLAIN,
        matcher: PayloadMatcher | None = None,
        on_dispose: Callable[[Subscription], Any] | None = None,
    ) -> None:
        self._id = uuid4()
        self._adapter = adapter
        self._kind = kind
        self._matcher = matcher
        self._on_dispose = on_dispose
        self._active = True

    @property
    def id(self) -> UUID:
        return self._id

    @property
    def listener(self) -> Any:
        """The original listener passed at registration."""
        return self._adapter.original

    @property
    def name(self) -> str:
        return self._adapter.name

    @property
    def kind(self) -> ListenerKind:
        return self._kind

    @property
    def matcher(self) -> PayloadMatcher | None:
        return self._matcher

    @property
    def active(self) -> bool:
        return self._active

    def accepts(self, payload: Any) -> bool:
        """Check whether this subscription's listener wants ``payload``."""
        return self._matcher is None or self._matcher(payload)

    def deliver(self, payload: Any) -> Any:
        """Invoke the listener and return its result."""
        return self._adapter(payload)

    def wraps(self, listener: Any) -> bool:
        return self._adapter.matches(listener)

    def dispose(self) -> None:
        """Remove this registration. Idempotent."""
        if not self._active:
            return
        if self._on_dispose is not None:
            self._on_dispose(self)
        self._active = False

    def _deactivate(self) -> None:
        self._active = False

    def __call__(self) -> None:
        self.dispose()

    def __repr__(self) -> str:
        state = "active" if self._active else "disposed"
        return f"Subscription({self._adapter.name}, kind={self._kind.value}, {state})"


class ListenerRegistry:
    """
    Ordered collection of subscriptions.

    Order of registration is the order of delivery. The same listener may be
    registered several times; each registration is delivered to separately.

    Thread-Safety:
        All operations take the registry lock. A channel shares its own lock
        with the registry so queue, history and registry are guarded together.
    """

    def __init__(self, lock: threading.RLock | None = None) -> None:
        self._subscriptions: list[Subscription] = []
        self._lock = lock if lock is not None else threading.RLock()

    def add(self, subscription: Subscription) -> Subscription:
        """Append a subscription to the end of the registry."""
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def remove(self, subscription: Subscription) -> bool:
        """
        Remove a subscription by identifier.

        Returns:
            True if it was registered, False otherwise
        """
        return self.remove_by_id(subscription.id) is not None

    def remove_by_id(self, subscription_id: UUID) -> Subscription | None:
        """Remove the subscription with ``subscription_id`` and return it."""
        with self._lock:
            for index, subscription in enumerate(self._subscriptions):
                if subscription.id == subscription_id:
                    del self._subscriptions[index]
                    subscription._deactivate()
                    return subscription
        return None

    def find_listener(self, listener: Any) -> Subscription | None:
        """Find the first subscription wrapping ``listener``."""
        with self._lock:
            for subscription in self._subscriptions:
                if subscription.wraps(listener):
                    return subscription
        return None

    def clear(self, predicate: Callable[[Any], bool] | None = None) -> list[Subscription]:
        """
        Remove subscriptions.

        Args:
            predicate: Called with each original listener. When given, only
                subscriptions whose listener satisfies it are removed.
                When omitted, every subscription is removed.

        Returns:
            The removed subscriptions, in registration order
        """
        if predicate is not None and not callable(predicate):
            raise TypeError(f"clear() predicate must be callable, got {type(predicate)}")
        with self._lock:
            if predicate is None:
                removed = list(self._subscriptions)
                self._subscriptions.clear()
            else:
                removed = [s for s in self._subscriptions if predicate(s.listener)]
                self._subscriptions = [s for s in self._subscriptions if s not in removed]
            for subscription in removed:
                subscription._deactivate()
        return removed

    def snapshot(self) -> tuple[Subscription, ...]:
        """Current subscriptions in delivery order."""
        with self._lock:
            return tuple(self._subscriptions)

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def __repr__(self) -> str:
        return f"ListenerRegistry(count={len(self)})"


__all__ = [
    "ListenerKind",
    "ListenerRegistry",
    "Subscription",
]

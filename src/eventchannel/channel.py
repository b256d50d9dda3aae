"""
Event channel implementation.

This module provides EventChannel, a single-instance publish/subscribe
primitive: fired payloads are queued and drained to listeners in submission
order, optionally recorded in a bounded or unbounded history, and replayed
to listeners that opt in when they subscribe.

Delivery happens in-process and synchronously, from the call to fire().
The only suspension point is an optional delay before a fire is enqueued.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic
from uuid import UUID

from eventchannel.config import ChannelConfig, HistoryMode, accepted_payload_classes
from eventchannel.error_handling import (
    DeliveryPhase,
    ListenerErrorCallback,
    ListenerErrorHandler,
    ListenerErrorStats,
    ListenerFailure,
)
from eventchannel.exceptions import InvalidPreconditionError, PayloadTypeError
from eventchannel.history import HistoryBuffer
from eventchannel.listeners.adapter import ListenerAdapter
from eventchannel.listeners.matching import PayloadFilter, PayloadMatcher, VariantMatcher
from eventchannel.listeners.registry import ListenerKind, ListenerRegistry, Subscription
from eventchannel.observability import Tracer, create_tracer
from eventchannel.observability.attributes import (
    ATTR_CHANNEL_NAME,
    ATTR_ERROR_TYPE,
    ATTR_HISTORY_LENGTH,
    ATTR_HISTORY_MODE,
    ATTR_LISTENER_COUNT,
    ATTR_LISTENER_KIND,
    ATTR_LISTENER_NAME,
    ATTR_LISTENER_SUCCESS,
    ATTR_PAYLOAD_TYPE,
    ATTR_QUEUE_DEPTH,
    ATTR_SUBSCRIPTION_ID,
    SPAN_DISPATCH,
    SPAN_HANDLE,
    SPAN_REPLAY,
)
from eventchannel.types import Delay, P, R, delay_seconds
from eventchannel.variants.registry import VariantRegistry, default_registry

logger = logging.getLogger(__name__)


class DispatchState(Enum):
    """Reentrancy guard of a channel."""

    IDLE = "idle"
    DISPATCHING = "dispatching"


@dataclass(frozen=True)
class QueuedPayload(Generic[P]):
    """A payload waiting in the pending queue."""

    payload: P
    silent: bool = False


class EventChannel(Generic[P]):
    """
    Typed event channel with history and a reentrancy-safe dispatch queue.

    Features:
    - FIFO delivery in registration order
    - Reentrant fire() from listeners is queued, never recursed
    - Disabled, unbounded or bounded payload history with replay
    - Plain, filtered and typed (variant-matching) listeners
    - Delayed fires on the running asyncio loop
    - Chaining to other channels (link_to / listen_to)
    - One-shot futures for the next payload (on_next)
    - Error isolation (listener failures don't stop other listeners)
    - Optional OpenTelemetry tracing

    Example:
        >>> name = EventChannel[str](name="name", history_limit=1)
        >>> name.fire("John")
        >>> name.add_listener(lambda payload: print(f"name is {payload}"))
        name is John
        >>> name.fire("Doe")
        name is Doe

    Thread Safety:
        Queue, history and registry are guarded by one re-entrant lock and the
        dispatch state flag. A fire from another thread while a drain is
        running is queued and delivered by that drain. Listeners run outside
        the lock.
    """

    def __init__(
        self,
        name: str = "event",
        history_limit: int = -1,
        *,
        payload_type: Any = None,
        enable_tracing: bool = True,
        isolate_listener_errors: bool = True,
        tracer: Tracer | None = None,
        variant_registry: VariantRegistry | None = None,
    ) -> None:
        """
        Initialize the channel.

        Args:
            name: Diagnostic label of the channel
            history_limit: negative disables history, 0 keeps every payload,
                a positive value keeps that many most recent payloads
            payload_type: Optional runtime payload type. Mistyped payloads are
                rejected and notify() is only allowed if it admits None.
            enable_tracing: If True, emit OpenTelemetry spans. Ignored if
                tracer is explicitly provided.
            isolate_listener_errors: If True (default), a failing listener is
                reported and delivery continues. If False, the failure
                propagates to the caller of fire() or add_listener().
            tracer: Optional custom Tracer instance
            variant_registry: Registry used by typed listeners
                (defaults to the module-level registry)
        """
        config = ChannelConfig(
            name=name,
            history_limit=history_limit,
            payload_type=payload_type,
            enable_tracing=enable_tracing,
            isolate_listener_errors=isolate_listener_errors,
        )
        self._setup(config, tracer, variant_registry)

    @classmethod
    def from_config(
        cls,
        config: ChannelConfig,
        *,
        tracer: Tracer | None = None,
        variant_registry: VariantRegistry | None = None,
    ) -> EventChannel[Any]:
        """
        Create a channel from an existing configuration.

        Example:
            >>> config = ChannelConfig(name="orders", history_limit=0)
            >>> channel = EventChannel.from_config(config)
        """
        channel = cls.__new__(cls)
        channel._setup(config, tracer, variant_registry)
        return channel

    def _setup(
        self,
        config: ChannelConfig,
        tracer: Tracer | None,
        variant_registry: VariantRegistry | None,
    ) -> None:
        self._config = config
        # One lock guards the queue/history/registry triple and the state flag
        self._lock = threading.RLock()
        self._history: HistoryBuffer[P] = HistoryBuffer(config.history_limit, config.name)
        self._registry = ListenerRegistry(self._lock)
        self._queue: deque[QueuedPayload[P]] = deque()
        self._state = DispatchState.IDLE
        self._payload_classes = accepted_payload_classes(config.payload_type)
        self._variant_registry = variant_registry or default_registry
        self._errors = ListenerErrorHandler(config.name)
        # Delayed fires and coroutines returned by async listeners
        self._background_tasks: set[asyncio.Task[Any]] = set()
        self._stats = {
            "payloads_fired": 0,
            "payloads_delivered": 0,
            "payloads_silenced": 0,
            "listeners_invoked": 0,
            "listener_errors": 0,
            "replays": 0,
            "delayed_fires_scheduled": 0,
            "delayed_fires_completed": 0,
        }

        self._tracer = tracer or create_tracer(__name__, config.enable_tracing)

    # =========================================================================
    # Accessors
    # =========================================================================

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def config(self) -> ChannelConfig:
        return self._config

    @property
    def history_limit(self) -> int:
        return self._config.history_limit

    @property
    def history_mode(self) -> HistoryMode:
        return self._history.mode

    @property
    def payload_type(self) -> Any:
        return self._config.payload_type

    @property
    def history(self) -> tuple[P, ...]:
        """Snapshot of the recorded payloads, oldest first."""
        with self._lock:
            return self._history.snapshot()

    @property
    def history_length(self) -> int:
        with self._lock:
            return len(self._history)

    @property
    def listeners_count(self) -> int:
        return len(self._registry)

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        """Current subscriptions in delivery order."""
        return self._registry.snapshot()

    @property
    def last_payload(self) -> P:
        """
        Most recently recorded payload.

        Raises:
            EmptyHistoryError: If history is empty or disabled
        """
        with self._lock:
            return self._history.last

    def last_payload_or_none(self) -> P | None:
        """Most recently recorded payload, or None when history is empty."""
        with self._lock:
            if not len(self._history):
                return None
            return self._history.last

    @property
    def dispatch_state(self) -> DispatchState:
        return self._state

    @property
    def is_dispatching(self) -> bool:
        return self._state is DispatchState.DISPATCHING

    @property
    def queue_length(self) -> int:
        """Number of payloads waiting to be delivered."""
        with self._lock:
            return len(self._queue)

    @property
    def pending_task_count(self) -> int:
        """Number of delayed fires and async listener tasks still running."""
        return len(self._background_tasks)

    @property
    def error_stats(self) -> ListenerErrorStats:
        return self._errors.stats

    @property
    def recent_failures(self) -> list[ListenerFailure]:
        return self._errors.recent_failures

    def get_stats(self) -> dict[str, int]:
        """
        Get statistics about channel operation.

        Returns:
            Dictionary with counts:
            - payloads_fired: Payloads enqueued (delayed fires count once resumed)
            - payloads_delivered: Payloads delivered to the listener set
            - payloads_silenced: Silent payloads drained without delivery
            - listeners_invoked: Successful listener invocations
            - listener_errors: Failed listener invocations
            - replays: History replays performed on subscription
            - delayed_fires_scheduled: Delayed fires started
            - delayed_fires_completed: Delayed fires finished
        """
        with self._lock:
            return dict(self._stats)

    # =========================================================================
    # Firing
    # =========================================================================

    def fire(
        self,
        payload: P,
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> asyncio.Task[None] | None:
        """
        Fire ``payload`` to all listeners.

        Without a delay the payload is queued, recorded and drained before
        fire() returns. Reentrant calls from a listener are queued and
        delivered after the current payload by the drain already running.

        Args:
            payload: The payload to deliver
            use_history: If True and history is enabled, record the payload
            delay: Seconds or timedelta to wait before enqueueing. Requires a
                running asyncio event loop.
            silent: If True, queue and record the payload without invoking
                listeners. Later history replays still include it.

        Returns:
            None for an immediate fire, the scheduled task for a delayed fire

        Raises:
            PayloadTypeError: If the payload does not match payload_type
            InvalidPreconditionError: If delayed without a running event loop
        """
        self._check_payload(payload)
        if delay is None:
            self._commit(payload, use_history, silent)
            return None

        seconds = delay_seconds(delay)
        loop = self._running_loop("fire() with a delay")
        task = loop.create_task(self._fire_later(payload, seconds, use_history, silent))
        task.add_done_callback(self._on_background_task_done)
        self._background_tasks.add(task)
        self._count("delayed_fires_scheduled")
        logger.debug(
            f"Scheduled delayed fire on channel '{self.name}' in {seconds}s",
            extra={"channel": self.name, "delay": seconds},
        )
        return task

    def notify(self, delay: Delay | None = None) -> asyncio.Task[None] | None:
        """
        Fire a None payload without recording it in history.

        Only valid when the channel's payload type admits None (untyped
        channels, ``Any``, ``object`` or an optional type).

        Raises:
            InvalidPreconditionError: If the payload type cannot represent None
        """
        if not self._config.admits_none:
            raise InvalidPreconditionError(
                f"notify() requires a payload type that admits None; "
                f"channel '{self.name}' carries {self._config.payload_type!r}"
            )
        return self.fire(None, use_history=False, delay=delay)  # type: ignore[arg-type]

    async def _fire_later(
        self,
        payload: P,
        seconds: float,
        use_history: bool,
        silent: bool,
    ) -> None:
        await asyncio.sleep(seconds)
        self._commit(payload, use_history, silent)
        self._count("delayed_fires_completed")

    def _count(self, key: str) -> None:
        with self._lock:
            self._stats[key] += 1

    def _commit(self, payload: P, use_history: bool, silent: bool) -> None:
        """Enqueue, record, then drain."""
        with self._lock:
            self._queue.append(QueuedPayload(payload, silent))
            if use_history:
                # Bounded buffers evict the oldest entry themselves
                self._history.append(payload)
            self._count("payloads_fired")
        self._drain()

    def _drain(self) -> None:
        """
        Deliver queued payloads until the queue is empty.

        Returns immediately if a drain is already running; that drain loops
        until the queue is empty and picks up whatever was just enqueued.
        """
        with self._lock:
            if self._state is DispatchState.DISPATCHING:
                return
            self._state = DispatchState.DISPATCHING

        try:
            while True:
                with self._lock:
                    if not self._queue:
                        self._state = DispatchState.IDLE
                        return
                    item = self._queue.popleft()
                    remaining = len(self._queue)

                if item.silent:
                    self._count("payloads_silenced")
                    continue
                self._dispatch(item.payload, remaining)
        except BaseException:
            with self._lock:
                self._state = DispatchState.IDLE
            raise

    def _dispatch(self, payload: P, remaining: int) -> None:
        """
        Deliver one payload to the listener set as it is right now.

        Listeners added during delivery wait for the next payload; listeners
        removed during delivery are skipped.
        """
        subscriptions = self._registry.snapshot()
        payload_type = type(payload).__name__

        logger.debug(
            f"Dispatching {payload_type} on channel '{self.name}' to "
            f"{len(subscriptions)} listener(s)",
            extra={
                "channel": self.name,
                "payload_type": payload_type,
                "listener_count": len(subscriptions),
                "queue_depth": remaining,
            },
        )

        with self._tracer.span(
            SPAN_DISPATCH,
            {
                ATTR_CHANNEL_NAME: self.name,
                ATTR_PAYLOAD_TYPE: payload_type,
                ATTR_LISTENER_COUNT: len(subscriptions),
                ATTR_QUEUE_DEPTH: remaining,
            },
        ):
            for subscription in subscriptions:
                if subscription.active:
                    self._invoke(subscription, payload, DeliveryPhase.DISPATCH)

        self._count("payloads_delivered")

    def _invoke(self, subscription: Subscription, payload: P, phase: DeliveryPhase) -> None:
        """Invoke one listener if it accepts the payload, isolating failures."""
        try:
            if not subscription.accepts(payload):
                return
        except Exception as e:
            self._report_failure(subscription, payload, e, phase)
            if not self._config.isolate_listener_errors:
                raise
            return

        with self._tracer.span(
            SPAN_HANDLE,
            {
                ATTR_CHANNEL_NAME: self.name,
                ATTR_PAYLOAD_TYPE: type(payload).__name__,
                ATTR_LISTENER_NAME: subscription.name,
                ATTR_LISTENER_KIND: subscription.kind.value,
                ATTR_SUBSCRIPTION_ID: str(subscription.id),
            },
        ) as span:
            try:
                result = subscription.deliver(payload)
                if asyncio.iscoroutine(result):
                    self._schedule_listener_coroutine(subscription, payload, phase, result)
                if span:
                    span.set_attribute(ATTR_LISTENER_SUCCESS, True)
                self._count("listeners_invoked")
            except Exception as e:
                if span:
                    span.set_attribute(ATTR_LISTENER_SUCCESS, False)
                    span.set_attribute(ATTR_ERROR_TYPE, type(e).__name__)
                    span.record_exception(e)
                self._report_failure(subscription, payload, e, phase)
                if not self._config.isolate_listener_errors:
                    raise

    def _report_failure(
        self,
        subscription: Subscription,
        payload: P,
        error: BaseException,
        phase: DeliveryPhase,
    ) -> None:
        self._count("listener_errors")
        self._errors.handle(
            ListenerFailure(
                channel_name=self.name,
                listener_name=subscription.name,
                subscription_id=subscription.id,
                payload=payload,
                error=error,
                phase=phase,
            )
        )

    def _schedule_listener_coroutine(
        self,
        subscription: Subscription,
        payload: P,
        phase: DeliveryPhase,
        coro: Any,
    ) -> None:
        """Run the coroutine returned by an async listener as a background task."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise InvalidPreconditionError(
                f"Listener {subscription.name} returned a coroutine but no event loop is running"
            ) from None

        task = loop.create_task(coro)
        self._background_tasks.add(task)

        def on_done(finished: asyncio.Task[Any]) -> None:
            self._background_tasks.discard(finished)
            if finished.cancelled():
                return
            exc = finished.exception()
            if exc is not None:
                self._report_failure(subscription, payload, exc, phase)

        task.add_done_callback(on_done)

    def _on_background_task_done(self, task: asyncio.Task[Any]) -> None:
        """Callback when a delayed fire completes."""
        self._background_tasks.discard(task)

        if not task.cancelled():
            exc = task.exception()
            if exc:
                logger.error(
                    f"Delayed fire on channel '{self.name}' failed: {exc}",
                    exc_info=exc,
                    extra={"channel": self.name},
                )

    # =========================================================================
    # Listener registration
    # =========================================================================

    def add_listener(self, listener: Callable[[P], Any], use_history: bool = True) -> Subscription:
        """
        Add ``listener`` to the end of the listener list.

        If history is enabled and ``use_history`` is True, the listener is
        called once per recorded payload, oldest first, before this method
        returns.

        Args:
            listener: Callable or object with a handle() method
            use_history: Replay recorded history to the new listener

        Returns:
            Subscription that removes exactly this registration when called
        """
        return self._subscribe(ListenerAdapter(listener), ListenerKind.PLAIN, None, use_history)

    def add_filtered_listener(
        self,
        listener: Callable[[P], Any],
        predicate: Callable[[P], bool],
        use_history: bool = True,
    ) -> Subscription:
        """
        Add a listener that is only called when ``predicate(payload)`` holds.

        History replay is filtered by the same predicate.

        Raises:
            TypeError: If listener or predicate is not callable
        """
        matcher = PayloadFilter(predicate)
        return self._subscribe(ListenerAdapter(listener), ListenerKind.FILTERED, matcher, use_history)

    def add_typed_listener(
        self,
        variant: type,
        listener: Callable[[Any], Any],
        use_history: bool = True,
        use_runtime_type: bool = False,
        excluded_types: Iterable[type | str] = (),
    ) -> Subscription:
        """
        Add a listener that is only called for payloads of ``variant``.

        Args:
            variant: Payload class to match
            listener: Callable or object with a handle() method
            use_history: Replay matching recorded payloads
            use_runtime_type: If True, match ``variant`` exactly and not its
                subclasses
            excluded_types: Variants (classes or tags) that are never
                delivered, even if they would otherwise match

        Example:
            >>> session.add_typed_listener(SessionEnded, on_end, use_runtime_type=True)
        """
        matcher = VariantMatcher(
            variant,
            exact=use_runtime_type,
            excluded_types=excluded_types,
            registry=self._variant_registry,
        )
        return self._subscribe(ListenerAdapter(listener), ListenerKind.TYPED, matcher, use_history)

    def _subscribe(
        self,
        adapter: ListenerAdapter,
        kind: ListenerKind,
        matcher: PayloadMatcher | None,
        use_history: bool,
    ) -> Subscription:
        subscription = Subscription(adapter, kind=kind, matcher=matcher, on_dispose=self._dispose)

        with self._lock:
            self._registry.add(subscription)
            replay = self._history.snapshot() if use_history and self._history.enabled else ()

        logger.info(
            f"Registered {kind.value} listener {adapter.name} on channel '{self.name}'",
            extra={
                "channel": self.name,
                "listener": adapter.name,
                "subscription_id": str(subscription.id),
                "replay_count": len(replay),
            },
        )

        if replay:
            try:
                self._replay(subscription, replay)
            except BaseException:
                # The caller never receives this subscription
                subscription.dispose()
                raise
        return subscription

    def _replay(self, subscription: Subscription, payloads: tuple[P, ...]) -> None:
        """Deliver a history snapshot to one new listener."""
        with self._tracer.span(
            SPAN_REPLAY,
            {
                ATTR_CHANNEL_NAME: self.name,
                ATTR_LISTENER_NAME: subscription.name,
                ATTR_HISTORY_MODE: self.history_mode.value,
                ATTR_HISTORY_LENGTH: len(payloads),
            },
        ):
            for payload in payloads:
                if not subscription.active:
                    break
                self._invoke(subscription, payload, DeliveryPhase.REPLAY)
        self._count("replays")

    def _dispose(self, subscription: Subscription) -> None:
        if self._registry.remove(subscription):
            logger.info(
                f"Unsubscribed listener {subscription.name} from channel '{self.name}'",
                extra={
                    "channel": self.name,
                    "listener": subscription.name,
                    "subscription_id": str(subscription.id),
                },
            )

    def remove_listener(self, listener: Any) -> bool:
        """
        Remove the first registration of ``listener``.

        Returns:
            True if the listener was found and removed, False otherwise
        """
        with self._lock:
            subscription = self._registry.find_listener(listener)
            if subscription is not None:
                self._registry.remove(subscription)

        if subscription is None:
            logger.debug(
                f"Listener {listener!r} not found on channel '{self.name}'",
                extra={"channel": self.name},
            )
            return False

        logger.info(
            f"Removed listener {subscription.name} from channel '{self.name}'",
            extra={
                "channel": self.name,
                "listener": subscription.name,
                "subscription_id": str(subscription.id),
            },
        )
        return True

    def remove_subscription(self, subscription_id: UUID) -> bool:
        """
        Remove a registration by subscription identifier.

        Returns:
            True if the subscription was found and removed, False otherwise
        """
        removed = self._registry.remove_by_id(subscription_id)
        if removed is not None:
            logger.info(
                f"Unsubscribed listener {removed.name} from channel '{self.name}'",
                extra={"channel": self.name, "subscription_id": str(subscription_id)},
            )
        return removed is not None

    def clear(self, predicate: Callable[[Any], bool] | None = None) -> int:
        """
        Remove listeners.

        Args:
            predicate: Called with each registered listener. When given, only
                listeners for which it returns True are removed. When omitted,
                all listeners are removed.

        Returns:
            Number of registrations removed
        """
        removed = self._registry.clear(predicate)
        logger.info(
            f"Cleared {len(removed)} listener(s) from channel '{self.name}'",
            extra={"channel": self.name, "removed": len(removed), "filtered": predicate is not None},
        )
        return len(removed)

    def clear_history(self) -> None:
        """Empty the history. Listeners and the pending queue are untouched."""
        with self._lock:
            self._history.clear()
        logger.debug(f"History cleared on channel '{self.name}'", extra={"channel": self.name})

    def on_listener_error(self, callback: ListenerErrorCallback) -> Callable[[], None]:
        """
        Register a callback invoked with every ListenerFailure.

        Returns:
            Function that unregisters the callback
        """
        return self._errors.on_error(callback)

    # =========================================================================
    # Chaining
    # =========================================================================

    def link_to(
        self,
        target: EventChannel[R],
        converter: Callable[[P], R],
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> Subscription:
        """
        Forward converted payloads to another channel.

        Each payload delivered on this channel is passed through
        ``converter`` and fired on ``target`` with the given options.
        Recorded history of this channel is forwarded too.

        Note:
            Cycles between channels (a.link_to(b) and b.link_to(a)) recurse
            without bound; the reentrancy guard only applies per channel.

        Returns:
            The subscription registered on this channel
        """
        if not callable(converter):
            raise TypeError(f"converter must be callable, got {type(converter)}")

        def forward(payload: P) -> None:
            target.fire(converter(payload), use_history=use_history, delay=delay, silent=silent)

        forward.__qualname__ = f"link_to[{self.name}->{target.name}]"
        return self.add_listener(forward)

    def listen_to(
        self,
        source: EventChannel[P],
        use_history: bool = True,
        delay: Delay | None = None,
        silent: bool = False,
    ) -> Subscription:
        """
        Re-fire every payload of ``source`` on this channel.

        Returns:
            The subscription registered on ``source``
        """

        def relay(payload: P) -> None:
            self.fire(payload, use_history=use_history, delay=delay, silent=silent)

        relay.__qualname__ = f"listen_to[{source.name}->{self.name}]"
        return source.add_listener(relay)

    # =========================================================================
    # Awaiting
    # =========================================================================

    def on_next(self, ignore_count: int = 0) -> asyncio.Future[P]:
        """
        Return a future resolved by a future fire.

        The first ``ignore_count`` delivered payloads are skipped. History is
        not replayed. The temporary listener is removed once the future
        resolves or is cancelled; a future that is never resolved keeps it
        registered.

        Example:
            >>> waiter = name.on_next(1)
            >>> name.fire("Doe")
            >>> name.fire("John Doe")
            >>> await waiter
            'John Doe'

        Raises:
            ValueError: If ignore_count is negative
            InvalidPreconditionError: If no event loop is running
        """
        if ignore_count < 0:
            raise ValueError(f"ignore_count must be non-negative, got {ignore_count}")
        loop = self._running_loop("on_next()")
        future: asyncio.Future[P] = loop.create_future()
        remaining = ignore_count

        def resolve_next(payload: P) -> None:
            nonlocal remaining
            if future.done():
                return
            if remaining <= 0:
                future.set_result(payload)
                subscription.dispose()
            else:
                remaining -= 1

        resolve_next.__qualname__ = f"on_next[{self.name}]"
        subscription = self.add_listener(resolve_next, use_history=False)
        future.add_done_callback(lambda _: subscription.dispose())
        return future

    async def wait_for_pending(self, timeout: float = 30.0) -> None:
        """
        Wait for delayed fires and async listener tasks to complete.

        Args:
            timeout: Maximum time to wait in seconds. Tasks still running
                afterwards are cancelled.
        """
        pending = list(self._background_tasks)
        if not pending:
            return

        logger.info(
            f"Waiting for {len(pending)} pending task(s) on channel '{self.name}'",
            extra={"channel": self.name, "pending_tasks": len(pending)},
        )
        _, remaining = await asyncio.wait(
            pending,
            timeout=timeout,
            return_when=asyncio.ALL_COMPLETED,
        )
        if remaining:
            logger.warning(
                f"Channel '{self.name}': {len(remaining)} task(s) did not complete within timeout",
                extra={"channel": self.name, "remaining_tasks": len(remaining)},
            )
            for task in remaining:
                task.cancel()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_payload(self, payload: Any) -> None:
        if self._payload_classes is not None and not isinstance(payload, self._payload_classes):
            raise PayloadTypeError(self.name, self._config.payload_type, type(payload))

    @staticmethod
    def _running_loop(operation: str) -> asyncio.AbstractEventLoop:
        try:
            return asyncio.get_running_loop()
        except RuntimeError:
            raise InvalidPreconditionError(
                f"{operation} requires a running asyncio event loop"
            ) from None

    def __repr__(self) -> str:
        return (
            f"EventChannel(name={self.name!r}, history_limit={self.history_limit}, "
            f"listeners={self.listeners_count}, history={self.history_length})"
        )


__all__ = [
    "DispatchState",
    "EventChannel",
    "QueuedPayload",
]

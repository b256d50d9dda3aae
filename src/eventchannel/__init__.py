"""
eventchannel - In-process typed event channels for Python.

This library provides:
- EventChannel: publish/subscribe with a reentrancy-safe dispatch queue
- Disabled, unbounded or bounded payload history with replay on subscribe
- Plain, filtered and typed (variant-matching) listeners
- Delayed fires and one-shot futures on asyncio
- Channel chaining (link_to / listen_to)
- EventComponent: base class for objects owning a single channel
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eventchannel")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

from eventchannel.channel import DispatchState, EventChannel, QueuedPayload
from eventchannel.component import EventComponent
from eventchannel.config import ChannelConfig, HistoryMode
from eventchannel.error_handling import (
    DeliveryPhase,
    ListenerErrorHandler,
    ListenerErrorStats,
    ListenerFailure,
)
from eventchannel.exceptions import (
    DuplicateVariantTagError,
    EmptyHistoryError,
    EventChannelError,
    InvalidPreconditionError,
    PayloadTypeError,
    VariantNotFoundError,
    VariantRetagError,
)
from eventchannel.history import HistoryBuffer
from eventchannel.listeners import (
    ListenerAdapter,
    ListenerKind,
    ListenerRegistry,
    PayloadFilter,
    Subscription,
    VariantMatcher,
)
from eventchannel.observability import MockTracer, NullTracer, Tracer, create_tracer
from eventchannel.variants import (
    PayloadVariant,
    VariantRegistry,
    default_registry,
    register_variant,
)

__all__ = [
    "__version__",
    # Channel
    "EventChannel",
    "DispatchState",
    "QueuedPayload",
    "EventComponent",
    # Configuration
    "ChannelConfig",
    "HistoryMode",
    "HistoryBuffer",
    # Listeners
    "ListenerAdapter",
    "ListenerKind",
    "ListenerRegistry",
    "PayloadFilter",
    "Subscription",
    "VariantMatcher",
    # Variants
    "PayloadVariant",
    "VariantRegistry",
    "default_registry",
    "register_variant",
    # Error handling
    "DeliveryPhase",
    "ListenerErrorHandler",
    "ListenerErrorStats",
    "ListenerFailure",
    # Observability
    "Tracer",
    "NullTracer",
    "MockTracer",
    "create_tracer",
    # Exceptions
    "EventChannelError",
    "EmptyHistoryError",
    "InvalidPreconditionError",
    "PayloadTypeError",
    "DuplicateVariantTagError",
    "VariantNotFoundError",
    "VariantRetagError",
]

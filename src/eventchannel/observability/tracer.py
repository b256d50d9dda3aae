"""
Tracers used by event channels.

A channel never talks to OpenTelemetry directly. It holds a ``Tracer`` and
opens spans around dispatch, listener invocation and history replay:

    eventchannel.channel.dispatch      one per delivered payload
      eventchannel.channel.handle      one per listener invocation
    eventchannel.channel.replay        one per history replay on subscribe
      eventchannel.channel.handle

Pick the implementation with ``create_tracer()`` or pass one explicitly:

    >>> channel = EventChannel(name="orders", tracer=MockTracer())
"""

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from opentelemetry import trace

if TYPE_CHECKING:
    from opentelemetry.trace import Span


@runtime_checkable
class Tracer(Protocol):
    """What a channel needs from a tracer."""

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]:
        """
        Open a span for the duration of the ``with`` block.

        The context manager yields the live span, or None when the tracer
        does not produce real spans. Callers only set result attributes
        when they get a span back.
        """
        ...

    @property
    def enabled(self) -> bool:
        """Whether spans are actually produced."""
        ...


class NullTracer:
    """Tracer for channels created with ``enable_tracing=False``."""

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Iterator[None]:
        yield None

    @property
    def enabled(self) -> bool:
        return False


class OpenTelemetryTracer:
    """
    Tracer backed by ``opentelemetry.trace``.

    Spans go to the global tracer provider unless ``tracer_provider`` is
    given. With the API alone (no SDK configured) spans are non-recording
    and cost next to nothing.

    Args:
        tracer_name: Instrumentation scope name, usually the module name
        tracer_provider: Provider to create the tracer from
    """

    def __init__(self, tracer_name: str, tracer_provider: trace.TracerProvider | None = None) -> None:
        self._tracer = trace.get_tracer(tracer_name, tracer_provider=tracer_provider)

    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> AbstractContextManager[Span | None]:
        # Becomes the current span, so listener spans nest under dispatch
        return self._tracer.start_as_current_span(name, attributes=attributes or {})

    @property
    def enabled(self) -> bool:
        return True


@dataclass(frozen=True)
class RecordedSpan:
    """A span captured by MockTracer."""

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)


class MockTracer:
    """
    In-memory tracer for asserting on the spans a channel opens.

    Spans are recorded when they are opened, so nested spans appear after
    their parent.

    Example:
        >>> tracer = MockTracer()
        >>> channel = EventChannel(name="orders", tracer=tracer)
        >>> channel.add_listener(print)
        >>> channel.fire(1)
        1
        >>> tracer.span_names
        ['eventchannel.channel.dispatch', 'eventchannel.channel.handle']
    """

    def __init__(self) -> None:
        self.spans: list[RecordedSpan] = []

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Iterator[None]:
        self.spans.append(RecordedSpan(name, dict(attributes or {})))
        yield None

    @property
    def enabled(self) -> bool:
        return True

    @property
    def span_names(self) -> list[str]:
        return [span.name for span in self.spans]

    def attributes_for(self, name: str) -> list[dict[str, Any]]:
        """Attributes of every recorded span called ``name``, in order."""
        return [span.attributes for span in self.spans if span.name == name]

    def clear(self) -> None:
        self.spans.clear()


def create_tracer(
    name: str,
    enable_tracing: bool = True,
    tracer_provider: trace.TracerProvider | None = None,
) -> Tracer:
    """
    Create the tracer a channel uses when none is injected.

    Args:
        name: Instrumentation scope name
        enable_tracing: False selects NullTracer
        tracer_provider: Optional provider for OpenTelemetryTracer

    Returns:
        OpenTelemetryTracer when tracing is enabled, NullTracer otherwise
    """
    if not enable_tracing:
        return NullTracer()
    return OpenTelemetryTracer(name, tracer_provider)


__all__ = [
    "MockTracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "RecordedSpan",
    "Tracer",
    "create_tracer",
]

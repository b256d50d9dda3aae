"""
Shared pytest fixtures for the eventchannel library tests.

This module provides:
- Channel fixtures (channel, history_channel, bounded_channel)
- Recorder fixtures (recorder)
- Tracing fixtures (mock_tracer, span_exporter)
- Variant registry fixtures (variant_registry)
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from eventchannel import EventChannel, MockTracer, VariantRegistry
from eventchannel.testing import PayloadRecorder

# ============================================================================
# Channel Fixtures
# ============================================================================


@pytest.fixture
def channel() -> EventChannel[Any]:
    """Channel without history."""
    return EventChannel(name="test", enable_tracing=False)


@pytest.fixture
def history_channel() -> EventChannel[Any]:
    """Channel with unbounded history."""
    return EventChannel(name="history", history_limit=0, enable_tracing=False)


@pytest.fixture
def bounded_channel() -> EventChannel[Any]:
    """Channel keeping the three most recent payloads."""
    return EventChannel(name="bounded", history_limit=3, enable_tracing=False)


# ============================================================================
# Recorder Fixtures
# ============================================================================


@pytest.fixture
def recorder() -> PayloadRecorder[Any]:
    """Fresh recording listener."""
    return PayloadRecorder()


# ============================================================================
# Tracing Fixtures
# ============================================================================


@pytest.fixture
def mock_tracer() -> MockTracer:
    """Tracer recording the spans a channel opens."""
    return MockTracer()


@pytest.fixture
def span_exporter() -> Generator[tuple[InMemorySpanExporter, TracerProvider], None, None]:
    """OpenTelemetry SDK provider exporting to memory."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    yield exporter, provider
    exporter.clear()
    provider.shutdown()


# ============================================================================
# Variant Registry Fixtures
# ============================================================================


@pytest.fixture
def variant_registry() -> VariantRegistry:
    """Isolated variant registry."""
    return VariantRegistry()

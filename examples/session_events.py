"""
Session Events Example

This example demonstrates typed listeners over a payload variant hierarchy:
- Defining payload variants with PayloadVariant
- Owning a channel with EventComponent
- is-a and exact typed matching, excluded variants
- Reacting to listener failures

Run with: python examples/session_events.py
"""

import logging
from typing import ClassVar

from eventchannel import EventComponent, ListenerFailure, PayloadVariant

# =============================================================================
# Step 1: Define payload variants
# =============================================================================
# Variants are immutable pydantic models. Each subclass registers itself
# with a variant tag, and derived variants are "is-a" their bases.


class SessionEvent(PayloadVariant):
    """Root of all session payloads."""


class SessionStarted(SessionEvent):
    variant_tag: ClassVar[str] = "session.started"

    user: str


class SessionEnded(SessionEvent):
    variant_tag: ClassVar[str] = "session.ended"


class SessionErrorEnded(SessionEnded):
    variant_tag: ClassVar[str] = "session.ended.error"

    reason: str


# =============================================================================
# Step 2: Define a component owning a channel
# =============================================================================


class Session(EventComponent[SessionEvent]):
    """A session that publishes its lifecycle."""

    def __init__(self) -> None:
        super().__init__(name="session", history_limit=0, enable_tracing=False)

    def start(self, user: str) -> None:
        self.fire(SessionStarted(user=user))

    def end(self) -> None:
        self.fire(SessionEnded())

    def fail(self, reason: str) -> None:
        self.fire(SessionErrorEnded(reason=reason))


def main():
    logging.basicConfig(level=logging.WARNING)

    print("=" * 60)
    print("Session Events Example")
    print("=" * 60)

    session = Session()
    session.start("john")
    session.end()
    session.start("jane")
    session.fail("connection lost")

    # Typed listeners are replayed matching history, oldest first
    print("\n1. Every ended session (is-a matching)")
    session.on_type(SessionEnded, lambda payload: print(f"   ended: {payload!r}"))

    print("\n2. Clean endings only (exact matching)")
    session.on_type(
        SessionEnded,
        lambda payload: print(f"   clean end: {payload!r}"),
        use_runtime_type=True,
    )

    print("\n3. Everything except starts")
    session.on_type(
        SessionEvent,
        lambda payload: print(f"   {payload.variant_tag}"),
        use_history=False,
        excluded_types=[SessionStarted],
    )
    session.start("joe")
    session.end()

    print("\n4. A failing listener does not stop delivery")

    def on_failure(failure: ListenerFailure) -> None:
        print(f"   {failure.listener_name} failed with {failure.error_type}")

    session.event.on_listener_error(on_failure)

    def broken(payload: SessionEvent) -> None:
        raise RuntimeError("listener bug")

    session.on(broken, use_history=False)
    session.fail("timeout")

    print(f"\n5. Last payload: {session.last_payload!r}")
    print(f"   Channel stats: {session.event.get_stats()}")

    print("\n" + "=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    main()

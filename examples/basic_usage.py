"""
Basic Usage Example

This example demonstrates the fundamental concepts of event channels:
- Firing payloads to listeners
- History and replay to late listeners
- Reentrant fires from inside a listener
- Waiting for the next payload and delayed fires
- Linking channels together

Run with: python examples/basic_usage.py
"""

import asyncio

from eventchannel import EventChannel


async def main():
    print("=" * 60)
    print("Event Channel Basic Usage Example")
    print("=" * 60)

    # =========================================================================
    # Step 1: Fire and listen
    # =========================================================================
    # A channel keeps the most recent payload when history_limit is 1.

    name = EventChannel[str](name="name", history_limit=1, enable_tracing=False)

    print("\n1. Firing before anyone listens")
    name.fire("John")

    # The late listener is replayed the recorded history first
    subscription = name.add_listener(lambda payload: print(f"   name is {payload}"))
    name.fire("Doe")

    # =========================================================================
    # Step 2: Reentrant fires are queued
    # =========================================================================

    print("\n2. Reentrant fire from inside a listener")
    counter = EventChannel[int](name="counter", enable_tracing=False)

    def count_down(value: int) -> None:
        print(f"   tick {value}")
        if value > 0:
            counter.fire(value - 1)
        print(f"   done with {value}")

    counter.add_listener(count_down)
    counter.fire(2)

    # =========================================================================
    # Step 3: Waiting for payloads
    # =========================================================================

    print("\n3. Awaiting the second payload after now")
    waiter = name.on_next(1)
    name.fire("Jane")
    name.fire("Jane Doe")
    print(f"   on_next(1) resolved with {await waiter!r}")

    print("\n4. Delayed fire")
    task = name.fire("Later", delay=0.05)
    print("   fire() returned before delivery")
    await task

    # =========================================================================
    # Step 4: Linking channels
    # =========================================================================

    print("\n5. Linking an int channel to a str channel")
    labels = EventChannel[str](name="labels", history_limit=0, enable_tracing=False)
    counter.clear()
    counter.link_to(labels, lambda value: f"#{value}")
    counter.fire(5)
    print(f"   labels history: {labels.history}")

    subscription.dispose()
    print(f"\n6. Listeners left on 'name': {name.listeners_count}")

    print("\n" + "=" * 60)
    print("Example completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())

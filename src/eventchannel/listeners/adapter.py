"""
Listener adapter for normalizing channel listeners.

This module normalizes the listener shapes accepted by a channel
(plain callables, bound methods, objects with a ``handle()`` method)
to a single synchronous call interface, and derives a descriptive name
for logging and tracing.
"""

from collections.abc import Callable
from typing import Any


def get_listener_name(listener: Any) -> str:
    """
    Get a descriptive name for a listener for logging and debugging.

    Args:
        listener: Any listener object (class instance, function, lambda, bound method)

    Returns:
        String name for the listener
    """
    qualname = getattr(listener, "__qualname__", None)
    if isinstance(qualname, str):
        return qualname
    if hasattr(listener, "__class__") and listener.__class__.__name__ != "function":
        return str(listener.__class__.__name__)
    return repr(listener)


class ListenerAdapter:
    """
    Adapter that normalizes listeners to a plain synchronous call.

    This adapter accepts listeners in various forms:
    - Functions and lambdas
    - Bound methods
    - Objects with a ``handle(payload)`` method
    - Any other callable object

    Listeners are always invoked synchronously. Whatever the listener
    returns is handed back to the caller, which lets the channel schedule
    coroutines returned by ``async def`` listeners.

    Example:
        >>> class Printer:
        ...     def handle(self, payload: str) -> None:
        ...         print(payload)
        >>> adapter = ListenerAdapter(Printer())
        >>> adapter("hello")
        hello

    Attributes:
        original: The original unwrapped listener
        name: Descriptive name for logging
    """

    def __init__(self, listener: Any) -> None:
        """
        Initialize the adapter with a listener.

        Args:
            listener: Callable or object with handle() method

        Raises:
            TypeError: If listener doesn't have handle() method and isn't callable
        """
        self._original = listener
        self._name = get_listener_name(listener)
        self._call = self._normalize(listener)

    def _normalize(self, listener: Any) -> Callable[[Any], Any]:
        handle = getattr(listener, "handle", None)
        if callable(handle):
            return handle  # type: ignore[no-any-return]
        if callable(listener):
            return listener  # type: ignore[no-any-return]
        raise TypeError(
            f"Listener must have a handle() method or be callable, got {type(listener)}"
        )

    @property
    def original(self) -> Any:
        """Get the original unwrapped listener."""
        return self._original

    @property
    def name(self) -> str:
        """Get the listener's descriptive name."""
        return self._name

    def __call__(self, payload: Any) -> Any:
        return self._call(payload)

    def matches(self, listener: Any) -> bool:
        """
        Check whether this adapter wraps ``listener``.

        Identity is tried first. Equality covers bound methods, which are
        recreated on every attribute access but compare equal.
        """
        if isinstance(listener, ListenerAdapter):
            listener = listener._original
        return self._original is listener or bool(self._original == listener)

    def __eq__(self, other: object) -> bool:
        """Check equality based on the original listener."""
        return self.matches(other)

    def __hash__(self) -> int:
        """Hash based on the original listener."""
        try:
            return hash(self._original)
        except TypeError:
            return id(self._original)

    def __repr__(self) -> str:
        return f"ListenerAdapter({self._name})"


__all__ = [
    "ListenerAdapter",
    "get_listener_name",
]

"""Library exceptions for the eventchannel package."""

from typing import Any


class EventChannelError(Exception):
    """Base exception for eventchannel library."""

    pass


class EmptyHistoryError(EventChannelError, LookupError):
    """Raised when the latest payload is requested but no history was recorded."""

    def __init__(self, channel_name: str) -> None:
        self.channel_name = channel_name
        super().__init__(
            f"Channel '{channel_name}' has no payload history. "
            f"History is empty, was cleared, or history mode is disabled."
        )


class InvalidPreconditionError(EventChannelError):
    """
    Raised when an operation is called in a state that cannot support it.

    Examples:
    - notify() on a channel whose payload type cannot represent None
    - a delayed fire() or on_next() without a running asyncio event loop
    """

    pass


class PayloadTypeError(InvalidPreconditionError):
    """
    Raised when a fired payload does not match the channel's payload type.

    Attributes:
        channel_name: Name of the channel that rejected the payload
        expected: The channel's declared payload type
        actual: The type of the rejected payload
    """

    def __init__(self, channel_name: str, expected: Any, actual: type) -> None:
        self.channel_name = channel_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Channel '{channel_name}' expects payloads of type {expected!r}, "
            f"got {actual.__name__}"
        )


class DuplicateVariantTagError(EventChannelError, ValueError):
    """Raised when a different class is registered under an existing variant tag."""

    def __init__(self, variant_tag: str, existing_class: type, new_class: type) -> None:
        self.variant_tag = variant_tag
        self.existing_class = existing_class
        self.new_class = new_class
        super().__init__(
            f"Variant tag '{variant_tag}' is already registered to {existing_class.__name__}. "
            f"Cannot register {new_class.__name__} with the same tag."
        )


class VariantRetagError(EventChannelError, ValueError):
    """Raised when an already registered class is registered again under another tag."""

    def __init__(self, variant_class: type, existing_tag: str, requested_tag: str) -> None:
        self.variant_class = variant_class
        self.existing_tag = existing_tag
        self.requested_tag = requested_tag
        super().__init__(
            f"{variant_class.__name__} is already registered as '{existing_tag}'. "
            f"Cannot register it again as '{requested_tag}'."
        )


class VariantNotFoundError(EventChannelError, KeyError):
    """Raised when a variant tag is not found in the registry."""

    def __init__(self, variant_tag: str, available_tags: list[str]) -> None:
        self.variant_tag = variant_tag
        self.available_tags = available_tags
        available = ", ".join(sorted(available_tags)) if available_tags else "none"
        super().__init__(
            f"Unknown variant tag: '{variant_tag}'. "
            f"Available tags: {available}. "
            f"Did you forget to register this variant?"
        )


__all__ = [
    "EventChannelError",
    "EmptyHistoryError",
    "InvalidPreconditionError",
    "PayloadTypeError",
    "DuplicateVariantTagError",
    "VariantNotFoundError",
    "VariantRetagError",
]

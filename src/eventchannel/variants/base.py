"""
Base class for tagged payload variants.

Variants model a sealed payload hierarchy (e.g. session started / ended /
ended with error). Each subclass carries a variant tag and registers itself
in the default variant registry when the class is created, so typed
listeners can match on tags instead of runtime reflection.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from eventchannel.variants.registry import default_registry, default_variant_tag


class PayloadVariant(BaseModel):
    """
    Base class for payload variants with automatic tag derivation.

    Variants are immutable pydantic models. The tag is the fully qualified
    class name unless the class declares its own ``variant_tag``.

    Attributes:
        variant_tag: Discriminant identifying the concrete variant

    Example:
        >>> class SessionEvent(PayloadVariant):
        ...     pass
        >>> class SessionEnded(SessionEvent):
        ...     variant_tag: ClassVar[str] = "session.ended"
        >>> class SessionErrorEnded(SessionEnded):
        ...     reason: str
        >>> SessionEnded.variant_tag
        'session.ended'
    """

    model_config = ConfigDict(frozen=True)

    variant_tag: ClassVar[str] = "eventchannel.variants.base.PayloadVariant"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """
        Hook called when PayloadVariant is subclassed.

        Derives the variant tag if the subclass does not declare one and
        registers the subclass (and its is-a relation) in the default registry.
        """
        super().__init_subclass__(**kwargs)
        if "variant_tag" not in cls.__dict__:
            cls.variant_tag = default_variant_tag(cls)
        default_registry.register(cls, cls.variant_tag)


default_registry.register(PayloadVariant, PayloadVariant.variant_tag)


__all__ = ["PayloadVariant"]

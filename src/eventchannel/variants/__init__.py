"""
Tagged payload variants for typed listeners.

Exports:
    PayloadVariant: Base class for immutable, self-registering payload variants
    VariantRegistry: Tag and is-a relation registry
    default_registry: Module-level registry used by channels by default
    register_variant: Decorator for registering plain classes
"""

from eventchannel.variants.base import PayloadVariant
from eventchannel.variants.registry import (
    VariantRegistry,
    default_registry,
    default_variant_tag,
    register_variant,
)

__all__ = [
    "PayloadVariant",
    "VariantRegistry",
    "default_registry",
    "default_variant_tag",
    "register_variant",
]

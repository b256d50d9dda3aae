"""
Variant registry for typed listener matching.

This module maps payload classes to variant tags and records, for every tag,
the set of tags it "is-a". The relation is computed once when a class is
registered, so matching a payload against a typed listener is a tag lookup
plus a set membership check.

The registry is thread-safe and supports multiple registration patterns:
- Automatic registration of PayloadVariant subclasses
- Decorator-based registration of plain classes
- Lazy registration on first lookup
- Multiple independent registries for testing isolation

Usage:
    # Option 1: PayloadVariant subclasses register themselves
    class SessionStarted(PayloadVariant):
        pass

    # Option 2: Decorator with explicit tag
    @register_variant(variant_tag="session.ended")
    class SessionEnded:
        ...

    # Lookup
    registry.tag_of(SessionStarted)
    registry.is_a(registry.tag_of(ErrorEnded), registry.tag_of(SessionEnded))
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from typing import TypeVar, overload

from pydantic import BaseModel

from eventchannel.exceptions import (
    DuplicateVariantTagError,
    VariantNotFoundError,
    VariantRetagError,
)

logger = logging.getLogger(__name__)

TVariant = TypeVar("TVariant", bound=type)

# Bases that never take part in the is-a relation
_IGNORED_BASES: frozenset[type] = frozenset({object, BaseModel})


def _qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def default_variant_tag(cls: type) -> str:
    """
    Resolve the variant tag of a class.

    Resolution order:
    1. A string ``variant_tag`` declared in the class body itself
    2. The fully qualified class name
    """
    declared = cls.__dict__.get("variant_tag")
    if isinstance(declared, str) and declared:
        return declared
    return _qualified_name(cls)


class VariantRegistry:
    """
    Registry mapping payload classes to variant tags and their ancestry.

    Thread-Safety:
        All operations are thread-safe and use internal locking.

    Example:
        >>> registry = VariantRegistry()
        >>> registry.register(SessionEnded)
        >>> registry.register(ErrorEnded)
        >>> registry.is_a(registry.tag_of(ErrorEnded), registry.tag_of(SessionEnded))
        True
    """

    def __init__(self) -> None:
        """Initialize an empty variant registry."""
        self._tags: dict[str, type] = {}
        self._classes: dict[type, str] = {}
        self._ancestry: dict[str, frozenset[str]] = {}
        self._lock = threading.RLock()

    def register(self, variant_class: TVariant, variant_tag: str | None = None) -> TVariant:
        """
        Register a class and compute its is-a relation.

        Ancestor classes are registered first, so the relation of every
        registered tag is complete.

        A tag equal to the qualified class name belongs to whichever class
        was defined under that name last. Redefining a class (a class
        statement run again in a factory or a reloaded module) moves the tag
        to the new class. Classes registered earlier keep resolving to it.

        Args:
            variant_class: The class to register
            variant_tag: Optional tag override

        Returns:
            The registered class (enables use as decorator)

        Raises:
            DuplicateVariantTagError: If an explicit tag is registered to a different class
            VariantRetagError: If the class is already registered under another tag
        """
        with self._lock:
            existing_tag = self._classes.get(variant_class)
            if existing_tag is not None:
                if variant_tag is None or variant_tag == existing_tag:
                    return variant_class
                raise VariantRetagError(variant_class, existing_tag, variant_tag)

            resolved_tag = variant_tag or default_variant_tag(variant_class)
            existing = self._tags.get(resolved_tag)
            if existing is not None and existing is not variant_class:
                if resolved_tag != _qualified_name(variant_class):
                    raise DuplicateVariantTagError(resolved_tag, existing, variant_class)
                logger.debug(
                    "Variant '%s' redefined, %s replaces the earlier class",
                    resolved_tag,
                    variant_class.__name__,
                    extra={"variant_tag": resolved_tag},
                )

            ancestry = {resolved_tag}
            for base in variant_class.__mro__[1:]:
                if base in _IGNORED_BASES:
                    continue
                ancestry.add(self._classes.get(base) or self._tag_for_base(base))

            self._tags[resolved_tag] = variant_class
            self._classes[variant_class] = resolved_tag
            self._ancestry[resolved_tag] = frozenset(ancestry)

        logger.debug(
            "Registered variant '%s' -> %s",
            resolved_tag,
            variant_class.__name__,
            extra={
                "variant_tag": resolved_tag,
                "variant_class": variant_class.__name__,
                "ancestry": sorted(ancestry),
            },
        )
        return variant_class

    def _tag_for_base(self, base: type) -> str:
        self.register(base)
        return self._classes[base]

    def tag_of(self, variant_class: type) -> str:
        """
        Get the tag of a class, registering it on first lookup.

        Args:
            variant_class: Payload class

        Returns:
            The variant tag
        """
        with self._lock:
            tag = self._classes.get(variant_class)
            if tag is None:
                self.register(variant_class)
                tag = self._classes[variant_class]
            return tag

    def get(self, variant_tag: str) -> type:
        """
        Get a class by tag.

        Raises:
            VariantNotFoundError: If the tag is not registered
        """
        with self._lock:
            if variant_tag not in self._tags:
                raise VariantNotFoundError(variant_tag, list(self._tags.keys()))
            return self._tags[variant_tag]

    def ancestors(self, variant_tag: str) -> frozenset[str]:
        """
        Get every tag the given tag is-a, including itself.

        Raises:
            VariantNotFoundError: If the tag is not registered
        """
        with self._lock:
            if variant_tag not in self._ancestry:
                raise VariantNotFoundError(variant_tag, list(self._tags.keys()))
            return self._ancestry[variant_tag]

    def is_a(self, variant_tag: str, target_tag: str) -> bool:
        """Check whether ``variant_tag`` is ``target_tag`` or derives from it."""
        return target_tag in self.ancestors(variant_tag)

    def contains(self, variant_tag: str) -> bool:
        with self._lock:
            return variant_tag in self._tags

    def list_tags(self) -> list[str]:
        """Sorted list of registered tags."""
        with self._lock:
            return sorted(self._tags.keys())

    def clear(self) -> None:
        """
        Clear all registered variants.

        Primarily useful for testing to reset state between tests.
        """
        with self._lock:
            self._tags.clear()
            self._classes.clear()
            self._ancestry.clear()
            logger.debug("Variant registry cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._tags)

    def __bool__(self) -> bool:
        """Registry is always truthy, even when empty."""
        return True

    def __contains__(self, variant_tag: str) -> bool:
        return self.contains(variant_tag)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._tags.keys()))


# Module-level default registry instance
default_registry = VariantRegistry()


@overload
def register_variant(variant_class: TVariant) -> TVariant: ...


@overload
def register_variant(
    variant_class: None = None,
    *,
    variant_tag: str | None = None,
    registry: VariantRegistry | None = None,
) -> Callable[[TVariant], TVariant]: ...


def register_variant(
    variant_class: TVariant | None = None,
    *,
    variant_tag: str | None = None,
    registry: VariantRegistry | None = None,
) -> TVariant | Callable[[TVariant], TVariant]:
    """
    Decorator to register a payload class as a variant.

    Can be used with or without parentheses:
        @register_variant
        class Started: ...

        @register_variant(variant_tag="session.started")
        class Started: ...
    """
    target_registry = registry if registry is not None else default_registry

    def decorator(cls: TVariant) -> TVariant:
        return target_registry.register(cls, variant_tag)

    if variant_class is not None:
        return decorator(variant_class)
    return decorator


__all__ = [
    "VariantRegistry",
    "default_registry",
    "default_variant_tag",
    "register_variant",
]

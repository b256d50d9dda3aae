"""
Payload matchers for filtered and typed listeners.

A matcher decides, per payload, whether a registered listener is invoked.
Matchers apply to live dispatch and history replay alike.
"""

from collections.abc import Callable, Iterable
from typing import Any

from eventchannel.variants.registry import VariantRegistry, default_registry

PayloadMatcher = Callable[[Any], bool]


class PayloadFilter:
    """
    Matcher backed by a user predicate.

    Example:
        >>> only_even = PayloadFilter(lambda n: n % 2 == 0)
        >>> only_even(4), only_even(5)
        (True, False)
    """

    def __init__(self, predicate: Callable[[Any], bool]) -> None:
        if not callable(predicate):
            raise TypeError(f"Filter predicate must be callable, got {type(predicate)}")
        self._predicate = predicate

    @property
    def predicate(self) -> Callable[[Any], bool]:
        return self._predicate

    def __call__(self, payload: Any) -> bool:
        return bool(self._predicate(payload))

    def __repr__(self) -> str:
        return f"PayloadFilter({self._predicate!r})"


class VariantMatcher:
    """
    Matcher for typed listeners.

    Rules, in order:
    1. A payload whose concrete variant tag is excluded never matches.
    2. With ``exact=True`` only the target variant itself matches.
    3. Otherwise the target variant and every variant derived from it match.

    Tags for the target and excluded variants are resolved once, at
    construction time.

    Example:
        >>> matcher = VariantMatcher(SessionEnded, exact=True)
        >>> matcher(SessionEnded()), matcher(SessionErrorEnded(reason="x"))
        (True, False)
    """

    def __init__(
        self,
        variant: type,
        *,
        exact: bool = False,
        excluded_types: Iterable[type | str] = (),
        registry: VariantRegistry | None = None,
    ) -> None:
        if not isinstance(variant, type):
            raise TypeError(f"Typed listeners need a class to match on, got {variant!r}")
        self._registry = registry if registry is not None else default_registry
        self._variant = variant
        self._exact = exact
        self._target_tag = self._registry.tag_of(variant)
        self._excluded_tags = frozenset(
            item if isinstance(item, str) else self._registry.tag_of(item)
            for item in excluded_types
        )

    @property
    def variant(self) -> type:
        return self._variant

    @property
    def target_tag(self) -> str:
        return self._target_tag

    @property
    def exact(self) -> bool:
        return self._exact

    @property
    def excluded_tags(self) -> frozenset[str]:
        return self._excluded_tags

    def __call__(self, payload: Any) -> bool:
        payload_tag = self._registry.tag_of(type(payload))
        if payload_tag in self._excluded_tags:
            return False
        if self._exact:
            return payload_tag == self._target_tag
        return self._registry.is_a(payload_tag, self._target_tag)

    def __repr__(self) -> str:
        mode = "exact" if self._exact else "is-a"
        return f"VariantMatcher({self._target_tag}, {mode})"


__all__ = [
    "PayloadFilter",
    "PayloadMatcher",
    "VariantMatcher",
]

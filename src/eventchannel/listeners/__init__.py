"""
Listener registration and matching for event channels.

Exports:
    ListenerAdapter: Normalizes callables and handle() objects
    ListenerRegistry: Ordered collection of subscriptions
    Subscription: A single registration, callable as its own disposer
    ListenerKind: Plain, filtered or typed registration
    PayloadFilter: Predicate-backed matcher
    VariantMatcher: Variant-tag matcher for typed listeners
"""

from eventchannel.listeners.adapter import ListenerAdapter, get_listener_name
from eventchannel.listeners.matching import PayloadFilter, PayloadMatcher, VariantMatcher
from eventchannel.listeners.registry import ListenerKind, ListenerRegistry, Subscription

__all__ = [
    "ListenerAdapter",
    "ListenerKind",
    "ListenerRegistry",
    "PayloadFilter",
    "PayloadMatcher",
    "Subscription",
    "VariantMatcher",
    "get_listener_name",
]

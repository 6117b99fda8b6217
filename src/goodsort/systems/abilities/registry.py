from __future__ import annotations

from typing import Dict

from goodsort.systems.abilities.base import AbilityResolver
from goodsort.systems.abilities.random_match import RandomMatchResolver
from goodsort.systems.abilities.shuffle import ShuffleResolver


def _builtin_resolvers() -> Dict[str, AbilityResolver]:
    return {
        RandomMatchResolver.name: RandomMatchResolver(),
        ShuffleResolver.name: ShuffleResolver(),
    }


def create_resolver_registry(overrides: Dict[str, AbilityResolver] | None = None) -> Dict[str, AbilityResolver]:
    """Combine built-in and override resolvers into a single map."""

    combined: Dict[str, AbilityResolver] = _builtin_resolvers()
    if overrides:
        combined.update(overrides)
    return combined


__all__ = ["create_resolver_registry"]

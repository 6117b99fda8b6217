from goodsort.systems.abilities.base import AbilityContext, AbilityResolver
from goodsort.systems.abilities.random_match import RandomMatchResolver
from goodsort.systems.abilities.registry import create_resolver_registry
from goodsort.systems.abilities.shuffle import ShuffleResolver

__all__ = [
    "AbilityContext",
    "AbilityResolver",
    "RandomMatchResolver",
    "ShuffleResolver",
    "create_resolver_registry",
]

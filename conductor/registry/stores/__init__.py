"""Tool registry implementations."""

from conductor.registry.stores.inmemory import InMemoryToolRegistry

__all__ = ["InMemoryToolRegistry"]

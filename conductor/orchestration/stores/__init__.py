"""Execution context store implementations."""

from conductor.orchestration.stores.inmemory import InMemoryExecutionContextStore

__all__ = ["InMemoryExecutionContextStore"]

"""Tool registry: the catalogue of callable tools the planner may use."""

from conductor.registry.models import ToolSpec
from conductor.registry.store import ToolRegistry
from conductor.registry.stores import InMemoryToolRegistry

__all__ = ["InMemoryToolRegistry", "ToolRegistry", "ToolSpec"]

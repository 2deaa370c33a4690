"""ToolRegistry abstract interface."""

from abc import ABC, abstractmethod

from conductor.registry.models import ToolSpec


class ToolRegistry(ABC):
    """Read-only view of the tools available to the orchestrator.

    Population of the registry happens outside this package.
    """

    @abstractmethod
    def get(self, name: str) -> ToolSpec | None:
        """Get a tool spec by name."""
        pass

    @abstractmethod
    def list_tools(self) -> list[ToolSpec]:
        """List every registered tool."""
        pass

    def contains(self, name: str) -> bool:
        """Check whether a tool name is registered."""
        return self.get(name) is not None

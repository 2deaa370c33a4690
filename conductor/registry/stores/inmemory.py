"""In-memory implementation of ToolRegistry."""

from collections.abc import Iterable
from typing import Any

from conductor.registry.models import ToolSpec
from conductor.registry.store import ToolRegistry


class InMemoryToolRegistry(ToolRegistry):
    """Registry backed by a dict keyed by tool name.

    Accepts ToolSpec instances or plain mappings shaped like MCP tool
    descriptors (``name``, ``description``, ``inputSchema``). A later spec
    with the same name replaces an earlier one.
    """

    def __init__(self, tools: Iterable[ToolSpec | dict[str, Any]] = ()) -> None:
        self._tools: dict[str, ToolSpec] = {}
        for tool in tools:
            spec = tool if isinstance(tool, ToolSpec) else ToolSpec.model_validate(tool)
            self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def list_tools(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def contains(self, name: str) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

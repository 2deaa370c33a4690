"""Rule tables used by the execution planner.

Each table is an ordered sequence of ``(pattern, value)`` pairs matched by
substring against the tool reference. Evaluation order is first match wins,
so the order of entries changes the outcome for paths that match more than
one pattern.
"""

from collections.abc import Sequence
from types import MappingProxyType
from typing import TypeVar

from conductor.orchestration.models import Priority

T = TypeVar("T")

DEFAULT_PRIORITY = Priority.MEDIUM
DEFAULT_DURATION_MS = 1000
DEFAULT_NAMESPACE = "@browser"

PRIORITY_RULES: tuple[tuple[str, Priority], ...] = (
    ("/navigation/", Priority.HIGH),
    ("/content/", Priority.LOW),
    ("/interaction/", Priority.MEDIUM),
)

DURATION_RULES: tuple[tuple[str, int], ...] = (
    ("/navigation/navigate", 2000),
    ("/content/web_fetcher", 1000),
    ("/content/screenshot", 1500),
    ("/interaction/click", 500),
    ("/interaction/fill", 300),
    ("/network/request", 3000),
    ("/data/history", 800),
    ("/data/bookmark_search", 600),
)

# Operations with side effects a person should approve first
CONFIRMATION_PATTERNS: tuple[str, ...] = (
    "/navigation/navigate",
    "/window/close_tabs",
    "/interaction/click",
    "/interaction/fill",
    "/script/inject_script",
)

# Read-only operations safe to run alongside others
PARALLEL_PATTERNS: tuple[str, ...] = (
    "/content/web_fetcher",
    "/content/screenshot",
    "/data/history",
    "/data/bookmark_search",
    "/debug/console",
)

# Keyed by the path after the namespace, so the table holds under any
# configured tool_namespace.
TOOL_DEPENDENCIES = MappingProxyType({
    "interaction/click": ("navigation/navigate",),
    "interaction/fill": ("navigation/navigate",),
    "content/web_fetcher": ("navigation/navigate",),
    "content/screenshot": ("navigation/navigate",),
    "window/close_tabs": ("window/get_windows_and_tabs",),
})


def first_match(tool_name: str, rules: Sequence[tuple[str, T]], default: T) -> T:
    """Return the value of the first rule whose pattern occurs in tool_name."""
    for pattern, value in rules:
        if pattern in tool_name:
            return value
    return default


def matches_any(tool_name: str, patterns: Sequence[str]) -> bool:
    return any(pattern in tool_name for pattern in patterns)


def priority_for(tool_name: str) -> Priority:
    return first_match(tool_name, PRIORITY_RULES, DEFAULT_PRIORITY)


def duration_for(tool_name: str) -> int:
    return first_match(tool_name, DURATION_RULES, DEFAULT_DURATION_MS)


def dependencies_for(tool_name: str, namespace: str = DEFAULT_NAMESPACE) -> list[str]:
    """Prerequisite tools for tool_name, as a new list on every call.

    References outside ``namespace`` have no known prerequisites.
    """
    prefix = f"{namespace}/"
    if not tool_name.startswith(prefix):
        return []
    path = tool_name[len(prefix):]
    return [prefix + dep for dep in TOOL_DEPENDENCIES.get(path, ())]


def requires_confirmation(tool_name: str) -> bool:
    return matches_any(tool_name, CONFIRMATION_PATTERNS)


def can_parallelize(tool_name: str) -> bool:
    return matches_any(tool_name, PARALLEL_PATTERNS)

"""Shared test fixtures for the Conductor test suite."""

from collections.abc import Generator
from pathlib import Path

import pytest

from conductor.config import get_settings
from conductor.config.settings import set_toml_config
from conductor.registry import InMemoryToolRegistry, ToolSpec

BROWSER_TOOLS = [
    ToolSpec(name="@browser/navigation/navigate", description="Open a URL"),
    ToolSpec(name="@browser/content/web_fetcher", description="Fetch page content"),
    ToolSpec(name="@browser/content/screenshot", description="Capture a screenshot"),
    ToolSpec(name="@browser/interaction/click", description="Click an element"),
    ToolSpec(name="@browser/interaction/fill", description="Fill a form field"),
    ToolSpec(name="@browser/data/history", description="Search browsing history"),
    ToolSpec(name="@browser/window/close_tabs", description="Close tabs"),
]


@pytest.fixture
def browser_tools() -> list[ToolSpec]:
    return list(BROWSER_TOOLS)


@pytest.fixture
def registry(browser_tools: list[ToolSpec]) -> InMemoryToolRegistry:
    """Registry holding the standard browser tools."""
    return InMemoryToolRegistry(browser_tools)


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty config directory wired through CONDUCTOR_CONFIG_DIR."""
    directory = tmp_path / "config"
    directory.mkdir()
    monkeypatch.setenv("CONDUCTOR_CONFIG_DIR", str(directory))
    monkeypatch.setenv("CONDUCTOR_ENV", "test")
    return directory


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear cached settings and TOML values around each test."""
    get_settings.cache_clear()
    set_toml_config({})
    yield
    get_settings.cache_clear()
    set_toml_config({})

"""Bootstrap module for wiring Conductor from configuration.

Loads settings, configures logging and optional metrics exposition, and
builds an orchestrator and interaction coordinator over a tool list.

Example usage:

    from conductor.bootstrap import bootstrap

    app = bootstrap(tools=[{"name": "@browser/content/screenshot"}])
    app.coordinator.set_handler(show_dialog)

    context = await app.orchestrator.run_orchestration(
        "session-1", "take @browser/content/screenshot of the page"
    )
"""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from prometheus_client import start_http_server

from conductor.config import Settings, get_settings
from conductor.interaction.coordinator import InteractionCoordinator
from conductor.interaction.models import InteractionHandler
from conductor.observability.logging import get_logger, setup_logging
from conductor.orchestration.orchestrator import ToolOrchestrator
from conductor.registry.models import ToolSpec
from conductor.registry.stores.inmemory import InMemoryToolRegistry

logger = get_logger(__name__)


@dataclass
class Conductor:
    """Components returned from bootstrap."""

    settings: Settings
    registry: InMemoryToolRegistry
    orchestrator: ToolOrchestrator
    coordinator: InteractionCoordinator


def bootstrap(
    tools: Iterable[ToolSpec | dict[str, Any]] = (),
    handler: InteractionHandler | None = None,
    settings: Settings | None = None,
) -> Conductor:
    """Build the orchestration stack.

    Args:
        tools: Tool specs or MCP-style tool descriptors
        handler: Interaction handler; can also be set later on the coordinator
        settings: Explicit settings, loaded from config/ when omitted

    Returns:
        Conductor with registry, orchestrator and coordinator
    """
    settings = settings or get_settings()
    log_config = settings.observability.logging
    setup_logging(
        level=log_config.level,
        format=log_config.format,
        redact_pii=log_config.redact_pii,
    )

    metrics_config = settings.observability.metrics
    if metrics_config.enabled:
        start_http_server(metrics_config.port)
        logger.info("metrics_server_started", port=metrics_config.port)

    registry = InMemoryToolRegistry(tools)
    orchestrator = ToolOrchestrator(registry, config=settings.orchestration)
    coordinator = InteractionCoordinator(config=settings.interaction, handler=handler)

    logger.info(
        "conductor_bootstrapped",
        num_tools=len(registry),
        tool_namespace=settings.orchestration.tool_namespace,
        session_conflict=settings.orchestration.session_conflict,
    )

    return Conductor(
        settings=settings,
        registry=registry,
        orchestrator=orchestrator,
        coordinator=coordinator,
    )

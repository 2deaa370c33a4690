"""Configuration model exports.

    from conductor.config.models import InteractionConfig, OrchestrationConfig
"""

from conductor.config.models.interaction import InteractionConfig
from conductor.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from conductor.config.models.orchestration import OrchestrationConfig

__all__ = [
    "InteractionConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "OrchestrationConfig",
]

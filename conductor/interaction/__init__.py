"""Human interaction coordination: confirmations, input, choices and progress."""

from conductor.interaction.coordinator import InteractionCoordinator
from conductor.interaction.models import (
    InteractionHandler,
    InteractionOption,
    InteractionOutcome,
    InteractionRequest,
    InteractionResult,
    InteractionType,
)

__all__ = [
    "InteractionCoordinator",
    "InteractionHandler",
    "InteractionOption",
    "InteractionOutcome",
    "InteractionRequest",
    "InteractionResult",
    "InteractionType",
]

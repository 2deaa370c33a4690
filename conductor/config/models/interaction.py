"""Human interaction configuration models."""

from pydantic import BaseModel, Field


class InteractionConfig(BaseModel):
    """Default deadlines for interaction requests, in milliseconds.

    A value of 0 disables the deadline for that request type.
    """

    confirmation_timeout_ms: int = Field(default=30000, ge=0)
    input_timeout_ms: int = Field(default=60000, ge=0)
    choice_timeout_ms: int = Field(default=30000, ge=0)
    progress_duration_ms: int = Field(default=5000, ge=0)

"""Tool detection and planning configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

SessionConflictPolicy = Literal["overwrite", "reject"]


class OrchestrationConfig(BaseModel):
    """Configuration for the detector, planner and session store."""

    tool_namespace: str = Field(
        default="@browser",
        min_length=1,
        description="Marker that prefixes every tool reference in user text",
    )
    max_tools_for_full_score: int = Field(
        default=5,
        gt=0,
        description="Reference count at which the volume sub-score saturates",
    )
    min_complete_segments: int = Field(
        default=3,
        gt=0,
        description="Path segments a reference needs to count as complete",
    )
    session_conflict: SessionConflictPolicy = Field(
        default="overwrite",
        description=(
            "What to do when a run targets a session id whose context is still "
            "in flight: replace it, or raise SessionConflictError"
        ),
    )

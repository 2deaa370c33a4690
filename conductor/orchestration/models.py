"""Execution planning and session state models."""

from datetime import UTC, datetime
from enum import IntEnum, StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class Priority(IntEnum):
    """Execution priority. Lower values run first."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3


class ExecutionStatus(StrEnum):
    """Lifecycle of an execution context.

    pending -> executing <-> waiting_confirmation -> completed.
    failed is only entered through an explicit external signal.
    """

    PENDING = "pending"
    EXECUTING = "executing"
    WAITING_CONFIRMATION = "waiting_confirmation"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ExecutionStatus.COMPLETED, ExecutionStatus.FAILED)


class AnalysisResult(BaseModel):
    """Outcome of scanning user text for tool references."""

    model_config = ConfigDict(frozen=True)

    contains_tools: bool
    detected_tools: list[str] = Field(
        default_factory=list,
        description="References in order of occurrence, duplicates retained",
    )
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class ExecutionPlanItem(BaseModel):
    """One scheduled tool invocation with its scheduling metadata."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique within the session")
    tool_name: str
    priority: Priority = Priority.MEDIUM
    dependencies: list[str] = Field(
        default_factory=list, description="Tool names that must run first"
    )
    requires_confirmation: bool = False
    can_parallelize: bool = False
    estimated_duration_ms: int = Field(default=1000, ge=0)
    parameters: dict[str, str] = Field(
        default_factory=dict, description="Arguments extracted from user text"
    )


class ToolExecutionResult(BaseModel):
    """Result reported by the external tool executor."""

    tool_name: str
    success: bool
    result: Any | None = None
    error: str | None = None
    execution_time_ms: float = Field(default=0.0, ge=0)


class ExecutionContext(BaseModel):
    """Per-session execution state."""

    model_config = ConfigDict(validate_assignment=True)

    session_id: str
    user_input: str
    detected_tools: list[str] = Field(default_factory=list)
    execution_plan: list[ExecutionPlanItem] = Field(default_factory=list)
    current_step: int = Field(
        default=0, ge=0, description="Cursor maintained by callers"
    )
    results: dict[str, ToolExecutionResult] = Field(
        default_factory=dict, description="tool_name -> latest result"
    )
    status: ExecutionStatus = ExecutionStatus.PENDING
    failure_reason: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_complete(self) -> bool:
        return len(self.results) == len(self.execution_plan)


class ExecutionProgress(BaseModel):
    """Counts of plan items by result state."""

    total: int = 0
    succeeded: int = 0
    failed: int = 0
    pending: int = 0


class OrchestrationStats(BaseModel):
    """Aggregate counts over stored execution contexts."""

    total_sessions: int = 0
    active_sessions: int = 0
    completed_sessions: int = 0
    failed_sessions: int = 0

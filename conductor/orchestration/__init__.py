"""Tool orchestration: detection, planning and per-session execution state."""

from conductor.orchestration.detector import ToolDetector
from conductor.orchestration.models import (
    AnalysisResult,
    ExecutionContext,
    ExecutionPlanItem,
    ExecutionProgress,
    ExecutionStatus,
    OrchestrationStats,
    Priority,
    ToolExecutionResult,
)
from conductor.orchestration.orchestrator import ToolOrchestrator
from conductor.orchestration.planner import ExecutionPlanner

__all__ = [
    "AnalysisResult",
    "ExecutionContext",
    "ExecutionPlanItem",
    "ExecutionPlanner",
    "ExecutionProgress",
    "ExecutionStatus",
    "OrchestrationStats",
    "Priority",
    "ToolDetector",
    "ToolExecutionResult",
    "ToolOrchestrator",
]

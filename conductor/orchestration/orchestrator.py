"""ToolOrchestrator - session-keyed facade over detection and planning.

Composes ToolDetector, ExecutionPlanner and an ExecutionContextStore.
Callers (UI and tool executors) drive the state machine:

    pending -> executing <-> waiting_confirmation -> completed

``failed`` is entered only through mark_failed. ``completed`` and ``failed``
are final: waiting and resuming leave them unchanged. Unknown session ids are
never an error: lookups return None and mutations are no-ops.
"""

from conductor.config.models.orchestration import OrchestrationConfig
from conductor.errors import SessionConflictError
from conductor.observability.logging import get_logger
from conductor.observability.metrics import (
    ACTIVE_SESSIONS,
    ORCHESTRATION_RUNS,
    SESSION_TRANSITIONS,
)
from conductor.orchestration.detector import ToolDetector
from conductor.orchestration.models import (
    AnalysisResult,
    ExecutionContext,
    ExecutionPlanItem,
    ExecutionProgress,
    ExecutionStatus,
    OrchestrationStats,
    ToolExecutionResult,
    utc_now,
)
from conductor.orchestration.planner import ExecutionPlanner
from conductor.orchestration.store import ExecutionContextStore
from conductor.orchestration.stores.inmemory import InMemoryExecutionContextStore
from conductor.registry.store import ToolRegistry

logger = get_logger(__name__)

TASK_LIST_PROMPT = """User input: "{user_input}"

Detected tools:
{tool_descriptions}

Based on the user's intent, list the tasks to execute, including:
1. The order in which tasks run
2. Which tasks require user confirmation
3. Which tasks can run in parallel
4. Dependencies between tasks
5. The expected result of each task

Return the task list as JSON:
{{
  "tasks": [
    {{
      "id": "task_1",
      "tool": "{namespace}/xxx/xxx",
      "description": "task description",
      "requiresConfirmation": true/false,
      "canExecuteInParallel": true/false,
      "dependencies": ["task_id"],
      "expectedResult": "description of the expected result"
    }}
  ]
}}"""


class ToolOrchestrator:
    """Session-keyed entry points for tool orchestration.

    Each instance owns its context store; two orchestrators never share
    sessions.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        config: OrchestrationConfig | None = None,
        store: ExecutionContextStore | None = None,
    ) -> None:
        """Initialize orchestrator.

        Args:
            registry: Source of available tool specs
            config: Detection and conflict policy settings
            store: Context storage, in-memory by default
        """
        self._registry = registry
        self._config = config or OrchestrationConfig()
        self._store = store or InMemoryExecutionContextStore()
        self._detector = ToolDetector(registry, self._config)
        self._planner = ExecutionPlanner(registry, self._config.tool_namespace)

    def analyze(self, user_input: str) -> AnalysisResult:
        """Detect tool references without creating a session."""
        return self._detector.analyze(user_input)

    async def run_orchestration(self, session_id: str, user_input: str) -> ExecutionContext:
        """Detect, plan and start a session.

        Text without tool references yields a completed context with an
        empty plan that is not stored.

        Raises:
            SessionConflictError: Under the ``reject`` policy, when session_id
                already holds a context that is neither completed nor failed
        """
        analysis = self._detector.analyze(user_input)

        if not analysis.contains_tools:
            ORCHESTRATION_RUNS.labels(outcome="no_tools").inc()
            logger.debug("orchestration_skipped_no_tools", session_id=session_id)
            return ExecutionContext(
                session_id=session_id,
                user_input=user_input,
                status=ExecutionStatus.COMPLETED,
            )

        existing = self._store.get(session_id)
        if existing is not None and not existing.status.is_terminal:
            if self._config.session_conflict == "reject":
                ORCHESTRATION_RUNS.labels(outcome="rejected").inc()
                logger.warning(
                    "orchestration_rejected_session_in_flight",
                    session_id=session_id,
                    status=existing.status.value,
                )
                raise SessionConflictError(
                    f"Session {session_id} is still {existing.status.value}",
                    session_id=session_id,
                )
            logger.info(
                "execution_context_overwritten",
                session_id=session_id,
                previous_status=existing.status.value,
            )

        context = self._planner.plan(session_id, user_input, analysis.detected_tools)
        self._store.save(context)
        self._transition(context, ExecutionStatus.EXECUTING)
        ACTIVE_SESSIONS.set(len(self._store))
        ORCHESTRATION_RUNS.labels(outcome="planned").inc()

        logger.info(
            "orchestration_started",
            session_id=session_id,
            confidence=analysis.confidence,
            num_items=len(context.execution_plan),
        )
        return context

    def get_context(self, session_id: str) -> ExecutionContext | None:
        return self._store.get(session_id)

    def record_result(
        self,
        session_id: str,
        tool_name: str,
        result: ToolExecutionResult,
    ) -> ExecutionContext | None:
        """Store the latest result for a tool.

        Overwrites any earlier result for the same tool. Once the number of
        results equals the plan length the context completes; a context that
        was marked failed stays failed.
        """
        context = self._store.get(session_id)
        if context is None:
            logger.debug("record_result_unknown_session", session_id=session_id)
            return None

        if all(item.tool_name != tool_name for item in context.execution_plan):
            logger.warning(
                "result_for_unplanned_tool",
                session_id=session_id,
                tool_name=tool_name,
            )

        context.results[tool_name] = result
        context.updated_at = utc_now()

        logger.debug(
            "tool_result_recorded",
            session_id=session_id,
            tool_name=tool_name,
            success=result.success,
            num_results=len(context.results),
            num_items=len(context.execution_plan),
        )

        if context.is_complete and not context.status.is_terminal:
            self._transition(context, ExecutionStatus.COMPLETED)

        return context

    def mark_waiting_for_confirmation(self, session_id: str) -> None:
        context = self._active_context(session_id, ExecutionStatus.WAITING_CONFIRMATION)
        if context is not None:
            self._transition(context, ExecutionStatus.WAITING_CONFIRMATION)

    def resume(self, session_id: str) -> None:
        """Return a waiting session to executing. Finished sessions stay finished."""
        context = self._active_context(session_id, ExecutionStatus.EXECUTING)
        if context is not None:
            self._transition(context, ExecutionStatus.EXECUTING)

    def mark_failed(self, session_id: str, reason: str | None = None) -> None:
        """Record an external failure signal for the session."""
        context = self._store.get(session_id)
        if context is not None:
            context.failure_reason = reason
            self._transition(context, ExecutionStatus.FAILED)

    def cleanup(self, session_id: str) -> bool:
        """Drop the session's context.

        Outstanding interaction requests raised on behalf of the session are
        not cancelled; callers manage those on the InteractionCoordinator.
        """
        removed = self._store.delete(session_id)
        ACTIVE_SESSIONS.set(len(self._store))
        if removed:
            logger.info("execution_context_cleaned_up", session_id=session_id)
        return removed

    def ready_items(self, session_id: str) -> list[ExecutionPlanItem]:
        """Plan items that can start now.

        An item is ready when it has no result yet and each dependency is
        either absent from the plan or already has a successful result.
        """
        context = self._store.get(session_id)
        if context is None:
            return []

        planned = {item.tool_name for item in context.execution_plan}
        ready = []
        for item in context.execution_plan:
            if item.tool_name in context.results:
                continue
            blocked = any(
                dep in planned
                and not (dep in context.results and context.results[dep].success)
                for dep in item.dependencies
            )
            if not blocked:
                ready.append(item)
        return ready

    def progress(self, session_id: str) -> ExecutionProgress | None:
        context = self._store.get(session_id)
        if context is None:
            return None

        succeeded = failed = pending = 0
        for item in context.execution_plan:
            result = context.results.get(item.tool_name)
            if result is None:
                pending += 1
            elif result.success:
                succeeded += 1
            else:
                failed += 1

        return ExecutionProgress(
            total=len(context.execution_plan),
            succeeded=succeeded,
            failed=failed,
            pending=pending,
        )

    def stats(self) -> OrchestrationStats:
        stats = OrchestrationStats()
        for context in self._store.list_all():
            stats.total_sessions += 1
            if context.status == ExecutionStatus.COMPLETED:
                stats.completed_sessions += 1
            elif context.status == ExecutionStatus.FAILED:
                stats.failed_sessions += 1
            else:
                stats.active_sessions += 1
        return stats

    def task_list_prompt(self, user_input: str, detected_tools: list[str]) -> str:
        """Render a prompt asking a model to lay out the task list."""
        lines = []
        for name in detected_tools:
            spec = self._registry.get(name)
            description = spec.description if spec and spec.description else "No description"
            lines.append(f"- {name}: {description}")

        return TASK_LIST_PROMPT.format(
            user_input=user_input,
            tool_descriptions="\n".join(lines),
            namespace=self._config.tool_namespace,
        )

    def _active_context(
        self, session_id: str, requested: ExecutionStatus
    ) -> ExecutionContext | None:
        context = self._store.get(session_id)
        if context is None or not context.status.is_terminal:
            return context

        logger.warning(
            "transition_on_finished_context_ignored",
            session_id=session_id,
            status=context.status.value,
            requested=requested.value,
        )
        return None

    def _transition(self, context: ExecutionContext, status: ExecutionStatus) -> None:
        previous = context.status
        context.status = status
        context.updated_at = utc_now()
        SESSION_TRANSITIONS.labels(status=status.value).inc()
        logger.info(
            "execution_status_changed",
            session_id=context.session_id,
            from_status=previous.value,
            to_status=status.value,
        )

"""Execution plan generation.

Turns detected tool references into an ordered ExecutionContext. Every
decision about a tool comes from the rule tables in
``conductor.orchestration.rules`` and the extractors in
``conductor.orchestration.extraction``.
"""

import time

from conductor.observability.logging import get_logger
from conductor.observability.metrics import PLAN_SIZE
from conductor.orchestration import rules
from conductor.orchestration.extraction import extract_parameters
from conductor.orchestration.models import ExecutionContext, ExecutionPlanItem
from conductor.registry.store import ToolRegistry


class ExecutionPlanner:
    """Builds execution plans for registered tool references."""

    def __init__(self, registry: ToolRegistry, namespace: str = rules.DEFAULT_NAMESPACE) -> None:
        self._registry = registry
        self._namespace = namespace
        self._logger = get_logger(__name__)

    def plan(
        self,
        session_id: str,
        user_input: str,
        detected_tools: list[str],
    ) -> ExecutionContext:
        """Build a pending ExecutionContext for the detected references.

        References missing from the registry are skipped. Items are sorted
        by priority; the sort is stable so ties keep detection order.

        Args:
            session_id: Caller-chosen session identifier
            user_input: Original user text, used for parameter extraction
            detected_tools: References in order of occurrence

        Returns:
            ExecutionContext with status pending and no results
        """
        created_ms = time.time_ns() // 1_000_000
        items: list[ExecutionPlanItem] = []
        skipped: list[str] = []

        for index, tool_name in enumerate(detected_tools):
            if not self._registry.contains(tool_name):
                skipped.append(tool_name)
                continue
            items.append(
                self.build_item(session_id, user_input, tool_name, created_ms, index)
            )

        items.sort(key=lambda item: item.priority)
        PLAN_SIZE.observe(len(items))

        if skipped:
            self._logger.info(
                "unregistered_tools_skipped",
                session_id=session_id,
                skipped=skipped,
            )

        self._logger.info(
            "execution_plan_built",
            session_id=session_id,
            num_detected=len(detected_tools),
            num_items=len(items),
            tools=[item.tool_name for item in items],
        )

        return ExecutionContext(
            session_id=session_id,
            user_input=user_input,
            detected_tools=list(detected_tools),
            execution_plan=items,
        )

    def build_item(
        self,
        session_id: str,
        user_input: str,
        tool_name: str,
        created_ms: int,
        index: int,
    ) -> ExecutionPlanItem:
        return ExecutionPlanItem(
            id=f"{session_id}_{tool_name}_{created_ms}_{index}",
            tool_name=tool_name,
            priority=rules.priority_for(tool_name),
            dependencies=rules.dependencies_for(tool_name, self._namespace),
            requires_confirmation=rules.requires_confirmation(tool_name),
            can_parallelize=rules.can_parallelize(tool_name),
            estimated_duration_ms=rules.duration_for(tool_name),
            parameters=extract_parameters(user_input, tool_name),
        )

"""In-memory implementation of ExecutionContextStore."""

from conductor.orchestration.models import ExecutionContext, utc_now
from conductor.orchestration.store import ExecutionContextStore


class InMemoryExecutionContextStore(ExecutionContextStore):
    """Dict-backed store owned by a single orchestrator instance.

    Contents live only as long as the instance; nothing is persisted.
    """

    def __init__(self) -> None:
        self._contexts: dict[str, ExecutionContext] = {}

    def get(self, session_id: str) -> ExecutionContext | None:
        return self._contexts.get(session_id)

    def save(self, context: ExecutionContext) -> str:
        context.updated_at = utc_now()
        self._contexts[context.session_id] = context
        return context.session_id

    def delete(self, session_id: str) -> bool:
        return self._contexts.pop(session_id, None) is not None

    def list_all(self) -> list[ExecutionContext]:
        return list(self._contexts.values())

    def clear(self) -> None:
        self._contexts.clear()

    def __len__(self) -> int:
        return len(self._contexts)

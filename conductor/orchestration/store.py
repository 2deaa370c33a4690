"""ExecutionContextStore abstract interface."""

from abc import ABC, abstractmethod

from conductor.orchestration.models import ExecutionContext


class ExecutionContextStore(ABC):
    """Storage for execution contexts keyed by session id.

    One context per session id; saving under an existing id replaces it.
    """

    @abstractmethod
    def get(self, session_id: str) -> ExecutionContext | None:
        """Get a context by session id."""
        pass

    @abstractmethod
    def save(self, context: ExecutionContext) -> str:
        """Save a context, returning its session id."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Delete a context. Returns whether one was stored."""
        pass

    @abstractmethod
    def list_all(self) -> list[ExecutionContext]:
        """List every stored context."""
        pass

    def __len__(self) -> int:
        return len(self.list_all())

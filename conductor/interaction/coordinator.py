"""InteractionCoordinator - asks a person and waits for the answer.

Every request goes through ``submit``. Three parties may try to resolve a
pending request: the handler finishing, the deadline timer firing, and an
explicit ``cancel``. All of them go through ``_claim``, which pops the entry
from the pending map. Callbacks run on a single event loop, so exactly one
party gets the entry back and settles the future; the others see ``None``
and do nothing.
"""

import asyncio
import functools
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from conductor.config.models.interaction import InteractionConfig
from conductor.errors import ConfigurationError, InteractionHandlerError
from conductor.interaction.models import (
    InteractionHandler,
    InteractionOption,
    InteractionOutcome,
    InteractionRequest,
    InteractionResult,
    InteractionType,
)
from conductor.observability.logging import get_logger
from conductor.observability.metrics import (
    INTERACTION_LATENCY,
    INTERACTIONS,
    PENDING_INTERACTIONS,
)

logger = get_logger(__name__)

CONFIRMATION_OPTIONS = [
    InteractionOption(id="confirm", label="Confirm", value=True, style="primary"),
    InteractionOption(id="cancel", label="Cancel", value=False, style="secondary"),
]


@dataclass
class _PendingInteraction:
    request: InteractionRequest
    future: asyncio.Future[InteractionResult]
    submitted_at: float
    timer: asyncio.TimerHandle | None = None
    task: asyncio.Task[Any] | None = None


class InteractionCoordinator:
    """Tracks outstanding interaction requests and resolves each exactly once."""

    def __init__(
        self,
        config: InteractionConfig | None = None,
        handler: InteractionHandler | None = None,
    ) -> None:
        """Initialize coordinator.

        Args:
            config: Default deadlines per request type
            handler: Function that surfaces a request to a person
        """
        self._config = config or InteractionConfig()
        self._handler = handler
        self._pending: dict[str, _PendingInteraction] = {}

    def set_handler(self, handler: InteractionHandler) -> None:
        """Register the function that surfaces requests to a person."""
        self._handler = handler

    async def request_confirmation(
        self,
        title: str,
        message: str,
        timeout_ms: int | None = None,
    ) -> bool:
        """Ask a yes/no question.

        True only when the person confirmed and picked the confirm option.
        """
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION,
            title=title,
            message=message,
            options=CONFIRMATION_OPTIONS,
            timeout_ms=self._timeout(timeout_ms, self._config.confirmation_timeout_ms),
        )
        result = await self.submit(request)
        return result.confirmed and result.value is True

    async def request_input(
        self,
        title: str,
        message: str,
        default_value: str | None = None,
        timeout_ms: int | None = None,
    ) -> str | None:
        """Ask for free text. None when declined, empty, or timed out."""
        request = InteractionRequest(
            type=InteractionType.INPUT,
            title=title,
            message=message,
            default_value=default_value,
            timeout_ms=self._timeout(timeout_ms, self._config.input_timeout_ms),
        )
        result = await self.submit(request)
        if not result.confirmed:
            return None
        return result.value or None

    async def request_choice(
        self,
        title: str,
        message: str,
        options: list[InteractionOption],
        timeout_ms: int | None = None,
    ) -> Any | None:
        """Ask the person to pick one of options. Returns the chosen value."""
        request = InteractionRequest(
            type=InteractionType.CHOICE,
            title=title,
            message=message,
            options=options,
            timeout_ms=self._timeout(timeout_ms, self._config.choice_timeout_ms),
        )
        result = await self.submit(request)
        return result.value if result.confirmed else None

    async def show_progress(
        self,
        title: str,
        message: str,
        duration_ms: int | None = None,
    ) -> None:
        """Display a progress notice until acknowledged or the duration elapses."""
        request = InteractionRequest(
            type=InteractionType.PROGRESS,
            title=title,
            message=message,
            timeout_ms=self._timeout(duration_ms, self._config.progress_duration_ms),
        )
        await self.submit(request)

    async def submit(self, request: InteractionRequest) -> InteractionResult:
        """Surface a request and wait for its single resolution.

        Resolves with the handler's answer, or with ``timed_out=True`` when
        the deadline passes first, or with ``confirmed=False`` on cancel.
        A request that times out or is cancelled also cancels its handler
        task.

        Raises:
            ConfigurationError: No handler has been set
            InteractionHandlerError: The handler failed while the request
                was still pending
            ValueError: A request with the same id is already pending
        """
        if self._handler is None:
            raise ConfigurationError("Interaction handler has not been set")
        if request.id in self._pending:
            raise ValueError(f"Interaction {request.id} is already pending")

        loop = asyncio.get_running_loop()
        entry = _PendingInteraction(
            request=request,
            future=loop.create_future(),
            submitted_at=loop.time(),
        )
        self._pending[request.id] = entry
        PENDING_INTERACTIONS.set(len(self._pending))

        if request.timeout_ms > 0:
            entry.timer = loop.call_later(
                request.timeout_ms / 1000, self._expire, request.id
            )

        logger.info(
            "interaction_submitted",
            request_id=request.id,
            type=request.type.value,
            timeout_ms=request.timeout_ms,
        )

        entry.task = loop.create_task(self._call_handler(self._handler, request))
        entry.task.add_done_callback(
            functools.partial(self._on_handler_done, request.id)
        )

        try:
            return await entry.future
        except asyncio.CancelledError:
            if self._claim(request.id) is not None:
                entry.task.cancel()
                INTERACTIONS.labels(type=request.type.value, outcome="withdrawn").inc()
                logger.info("interaction_withdrawn", request_id=request.id)
            raise

    def cancel(self, request_id: str) -> bool:
        """Resolve a pending request as declined without waiting for the handler.

        Returns:
            True if the request was pending, False if unknown or already resolved
        """
        entry = self._claim(request_id)
        if entry is None:
            return False

        if entry.task is not None:
            entry.task.cancel()
        self._settle(
            entry,
            "cancelled",
            result=InteractionResult(id=request_id, confirmed=False, timed_out=False),
        )
        return True

    def cancel_all(self) -> int:
        """Cancel every pending request. Returns how many were cancelled."""
        return sum(1 for request_id in list(self._pending) if self.cancel(request_id))

    def list_pending(self) -> list[InteractionRequest]:
        """Snapshot of pending requests, for diagnostics."""
        return [entry.request for entry in self._pending.values()]

    @staticmethod
    async def _call_handler(
        handler: InteractionHandler, request: InteractionRequest
    ) -> InteractionOutcome | dict[str, Any]:
        return await handler(request)

    def _timeout(self, value: int | None, default: int) -> int:
        return default if value is None else value

    def _claim(self, request_id: str) -> _PendingInteraction | None:
        entry = self._pending.pop(request_id, None)
        if entry is None:
            return None
        if entry.timer is not None:
            entry.timer.cancel()
        PENDING_INTERACTIONS.set(len(self._pending))
        return entry

    def _expire(self, request_id: str) -> None:
        entry = self._claim(request_id)
        if entry is None:
            return

        if entry.task is not None:
            entry.task.cancel()
        logger.info(
            "interaction_timed_out",
            request_id=request_id,
            timeout_ms=entry.request.timeout_ms,
        )
        self._settle(
            entry,
            "timeout",
            result=InteractionResult(id=request_id, confirmed=False, timed_out=True),
        )

    def _on_handler_done(self, request_id: str, task: asyncio.Task[Any]) -> None:
        entry = self._claim(request_id)

        if task.cancelled():
            if entry is not None:
                self._fail(entry, InteractionHandlerError(
                    f"Interaction handler for {request_id} was cancelled",
                    request_id=request_id,
                ))
            return

        exc = task.exception()
        if entry is None:
            logger.debug(
                "late_interaction_response_discarded",
                request_id=request_id,
                failed=exc is not None,
            )
            return

        if exc is not None:
            self._fail(entry, self._handler_error(request_id, exc))
            return

        try:
            raw = task.result()
            outcome = (
                raw if isinstance(raw, InteractionOutcome)
                else InteractionOutcome.model_validate(raw)
            )
        except ValidationError as invalid:
            self._fail(entry, self._handler_error(request_id, invalid))
            return

        self._settle(
            entry,
            "confirmed" if outcome.confirmed else "declined",
            result=InteractionResult(
                id=request_id,
                confirmed=outcome.confirmed,
                value=outcome.value,
                timed_out=False,
            ),
        )

    def _handler_error(self, request_id: str, exc: BaseException) -> InteractionHandlerError:
        error = InteractionHandlerError(
            f"Interaction handler failed for {request_id}: {exc}",
            request_id=request_id,
        )
        error.__cause__ = exc
        return error

    def _fail(self, entry: _PendingInteraction, error: InteractionHandlerError) -> None:
        logger.error(
            "interaction_handler_failed",
            request_id=entry.request.id,
            error=str(error.__cause__ or error),
        )
        if not entry.future.done():
            entry.future.set_exception(error)
        self._record(entry, "handler_error")

    def _settle(
        self,
        entry: _PendingInteraction,
        outcome: str,
        *,
        result: InteractionResult,
    ) -> None:
        # The future is already cancelled when the awaiting caller went away.
        if entry.future.done():
            return
        entry.future.set_result(result)
        self._record(entry, outcome)
        logger.info(
            "interaction_resolved",
            request_id=entry.request.id,
            outcome=outcome,
            confirmed=result.confirmed,
            timed_out=result.timed_out,
        )

    def _record(self, entry: _PendingInteraction, outcome: str) -> None:
        request_type = entry.request.type.value
        INTERACTIONS.labels(type=request_type, outcome=outcome).inc()
        INTERACTION_LATENCY.labels(type=request_type).observe(
            entry.future.get_loop().time() - entry.submitted_at
        )

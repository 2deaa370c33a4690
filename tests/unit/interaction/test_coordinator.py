"""Tests for InteractionCoordinator."""

import asyncio

import pytest

from conductor.config.models import InteractionConfig
from conductor.errors import ConfigurationError, InteractionHandlerError
from conductor.interaction import (
    InteractionCoordinator,
    InteractionOption,
    InteractionOutcome,
    InteractionRequest,
    InteractionType,
)


def answer(confirmed: bool, value=None, delay: float = 0.0):
    """Handler that answers after an optional delay and records what it saw."""
    seen: list[InteractionRequest] = []

    async def handler(request: InteractionRequest) -> InteractionOutcome:
        seen.append(request)
        if delay:
            await asyncio.sleep(delay)
        return InteractionOutcome(confirmed=confirmed, value=value)

    handler.seen = seen
    return handler


async def never_answers(request: InteractionRequest) -> InteractionOutcome:
    await asyncio.Event().wait()
    raise AssertionError("unreachable")


async def wait_until_pending(coordinator: InteractionCoordinator) -> InteractionRequest:
    for _ in range(100):
        pending = coordinator.list_pending()
        if pending:
            return pending[0]
        await asyncio.sleep(0)
    raise AssertionError("request never became pending")


@pytest.fixture
def coordinator() -> InteractionCoordinator:
    return InteractionCoordinator()


class TestHandlerConfiguration:
    """Tests for handler registration."""

    @pytest.mark.asyncio
    async def test_request_without_handler_fails(self, coordinator) -> None:
        with pytest.raises(ConfigurationError):
            await coordinator.request_confirmation("T", "M")

        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_handler_set_through_constructor(self) -> None:
        coordinator = InteractionCoordinator(handler=answer(True, True))

        assert await coordinator.request_confirmation("T", "M") is True


class TestConvenienceRequests:
    """Tests for confirmation, input, choice and progress requests."""

    @pytest.mark.asyncio
    async def test_confirmation_request_shape(self, coordinator) -> None:
        handler = answer(True, True)
        coordinator.set_handler(handler)

        assert await coordinator.request_confirmation("Navigate", "Open page?") is True

        request = handler.seen[0]
        assert request.type == InteractionType.CONFIRMATION
        assert request.title == "Navigate"
        assert request.timeout_ms == 30000
        assert [option.value for option in request.options] == [True, False]

    @pytest.mark.asyncio
    async def test_confirmation_requires_confirm_value(self, coordinator) -> None:
        coordinator.set_handler(answer(True, False))
        assert await coordinator.request_confirmation("T", "M") is False

        coordinator.set_handler(answer(False, True))
        assert await coordinator.request_confirmation("T", "M") is False

    @pytest.mark.asyncio
    async def test_input_returns_value(self, coordinator) -> None:
        handler = answer(True, "5")
        coordinator.set_handler(handler)

        value = await coordinator.request_input("Duration", "Seconds?", default_value="3")

        assert value == "5"
        assert handler.seen[0].default_value == "3"
        assert handler.seen[0].timeout_ms == 60000

    @pytest.mark.asyncio
    async def test_input_empty_or_declined_is_none(self, coordinator) -> None:
        coordinator.set_handler(answer(True, ""))
        assert await coordinator.request_input("T", "M") is None

        coordinator.set_handler(answer(False, "typed"))
        assert await coordinator.request_input("T", "M") is None

    @pytest.mark.asyncio
    async def test_choice_returns_selected_value(self, coordinator) -> None:
        options = [
            InteractionOption(id="slow", label="Slow", value="slow"),
            InteractionOption(id="fast", label="Fast", value="fast", style="primary"),
        ]
        handler = answer(True, "fast")
        coordinator.set_handler(handler)

        assert await coordinator.request_choice("Speed", "Pick", options) == "fast"
        assert handler.seen[0].options == options

    @pytest.mark.asyncio
    async def test_choice_declined_is_none(self, coordinator) -> None:
        coordinator.set_handler(answer(False, "fast"))
        assert await coordinator.request_choice("Speed", "Pick", []) is None

    @pytest.mark.asyncio
    async def test_progress_completes_after_duration(self, coordinator) -> None:
        coordinator.set_handler(never_answers)

        result = await asyncio.wait_for(
            coordinator.show_progress("Scrolling", "...", duration_ms=20), timeout=1
        )

        assert result is None
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_defaults_come_from_config(self) -> None:
        handler = answer(True, True)
        coordinator = InteractionCoordinator(
            config=InteractionConfig(confirmation_timeout_ms=15000), handler=handler
        )

        await coordinator.request_confirmation("T", "M")

        assert handler.seen[0].timeout_ms == 15000

    @pytest.mark.asyncio
    async def test_dict_outcome_is_accepted(self, coordinator) -> None:
        async def handler(request):
            return {"confirmed": True, "value": "dict"}

        coordinator.set_handler(handler)

        assert await coordinator.request_input("T", "M") == "dict"


class TestSubmit:
    """Tests for exactly-once resolution in submit."""

    @pytest.mark.asyncio
    async def test_handler_answer_resolves(self, coordinator) -> None:
        coordinator.set_handler(answer(True, 42))
        request = InteractionRequest(
            type=InteractionType.INPUT, title="T", message="M", timeout_ms=1000
        )

        result = await coordinator.submit(request)

        assert result.id == request.id
        assert result.confirmed is True
        assert result.value == 42
        assert result.timed_out is False
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_confirmation_times_out(self, coordinator) -> None:
        """A handler that never answers resolves as timed out after the deadline."""
        coordinator.set_handler(never_answers)
        loop = asyncio.get_running_loop()
        started = loop.time()
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION, title="T", message="M", timeout_ms=100
        )

        result = await coordinator.submit(request)

        assert result.confirmed is False
        assert result.timed_out is True
        assert loop.time() - started >= 0.09
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_request_confirmation_timeout_is_false(self, coordinator) -> None:
        coordinator.set_handler(never_answers)

        assert await coordinator.request_confirmation("T", "M", 100) is False

    @pytest.mark.asyncio
    async def test_late_answer_does_not_override_timeout(self, coordinator) -> None:
        """A handler that ignores cancellation and answers late is discarded."""
        finished = asyncio.Event()

        async def stubborn(request):
            try:
                await asyncio.sleep(0.1)
            except asyncio.CancelledError:
                pass
            finished.set()
            return InteractionOutcome(confirmed=True, value=True)

        coordinator.set_handler(stubborn)
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION, title="T", message="M", timeout_ms=20
        )

        result = await coordinator.submit(request)
        await asyncio.wait_for(finished.wait(), timeout=1)
        await asyncio.sleep(0)

        assert result.timed_out is True
        assert result.confirmed is False
        assert coordinator.cancel(request.id) is False

    @pytest.mark.asyncio
    async def test_no_deadline_waits_for_handler(self, coordinator) -> None:
        coordinator.set_handler(answer(True, "late", delay=0.05))
        request = InteractionRequest(
            type=InteractionType.INPUT, title="T", message="M", timeout_ms=0
        )

        result = await coordinator.submit(request)

        assert result.timed_out is False
        assert result.value == "late"

    @pytest.mark.asyncio
    async def test_handler_failure_propagates(self, coordinator) -> None:
        async def broken(request):
            raise RuntimeError("dialog crashed")

        coordinator.set_handler(broken)

        with pytest.raises(InteractionHandlerError) as exc_info:
            await coordinator.request_confirmation("T", "M", 1000)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.request_id.startswith("interaction_")
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_invalid_handler_answer_is_a_failure(self, coordinator) -> None:
        async def malformed(request):
            return {"value": "no confirmed flag"}

        coordinator.set_handler(malformed)

        with pytest.raises(InteractionHandlerError):
            await coordinator.request_input("T", "M")

    @pytest.mark.asyncio
    async def test_handler_failure_after_timeout_is_ignored(self, coordinator) -> None:
        async def fails_late(request):
            try:
                await asyncio.sleep(0.1)
            except asyncio.CancelledError:
                pass
            raise RuntimeError("too late")

        coordinator.set_handler(fails_late)
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION, title="T", message="M", timeout_ms=20
        )

        result = await coordinator.submit(request)
        await asyncio.sleep(0.01)

        assert result.timed_out is True

    @pytest.mark.asyncio
    async def test_duplicate_pending_id_rejected(self, coordinator) -> None:
        coordinator.set_handler(never_answers)
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION, title="T", message="M", timeout_ms=0
        )
        task = asyncio.create_task(coordinator.submit(request))
        await wait_until_pending(coordinator)

        with pytest.raises(ValueError):
            await coordinator.submit(request)

        coordinator.cancel(request.id)
        await task

    @pytest.mark.asyncio
    async def test_concurrent_requests_have_independent_deadlines(
        self, coordinator
    ) -> None:
        async def handler(request):
            if request.title == "fast":
                return InteractionOutcome(confirmed=True, value=True)
            await asyncio.Event().wait()

        coordinator.set_handler(handler)

        slow, fast = await asyncio.gather(
            coordinator.request_confirmation("slow", "M", 50),
            coordinator.request_confirmation("fast", "M", 5000),
        )

        assert slow is False
        assert fast is True
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_caller_cancellation_withdraws_request(self, coordinator) -> None:
        handler_cancelled = asyncio.Event()

        async def handler(request):
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                handler_cancelled.set()
                raise

        coordinator.set_handler(handler)
        task = asyncio.create_task(coordinator.request_confirmation("T", "M", 0))
        await wait_until_pending(coordinator)
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        await asyncio.wait_for(handler_cancelled.wait(), timeout=1)
        assert coordinator.list_pending() == []


class TestCancel:
    """Tests for explicit cancellation."""

    @pytest.mark.asyncio
    async def test_cancel_pending_request(self, coordinator) -> None:
        coordinator.set_handler(never_answers)
        request = InteractionRequest(
            type=InteractionType.CONFIRMATION, title="T", message="M", timeout_ms=5000
        )
        task = asyncio.create_task(coordinator.submit(request))
        pending = await wait_until_pending(coordinator)

        assert pending.id == request.id
        assert coordinator.cancel(request.id) is True

        result = await task
        assert result.confirmed is False
        assert result.timed_out is False
        assert coordinator.list_pending() == []

    @pytest.mark.asyncio
    async def test_cancel_after_resolution_returns_false(self, coordinator) -> None:
        coordinator.set_handler(answer(True, "kept"))
        request = InteractionRequest(
            type=InteractionType.INPUT, title="T", message="M", timeout_ms=1000
        )

        result = await coordinator.submit(request)

        assert coordinator.cancel(request.id) is False
        assert result.confirmed is True
        assert result.value == "kept"

    def test_cancel_unknown_id(self, coordinator) -> None:
        assert coordinator.cancel("interaction_missing") is False

    @pytest.mark.asyncio
    async def test_cancel_all(self, coordinator) -> None:
        coordinator.set_handler(never_answers)
        tasks = [
            asyncio.create_task(coordinator.request_confirmation(f"T{i}", "M", 0))
            for i in range(3)
        ]
        for _ in range(100):
            if len(coordinator.list_pending()) == 3:
                break
            await asyncio.sleep(0)

        assert coordinator.cancel_all() == 3

        assert await asyncio.gather(*tasks) == [False, False, False]
        assert coordinator.cancel_all() == 0

"""Human interaction request and result models."""

from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

OptionStyle = Literal["primary", "secondary", "danger"]


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


def new_request_id() -> str:
    return f"interaction_{uuid4().hex[:16]}"


class InteractionType(StrEnum):
    """What the person is being asked for."""

    CONFIRMATION = "confirmation"
    INPUT = "input"
    CHOICE = "choice"
    PROGRESS = "progress"


class InteractionOption(BaseModel):
    """A selectable answer shown to the person."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    value: Any = None
    style: OptionStyle | None = None


class InteractionRequest(BaseModel):
    """An outstanding ask to a person."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_request_id)
    type: InteractionType
    title: str
    message: str
    options: list[InteractionOption] = Field(default_factory=list)
    default_value: str | None = None
    timeout_ms: int = Field(default=0, ge=0, description="0 means no deadline")


class InteractionOutcome(BaseModel):
    """Raw answer produced by the interaction handler."""

    confirmed: bool
    value: Any = None


class InteractionResult(BaseModel):
    """Final resolution of an interaction request. One per request."""

    model_config = ConfigDict(frozen=True)

    id: str
    confirmed: bool
    value: Any = None
    timed_out: bool = False
    timestamp: datetime = Field(default_factory=utc_now)


InteractionHandler = Callable[
    [InteractionRequest], Awaitable[InteractionOutcome | dict[str, Any]]
]

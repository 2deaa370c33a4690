"""Exception hierarchy for the orchestration engine.

All errors inherit from ConductorError and are scoped to one session or
one interaction request. Unknown sessions are reported through None or
no-op returns rather than exceptions, and an interaction timeout is a
normal InteractionResult with ``timed_out=True``.
"""


class ConductorError(Exception):
    """Base exception for all Conductor errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigurationError(ConductorError):
    """Raised when a required collaborator has not been configured."""


class InteractionHandlerError(ConductorError):
    """Raised when the interaction handler fails while a request is pending.

    The handler's original exception is available as ``__cause__``.
    """

    def __init__(self, message: str, request_id: str) -> None:
        super().__init__(message)
        self.request_id = request_id


class SessionConflictError(ConductorError):
    """Raised when a run targets a session that is still in flight.

    Only raised under the ``reject`` session conflict policy.
    """

    def __init__(self, message: str, session_id: str) -> None:
        super().__init__(message)
        self.session_id = session_id

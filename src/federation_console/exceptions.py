from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class AuthError(ApiError):
    """Authentication failed or session is invalid."""


class PermissionDeniedError(ApiError):
    """The admin role does not allow the operation."""


class NotFoundError(ApiError):
    pass


class BadRequestError(ApiError):
    """400/422 rejected by the backend."""


class ConflictError(ApiError):
    """409 or conflict-style errors."""


class RateLimitError(ApiError):
    """429 throttling error."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class RequestCancelledError(TransportError):
    """A superseded request was dropped before dispatch or after its response."""


@dataclass
class ConsoleError(Exception):
    """Component-local error recorded by the engine instead of being raised."""

    message: str
    code: str = "CONSOLE_ERROR"
    trace_id: str | None = None
    details: object | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_exception(cls, exc: BaseException, fallback: str) -> "ConsoleError":
        if isinstance(exc, ConsoleError):
            return cls(message=exc.message, code=exc.code, trace_id=exc.trace_id, details=exc.details)
        if isinstance(exc, ApiError):
            return cls(
                message=exc.message.strip() or fallback,
                code=exc.code,
                trace_id=exc.trace_id,
                details=exc.details,
            )
        return cls(message=str(exc).strip() or fallback, code=type(exc).__name__.upper())


class FetchError(ConsoleError):
    """List or detail retrieval failed; last-known-good data stays visible."""


class ValidationError(ConsoleError):
    """A local precondition failed before any network call."""


class MutationError(ConsoleError):
    """A bulk or single-entity mutation was rejected by the backend."""


class NotificationError(ConsoleError):
    pass


class ExportError(ConsoleError):
    pass

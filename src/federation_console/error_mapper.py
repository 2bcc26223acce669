from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    BadRequestError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServerError,
)

_BY_STATUS: dict[int, type[ApiError]] = {
    400: BadRequestError,
    401: AuthError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: BadRequestError,
    429: RateLimitError,
}
_DEFAULT_CODES: dict[type[ApiError], str] = {
    AuthError: "UNAUTHORIZED",
    PermissionDeniedError: "FORBIDDEN",
    NotFoundError: "NOT_FOUND",
    ConflictError: "CONFLICT",
    RateLimitError: "RATE_LIMITED",
    ServerError: "SERVER_ERROR",
}


def error_class_for(status_code: int) -> type[ApiError]:
    if status_code >= 500:
        return ServerError
    return _BY_STATUS.get(status_code, ApiError)


def extract_message(payload: Mapping[str, object]) -> str | None:
    """Pull the admin-facing text out of the error bodies the backend sends.

    Tries ``message``, then ``error`` and then ``detail``, which may be a string
    or a list of ``{"msg": ...}`` entries. A list under ``errors`` comes last.
    """
    for key in ("message", "error"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    detail = payload.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail
    for entries in (detail, payload.get("errors")):
        if isinstance(entries, list):
            texts = [_entry_text(entry) for entry in entries]
            joined = "; ".join(text for text in texts if text)
            if joined:
                return joined
    return None


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    payload = payload or {}
    mapped = error_class_for(status_code)
    code = payload.get("code")
    body_trace_id = payload.get("trace_id")
    details = payload.get("details")
    if details is None and isinstance(payload.get("errors"), list):
        details = payload["errors"]
    return mapped(
        code=str(code) if code else _DEFAULT_CODES.get(mapped, "HTTP_ERROR"),
        message=extract_message(payload) or "Request failed",
        details=details,
        trace_id=str(body_trace_id) if body_trace_id is not None else trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def _entry_text(entry: object) -> str | None:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, Mapping):
        text = entry.get("msg") or entry.get("message")
        return str(text) if text else None
    return None

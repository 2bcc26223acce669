from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

# category -> event names it may carry
TELEMETRY_EVENTS: dict[str, frozenset[str]] = {
    "bulk_action": frozenset({"bulk_action_attempt", "bulk_action_result"}),
    "entity_operation": frozenset({"entity_operation_result"}),
    "export": frozenset({"export_result"}),
    "navigation": frozenset({"collection_navigation"}),
    "notification": frozenset({"notification_result"}),
}
TELEMETRY_CATEGORIES = frozenset(TELEMETRY_EVENTS)

# free text and identities typed by admins never leave the console
_FORBIDDEN_CONTEXT_KEYS = frozenset(
    {
        "email",
        "password",
        "phone",
        "full_name",
        "address",
        "token",
        "authorization",
        "subject",
        "body",
        "message",
        "reason",
        "ids",
        "recipients",
        "searchterm",
    }
)
_SCALARS = (str, int, float, bool)


@dataclass(frozen=True)
class TelemetryEvent:
    category: str
    name: str
    domain: str
    action: str
    timestamp_utc: str
    trace_id: str | None = None
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: Mapping[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "category": self.category,
            "name": self.name,
            "domain": self.domain,
            "action": self.action,
            "timestamp_utc": self.timestamp_utc,
        }
        optional = {
            "trace_id": self.trace_id,
            "duration_ms": self.duration_ms,
            "success": self.success,
            "error_code": self.error_code,
            "context": dict(self.context) if self.context else None,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        return payload


def _check_context(context: Mapping[str, Any] | None) -> dict[str, Any] | None:
    if not context:
        return None
    illegal = sorted(key for key in context if key.lower() in _FORBIDDEN_CONTEXT_KEYS)
    if illegal:
        raise ValueError(f"Context keys not allowed in telemetry: {illegal}")
    nested = sorted(key for key, value in context.items() if value is not None and not isinstance(value, _SCALARS))
    if nested:
        raise ValueError(f"Telemetry context values must be scalars: {nested}")
    return dict(context)


def build_event(
    *,
    category: str,
    name: str,
    module: str,
    action: str,
    allowed_actions: Collection[str] | None = None,
    trace_id: str | None = None,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    """Build one console event.

    ``module`` is the domain name. When ``allowed_actions`` is given the action
    must belong to it, so events cannot name an action the domain lacks.
    """
    names = TELEMETRY_EVENTS.get(category)
    if names is None:
        raise ValueError(f"Unsupported telemetry category: {category}")
    if name not in names:
        raise ValueError(f"Event {name!r} does not belong to category {category!r}")
    if allowed_actions is not None and action not in allowed_actions:
        raise ValueError(f"Action {action!r} is not defined for {module}")
    return TelemetryEvent(
        category=category,
        name=name,
        domain=module,
        action=action,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        trace_id=trace_id,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=_check_context(context),
    )

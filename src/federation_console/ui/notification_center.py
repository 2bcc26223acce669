from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..exceptions import ApiError, ConsoleError
from ..ui_errors import to_user_facing_error

TOAST_LEVELS = ("info", "success", "warning", "error")


@dataclass
class NotificationCenter:
    items: list[dict[str, Any]] = field(default_factory=list)

    def toast(
        self,
        *,
        level: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if level not in TOAST_LEVELS:
            raise ValueError(f"Unsupported toast level: {level}")
        payload = {"level": level, "message": message, "trace_id": trace_id, "details": details or {}}
        self.items.append(payload)
        return payload

    def toast_error(self, exc: ApiError | ConsoleError) -> dict[str, Any]:
        facing = to_user_facing_error(exc)
        details = {"code": exc.code}
        if facing.technical_details:
            details["technical"] = facing.technical_details
        return self.toast(level="error", message=facing.message, trace_id=facing.trace_id, details=details)

    @property
    def latest(self) -> dict[str, Any] | None:
        return self.items[-1] if self.items else None

    def render(self) -> dict[str, Any]:
        return {"count": len(self.items), "messages": list(self.items)}

    def clear(self) -> None:
        self.items.clear()

from __future__ import annotations

from enum import Enum
from typing import Any

from ..exceptions import ConsoleError, NotificationError, ValidationError
from ..logger import get_logger, log_action
from ..telemetry import TelemetryLogger, build_event
from ..ui.notification_center import NotificationCenter
from .domain import DomainSpec, NotifyScope
from .gateway import CollectionGateway, NotificationTarget
from .runner import Outcome, TaskRunner
from .selection import SelectionSet

logger = get_logger("federation_console.notifications")


class DispatchState(str, Enum):
    IDLE = "idle"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class NotificationDispatcher:
    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        selection: SelectionSet,
        *,
        telemetry: TelemetryLogger | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self._selection = selection
        self._telemetry = telemetry
        self._notifications = notifications
        self.state = DispatchState.IDLE
        self.error: ConsoleError | None = None
        self.last_outcome: DispatchState | None = None

    @property
    def is_sending(self) -> bool:
        return self.state is DispatchState.EXECUTING

    def send_to_selection(self, subject: str, body: str) -> bool:
        return self.send(NotificationTarget.for_ids(self._selection.ids), subject, body)

    def send(self, target: NotificationTarget, subject: str, body: str) -> bool:
        """Dispatch one message; returns False when refused or invalid.

        Validation failures are recorded on ``error`` and never reach the backend.
        A successful send does not refetch, since entity state is unchanged.
        """
        if self.is_sending:
            log_action(logger, self.domain.name, "notify", "refused", reason="executing")
            return False
        try:
            subject, body = self._validate(target, subject, body)
        except ValidationError as exc:
            self.error = exc
            log_action(logger, self.domain.name, "notify", "rejected", code=exc.code)
            return False

        self.state = DispatchState.EXECUTING
        self.error = None
        recipients = sorted(target.recipients)
        log_action(
            logger,
            self.domain.name,
            "notify",
            "started",
            entity_id=target.entity_id,
            id_count=len(target.ids),
            recipients=recipients,
        )
        self._runner.submit(
            lambda: self._gateway.notify(target, subject=subject, message=body),
            lambda outcome: self._complete(target, outcome),
        )
        return True

    def _validate(self, target: NotificationTarget, subject: str, body: str) -> tuple[str, str]:
        scope = self.domain.notify_scope
        if scope is NotifyScope.NONE:
            raise ValidationError(message=f"Notifications are not available for {self.domain.label}", code="NOTIFY_UNSUPPORTED")
        subject = (subject or "").strip()
        body = (body or "").strip()
        if not subject:
            raise ValidationError(message="Subject is required", code="SUBJECT_REQUIRED")
        if not body:
            raise ValidationError(message="Message body is required", code="BODY_REQUIRED")
        if target.is_empty:
            raise ValidationError(message="Choose at least one recipient", code="NO_RECIPIENTS")
        if scope is NotifyScope.SELECTION:
            if target.recipients or target.entity_id is not None:
                raise ValidationError(
                    message=f"{self.domain.label.capitalize()} are notified by explicit selection only",
                    code="UNSUPPORTED_TARGET",
                )
            return subject, body

        if target.ids:
            raise ValidationError(
                message=f"Notify one {self.domain.label} at a time by recipient class",
                code="UNSUPPORTED_TARGET",
            )
        if target.entity_id is None:
            raise ValidationError(message=f"Choose which {self.domain.label} to notify about", code="ENTITY_REQUIRED")
        unknown = sorted(target.recipients - self.domain.recipient_classes)
        if unknown:
            raise ValidationError(
                message=f"Unknown recipient classes for {self.domain.label}: {', '.join(unknown)}",
                code="UNKNOWN_RECIPIENTS",
                details={"allowed": sorted(self.domain.recipient_classes)},
            )
        return subject, body

    def _complete(self, target: NotificationTarget, outcome: Outcome[dict[str, Any]]) -> None:
        context = {"id_count": len(target.ids), "recipient_classes": len(target.recipients)}
        try:
            if outcome.ok:
                self.state = DispatchState.SUCCEEDED
                log_action(logger, self.domain.name, "notify", "success", entity_id=target.entity_id, **context)
                self._emit(success=True, context=context)
                if self._notifications is not None:
                    self._notifications.toast(level="success", message="Notification sent")
            else:
                self.state = DispatchState.FAILED
                failure = NotificationError.from_exception(outcome.error or RuntimeError(), "Failed to send notification")
                self.error = failure
                log_action(logger, self.domain.name, "notify", "error", failure.trace_id, code=failure.code)
                self._emit(success=False, trace_id=failure.trace_id, error_code=failure.code)
                if self._notifications is not None:
                    self._notifications.toast_error(failure)
        finally:
            self.last_outcome = self.state
            self.state = DispatchState.IDLE

    def _emit(self, **fields: Any) -> None:
        if self._telemetry is None:
            return
        self._telemetry.emit(
            build_event(category="notification", name="notification_result", module=self.domain.name, action="notify", **fields)
        )

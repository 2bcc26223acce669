from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

from ..exceptions import ConsoleError, FetchError, MutationError, ValidationError
from ..logger import get_logger, log_action
from ..telemetry import TelemetryLogger, build_event
from ..ui.notification_center import NotificationCenter
from .actions import EntityOperation
from .domain import DomainSpec
from .gateway import CollectionGateway
from .runner import Outcome, TaskRunner

logger = get_logger("federation_console.operations")


class OperationRunner:
    """Runs a domain's single-entity operations, one at a time.

    Read operations (reports, analytics) leave their payload on ``result``.
    Mutating ones (verification, premium) call ``on_mutated`` with the entity id
    so the owner can refresh what it shows.
    """

    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        *,
        on_mutated: Callable[[int], None] | None = None,
        telemetry: TelemetryLogger | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self._on_mutated = on_mutated
        self._telemetry = telemetry
        self._notifications = notifications
        self.busy = False
        self.error: ConsoleError | None = None
        self.result: Any = None
        self.last_operation: str | None = None

    @property
    def available(self) -> tuple[str, ...]:
        return tuple(operation.name for operation in self.domain.operations)

    def run(self, name: str, entity_id: int, values: Mapping[str, Any] | None = None) -> bool:
        if self.busy:
            log_action(logger, self.domain.name, name, "refused", reason="busy")
            return False
        try:
            operation = self.domain.operation(name)
            body, params = operation.prepare(values)
        except ValidationError as exc:
            self.error = exc
            log_action(logger, self.domain.name, name, "rejected", code=exc.code)
            return False

        self.busy = True
        self.error = None
        self.result = None
        self.last_operation = name
        log_action(logger, self.domain.name, name, "started", entity_id=entity_id)
        self._runner.submit(
            lambda: self._gateway.run_operation(entity_id, operation, body=body, params=params),
            lambda outcome: self._complete(operation, entity_id, outcome),
        )
        return True

    def _complete(self, operation: EntityOperation, entity_id: int, outcome: Outcome[Any]) -> None:
        try:
            if outcome.ok:
                self.result = outcome.value
                log_action(logger, self.domain.name, operation.name, "success", entity_id=entity_id)
                self._emit(operation, success=True)
                if operation.mutates:
                    if self._notifications is not None:
                        self._notifications.toast(level="success", message=f"{operation.label}: #{entity_id} updated")
                    if self._on_mutated is not None:
                        self._on_mutated(entity_id)
            else:
                error_type = MutationError if operation.mutates else FetchError
                failure = error_type.from_exception(outcome.error or RuntimeError(), f"Failed to {operation.label.lower()}")
                self.error = failure
                log_action(logger, self.domain.name, operation.name, "error", failure.trace_id, code=failure.code)
                self._emit(operation, success=False, trace_id=failure.trace_id, error_code=failure.code)
                if self._notifications is not None:
                    self._notifications.toast_error(failure)
        finally:
            self.busy = False

    def _emit(self, operation: EntityOperation, **fields: Any) -> None:
        if self._telemetry is None:
            return
        self._telemetry.emit(
            build_event(
                category="entity_operation",
                name="entity_operation_result",
                module=self.domain.name,
                action=operation.name,
                allowed_actions=self.available,
                **fields,
            )
        )

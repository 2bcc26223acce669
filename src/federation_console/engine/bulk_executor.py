from __future__ import annotations

import time
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable

from ..exceptions import ConsoleError, MutationError, ValidationError
from ..logger import get_logger, log_action
from ..telemetry import TelemetryLogger, build_event
from ..ui.notification_center import NotificationCenter
from .actions import BulkMutationRequest
from .collection_store import CollectionStore
from .domain import DomainSpec
from .filter_state import FilterState
from .gateway import CollectionGateway
from .runner import Outcome, TaskRunner
from .selection import SelectionSet

logger = get_logger("federation_console.bulk")


class BulkActionState(str, Enum):
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    EXECUTING = "executing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class BulkActionExecutor:
    """Confirmation-gated bulk mutation over the current selection.

    ``choose`` snapshots the selected ids, ``confirm`` validates the typed
    payload and dispatches exactly one mutation. Success refetches the
    collection with the filters active at completion time and then clears the
    selection. Failure records a ``MutationError`` and leaves both untouched.
    Either way the machine ends in ``IDLE``; retrying means choosing again.
    """

    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        store: CollectionStore,
        selection: SelectionSet,
        current_filters: Callable[[], FilterState],
        *,
        telemetry: TelemetryLogger | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self._store = store
        self._selection = selection
        self._current_filters = current_filters
        self._telemetry = telemetry
        self._notifications = notifications
        self.state = BulkActionState.IDLE
        self.error: ConsoleError | None = None
        self.last_outcome: BulkActionState | None = None
        self.pending_action: str | None = None
        self.pending_targets: frozenset[int] = frozenset()
        self._pending_payload: dict[str, Any] = {}
        self._listeners: list[Callable[["BulkActionExecutor"], None]] = []

    @property
    def is_executing(self) -> bool:
        return self.state is BulkActionState.EXECUTING

    @property
    def can_choose(self) -> bool:
        return not self.is_executing and not self._selection.is_empty

    @property
    def pending_requires_reason(self) -> bool:
        if self.pending_action is None:
            return False
        return self.domain.actions.requires_reason(self.pending_action)

    def subscribe(self, listener: Callable[["BulkActionExecutor"], None]) -> None:
        self._listeners.append(listener)

    def choose(self, action_id: str, payload: Mapping[str, Any] | None = None) -> bool:
        if self.is_executing:
            log_action(logger, self.domain.name, action_id, "refused", reason="executing")
            return False
        if self._selection.is_empty:
            log_action(logger, self.domain.name, action_id, "refused", reason="empty_selection")
            return False
        if action_id not in self.domain.actions:
            log_action(logger, self.domain.name, action_id, "refused", reason="unknown_action")
            return False

        self.state = BulkActionState.AWAITING_CONFIRMATION
        self.pending_action = action_id
        self.pending_targets = self._selection.ids
        self._pending_payload = dict(payload or {})
        self.error = None
        self._notify()
        return True

    def confirm(self, payload: Mapping[str, Any] | None = None) -> bool:
        if self.state is not BulkActionState.AWAITING_CONFIRMATION or self.pending_action is None:
            return False

        action_id = self.pending_action
        merged = {**self._pending_payload, **(payload or {})}
        try:
            parsed = self.domain.actions.parse(action_id, merged)
            request = BulkMutationRequest(action_id=action_id, target_ids=self.pending_targets, payload=parsed)
        except ValidationError as exc:
            self.error = exc
            self._pending_payload = merged
            log_action(logger, self.domain.name, action_id, "rejected", code=exc.code)
            self._notify()
            return False

        self.state = BulkActionState.EXECUTING
        self.error = None
        self._emit("bulk_action_attempt", action_id, context={"target_count": len(request.target_ids)})
        log_action(logger, self.domain.name, action_id, "started", target_count=len(request.target_ids))
        self._notify()

        started = time.monotonic()
        self._runner.submit(
            lambda: self._gateway.bulk_update(request),
            lambda outcome: self._complete(request, outcome, started),
        )
        return True

    def cancel(self) -> bool:
        if self.state is not BulkActionState.AWAITING_CONFIRMATION:
            return False
        self.error = None
        self._reset()
        self._notify()
        return True

    def _complete(self, request: BulkMutationRequest, outcome: Outcome[dict[str, Any]], started: float) -> None:
        duration_ms = int((time.monotonic() - started) * 1000)
        label = self.domain.actions.label(request.action_id)
        try:
            if outcome.ok:
                self.state = BulkActionState.SUCCEEDED
                trace_id = _trace_id(outcome.value)
                log_action(logger, self.domain.name, request.action_id, "success", trace_id, updated=len(request.target_ids))
                self._emit("bulk_action_result", request.action_id, trace_id=trace_id, duration_ms=duration_ms, success=True)
                self._store.fetch(self._current_filters(), self._store.pagination.page)
                self._selection.clear()
                if self._notifications is not None:
                    self._notifications.toast(
                        level="success",
                        message=f"{label}: {len(request.target_ids)} {self.domain.label} updated",
                        trace_id=trace_id,
                    )
            else:
                self.state = BulkActionState.FAILED
                failure = MutationError.from_exception(
                    outcome.error or RuntimeError(),
                    f"Failed to {label.lower()} {self.domain.label}",
                )
                self.error = failure
                log_action(logger, self.domain.name, request.action_id, "error", failure.trace_id, code=failure.code)
                self._emit(
                    "bulk_action_result",
                    request.action_id,
                    trace_id=failure.trace_id,
                    duration_ms=duration_ms,
                    success=False,
                    error_code=failure.code,
                )
                if self._notifications is not None:
                    self._notifications.toast_error(failure)
        finally:
            self.last_outcome = self.state
            self._reset()
            self._notify()

    def _reset(self) -> None:
        self.state = BulkActionState.IDLE
        self.pending_action = None
        self.pending_targets = frozenset()
        self._pending_payload = {}

    def _emit(self, name: str, action_id: str, **fields: Any) -> None:
        if self._telemetry is None:
            return
        self._telemetry.emit(
            build_event(
                category="bulk_action",
                name=name,
                module=self.domain.name,
                action=action_id,
                allowed_actions=self.domain.actions.action_ids,
                **fields,
            )
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)


def _trace_id(value: object) -> str | None:
    if isinstance(value, Mapping):
        trace_id = value.get("trace_id")
        return str(trace_id) if trace_id else None
    return None

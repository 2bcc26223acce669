from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..exceptions import ConsoleError, FetchError, MutationError, ValidationError
from ..logger import get_logger, log_action
from ..telemetry import TelemetryLogger, build_event
from ..ui.notification_center import NotificationCenter
from ..ui.view_state import CollectionViewState, resolve_view_state
from ..ui_errors import to_user_facing_error
from .bulk_executor import BulkActionExecutor
from .collection_store import CollectionStore
from .domain import DomainSpec
from .exports import DirectorySink, ExportRequestor, ExportSink
from .filter_state import FilterState
from .gateway import CollectionGateway
from .notifications import NotificationDispatcher
from .operations import OperationRunner
from .pagination import next_page, prev_page
from .runner import Outcome, TaskRunner
from .selection import SelectionSet

logger = get_logger("federation_console.console")


class CollectionConsole:
    """All engine state for one entity domain.

    Each domain view owns exactly one console; nothing here is shared between
    domains. Components talk to each other only through their public methods.
    """

    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        *,
        page_size: int = 50,
        sink: ExportSink | None = None,
        telemetry: TelemetryLogger | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self._telemetry = telemetry
        self.notifications = notifications if notifications is not None else NotificationCenter()
        self.filters: FilterState = domain.empty_filters()
        self.store = CollectionStore(domain, gateway, runner, page_size=page_size)
        self.selection = SelectionSet()
        self.executor = BulkActionExecutor(
            domain,
            gateway,
            runner,
            self.store,
            self.selection,
            lambda: self.filters,
            telemetry=telemetry,
            notifications=self.notifications,
        )
        self.notifier = NotificationDispatcher(
            domain,
            gateway,
            runner,
            self.selection,
            telemetry=telemetry,
            notifications=self.notifications,
        )
        self.exporter = ExportRequestor(
            domain,
            gateway,
            runner,
            sink or DirectorySink(Path("exports")),
            telemetry=telemetry,
            notifications=self.notifications,
        )
        self.operations = OperationRunner(
            domain,
            gateway,
            runner,
            on_mutated=self._entity_changed,
            telemetry=telemetry,
            notifications=self.notifications,
        )
        self.detail: dict[str, Any] | None = None
        self.detail_error: FetchError | None = None
        self.detail_loading = False
        self.status_updating = False
        self.status_error: ConsoleError | None = None
        self._detail_sequence = 0

    # collection

    def mount(self) -> int:
        self.filters = self.domain.empty_filters()
        self._navigation("mount")
        return self.store.fetch(self.filters, 1)

    def update_filters(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> int | None:
        """Merge filter edits and refetch from page 1; unchanged filters do not refetch."""
        updated = self.filters.merge(changes, **kwargs)
        if updated == self.filters:
            return None
        self.filters = updated
        self._navigation("filter", active=len(updated.as_query()))
        return self.store.fetch(updated, 1)

    def clear_filters(self) -> int | None:
        if self.filters.is_clear:
            return None
        self.filters = self.filters.cleared()
        self._navigation("clear_filters")
        return self.store.fetch(self.filters, 1)

    def change_page(self, page: int) -> int | None:
        if not self.store.pagination.accepts(page):
            log_action(logger, self.domain.name, "change_page", "refused", page=page)
            return None
        self._navigation("page", page=page)
        return self.store.fetch(self.filters, page)

    def next_page(self) -> int | None:
        target = next_page(self.store.pagination)
        return self.change_page(target) if target is not None else None

    def prev_page(self) -> int | None:
        target = prev_page(self.store.pagination)
        return self.change_page(target) if target is not None else None

    def refresh(self) -> int:
        return self.store.fetch(self.filters, self.store.pagination.page)

    def retry(self) -> int | None:
        return self.store.retry()

    # selection

    def select_all_on_page(self) -> None:
        self.selection.replace_with_entire_collection(self.store)

    @property
    def visible_selection(self) -> list[int]:
        return self.selection.visible_in(self.store)

    # bulk, notify, export

    def choose_bulk_action(self, action_id: str, payload: Mapping[str, Any] | None = None) -> bool:
        return self.executor.choose(action_id, payload)

    def confirm_bulk_action(self, payload: Mapping[str, Any] | None = None) -> bool:
        return self.executor.confirm(payload)

    def cancel_bulk_action(self) -> bool:
        return self.executor.cancel()

    def export(self, export_format: str) -> bool:
        return self.exporter.export(self.filters, export_format)

    # single entity

    def load_detail(self, entity_id: int) -> int:
        self._detail_sequence += 1
        sequence = self._detail_sequence
        self.detail_loading = True
        self.detail_error = None
        self._runner.submit(
            lambda: self._gateway.get_detail(entity_id),
            lambda outcome: self._complete_detail(sequence, entity_id, outcome),
        )
        return sequence

    def close_detail(self) -> None:
        self._detail_sequence += 1
        self.detail = None
        self.detail_error = None
        self.detail_loading = False

    def update_status(self, entity_id: int, status: str, reason: str = "") -> bool:
        if self.status_updating:
            return False
        try:
            cleaned_reason = self._validate_status(status, reason)
        except ValidationError as exc:
            self.status_error = exc
            log_action(logger, self.domain.name, "update_status", "rejected", code=exc.code, status=status)
            return False

        self.status_updating = True
        self.status_error = None
        log_action(logger, self.domain.name, "update_status", "started", entity_id=entity_id, status=status)
        self._runner.submit(
            lambda: self._gateway.update_status(entity_id, status, cleaned_reason),
            lambda outcome: self._complete_status(entity_id, status, outcome),
        )
        return True

    def run_operation(self, name: str, entity_id: int, values: Mapping[str, Any] | None = None) -> bool:
        return self.operations.run(name, entity_id, values)

    @property
    def view_state(self) -> CollectionViewState:
        facing = to_user_facing_error(self.store.error) if self.store.error else None
        return resolve_view_state(
            loading=self.store.is_loading,
            has_data=bool(self.store.items),
            error=facing.message if facing else None,
            trace_id=facing.trace_id if facing else None,
            details=facing.technical_details if facing else None,
        )

    def _validate_status(self, status: str, reason: str) -> str | None:
        if status not in self.domain.statuses:
            raise ValidationError(
                message=f"Unknown {self.domain.label} status: {status}",
                code="UNKNOWN_STATUS",
                details={"allowed": sorted(self.domain.statuses)},
            )
        cleaned = (reason or "").strip()
        if status in self.domain.reason_required_statuses and not cleaned:
            raise ValidationError(message=f"A reason is required to set status {status}", code="REASON_REQUIRED")
        return cleaned or None

    def _complete_detail(self, sequence: int, entity_id: int, outcome: Outcome[dict[str, Any]]) -> None:
        if sequence != self._detail_sequence:
            return
        self.detail_loading = False
        if outcome.ok:
            self.detail = outcome.value
            return
        failure = FetchError.from_exception(outcome.error or RuntimeError(), f"Failed to load {self.domain.label} {entity_id}")
        self.detail_error = failure
        log_action(logger, self.domain.name, "detail", "error", failure.trace_id, entity_id=entity_id, code=failure.code)

    def _complete_status(self, entity_id: int, status: str, outcome: Outcome[dict[str, Any]]) -> None:
        try:
            if outcome.ok:
                log_action(logger, self.domain.name, "update_status", "success", entity_id=entity_id, status=status)
                self.notifications.toast(level="success", message=f"Status changed to {status}")
                self._entity_changed(entity_id)
            else:
                failure = MutationError.from_exception(outcome.error or RuntimeError(), "Failed to update status")
                self.status_error = failure
                log_action(logger, self.domain.name, "update_status", "error", failure.trace_id, code=failure.code)
                self.notifications.toast_error(failure)
        finally:
            self.status_updating = False

    def _entity_changed(self, entity_id: int) -> None:
        self.refresh()
        if self.detail is not None and str(self.detail.get("id")) == str(entity_id):
            self.load_detail(entity_id)

    def _navigation(self, action: str, **context: Any) -> None:
        log_action(logger, self.domain.name, action, "requested", **context)
        if self._telemetry is not None:
            self._telemetry.emit(
                build_event(category="navigation", name="collection_navigation", module=self.domain.name, action=action, context=context or None)
            )

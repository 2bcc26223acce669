from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, Protocol

from ..exceptions import ConsoleError, ExportError, ValidationError
from ..logger import get_logger, log_action
from ..models import EXPORT_FORMATS
from ..telemetry import TelemetryLogger, build_event
from ..ui.notification_center import NotificationCenter
from .domain import DomainSpec
from .filter_state import FilterState
from .gateway import CollectionGateway
from .runner import Outcome, TaskRunner

logger = get_logger("federation_console.exports")


class ExportSink(Protocol):
    def save(self, filename: str, content: bytes) -> Path: ...


@dataclass
class DirectorySink:
    output_dir: Path

    def save(self, filename: str, content: bytes) -> Path:
        destination = Path(self.output_dir)
        destination.mkdir(parents=True, exist_ok=True)
        path = destination / filename
        path.write_bytes(content)
        return path


class ExportRequestor:
    """Asks the backend for a rendered export of the current filters and saves it."""

    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        sink: ExportSink,
        *,
        today: Callable[[], date] = date.today,
        telemetry: TelemetryLogger | None = None,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self._sink = sink
        self._today = today
        self._telemetry = telemetry
        self._notifications = notifications
        self.loading = False
        self.error: ConsoleError | None = None
        self.last_path: Path | None = None

    def export(self, filters: FilterState, export_format: str) -> bool:
        if self.loading:
            log_action(logger, self.domain.name, "export", "refused", reason="loading")
            return False
        if not self.domain.exportable:
            self.error = ValidationError(message=f"Export is not available for {self.domain.label}", code="EXPORT_UNSUPPORTED")
            return False
        if export_format not in EXPORT_FORMATS:
            self.error = ValidationError(
                message=f"Unsupported export format: {export_format}",
                code="UNSUPPORTED_FORMAT",
                details={"allowed": list(EXPORT_FORMATS)},
            )
            return False

        filename = self.domain.export_filename(self._today().isoformat(), export_format)
        query = filters.as_query()
        self.loading = True
        self.error = None
        log_action(logger, self.domain.name, "export", "started", format=export_format)

        def job() -> Path:
            exported = self._gateway.export(query, export_format)
            return self._sink.save(filename, exported.content)

        self._runner.submit(job, lambda outcome: self._complete(export_format, outcome))
        return True

    def _complete(self, export_format: str, outcome: Outcome[Path]) -> None:
        try:
            if outcome.ok:
                self.last_path = outcome.value
                log_action(logger, self.domain.name, "export", "success", format=export_format, path=outcome.value)
                self._emit(export_format, success=True)
                if self._notifications is not None:
                    self._notifications.toast(level="success", message=f"Export saved to {outcome.value}")
            else:
                failure = ExportError.from_exception(outcome.error or RuntimeError(), f"Failed to export {self.domain.label}")
                self.error = failure
                log_action(logger, self.domain.name, "export", "error", failure.trace_id, code=failure.code)
                self._emit(export_format, success=False, trace_id=failure.trace_id, error_code=failure.code)
                if self._notifications is not None:
                    self._notifications.toast_error(failure)
        finally:
            self.loading = False

    def _emit(self, export_format: str, **fields) -> None:
        if self._telemetry is None:
            return
        self._telemetry.emit(
            build_event(
                category="export",
                name="export_result",
                module=self.domain.name,
                action="export",
                context={"format": export_format},
                **fields,
            )
        )

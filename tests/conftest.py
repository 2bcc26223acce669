from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable

import pytest

from federation_console.config import ConsoleConfig
from federation_console.domains import COURTS
from federation_console.engine.actions import BulkMutationRequest, EntityOperation
from federation_console.engine.console import CollectionConsole
from federation_console.engine.domain import DomainSpec
from federation_console.engine.exports import DirectorySink
from federation_console.engine.gateway import ExportFile, ListPage, NotificationTarget
from federation_console.engine.runner import Outcome, run_job
from federation_console.error_mapper import map_error
from federation_console.exceptions import ApiError
from federation_console.models import PageMeta


class ManualRunner:
    """Runs each job on submit but holds its completion until the test releases it."""

    def __init__(self) -> None:
        self.pending: list[tuple[Outcome[Any], Callable[[Outcome[Any]], None]]] = []

    def submit(self, job, on_done) -> None:
        self.pending.append((run_job(job), on_done))

    def complete(self, index: int = 0) -> None:
        outcome, on_done = self.pending.pop(index)
        on_done(outcome)

    def complete_last(self) -> None:
        self.complete(len(self.pending) - 1)

    def complete_all(self) -> None:
        while self.pending:
            self.complete(0)


class FakeGateway:
    """In-memory backend collaborator that records every call."""

    def __init__(self, domain: DomainSpec) -> None:
        self.domain = domain
        self.calls: list[tuple[str, Any]] = []
        self.pages: list[list[dict[str, Any]]] = []
        self.total: int | None = None
        self.stats: dict[str, Any] = {}
        self.failures: dict[str, Exception] = {}
        self.detail: dict[str, Any] = {"id": 1, "status": "pending"}
        self.export_content = b"exported"
        self.operation_result: Any = {"success": True}

    def calls_for(self, operation: str) -> list[Any]:
        return [args for name, args in self.calls if name == operation]

    def _maybe_fail(self, operation: str) -> None:
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def list_page(self, query: Mapping[str, str], *, page: int, page_size: int, cancel_check=None) -> ListPage:
        self.calls.append(("list_page", {"query": dict(query), "page": page, "page_size": page_size}))
        self._maybe_fail("list_page")
        rows = self.pages.pop(0) if self.pages else []
        total = self.total if self.total is not None else len(rows)
        return ListPage(
            items=rows,
            stats=self.domain.stats_model.model_validate(self.stats),
            meta=PageMeta(page=page, page_size=page_size, total=total),
        )

    def get_detail(self, entity_id: int) -> dict[str, Any]:
        self.calls.append(("get_detail", entity_id))
        self._maybe_fail("get_detail")
        return {**self.detail, "id": entity_id}

    def update_status(self, entity_id: int, status: str, reason: str | None = None) -> dict[str, Any]:
        self.calls.append(("update_status", {"id": entity_id, "status": status, "reason": reason}))
        self._maybe_fail("update_status")
        return {"success": True}

    def bulk_update(self, request: BulkMutationRequest) -> dict[str, Any]:
        self.calls.append(("bulk_update", request))
        self._maybe_fail("bulk_update")
        return {"success": True, "updated": len(request.target_ids), "trace_id": "trace-bulk"}

    def export(self, query: Mapping[str, str], export_format: str) -> ExportFile:
        self.calls.append(("export", {"query": dict(query), "format": export_format}))
        self._maybe_fail("export")
        return ExportFile(content=self.export_content, content_type="application/octet-stream")

    def notify(self, target: NotificationTarget, *, subject: str, message: str) -> dict[str, Any]:
        self.calls.append(
            (
                "notify",
                {
                    "ids": sorted(target.ids),
                    "recipients": sorted(target.recipients),
                    "entity_id": target.entity_id,
                    "subject": subject,
                    "message": message,
                },
            )
        )
        self._maybe_fail("notify")
        return {"success": True}

    def run_operation(self, entity_id: int, operation: EntityOperation, *, body=None, params=None) -> Any:
        self.calls.append(("run_operation", {"id": entity_id, "name": operation.name, "body": body, "params": params}))
        self._maybe_fail("run_operation")
        return self.operation_result


def api_error(status_code: int, message: str, code: str = "HTTP_ERROR") -> ApiError:
    return map_error(status_code, {"message": message, "code": code, "trace_id": "trace-err"}, None)


def rows(*ids: int, status: str = "pending") -> list[dict[str, Any]]:
    return [{"id": entity_id, "status": status} for entity_id in ids]


@pytest.fixture
def runner() -> ManualRunner:
    return ManualRunner()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway(COURTS)


@pytest.fixture
def console(gateway: FakeGateway, runner: ManualRunner, tmp_path) -> CollectionConsole:
    return CollectionConsole(COURTS, gateway, runner, page_size=3, sink=DirectorySink(tmp_path / "exports"))


@pytest.fixture
def loaded_console(console: CollectionConsole, gateway: FakeGateway, runner: ManualRunner) -> CollectionConsole:
    gateway.pages.append(rows(10, 11, 12))
    console.mount()
    runner.complete_all()
    return console


@pytest.fixture
def config() -> ConsoleConfig:
    return ConsoleConfig(env_name="test", api_base_url="https://api.example.com", retries=2, retry_backoff_seconds=0)

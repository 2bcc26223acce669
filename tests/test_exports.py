from __future__ import annotations

from datetime import date

from federation_console.domains import COURTS, RESERVATIONS
from federation_console.engine.exports import DirectorySink, ExportRequestor
from federation_console.exceptions import ExportError, ValidationError
from conftest import FakeGateway, api_error


def _requestor(gateway, runner, tmp_path) -> ExportRequestor:
    return ExportRequestor(COURTS, gateway, runner, DirectorySink(tmp_path), today=lambda: date(2024, 3, 9))


def test_export_saves_under_deterministic_name(gateway, runner, tmp_path) -> None:
    requestor = _requestor(gateway, runner, tmp_path)
    gateway.export_content = b"id,name\n1,Centre Court\n"

    assert requestor.export(COURTS.empty_filters().merge(status="pending"), "csv") is True
    assert requestor.loading is True
    runner.complete()

    path = tmp_path / "courts-export-2024-03-09.csv"
    assert requestor.loading is False
    assert requestor.last_path == path
    assert path.read_bytes() == b"id,name\n1,Centre Court\n"
    assert gateway.calls_for("export")[0] == {"query": {"status": "pending"}, "format": "csv"}


def test_failed_pdf_export_touches_nothing_else(loaded_console, gateway, runner) -> None:
    console = loaded_console
    console.selection.add(10)
    gateway.failures["export"] = api_error(500, "PDF renderer crashed")
    list_calls = len(gateway.calls_for("list_page"))

    assert console.export("pdf") is True
    runner.complete()

    assert isinstance(console.exporter.error, ExportError)
    assert console.exporter.error.message == "PDF renderer crashed"
    assert console.exporter.loading is False
    assert console.exporter.last_path is None
    assert console.store.ids == [10, 11, 12]
    assert console.store.error is None
    assert console.selection.ids == frozenset({10})
    assert len(gateway.calls_for("list_page")) == list_calls


def test_second_export_refused_while_loading(gateway, runner, tmp_path) -> None:
    requestor = _requestor(gateway, runner, tmp_path)

    assert requestor.export(COURTS.empty_filters(), "excel") is True
    assert requestor.export(COURTS.empty_filters(), "csv") is False
    assert len(gateway.calls_for("export")) == 1

    runner.complete()
    assert requestor.export(COURTS.empty_filters(), "csv") is True


def test_unknown_format_is_rejected_locally(gateway, runner, tmp_path) -> None:
    requestor = _requestor(gateway, runner, tmp_path)

    assert requestor.export(COURTS.empty_filters(), "docx") is False
    assert isinstance(requestor.error, ValidationError)
    assert requestor.loading is False
    assert gateway.calls_for("export") == []


def test_export_filename_pattern() -> None:
    assert COURTS.export_filename("2024-01-31", "excel") == "courts-export-2024-01-31.excel"


def test_nested_collections_cannot_be_exported(runner, tmp_path) -> None:
    gateway = FakeGateway(RESERVATIONS)
    requestor = ExportRequestor(RESERVATIONS, gateway, runner, DirectorySink(tmp_path))

    assert requestor.export(RESERVATIONS.empty_filters(), "csv") is False
    assert requestor.error.code == "EXPORT_UNSUPPORTED"
    assert gateway.calls_for("export") == []

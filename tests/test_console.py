from __future__ import annotations

from federation_console.exceptions import FetchError, MutationError, ValidationError
from federation_console.ui.view_state import CollectionViewStatus
from conftest import api_error, rows


def test_mount_fetches_first_page_with_empty_filters(console, gateway, runner) -> None:
    console.mount()

    assert gateway.calls_for("list_page") == [{"query": {}, "page": 1, "page_size": 3}]
    assert console.view_state.status is CollectionViewStatus.LOADING


def test_filter_change_resets_to_first_page(console, gateway, runner) -> None:
    gateway.total = 9
    gateway.pages.extend([rows(1, 2, 3), rows(4, 5, 6), rows(7)])
    console.mount()
    runner.complete_all()
    console.next_page()
    runner.complete_all()
    assert console.store.pagination.page == 2

    console.update_filters({"surface": "grass"})

    assert gateway.calls_for("list_page")[-1] == {"query": {"surface": "grass"}, "page": 1, "page_size": 3}


def test_unchanged_filters_do_not_refetch(loaded_console, gateway) -> None:
    calls = len(gateway.calls_for("list_page"))

    assert loaded_console.update_filters(surface="") is None
    assert loaded_console.clear_filters() is None
    assert len(gateway.calls_for("list_page")) == calls


def test_clear_filters_refetches_with_empty_query(loaded_console, gateway) -> None:
    loaded_console.update_filters(owner="club-9", indoor=True)

    loaded_console.clear_filters()

    assert loaded_console.filters.is_clear
    assert gateway.calls_for("list_page")[-1]["query"] == {}


def test_view_state_transitions(console, gateway, runner) -> None:
    gateway.failures["list_page"] = api_error(500, "Database timeout")
    console.mount()
    runner.complete()
    assert console.view_state.status is CollectionViewStatus.FATAL
    assert console.view_state.message == "Database timeout"
    assert console.view_state.details == "HTTP_ERROR"
    assert console.view_state.trace_id == "trace-err"

    del gateway.failures["list_page"]
    console.retry()
    runner.complete()
    assert console.view_state.status is CollectionViewStatus.EMPTY

    gateway.pages.append(rows(1))
    console.refresh()
    runner.complete()
    assert console.view_state.status is CollectionViewStatus.SUCCESS

    gateway.failures["list_page"] = api_error(500, "Database timeout")
    console.refresh()
    runner.complete()
    assert console.view_state.status is CollectionViewStatus.ERROR_WITH_DATA
    assert console.view_state.shows_rows


def test_load_detail_success_and_failure(loaded_console, gateway, runner) -> None:
    loaded_console.load_detail(11)
    assert loaded_console.detail_loading
    runner.complete()
    assert loaded_console.detail == {"id": 11, "status": "pending"}

    gateway.failures["get_detail"] = api_error(404, "Court not found", code="NOT_FOUND")
    loaded_console.load_detail(99)
    runner.complete()

    assert isinstance(loaded_console.detail_error, FetchError)
    assert loaded_console.detail_error.message == "Court not found"
    assert loaded_console.store.error is None
    assert loaded_console.store.ids == [10, 11, 12]


def test_superseded_detail_load_is_ignored(loaded_console, runner) -> None:
    loaded_console.load_detail(10)
    loaded_console.load_detail(12)
    runner.complete(1)
    runner.complete(0)

    assert loaded_console.detail["id"] == 12


def test_update_status_requires_reason_for_rejection(loaded_console, gateway, runner) -> None:
    assert loaded_console.update_status(10, "rejected", "  ") is False

    assert isinstance(loaded_console.status_error, ValidationError)
    assert loaded_console.status_error.code == "REASON_REQUIRED"
    assert gateway.calls_for("update_status") == []
    assert runner.pending == []


def test_update_status_rejects_unknown_status(loaded_console, gateway) -> None:
    assert loaded_console.update_status(10, "demolished") is False
    assert loaded_console.status_error.code == "UNKNOWN_STATUS"


def test_update_status_success_refetches(loaded_console, gateway, runner) -> None:
    calls = len(gateway.calls_for("list_page"))

    assert loaded_console.update_status(10, "rejected", "Failed inspection") is True
    assert loaded_console.status_updating
    runner.complete()

    assert gateway.calls_for("update_status") == [{"id": 10, "status": "rejected", "reason": "Failed inspection"}]
    assert len(gateway.calls_for("list_page")) == calls + 1
    assert loaded_console.status_updating is False
    assert loaded_console.notifications.latest["level"] == "success"


def test_update_status_failure_records_mutation_error(loaded_console, gateway, runner) -> None:
    gateway.failures["update_status"] = api_error(403, "Admins only", code="PERMISSION_DENIED")
    calls = len(gateway.calls_for("list_page"))

    loaded_console.update_status(10, "approved")
    runner.complete()

    assert isinstance(loaded_console.status_error, MutationError)
    assert loaded_console.status_error.message == "Admins only"
    assert loaded_console.status_updating is False
    assert len(gateway.calls_for("list_page")) == calls

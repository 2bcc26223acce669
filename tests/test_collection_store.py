from __future__ import annotations

from federation_console.domains import COURTS
from federation_console.engine.collection_store import CollectionStore, FetchStatusKind
from federation_console.exceptions import FetchError, RequestCancelledError
from conftest import api_error, rows


def _store(gateway, runner) -> CollectionStore:
    return CollectionStore(COURTS, gateway, runner, page_size=3)


def test_fetch_sets_loading_and_applies_result(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.stats = {"totalCourts": 3, "pendingApprovals": 2}
    gateway.pages.append(rows(10, 11, 12))

    store.fetch(COURTS.empty_filters().merge(status="pending"))

    assert store.status.kind is FetchStatusKind.LOADING
    assert store.items == []

    runner.complete()

    assert store.status.kind is FetchStatusKind.IDLE
    assert store.ids == [10, 11, 12]
    assert store.stats.total_courts == 3
    assert store.stats.pending_approvals == 2
    assert store.pagination.total_count == 3
    assert store.has_loaded
    assert gateway.calls_for("list_page")[0] == {"query": {"status": "pending"}, "page": 1, "page_size": 3}


def test_late_stale_result_is_discarded(gateway, runner) -> None:
    store = _store(gateway, runner)
    filters = COURTS.empty_filters()
    gateway.pages.extend([rows(1, 2), rows(7, 8, 9)])

    first = store.fetch(filters.merge(searchTerm="x"))
    second = store.fetch(filters.merge(searchTerm="y"))
    runner.complete(1)
    runner.complete(0)

    assert first < second
    assert store.ids == [7, 8, 9]
    assert store.applied_filters == filters.merge(searchTerm="y")
    assert store.status.kind is FetchStatusKind.IDLE


def test_stale_failure_does_not_set_error(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.failures["list_page"] = api_error(500, "backend down")
    store.fetch(COURTS.empty_filters())
    del gateway.failures["list_page"]
    gateway.pages.append(rows(3))
    store.fetch(COURTS.empty_filters().merge(owner="club-1"))

    runner.complete(1)
    runner.complete(0)

    assert store.error is None
    assert store.ids == [3]


def test_failure_keeps_last_known_good_items_and_surfaces_message(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.stats = {"totalCourts": 2}
    gateway.pages.append(rows(1, 2))
    store.fetch(COURTS.empty_filters())
    runner.complete()

    gateway.failures["list_page"] = api_error(503, "Courts service unavailable")
    store.fetch(COURTS.empty_filters().merge(surface="clay"))
    runner.complete()

    assert store.status.kind is FetchStatusKind.ERROR
    assert store.status.message == "Courts service unavailable"
    assert isinstance(store.error, FetchError)
    assert store.error.trace_id == "trace-err"
    assert store.ids == [1, 2]
    assert store.stats.total_courts == 2


def test_new_fetch_clears_previous_error(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.failures["list_page"] = api_error(500, "boom")
    store.fetch(COURTS.empty_filters())
    runner.complete()
    assert store.error is not None

    del gateway.failures["list_page"]
    store.retry()

    assert store.error is None
    assert store.is_loading
    runner.complete()
    assert store.status.kind is FetchStatusKind.IDLE


def test_retry_reissues_the_last_request(gateway, runner) -> None:
    store = _store(gateway, runner)
    assert store.retry() is None

    store.fetch(COURTS.empty_filters().merge(location="north"), page=2)
    store.retry()

    first, second = gateway.calls_for("list_page")
    assert first == second


def test_cancelled_request_is_ignored(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.failures["list_page"] = RequestCancelledError(
        code="REQUEST_CANCELLED", message="cancelled", details=None, trace_id=None, status_code=0
    )
    store.fetch(COURTS.empty_filters())
    runner.complete()

    assert store.error is None


def test_shrunken_collection_refetches_last_page(gateway, runner) -> None:
    store = _store(gateway, runner)
    gateway.total = 9
    gateway.pages.append(rows(7, 8, 9))
    store.fetch(COURTS.empty_filters(), page=3)
    runner.complete()
    assert store.pagination.page == 3

    gateway.total = 4
    gateway.pages.extend([[], rows(4)])
    store.fetch(COURTS.empty_filters(), page=3)
    runner.complete()

    assert store.pagination.page == 2
    assert gateway.calls_for("list_page")[-1]["page"] == 2
    runner.complete()
    assert store.ids == [4]


def test_listeners_are_notified(gateway, runner) -> None:
    store = _store(gateway, runner)
    seen = []
    store.subscribe(lambda current: seen.append(current.status.kind))

    store.fetch(COURTS.empty_filters())
    runner.complete()

    assert seen == [FetchStatusKind.LOADING, FetchStatusKind.IDLE]

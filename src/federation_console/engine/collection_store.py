from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from ..exceptions import FetchError, RequestCancelledError
from ..logger import get_logger, log_action
from ..models import StatsModel
from .domain import DomainSpec
from .filter_state import FilterState
from .gateway import CollectionGateway, ListPage
from .pagination import PaginationState
from .runner import Outcome, TaskRunner

logger = get_logger("federation_console.collection")


class FetchStatusKind(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class FetchStatus:
    kind: FetchStatusKind = FetchStatusKind.IDLE
    message: str | None = None

    @classmethod
    def idle(cls) -> "FetchStatus":
        return cls(FetchStatusKind.IDLE)

    @classmethod
    def loading(cls) -> "FetchStatus":
        return cls(FetchStatusKind.LOADING)

    @classmethod
    def failed(cls, message: str) -> "FetchStatus":
        return cls(FetchStatusKind.ERROR, message)

    @property
    def is_loading(self) -> bool:
        return self.kind is FetchStatusKind.LOADING

    @property
    def is_error(self) -> bool:
        return self.kind is FetchStatusKind.ERROR


@dataclass(frozen=True)
class FetchRequest:
    sequence: int
    filters: FilterState
    page: int


class CollectionStore:
    """The fetched page of one domain plus stats and fetch status.

    Every fetch gets a sequence number; a completion is applied only if no newer
    fetch was issued since, so out-of-order responses never overwrite fresher
    data. Failures keep the last-known-good items and stats.
    """

    def __init__(
        self,
        domain: DomainSpec,
        gateway: CollectionGateway,
        runner: TaskRunner,
        *,
        page_size: int = 50,
    ) -> None:
        self.domain = domain
        self._gateway = gateway
        self._runner = runner
        self.items: list[dict[str, Any]] = []
        self.stats: StatsModel = domain.empty_stats()
        self.status = FetchStatus.idle()
        self.error: FetchError | None = None
        self.pagination = PaginationState(page_size=page_size)
        self.has_loaded = False
        self.applied_filters: FilterState | None = None
        self._sequence = 0
        self._last_request: FetchRequest | None = None
        self._listeners: list[Callable[["CollectionStore"], None]] = []

    @property
    def ids(self) -> list[int]:
        return [int(item["id"]) for item in self.items if item.get("id") is not None]

    @property
    def is_loading(self) -> bool:
        return self.status.is_loading

    def subscribe(self, listener: Callable[["CollectionStore"], None]) -> None:
        self._listeners.append(listener)

    def fetch(self, filters: FilterState, page: int = 1) -> int:
        self._sequence += 1
        request = FetchRequest(sequence=self._sequence, filters=filters, page=max(1, page))
        page_size = self.pagination.page_size
        self._last_request = request
        self.status = FetchStatus.loading()
        self.error = None
        log_action(logger, self.domain.name, "fetch", "started", sequence=request.sequence, page=request.page)
        self._notify()

        def job() -> ListPage:
            return self._gateway.list_page(
                filters.as_query(),
                page=request.page,
                page_size=page_size,
                cancel_check=lambda: not self.is_current(request.sequence),
            )

        self._runner.submit(job, lambda outcome: self._complete(request, outcome))
        return request.sequence

    def retry(self) -> int | None:
        if self._last_request is None:
            return None
        return self.fetch(self._last_request.filters, self._last_request.page)

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def _complete(self, request: FetchRequest, outcome: Outcome[ListPage]) -> None:
        if not self.is_current(request.sequence):
            log_action(logger, self.domain.name, "fetch", "discarded", sequence=request.sequence, latest=self._sequence)
            return
        if outcome.ok and outcome.value is not None:
            self._apply(request, outcome.value)
            return

        error = outcome.error
        if isinstance(error, RequestCancelledError):
            # only raised when superseded, which the sequence check already covers
            log_action(logger, self.domain.name, "fetch", "cancelled", sequence=request.sequence)
            return
        failure = FetchError.from_exception(error or RuntimeError(), f"Failed to fetch {self.domain.label}")
        self.error = failure
        self.status = FetchStatus.failed(failure.message)
        log_action(logger, self.domain.name, "fetch", "error", failure.trace_id, code=failure.code, message=failure.message)
        self._notify()

    def _apply(self, request: FetchRequest, page: ListPage) -> None:
        self.items = list(page.items)
        self.stats = page.stats
        in_range = self.pagination.apply(page=page.meta.page, page_size=page.meta.page_size, total_count=page.meta.total)
        self.applied_filters = request.filters
        self.has_loaded = True
        self.status = FetchStatus.idle()
        log_action(
            logger,
            self.domain.name,
            "fetch",
            "success",
            sequence=request.sequence,
            count=len(self.items),
            total=page.meta.total,
        )
        self._notify()
        if not in_range:
            # the page shrank away underneath us, e.g. after a bulk mutation
            self.fetch(request.filters, self.pagination.page)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

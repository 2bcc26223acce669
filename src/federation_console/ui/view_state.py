from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CollectionViewStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    SUCCESS = "success"
    ERROR_WITH_DATA = "error_with_data"
    FATAL = "fatal"


@dataclass(frozen=True)
class CollectionViewState:
    status: CollectionViewStatus
    message: str
    trace_id: str | None = None
    details: str | None = None

    @property
    def shows_rows(self) -> bool:
        return self.status in {CollectionViewStatus.SUCCESS, CollectionViewStatus.ERROR_WITH_DATA}

    def render(self) -> dict[str, Any]:
        return {"status": self.status.value, "message": self.message, "trace_id": self.trace_id, "details": self.details}


def resolve_view_state(
    *,
    loading: bool,
    has_data: bool,
    error: str | None,
    trace_id: str | None = None,
    details: str | None = None,
) -> CollectionViewState:
    """Errors are shown alongside retained rows; only an error with nothing to show is fatal."""
    if loading:
        return CollectionViewState(status=CollectionViewStatus.LOADING, message="Loading", trace_id=trace_id)
    if error and not has_data:
        return CollectionViewState(status=CollectionViewStatus.FATAL, message=error, trace_id=trace_id, details=details)
    if error:
        return CollectionViewState(status=CollectionViewStatus.ERROR_WITH_DATA, message=error, trace_id=trace_id, details=details)
    if not has_data:
        return CollectionViewState(status=CollectionViewStatus.EMPTY, message="No records", trace_id=trace_id)
    return CollectionViewState(status=CollectionViewStatus.SUCCESS, message="Ready", trace_id=trace_id)

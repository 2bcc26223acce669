from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass
class PaginationState:
    page: int = 1
    page_size: int = 50
    total_count: int = 0

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {self.page_size}")
        self.total_count = max(0, self.total_count)
        self.page = min(max(1, self.page), self.total_pages)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_count / self.page_size))

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def accepts(self, page: int) -> bool:
        return 1 <= page <= self.total_pages

    def apply(self, *, page: int, page_size: int, total_count: int) -> bool:
        """Replace the meta from a completed fetch.

        Returns False when the requested page no longer exists; the page is then
        clamped to the last one.
        """
        self.page_size = max(1, page_size)
        self.total_count = max(0, total_count)
        requested = max(1, page)
        self.page = min(requested, self.total_pages)
        return self.page == requested


def next_page(state: PaginationState) -> int | None:
    return state.page + 1 if state.has_next else None


def prev_page(state: PaginationState) -> int | None:
    return state.page - 1 if state.has_prev else None

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Generic, Protocol, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_job(job: Callable[[], T]) -> Outcome[T]:
    try:
        return Outcome(value=job())
    except Exception as exc:  # handed to the completion callback, never re-raised
        return Outcome(error=exc)


class TaskRunner(Protocol):
    def submit(self, job: Callable[[], T], on_done: Callable[[Outcome[T]], None]) -> None: ...


class InlineRunner:
    """Runs the job and its completion immediately on the calling thread."""

    def submit(self, job: Callable[[], T], on_done: Callable[[Outcome[T]], None]) -> None:
        on_done(run_job(job))


@dataclass
class ThreadedRunner:
    """Runs jobs on daemon threads and hands completions back through ``post``.

    ``post`` must schedule the callback on the owning event loop, e.g.
    ``lambda callback: root.after(0, callback)`` for Tk.
    """

    post: Callable[[Callable[[], None]], object]

    def submit(self, job: Callable[[], T], on_done: Callable[[Outcome[T]], None]) -> None:
        def worker() -> None:
            outcome = run_job(job)
            self.post(lambda: on_done(outcome))

        threading.Thread(target=worker, daemon=True).start()

from __future__ import annotations

import threading


class GenerationCancelled(RuntimeError):
    """Raised when a board generation is cancelled by the caller."""


class GenerationRuntime:
    """Cancellation handle passed down to the search routines."""

    def __init__(self, *, cancel_event: threading.Event | None = None) -> None:
        self._cancel_event = cancel_event if cancel_event is not None else threading.Event()

    def cancel(self) -> None:
        self._cancel_event.set()

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def raise_if_cancelled(self) -> None:
        if self.is_cancelled():
            raise GenerationCancelled("Board generation cancelled.")

    def budget(self, max_steps: int) -> "SearchBudget":
        return SearchBudget(max_steps, runtime=self)


class SearchBudget:
    """Counts search steps; a spent budget makes the search report failure."""

    CANCEL_CHECK_INTERVAL = 256

    def __init__(self, max_steps: int, *, runtime: GenerationRuntime | None = None) -> None:
        self.max_steps = max(1, int(max_steps))
        self.steps = 0
        self._runtime = runtime

    @property
    def exhausted(self) -> bool:
        return self.steps >= self.max_steps

    def consume(self) -> bool:
        if self._runtime is not None and self.steps % self.CANCEL_CHECK_INTERVAL == 0:
            self._runtime.raise_if_cancelled()
        if self.exhausted:
            return False
        self.steps += 1
        return True

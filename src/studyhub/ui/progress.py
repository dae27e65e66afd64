"""Rich progress display driven by ingestion progress events."""

from __future__ import annotations

from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    """Translate ``(event, payload)`` callbacks into rich progress tasks.

    Tasks are keyed by name in ``_tasks`` with their totals in ``_totals`` so
    finished steps can be removed from the display.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console,
            transient=True,
        )
        self._tasks: dict[str, TaskID] = {}
        self._totals: dict[str, int] = {}

    def __enter__(self) -> ProgressReporter:
        self.progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.progress.stop()

    def add_step(self, description: str, total: int | None = None) -> TaskID:
        return self.progress.add_task(description, total=total)

    def finish_task(self, task_id: TaskID) -> None:
        self.progress.remove_task(task_id)

    def _start(self, key: str, description: str, total: int) -> None:
        self._finish(key)
        self._tasks[key] = self.progress.add_task(description, total=total)
        self._totals[key] = total

    def _advance(self, key: str) -> None:
        task_id = self._tasks.get(key)
        if task_id is not None:
            self.progress.advance(task_id)

    def _finish(self, key: str) -> None:
        task_id = self._tasks.pop(key, None)
        self._totals.pop(key, None)
        if task_id is not None:
            self.progress.remove_task(task_id)

    def emit(self, event: str, payload: dict[str, int | str]) -> None:
        if event == "ingest:start":
            self._start("subjects", "Subjects", int(payload.get("subject_count", 0)))
        elif event == "subject:start":
            subject = str(payload.get("subject", ""))
            self._start("files", f"Pages in {subject}", int(payload.get("file_count", 0)))
        elif event == "file:processed":
            self._advance("files")
        elif event in ("subject:done", "subject:skipped"):
            self._finish("files")
            self._advance("subjects")
        elif event == "ingest:finalized":
            self._finish("files")
            self._finish("subjects")


__all__ = ["ProgressReporter"]

"""Build progress tracking and reporting for display to the user."""

from __future__ import annotations

import abc
import sys
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Hashable, Optional

from nbuild import terminal
from nbuild.states import BuildState, StateCounts
from nbuild.task import TaskResult, Termination

UPDATE_DELAY = 0.05
"""Seconds to wait after a change before redrawing, to reduce flicker."""

_IDLE_REDRAW = 0.5
"""Seconds between redraws when nothing changes, so running times advance."""

_MAX_TASKS = 8
_BAR_SIZE = 40
_DEFAULT_COLS = 80
_CLEAR = b"\r\x1b[J"


def build_message(build: Any) -> str:
    """The message to show on the console for a build.

    This is the build's description, or its command line if the description
    is missing or empty.
    """
    desc = getattr(build, "desc", None)
    if desc:
        return desc
    cmdline = getattr(build, "cmdline", None)
    if cmdline is None:
        raise ValueError("build has neither a description nor a command line")
    return cmdline


def _write_bytes(data: bytes) -> None:
    out = sys.stdout
    out.flush()
    raw = getattr(out, "buffer", None)
    if raw is not None:
        raw.write(data)
        raw.flush()
    else:
        out.write(data.decode("utf-8", errors="replace"))
        out.flush()


def _finish_message(build: Any, result: TaskResult, show_success: bool) -> Optional[str]:
    if result.termination is Termination.SUCCESS:
        return build_message(build) if show_success else None
    if result.termination is Termination.INTERRUPTED:
        return f"interrupted: {build_message(build)}"
    return f"failed: {build_message(build)}"


class Progress(abc.ABC):
    """Receiver of build progress notifications."""

    @abc.abstractmethod
    def update(self, counts: StateCounts) -> None:
        """Called as build tasks move through build states."""

    @abc.abstractmethod
    def task_started(self, build_id: Hashable, build: Any) -> None:
        """Called when a task starts."""

    @abc.abstractmethod
    def task_output(self, build_id: Hashable, line: bytes) -> None:
        """Called when a task's last line of output changes."""

    @abc.abstractmethod
    def task_finished(self, build_id: Hashable, build: Any, result: TaskResult) -> None:
        """Called when a task completes."""

    @abc.abstractmethod
    def log(self, msg: str) -> None:
        """Print a line that persists beyond later progress updates."""


class DumbConsoleProgress(Progress):
    """Progress for a plain console, without any overprinting."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._last_started: Optional[Hashable] = None

    def update(self, counts: StateCounts) -> None:
        pass

    def task_started(self, build_id: Hashable, build: Any) -> None:
        self.log(build.cmdline if self.verbose else build_message(build))
        self._last_started = build_id

    def task_output(self, build_id: Hashable, line: bytes) -> None:
        pass

    def task_finished(self, build_id: Hashable, build: Any, result: TaskResult) -> None:
        # Skip the message if there's no output or the command was just printed.
        show = bool(result.output) and self._last_started != build_id
        message = _finish_message(build, result, show)
        if message is not None:
            self.log(message)
        if result.output:
            _write_bytes(result.output)

    def log(self, msg: str) -> None:
        print(msg, flush=True)


@dataclass
class _Task:
    build_id: Hashable
    start: float
    message: str
    last_line: Optional[str] = None


class FancyConsoleProgress(Progress):
    """Progress with a status bar that is redrawn in place.

    Each redraw clears from the cursor to the end of the screen, prints the
    status, then moves the cursor back up to where it began, so persistent
    lines can be logged by clearing the status first.
    """

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._cond = threading.Condition()
        self._done = False
        self._dirty = False
        self._counts = StateCounts()
        self._tasks: Deque[_Task] = deque()
        self._thread = threading.Thread(target=self._redraw_loop, daemon=True)
        self._thread.start()

    def __enter__(self) -> "FancyConsoleProgress":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _redraw_loop(self) -> None:
        while True:
            with self._cond:
                self._cond.wait_for(lambda: self._dirty or self._done, timeout=_IDLE_REDRAW)
                if self._done:
                    return
            # Let further updates accumulate before drawing.
            time.sleep(UPDATE_DELAY)
            with self._cond:
                if self._done:
                    return
                self._print_progress()

    def _mark_dirty(self) -> None:
        self._dirty = True
        self._cond.notify()

    def update(self, counts: StateCounts) -> None:
        with self._cond:
            self._counts = counts.copy()
            self._mark_dirty()

    def task_started(self, build_id: Hashable, build: Any) -> None:
        with self._cond:
            if self.verbose:
                self._log(build.cmdline)
            self._tasks.append(_Task(build_id, time.monotonic(), build_message(build)))
            self._mark_dirty()

    def _find(self, build_id: Hashable) -> _Task:
        for task in self._tasks:
            if task.build_id == build_id:
                return task
        raise KeyError(f"no running task {build_id!r}")

    def task_output(self, build_id: Hashable, line: bytes) -> None:
        with self._cond:
            self._find(build_id).last_line = bytes(line).decode("utf-8", errors="replace")
            self._mark_dirty()

    def task_finished(self, build_id: Hashable, build: Any, result: TaskResult) -> None:
        with self._cond:
            self._tasks.remove(self._find(build_id))
            message = _finish_message(build, result, bool(result.output))
            if message is not None:
                self._log(message)
            if result.output:
                _write_bytes(result.output)
            self._mark_dirty()

    def log(self, msg: str) -> None:
        with self._cond:
            self._log(msg)

    def _log(self, msg: str) -> None:
        self._clear_progress()
        print(msg, flush=True)
        self._mark_dirty()

    def close(self) -> None:
        """Clear the status display and stop the redraw thread."""
        with self._cond:
            if self._done:
                return
            self._clear_progress()
            self._done = True
            self._mark_dirty()
        self._thread.join()

    @staticmethod
    def _clear_progress() -> None:
        # Ctrl-C may have echoed on the line: go to column 0, then clear below.
        _write_bytes(_CLEAR)

    def _print_progress(self) -> None:
        self._clear_progress()
        counts = self._counts
        failed = counts.get(BuildState.FAILED)
        line = (
            f"[{progress_bar(counts, _BAR_SIZE)}] "
            f"{counts.get(BuildState.DONE) + failed}/{counts.total()} done, "
        )
        if failed > 0:
            line += f"{failed} failed, "
        pending = (
            counts.get(BuildState.QUEUED)
            + counts.get(BuildState.RUNNING)
            + counts.get(BuildState.READY)
        )
        line += f"{len(self._tasks)}/{pending} running"
        out = [line]

        max_cols = terminal.get_cols() or _DEFAULT_COLS
        now = time.monotonic()
        for task in list(self._tasks)[:_MAX_TASKS]:
            out.append(task_message(task.message, int(now - task.start), max_cols))
            if task.last_line is not None:
                out.append("  " + truncate(task.last_line, max_cols - 2))
        if len(self._tasks) > _MAX_TASKS:
            out.append(f"...and {len(self._tasks) - _MAX_TASKS} more")

        # Move the cursor back up to the first line for overprinting.
        sys.stdout.write("\n".join(out) + "\n" + f"\x1b[{len(out)}A")
        sys.stdout.flush()
        self._dirty = False


def task_message(message: str, seconds: int, max_cols: int) -> str:
    """A task's status, with its running time once over 2s, fit to max_cols."""
    time_note = f" ({seconds}s)" if seconds > 2 else ""
    out = message
    if len(out) + len(time_note) >= max_cols:
        out = out[: max(0, max_cols - len(time_note) - 3)] + "..."
    return out + time_note


def truncate(s: str, max_len: int) -> str:
    """Cut s to at most max_len UTF-8 bytes without splitting a character."""
    data = s.encode("utf-8")
    if max_len >= len(data):
        return s
    return data[: max(0, max_len)].decode("utf-8", errors="ignore")


def progress_bar(counts: StateCounts, bar_size: int) -> str:
    """Render counts as an ASCII progress bar of bar_size characters."""
    total = counts.total()
    if total == 0:
        return " " * bar_size
    segments = (
        (counts.get(BuildState.DONE) + counts.get(BuildState.FAILED), "="),
        (
            counts.get(BuildState.QUEUED)
            + counts.get(BuildState.RUNNING)
            + counts.get(BuildState.READY),
            "-",
        ),
        (counts.get(BuildState.WANT), " "),
    )
    bar = ""
    cumulative = 0
    for count, ch in segments:
        cumulative += count
        target = cumulative * bar_size // total
        if count > 0 and target == len(bar) and target < bar_size:
            # A non-zero count always gets at least one tick.
            target += 1
        if target > len(bar):
            bar += ch * (target - len(bar))
    return bar
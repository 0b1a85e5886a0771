"""Chrome trace-event output.

Instants are integer nanosecond readings of time.perf_counter_ns().
"""

from __future__ import annotations

import contextlib
import json
import os
import time
from typing import Iterator, Optional, Union


class Trace:
    """Writer for a JSON array of trace events."""

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self._file = open(path, "w", encoding="utf-8")
        self._file.write("[\n")
        self.start = time.perf_counter_ns()
        self._count = 0

    def _micros_since(self, earlier: int, later: int) -> int:
        return (later - earlier) // 1000

    def _write_event_prefix(self, name: str, ts: int) -> None:
        if self._count > 0:
            self._file.write(",")
        self._count += 1
        self._file.write(
            f'{{"pid":0, "name":{json.dumps(name)}, '
            f'"ts":{self._micros_since(self.start, ts)}, '
        )

    def write_complete(self, name: str, tid: int, start: int, end: int) -> None:
        """Record a complete event spanning start to end."""
        self._write_event_prefix(name, start)
        self._file.write(
            f'"tid": {tid}, "ph":"X", "dur":{self._micros_since(start, end)}}}\n'
        )

    @contextlib.contextmanager
    def scope(self, name: str) -> Iterator[None]:
        """Record the duration of the with-block as an event."""
        start = time.perf_counter_ns()
        yield
        self.write_complete(name, 0, start, time.perf_counter_ns())

    def close(self) -> None:
        """Write the overall event, terminate the array and close the file."""
        self.write_complete("main", 0, self.start, time.perf_counter_ns())
        self._file.write("]\n")
        self._file.close()


_active: Optional[Trace] = None


def open_trace(path: Union[str, os.PathLike]) -> Trace:
    """Start writing a trace to path and make it the active trace."""
    global _active
    _active = Trace(path)
    return _active


def current() -> Optional[Trace]:
    """The active trace, or None when tracing is off."""
    return _active


@contextlib.contextmanager
def scope(name: str) -> Iterator[None]:
    """Time the with-block in the active trace, if any."""
    trace = _active
    if trace is None:
        yield
        return
    with trace.scope(name):
        yield


def close() -> None:
    """Finish the active trace, if any."""
    global _active
    if _active is not None:
        _active.close()
        _active = None
"""Results of build tasks and helpers for processing task output."""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Hashable, List, Optional, Tuple, Union

_SHOWINCLUDES_PREFIX = b"Note: including file: "


class Termination(enum.Enum):
    """How a task's process ended."""

    SUCCESS = "success"
    INTERRUPTED = "interrupted"
    FAILURE = "failure"


@dataclass
class TaskResult:
    """The result of running a build step."""

    termination: Termination
    output: bytes = b""
    """Console output of the step."""
    discovered_deps: Optional[List[str]] = None


@dataclass
class FinishedTask:
    """A completed task, with the span of time it ran for.

    tid is a fake "thread id" that puts concurrently finished builds on
    separate tracks of a performance trace.
    """

    tid: int
    build_id: Hashable
    span: Tuple[int, int]
    result: TaskResult


@dataclass
class ThreadIds:
    """Allocator of small integer ids, reusing the lowest released one."""

    _slots: List[bool] = field(default_factory=list)

    def claim(self) -> int:
        """Take the lowest free id."""
        for idx, used in enumerate(self._slots):
            if not used:
                self._slots[idx] = True
                return idx
        self._slots.append(True)
        return len(self._slots) - 1

    def release(self, slot: int) -> None:
        """Give back an id obtained from claim()."""
        if not 0 <= slot < len(self._slots) or not self._slots[slot]:
            raise ValueError(f"thread id {slot} is not claimed")
        self._slots[slot] = False


def write_rspfile(path: Union[str, os.PathLike], content: Union[str, bytes]) -> None:
    """Write a response file, creating its parent directories."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    data = content.encode("utf-8") if isinstance(content, str) else bytes(content)
    target.write_bytes(data)


def extract_showincludes(output: bytes) -> Tuple[List[str], bytes]:
    """Split "Note: including file:" lines out of compiler output.

    Returns the included paths and the output with those lines removed.
    """
    filtered = bytearray()
    includes: List[str] = []
    for line in bytes(output).split(b"\n"):
        if line.startswith(_SHOWINCLUDES_PREFIX):
            include = line[len(_SHOWINCLUDES_PREFIX):]
            start = len(include) - len(include.lstrip(b" "))
            if start == len(include):
                start = 0
            end = len(include) - 1 if include.endswith(b"\r") else len(include)
            includes.append(include[start:end].decode("utf-8", errors="replace"))
        else:
            if filtered:
                filtered += b"\n"
            filtered += line
    return includes, bytes(filtered)


def find_last_line(buf: bytes) -> bytes:
    """The last line of text in buf, ignoring trailing empty lines."""
    buf = bytes(buf)
    end = len(buf.rstrip(b"\r\n"))
    start = max(buf.rfind(b"\n", 0, end), buf.rfind(b"\r", 0, end)) + 1
    return buf[start:end]
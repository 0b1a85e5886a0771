"""Build step states and per-state counters."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple


class BuildState(enum.Enum):
    """The sequence of states a build step moves through."""

    UNKNOWN = "unknown"
    """Default initial state, for builds not needed by the current build."""
    WANT = "want"
    """Builds to bring up to date whose inputs are not ready yet."""
    READY = "ready"
    """Builds whose dependencies are up to date, ready to be checked."""
    QUEUED = "queued"
    """Builds found out of date and ready to be executed."""
    RUNNING = "running"
    """Currently executing."""
    DONE = "done"
    """Finished executing successfully."""
    FAILED = "failed"
    """Finished executing but failed."""


_COUNTED = (
    BuildState.WANT,
    BuildState.READY,
    BuildState.QUEUED,
    BuildState.RUNNING,
    BuildState.DONE,
    BuildState.FAILED,
)


def _zero_counts() -> Dict[BuildState, int]:
    return dict.fromkeys(_COUNTED, 0)


@dataclass
class StateCounts:
    """Counts of non-phony builds in each state, for display only.

    Builds in the UNKNOWN state are not part of the current build and are
    never counted.
    """

    _counts: Dict[BuildState, int] = field(default_factory=_zero_counts)

    @staticmethod
    def _check(state: BuildState) -> BuildState:
        if state is BuildState.UNKNOWN:
            raise ValueError("unexpected state")
        return state

    def add(self, state: BuildState, delta: int) -> None:
        """Adjust the count for state by delta."""
        state = self._check(state)
        value = self._counts[state] + delta
        if value < 0:
            raise ValueError(f"count for {state.value} would become negative")
        self._counts[state] = value

    def get(self, state: BuildState) -> int:
        """The count of builds in state."""
        return self._counts[self._check(state)]

    def total(self) -> int:
        """The number of builds counted in any state."""
        return sum(self._counts.values())

    def copy(self) -> "StateCounts":
        return StateCounts(dict(self._counts))

    def __iter__(self) -> Iterator[Tuple[BuildState, int]]:
        return iter(self._counts.items())
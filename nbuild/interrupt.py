"""SIGINT handling.

The first SIGINT is allowed to reach child processes, which should then fail
and let the build report progress normally. The handler resets itself, so a
second SIGINT terminates the process.
"""

from __future__ import annotations

import signal
import threading

_interrupted = threading.Event()


def _on_sigint(signum, frame) -> None:
    _interrupted.set()
    signal.signal(signal.SIGINT, signal.SIG_DFL)


def register_sigint() -> None:
    """Install a one-shot SIGINT handler that records the interruption."""
    signal.signal(signal.SIGINT, _on_sigint)


def was_interrupted() -> bool:
    """True once a SIGINT has been received after register_sigint()."""
    return _interrupted.is_set()
"""Terminal capability queries."""

from __future__ import annotations

import os
from typing import Optional

_STDOUT = 1
_MIN_COLS = 10


def use_fancy() -> bool:
    """True if stdout is a terminal that can take overprinted status."""
    try:
        return os.isatty(_STDOUT)
    except OSError:
        return False


def get_cols() -> Optional[int]:
    """Terminal width in columns, or None if unknown or implausibly narrow."""
    fd = 0 if os.name == "posix" else _STDOUT
    try:
        cols = os.get_terminal_size(fd).columns
    except (OSError, ValueError):
        return None
    if cols < _MIN_COLS:
        return None
    return cols
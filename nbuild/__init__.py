"""Parts of a Ninja-compatible build runner: state counters, pools, task output helpers, progress display and tracing."""

__version__ = "0.1.0"
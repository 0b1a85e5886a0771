# nbuild

Building blocks for a Ninja-compatible build runner, in plain Python with no
third-party dependencies.

## What is inside

- `nbuild.smallmap.SmallMap` – an insertion-ordered map for a handful of
  entries. Keys only need equality, not hashing; `insert` replaces an existing
  entry in place, `get(key, default)` looks one up.
- `nbuild.scanner` – `Scanner`, a cursor over a nul-terminated byte buffer
  that tracks line numbers (`peek`, `read`, `skip`, `expect`, ...);
  `ParseError`; and `read_file_with_nul`, which reads a file and appends the
  trailing nul. `Scanner.format_parse_error` renders an error with the
  offending line and a caret under the column.
- `nbuild.states` – the `BuildState` enum (`UNKNOWN`, `WANT`, `READY`,
  `QUEUED`, `RUNNING`, `DONE`, `FAILED`) and `StateCounts`, counting builds in
  every state except `UNKNOWN`.
- `nbuild.pools` – `Pools` and `PoolState`. A `Pools` always holds an
  unbounded default pool `""` and a `console` pool of depth 1, followed by
  any declared pools. `enqueue` queues a build id, `pop_queued` takes the next
  one from the first pool with spare capacity, and `started` / `finished`
  track how many are running.
- `nbuild.task` – `Termination`, `TaskResult`, `FinishedTask` and
  `ThreadIds` (small reusable ids for trace tracks), plus helpers:
  `write_rspfile` writes a response file and its parent directories,
  `extract_showincludes` splits `Note: including file:` lines out of compiler
  output, and `find_last_line` finds the last non-empty line of output.
- `nbuild.progress` – the `Progress` interface with two implementations:
  `DumbConsoleProgress` prints plain lines, `FancyConsoleProgress` redraws a
  status bar and the running tasks in place from a background thread (use it
  as a context manager, or call `close()`). The formatting helpers
  `build_message`, `progress_bar`, `task_message` and `truncate` are public.
- `nbuild.trace` – Chrome trace-event JSON output: `open_trace(path)` starts
  a trace, `scope(name)` times a `with` block in it (and does nothing when no
  trace is open), `current()` returns the active `Trace`, and `close()`
  finishes the file.
- `nbuild.terminal` – `use_fancy()` tells whether stdout is a terminal,
  `get_cols()` gives its width or `None` when unknown or under 10 columns.
- `nbuild.interrupt` – `register_sigint()` installs a one-shot SIGINT handler
  and `was_interrupted()` reports whether it fired.

## Example

```python
from nbuild.states import BuildState, StateCounts
from nbuild.progress import progress_bar, task_message

counts = StateCounts()
counts.add(BuildState.WANT, 50)
counts.add(BuildState.READY, 50)
print(f"[{progress_bar(counts, 10)}]")       # [-----     ]
print(task_message("building foo.o", 5, 10))  # bu... (5s)
```

Splitting compiler output:

```python
from nbuild.task import extract_showincludes, find_last_line

includes, rest = extract_showincludes(b"Note: including file: a.h\nok\n")
# includes == ["a.h"], rest == b"ok\n"
find_last_line(b"hello\nt\n\n")  # b"t"
```

Tracing a stretch of work:

```python
from nbuild import trace

trace.open_trace("trace.json")
with trace.scope("load"):
    ...
trace.close()
```

## What this package does not do

It is a library of parts, not a build tool. There is no command to run, no
parser or loader for build files, no build graph or dependency scheduler, no
database of previous build results, and nothing that starts processes: running
commands and producing `TaskResult`s is left to the caller.

## Running the tests

```
pip install -e .[test]
pytest
```
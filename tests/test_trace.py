import json

from nbuild import trace
from nbuild.trace import Trace


def _events(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def test_write_complete_timing(tmp_path):
    path = tmp_path / "trace.json"
    t = Trace(path)
    t.write_complete("cc foo.o", 3, t.start + 1_000_000_000, t.start + 1_500_000_000)
    t.close()
    events = _events(path)
    first = events[0]
    assert first["name"] == "cc foo.o"
    assert first["tid"] == 3
    assert first["ph"] == "X"
    assert first["pid"] == 0
    assert first["ts"] == 1000000
    assert first["dur"] == 500000


def test_close_appends_main_event(tmp_path):
    path = tmp_path / "trace.json"
    t = Trace(path)
    with t.scope("load::read"):
        pass
    t.close()
    events = _events(path)
    assert [e["name"] for e in events] == ["load::read", "main"]
    assert all(e["dur"] >= 0 for e in events)


def test_names_are_escaped(tmp_path):
    path = tmp_path / "trace.json"
    t = Trace(path)
    name = 'say "hi"\\ now'
    t.write_complete(name, 0, t.start, t.start)
    t.close()
    assert _events(path)[0]["name"] == name


def test_module_scope_without_trace_runs_body():
    trace.close()
    ran = []
    with trace.scope("work.run"):
        ran.append(True)
    assert ran == [True]
    assert trace.current() is None


def test_module_level_lifecycle(tmp_path):
    path = tmp_path / "trace.json"
    opened = trace.open_trace(path)
    try:
        assert trace.current() is opened
        with trace.scope("work.run"):
            pass
    finally:
        trace.close()
    assert trace.current() is None
    assert [e["name"] for e in _events(path)] == ["work.run", "main"]
import pytest

from nbuild.states import BuildState, StateCounts

COUNTED = [s for s in BuildState if s is not BuildState.UNKNOWN]


def test_default_counts_are_zero():
    counts = StateCounts()
    assert counts.total() == 0
    assert all(counts.get(s) == 0 for s in COUNTED)


def test_add_and_get():
    counts = StateCounts()
    counts.add(BuildState.WANT, 100)
    assert counts.get(BuildState.WANT) == 100
    assert counts.total() == 100
    assert counts.get(BuildState.READY) == 0


def test_moving_between_states_keeps_total():
    counts = StateCounts()
    counts.add(BuildState.WANT, 100)
    counts.add(BuildState.WANT, -50)
    counts.add(BuildState.READY, 50)
    assert counts.get(BuildState.WANT) == 50
    assert counts.get(BuildState.READY) == 50
    counts.add(BuildState.READY, -1)
    counts.add(BuildState.DONE, 1)
    assert counts.get(BuildState.DONE) == 1
    assert counts.total() == 100


@pytest.mark.parametrize("state", COUNTED)
def test_each_state_counts_toward_total(state):
    counts = StateCounts()
    counts.add(state, 3)
    assert counts.get(state) == 3
    assert counts.total() == 3


def test_unknown_state_rejected_by_get():
    with pytest.raises(ValueError, match="unexpected state"):
        StateCounts().get(BuildState.UNKNOWN)


def test_unknown_state_rejected_by_add():
    with pytest.raises(ValueError, match="unexpected state"):
        StateCounts().add(BuildState.UNKNOWN, 1)


def test_negative_count_rejected():
    counts = StateCounts()
    counts.add(BuildState.RUNNING, 1)
    with pytest.raises(ValueError):
        counts.add(BuildState.RUNNING, -2)
    assert counts.get(BuildState.RUNNING) == 1


def test_copy_is_independent():
    counts = StateCounts()
    counts.add(BuildState.QUEUED, 4)
    snapshot = counts.copy()
    counts.add(BuildState.QUEUED, 1)
    assert snapshot.get(BuildState.QUEUED) == 4
    assert counts.get(BuildState.QUEUED) == 5
    assert snapshot != counts


def test_equality_by_contents():
    a = StateCounts()
    b = StateCounts()
    a.add(BuildState.FAILED, 2)
    b.add(BuildState.FAILED, 2)
    assert a == b


def test_iteration_covers_counted_states():
    counts = StateCounts()
    counts.add(BuildState.DONE, 7)
    items = dict(counts)
    assert set(items) == set(COUNTED)
    assert items[BuildState.DONE] == 7
import pytest

from linelogic.model.dirty import DirtyTracker, Invalidation


def test_observers_fire_on_rising_edge_only():
    tracker = DirtyTracker()
    calls = []
    tracker.subscribe(Invalidation.FULL_REDRAW, lambda: calls.append("redraw"))
    tracker.subscribe(Invalidation.DOWNSTREAM_UPDATE, lambda: calls.append("update"))

    tracker.mark(Invalidation.FULL_REDRAW)
    tracker.mark(Invalidation.FULL_REDRAW)
    assert calls == ["redraw"]

    tracker.mark(Invalidation.ALL)
    assert calls == ["redraw", "update"]


def test_flags_clear_only_on_consume():
    tracker = DirtyTracker()
    tracker.mark(Invalidation.ALL)
    assert tracker.consume(Invalidation.FULL_REDRAW)
    assert not tracker.consume(Invalidation.FULL_REDRAW)
    assert not tracker.needs_full_redraw
    assert tracker.needs_downstream_update


def test_consumed_flag_notifies_again():
    tracker = DirtyTracker()
    calls = []
    tracker.subscribe(Invalidation.DOWNSTREAM_UPDATE, lambda: calls.append(1))
    tracker.mark(Invalidation.DOWNSTREAM_UPDATE)
    tracker.consume(Invalidation.DOWNSTREAM_UPDATE)
    tracker.mark(Invalidation.DOWNSTREAM_UPDATE)
    assert len(calls) == 2


def test_subscribe_requires_single_flag():
    tracker = DirtyTracker()
    with pytest.raises(ValueError):
        tracker.subscribe(Invalidation.ALL, lambda: None)

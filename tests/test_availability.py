import pytest

from app.services.availability import AvailabilityTracker

from conftest import make_settings


def test_break_hours_start_busy() -> None:
    tracker = AvailabilityTracker(make_settings(2, 4, break_hours=[3]), [1, 2])

    for teacher_id in (1, 2):
        for day in (1, 2):
            assert tracker.is_free(teacher_id, day, 1)
            assert not tracker.is_free(teacher_id, day, 3)
            assert tracker.daily_count(teacher_id, day) == 0


def test_mark_busy_takes_slot_and_counts_day() -> None:
    tracker = AvailabilityTracker(make_settings(2, 4), [1, 2])

    tracker.mark_busy(1, 2, 4)
    tracker.mark_busy(1, 2, 1)

    assert not tracker.is_free(1, 2, 4)
    assert tracker.daily_count(1, 2) == 2
    assert tracker.daily_count(1, 1) == 0
    # other teachers are unaffected
    assert tracker.is_free(2, 2, 4)
    assert tracker.daily_count(2, 2) == 0


def test_mark_busy_twice_is_rejected() -> None:
    tracker = AvailabilityTracker(make_settings(1, 2), [1])
    tracker.mark_busy(1, 1, 1)

    with pytest.raises(ValueError):
        tracker.mark_busy(1, 1, 1)
    assert tracker.daily_count(1, 1) == 1

from app.models.placement import Placement
from app.models.subject import Priority
from app.models.timetable_entry import TimetableEntry
from app.utils.costs import check_hard_constraints, slot_score
from app.utils.utils import set_up

from conftest import make_allocation, make_data, make_settings, make_teacher


def _empty_grid(settings):
    data = make_data(settings, [], [])
    return set_up(settings, data.classes)


def test_empty_grid_scores_only_new_day_bonus() -> None:
    settings = make_settings(2, 6)
    grid = _empty_grid(settings)

    score = slot_score(settings, grid, make_allocation(1, 1), make_teacher(1), 1, 1)

    assert score == 10


def test_preferences_are_summed() -> None:
    settings = make_settings(2, 6)
    grid = _empty_grid(settings)
    teacher = make_teacher(1, preferred_day_orders=[2], morning=True, specific=[3])
    allocation = make_allocation(1, 1, priority=Priority.HIGH)

    # day +50, morning +30, specific +40, high morning +20, new day +10
    assert slot_score(settings, grid, allocation, teacher, 2, 3) == 150
    # hour 4 is afternoon for a six hour day
    assert slot_score(settings, grid, allocation, teacher, 2, 4) == 60
    assert slot_score(settings, grid, allocation, teacher, 1, 4) == 10


def test_afternoon_preference_starts_after_half_day() -> None:
    settings = make_settings(1, 5)
    grid = _empty_grid(settings)
    teacher = make_teacher(1, afternoon=True)
    allocation = make_allocation(1, 1)

    assert slot_score(settings, grid, allocation, teacher, 1, 2) == 10
    assert slot_score(settings, grid, allocation, teacher, 1, 3) == 40


def test_same_subject_nearby_is_penalised() -> None:
    settings = make_settings(1, 6)
    grid = _empty_grid(settings)
    allocation = make_allocation(1, 1, subject_id=9)
    grid[1][1][2] = Placement(subject_id=9, teacher_id=1, allocation_id=1)

    teacher = make_teacher(1)
    # next to hour 2 and no longer a new day
    assert slot_score(settings, grid, allocation, teacher, 1, 3) == -10
    assert slot_score(settings, grid, allocation, teacher, 1, 1) == -10
    assert slot_score(settings, grid, allocation, teacher, 1, 5) == 0


def test_neighbour_across_break_hour_is_ignored() -> None:
    settings = make_settings(1, 4, break_hours=[2])
    grid = _empty_grid(settings)
    grid[1][1][3] = Placement(subject_id=1, teacher_id=1, allocation_id=1)

    score = slot_score(settings, grid, make_allocation(1, 1), make_teacher(1), 1, 1)

    assert score == 0


def test_check_hard_constraints_counts_violations() -> None:
    settings = make_settings(1, 3, break_hours=[3])
    teacher = make_teacher(1, max_hours_per_day=1)
    allocation = make_allocation(1, 1, class_id=1, weekly_hours=1)
    data = make_data(settings, [teacher], [allocation], class_ids=(1, 2))

    entries = [
        TimetableEntry(1, 1, 1, subject_id=1, teacher_id=1),
        TimetableEntry(2, 1, 1, subject_id=5, teacher_id=1),
        TimetableEntry(1, 1, 3, subject_id=1, teacher_id=1),
        TimetableEntry(2, 1, 2),
    ]

    total, costs = check_hard_constraints(entries, data)

    assert costs == {
        "teacher_clashes": 1,
        "daily_limit": 2,
        "break_hours": 1,
        "weekly_hours": 1,
    }
    assert total == 5

from app.models.placement import Placement
from app.utils.utils import calculate_statistics, grid_to_entries, set_up

from conftest import make_allocation, make_data, make_settings, make_teacher


def test_empty_grid_statistics() -> None:
    settings = make_settings(2, 3, break_hours=[2])
    data = make_data(settings, [make_teacher(1)], [], class_ids=(1, 2))
    grid = set_up(settings, data.classes)

    stats = calculate_statistics(settings, data.classes, grid, data.teachers)

    assert stats == {
        "total_slots": 8,
        "filled_slots": 0,
        "empty_slots": 8,
        "utilization_rate": "0.00%",
        "preference_match_rate": "0%",
    }


def test_rates_are_rounded_to_two_decimals() -> None:
    settings = make_settings(1, 3)
    teachers = [make_teacher(1, preferred_day_orders=[1]), make_teacher(2)]
    data = make_data(settings, teachers, [])
    grid = set_up(settings, data.classes)
    grid[1][1][1] = Placement(subject_id=1, teacher_id=1, allocation_id=1)
    grid[1][1][2] = Placement(subject_id=2, teacher_id=2, allocation_id=2)

    stats = calculate_statistics(settings, data.classes, grid, data.teachers)

    assert stats["utilization_rate"] == "66.67%"
    assert stats["preference_match_rate"] == "50.00%"
    assert stats["filled_slots"] + stats["empty_slots"] == stats["total_slots"]


def test_only_break_hours_gives_zero_utilization() -> None:
    settings = make_settings(1, 1, break_hours=[1])
    data = make_data(settings, [], [])
    grid = set_up(settings, data.classes)

    stats = calculate_statistics(settings, data.classes, grid, data.teachers)

    assert stats["total_slots"] == 0
    assert stats["utilization_rate"] == "0.00%"


def test_grid_to_entries_carries_names() -> None:
    settings = make_settings(1, 2, break_hours=[2])
    allocation = make_allocation(4, 1, subject_id=9, subject_name="History")
    data = make_data(settings, [make_teacher(1)], [allocation])
    grid = set_up(settings, data.classes)
    grid[1][1][1] = Placement(subject_id=9, teacher_id=1, allocation_id=4)

    entries = grid_to_entries(settings, data.classes, grid, {4: allocation})

    assert [entry.as_dict() for entry in entries] == [
        {
            "class_id": 1, "day_order": 1, "hour": 1, "subject_id": 9, "teacher_id": 1,
            "class_name": "Class 1", "subject_name": "History", "teacher_name": "Teacher 1",
        },
        {
            "class_id": 1, "day_order": 1, "hour": 2, "subject_id": None, "teacher_id": None,
            "class_name": "Class 1",
        },
    ]

from collections import defaultdict

from app.models.timetable_entry import TimetableEntry
from app.services.generator import generate_timetable
from app.services.workload import get_teacher_workload

from conftest import make_teacher


def test_workload_counts_persisted_cells() -> None:
    teachers = [make_teacher(1, max_hours_per_day=3), make_teacher(2)]
    timetable = [
        TimetableEntry(1, 1, 1, subject_id=1, teacher_id=1, subject_name="Maths"),
        TimetableEntry(1, 1, 2, subject_id=2, teacher_id=1, subject_name="Physics"),
        TimetableEntry(2, 3, 1, subject_id=3, teacher_id=1, subject_name="Maths"),
        TimetableEntry(2, 3, 2),
    ]

    workload = get_teacher_workload(timetable, teachers, num_day_orders=3)

    assert [item.as_dict() for item in workload] == [
        {
            "teacher_id": 1,
            "teacher_name": "Teacher 1",
            "weekly_hours": 3,
            "daily_hours": {1: 2, 2: 0, 3: 1},
            "max_hours_per_day": 3,
            "subjects": ["Maths", "Physics"],
        },
        {
            "teacher_id": 2,
            "teacher_name": "Teacher 2",
            "weekly_hours": 0,
            "daily_hours": {1: 0, 2: 0, 3: 0},
            "max_hours_per_day": 4,
            "subjects": [],
        },
    ]


def test_workload_after_generation_matches_allocations(school_data) -> None:
    result = generate_timetable(school_data)
    assert result.success

    expected = defaultdict(int)
    for allocation in school_data.allocations:
        expected[allocation.teacher_id] += allocation.weekly_hours

    workload = get_teacher_workload(
        result.entries, school_data.teachers.values(), school_data.settings.num_day_orders
    )

    for item in workload:
        assert item.weekly_hours == expected[item.teacher_id]
        assert sum(item.daily_hours.values()) == item.weekly_hours
        assert max(item.daily_hours.values()) <= item.max_hours_per_day

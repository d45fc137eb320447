import pytest

from app.models.class_allocation import ClassAllocation
from app.models.class_group import ClassGroup
from app.models.global_settings import GlobalSettings
from app.models.subject import Priority
from app.models.teacher import Teacher, TimePreferences
from app.models.timetable_data import TimetableData


def make_settings(num_day_orders=5, hours_per_day=6, break_hours=()):
    return GlobalSettings(num_day_orders, hours_per_day, frozenset(break_hours))


def make_teacher(teacher_id, max_hours_per_day=4, preferred_day_orders=(),
                 morning=False, afternoon=False, specific=()):
    return Teacher(
        id=teacher_id,
        name=f"Teacher {teacher_id}",
        max_hours_per_day=max_hours_per_day,
        preferred_day_orders=frozenset(preferred_day_orders),
        preferred_time_slots=TimePreferences(morning, afternoon, frozenset(specific)),
    )


def make_allocation(allocation_id, teacher_id, class_id=1, weekly_hours=1,
                    priority=Priority.MEDIUM, subject_id=None, subject_name=None):
    subject_id = subject_id if subject_id is not None else allocation_id
    return ClassAllocation(
        id=allocation_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        class_id=class_id,
        weekly_hours=weekly_hours,
        priority=priority,
        subject_name=subject_name or f"Subject {subject_id}",
        class_name=f"Class {class_id}",
        teacher_name=f"Teacher {teacher_id}",
    )


def make_data(settings, teachers, allocations, class_ids=(1,)):
    return TimetableData(
        settings=settings,
        classes=[ClassGroup(id=class_id, name=f"Class {class_id}") for class_id in class_ids],
        teachers={teacher.id: teacher for teacher in teachers},
        allocations=list(allocations),
    )


@pytest.fixture
def school_data():
    """Three classes sharing four teachers over a five day week with a break"""
    settings = make_settings(num_day_orders=5, hours_per_day=6, break_hours=[4])
    teachers = [
        make_teacher(1, max_hours_per_day=4, preferred_day_orders=[1, 2], morning=True),
        make_teacher(2, max_hours_per_day=4, afternoon=True),
        make_teacher(3, max_hours_per_day=4, specific=[2, 5]),
        make_teacher(4, max_hours_per_day=4, preferred_day_orders=[5]),
    ]
    allocations = []
    allocation_id = 1
    for class_id in (1, 2, 3):
        for teacher_id, weekly_hours, priority, name in (
            (4, 2, Priority.LOW, "Art"),
            (2, 4, Priority.MEDIUM, "English"),
            (1, 5, Priority.HIGH, "Mathematics"),
            (3, 4, Priority.MEDIUM, "Science"),
        ):
            allocations.append(make_allocation(
                allocation_id, teacher_id, class_id=class_id, weekly_hours=weekly_hours,
                priority=priority, subject_name=name,
            ))
            allocation_id += 1
    return make_data(settings, teachers, allocations, class_ids=(1, 2, 3))

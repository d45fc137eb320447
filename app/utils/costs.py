from collections import Counter
from typing import Dict, Iterable, Optional, Tuple
from app.models.class_allocation import ClassAllocation
from app.models.global_settings import GlobalSettings
from app.models.placement import Placement
from app.models.subject import Priority
from app.models.teacher import Teacher
from app.models.timetable_data import TimetableData
from app.models.timetable_entry import TimetableEntry

# class_id -> day -> hour -> placement (break hours have no cell)
Grid = Dict[int, Dict[int, Dict[int, Optional[Placement]]]]

PREFERRED_DAY_BONUS = 50
PREFERRED_PERIOD_BONUS = 30
PREFERRED_HOUR_BONUS = 40
HIGH_PRIORITY_MORNING_BONUS = 20
CONSECUTIVE_PENALTY = 10
NEW_DAY_BONUS = 10


def has_consecutive_slot(grid: Grid, class_id: int, day: int, hour: int, subject_id: int) -> bool:
    """True if the subject already sits right before or right after the hour"""
    cells = grid[class_id][day]
    for neighbour in (hour - 1, hour + 1):
        placement = cells.get(neighbour)
        if placement is not None and placement.subject_id == subject_id:
            return True
    return False


def subject_scheduled_on_day(grid: Grid, class_id: int, day: int, subject_id: int) -> bool:
    return any(
        placement is not None and placement.subject_id == subject_id
        for placement in grid[class_id][day].values()
    )


def slot_score(settings: GlobalSettings, grid: Grid, allocation: ClassAllocation,
               teacher: Teacher, day: int, hour: int) -> int:
    """
    Calculates the preference score of a slot that already passed the hard checks.
    Higher is better; the contributions are independent and summed.

    Args:
        settings: Grid shape
        grid: Current timetable grid
        allocation: Allocation being placed
        teacher: Teacher of the allocation
        day: Candidate day order
        hour: Candidate hour

    Returns:
        Score of the slot
    """
    score = 0
    is_morning = hour <= settings.morning_cutoff
    preferences = teacher.preferred_time_slots

    if day in teacher.preferred_day_orders:
        score += PREFERRED_DAY_BONUS

    if preferences.morning and is_morning:
        score += PREFERRED_PERIOD_BONUS
    if preferences.afternoon and not is_morning:
        score += PREFERRED_PERIOD_BONUS
    if hour in preferences.specific:
        score += PREFERRED_HOUR_BONUS

    # HIGH priority subjects go to the morning
    if allocation.priority is Priority.HIGH and is_morning:
        score += HIGH_PRIORITY_MORNING_BONUS

    if has_consecutive_slot(grid, allocation.class_id, day, hour, allocation.subject_id):
        score -= CONSECUTIVE_PENALTY

    # spread the subject across days
    if not subject_scheduled_on_day(grid, allocation.class_id, day, allocation.subject_id):
        score += NEW_DAY_BONUS

    return score


def check_hard_constraints(entries: Iterable[TimetableEntry], data: TimetableData) -> Tuple[int, Dict[str, int]]:
    """
    Audits a finished timetable. For everything that doesn't satisfy a hard
    constraint, one is added to the cost:
    - Each teacher teaches at most one class at a time
    - Each teacher teaches at most max_hours_per_day lessons a day
    - Break hours stay empty
    - Each allocation gets exactly its weekly hours

    Args:
        entries: Timetable cells
        data: Configuration the timetable was generated from

    Returns:
        total_cost, cost by constraint name
    """
    settings = data.settings
    teacher_slots = Counter()
    teacher_days = Counter()
    lessons = Counter()
    cost_breaks = 0

    for entry in entries:
        if entry.is_empty:
            continue
        if settings is not None and settings.is_break(entry.hour):
            cost_breaks += 1
        teacher_slots[(entry.teacher_id, entry.day_order, entry.hour)] += 1
        teacher_days[(entry.teacher_id, entry.day_order)] += 1
        lessons[(entry.class_id, entry.subject_id, entry.teacher_id)] += 1

    cost_clashes = sum(count - 1 for count in teacher_slots.values() if count > 1)

    cost_daily = 0
    for (teacher_id, _), count in teacher_days.items():
        teacher = data.teachers.get(teacher_id)
        if teacher is not None and count > teacher.max_hours_per_day:
            cost_daily += count - teacher.max_hours_per_day

    cost_hours = 0
    for allocation in data.allocations:
        placed = lessons[(allocation.class_id, allocation.subject_id, allocation.teacher_id)]
        cost_hours += abs(allocation.weekly_hours - placed)

    costs = {
        "teacher_clashes": cost_clashes,
        "daily_limit": cost_daily,
        "break_hours": cost_breaks,
        "weekly_hours": cost_hours,
    }
    return sum(costs.values()), costs

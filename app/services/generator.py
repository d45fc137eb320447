import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from app.exceptions import (
    ConfigurationMissingError,
    InvalidConfigurationError,
    TimetableError,
    UnschedulableError,
)
from app.models.class_allocation import ClassAllocation
from app.models.class_group import ClassGroup
from app.models.global_settings import GlobalSettings
from app.models.placement import Placement
from app.models.teacher import Teacher
from app.models.timetable_data import TimetableData
from app.models.timetable_entry import TimetableEntry
from app.services.availability import AvailabilityTracker
from app.services.demand import sort_allocations_by_priority
from app.utils.costs import Grid, slot_score
from app.utils.utils import calculate_statistics, grid_to_entries, set_up, show_timetable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationContext:
    """
    Everything one generation run reads. Built fresh for every run.

    Attributes:
        settings: Grid shape
        classes: Class groups in report order
        teachers: Map of teacher ID to Teacher objects
        allocations: Allocations in placement order
    """
    settings: GlobalSettings
    classes: Tuple[ClassGroup, ...]
    teachers: Dict[int, Teacher]
    allocations: Tuple[ClassAllocation, ...]

    @property
    def allocations_by_id(self) -> Dict[int, ClassAllocation]:
        return {allocation.id: allocation for allocation in self.allocations}


@dataclass()
class GenerationResult:
    """Outcome of a generation run. A failed run carries no entries."""

    success: bool
    entries: List[TimetableEntry] = field(default_factory=list)
    stats: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "timetable": [entry.as_dict() for entry in self.entries],
            "stats": self.stats,
        }


def build_context(data: TimetableData) -> GenerationContext:
    """
    Checks that the configuration is present and freezes it for one run.

    Raises:
        ConfigurationMissingError: settings, classes or allocations are missing
        InvalidConfigurationError: an allocation points to an unknown teacher or class
    """
    if data.settings is None:
        raise ConfigurationMissingError("Please configure global settings first")
    if not data.classes:
        raise ConfigurationMissingError("Please add at least one class")
    if not data.allocations:
        raise ConfigurationMissingError("Please allocate teachers to subjects")

    class_ids = {cls.id for cls in data.classes}
    for allocation in data.allocations:
        if allocation.teacher_id not in data.teachers:
            raise InvalidConfigurationError(
                f"allocations[{allocation.id}].teacher_id", f"unknown teacher {allocation.teacher_id}")
        if allocation.class_id not in class_ids:
            raise InvalidConfigurationError(
                f"allocations[{allocation.id}].class_id", f"unknown class {allocation.class_id}")

    return GenerationContext(
        settings=data.settings,
        classes=tuple(data.classes),
        teachers=dict(data.teachers),
        allocations=tuple(sort_allocations_by_priority(data.allocations)),
    )


def is_slot_valid(grid: Grid, tracker: AvailabilityTracker, allocation: ClassAllocation,
                  teacher: Teacher, day: int, hour: int) -> bool:
    """
    Checks the hard constraints of one slot:
    - the class has no lesson there yet
    - the teacher is not teaching elsewhere at that time
    - the teacher is below the daily cap on that day
    """
    if grid[allocation.class_id][day][hour] is not None:
        return False

    if not tracker.is_free(teacher.id, day, hour):
        return False

    if tracker.daily_count(teacher.id, day) >= teacher.max_hours_per_day:
        return False

    return True


def find_best_slot(settings: GlobalSettings, grid: Grid, tracker: AvailabilityTracker,
                   allocation: ClassAllocation, teacher: Teacher) -> Optional[Tuple[int, int]]:
    """
    Finds the best slot for one hour of an allocation.

    Slots are scanned day by day, hour by hour. Only a strictly better score
    replaces the current best, so ties go to the earliest day and hour.

    Args:
        settings: Grid shape
        grid: Current timetable grid
        tracker: Teacher availability
        allocation: Allocation being placed
        teacher: Teacher of the allocation

    Returns:
        (day, hour) of the best slot, or None if no slot passes the hard checks
    """
    best_slot = None
    best_score = None

    for day in settings.days:
        for hour in settings.non_break_hours:
            if not is_slot_valid(grid, tracker, allocation, teacher, day, hour):
                continue

            score = slot_score(settings, grid, allocation, teacher, day, hour)
            if best_score is None or score > best_score:
                best_score = score
                best_slot = (day, hour)

    return best_slot


def assign_slot(grid: Grid, tracker: AvailabilityTracker, remaining_hours: Dict[int, int],
                allocation: ClassAllocation, slot: Tuple[int, int]):
    day, hour = slot
    grid[allocation.class_id][day][hour] = Placement(
        subject_id=allocation.subject_id,
        teacher_id=allocation.teacher_id,
        allocation_id=allocation.id,
    )
    tracker.mark_busy(allocation.teacher_id, day, hour)
    remaining_hours[allocation.id] -= 1


def schedule_all(context: GenerationContext, grid: Grid, tracker: AvailabilityTracker):
    """
    Places every hour of every allocation in placement order.

    All hours of one allocation are placed before the next allocation is
    looked at. There is no backtracking: the first hour without a valid
    slot aborts the run.

    Raises:
        UnschedulableError: an hour of an allocation has no valid slot left
    """
    remaining_hours = {allocation.id: allocation.weekly_hours for allocation in context.allocations}

    for allocation in context.allocations:
        teacher = context.teachers[allocation.teacher_id]

        while remaining_hours[allocation.id] > 0:
            slot = find_best_slot(context.settings, grid, tracker, allocation, teacher)
            if slot is None:
                raise UnschedulableError(allocation)
            assign_slot(grid, tracker, remaining_hours, allocation, slot)

        logger.debug(f"Placed {allocation.weekly_hours}h of {allocation.subject_name} "
                     f"for {allocation.class_name}")


def generate_timetable(data: TimetableData) -> GenerationResult:
    """
    Generates the timetable of every class group in a single greedy pass.

    The grid and the availability tracker only live for the duration of the
    call. A failed run returns the reason and no entries, so nothing partial
    ever reaches storage.

    Args:
        data: Configuration loaded from the request

    Returns:
        GenerationResult with entries for every (class, day, hour) and statistics
    """
    try:
        context = build_context(data)
    except TimetableError as e:
        logger.warning(f"Generation not started: {e}")
        return GenerationResult(success=False, error=str(e))

    settings = context.settings
    logger.info(f"Generating timetable: {len(context.classes)} classes, "
                f"{len(context.allocations)} allocations, "
                f"{settings.num_day_orders} days x {settings.hours_per_day} hours")

    grid = set_up(settings, list(context.classes))
    tracker = AvailabilityTracker(settings, context.teachers.keys())

    try:
        schedule_all(context, grid, tracker)
    except TimetableError as e:
        logger.warning(f"Generation failed: {e}")
        return GenerationResult(success=False, error=str(e))

    allocations = context.allocations_by_id
    show_timetable(settings, list(context.classes), grid, allocations)

    entries = grid_to_entries(settings, list(context.classes), grid, allocations)
    stats = calculate_statistics(settings, list(context.classes), grid, context.teachers)
    logger.info(f"Timetable generated: {stats['filled_slots']}/{stats['total_slots']} slots filled")

    return GenerationResult(success=True, entries=entries, stats=stats)

import logging
from typing import Dict, List
from app.models.class_allocation import ClassAllocation
from app.models.class_group import ClassGroup
from app.models.global_settings import GlobalSettings
from app.models.teacher import Teacher
from app.models.timetable_entry import TimetableEntry
from app.utils.costs import Grid

logger = logging.getLogger(__name__)


def set_up(settings: GlobalSettings, classes: List[ClassGroup]) -> Grid:
    """
    Sets up an empty timetable grid.

    Args:
        settings: Grid shape
        classes: Class groups that get a row of cells per day

    Returns:
        grid: Dict [class_id][day][hour] = None, without cells for break hours
    """
    return {
        cls.id: {
            day: {hour: None for hour in settings.non_break_hours}
            for day in settings.days
        }
        for cls in classes
    }


def grid_to_entries(settings: GlobalSettings, classes: List[ClassGroup], grid: Grid,
                    allocations: Dict[int, ClassAllocation]) -> List[TimetableEntry]:
    """
    Converts the grid to storage format: one entry for every
    (class, day, hour), break hours included as empty cells.

    Args:
        settings: Grid shape
        classes: Class groups in report order
        grid: Filled timetable grid
        allocations: Map of allocation ID to allocation, used for names

    Returns:
        List of TimetableEntry
    """
    entries = []
    for cls in classes:
        for day in settings.days:
            for hour in settings.hours:
                placement = grid[cls.id][day].get(hour)
                if placement is None:
                    entries.append(TimetableEntry(cls.id, day, hour, class_name=cls.name))
                    continue
                allocation = allocations[placement.allocation_id]
                entries.append(TimetableEntry(
                    class_id=cls.id,
                    day_order=day,
                    hour=hour,
                    subject_id=placement.subject_id,
                    teacher_id=placement.teacher_id,
                    class_name=cls.name,
                    subject_name=allocation.subject_name,
                    teacher_name=allocation.teacher_name,
                ))
    return entries


def format_rate(part: int, whole: int) -> str:
    return f"{part / whole * 100:.2f}%"


def calculate_statistics(settings: GlobalSettings, classes: List[ClassGroup], grid: Grid,
                         teachers: Dict[int, Teacher]) -> Dict[str, object]:
    """
    Calculates utilization and teacher preference statistics of a grid.

    Args:
        settings: Grid shape
        classes: Class groups of the grid
        grid: Filled timetable grid
        teachers: Map of teacher ID to Teacher objects

    Returns:
        total_slots, filled_slots, empty_slots, utilization_rate, preference_match_rate
    """
    total_slots = 0
    filled_slots = 0
    preferred_slots = 0

    for cls in classes:
        for day in settings.days:
            for hour in settings.non_break_hours:
                total_slots += 1
                placement = grid[cls.id][day][hour]
                if placement is None:
                    continue
                filled_slots += 1
                if day in teachers[placement.teacher_id].preferred_day_orders:
                    preferred_slots += 1

    return {
        "total_slots": total_slots,
        "filled_slots": filled_slots,
        "empty_slots": total_slots - filled_slots,
        "utilization_rate": format_rate(filled_slots, total_slots) if total_slots else "0.00%",
        "preference_match_rate": format_rate(preferred_slots, filled_slots) if filled_slots else "0%",
    }


def show_timetable(settings: GlobalSettings, classes: List[ClassGroup], grid: Grid,
                   allocations: Dict[int, ClassAllocation]):
    """
    Logs the grid of every class at DEBUG level, one line per hour.

    Args:
        settings: Grid shape
        classes: Class groups to display
        grid: Timetable grid
        allocations: Map of allocation ID to allocation, used for names
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    header = '{:8s} '.format('') + ''.join('Day {:<8d}'.format(day) for day in settings.days)
    for cls in classes:
        lines = [f'Timetable - {cls.name}', header]
        for hour in settings.hours:
            row = '{:8s} '.format(f'Hour {hour}')
            for day in settings.days:
                if settings.is_break(hour):
                    cell = 'BREAK'
                else:
                    placement = grid[cls.id][day][hour]
                    cell = allocations[placement.allocation_id].subject_name[:10] if placement else '-'
                row += '{:12s}'.format(cell)
            lines.append(row)
        logger.debug('\n'.join(lines))


def show_statistics(stats: Dict[str, object], hard_constraints_cost: int):
    """
    Logs statistics about the generated timetable.

    Args:
        stats: Output of calculate_statistics
        hard_constraints_cost: Total cost from check_hard_constraints
    """
    if hard_constraints_cost == 0:
        logger.info('Hard constraints satisfied: 100.00%')
    else:
        logger.warning(f'Hard constraints NOT satisfied, cost: {hard_constraints_cost}')

    logger.info(f"Slots filled: {stats['filled_slots']}/{stats['total_slots']} "
                f"({stats['utilization_rate']})")
    logger.info(f"Lessons on a preferred day: {stats['preference_match_rate']}")

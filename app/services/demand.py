from typing import Iterable, List
from app.models.class_allocation import ClassAllocation


def sort_allocations_by_priority(allocations: Iterable[ClassAllocation]) -> List[ClassAllocation]:
    """
    Orders allocations so the hardest demand is placed while the grid is emptiest.

    HIGH priority comes before MEDIUM and LOW; within the same priority the
    allocation needing more weekly hours comes first. sorted() is stable, so
    remaining ties keep the order they were received in.

    Args:
        allocations: Allocations in request order

    Returns:
        New list in placement order
    """
    return sorted(allocations, key=lambda a: (a.priority.rank, -a.weekly_hours))

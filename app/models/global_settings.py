from dataclasses import dataclass, field
from typing import FrozenSet, List


@dataclass(frozen=True)
class GlobalSettings:
    """
    Represents the shape of the weekly timetable grid.

    Every class shares the same grid: a number of day orders, each split
    into the same number of hours. Break hours are excluded from scheduling
    for all classes on every day.

    Attributes:
        num_day_orders: Number of days in the repeating cycle (1-based)
        hours_per_day: Number of teaching hours per day (1-based)
        break_hours: Hours that are never scheduled (e.g., {4} for lunch)
    """
    num_day_orders: int
    hours_per_day: int
    break_hours: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def days(self) -> List[int]:
        return list(range(1, self.num_day_orders + 1))

    @property
    def hours(self) -> List[int]:
        return list(range(1, self.hours_per_day + 1))

    @property
    def non_break_hours(self) -> List[int]:
        return [hour for hour in self.hours if hour not in self.break_hours]

    @property
    def morning_cutoff(self) -> int:
        """Last hour that still counts as morning"""
        return self.hours_per_day // 2

    def is_break(self, hour: int) -> bool:
        return hour in self.break_hours

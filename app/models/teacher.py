from dataclasses import dataclass, field
from typing import FrozenSet


@dataclass(frozen=True)
class TimePreferences:
    """
    Preferred hours of a teacher.

    Attributes:
        morning: Prefers hours up to the middle of the day
        afternoon: Prefers hours after the middle of the day
        specific: Individual hours the teacher prefers
    """
    morning: bool = False
    afternoon: bool = False
    specific: FrozenSet[int] = field(default_factory=frozenset)


@dataclass()
class Teacher:
    """
    Represents a teacher or instructor.

    A teacher can teach several subjects across class groups, never more
    than one lesson at a time and never more than max_hours_per_day lessons
    in a single day.

    Attributes:
        id: Unique identifier for the teacher
        name: Teacher's full name (e.g., "Prof. John Smith")
        max_hours_per_day: Daily teaching cap
        preferred_day_orders: Days the teacher would rather teach on
        preferred_time_slots: Preferred hours within a day
    """
    id: int
    name: str
    max_hours_per_day: int
    preferred_day_orders: FrozenSet[int] = field(default_factory=frozenset)
    preferred_time_slots: TimePreferences = field(default_factory=TimePreferences)

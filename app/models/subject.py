from dataclasses import dataclass
from enum import Enum


class Priority(str, Enum):
    """Placement priority of a subject. HIGH subjects are placed first."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        return {"HIGH": 1, "MEDIUM": 2, "LOW": 3}[self.value]


@dataclass()
class Subject:
    """
    Represents a subject taught to one class group.

    Attributes:
        id: Unique identifier for the subject
        name: Subject name (e.g., "Mathematics", "Physics")
        class_id: Class group that takes this subject
        weekly_hours: Number of hours to schedule every week
        priority: Placement priority (HIGH, MEDIUM, LOW)
    """
    id: int
    name: str
    class_id: int
    weekly_hours: int
    priority: Priority

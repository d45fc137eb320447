from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass()
class TimetableEntry:
    """
    Represents one cell of a persisted timetable.

    Empty cells (free hours and break hours) carry no subject and no teacher.
    The names are denormalized by the storage side and may be missing.

    Attributes:
        class_id: Class group owning the cell
        day_order: Day of the cycle (1-based)
        hour: Hour of the day (1-based)
        subject_id: Subject taught in the cell, if any
        teacher_id: Teacher teaching in the cell, if any
        class_name: Display name of the class group
        subject_name: Display name of the subject
        teacher_name: Display name of the teacher
    """
    class_id: int
    day_order: int
    hour: int
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    class_name: Optional[str] = None
    subject_name: Optional[str] = None
    teacher_name: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.subject_id is None and self.teacher_id is None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimetableEntry":
        return cls(
            class_id=data["class_id"],
            day_order=data["day_order"],
            hour=data["hour"],
            subject_id=data.get("subject_id"),
            teacher_id=data.get("teacher_id"),
            class_name=data.get("class_name"),
            subject_name=data.get("subject_name"),
            teacher_name=data.get("teacher_name"),
        )

    def as_dict(self) -> Dict[str, Any]:
        payload = {
            "class_id": self.class_id,
            "day_order": self.day_order,
            "hour": self.hour,
            "subject_id": self.subject_id,
            "teacher_id": self.teacher_id,
        }
        for key in ("class_name", "subject_name", "teacher_name"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload

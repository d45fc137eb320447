import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional
from app.models.teacher import Teacher
from app.models.timetable_entry import TimetableEntry

logger = logging.getLogger(__name__)


@dataclass()
class SlotChange:
    """
    A manual edit of one timetable cell.

    Attributes:
        class_id: Class group owning the cell
        day_order: Day of the cycle
        hour: Hour of the day
        subject_id: New subject, None to clear the cell
        teacher_id: New teacher, None to clear the cell
        subject_name: Display name of the new subject
    """
    class_id: int
    day_order: int
    hour: int
    subject_id: Optional[int] = None
    teacher_id: Optional[int] = None
    subject_name: Optional[str] = None

    @property
    def clears_slot(self) -> bool:
        return self.subject_id is None and self.teacher_id is None


@dataclass()
class SlotValidation:
    valid: bool
    reason: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        if self.valid:
            return {"valid": True}
        return {"valid": False, "reason": self.reason}


def validate_slot_change(change: SlotChange, timetable: Iterable[TimetableEntry],
                         teachers: Dict[int, Teacher]) -> SlotValidation:
    """
    Checks a manual edit against the persisted timetable.

    Clearing a cell is always valid. Placing a lesson is rejected when the
    teacher already teaches another class at that time, or when the teacher
    already has max_hours_per_day lessons on that day. The daily count covers
    every persisted lesson of the teacher on that day, the edited cell included.

    Args:
        change: Proposed edit
        timetable: Persisted timetable entries
        teachers: Map of teacher ID to Teacher objects

    Returns:
        SlotValidation with the rejection reason, if any
    """
    if change.clears_slot:
        return SlotValidation(valid=True)

    if change.teacher_id is None:
        return SlotValidation(valid=False, reason="A teacher is required to place a subject")

    if change.subject_id is None:
        return SlotValidation(valid=False, reason="A subject is required to assign a teacher")

    teacher = teachers.get(change.teacher_id)
    if teacher is None:
        return SlotValidation(valid=False, reason=f"Unknown teacher {change.teacher_id}")

    timetable = list(timetable)

    for entry in timetable:
        if (entry.teacher_id == change.teacher_id
                and entry.day_order == change.day_order
                and entry.hour == change.hour
                and entry.class_id != change.class_id):
            return SlotValidation(
                valid=False,
                reason=f"Teacher is already teaching {entry.subject_name} "
                       f"in {entry.class_name} at this time",
            )

    day_lessons = sum(
        1 for entry in timetable
        if entry.teacher_id == change.teacher_id
        and entry.day_order == change.day_order
        and entry.subject_id is not None
    )
    if day_lessons >= teacher.max_hours_per_day:
        return SlotValidation(
            valid=False,
            reason=f"Teacher has reached maximum hours ({teacher.max_hours_per_day}) for this day",
        )

    return SlotValidation(valid=True)


def apply_slot_change(change: SlotChange, timetable: Iterable[TimetableEntry],
                      teachers: Dict[int, Teacher]) -> List[TimetableEntry]:
    """
    Validates an edit and returns the timetable with the cell updated.
    The given entries are left untouched.

    Raises:
        ValueError: the edit is rejected, or the cell does not exist
    """
    timetable = list(timetable)
    validation = validate_slot_change(change, timetable, teachers)
    if not validation.valid:
        raise ValueError(validation.reason)

    updated = []
    found = False
    for entry in timetable:
        if (entry.class_id, entry.day_order, entry.hour) == (change.class_id, change.day_order, change.hour):
            teacher = teachers.get(change.teacher_id)
            entry = replace(
                entry,
                subject_id=change.subject_id,
                teacher_id=change.teacher_id,
                subject_name=change.subject_name,
                teacher_name=teacher.name if teacher else None,
            )
            found = True
        updated.append(entry)

    if not found:
        raise ValueError(
            f"No cell for class {change.class_id} on day {change.day_order}, hour {change.hour}"
        )

    logger.info(f"Slot updated: class {change.class_id}, day {change.day_order}, hour {change.hour}")
    return updated

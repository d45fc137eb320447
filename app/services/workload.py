from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List
from app.models.teacher import Teacher
from app.models.timetable_entry import TimetableEntry


@dataclass()
class TeacherWorkload:
    teacher_id: int
    teacher_name: str
    weekly_hours: int
    max_hours_per_day: int
    daily_hours: Dict[int, int] = field(default_factory=dict)  # day -> lessons
    subjects: List[str] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "teacher_id": self.teacher_id,
            "teacher_name": self.teacher_name,
            "weekly_hours": self.weekly_hours,
            "daily_hours": dict(self.daily_hours),
            "max_hours_per_day": self.max_hours_per_day,
            "subjects": list(self.subjects),
        }


def get_teacher_workload(timetable: Iterable[TimetableEntry], teachers: Iterable[Teacher],
                         num_day_orders: int = 5) -> List[TeacherWorkload]:
    """
    Summarizes the persisted load of every teacher.

    Args:
        timetable: Persisted timetable entries
        teachers: Teachers in report order
        num_day_orders: Days to report in daily_hours

    Returns:
        One TeacherWorkload per teacher
    """
    timetable = list(timetable)
    workload = []

    for teacher in teachers:
        slots = [entry for entry in timetable if entry.teacher_id == teacher.id]

        daily_hours = {day: 0 for day in range(1, num_day_orders + 1)}
        for entry in slots:
            if entry.day_order in daily_hours:
                daily_hours[entry.day_order] += 1

        # unique names, first appearance order
        subjects = list(dict.fromkeys(entry.subject_name for entry in slots if entry.subject_name))

        workload.append(TeacherWorkload(
            teacher_id=teacher.id,
            teacher_name=teacher.name,
            weekly_hours=len(slots),
            max_hours_per_day=teacher.max_hours_per_day,
            daily_hours=daily_hours,
            subjects=subjects,
        ))

    return workload

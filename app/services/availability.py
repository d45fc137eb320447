from typing import Dict, Iterable
from app.models.global_settings import GlobalSettings


class AvailabilityTracker:
    """
    Tracks, for every teacher, which (day, hour) slots are already taken and
    how many lessons have been placed on each day.

    Break hours start out busy. Slots are never released: the generator does
    a single greedy pass without undo.
    """

    def __init__(self, settings: GlobalSettings, teacher_ids: Iterable[int]):
        self.settings = settings
        # teacher_id -> day -> hour -> free
        self._free: Dict[int, Dict[int, Dict[int, bool]]] = {}
        # teacher_id -> day -> lessons placed
        self._daily: Dict[int, Dict[int, int]] = {}

        for teacher_id in teacher_ids:
            self._free[teacher_id] = {
                day: {hour: not settings.is_break(hour) for hour in settings.hours}
                for day in settings.days
            }
            self._daily[teacher_id] = {day: 0 for day in settings.days}

    def is_free(self, teacher_id: int, day: int, hour: int) -> bool:
        return self._free[teacher_id][day][hour]

    def daily_count(self, teacher_id: int, day: int) -> int:
        return self._daily[teacher_id][day]

    def mark_busy(self, teacher_id: int, day: int, hour: int):
        """Takes the slot and counts it towards the teacher's day."""
        if not self._free[teacher_id][day][hour]:
            raise ValueError(
                f"Teacher {teacher_id} is already busy on day {day}, hour {hour}"
            )
        self._free[teacher_id][day][hour] = False
        self._daily[teacher_id][day] += 1

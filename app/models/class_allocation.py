from dataclasses import dataclass
from typing import Optional
from app.models.subject import Priority


@dataclass()
class ClassAllocation:
    """Represents a subject bound to the teacher who teaches it"""

    id: int  # allocation id
    subject_id: int
    teacher_id: int
    class_id: int
    weekly_hours: int  # hours to place per week
    priority: Priority
    subject_name: str = ""
    class_name: str = ""
    teacher_name: Optional[str] = None

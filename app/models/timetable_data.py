from dataclasses import dataclass, field
from typing import Dict, List, Optional
from app.models.class_allocation import ClassAllocation
from app.models.class_group import ClassGroup
from app.models.global_settings import GlobalSettings
from app.models.teacher import Teacher


@dataclass()
class TimetableData:
    """
    Container for all data required by the timetable generator.

    This structure holds the configuration owned by the storage side, as
    received in a generation request.

    Attributes:
        settings: Grid shape, or None when it was never configured
        classes: Class groups in the order they are reported
        teachers: Map of teacher ID to Teacher objects
        allocations: Subject-teacher bindings in request order
    """

    settings: Optional[GlobalSettings]
    classes: List[ClassGroup] = field(default_factory=list)
    teachers: Dict[int, Teacher] = field(default_factory=dict)  # id -> teacher
    allocations: List[ClassAllocation] = field(default_factory=list)

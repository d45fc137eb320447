from dataclasses import dataclass


@dataclass(frozen=True)
class Placement:
    """One lesson written into a grid cell by the generator"""

    subject_id: int
    teacher_id: int
    allocation_id: int

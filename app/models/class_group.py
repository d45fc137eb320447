from dataclasses import dataclass


@dataclass()
class ClassGroup:
    """
    Represents a class group in the timetable system.

    A class group is a set of students that attend every lesson together,
    so it owns one row of cells per day in the timetable.

    Attributes:
        id: Unique identifier for the class group
        name: Display name (e.g., "Grade 10-A")
    """
    id: int
    name: str

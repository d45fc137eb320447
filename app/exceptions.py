"""Errors raised while loading configuration or generating a timetable."""


class TimetableError(Exception):
    """Base class for errors reported back to the caller as a failed result"""


class ConfigurationMissingError(TimetableError):
    """Settings, classes or allocations were never configured"""


class InvalidConfigurationError(TimetableError):
    """The request payload holds values outside their allowed range"""

    def __init__(self, field_path: str, message: str):
        super().__init__(f"{field_path}: {message}")
        self.field_path = field_path


class UnschedulableError(TimetableError):
    """No valid slot is left for one hour of an allocation"""

    def __init__(self, allocation):
        super().__init__(
            f"Cannot schedule {allocation.subject_name} for {allocation.class_name}. "
            f"No valid slot found."
        )
        self.allocation = allocation

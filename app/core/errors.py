from typing import Any, List, Optional


class SignUpSheetError(Exception):
    """Base class for failures the sign-up sheet reports back to the caller."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class CapacityDecreaseRejected(SignUpSheetError):
    def __init__(self, current_capacity: int, requested_capacity: int):
        super().__init__(
            "Value of maximum choosers can only be increased! No change has been made to max choosers."
        )
        self.current_capacity = current_capacity
        self.requested_capacity = requested_capacity


class CyclicDependencyError(SignUpSheetError):
    def __init__(self, cycle: Optional[List[Any]] = None):
        super().__init__("There may be one or more cycles in the dependencies. Please correct them")
        self.cycle = cycle or []


class InvalidDeadlineValue(SignUpSheetError):
    def __init__(self, field: str, value: Any = None):
        super().__init__(f"Please enter a valid {field}")
        self.field = field
        self.value = value


class InvalidPriorityValue(SignUpSheetError):
    def __init__(self, value: Any):
        super().__init__("Invalid priority")
        self.value = value


class SignupRejected(SignUpSheetError):
    pass


class NotFoundError(SignUpSheetError):
    def __init__(self, entity: str, identifier: Any):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.identifier = identifier

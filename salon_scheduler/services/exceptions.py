class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class NotFoundError(ServiceError):
    """Raised when a referenced record does not exist in the store."""

    def __init__(self, kind: str, identifier: str, *, cause: Exception | None = None):
        super().__init__(f"{kind} {identifier} not found", cause=cause)
        self.kind = kind
        self.identifier = identifier


class SlotUnavailableError(ServiceError):
    """Raised when a booking targets a blocked or already occupied slot."""


class InvalidStateError(ServiceError):
    """Raised when an appointment transition is not allowed from its current status."""


class AmbiguousBlockRuleError(ServiceError):
    """Raised when a block rule does not describe exactly one date or weekday."""

    def __init__(self, problems: list[str]):
        super().__init__("Invalid block rule: " + "; ".join(problems))
        self.problems = list(problems)


class InvalidTimeFormatError(ServiceError, ValueError):
    """Raised for malformed "HH:MM" input."""

    def __init__(self, value: object):
        super().__init__(f"Invalid time {value!r}, expected HH:MM")
        self.value = value

class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class PunchError(ValidationError):
    """A punch/lunch action is not allowed in the current attendance state.

    ``code`` is stable and meant for API clients; the message is shown to the user.
    """

    code = "PUNCH_ERROR"


class NotAWorkingDayError(PunchError):
    code = "NOT_A_WORKING_DAY"

    def __init__(self, day_name: str, working_days):
        self.day_name = day_name
        self.working_days = list(working_days)
        super().__init__(
            f"Today is {day_name}. You can only punch in on your working days: {', '.join(self.working_days)}"
        )


class IsHolidayError(PunchError):
    code = "IS_HOLIDAY"

    def __init__(self, holiday_name: str):
        self.holiday_name = holiday_name
        super().__init__(f"Today is a holiday: {holiday_name}. No attendance required.")


class AlreadyPunchedInError(PunchError):
    code = "ALREADY_PUNCHED_IN"

    def __init__(self):
        super().__init__("Already punched in today")


class AlreadyCompletedError(PunchError):
    code = "ALREADY_COMPLETED"

    def __init__(self):
        super().__init__("Attendance already completed for today")


class NoActiveAttendanceError(PunchError):
    code = "NO_ACTIVE_ATTENDANCE"

    def __init__(self):
        super().__init__("No active attendance found")


class NoActiveLunchBreakError(PunchError):
    code = "NO_ACTIVE_LUNCH_BREAK"

    def __init__(self):
        super().__init__("No active lunch break found")


class LunchAlreadyActiveError(PunchError):
    code = "LUNCH_ALREADY_ACTIVE"

    def __init__(self):
        super().__init__("A lunch break is already in progress")

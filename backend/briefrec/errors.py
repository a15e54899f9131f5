"""Errors raised by the recommendation core."""


class UserNotFound(LookupError):
    """Raised when a profile is requested for a user that does not exist."""

    def __init__(self, user_id):
        self.user_id = str(user_id)
        super().__init__(f"User {self.user_id} not found")


class ProfileDecodeError(ValueError):
    """Raised when a stored profile's ranked-list data cannot be parsed."""

    def __init__(self, field: str, detail: str = ""):
        self.field = field
        message = f"Malformed profile field {field!r}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

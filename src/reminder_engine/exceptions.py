"""Exceptions for the reminder engine."""


class RemindersError(Exception):
    """Base exception for reminder operations."""

    pass


class ParseError(RemindersError):
    """A user-supplied date, priority or URL could not be parsed.

    Always recoverable: callers skip the affected field or filter.
    """

    def __init__(self, kind: str, value: str) -> None:
        super().__init__(f"Could not parse {kind}: {value!r}")
        self.kind = kind
        self.value = value


class AccessDeniedError(RemindersError):
    """User hasn't granted Reminders access.

    To fix: Open System Settings > Privacy & Security > Reminders
    and grant access to this application.
    """

    def __init__(self, message: str | None = None) -> None:
        default_msg = (
            "Reminders access denied. Please grant access in "
            "System Settings > Privacy & Security > Reminders."
        )
        super().__init__(message or default_msg)


class PermissionTimeoutError(RemindersError):
    """Permission request timed out waiting for user response."""

    def __init__(self, timeout_seconds: float = 60) -> None:
        super().__init__(
            f"Permission request timed out after {timeout_seconds} seconds. "
            "Please respond to the permission dialog and try again."
        )
        self.timeout_seconds = timeout_seconds


class NotFoundError(RemindersError):
    """Reminder or list not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(f"{resource_type} not found: {resource_id}")
        self.resource_type = resource_type
        self.resource_id = resource_id


class NoListAvailableError(RemindersError):
    """No list could be resolved as the target of a new reminder."""

    def __init__(self) -> None:
        super().__init__(
            "No reminder lists available. "
            "Create a list first or configure a reminder account."
        )


class StoreError(RemindersError):
    """The reminder store rejected a write, with NSError details if any."""

    def __init__(
        self,
        message: str,
        domain: str | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.domain = domain
        self.code = code

    @classmethod
    def from_nserror(cls, error: object) -> "StoreError":
        """Create from an NSError object."""
        if error is None:
            return cls("Unknown EventKit error")

        # Extract NSError details
        try:
            domain = str(error.domain()) if hasattr(error, "domain") else None
            code = int(error.code()) if hasattr(error, "code") else None
            description = (
                str(error.localizedDescription())
                if hasattr(error, "localizedDescription")
                else str(error)
            )
        except Exception:
            return cls(str(error))

        return cls(description, domain=domain, code=code)

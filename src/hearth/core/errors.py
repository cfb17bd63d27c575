"""Exception hierarchy for collaborator failures."""


class HearthError(Exception):
    """Base class for errors raised by hearth components."""


class AIBackendError(HearthError):
    """The AI parsing backend is unreachable or returned an error response."""


class AuthenticationRequiredError(AIBackendError):
    """AI features were requested without an authenticated household member."""


class CalendarError(HearthError):
    """The calendar collaborator rejected a request (no calendar, expired auth)."""


class NotFoundError(HearthError, LookupError):
    """A store lookup by id found nothing."""

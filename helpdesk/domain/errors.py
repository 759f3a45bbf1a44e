"""Domain errors raised by policies and use cases.

The API layer maps each of these to an HTTP status in ``helpdesk.main``.
"""


class HelpdeskError(Exception):
    """Base class for all helpdesk domain errors."""


class NoAgentsAvailable(HelpdeskError):
    def __init__(self, message: str = "No agents available for assignment"):
        super().__init__(message)


class TicketValidationError(HelpdeskError):
    def __init__(self, violations: list[str]):
        self.violations = list(violations)
        super().__init__("; ".join(self.violations) or "Invalid ticket")


class NotFound(HelpdeskError):
    pass


class TicketNotFound(NotFound):
    def __init__(self, ticket_id: int):
        self.ticket_id = ticket_id
        super().__init__(f"Ticket {ticket_id} not found")


class NotAuthorized(HelpdeskError):
    pass


class FeedbackRejected(HelpdeskError):
    pass


class AuditWriteFailure(HelpdeskError):
    """An audit entry could not be persisted. Logged, never surfaced."""


class DuplicateUser(HelpdeskError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"User '{email}' already exists")


class InvalidCredentials(HelpdeskError):
    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)

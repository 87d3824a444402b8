# app/core/errors.py
"""Typed failures raised by the store and their HTTP status codes."""


class AppError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TicketNotFoundError(AppError):
    """Raised when no ticket with the requested id exists."""

    def __init__(self, ticket_id: int):
        super().__init__(f"Ticket {ticket_id} not found", status_code=404)
        self.ticket_id = ticket_id


class ValidationFailedError(AppError):
    """Raised when a required field is missing or a paging value is invalid."""

    def __init__(self, message: str = "Invalid input"):
        super().__init__(message, status_code=400)


class PersistenceFailureError(AppError):
    """Raised when the backing store cannot complete an operation."""

    def __init__(self, message: str = "Persistence failure"):
        super().__init__(message, status_code=500)


__all__ = [
    "AppError",
    "TicketNotFoundError",
    "ValidationFailedError",
    "PersistenceFailureError",
]

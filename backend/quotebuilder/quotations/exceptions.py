"""Exceptions raised by the quotations module."""

from typing import Iterable, Optional, Union


class QuotationDomainException(Exception):
    """Base class for quotation exceptions."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class QuotationNotFoundException(QuotationDomainException):
    """Raised when a quotation cannot be found by storage id or reference."""
    def __init__(self, quotation_id: Union[int, str]):
        super().__init__("Quotation not found")
        self.quotation_id = quotation_id


class InvalidQuoteStatusException(QuotationDomainException):
    """Raised when a requested status is not one of the defined statuses."""
    def __init__(self, status: object, allowed: Iterable[str]):
        self.allowed = list(allowed)
        super().__init__(f"Invalid status '{status}'. Status must be one of {', '.join(self.allowed)}")
        self.status = status


class InvalidStatusTransitionException(QuotationDomainException):
    """Raised when the requested status is not reachable from the current one."""
    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested


class QuoteUpdateForbiddenException(QuotationDomainException):
    """Raised when a full-field update is attempted on a locked quotation."""
    def __init__(self, status: str, blocking: Iterable[str]):
        self.blocking = list(blocking)
        if len(self.blocking) > 1:
            names = ", ".join(self.blocking[:-1]) + f", or {self.blocking[-1]}"
        else:
            names = "".join(self.blocking)
        super().__init__(f"Quotations in {names} status cannot be updated")
        self.status = status


class QuoteDeletionForbiddenException(QuotationDomainException):
    """Raised when a quotation outside DRAFT is deleted."""
    def __init__(self, status: str):
        super().__init__("Only DRAFT quotations can be deleted")
        self.status = status


class DuplicateQuoteNumberException(QuotationDomainException):
    """Raised when a quote number is already taken."""
    def __init__(self, quote_number: Optional[str] = None, field: str = "quote_number"):
        super().__init__(f"Duplicate value for {field}. Please use another value.")
        self.quote_number = quote_number
        self.field = field


class QuotationPersistenceException(QuotationDomainException):
    """Raised on unexpected database errors."""
    def __init__(self, operation: str, detail: str = "Database error"):
        super().__init__(f"Error during quotation {operation}: {detail}")
        self.operation = operation
        self.detail = detail

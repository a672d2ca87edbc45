"""Exceptions of the PDF module."""

from typing import Optional


class PDFDomainException(Exception):
    """Base class for PDF exceptions."""
    pass


class PDFGenerationException(PDFDomainException):
    """Raised when building a PDF fails."""
    def __init__(self, message: str, original_exception: Optional[Exception] = None):
        full_message = f"Error while generating the PDF: {message}"
        if original_exception:
            full_message += f" (original error: {original_exception})"
        super().__init__(full_message)
        self.message = full_message
        self.original_exception = original_exception

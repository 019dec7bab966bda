"""Custom exceptions for streampdf."""

from typing import Optional


class StreamPdfError(Exception):
    """Base exception for streampdf errors."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ResourceError(StreamPdfError):
    """Exception raised when a page, font, image or the output sink cannot be created or written."""

    pass


class DecodeError(ResourceError):
    """Exception raised when image bytes cannot be decoded."""

    pass


class StateError(StreamPdfError):
    """Exception raised when an operation is not valid in the current lifecycle state."""

    pass

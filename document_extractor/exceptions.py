"""Custom exceptions for document extractor."""

from typing import Optional


class DocumentExtractorError(Exception):
    """Base exception for document extractor errors.

    Every error carries the transport status code the envelope reports.
    """

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class MissingConfigurationError(DocumentExtractorError):
    """Raised when the optical extraction backend credential is not set."""

    status_code = 500


class MissingFileError(DocumentExtractorError):
    """Raised when a request carries no file."""

    status_code = 400

    def __init__(self, message: str = "No file provided"):
        super().__init__(message)


class FileTooLargeError(DocumentExtractorError):
    """Raised when a file exceeds the size ceiling."""

    status_code = 400

    def __init__(self, message: str = "File size exceeds 25MB limit"):
        super().__init__(message)


class UnsupportedTypeError(DocumentExtractorError):
    """Raised when the declared content type is not supported."""

    status_code = 400

    def __init__(self, content_type: str):
        super().__init__(f"Unsupported file type: {content_type}")
        self.content_type = content_type


class ExtractionError(DocumentExtractorError):
    """Raised when a strategy fails to extract text."""

    status_code = 500

    def __init__(self, strategy: str, reason: str):
        super().__init__(f"{strategy} extraction failed: {reason}")
        self.strategy = strategy
        self.reason = reason

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    PAYLOAD_TOO_LARGE = "PayloadTooLarge"
    UNSUPPORTED_TYPE = "UnsupportedType"
    UNREADABLE_CONTENT = "UnreadableContent"
    EXTRACTION_FAILED = "ExtractionFailed"
    TIMEOUT = "Timeout"
    RATE_LIMITED = "RateLimited"
    QUOTA_EXCEEDED = "QuotaExceeded"
    UPSTREAM_ERROR = "UpstreamError"
    MALFORMED_RESPONSE = "MalformedResponse"
    UNKNOWN = "Unknown"


class DocBriefError(Exception):
    """Base exception for application errors."""
    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(DocBriefError):
    """Raised when an upload is rejected before extraction."""
    pass


class PayloadTooLargeError(ValidationError):
    kind = ErrorKind.PAYLOAD_TOO_LARGE

    def __init__(self, size_bytes: int, max_bytes: int):
        super().__init__(
            f"File size exceeds limit. Maximum allowed size is {max_bytes / 1024 / 1024:.0f}MB, "
            f"but file is {size_bytes / 1024 / 1024:.2f}MB."
        )
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class UnsupportedFormatError(ValidationError):
    kind = ErrorKind.UNSUPPORTED_TYPE

    def __init__(self, content_type: Optional[str]):
        super().__init__(
            f"Unsupported file type: {content_type}. Please upload a PDF, DOCX, or TXT file."
        )
        self.content_type = content_type


class ExtractionError(DocBriefError):
    """Raised when a document parser fails on the payload."""
    kind = ErrorKind.EXTRACTION_FAILED

    def __init__(self, format: str, message: str = None, original_error: Exception = None):
        super().__init__(
            message or f"Failed to extract text from {format.upper()}",
            original_error=original_error,
        )
        self.format = format


class UnreadableContentError(ExtractionError):
    """Raised when extraction succeeds but yields too little text to summarize."""
    kind = ErrorKind.UNREADABLE_CONTENT


class RemoteError(DocBriefError):
    """Raised when a remote completion endpoint answers with a non-success status.

    ``kind`` is decided by the client from the HTTP status and the
    provider's error code, so callers never inspect the message text.
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        kind: ErrorKind = ErrorKind.UPSTREAM_ERROR,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.status = status
        self.kind = kind


class MalformedResponseError(DocBriefError):
    """Raised when a provider response lacks the expected candidate text."""
    kind = ErrorKind.MALFORMED_RESPONSE


class RequestTimeoutError(DocBriefError):
    """Raised when the caller-level deadline expires before the pipeline finishes."""
    kind = ErrorKind.TIMEOUT

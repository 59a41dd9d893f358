from dataclasses import dataclass
from typing import Dict

from docbrief.core.exceptions import DocBriefError, ErrorKind, ValidationError, ExtractionError
from docbrief.utils.logger import logger


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    http_status: int
    message: str

    def to_response(self) -> Dict[str, str]:
        return {"error": self.message}


STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.PAYLOAD_TOO_LARGE: 400,
    ErrorKind.UNSUPPORTED_TYPE: 400,
    ErrorKind.UNREADABLE_CONTENT: 400,
    ErrorKind.EXTRACTION_FAILED: 400,
    ErrorKind.TIMEOUT: 504,
    ErrorKind.RATE_LIMITED: 429,
    ErrorKind.QUOTA_EXCEEDED: 503,
    ErrorKind.UPSTREAM_ERROR: 500,
    ErrorKind.MALFORMED_RESPONSE: 500,
    ErrorKind.UNKNOWN: 500,
}

# Fixed user-facing text for failures whose raw message may carry provider details
REMOTE_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.TIMEOUT: "Request timeout. Please try with a smaller file or try again later.",
    ErrorKind.RATE_LIMITED: "Rate limit exceeded. Please try again in a few moments.",
    ErrorKind.QUOTA_EXCEEDED: "API quota exceeded. Please try again later.",
    ErrorKind.UPSTREAM_ERROR: "The AI service returned an error. Please try again.",
    ErrorKind.MALFORMED_RESPONSE: "Received an invalid response from the AI service. Please try again.",
    ErrorKind.UNKNOWN: "Request failed. Please try again.",
}


def classify_error(error: BaseException) -> ClassifiedError:
    """Map any failure raised by the pipeline to a user-facing kind, status and message.

    Validation and extraction errors carry messages written for the user and
    are passed through. Remote and unknown failures get fixed messages so that
    provider error bodies never reach the client.
    """
    kind = error.kind if isinstance(error, DocBriefError) else ErrorKind.UNKNOWN
    status = STATUS_BY_KIND[kind]

    if isinstance(error, (ValidationError, ExtractionError)):
        message = error.message
    else:
        message = REMOTE_MESSAGES[kind]

    if kind is ErrorKind.UNKNOWN:
        logger.error(f"Unclassified error: {type(error).__name__}: {error}")

    return ClassifiedError(kind=kind, http_status=status, message=message)

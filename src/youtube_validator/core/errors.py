"""URL validation error taxonomy, severity and category classification."""

import logging
from enum import Enum
from typing import Dict, Optional, Union

# Configure logging
logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of URL validation error kinds."""

    INVALID_FORMAT = "INVALID_FORMAT"
    NOT_YOUTUBE = "NOT_YOUTUBE"
    MISSING_VIDEO_ID = "MISSING_VIDEO_ID"
    PRIVATE_VIDEO = "PRIVATE_VIDEO"
    VIDEO_NOT_FOUND = "VIDEO_NOT_FOUND"
    NETWORK_ERROR = "NETWORK_ERROR"
    DUPLICATE_VIDEO = "DUPLICATE_VIDEO"

    @classmethod
    def parse(cls, value: Union["ErrorKind", str, None]) -> Optional["ErrorKind"]:
        """Look up a kind by value, returning None for anything unrecognized.

        Args:
            value: ErrorKind member or its string value

        Returns:
            Matching ErrorKind or None
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class ErrorSeverity(str, Enum):
    """How serious an error is for the person who caused it."""

    LOW = "low"        # user can fix the input
    MEDIUM = "medium"  # user needs another video or decision
    HIGH = "high"      # system or environment problem


class ErrorCategory(str, Enum):
    """Broad grouping of error kinds."""

    FORMAT_ERROR = "FORMAT_ERROR"
    VIDEO_ERROR = "VIDEO_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"


ERROR_SEVERITY_MAP: Dict[ErrorKind, ErrorSeverity] = {
    ErrorKind.INVALID_FORMAT: ErrorSeverity.LOW,
    ErrorKind.NOT_YOUTUBE: ErrorSeverity.LOW,
    ErrorKind.MISSING_VIDEO_ID: ErrorSeverity.LOW,
    ErrorKind.PRIVATE_VIDEO: ErrorSeverity.MEDIUM,
    ErrorKind.VIDEO_NOT_FOUND: ErrorSeverity.MEDIUM,
    ErrorKind.DUPLICATE_VIDEO: ErrorSeverity.MEDIUM,
    ErrorKind.NETWORK_ERROR: ErrorSeverity.HIGH,
}

ERROR_CATEGORY_MAP: Dict[ErrorKind, ErrorCategory] = {
    ErrorKind.INVALID_FORMAT: ErrorCategory.FORMAT_ERROR,
    ErrorKind.NOT_YOUTUBE: ErrorCategory.FORMAT_ERROR,
    ErrorKind.MISSING_VIDEO_ID: ErrorCategory.FORMAT_ERROR,
    ErrorKind.PRIVATE_VIDEO: ErrorCategory.VIDEO_ERROR,
    ErrorKind.VIDEO_NOT_FOUND: ErrorCategory.VIDEO_ERROR,
    ErrorKind.DUPLICATE_VIDEO: ErrorCategory.VIDEO_ERROR,
    ErrorKind.NETWORK_ERROR: ErrorCategory.SYSTEM_ERROR,
}

_LOG_LEVELS: Dict[ErrorSeverity, int] = {
    ErrorSeverity.LOW: logging.DEBUG,
    ErrorSeverity.MEDIUM: logging.INFO,
    ErrorSeverity.HIGH: logging.ERROR,
}


class URLValidationError(ValueError):
    """Raised when a URL cannot be turned into a YouTube video ID."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        suggestion: Optional[str] = None,
        example: Optional[str] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.suggestion = suggestion
        self.example = example

    def __repr__(self) -> str:
        return f"URLValidationError(kind={self.kind.value!r}, message={self.message!r})"


def get_error_severity(kind: Union[ErrorKind, str, None]) -> ErrorSeverity:
    """Get the severity of an error kind.

    Unknown kinds are treated as MEDIUM so that errors coming from
    collaborators never break classification.

    Args:
        kind: ErrorKind or its string value

    Returns:
        ErrorSeverity for the kind
    """
    parsed = ErrorKind.parse(kind)
    if parsed is None:
        return ErrorSeverity.MEDIUM
    return ERROR_SEVERITY_MAP[parsed]


def get_error_category(kind: Union[ErrorKind, str, None]) -> ErrorCategory:
    """Get the category of an error kind (VIDEO_ERROR when unknown)."""
    parsed = ErrorKind.parse(kind)
    if parsed is None:
        return ErrorCategory.VIDEO_ERROR
    return ERROR_CATEGORY_MAP[parsed]


def log_validation_error(error: URLValidationError, context: str = "") -> None:
    """Log a validation error at a level matching its severity.

    Args:
        error: Validation error to log
        context: Optional text identifying where the error happened
    """
    severity = get_error_severity(error.kind)
    prefix = f"{context}: " if context else ""
    logger.log(
        _LOG_LEVELS[severity],
        f"{prefix}{error.kind.value} ({severity.value}) - {error.message}"
    )

"""
VideoValidationWorkflow checks a submitted URL before a video is registered.

Steps:
1. Resolve the response language
2. Normalize the URL
3. Reject videos that are already registered
4. Fetch video metadata
5. Reject videos that are not public
6. Build a localized JSON-ready response
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from youtube_validator.core.errors import (
    ErrorKind,
    URLValidationError,
    get_error_severity,
    log_validation_error,
)
from youtube_validator.core.normalizer import NormalizedURL, normalize
from youtube_validator.core.registry import VideoRegistry
from youtube_validator.core.video_info import VideoFetchError, VideoInfo, map_fetch_error
from youtube_validator.i18n.language import DEFAULT_LANGUAGE, is_language_supported, resolve_language
from youtube_validator.i18n.messages import get_message

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_KIND = "UNKNOWN_ERROR"

HTTP_STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_FORMAT: 400,
    ErrorKind.NOT_YOUTUBE: 400,
    ErrorKind.MISSING_VIDEO_ID: 400,
    ErrorKind.PRIVATE_VIDEO: 403,
    ErrorKind.VIDEO_NOT_FOUND: 404,
    ErrorKind.DUPLICATE_VIDEO: 409,
    ErrorKind.NETWORK_ERROR: 500,
}


def status_for_error(kind: Union[ErrorKind, str, None]) -> int:
    """HTTP status for an error kind; unknown kinds are server errors."""
    parsed = ErrorKind.parse(kind)
    if parsed is None:
        return 500
    return HTTP_STATUS_BY_KIND[parsed]


def response_headers(language: str) -> Dict[str, str]:
    """Headers announcing the response language."""
    return {"Content-Language": language}


def create_localized_error_response(
    error: Any,
    language: str = DEFAULT_LANGUAGE,
    include_details: bool = False
) -> Dict[str, Any]:
    """Build the JSON body for a failed request.

    Args:
        error: URLValidationError, ErrorKind, kind string or any exception
        language: Response language
        include_details: Whether to include the example URL

    Returns:
        {"success": False, "error": {...}}
    """
    if not is_language_supported(language):
        language = DEFAULT_LANGUAGE

    if isinstance(error, URLValidationError):
        kind = error.kind
    elif isinstance(error, (ErrorKind, str)):
        kind = ErrorKind.parse(error)
    else:
        kind = ErrorKind.parse(getattr(error, "kind", None))

    if kind is None:
        fallback = str(error) if isinstance(error, BaseException) else ""
        return {
            "success": False,
            "error": {
                "kind": UNKNOWN_ERROR_KIND,
                "message": fallback or "An error occurred",
                "language": language,
            },
        }

    record = get_message(kind, language)
    body: Dict[str, Any] = {
        "kind": kind.value,
        "message": record.message,
        "language": language,
    }
    if record.suggestion is not None:
        body["suggestion"] = record.suggestion
    if record.user_action is not None:
        body["userAction"] = record.user_action
    if include_details and record.example is not None:
        body["example"] = record.example

    return {"success": False, "error": body}


def create_success_response(
    normalized: NormalizedURL,
    video: VideoInfo,
    language: str
) -> Dict[str, Any]:
    """Build the JSON body for a video that can be registered."""
    data = video.to_dict()
    data.update({
        "canonical": normalized.canonical,
        "original": normalized.original,
        "metadata": normalized.metadata.to_dict() if normalized.metadata else None,
        "isEmbeddable": video.embeddable,
        "canRegister": True,
    })
    return {"success": True, "data": data, "language": language}


@dataclass
class ValidationOutcome:
    """HTTP-shaped result of a validation run."""
    status: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)
    normalized: Optional[NormalizedURL] = None
    video: Optional[VideoInfo] = None

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


class VideoValidationWorkflow:
    """Validates a submitted URL against the registry and the video source"""

    def __init__(self, fetcher: Any, registry: Optional[VideoRegistry] = None):
        """Initialize the validation workflow.

        Args:
            fetcher: Object with get_video_info(video_id) -> VideoInfo
            registry: Registry used for duplicate detection (optional)
        """
        self.fetcher = fetcher
        self.registry = registry

    def validate(
        self,
        url: Any,
        lang: Optional[str] = None,
        x_language: Optional[str] = None,
        accept_language: Optional[str] = None
    ) -> ValidationOutcome:
        """Run the full validation for one URL.

        Args:
            url: Submitted URL or video ID
            lang: lang query parameter
            x_language: X-Language header
            accept_language: Accept-Language header

        Returns:
            ValidationOutcome with status, body and headers
        """
        language = resolve_language(lang, x_language, accept_language)
        headers = response_headers(language)

        try:
            return self._validate(url, language, headers)
        except Exception as e:
            logger.exception(f"Unexpected error validating {url!r}: {e}")
            return self._error(ErrorKind.NETWORK_ERROR, language, headers)

    def _validate(self, url: Any, language: str, headers: Dict[str, str]) -> ValidationOutcome:
        try:
            normalized = normalize(url, language)
        except URLValidationError as e:
            log_validation_error(e, context="validate")
            return ValidationOutcome(
                status=status_for_error(e.kind),
                body=create_localized_error_response(e, language, include_details=True),
                headers=headers
            )

        video_id = normalized.video_id

        if self.registry is not None and self.registry.exists(video_id):
            logger.info(f"Duplicate video submitted: {video_id}")
            outcome = self._error(ErrorKind.DUPLICATE_VIDEO, language, headers, normalized)
            existing = self.registry.get(video_id) or {}
            outcome.body["existingVideo"] = {
                "id": video_id,
                "title": existing.get("title", ""),
                "createdAt": existing.get("created_at", ""),
            }
            return outcome

        try:
            video = self.fetcher.get_video_info(video_id)
        except VideoFetchError as e:
            kind = map_fetch_error(e)
            logger.warning(f"Video lookup failed for {video_id} ({get_error_severity(kind).value}): {e}")
            return self._error(kind, language, headers, normalized)

        if not video.is_public:
            logger.info(f"Video {video_id} is {video.privacy_status}")
            return self._error(ErrorKind.PRIVATE_VIDEO, language, headers, normalized)

        logger.info(f"Video {video_id} validated: {video.title}")
        return ValidationOutcome(
            status=200,
            body=create_success_response(normalized, video, language),
            headers=headers,
            normalized=normalized,
            video=video
        )

    def register(
        self,
        url: Any,
        lang: Optional[str] = None,
        x_language: Optional[str] = None,
        accept_language: Optional[str] = None
    ) -> ValidationOutcome:
        """Validate a URL and add it to the registry on success.

        Raises:
            ValueError: If the workflow has no registry
        """
        if self.registry is None:
            raise ValueError("register requires a registry")

        outcome = self.validate(url, lang, x_language, accept_language)
        if not (outcome.success and outcome.normalized and outcome.video):
            return outcome

        language = outcome.headers.get("Content-Language", DEFAULT_LANGUAGE)
        video_id = outcome.normalized.video_id
        try:
            self.registry.add(video_id, {
                "title": outcome.video.title,
                "channel_title": outcome.video.channel_title,
                "canonical": outcome.normalized.canonical,
                "original": outcome.normalized.original,
            })
        except KeyError:
            # Registered by another caller after the duplicate check
            logger.info(f"Duplicate video submitted: {video_id}")
            return self._error(ErrorKind.DUPLICATE_VIDEO, language, outcome.headers, outcome.normalized)
        except (OSError, ValueError) as e:
            logger.exception(f"Failed to register {video_id}: {e}")
            return self._error(ErrorKind.NETWORK_ERROR, language, outcome.headers, outcome.normalized)

        outcome.status = 201
        return outcome

    def _error(
        self,
        kind: ErrorKind,
        language: str,
        headers: Dict[str, str],
        normalized: Optional[NormalizedURL] = None
    ) -> ValidationOutcome:
        return ValidationOutcome(
            status=status_for_error(kind),
            body=create_localized_error_response(kind, language),
            headers=headers,
            normalized=normalized
        )

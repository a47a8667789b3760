"""YouTube URL normalization with metadata extraction."""

import logging
import re
import time
import urllib.parse
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, cast

from .errors import ErrorKind, URLValidationError, log_validation_error
from .patterns import is_valid_video_id, match_video_id
from ..i18n.language import DEFAULT_LANGUAGE
from ..i18n.messages import get_message

# Configure logging
logger = logging.getLogger(__name__)

CANONICAL_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"

_PROTOCOL_RE = re.compile(r'^https?://', re.IGNORECASE)
_YOUTUBE_DOMAIN_RE = re.compile(r'youtube\.com|youtu\.be', re.IGNORECASE)
_TIME_RE = re.compile(r'(?:(\d+)h)?(?:(\d+)m)?(?:(\d+)s?)?')
_INT_RE = re.compile(r'-?\d+')


@dataclass(frozen=True)
class URLMetadata:
    """Optional extras carried by a video URL."""
    timestamp: Optional[int] = None
    playlist: Optional[str] = None
    index: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out absent values."""
        return {
            key: value
            for key, value in (
                ("timestamp", self.timestamp),
                ("playlist", self.playlist),
                ("index", self.index),
            )
            if value is not None
        }


@dataclass(frozen=True)
class NormalizedURL:
    """Result of normalizing a single URL."""
    original: str
    canonical: str
    video_id: str
    is_valid: bool
    metadata: Optional[URLMetadata] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {
            "original": self.original,
            "canonical": self.canonical,
            "video_id": self.video_id,
            "is_valid": self.is_valid,
        }
        if self.metadata is not None:
            result["metadata"] = self.metadata.to_dict()
        return result

    @classmethod
    def invalid(cls, original: Any) -> "NormalizedURL":
        """Placeholder row for an input that failed normalization."""
        return cls(
            original=original if isinstance(original, str) else "",
            canonical="",
            video_id="",
            is_valid=False
        )


def build_canonical_url(video_id: str) -> str:
    """Build the canonical watch URL for a video ID."""
    return CANONICAL_URL_TEMPLATE.format(video_id=video_id)


def add_protocol_if_missing(url: str) -> str:
    """Prefix https:// when the URL has no http(s) scheme."""
    if not _PROTOCOL_RE.match(url):
        return f"https://{url}"
    return url


def is_youtube_url(url: str) -> bool:
    """Check whether a string mentions a YouTube domain anywhere."""
    return bool(_YOUTUBE_DOMAIN_RE.search(url))


def parse_time_parameter(value: str) -> int:
    """Convert a t= value to seconds.

    Accepts plain seconds ("45", "45s") and compound durations ("1h30m45s",
    "30m"). Anything else is 0.

    Args:
        value: Raw t parameter

    Returns:
        Offset in seconds
    """
    match = _TIME_RE.fullmatch(value.strip())
    if not match:
        return 0

    hours, minutes, seconds = (int(group or 0) for group in match.groups())
    return hours * 3600 + minutes * 60 + seconds


def _parse_int(value: str) -> Optional[int]:
    if not _INT_RE.fullmatch(value.strip()):
        return None
    return int(value)


def extract_metadata(url: str) -> Optional[URLMetadata]:
    """Extract timestamp, playlist and playlist index from a URL.

    Blank parameters are treated as absent. Unparseable URLs yield no
    metadata rather than an error.

    Args:
        url: URL with protocol present

    Returns:
        URLMetadata or None if nothing was found
    """
    try:
        query = urllib.parse.urlsplit(url).query
    except ValueError:
        logger.debug(f"Skipping metadata for unparseable URL: {url!r}")
        return None

    params = urllib.parse.parse_qs(query)

    def first(name: str) -> Optional[str]:
        values = params.get(name)
        return values[0] if values else None

    timestamp = None
    time_param = first("t")
    if time_param:
        timestamp = parse_time_parameter(time_param)

    index = None
    index_param = first("index")
    if index_param:
        index = _parse_int(index_param)

    metadata = URLMetadata(timestamp=timestamp, playlist=first("list"), index=index)
    if metadata == URLMetadata():
        return None
    return metadata


def _validation_error(kind: ErrorKind, language: str) -> URLValidationError:
    record = get_message(kind, language)
    return URLValidationError(
        kind=kind,
        message=record.message,
        suggestion=record.suggestion,
        example=record.example
    )


def normalize(url: Any, language: str = DEFAULT_LANGUAGE) -> NormalizedURL:
    """Normalize a YouTube URL or bare video ID.

    Args:
        url: User supplied URL or video ID
        language: Language used for the message of a raised error

    Returns:
        NormalizedURL with is_valid set to True

    Raises:
        URLValidationError: If no video ID can be extracted
    """
    if not url or not isinstance(url, str) or not url.strip():
        raise _validation_error(ErrorKind.INVALID_FORMAT, language)

    trimmed = url.strip()
    with_protocol = add_protocol_if_missing(trimmed)

    video_id = None
    matched = match_video_id(with_protocol)
    if matched:
        video_id, entry = matched
        logger.debug(f"Matched {entry.description}: {video_id}")
    elif is_valid_video_id(trimmed):
        video_id = trimmed
        logger.debug(f"Direct video ID: {video_id}")
    elif not is_youtube_url(with_protocol):
        raise _validation_error(ErrorKind.NOT_YOUTUBE, language)
    else:
        raise _validation_error(ErrorKind.MISSING_VIDEO_ID, language)

    return NormalizedURL(
        original=url,
        canonical=build_canonical_url(video_id),
        video_id=video_id,
        is_valid=True,
        metadata=extract_metadata(with_protocol)
    )


def normalize_multiple(urls: List[Any]) -> List[NormalizedURL]:
    """Normalize several URLs, keeping input order.

    Inputs that fail are reported as invalid rows instead of raising.

    Args:
        urls: URLs to normalize

    Returns:
        One NormalizedURL per input
    """
    results = []
    for url in urls:
        try:
            results.append(normalize(url))
        except URLValidationError as e:
            log_validation_error(e, context="normalize_multiple")
            results.append(NormalizedURL.invalid(url))
    return results


class BatchStats:
    """Track statistics during batch normalization."""

    def __init__(self, total_urls: int):
        """Initialize batch statistics.

        Args:
            total_urls: Total number of URLs to normalize
        """
        self.total_urls = total_urls
        self.valid = 0
        self.invalid = 0
        self.start_time = time.time()
        self.errors: List[Tuple[str, ErrorKind]] = []

    def record_success(self, url: str) -> None:
        self.valid += 1
        logger.debug(f"[{self.processed}/{self.total_urls}] {url} normalized")

    def record_failure(self, url: str, kind: ErrorKind) -> None:
        self.invalid += 1
        self.errors.append((url, kind))
        logger.debug(f"[{self.processed}/{self.total_urls}] {url} rejected: {kind.value}")

    @property
    def processed(self) -> int:
        return self.valid + self.invalid

    def get_error_counts(self) -> Dict[str, int]:
        """Count failures per error kind.

        Returns:
            Mapping of error kind value to count
        """
        counts: Dict[str, int] = {}
        for _, kind in self.errors:
            counts[kind.value] = counts.get(kind.value, 0) + 1
        return counts

    def get_summary(self) -> Dict[str, Any]:
        """Get summary statistics.

        Returns:
            Dictionary with summary statistics
        """
        return {
            "total_urls": self.total_urls,
            "valid": self.valid,
            "invalid": self.invalid,
            "elapsed_time": time.time() - self.start_time,
            "error_counts": self.get_error_counts(),
        }


class BatchNormalizer:
    """Normalizes many URLs concurrently."""

    def __init__(self, max_workers: int = 4, language: str = DEFAULT_LANGUAGE):
        """Initialize batch normalizer.

        Args:
            max_workers: Maximum number of concurrent workers
            language: Language for error messages

        Raises:
            ValueError: If max_workers is not positive
        """
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")

        self.max_workers = max_workers
        self.language = language
        self.last_stats: Optional[BatchStats] = None

    def normalize_all(
        self,
        urls: List[Any],
        progress_callback: Optional[Callable[[int, int, str], None]] = None
    ) -> List[NormalizedURL]:
        """Normalize URLs in parallel.

        Args:
            urls: URLs to normalize
            progress_callback: Optional callback(processed, total, url)

        Returns:
            One NormalizedURL per input, in input order
        """
        stats = BatchStats(total_urls=len(urls))
        self.last_stats = stats
        if not urls:
            return []

        logger.info(f"Normalizing {len(urls)} URLs with {self.max_workers} workers")
        results: List[Optional[NormalizedURL]] = [None] * len(urls)

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_position = {
                executor.submit(normalize, url, self.language): position
                for position, url in enumerate(urls)
            }

            for future in as_completed(future_to_position):
                position = future_to_position[future]
                url = urls[position]
                label = url if isinstance(url, str) else repr(url)
                try:
                    results[position] = future.result()
                    stats.record_success(label)
                except URLValidationError as e:
                    results[position] = NormalizedURL.invalid(url)
                    stats.record_failure(label, e.kind)

                if progress_callback:
                    progress_callback(stats.processed, stats.total_urls, label)

        logger.info(f"Batch complete: {stats.valid} valid, {stats.invalid} invalid")
        return cast(List[NormalizedURL], results)

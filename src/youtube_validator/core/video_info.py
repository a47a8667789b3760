"""Video metadata lookup through the YouTube Data API or yt-dlp."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import isodate
import yt_dlp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .errors import ErrorKind
from .normalizer import build_canonical_url

# Configure logging
logger = logging.getLogger(__name__)


class VideoFetchError(Exception):
    """Base exception for video metadata lookups."""

    def __init__(self, message: str, video_id: Optional[str] = None):
        super().__init__(message)
        self.video_id = video_id


class VideoNotFoundError(VideoFetchError):
    """Raised when the video does not exist or the ID is rejected."""
    pass


class PrivateVideoError(VideoFetchError):
    """Raised when the video exists but is not publicly accessible."""
    pass


class VideoFetchNetworkError(VideoFetchError):
    """Raised on transport failures, quota errors and other API problems."""
    pass


@dataclass
class VideoInfo:
    """Video record returned by a fetcher."""
    video_id: str
    title: str
    channel_title: str = ""
    published_at: str = ""
    description: str = ""
    thumbnails: Dict[str, str] = field(default_factory=dict)
    duration_seconds: int = 0
    view_count: int = 0
    like_count: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    privacy_status: str = "public"
    embeddable: bool = True

    @property
    def is_public(self) -> bool:
        return self.privacy_status == "public"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


def map_fetch_error(error: BaseException) -> ErrorKind:
    """Map a fetcher exception onto the validation error taxonomy.

    Args:
        error: Exception raised by a fetcher

    Returns:
        VIDEO_NOT_FOUND, PRIVATE_VIDEO or NETWORK_ERROR
    """
    if isinstance(error, VideoNotFoundError):
        return ErrorKind.VIDEO_NOT_FOUND
    if isinstance(error, PrivateVideoError):
        return ErrorKind.PRIVATE_VIDEO
    return ErrorKind.NETWORK_ERROR


def _safe_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (ValueError, TypeError):
        return 0


def _parse_duration(duration_str: str) -> int:
    """Parse ISO 8601 duration (e.g. "PT5M30S") to seconds."""
    if not duration_str:
        return 0

    try:
        return int(isodate.parse_duration(duration_str).total_seconds())
    except (isodate.ISO8601Error, ValueError):
        return 0


class YouTubeAPIFetcher:
    """Fetches video records from the YouTube Data API v3."""

    def __init__(self, api_key: str):
        """Initialize API fetcher.

        Args:
            api_key: YouTube Data API key

        Raises:
            ValueError: If no API key is given
        """
        if not api_key:
            raise ValueError("api_key is required")

        self.api_key = api_key
        self._youtube = build('youtube', 'v3', developerKey=api_key, cache_discovery=False)

    def get_video_info(self, video_id: str) -> VideoInfo:
        """Fetch a video record.

        Args:
            video_id: YouTube video ID

        Returns:
            VideoInfo

        Raises:
            VideoNotFoundError: If the video does not exist
            VideoFetchNetworkError: If the request fails
        """
        logger.info(f"Fetching video info from API: {video_id}")

        try:
            response = self._youtube.videos().list(
                part="snippet,contentDetails,statistics,status",
                id=video_id
            ).execute()
        except HttpError as e:
            status = e.resp.status
            if status in (400, 404):
                raise VideoNotFoundError(f"Video not found: {video_id}", video_id)
            if status == 403:
                raise VideoFetchNetworkError("API quota exceeded or invalid API key", video_id)
            raise VideoFetchNetworkError(f"API request failed: {e}", video_id)
        except OSError as e:
            raise VideoFetchNetworkError(f"API request failed: {e}", video_id)

        items = response.get("items", [])
        if not items:
            raise VideoNotFoundError(f"Video not found: {video_id}", video_id)

        return self._parse_video_item(items[0])

    def _parse_video_item(self, item: Dict[str, Any]) -> VideoInfo:
        """Parse YouTube API video item to VideoInfo.

        Args:
            item: Video item from API response

        Returns:
            VideoInfo object
        """
        snippet = item.get("snippet", {})
        content_details = item.get("contentDetails", {})
        statistics = item.get("statistics", {})
        status = item.get("status", {})

        like_count = statistics.get("likeCount")

        return VideoInfo(
            video_id=item["id"],
            title=snippet.get("title", ""),
            channel_title=snippet.get("channelTitle", ""),
            published_at=snippet.get("publishedAt", ""),
            description=snippet.get("description", ""),
            thumbnails={
                name: thumb.get("url", "")
                for name, thumb in snippet.get("thumbnails", {}).items()
            },
            duration_seconds=_parse_duration(content_details.get("duration", "")),
            view_count=_safe_int(statistics.get("viewCount")),
            like_count=_safe_int(like_count) if like_count is not None else None,
            tags=snippet.get("tags", []),
            privacy_status=status.get("privacyStatus", "public"),
            embeddable=status.get("embeddable", True) is not False
        )


class YtDlpFetcher:
    """Fetches video records with yt-dlp, without an API key."""

    PRIVATE_MARKERS = ("private video", "this video is private")
    NOT_FOUND_MARKERS = ("video unavailable", "does not exist", "not available", "removed")

    def __init__(self, timeout: int = 30, proxy: Optional[str] = None):
        """Initialize yt-dlp fetcher.

        Args:
            timeout: Socket timeout in seconds
            proxy: Optional proxy URL
        """
        if timeout <= 0:
            raise ValueError("timeout must be positive")

        self.timeout = timeout
        self.proxy = proxy

    def _options(self) -> Dict[str, Any]:
        ydl_opts = {
            'skip_download': True,
            'quiet': True,
            'no_warnings': True,
            'socket_timeout': self.timeout,
        }
        if self.proxy:
            ydl_opts['proxy'] = self.proxy
        return ydl_opts

    def get_video_info(self, video_id: str) -> VideoInfo:
        """Fetch a video record.

        Args:
            video_id: YouTube video ID

        Returns:
            VideoInfo

        Raises:
            VideoNotFoundError: If the video does not exist
            PrivateVideoError: If the video cannot be viewed publicly
            VideoFetchNetworkError: If extraction fails for other reasons
        """
        logger.info(f"Fetching video info with yt-dlp: {video_id}")

        try:
            with yt_dlp.YoutubeDL(self._options()) as ydl:
                info = ydl.extract_info(build_canonical_url(video_id), download=False)
        except yt_dlp.utils.DownloadError as e:
            message = str(e).lower()
            if any(marker in message for marker in self.PRIVATE_MARKERS):
                raise PrivateVideoError(f"Video is private: {video_id}", video_id)
            if any(marker in message for marker in self.NOT_FOUND_MARKERS):
                raise VideoNotFoundError(f"Video not found: {video_id}", video_id)
            raise VideoFetchNetworkError(f"yt-dlp extraction failed: {e}", video_id)

        if not info:
            raise VideoNotFoundError(f"Video not found: {video_id}", video_id)

        return self._parse_info(video_id, info)

    def _parse_info(self, video_id: str, info: Dict[str, Any]) -> VideoInfo:
        """Convert a yt-dlp info dictionary to VideoInfo."""
        thumbnails = {}
        for thumb in info.get("thumbnails") or []:
            if thumb.get("url"):
                thumbnails[str(thumb.get("id", len(thumbnails)))] = thumb["url"]

        like_count = info.get("like_count")

        return VideoInfo(
            video_id=info.get("id", video_id),
            title=info.get("title", ""),
            channel_title=info.get("channel") or info.get("uploader", ""),
            published_at=self._format_upload_date(info.get("upload_date", "")),
            description=info.get("description") or "",
            thumbnails=thumbnails,
            duration_seconds=_safe_int(info.get("duration")),
            view_count=_safe_int(info.get("view_count")),
            like_count=_safe_int(like_count) if like_count is not None else None,
            tags=info.get("tags") or [],
            privacy_status=info.get("availability") or "public",
            embeddable=info.get("playable_in_embed", True) is not False
        )

    def _format_upload_date(self, upload_date: str) -> str:
        """Format yt-dlp YYYYMMDD date to YYYY-MM-DD."""
        if not upload_date:
            return ""

        try:
            return datetime.strptime(upload_date, "%Y%m%d").strftime("%Y-%m-%d")
        except ValueError:
            return upload_date


def create_fetcher(api_key: Optional[str] = None, backend: str = "auto"):
    """Create a video info fetcher.

    Args:
        api_key: YouTube Data API key
        backend: "api", "yt-dlp" or "auto" (API when a key is available)

    Returns:
        Fetcher with a get_video_info(video_id) method

    Raises:
        ValueError: If the backend is unknown or "api" is requested without a key
    """
    if backend == "auto":
        backend = "api" if api_key else "yt-dlp"

    if backend == "api":
        if not api_key:
            raise ValueError("YouTube API key required for the api backend")
        return YouTubeAPIFetcher(api_key=api_key)
    if backend == "yt-dlp":
        return YtDlpFetcher()

    raise ValueError(f"Unknown fetcher backend: {backend}")

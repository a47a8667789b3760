"""YouTube URL pattern table and video ID rule."""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

VIDEO_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{11}$')

# 11 ID characters not followed by another ID character
_ID = r'([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])'


@dataclass(frozen=True)
class PatternEntry:
    """A single URL shape recognizer."""
    pattern: "re.Pattern[str]"
    extractor: Callable[["re.Match[str]"], Optional[str]]
    description: str

    def match(self, url: str) -> Optional[str]:
        """Return the video ID if the URL has this shape, None otherwise."""
        found = self.pattern.match(url)
        if not found:
            return None
        return self.extractor(found) or None


def _first_group(match: "re.Match[str]") -> Optional[str]:
    return match.group(1)


YOUTUBE_URL_PATTERNS: Tuple[PatternEntry, ...] = (
    PatternEntry(
        pattern=re.compile(r'^https?://(?:www\.)?youtube\.com/watch\?(?:[^#]*&)?v=' + _ID, re.IGNORECASE),
        extractor=_first_group,
        description="Standard YouTube watch URL"
    ),
    PatternEntry(
        pattern=re.compile(r'^https?://m\.youtube\.com/watch\?(?:[^#]*&)?v=' + _ID, re.IGNORECASE),
        extractor=_first_group,
        description="Mobile YouTube watch URL"
    ),
    PatternEntry(
        pattern=re.compile(r'^https?://youtu\.be/' + _ID, re.IGNORECASE),
        extractor=_first_group,
        description="Shortened youtu.be URL"
    ),
    PatternEntry(
        pattern=re.compile(r'^https?://(?:www\.|m\.)?youtube\.com/embed/' + _ID, re.IGNORECASE),
        extractor=_first_group,
        description="Embedded player URL"
    ),
    PatternEntry(
        pattern=re.compile(r'^https?://(?:www\.|m\.)?youtube\.com/(?:shorts|live)/' + _ID, re.IGNORECASE),
        extractor=_first_group,
        description="Shorts or live stream URL"
    ),
)


def is_valid_video_id(video_id: Optional[str]) -> bool:
    """Check whether a string is exactly an 11 character video ID.

    Args:
        video_id: Candidate video ID

    Returns:
        True if the string is a well-formed video ID
    """
    if not isinstance(video_id, str):
        return False
    # fullmatch so a trailing newline is not accepted
    return VIDEO_ID_PATTERN.fullmatch(video_id) is not None


def match_video_id(url: str) -> Optional[Tuple[str, PatternEntry]]:
    """Find the first pattern that extracts a video ID from a URL.

    Args:
        url: URL with protocol already present

    Returns:
        Tuple of (video_id, matching_entry) or None if no pattern matched
    """
    for entry in YOUTUBE_URL_PATTERNS:
        video_id = entry.match(url)
        if video_id:
            return video_id, entry
    return None

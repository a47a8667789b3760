"""Registered video store used for duplicate detection."""

import json
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Configure logging
logger = logging.getLogger(__name__)


class VideoRegistry:
    """JSON file of registered videos keyed by video ID."""

    def __init__(self, registry_file: Optional[Path] = None):
        """Initialize video registry.

        Args:
            registry_file: Path to registry file
        """
        self.registry_file = registry_file or Path.home() / ".youtube_validator" / "registry.json"
        self._lock = threading.Lock()

        # Ensure directory exists
        self.registry_file.parent.mkdir(parents=True, exist_ok=True)

        if not self.registry_file.exists():
            self._save_registry({})

    def exists(self, video_id: str) -> bool:
        """Check whether a video ID is already registered."""
        return video_id in self._load_registry()

    def get(self, video_id: str) -> Optional[Dict[str, Any]]:
        """Get the stored record for a video ID.

        Args:
            video_id: YouTube video ID

        Returns:
            Stored record or None
        """
        return self._load_registry().get(video_id)

    def add(self, video_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Register a video.

        Args:
            video_id: YouTube video ID
            record: Data to store (title, canonical URL, ...)

        Returns:
            The stored record

        Raises:
            KeyError: If the video is already registered
            ValueError: If the registry file is corrupt; the file is left untouched
            OSError: If the registry file cannot be read or written
        """
        with self._lock:
            registry = self._read_registry()
            if video_id in registry:
                raise KeyError(video_id)

            stored = dict(record)
            stored['video_id'] = video_id
            stored.setdefault('created_at', datetime.now().isoformat())
            registry[video_id] = stored

            self._save_registry(registry)

        logger.info(f"Registered video {video_id}")
        return stored

    def list(self) -> List[Dict[str, Any]]:
        """Get all registered videos, most recent first."""
        records = list(self._load_registry().values())
        return sorted(records, key=lambda r: r.get('created_at', ''), reverse=True)

    def _read_registry(self) -> Dict[str, Dict[str, Any]]:
        """Read registry from file, raising on unreadable or corrupt content."""
        if not self.registry_file.exists():
            return {}

        with open(self.registry_file, 'r', encoding='utf-8') as f:
            try:
                return json.load(f)
            except json.JSONDecodeError as e:
                logger.error(f"Registry file is corrupt: {self.registry_file}: {e}")
                raise

    def _load_registry(self) -> Dict[str, Dict[str, Any]]:
        """Load registry for lookups; unreadable files read as empty.

        Returns:
            Mapping of video ID to record
        """
        try:
            return self._read_registry()
        except (json.JSONDecodeError, IOError) as e:
            logger.error(f"Failed to load registry file: {e}")
            return {}

    def _save_registry(self, registry: Dict[str, Dict[str, Any]]) -> None:
        """Save registry to file.

        Args:
            registry: Mapping of video ID to record

        Raises:
            OSError: If the file cannot be written
        """
        with open(self.registry_file, 'w', encoding='utf-8') as f:
            json.dump(registry, f, indent=2, ensure_ascii=False, default=str)

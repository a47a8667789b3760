"""YouTube URL normalization and localized validation."""

__version__ = "0.1.0"

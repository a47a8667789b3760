"""
Localization support.

Language resolution for requests and the localized message catalog
for URL validation errors.
"""

from .language import (
    SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE,
    get_supported_languages, is_language_supported,
    detect_language_from_browser, resolve_language
)
from .messages import (
    MessageRecord, get_message, get_multi_language_message,
    get_formatted_message, generate_help_message
)

__all__ = [
    # Language
    "SUPPORTED_LANGUAGES", "DEFAULT_LANGUAGE",
    "get_supported_languages", "is_language_supported",
    "detect_language_from_browser", "resolve_language",

    # Messages
    "MessageRecord", "get_message", "get_multi_language_message",
    "get_formatted_message", "generate_help_message"
]

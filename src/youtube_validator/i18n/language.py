"""Response language resolution."""

import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES: Tuple[str, ...] = ("ja", "en")
DEFAULT_LANGUAGE = "ja"


def get_supported_languages() -> List[str]:
    """Get supported language codes."""
    return list(SUPPORTED_LANGUAGES)


def is_language_supported(language: Optional[str]) -> bool:
    """Check whether a language code is supported."""
    return isinstance(language, str) and language in SUPPORTED_LANGUAGES


def detect_language_from_browser(
    accept_language: Optional[str],
    default: str = DEFAULT_LANGUAGE
) -> str:
    """Pick the first supported language from an Accept-Language value.

    Quality weights and region subtags are ignored, so "en-US;q=0.9"
    counts as "en". Entries are taken in header order.

    Args:
        accept_language: Raw Accept-Language header
        default: Language returned when nothing matches

    Returns:
        Supported language code
    """
    if not is_language_supported(default):
        default = DEFAULT_LANGUAGE
    if not accept_language:
        return default

    for entry in accept_language.split(','):
        tag = entry.split(';')[0].strip().lower()
        primary = tag.split('-')[0]
        if is_language_supported(primary):
            return primary

    return default


def resolve_language(
    lang_param: Optional[str] = None,
    language_header: Optional[str] = None,
    accept_language: Optional[str] = None,
    default: str = DEFAULT_LANGUAGE
) -> str:
    """Resolve the response language for a request.

    Priority: explicit lang parameter, X-Language header, Accept-Language
    negotiation, then the default. Unsupported values are skipped.

    Args:
        lang_param: Value of the lang query parameter
        language_header: Value of the X-Language header
        accept_language: Value of the Accept-Language header
        default: Fallback language

    Returns:
        Supported language code
    """
    if is_language_supported(lang_param):
        return lang_param
    if is_language_supported(language_header):
        return language_header

    language = detect_language_from_browser(accept_language, default=default)
    logger.debug(f"Resolved language {language} (lang={lang_param!r}, header={language_header!r})")
    return language

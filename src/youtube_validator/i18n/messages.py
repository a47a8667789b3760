"""Localized error messages for URL validation.

Every error kind has one record per supported language. Records are plain
data so missing translations show up in a single place.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Union

from ..core.errors import ErrorKind
from .language import DEFAULT_LANGUAGE, SUPPORTED_LANGUAGES, is_language_supported

EXAMPLE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"


@dataclass(frozen=True)
class MessageRecord:
    """User facing text for one error kind in one language."""
    message: str
    suggestion: Optional[str] = None
    example: Optional[str] = None
    user_action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, leaving out absent fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}


ERROR_MESSAGES_JA: Dict[ErrorKind, MessageRecord] = {
    ErrorKind.INVALID_FORMAT: MessageRecord(
        message="URLが正しい形式ではありません",
        suggestion="YouTube URLを入力してください",
        example=EXAMPLE_URL,
        user_action="URLを確認して再度入力してください"
    ),
    ErrorKind.NOT_YOUTUBE: MessageRecord(
        message="YouTube以外のURLは登録できません",
        suggestion="YouTube（youtube.com または youtu.be）のURLを入力してください",
        example=EXAMPLE_URL,
        user_action="YouTubeの動画ページからURLをコピーしてください"
    ),
    ErrorKind.MISSING_VIDEO_ID: MessageRecord(
        message="ビデオIDが見つかりません",
        suggestion="完全なYouTube URLを入力してください",
        example=EXAMPLE_URL,
        user_action="動画ページのURLを確認してください"
    ),
    ErrorKind.PRIVATE_VIDEO: MessageRecord(
        message="この動画は非公開のため登録できません",
        suggestion="公開されている動画のURLを入力してください",
        user_action="動画の公開設定を確認するか、別の動画を選択してください"
    ),
    ErrorKind.VIDEO_NOT_FOUND: MessageRecord(
        message="指定された動画が見つかりません",
        suggestion="URLが正しいか確認してください",
        user_action="動画が削除されていないか確認してください"
    ),
    ErrorKind.NETWORK_ERROR: MessageRecord(
        message="ネットワークエラーが発生しました",
        suggestion="インターネット接続を確認してください",
        user_action="しばらく待ってから再度お試しください"
    ),
    ErrorKind.DUPLICATE_VIDEO: MessageRecord(
        message="この動画は既に登録されています",
        suggestion="別の動画を選択してください",
        user_action="登録済みの動画一覧を確認してください"
    ),
}

ERROR_MESSAGES_EN: Dict[ErrorKind, MessageRecord] = {
    ErrorKind.INVALID_FORMAT: MessageRecord(
        message="Invalid URL format",
        suggestion="Please enter a YouTube URL",
        example=EXAMPLE_URL,
        user_action="Please check the URL and try again"
    ),
    ErrorKind.NOT_YOUTUBE: MessageRecord(
        message="Only YouTube URLs are supported",
        suggestion="Please enter a YouTube (youtube.com or youtu.be) URL",
        example=EXAMPLE_URL,
        user_action="Please copy the URL from a YouTube video page"
    ),
    ErrorKind.MISSING_VIDEO_ID: MessageRecord(
        message="Video ID not found",
        suggestion="Please enter a complete YouTube URL",
        example=EXAMPLE_URL,
        user_action="Please check the video page URL"
    ),
    ErrorKind.PRIVATE_VIDEO: MessageRecord(
        message="This video is private and cannot be registered",
        suggestion="Please enter a public video URL",
        user_action="Please check the video privacy settings or select another video"
    ),
    ErrorKind.VIDEO_NOT_FOUND: MessageRecord(
        message="The specified video was not found",
        suggestion="Please check if the URL is correct",
        user_action="Please verify that the video has not been deleted"
    ),
    ErrorKind.NETWORK_ERROR: MessageRecord(
        message="A network error occurred",
        suggestion="Please check your internet connection",
        user_action="Please wait a moment and try again"
    ),
    ErrorKind.DUPLICATE_VIDEO: MessageRecord(
        message="This video has already been registered",
        suggestion="Please select a different video",
        user_action="Please check the list of registered videos"
    ),
}

ERROR_MESSAGES: Dict[str, Dict[ErrorKind, MessageRecord]] = {
    "ja": ERROR_MESSAGES_JA,
    "en": ERROR_MESSAGES_EN,
}

UNKNOWN_ERROR_MESSAGES: Dict[str, MessageRecord] = {
    "ja": MessageRecord(
        message="不明なエラーが発生しました",
        suggestion="再度お試しください",
        user_action="問題が続く場合はサポートにお問い合わせください"
    ),
    "en": MessageRecord(
        message="An unknown error occurred",
        suggestion="Please try again",
        user_action="Contact support if the problem persists"
    ),
}

EXAMPLE_LABELS: Dict[str, str] = {"ja": "例:", "en": "Example:"}
HELP_TITLES: Dict[str, str] = {"ja": "URL検証エラー", "en": "URL Validation Error"}


def check_catalog() -> None:
    """Raise RuntimeError if any (language, kind) pair has no message."""
    for language in SUPPORTED_LANGUAGES:
        records = ERROR_MESSAGES.get(language, {})
        missing = [kind.value for kind in ErrorKind if not getattr(records.get(kind), "message", "")]
        if missing:
            raise RuntimeError(f"Missing {language} messages for: {', '.join(missing)}")
        if language not in UNKNOWN_ERROR_MESSAGES or language not in EXAMPLE_LABELS or language not in HELP_TITLES:
            raise RuntimeError(f"Incomplete message catalog for language: {language}")


check_catalog()


def _language_or_default(language: Optional[str]) -> str:
    return language if is_language_supported(language) else DEFAULT_LANGUAGE


def get_message(
    kind: Union[ErrorKind, str, None],
    language: str = DEFAULT_LANGUAGE
) -> MessageRecord:
    """Get the message record for an error kind.

    Args:
        kind: ErrorKind or its string value
        language: Language code; unsupported codes use the default language

    Returns:
        MessageRecord, or a generic record when the kind is unknown
    """
    language = _language_or_default(language)
    parsed = ErrorKind.parse(kind)
    if parsed is None:
        return UNKNOWN_ERROR_MESSAGES[language]
    return ERROR_MESSAGES[language][parsed]


def get_multi_language_message(kind: Union[ErrorKind, str, None]) -> Dict[str, MessageRecord]:
    """Get the message record for an error kind in every supported language."""
    return {language: get_message(kind, language) for language in SUPPORTED_LANGUAGES}


def get_formatted_message(
    kind: Union[ErrorKind, str, None],
    language: str = DEFAULT_LANGUAGE,
    include_example: bool = True
) -> str:
    """Format an error as message, suggestion and optional example lines.

    Args:
        kind: ErrorKind or its string value
        language: Language code
        include_example: Whether to add the example line

    Returns:
        Newline separated text
    """
    language = _language_or_default(language)
    record = get_message(kind, language)
    lines = [record.message]

    if record.suggestion:
        lines.append(record.suggestion)

    if include_example and record.example:
        lines.append(f"{EXAMPLE_LABELS[language]} {record.example}")

    return "\n".join(lines)


def generate_help_message(
    kind: Union[ErrorKind, str, None],
    language: str = DEFAULT_LANGUAGE
) -> Dict[str, str]:
    """Build a structured help bundle for an error.

    Args:
        kind: ErrorKind or its string value
        language: Language code

    Returns:
        Dictionary with title, message, suggestion and, when defined,
        example and userAction
    """
    language = _language_or_default(language)
    record = get_message(kind, language)

    help_message = {
        "title": HELP_TITLES[language],
        "message": record.message,
        "suggestion": record.suggestion or "",
    }
    if record.example is not None:
        help_message["example"] = record.example
    if record.user_action is not None:
        help_message["userAction"] = record.user_action

    return help_message

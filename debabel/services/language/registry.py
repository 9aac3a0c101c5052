"""Static catalog of supported languages.

The registry is an ordered, immutable tuple built at import time. Lookups
scan it linearly; it is small enough that an index is not worth keeping.
Unknown codes are never an error: lookups return None and display helpers
fall back to the raw code.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    native_name: str
    country_code: str  # ISO 3166-1 alpha-2, used for the flag


SUPPORTED_LANGUAGES: tuple[Language, ...] = (
    Language("en", "English", "English", "US"),
    Language("zh", "Chinese", "中文", "CN"),
    Language("es", "Spanish", "Español", "ES"),
    Language("hi", "Hindi", "हिन्दी", "IN"),
    Language("pt", "Portuguese", "Português", "BR"),
    Language("ru", "Russian", "Русский", "RU"),
    Language("ja", "Japanese", "日本語", "JP"),
    Language("de", "German", "Deutsch", "DE"),
    Language("ko", "Korean", "한국어", "KR"),
    Language("fr", "French", "Français", "FR"),
    Language("tr", "Turkish", "Türkçe", "TR"),
    Language("vi", "Vietnamese", "Tiếng Việt", "VN"),
    Language("it", "Italian", "Italiano", "IT"),
    Language("ar", "Arabic", "العربية", "SA"),
    Language("pl", "Polish", "Polski", "PL"),
    Language("nl", "Dutch", "Nederlands", "NL"),
    Language("th", "Thai", "ไทย", "TH"),
    Language("id", "Indonesian", "Bahasa Indonesia", "ID"),
    Language("uk", "Ukrainian", "Українська", "UA"),
    Language("he", "Hebrew", "עברית", "IL"),
    Language("sr", "Serbian", "Српски", "RS"),
)

DEFAULT_INPUT_LANGUAGE = "en"
DEFAULT_SEARCH_LANGUAGE = "en"


def all_languages() -> tuple[Language, ...]:
    """All supported languages, in display order."""
    return SUPPORTED_LANGUAGES


def get_language_by_code(code: str) -> Language | None:
    for language in SUPPORTED_LANGUAGES:
        if language.code == code:
            return language
    return None


def is_supported(code: str) -> bool:
    return get_language_by_code(code) is not None


def get_language_name(code: str) -> str:
    """English display name for a code, or the code itself if unknown."""
    language = get_language_by_code(code)
    return language.name if language else code


def get_language_native_name(code: str) -> str:
    """Native display name for a code, or the code itself if unknown."""
    language = get_language_by_code(code)
    return language.native_name if language else code

"""Language registry, translation and chat-side language mediation."""

from debabel.services.language.middleware import LanguageMiddleware
from debabel.services.language.registry import (
    DEFAULT_INPUT_LANGUAGE,
    DEFAULT_SEARCH_LANGUAGE,
    Language,
    all_languages,
    get_language_by_code,
    get_language_name,
)
from debabel.services.language.translation import (
    TranslationRequest,
    TranslationService,
)

__all__ = [
    "DEFAULT_INPUT_LANGUAGE",
    "DEFAULT_SEARCH_LANGUAGE",
    "Language",
    "LanguageMiddleware",
    "TranslationRequest",
    "TranslationService",
    "all_languages",
    "get_language_by_code",
    "get_language_name",
]

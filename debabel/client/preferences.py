"""Input/search language preferences, persisted in client storage.

The store keeps an in-memory copy for rendering, but anything that sends a
message must call read_language_preferences() at send time: the in-memory
copy may predate a change made elsewhere.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import structlog

from debabel.client.storage import KeyValueStorage
from debabel.services.language.registry import (
    DEFAULT_INPUT_LANGUAGE,
    DEFAULT_SEARCH_LANGUAGE,
)

logger = structlog.get_logger(__name__)

INPUT_LANGUAGE_KEY = "de-babel-input-language"
SEARCH_LANGUAGE_KEY = "de-babel-search-language"


@dataclass(frozen=True)
class LanguagePreferences:
    input_language: str = DEFAULT_INPUT_LANGUAGE
    search_language: str = DEFAULT_SEARCH_LANGUAGE

    @property
    def translation_required(self) -> bool:
        return self.input_language != self.search_language


def read_language_preferences(storage: KeyValueStorage) -> LanguagePreferences:
    """Read both preferences straight from storage, with defaults."""
    return LanguagePreferences(
        input_language=storage.get(INPUT_LANGUAGE_KEY) or DEFAULT_INPUT_LANGUAGE,
        search_language=storage.get(SEARCH_LANGUAGE_KEY) or DEFAULT_SEARCH_LANGUAGE,
    )


Listener = Callable[[LanguagePreferences], None]


class LanguagePreferenceStore:
    """Reactive holder of the language pair, written through to storage.

    Consumers should not render language-dependent output until ``loaded``
    is True, otherwise they briefly show the defaults.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage
        self._preferences = LanguagePreferences()
        self._loaded = False
        self._listeners: list[Listener] = []

    @property
    def preferences(self) -> LanguagePreferences:
        return self._preferences

    @property
    def input_language(self) -> str:
        return self._preferences.input_language

    @property
    def search_language(self) -> str:
        return self._preferences.search_language

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self) -> LanguagePreferences:
        self._preferences = read_language_preferences(self._storage)
        self._loaded = True
        logger.debug(
            "language_preferences_loaded",
            input_language=self._preferences.input_language,
            search_language=self._preferences.search_language,
        )
        self._notify()
        return self._preferences

    def update_input_language(self, language: str) -> None:
        self._storage.set(INPUT_LANGUAGE_KEY, language)
        self._set(LanguagePreferences(language, self._preferences.search_language))

    def update_search_language(self, language: str) -> None:
        self._storage.set(SEARCH_LANGUAGE_KEY, language)
        self._set(LanguagePreferences(self._preferences.input_language, language))

    def update_languages(self, preferences: LanguagePreferences) -> None:
        self._storage.set(INPUT_LANGUAGE_KEY, preferences.input_language)
        self._storage.set(SEARCH_LANGUAGE_KEY, preferences.search_language)
        self._set(preferences)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` on every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, preferences: LanguagePreferences) -> None:
        self._preferences = preferences
        logger.debug(
            "language_preferences_updated",
            input_language=preferences.input_language,
            search_language=preferences.search_language,
        )
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._preferences)

"""Client-side helpers: durable settings storage and the chat API client."""

from debabel.client.api_key import ApiKeyStorage, InvalidApiKeyFormatError
from debabel.client.chat import ChatClient, ChatClientError
from debabel.client.preferences import (
    LanguagePreferences,
    LanguagePreferenceStore,
    read_language_preferences,
)
from debabel.client.storage import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    NullStorage,
)

__all__ = [
    "ApiKeyStorage",
    "ChatClient",
    "ChatClientError",
    "InvalidApiKeyFormatError",
    "JsonFileStorage",
    "KeyValueStorage",
    "LanguagePreferenceStore",
    "LanguagePreferences",
    "MemoryStorage",
    "NullStorage",
    "read_language_preferences",
]

"""The user's OpenAI API key, kept in client storage.

The key is sent with every chat request as ``x-api-key``. It is only
accepted if it looks like an OpenAI secret key.
"""

import re

import structlog

from debabel.client.storage import KeyValueStorage

logger = structlog.get_logger(__name__)

OPENAI_API_KEY_STORAGE_KEY = "openai_api_key"

# 'sk-' followed by letters, digits, hyphens or underscores; no spaces.
_OPENAI_API_KEY_RE = re.compile(r"^sk-[a-zA-Z0-9_-]+$")


class InvalidApiKeyFormatError(ValueError):
    def __init__(self) -> None:
        super().__init__(
            'Invalid OpenAI API key format. Key must start with "sk-" and contain '
            "only letters, numbers, hyphens, and underscores."
        )


def is_valid_format(key: str) -> bool:
    return bool(_OPENAI_API_KEY_RE.match(key.strip()))


class ApiKeyStorage:
    """get / set / remove for the stored API key.

    Read and remove failures are logged and treated as "no key"; a failed
    write is re-raised so the caller can tell the user.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def get(self) -> str | None:
        try:
            return self._storage.get(OPENAI_API_KEY_STORAGE_KEY)
        except OSError as e:
            logger.error("api_key_read_failed", error=str(e))
            return None

    def set(self, key: str) -> None:
        trimmed = key.strip()
        if not is_valid_format(trimmed):
            raise InvalidApiKeyFormatError()
        try:
            self._storage.set(OPENAI_API_KEY_STORAGE_KEY, trimmed)
        except OSError as e:
            logger.error("api_key_write_failed", error=str(e))
            raise

    def remove(self) -> None:
        try:
            self._storage.remove(OPENAI_API_KEY_STORAGE_KEY)
        except OSError as e:
            logger.error("api_key_remove_failed", error=str(e))

    def exists(self) -> bool:
        return bool(self.get())

    @staticmethod
    def is_valid_format(key: str) -> bool:
        return is_valid_format(key)

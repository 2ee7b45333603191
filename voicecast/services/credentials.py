"""Persistence of the user's provider credential."""

import logging
from dataclasses import dataclass
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from voicecast.exceptions import CredentialStoreError

logger = logging.getLogger(__name__)

API_KEY_STORAGE_KEY = "elevenlabs_api_key"
DEFAULT_SERVICE_NAME = "voicecast"


class CredentialStore:
    """
    Scoped key-value storage for credentials.

    Implementations provide get/set/remove; values are never logged.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> bool:
        raise NotImplementedError


class InMemoryCredentialStore(CredentialStore):
    """Credential store that lives only as long as the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def remove(self, key: str) -> bool:
        return self._values.pop(key, None) is not None


@dataclass
class KeyringCredentialStore(CredentialStore):
    """
    Credential store backed by the OS keyring.

    Each key is stored as the account name under ``service_name``. Backend
    failures (no keyring available, locked keychain) raise
    CredentialStoreError.
    """

    service_name: str = DEFAULT_SERVICE_NAME

    def get(self, key: str) -> Optional[str]:
        try:
            value = keyring.get_password(self.service_name, key)
        except KeyringError as e:
            raise self._error(f"Could not read credential '{key}': {e}", e)
        if value is None:
            return None
        return value.strip() or None

    def set(self, key: str, value: str) -> None:
        value = value.strip()
        if not value:
            raise CredentialStoreError(
                message="Refusing to store an empty credential",
                service_name=self.service_name,
            )
        try:
            keyring.set_password(self.service_name, key, value)
        except KeyringError as e:
            raise self._error(f"Could not store credential '{key}': {e}", e)
        logger.info(f"Stored credential '{key}' in keyring service '{self.service_name}'")

    def remove(self, key: str) -> bool:
        if self.get(key) is None:
            return False
        try:
            keyring.delete_password(self.service_name, key)
        except PasswordDeleteError:
            return False
        except KeyringError as e:
            raise self._error(f"Could not remove credential '{key}': {e}", e)
        logger.info(f"Removed credential '{key}' from keyring service '{self.service_name}'")
        return True

    def _error(self, message: str, cause: Exception) -> CredentialStoreError:
        return CredentialStoreError(message=message, service_name=self.service_name, cause=cause)

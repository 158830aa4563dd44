from __future__ import annotations

import keyring
from keyring.errors import KeyringError


class CredentialService:
    _SERVICE_NAME = "SaveBridge"

    def _credential_key(self, address: str, username: str) -> str:
        return f"host:{address}:user:{username}"

    def set_password(self, address: str, username: str, password: str) -> None:
        keyring.set_password(self._SERVICE_NAME, self._credential_key(address, username), password)

    def get_password(self, address: str, username: str) -> str | None:
        try:
            return keyring.get_password(self._SERVICE_NAME, self._credential_key(address, username))
        except KeyringError:
            return None

"""OS keychain access for the access token."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

DEFAULT_SERVICE_NAME = "top-albums"

logger = logging.getLogger("top_albums.session")


def scoped_key(key: str, owner: str | Path) -> str:
    """Keychain account name for ``key`` that belongs to one session file.

    Two session files never share a keychain entry, so logging out of one
    leaves the other signed in.
    """
    location = str(Path(owner).expanduser().resolve())
    return f"{key}:{hashlib.sha256(location.encode('utf-8')).hexdigest()[:16]}"


class KeyringSecretStore:
    """Secrets under one keychain service; every call reports whether the keychain answered."""

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        self.service_name = service_name

    def get(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service_name, key)
        except KeyringError as exc:
            logger.debug("Keychain read skipped (%s)", type(exc).__name__)
            return None

    def set(self, key: str, value: str) -> bool:
        """Store ``value``; an empty value removes the entry instead."""
        if not value:
            return self.delete(key)
        try:
            keyring.set_password(self.service_name, key, value)
        except KeyringError as exc:
            logger.debug("Keychain write skipped (%s)", type(exc).__name__)
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            keyring.delete_password(self.service_name, key)
        except PasswordDeleteError:
            # Nothing was stored under this key.
            pass
        except KeyringError as exc:
            logger.debug("Keychain delete skipped (%s)", type(exc).__name__)
            return False
        return True

"""JSON file-based session persistence adapter.

The file holds three string values under fixed keys: the access token,
the JSON-serialized profile and the pending PKCE verifier. The token is
moved to the OS keychain whenever one is available, under an account
name derived from the session file path.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

from top_albums.adapters.config.json_config_adapter import config_dir
from top_albums.adapters.config.secret_store import KeyringSecretStore, scoped_key
from top_albums.domain.model import Session
from top_albums.domain.ports import SessionPort

TOKEN_KEY = "spotify_access_token"
USER_KEY = "spotify_user"
VERIFIER_KEY = "spotify_code_verifier"

logger = logging.getLogger("top_albums.session")


class SecretStoreProtocol(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> bool:
        ...


def default_session_path() -> str:
    return os.getenv("TOP_ALBUMS_SESSION_FILE") or os.path.join(config_dir(), "session.json")


class JsonSessionAdapter(SessionPort):

    def __init__(self, path: str | None = None, secret_store: SecretStoreProtocol | None = None):
        self.path = Path(path or default_session_path())
        self.secret_store = secret_store or KeyringSecretStore()
        self.token_account = scoped_key(TOKEN_KEY, self.path)
        # Lives only as long as this adapter; a restart starts with an empty set.
        self._processed_codes: set[str] = set()

    def load(self) -> Session:
        data = self._read()
        token = self.secret_store.get(self.token_account) or data.get(TOKEN_KEY) or None
        return Session(
            access_token=token,
            user=_decode_profile(data.get(USER_KEY)),
            pending_verifier=data.get(VERIFIER_KEY) or None,
            processed_codes=set(self._processed_codes),
        )

    def save_pending_verifier(self, verifier: str) -> None:
        self._update(**{VERIFIER_KEY: verifier})

    def take_pending_verifier(self) -> Optional[str]:
        data = self._read()
        verifier = data.pop(VERIFIER_KEY, None)
        if verifier is not None:
            self._write(data)
        return verifier or None

    def clear_verifier(self) -> None:
        data = self._read()
        if VERIFIER_KEY in data:
            del data[VERIFIER_KEY]
            self._write(data)

    def save_token(self, token: str) -> None:
        stored = self.secret_store.set(self.token_account, token)
        # Keep plaintext only if the keychain backend is unavailable.
        self._update(**{TOKEN_KEY: "" if stored else token})

    def save_profile(self, profile: dict) -> None:
        self._update(**{USER_KEY: json.dumps(profile, ensure_ascii=False)})

    def clear(self) -> None:
        self.secret_store.set(self.token_account, "")
        if self.path.exists():
            self.path.unlink()
        self._processed_codes.clear()

    def mark_code_processed(self, code: str) -> bool:
        if code in self._processed_codes:
            return False
        self._processed_codes.add(code)
        return True

    def _update(self, **values: str) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("Failed to read session from %s; starting signed out", self.path)
            return {}
        if not isinstance(payload, dict):
            return {}
        return {str(k): str(v) for k, v in payload.items() if isinstance(v, str)}

    def _write(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        temp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        temp_path.replace(self.path)


def _decode_profile(raw: Optional[str]) -> Optional[dict]:
    if not raw:
        return None
    try:
        profile = json.loads(raw)
    except ValueError:
        logger.warning("Stored profile is not valid JSON; ignoring it")
        return None
    return profile if isinstance(profile, dict) else None

"""JSON file-based config adapter."""

import json
import logging
import os
import sys

from top_albums.domain.ports import ConfigPort

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"
DEFAULT_TRACKS_TO_FETCH = 250

_DEFAULTS = {
    "spotify_client_id": "",
    "spotify_redirect_uri": DEFAULT_REDIRECT_URI,
    "time_range": "medium_term",
    "tracks_to_fetch": DEFAULT_TRACKS_TO_FETCH,
    "release_year": "",
}
# Environment wins over config.json, so a deployment can pin these.
_ENV_OVERRIDES = {
    "spotify_client_id": "TOP_ALBUMS_CLIENT_ID",
    "spotify_redirect_uri": "TOP_ALBUMS_REDIRECT_URI",
}

logger = logging.getLogger("top_albums.config")


def config_dir() -> str:
    if getattr(sys, "frozen", False):
        return os.path.dirname(sys.executable)
    return os.getcwd()


class JsonConfigAdapter(ConfigPort):

    def __init__(self, path: str | None = None):
        self.path = path or os.getenv("TOP_ALBUMS_CONFIG_FILE") or os.path.join(config_dir(), "config.json")

    def load(self) -> dict:
        cfg = dict(_DEFAULTS)
        if os.path.exists(self.path):
            with open(self.path, "r", encoding="utf-8") as f:
                cfg.update(json.load(f))

        for field, env_var in _ENV_OVERRIDES.items():
            value = os.getenv(env_var, "").strip()
            if value:
                logger.debug("Using %s from %s", field, env_var)
                cfg[field] = value

        return cfg

    def save(self, cfg: dict) -> None:
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(cfg, f, indent=2)

    def is_configured(self) -> bool:
        cfg = self.load()
        return bool(cfg.get("spotify_client_id") and cfg.get("spotify_redirect_uri"))

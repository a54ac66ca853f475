"""Spotify adapter for the code-for-token exchange and the profile fetch."""

import logging
from typing import Callable, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from top_albums.adapters.spotify.auth import REQUESTS_TIMEOUT, get_spotify_client
from top_albums.domain import errors
from top_albums.domain.ports import TokenExchangePort

TOKEN_URL = "https://accounts.spotify.com/api/token"

logger = logging.getLogger("top_albums.spotify.tokens")


class SpotifyTokenClient(TokenExchangePort):

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        sp_factory: Optional[Callable[[str], spotipy.Spotify]] = None,
    ):
        self.session = session or requests.Session()
        self.sp_factory = sp_factory or (lambda token: get_spotify_client(token, self.session))

    def exchange(self, code: str, verifier: str, redirect_uri: str, client_id: str) -> str:
        # Authorization codes are single-use: never retried here.
        try:
            response = self.session.post(
                TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": redirect_uri,
                    "client_id": client_id,
                    "code_verifier": verifier,
                },
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=REQUESTS_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.exception("Token exchange request did not complete")
            raise errors.TransportError(errors.TOKEN_EXCHANGE_FAILED, exc) from exc

        if not response.ok:
            logger.debug("Token endpoint answered %s: %s", response.status_code, response.text)
            raise errors.TokenExchangeFailed(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logger.debug(
                "Token endpoint answered without an access_token (keys: %s)",
                sorted(payload) if isinstance(payload, dict) else type(payload).__name__,
            )
            raise errors.TokenExchangeFailed(response.status_code, response.text)
        return token

    def fetch_profile(self, token: str) -> dict:
        try:
            profile = self.sp_factory(token).current_user()
        except SpotifyException as exc:
            raise errors.ProfileFetchFailed(exc.http_status) from exc
        except requests.RequestException as exc:
            logger.exception("Profile request did not complete")
            raise errors.TransportError(errors.PROFILE_FETCH_FAILED, exc) from exc

        if not isinstance(profile, dict):
            raise errors.ProfileFetchFailed(None)
        return profile

"""Use case: log in to Spotify with Authorization Code + PKCE.

The browser leaves the process between ``start`` and
``complete_from_redirect``, possibly for good (the process can be
restarted before the callback arrives). The only thing carried across is
the verifier, persisted in the session store.
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from top_albums.domain import errors
from top_albums.domain.model import AuthState
from top_albums.domain.pkce import generate_challenge
from top_albums.domain.ports import SessionPort, TokenExchangePort
from top_albums.domain.redirect import RawRedirect, parse_redirect_params

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_SCOPES = ("user-top-read", "user-read-private", "user-read-email")

logger = logging.getLogger("top_albums.auth")

_STARTABLE = {AuthState.IDLE, AuthState.AWAITING_REDIRECT, AuthState.FAILED}


class AuthFlowController:

    def __init__(
        self,
        session: SessionPort,
        tokens: TokenExchangePort,
        client_id: str,
        redirect_uri: str,
    ):
        self.session = session
        self.tokens = tokens
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.error: Optional[errors.AuthFlowError] = None
        self.state = self._initial_state()

    def _initial_state(self) -> AuthState:
        current = self.session.load()
        if current.is_authenticated:
            return AuthState.AUTHENTICATED
        if current.pending_verifier:
            return AuthState.AWAITING_REDIRECT
        return AuthState.IDLE

    @property
    def is_authenticated(self) -> bool:
        return self.session.load().is_authenticated

    @property
    def failure_reason(self) -> Optional[str]:
        return self.error.reason if self.error else None

    def start(self) -> str:
        """Persist a fresh verifier and return the Spotify authorize URL."""
        if self.state not in _STARTABLE:
            raise errors.AuthStateError(f"Cannot start a login while {self.state.value}")

        pkce = generate_challenge()
        self.session.save_pending_verifier(pkce.verifier)
        self.error = None
        self._transition(AuthState.AWAITING_REDIRECT)

        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": " ".join(SPOTIFY_SCOPES),
            "code_challenge_method": "S256",
            "code_challenge": pkce.challenge,
            "show_dialog": "true",
        }
        return f"{AUTHORIZE_URL}?{urlencode(params)}"

    def complete_from_redirect(self, raw: RawRedirect) -> AuthState:
        params = parse_redirect_params(raw)

        if params.get("error"):
            self.session.clear_verifier()
            return self._fail(errors.AuthRejected(params["error"]))

        code = params.get("code")
        if not code:
            self.session.clear_verifier()
            return self._fail(errors.MissingCode())

        if not self.session.mark_code_processed(code):
            logger.info("Authorization code already handled; ignoring repeated callback")
            return self.state

        verifier = self.session.take_pending_verifier()
        if not verifier:
            return self._fail(errors.MissingVerifier())

        self._transition(AuthState.EXCHANGING)
        try:
            token = self.tokens.exchange(code, verifier, self.redirect_uri, self.client_id)
        except (errors.TokenExchangeFailed, errors.TransportError) as exc:
            return self._fail(exc)
        self.session.clear_verifier()
        self.session.save_token(token)

        self._transition(AuthState.FETCHING_PROFILE)
        try:
            profile = self.tokens.fetch_profile(token)
        except (errors.ProfileFetchFailed, errors.TransportError) as exc:
            return self._fail(exc)
        self.session.save_profile(profile)

        self.error = None
        return self._transition(AuthState.AUTHENTICATED)

    def logout(self) -> None:
        self.session.clear()
        self.error = None
        self._transition(AuthState.IDLE)

    def _transition(self, state: AuthState) -> AuthState:
        logger.debug("Auth state %s -> %s", self.state.value, state.value)
        self.state = state
        return state

    def _fail(self, error: errors.AuthFlowError) -> AuthState:
        logger.warning("Spotify login failed (%s): %s", error.reason, error)
        self.error = error
        return self._transition(AuthState.FAILED)

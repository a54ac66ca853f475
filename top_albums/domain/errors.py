"""Error taxonomy for the login flow.

Every auth failure carries a ``reason`` so callers can tell them apart
without matching on exception types. ``code`` is the short form shown
after a failed callback.
"""

from typing import Optional

AUTH_REJECTED = "auth_rejected"
MISSING_CODE = "missing_code"
MISSING_VERIFIER = "missing_verifier"
TOKEN_EXCHANGE_FAILED = "token_exchange_failed"
PROFILE_FETCH_FAILED = "profile_fetch_failed"


class TopAlbumsError(Exception):
    """Base class for all errors raised by this package."""


class AuthStateError(TopAlbumsError):
    """An operation was called from a state that does not allow it."""


class AuthFlowError(TopAlbumsError):
    reason = ""
    code = ""


class AuthRejected(AuthFlowError):
    reason = AUTH_REJECTED
    code = "auth_failed"

    def __init__(self, provider_error: str):
        super().__init__(f"Spotify authorization was refused: {provider_error}")
        self.provider_error = provider_error


class MissingCode(AuthFlowError):
    reason = MISSING_CODE
    code = "no_code"

    def __init__(self):
        super().__init__("No authorization code received")


class MissingVerifier(AuthFlowError):
    reason = MISSING_VERIFIER
    code = "no_verifier"

    def __init__(self):
        super().__init__("No code verifier found; start the login again")


class TokenExchangeFailed(AuthFlowError):
    reason = TOKEN_EXCHANGE_FAILED
    code = "token_exchange_failed"

    def __init__(self, status_code: Optional[int], body: str = ""):
        super().__init__(f"Token exchange failed (HTTP {status_code})")
        self.status_code = status_code
        # Kept for diagnostics only, never shown to the user.
        self.body = body


class ProfileFetchFailed(AuthFlowError):
    reason = PROFILE_FETCH_FAILED
    code = "profile_fetch_failed"

    def __init__(self, status_code: Optional[int]):
        super().__init__(f"Failed to fetch user profile (HTTP {status_code})")
        self.status_code = status_code


class TransportError(AuthFlowError):
    """Network-level failure during the exchange or the profile fetch."""

    def __init__(self, reason: str, cause: Exception):
        super().__init__(f"Network error during {reason}: {cause}")
        self.reason = reason
        self.code = reason
        self.cause = cause

"""PKCE verifier and S256 challenge generation."""

import base64
import hashlib
import secrets
import string

from top_albums.domain.model import PKCEChallenge

VERIFIER_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
VERIFIER_LENGTH = 128
MIN_VERIFIER_LENGTH = 43
MAX_VERIFIER_LENGTH = 128


def generate_verifier(length: int = VERIFIER_LENGTH) -> str:
    """Return a random verifier of ``length`` characters.

    Each byte from the OS random source is mapped onto the 62-character
    alphabet by modulo.
    """
    if not MIN_VERIFIER_LENGTH <= length <= MAX_VERIFIER_LENGTH:
        raise ValueError(
            f"Verifier length must be between {MIN_VERIFIER_LENGTH} and {MAX_VERIFIER_LENGTH}, got {length}"
        )
    raw = secrets.token_bytes(length)
    return "".join(VERIFIER_ALPHABET[b % len(VERIFIER_ALPHABET)] for b in raw)


def derive_challenge(verifier: str) -> str:
    digest = hashlib.sha256(verifier.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii").rstrip("=")


def generate_challenge(length: int = VERIFIER_LENGTH) -> PKCEChallenge:
    verifier = generate_verifier(length)
    return PKCEChallenge(verifier=verifier, challenge=derive_challenge(verifier))

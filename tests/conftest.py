"""Shared in-memory adapters and fixtures for all bounded contexts."""

from typing import Optional

import pytest

from top_albums.domain import errors
from top_albums.domain.model import AlbumRef, Session, TimeRange, Track
from top_albums.domain.ports import SessionPort, TokenExchangePort, TrackSourcePort


# ── In-memory adapters ──────────────────────────────────────────────


class InMemorySession(SessionPort):
    def __init__(self, session: Optional[Session] = None):
        self._data = session or Session()

    def load(self) -> Session:
        return Session(
            access_token=self._data.access_token,
            user=self._data.user,
            pending_verifier=self._data.pending_verifier,
            processed_codes=set(self._data.processed_codes),
        )

    def save_pending_verifier(self, verifier: str) -> None:
        self._data.pending_verifier = verifier

    def take_pending_verifier(self) -> Optional[str]:
        verifier, self._data.pending_verifier = self._data.pending_verifier, None
        return verifier

    def clear_verifier(self) -> None:
        self._data.pending_verifier = None

    def save_token(self, token: str) -> None:
        self._data.access_token = token

    def save_profile(self, profile: dict) -> None:
        self._data.user = profile

    def clear(self) -> None:
        self._data = Session()

    def mark_code_processed(self, code: str) -> bool:
        if code in self._data.processed_codes:
            return False
        self._data.processed_codes.add(code)
        return True


class FakeTokenClient(TokenExchangePort):
    def __init__(self, token: str = "access-123", profile: Optional[dict] = None):
        self.token = token
        self.profile = profile if profile is not None else {"id": "u1", "display_name": "Ada"}
        self.exchange_error: Optional[Exception] = None
        self.profile_error: Optional[Exception] = None
        self.exchanges: list[tuple[str, str, str, str]] = []
        self.profile_requests: list[str] = []

    def exchange(self, code: str, verifier: str, redirect_uri: str, client_id: str) -> str:
        self.exchanges.append((code, verifier, redirect_uri, client_id))
        if self.exchange_error:
            raise self.exchange_error
        return self.token

    def fetch_profile(self, token: str) -> dict:
        self.profile_requests.append(token)
        if self.profile_error:
            raise self.profile_error
        return self.profile


class InMemoryTrackSource(TrackSourcePort):
    def __init__(self, tracks: Optional[list[Track]] = None):
        self.tracks = tracks or []
        self.calls: list[tuple[str, TimeRange, int]] = []

    def fetch_top_tracks(self, token: str, time_range: TimeRange, total_wanted: int) -> list[Track]:
        self.calls.append((token, time_range, total_wanted))
        return self.tracks[:total_wanted]


# ── Shared fixtures ─────────────────────────────────────────────────


@pytest.fixture
def make_track():
    def _make(album_id: str, release_date: Optional[str] = "2023-05-01", name: str = "", artists=None) -> Track:
        _make.counter += 1
        return Track(
            id=f"t{_make.counter}",
            name=name or f"Song {_make.counter}",
            artists=list(artists or [f"Artist {album_id}"]),
            album=AlbumRef(
                id=album_id,
                name=f"Album {album_id}",
                images=[{"url": f"https://cdn.example/{album_id}.jpg", "height": 640, "width": 640}],
                release_date=release_date,
            ),
        )

    _make.counter = 0
    return _make


@pytest.fixture
def session():
    return InMemorySession()


@pytest.fixture
def token_client():
    return FakeTokenClient()


@pytest.fixture
def transport_failure():
    return errors.TransportError(errors.TOKEN_EXCHANGE_FAILED, ConnectionError("connection reset"))


@pytest.fixture
def track_source():
    return InMemoryTrackSource

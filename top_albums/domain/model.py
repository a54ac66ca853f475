"""Pure domain objects — no framework dependency."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class AuthState(str, Enum):
    IDLE = "idle"
    AWAITING_REDIRECT = "awaiting_redirect"
    EXCHANGING = "exchanging"
    FETCHING_PROFILE = "fetching_profile"
    AUTHENTICATED = "authenticated"
    FAILED = "failed"


class TimeRange(str, Enum):
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"

    @property
    def label(self) -> str:
        return _TIME_RANGE_LABELS[self]


_TIME_RANGE_LABELS = {
    TimeRange.SHORT_TERM: "Last 4 Weeks",
    TimeRange.MEDIUM_TERM: "Last 6 Months",
    TimeRange.LONG_TERM: "All Time",
}


@dataclass
class Session:
    access_token: Optional[str] = None
    user: Optional[dict] = None
    pending_verifier: Optional[str] = None
    processed_codes: set[str] = field(default_factory=set)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


@dataclass(frozen=True)
class PKCEChallenge:
    verifier: str
    challenge: str


@dataclass
class AlbumRef:
    id: str
    name: str
    images: list[dict] = field(default_factory=list)
    release_date: Optional[str] = None
    release_date_precision: Optional[str] = None


@dataclass
class Track:
    id: str
    name: str
    artists: list[str]
    album: AlbumRef
    external_url: Optional[str] = None


@dataclass(frozen=True)
class AlbumEntry:
    id: str
    name: str
    artists: tuple[str, ...]
    images: tuple[dict, ...]
    release_date: Optional[str]
    score: int
    track_count: int
    best_rank: int


@dataclass
class TopAlbumsReport:
    time_range: TimeRange
    year_filter: str
    requested: int
    tracks: list[Track] = field(default_factory=list)
    albums: list[AlbumEntry] = field(default_factory=list)
    partial: bool = False

"""Ports (interfaces) for the hexagonal architecture."""

from abc import ABC, abstractmethod
from typing import Optional

from top_albums.domain.model import Session, TimeRange, Track


class SessionPort(ABC):
    @abstractmethod
    def load(self) -> Session:
        ...

    @abstractmethod
    def save_pending_verifier(self, verifier: str) -> None:
        ...

    @abstractmethod
    def take_pending_verifier(self) -> Optional[str]:
        """Return the pending verifier and forget it in the same step."""

    @abstractmethod
    def clear_verifier(self) -> None:
        ...

    @abstractmethod
    def save_token(self, token: str) -> None:
        ...

    @abstractmethod
    def save_profile(self, profile: dict) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def mark_code_processed(self, code: str) -> bool:
        """Record ``code``; True only the first time it is seen."""


class TokenExchangePort(ABC):
    @abstractmethod
    def exchange(self, code: str, verifier: str, redirect_uri: str, client_id: str) -> str:
        ...

    @abstractmethod
    def fetch_profile(self, token: str) -> dict:
        ...


class TrackSourcePort(ABC):
    @abstractmethod
    def fetch_top_tracks(self, token: str, time_range: TimeRange, total_wanted: int) -> list[Track]:
        ...


class ConfigPort(ABC):
    @abstractmethod
    def load(self) -> dict:
        ...

    @abstractmethod
    def save(self, cfg: dict) -> None:
        ...

    @abstractmethod
    def is_configured(self) -> bool:
        ...

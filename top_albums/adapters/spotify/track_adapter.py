"""Spotify adapter for fetching the user's top tracks."""

import logging
import math
from typing import Callable, Optional

import requests
import spotipy
from spotipy.exceptions import SpotifyException

from top_albums.adapters.spotify.auth import get_spotify_client
from top_albums.domain.model import AlbumRef, TimeRange, Track
from top_albums.domain.ports import TrackSourcePort

PAGE_SIZE = 50

logger = logging.getLogger("top_albums.spotify.tracks")


class SpotifyTopTracksAdapter(TrackSourcePort):

    def __init__(self, sp_factory: Optional[Callable[[str], spotipy.Spotify]] = None):
        self.sp_factory = sp_factory or get_spotify_client

    def fetch_top_tracks(self, token: str, time_range: TimeRange, total_wanted: int) -> list[Track]:
        """Page through top tracks, best effort.

        Pages are requested one at a time since a short page ends the data.
        A failing page stops the loop and whatever was collected is returned.
        """
        if total_wanted <= 0:
            return []

        sp = self.sp_factory(token)
        time_range = TimeRange(time_range)
        tracks: list[Track] = []

        for page in range(math.ceil(total_wanted / PAGE_SIZE)):
            offset = page * PAGE_SIZE
            try:
                results = sp.current_user_top_tracks(
                    limit=PAGE_SIZE,
                    offset=offset,
                    time_range=time_range.value,
                )
            except (SpotifyException, requests.RequestException):
                logger.warning(
                    "Top tracks page %s failed; keeping %s tracks fetched so far",
                    page,
                    len(tracks),
                    exc_info=True,
                )
                break

            items = (results or {}).get("items") or []
            tracks.extend(_to_track(item) for item in items if item)
            if len(items) < PAGE_SIZE:
                break

        return tracks[:total_wanted]


def _to_track(t: dict) -> Track:
    album = t.get("album") or {}
    return Track(
        id=t.get("id") or "",
        name=t.get("name", ""),
        artists=[a.get("name", "") for a in t.get("artists", [])],
        album=AlbumRef(
            id=album.get("id") or "",
            name=album.get("name", ""),
            images=[img for img in album.get("images", []) if isinstance(img, dict)],
            release_date=album.get("release_date") or None,
            release_date_precision=album.get("release_date_precision") or None,
        ),
        external_url=(t.get("external_urls") or {}).get("spotify"),
    )

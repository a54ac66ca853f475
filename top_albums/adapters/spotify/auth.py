"""Build spotipy clients from an access token obtained through PKCE."""

from typing import Optional

import requests
import spotipy

REQUESTS_TIMEOUT = 10


def get_spotify_client(
    access_token: str,
    requests_session: Optional[requests.Session] = None,
) -> spotipy.Spotify:
    """Return a client that sends ``access_token`` as a Bearer header.

    Passing our own session keeps spotipy from mounting its retrying adapter;
    retries are the caller's decision.
    """
    return spotipy.Spotify(
        auth=access_token,
        requests_session=requests_session or requests.Session(),
        requests_timeout=REQUESTS_TIMEOUT,
    )

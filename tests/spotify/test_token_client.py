"""Spotify token exchange and profile fetch, without touching the network."""

import json

import pytest
import requests
from spotipy.exceptions import SpotifyException

from top_albums.adapters.spotify.token_client import TOKEN_URL, SpotifyTokenClient
from top_albums.domain import errors


def _response(status: int, body) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response._content = (body if isinstance(body, str) else json.dumps(body)).encode("utf-8")
    response.encoding = "utf-8"
    response.url = TOKEN_URL
    return response


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.posts: list[dict] = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.posts.append({"url": url, "data": data, "headers": headers})
        if self.error:
            raise self.error
        return self.response


class FakeSpotify:
    def __init__(self, profile=None, error=None):
        self.profile = profile
        self.error = error

    def current_user(self):
        if self.error:
            raise self.error
        return self.profile


class TestExchange:
    """The authorization code and verifier are traded for an access token."""

    def test_posts_form_encoded_pkce_grant(self):
        http = FakeHttp(_response(200, {"access_token": "tok", "token_type": "Bearer", "expires_in": 3600}))
        client = SpotifyTokenClient(session=http)

        token = client.exchange("code-1", "verifier-1", "http://127.0.0.1:8888/callback", "client-abc")

        assert token == "tok"
        assert http.posts[0]["url"] == "https://accounts.spotify.com/api/token"
        assert http.posts[0]["data"] == {
            "grant_type": "authorization_code",
            "code": "code-1",
            "redirect_uri": "http://127.0.0.1:8888/callback",
            "client_id": "client-abc",
            "code_verifier": "verifier-1",
        }
        assert http.posts[0]["headers"]["Content-Type"] == "application/x-www-form-urlencoded"

    def test_non_success_status_keeps_body_out_of_the_message(self):
        body = {"error": "invalid_grant", "error_description": "Invalid authorization code"}
        client = SpotifyTokenClient(session=FakeHttp(_response(400, body)))

        with pytest.raises(errors.TokenExchangeFailed) as excinfo:
            client.exchange("code-1", "verifier-1", "http://127.0.0.1:8888/callback", "client-abc")

        assert excinfo.value.status_code == 400
        assert "invalid_grant" in excinfo.value.body
        assert "invalid_grant" not in str(excinfo.value)

    def test_success_without_access_token_is_a_failure(self):
        client = SpotifyTokenClient(session=FakeHttp(_response(200, {"token_type": "Bearer"})))

        with pytest.raises(errors.TokenExchangeFailed):
            client.exchange("code-1", "verifier-1", "http://127.0.0.1:8888/callback", "client-abc")

    def test_connection_error_is_a_transport_error(self):
        http = FakeHttp(error=requests.ConnectionError("connection refused"))
        client = SpotifyTokenClient(session=http)

        with pytest.raises(errors.TransportError) as excinfo:
            client.exchange("code-1", "verifier-1", "http://127.0.0.1:8888/callback", "client-abc")

        assert excinfo.value.reason == errors.TOKEN_EXCHANGE_FAILED
        assert len(http.posts) == 1


class TestFetchProfile:
    """The profile is read with the fresh token."""

    def test_returns_profile(self):
        seen = []
        client = SpotifyTokenClient(
            session=FakeHttp(),
            sp_factory=lambda token: seen.append(token) or FakeSpotify(profile={"display_name": "Ada"}),
        )

        assert client.fetch_profile("tok") == {"display_name": "Ada"}
        assert seen == ["tok"]

    def test_http_error_is_profile_fetch_failed(self):
        error = SpotifyException(401, -1, "The access token expired")
        client = SpotifyTokenClient(session=FakeHttp(), sp_factory=lambda token: FakeSpotify(error=error))

        with pytest.raises(errors.ProfileFetchFailed) as excinfo:
            client.fetch_profile("tok")

        assert excinfo.value.status_code == 401

    def test_connection_error_is_a_transport_error(self):
        error = requests.ConnectionError("connection reset")
        client = SpotifyTokenClient(session=FakeHttp(), sp_factory=lambda token: FakeSpotify(error=error))

        with pytest.raises(errors.TransportError) as excinfo:
            client.fetch_profile("tok")

        assert excinfo.value.reason == errors.PROFILE_FETCH_FAILED


def test_reply_without_access_token_is_not_logged_verbatim(caplog):
    caplog.set_level("DEBUG", logger="top_albums.spotify.tokens")
    body = {"refresh_token": "REFRESH-SECRET", "token_type": "Bearer"}
    client = SpotifyTokenClient(session=FakeHttp(_response(200, body)))

    with pytest.raises(errors.TokenExchangeFailed):
        client.exchange("code-1", "verifier-1", "http://127.0.0.1:8888/callback", "client-abc")

    assert "refresh_token" in caplog.text
    assert "REFRESH-SECRET" not in caplog.text

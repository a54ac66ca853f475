"""Token storage in the OS keychain, and what happens when there is none."""

import keyring
import pytest
from keyring.errors import NoKeyringError, PasswordDeleteError

from top_albums.adapters.config.secret_store import KeyringSecretStore, scoped_key


class FakeKeyring:
    def __init__(self):
        self.data: dict[tuple[str, str], str] = {}

    def get_password(self, service, key):
        return self.data.get((service, key))

    def set_password(self, service, key, value):
        self.data[(service, key)] = value

    def delete_password(self, service, key):
        if (service, key) not in self.data:
            raise PasswordDeleteError("not found")
        del self.data[(service, key)]


@pytest.fixture
def fake_keyring(monkeypatch):
    fake = FakeKeyring()
    monkeypatch.setattr(keyring, "get_password", fake.get_password)
    monkeypatch.setattr(keyring, "set_password", fake.set_password)
    monkeypatch.setattr(keyring, "delete_password", fake.delete_password)
    return fake


@pytest.fixture
def no_keyring(monkeypatch):
    def unavailable(*args, **kwargs):
        raise NoKeyringError("No recommended backend was available")

    for name in ("get_password", "set_password", "delete_password"):
        monkeypatch.setattr(keyring, name, unavailable)


def test_token_is_stored_under_the_app_service(fake_keyring):
    store = KeyringSecretStore()

    assert store.set("spotify_access_token", "tok") is True
    assert fake_keyring.data[("top-albums", "spotify_access_token")] == "tok"
    assert store.get("spotify_access_token") == "tok"


def test_empty_value_deletes_the_secret(fake_keyring):
    store = KeyringSecretStore()
    store.set("spotify_access_token", "tok")

    assert store.set("spotify_access_token", "") is True
    assert store.get("spotify_access_token") is None


def test_deleting_a_missing_secret_is_fine(fake_keyring):
    assert KeyringSecretStore().delete("never-stored") is True


def test_missing_backend_reports_unavailable(no_keyring):
    store = KeyringSecretStore()

    assert store.get("spotify_access_token") is None
    assert store.set("spotify_access_token", "tok") is False
    assert store.delete("spotify_access_token") is False


def test_failed_delete_is_reported_when_clearing(no_keyring):
    assert KeyringSecretStore().set("spotify_access_token", "") is False


def test_scoped_keys_differ_per_session_file(tmp_path):
    home = scoped_key("spotify_access_token", tmp_path / "home" / "session.json")
    work = scoped_key("spotify_access_token", tmp_path / "work" / "session.json")

    assert home != work
    assert home.startswith("spotify_access_token:")
    assert scoped_key("spotify_access_token", str(tmp_path / "home" / "session.json")) == home

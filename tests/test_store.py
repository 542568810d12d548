from datetime import datetime, timezone

import pytest

from saferviewer.auth.store import CachedToken, CredentialStore
from saferviewer.errors import TokenNotFound


def test_cache_path_is_derived_from_home(settings):
    store = CredentialStore(settings)
    assert store.path == settings.home_dir / ".SaferViewer" / "drive-api-cert.json"


def test_token_filename_is_url_escaped(settings):
    settings.token_filename = "drive api/cert.json"
    assert CredentialStore(settings).path.name == "drive+api%2Fcert.json"


def test_load_missing_creates_dir_and_raises(settings):
    store = CredentialStore(settings)
    with pytest.raises(TokenNotFound):
        store.load()
    assert store.path.parent.is_dir()


def test_load_malformed_raises_not_found(settings):
    store = CredentialStore(settings)
    store.path.parent.mkdir(parents=True)
    store.path.write_text("{not json")
    with pytest.raises(TokenNotFound):
        store.load()

    store.path.write_text('{"token_type": "Bearer"}')
    with pytest.raises(TokenNotFound):
        store.load()


def test_save_then_load_round_trip(settings):
    store = CredentialStore(settings)
    token = CachedToken(
        access_token="ya29.access",
        refresh_token="1//refresh",
        token_type="Bearer",
        expiry=datetime(2030, 5, 1, 12, 30, tzinfo=timezone.utc),
    )
    store.save(token)
    assert store.load() == token
    assert store.load() == store.load()


def test_save_overwrites_existing(settings):
    store = CredentialStore(settings)
    store.save(CachedToken(access_token="old"))
    store.save(CachedToken(access_token="new"))
    assert store.load().access_token == "new"


def test_reads_cache_written_by_previous_release(settings):
    store = CredentialStore(settings)
    store.path.parent.mkdir(parents=True)
    store.path.write_text(
        '{"access_token":"ya29.a","token_type":"Bearer","refresh_token":"1//r",'
        '"expiry":"2017-03-04T10:11:12.123456789+01:00"}\n'
    )
    token = store.load()
    assert token.refresh_token == "1//r"
    assert token.naive_utc_expiry() == datetime(2017, 3, 4, 9, 11, 12, 123456)


def test_zero_expiry_means_no_expiry(settings):
    store = CredentialStore(settings)
    store.path.parent.mkdir(parents=True)
    store.path.write_text('{"access_token":"a","expiry":"0001-01-01T00:00:00Z"}')
    assert store.load().expiry is None


def test_load_binary_garbage_raises_not_found(settings):
    store = CredentialStore(settings)
    store.path.parent.mkdir(parents=True)
    store.path.write_bytes(b"\xff\xfe\x00garbage")
    with pytest.raises(TokenNotFound):
        store.load()

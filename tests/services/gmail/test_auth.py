"""Tests for OAuth client parsing and the token lifecycle."""

from datetime import datetime
import json
from unittest.mock import MagicMock

import pytest

from gmail_order_status.services.gmail.auth import (
    SCOPES,
    TokenLifecycle,
    parse_client_config,
    token_expiry,
    token_to_dict,
)
from gmail_order_status.utils.errors import AuthError, ConfigurationError, TransportError
from gmail_order_status.utils.helpers import decode_json_robust

CLIENT = {"client_id": "cid", "client_secret": "csecret"}


def test_decode_json_robust_variants():
    assert decode_json_robust('{"a": 1}') == {"a": 1}
    assert decode_json_robust('{\\"a\\": 1}') == {"a": 1}
    assert decode_json_robust("\ufeff{\"a\": 1}") == {"a": 1}
    assert decode_json_robust("not json") is None
    assert decode_json_robust("[1, 2]") is None
    assert decode_json_robust("") is None


@pytest.mark.parametrize(
    "text",
    [
        json.dumps(CLIENT),
        json.dumps({"web": CLIENT}),
        json.dumps({"installed": CLIENT}),
        json.dumps({"installed": CLIENT}).replace('"', '\\"'),
    ],
)
def test_parse_client_config_shapes(text):
    config = parse_client_config(text)
    assert config.client_id == "cid"
    assert config.client_secret == "csecret"


def test_parse_client_config_rejects_incomplete_client():
    with pytest.raises(ConfigurationError, match="Invalid credentials JSON"):
        parse_client_config(json.dumps({"web": {"client_id": "cid"}}))
    with pytest.raises(ConfigurationError):
        parse_client_config("")


def test_token_expiry_from_google_shape():
    assert token_expiry({"expiry": "2030-01-02T03:04:05.123456Z"}) == datetime(2030, 1, 2, 3, 4, 5, 123456)


def test_token_expiry_from_raw_oauth_shape():
    expiry = token_expiry({"created": 0, "expires_in": 3600})
    assert expiry == datetime(1970, 1, 1, 1, 0, 0)


def test_token_expiry_missing():
    assert token_expiry({"token": "x"}) is None
    assert token_expiry({"expiry": "soon"}) is None


def test_build_credentials_requires_token():
    with pytest.raises(AuthError, match="Not connected"):
        TokenLifecycle(json.dumps(CLIENT), None).build_credentials()


def test_build_credentials_from_raw_shape():
    token = {"access_token": "ya29.raw", "refresh_token": "r1", "created": 0, "expires_in": 3600}
    creds = TokenLifecycle(json.dumps(CLIENT), token).build_credentials()

    assert creds.token == "ya29.raw"
    assert creds.refresh_token == "r1"
    assert creds.client_id == "cid"
    assert creds.expired is True
    assert list(creds.scopes) == SCOPES


def test_ensure_fresh_skips_valid_token():
    token = {"token": "ya29.ok", "expiry": "2999-01-01T00:00:00Z"}
    lifecycle = TokenLifecycle(json.dumps(CLIENT), token)
    creds = lifecycle.build_credentials()
    assert lifecycle.ensure_fresh(creds) is None


def test_ensure_fresh_without_refresh_token_raises_auth_error():
    token = {"token": "ya29.old", "expiry": "2000-01-01T00:00:00Z"}
    lifecycle = TokenLifecycle(json.dumps(CLIENT), token)
    creds = lifecycle.build_credentials()

    with pytest.raises(AuthError, match="no refresh token"):
        lifecycle.ensure_fresh(creds)


def test_ensure_fresh_refreshes_and_keeps_refresh_token():
    token = {"token": "ya29.old", "refresh_token": "1//keep", "expiry": "2000-01-01T00:00:00Z", "id_token": "idt"}
    lifecycle = TokenLifecycle(json.dumps(CLIENT), token)
    creds = lifecycle.build_credentials()

    def fake_refresh(request):
        creds.token = "ya29.new"
        creds.expiry = datetime(2999, 1, 1)

    creds.refresh = MagicMock(side_effect=fake_refresh)
    new_token = lifecycle.ensure_fresh(creds, request=MagicMock())

    assert new_token["token"] == "ya29.new"
    assert new_token["refresh_token"] == "1//keep"
    assert new_token["expiry"] == "2999-01-01T00:00:00Z"
    assert new_token["id_token"] == "idt"
    assert lifecycle.token == new_token


def test_ensure_fresh_refreshes_token_without_expiry():
    token = {"token": "ya29.undated", "refresh_token": "1//keep"}
    lifecycle = TokenLifecycle(json.dumps(CLIENT), token)
    creds = lifecycle.build_credentials()

    def fake_refresh(request):
        creds.token = "ya29.new"
        creds.expiry = datetime(2999, 1, 1)

    creds.refresh = MagicMock(side_effect=fake_refresh)
    new_token = lifecycle.ensure_fresh(creds, request=MagicMock())

    creds.refresh.assert_called_once()
    assert new_token["token"] == "ya29.new"
    assert new_token["expiry"] == "2999-01-01T00:00:00Z"


def test_ensure_fresh_keeps_undated_token_without_refresh_token():
    lifecycle = TokenLifecycle(json.dumps(CLIENT), {"token": "ya29.undated"})
    creds = lifecycle.build_credentials()
    assert lifecycle.ensure_fresh(creds) is None


def test_ensure_fresh_wraps_refresh_failure():
    token = {"token": "ya29.old", "refresh_token": "1//keep", "expiry": "2000-01-01T00:00:00Z"}
    lifecycle = TokenLifecycle(json.dumps(CLIENT), token)
    creds = lifecycle.build_credentials()
    creds.refresh = MagicMock(side_effect=OSError("connection reset"))

    with pytest.raises(TransportError, match="connection reset"):
        lifecycle.ensure_fresh(creds, request=MagicMock())


def test_token_to_dict_drops_stale_raw_keys():
    creds = MagicMock(token="ya29.new", refresh_token=None, token_uri=None, scopes=None, expiry=None)
    previous = {"access_token": "old", "expires_in": 3599, "created": 1, "refresh_token": "r"}

    token = token_to_dict(creds, previous)

    assert "access_token" not in token
    assert "created" not in token
    assert token["refresh_token"] == "r"
    assert token["scopes"] == SCOPES

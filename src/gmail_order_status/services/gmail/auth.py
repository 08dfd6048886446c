"""
OAuth client config parsing and token lifecycle for Gmail accounts.

Accounts store the OAuth client JSON as pasted by the user and the token as
returned by Google. Both are decoded leniently; the token may be in the
``Credentials.to_json()`` shape (``token``/``expiry``) or the raw OAuth
response shape (``access_token``/``expires_in``/``created``).
"""

from dataclasses import dataclass
from datetime import datetime, timezone
import json
import logging
from typing import Any

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from gmail_order_status.utils.errors import AuthError, ConfigurationError, TransportError
from gmail_order_status.utils.helpers import decode_json_robust, json_variants

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.readonly"]
TOKEN_URI = "https://oauth2.googleapis.com/token"

# Keys of the raw OAuth shape that go stale once a refreshed token is stored
_RAW_TOKEN_KEYS = ("access_token", "expires_in", "created")


@dataclass(frozen=True)
class ClientConfig:
    """OAuth client identity extracted from the credentials JSON."""

    client_id: str
    client_secret: str
    token_uri: str = TOKEN_URI


def parse_client_config(text: str | None) -> ClientConfig:
    """
    Extract the OAuth client from pasted credentials JSON.

    Each decode variant is tried in turn; the first one carrying a client id
    and secret (top level, or under ``web``/``installed``) is used.

    Raises:
        ConfigurationError: No variant yields a usable client
    """
    for candidate in json_variants(text):
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(data, dict):
            continue

        section = data.get("web") or data.get("installed") or data
        if not isinstance(section, dict):
            continue

        client_id = str(section.get("client_id") or "").strip()
        client_secret = str(section.get("client_secret") or "").strip()
        if client_id and client_secret:
            return ClientConfig(
                client_id=client_id,
                client_secret=client_secret,
                token_uri=str(section.get("token_uri") or TOKEN_URI),
            )

    raise ConfigurationError(
        "Invalid credentials JSON",
        "Paste the OAuth client JSON downloaded from Google Cloud Console",
    )


def token_expiry(token: dict[str, Any]) -> datetime | None:
    """Expiry as a naive UTC datetime, which is what google-auth compares against."""
    expiry = token.get("expiry")
    if isinstance(expiry, str) and expiry.strip():
        try:
            parsed = datetime.fromisoformat(expiry.strip().rstrip("Z"))
        except ValueError:
            logger.debug(f"Unparseable token expiry: {expiry!r}")
            return None
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    created, expires_in = token.get("created"), token.get("expires_in")
    if created is not None and expires_in is not None:
        try:
            timestamp = float(created) + float(expires_in)
        except (TypeError, ValueError):
            return None
        return datetime.fromtimestamp(timestamp, tz=timezone.utc).replace(tzinfo=None)

    return None


def token_to_dict(credentials: Credentials, previous: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Serialize refreshed credentials for storage.

    Keys of the previous token are carried over, and the previous refresh
    token is kept when Google did not issue a new one.
    """
    previous = dict(previous or {})
    for key in _RAW_TOKEN_KEYS:
        previous.pop(key, None)

    token = {
        **previous,
        "token": credentials.token,
        "refresh_token": credentials.refresh_token or previous.get("refresh_token"),
        "token_uri": credentials.token_uri or TOKEN_URI,
        "scopes": list(credentials.scopes or SCOPES),
    }
    if credentials.expiry is not None:
        token["expiry"] = credentials.expiry.isoformat() + "Z"
    return token


class TokenLifecycle:
    """
    Build Gmail credentials for an account and keep its token fresh.

    The caller owns persistence: ``ensure_fresh`` returns the token to store
    after a refresh and never writes anything itself.
    """

    def __init__(self, credentials_json: str, token: dict[str, Any] | None):
        self.credentials_json = credentials_json
        self.token = dict(token) if token else None

    def build_credentials(self) -> Credentials:
        """
        Raises:
            AuthError: The account was never connected
            ConfigurationError: The credentials JSON has no usable client
        """
        if not self.token:
            raise AuthError("Not connected", "Authorize the account first")

        config = parse_client_config(self.credentials_json)
        return Credentials(
            token=self.token.get("token") or self.token.get("access_token"),
            refresh_token=self.token.get("refresh_token"),
            token_uri=config.token_uri,
            client_id=config.client_id,
            client_secret=config.client_secret,
            scopes=SCOPES,
            expiry=token_expiry(self.token),
        )

    def ensure_fresh(self, credentials: Credentials, request: Request | None = None) -> dict[str, Any] | None:
        """
        Refresh expired credentials in place.

        A token without expiry information is refreshed when a refresh token
        is available, and used as-is otherwise.

        Returns:
            The token to persist when a refresh happened, otherwise None

        Raises:
            AuthError: Expired with no refresh token
            TransportError: The refresh call failed
        """
        expiry_unknown = credentials.expiry is None and bool(credentials.refresh_token)
        if credentials.token and not credentials.expired and not expiry_unknown:
            return None

        if not credentials.refresh_token:
            raise AuthError(
                "Token expired and no refresh token present",
                "Please reconnect the account",
            )

        try:
            credentials.refresh(request or Request())
        except Exception as e:
            raise TransportError(f"Token refresh failed: {e}") from e

        logger.info("Refreshed Gmail credentials")
        self.token = token_to_dict(credentials, self.token)
        return self.token


__all__ = [
    "SCOPES",
    "TOKEN_URI",
    "ClientConfig",
    "TokenLifecycle",
    "decode_json_robust",
    "parse_client_config",
    "token_expiry",
    "token_to_dict",
]

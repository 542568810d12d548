from typing import Optional

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from loguru import logger

from ..errors import TokenNotFound
from .flow import AuthorizationFlow
from .store import CachedToken, CredentialStore


class SessionBuilder:
    """Turns a cached or freshly obtained token into Google credentials.

    Handles the cache-hit / cache-miss decision: a cached token is used as is,
    otherwise the interactive authorization flow runs and its token is used.
    """

    def __init__(
        self,
        client_config: dict,
        scopes: list[str],
        store: CredentialStore,
        flow: AuthorizationFlow,
    ) -> None:
        client_type = "installed" if "installed" in client_config else "web"
        self.client_info = client_config[client_type]
        self.scopes = scopes
        self.store = store
        self.flow = flow

    def build(self, token: CachedToken) -> Credentials:
        """Wrap a token into credentials usable by the Drive client.

        No freshness check is made here; a rejected token surfaces on first use.
        """
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=self.client_info["token_uri"],
            client_id=self.client_info["client_id"],
            client_secret=self.client_info.get("client_secret"),
            scopes=self.scopes,
            expiry=token.naive_utc_expiry(),
        )

    def resolve(self) -> Credentials:
        """Return credentials from the cache, authorizing interactively on a miss."""
        token = self._load_cached()
        if token is not None:
            logger.info("Using cached credential")
            creds = self.build(token)
            if creds.expired and creds.refresh_token:
                refreshed = self._refresh(creds)
                if refreshed is not None:
                    return refreshed
            else:
                return creds

        logger.info("No usable cached credential, starting authorization")
        return self.build(self.flow.run())

    def _load_cached(self) -> Optional[CachedToken]:
        try:
            return self.store.load()
        except TokenNotFound as e:
            logger.info(f"{e}")
        except OSError as e:
            logger.error(f"Unable to read cached credential: {e}")
        return None

    def _refresh(self, creds: Credentials) -> Optional[Credentials]:
        try:
            creds.refresh(Request())
        except RefreshError as e:
            logger.error(f"Cached credential was rejected on refresh: {e}")
            return None
        self.store.save(CachedToken.from_credentials(creds))
        logger.info("Cached credential refreshed")
        return creds

import os
import pathlib
import re
from datetime import datetime, timezone
from typing import Optional

from google.oauth2.credentials import Credentials
from loguru import logger
from pydantic import BaseModel, ValidationError, field_validator

from ..errors import TokenNotFound
from ..settings import Settings

_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")


class CachedToken(BaseModel):
    """The token record kept on disk between runs."""

    access_token: str
    token_type: str = "Bearer"
    refresh_token: Optional[str] = None
    expiry: Optional[datetime] = None

    @field_validator("expiry", mode="before")
    @classmethod
    def _normalize_expiry(cls, value):
        if isinstance(value, str):
            if value.startswith("0001-01-01"):
                # zero time: the token never expires
                return None
            # nanosecond precision is cut to what datetime can hold
            value = _EXCESS_FRACTION.sub(r"\1", value)
        return value

    @classmethod
    def from_credentials(cls, creds: Credentials) -> "CachedToken":
        expiry = creds.expiry
        if expiry is not None and expiry.tzinfo is None:
            # google-auth keeps naive UTC datetimes
            expiry = expiry.replace(tzinfo=timezone.utc)
        return cls(
            access_token=creds.token,
            refresh_token=creds.refresh_token,
            expiry=expiry,
        )

    def naive_utc_expiry(self) -> Optional[datetime]:
        """Expiry in the form google-auth expects (naive, UTC)."""
        if self.expiry is None:
            return None
        if self.expiry.tzinfo is None:
            return self.expiry
        return self.expiry.astimezone(timezone.utc).replace(tzinfo=None)


class CredentialStore:
    """Owns the single cached token file of the current user."""

    def __init__(self, settings: Settings) -> None:
        self.path: pathlib.Path = settings.token_cache_file

    def load(self) -> CachedToken:
        """Read the cached token.

        Raises:
            TokenNotFound: If the file is absent or does not hold a token record.
            OSError: For any other I/O failure (e.g. permissions).
        """
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as e:
            raise TokenNotFound(f"No cached credential at {self.path}") from e

        try:
            return CachedToken.model_validate_json(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValidationError) as e:
            raise TokenNotFound(f"Cached credential at {self.path} is malformed") from e

    def save(self, token: CachedToken) -> None:
        """Write the token, replacing any existing cache."""
        logger.info(f"Saving credential file to: {self.path}")
        self.path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        self.path.write_text(token.model_dump_json(), encoding="utf-8")
        os.chmod(self.path, 0o600)

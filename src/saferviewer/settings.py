import json
import os
import pathlib
from typing import Optional
from urllib.parse import quote_plus

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

load_dotenv()

ASSETS_DIR = pathlib.Path(__file__).resolve().parent / "assets"


def _env_flag(name: str) -> bool:
    return os.getenv(name, "0").strip().lower() in ("1", "true", "yes")


class Settings(BaseModel):
    """Runtime configuration, built once by the entry point and passed to each component."""

    app_name: str = "SaferViewer"
    home_dir: pathlib.Path = Field(default_factory=pathlib.Path.home)
    token_filename: str = "drive-api-cert.json"

    # bundled with the package, not overridable from the environment
    client_secrets_file: pathlib.Path = ASSETS_DIR / "client_secret.json"
    response_page: pathlib.Path = ASSETS_DIR / "responsefile.html"
    scopes: list[str] = ["https://www.googleapis.com/auth/drive"]

    redirect_host: str = "localhost"
    redirect_port: int = 31338
    state_token: str = "state-token"
    request_timeout: float = 10.0

    log_file: pathlib.Path = Field(
        default_factory=lambda: pathlib.Path(os.getenv("SAFERVIEWER_LOG_FILE", "/tmp/SaferViewer.log"))
    )

    folder_name: str = "SaferViewer"
    folder_description: str = "SaferViewer Cache directory"
    output_title: Optional[str] = Field(default_factory=lambda: os.getenv("SAFERVIEWER_TITLE") or None)
    share_with_anyone: bool = Field(default_factory=lambda: _env_flag("SAFERVIEWER_SHARE"))
    upload_chunk_size: int = 10 * 1024 * 1024

    open_command: Optional[list[str]] = None

    @property
    def cache_dir(self) -> pathlib.Path:
        return self.home_dir / f".{self.app_name}"

    @property
    def token_cache_file(self) -> pathlib.Path:
        return self.cache_dir / quote_plus(self.token_filename)


def load_client_config(settings: Settings) -> dict:
    """Read the bundled OAuth client descriptor ("installed" or "web" format).

    Raises:
        ConfigurationError: If the descriptor is missing or cannot be parsed.
    """
    try:
        config = json.loads(settings.client_secrets_file.read_text())
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            f"Unable to parse client secret file {settings.client_secrets_file}: {e}"
        ) from e

    client_type = "installed" if "installed" in config else "web"
    info = config.get(client_type)
    if not isinstance(info, dict) or not info.get("client_id") or not info.get("token_uri"):
        raise ConfigurationError(
            f"Client secret file {settings.client_secrets_file} is not a Google OAuth client descriptor"
        )
    return config

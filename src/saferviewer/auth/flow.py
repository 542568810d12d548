"""
Interactive OAuth 2.0 authorization-code flow.

A browser is pointed at the consent page and a short-lived local HTTP
listener catches the redirect carrying the authorization code. The code is
exchanged for a token, the token is persisted, and control returns to the
caller so the pending transfer can go on in the same process.
"""

import enum
from dataclasses import dataclass
from typing import Any, Callable, Optional
from urllib.parse import parse_qs
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from google_auth_oauthlib.flow import Flow
from loguru import logger

from ..errors import AuthorizationError, ConfigurationError, OpenError
from ..settings import Settings
from .store import CachedToken, CredentialStore

FAILURE_BODY = b"Authorization failed. Check the SaferViewer log file for details.\n"


class FlowState(str, enum.Enum):
    IDLE = "idle"
    AWAITING_USER_CONSENT = "awaiting_user_consent"
    AWAITING_CALLBACK = "awaiting_callback"
    EXCHANGING = "exchanging"
    PERSISTED = "persisted"
    TERMINATED = "terminated"


@dataclass(frozen=True)
class AuthorizationCallback:
    """Parameters of the redirect request sent back by the authorization server."""

    state: Optional[str]
    code: Optional[str]
    error: Optional[str]

    @classmethod
    def from_query(cls, query_string: str) -> "AuthorizationCallback":
        params = parse_qs(query_string, keep_blank_values=True)

        def first(name: str) -> Optional[str]:
            values = params.get(name)
            return values[0] if values else None

        return cls(state=first("state"), code=first("code"), error=first("error"))


class _CallbackRequestHandler(WSGIRequestHandler):
    def setup(self) -> None:
        # per-connection read/write timeout
        self.timeout = self.server.request_timeout  # type: ignore[attr-defined]
        super().setup()

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug(f"callback listener: {format % args}")


class _CallbackServer(WSGIServer):
    request_timeout: Optional[float] = None

    def handle_error(self, request: Any, client_address: Any) -> None:
        # idle or broken connections are dropped; the listener keeps waiting
        logger.opt(exception=True).debug(f"callback listener: dropped connection from {client_address[0]}")


def default_oauth_factory(settings: Settings, client_config: dict) -> Flow:
    return Flow.from_client_config(client_config, scopes=settings.scopes)


class AuthorizationFlow:
    """Single-pass authorization controller.

    Runs Idle -> AwaitingUserConsent -> AwaitingCallback -> Exchanging ->
    Persisted -> Terminated. Every failure raises AuthorizationError and
    leaves the listener closed; there is no retry, the user re-runs the tool.
    """

    def __init__(
        self,
        settings: Settings,
        client_config: dict,
        store: CredentialStore,
        opener: Callable[[str], None],
        oauth_factory: Callable[[Settings, dict], Any] = default_oauth_factory,
    ) -> None:
        self.settings = settings
        self.store = store
        self.opener = opener
        self.state = FlowState.IDLE
        self._oauth = oauth_factory(settings, client_config)
        try:
            self._page = settings.response_page.read_bytes()
        except OSError as e:
            raise ConfigurationError(f"Unable to read response page {settings.response_page}: {e}") from e

        self._callback: Optional[AuthorizationCallback] = None
        self._token: Optional[CachedToken] = None
        self._failure: Optional[BaseException] = None

    def authorization_url(self, redirect_uri: str) -> str:
        """Consent page URL asking for offline access (a refresh token)."""
        self._oauth.redirect_uri = redirect_uri
        url, _ = self._oauth.authorization_url(
            access_type="offline", state=self.settings.state_token
        )
        return url

    def run(self) -> CachedToken:
        """Obtain a token interactively, persist it and return it."""
        self.state = FlowState.IDLE
        self._callback = self._token = self._failure = None

        try:
            server = make_server(
                self.settings.redirect_host,
                self.settings.redirect_port,
                self._wsgi_app,
                server_class=_CallbackServer,
                handler_class=_CallbackRequestHandler,
            )
        except OSError as e:
            raise AuthorizationError(
                f"Unable to listen on {self.settings.redirect_host}:{self.settings.redirect_port}: {e}"
            ) from e
        server.request_timeout = self.settings.request_timeout

        try:
            redirect_uri = f"http://{self.settings.redirect_host}:{server.server_port}/"
            auth_url = self.authorization_url(redirect_uri)

            self.state = FlowState.AWAITING_USER_CONSENT
            logger.info("Opening browser for authorization")
            try:
                self.opener(auth_url)
            except (OpenError, OSError) as e:
                raise AuthorizationError(f"Unable to open authorization URL: {e}") from e

            self.state = FlowState.AWAITING_CALLBACK
            logger.info(f"Waiting for authorization callback on {redirect_uri}")
            while self._callback is None:
                server.handle_request()
        finally:
            server.server_close()

        if self._failure is not None:
            raise AuthorizationError(f"Authorization failed: {self._failure}") from self._failure

        self.state = FlowState.TERMINATED
        logger.info("Authorization complete")
        return self._token  # type: ignore[return-value]

    def _wsgi_app(self, environ: dict, start_response: Callable) -> list[bytes]:
        if environ.get("PATH_INFO", "/") != "/" or self._callback is not None:
            start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"Not found\n"]

        self._callback = AuthorizationCallback.from_query(environ.get("QUERY_STRING", ""))
        try:
            self._token = self._complete(self._callback)
        except Exception as e:
            logger.error(f"Authorization callback failed: {e}")
            self._failure = e
            start_response(
                "500 Internal Server Error",
                [("Content-Type", "text/plain; charset=utf-8"), ("Content-Length", str(len(FAILURE_BODY)))],
            )
            return [FAILURE_BODY]

        start_response(
            "200 OK",
            [("Content-Type", "text/html; charset=utf-8"), ("Content-Length", str(len(self._page)))],
        )
        return [self._page]

    def _complete(self, callback: AuthorizationCallback) -> CachedToken:
        if callback.error:
            raise AuthorizationError(f"Authorization server returned error: {callback.error}")
        if callback.state != self.settings.state_token:
            raise AuthorizationError("State token mismatch in authorization callback")
        if not callback.code:
            raise AuthorizationError("Authorization callback carries no code")

        self.state = FlowState.EXCHANGING
        self._oauth.fetch_token(code=callback.code)
        token = CachedToken.from_credentials(self._oauth.credentials)

        self.store.save(token)
        self.state = FlowState.PERSISTED
        return token

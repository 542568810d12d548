"""Local OAuth 2.0 authorization with a persistent per-user token cache."""

from .flow import AuthorizationCallback, AuthorizationFlow, FlowState
from .session import SessionBuilder
from .store import CachedToken, CredentialStore

__all__ = [
    "AuthorizationCallback",
    "AuthorizationFlow",
    "CachedToken",
    "CredentialStore",
    "FlowState",
    "SessionBuilder",
]

"""Exception hierarchy for SaferViewer."""


class SaferViewerError(Exception):
    """Base class for all SaferViewer errors."""


class ConfigurationError(SaferViewerError):
    """Bundled assets or the log file are missing or unusable."""


class TokenNotFound(SaferViewerError):
    """No usable cached token exists; the user must authorize."""


class AuthorizationError(SaferViewerError):
    """The interactive authorization flow could not produce a token."""


class OpenError(SaferViewerError):
    """The platform opener failed to open a URL or file."""


class TransferError(SaferViewerError):
    """The input file cannot be transferred."""

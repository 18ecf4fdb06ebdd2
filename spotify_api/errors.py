from typing import Optional


class SpotifyError(RuntimeError):
    """Base class for everything the Spotify layer raises."""


class ConfigError(SpotifyError):
    """Required configuration (client id/secret, redirect URI) is missing or invalid."""


class AuthorizationError(SpotifyError):
    """The browser handshake did not produce an authorization code."""


class AuthorizationDenied(AuthorizationError):
    def __init__(self, error: Optional[str] = None):
        self.error = error or "access_denied"
        super().__init__(f"Spotify authorization was not granted ({self.error}).")


class AuthorizationTimeout(AuthorizationError):
    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"No authorization callback received within {timeout:g} seconds.")


class FetchFailed(SpotifyError):
    """An HTTP request failed: network error, non-2xx status or unreadable body."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class TokenExchangeFailed(FetchFailed):
    """The token endpoint refused or failed to answer the code exchange."""


class UserAbort(SpotifyError):
    """The user chose to quit."""

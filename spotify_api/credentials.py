from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AccessCredential:
    """Bearer credential returned by the token endpoint.

    Held for the lifetime of the process; there is no refresh or expiry handling.
    """

    access_token: str
    token_type: str = "Bearer"
    scope: Optional[str] = None
    expires_in: Optional[int] = None

    @staticmethod
    def from_spotify_token_response(payload: Dict[str, Any]) -> "AccessCredential":
        """Convert Spotify token response JSON into an AccessCredential.

        Spotify returns:
        - access_token
        - token_type ("Bearer")
        - expires_in (seconds)
        - refresh_token (ignored here)
        - scope (space-delimited string)
        """

        # expires_in is informational only; an unreadable value is dropped.
        try:
            expires_in = int(payload["expires_in"])
        except (KeyError, TypeError, ValueError):
            expires_in = None

        return AccessCredential(
            access_token=str(payload.get("access_token") or ""),
            token_type=str(payload.get("token_type") or "Bearer"),
            scope=payload.get("scope"),
            expires_in=expires_in,
        )

    @property
    def authorization_header(self) -> str:
        # Spotify answers "bearer" in lower case on some flows; the API wants "Bearer".
        token_type = self.token_type if self.token_type.lower() != "bearer" else "Bearer"
        return f"{token_type} {self.access_token}"

    def __repr__(self) -> str:
        return f"AccessCredential(token_type={self.token_type!r}, scope={self.scope!r}, expires_in={self.expires_in!r})"

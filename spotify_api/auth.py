import base64
import json
import logging
import urllib.parse
from typing import Any, Dict, Iterable, Optional

import httpx

from constants import DEFAULT_REDIRECT_URI, SPOTIFY_AUTHORIZE_URL, SPOTIFY_TOKEN_URL
from .credentials import AccessCredential
from .errors import ConfigError, TokenExchangeFailed

logger = logging.getLogger(__name__)


def basic_auth_header(client_id: str, client_secret: str) -> str:
    raw = f"{client_id}:{client_secret}".encode("utf-8")
    return f"Basic {base64.b64encode(raw).decode('ascii')}"


def check_spotify_credentials(config: Dict[str, Any]) -> Dict[str, Any]:
    """Validate Spotify OAuth config fields and return a structured status dict."""

    config = config or {}
    client_id = str(config.get("spotify_client_id", "") or "").strip()
    client_secret = str(config.get("spotify_client_secret", "") or "").strip()
    redirect_uri = str(config.get("spotify_redirect_uri", "") or "").strip()
    scopes = list(config.get("spotify_scopes", []) or [])

    missing = []
    if not client_id:
        missing.append("CLIENT_ID")
    if not client_secret:
        missing.append("CLIENT_SECRET")
    if not redirect_uri:
        missing.append("spotify_redirect_uri")

    if missing:
        message = (
            f"Missing Spotify settings: {', '.join(missing)}.\n"
            "Set CLIENT_ID and CLIENT_SECRET in your environment or in a .env file next to config.json."
        )
    else:
        message = "Spotify credentials look OK."

    return {
        "ok": not missing,
        "missing": missing,
        "redirect_uri": redirect_uri,
        "scopes": scopes,
        "message": message,
    }


def spotify_app_setup_instructions(*, redirect_uri: str = DEFAULT_REDIRECT_URI) -> str:
    """Return user-facing setup instructions for creating a Spotify Developer app."""

    redirect_uri = str(redirect_uri or "").strip() or DEFAULT_REDIRECT_URI
    return (
        "Spotify app setup:\n"
        "1) Go to https://developer.spotify.com/dashboard\n"
        "2) Create an app (or select an existing app)\n"
        f"3) Add this Redirect URI in the app settings: {redirect_uri}\n"
        "4) Copy the Client ID and Client Secret into a .env file:\n"
        "     CLIENT_ID=...\n"
        "     CLIENT_SECRET=...\n\n"
        "Notes:\n"
        "- Redirect URI must match *exactly* what you configure in the Spotify dashboard.\n"
        "- The redirect host must be a loopback address (127.0.0.1 or localhost).\n"
    )


def extract_callback_params(path_or_url: str) -> Dict[str, str]:
    """Parse a callback request path and return {"code", "state", "error"} (missing keys omitted)."""

    parsed = urllib.parse.urlparse(str(path_or_url or "").strip())
    qs = urllib.parse.parse_qs(parsed.query)
    out: Dict[str, str] = {}
    for key in ("code", "state", "error"):
        if qs.get(key) and qs[key][0]:
            out[key] = str(qs[key][0])
    return out


class SpotifyAuth:
    """Spotify OAuth (Authorization Code with client secret) helper."""

    def __init__(self, config: Dict[str, Any], *, http_client: Optional[httpx.Client] = None):
        self.config = config or {}
        self.http_client = http_client

        status = check_spotify_credentials(self.config)
        if not status["ok"]:
            raise ConfigError(status["message"])

        self.client_id = str(self.config["spotify_client_id"]).strip()
        self.client_secret = str(self.config["spotify_client_secret"]).strip()
        self.redirect_uri = str(self.config["spotify_redirect_uri"]).strip()

    def get_authorize_url(
        self,
        *,
        scopes: Optional[Iterable[str]] = None,
        show_dialog: Optional[bool] = None,
    ) -> str:
        scope_list = list(scopes if scopes is not None else self.config.get("spotify_scopes", []))
        scope_str = " ".join([str(s).strip() for s in scope_list if str(s).strip()])
        if show_dialog is None:
            show_dialog = bool(self.config.get("spotify_show_dialog", False))

        params: Dict[str, str] = {
            "response_type": "code",
            "client_id": self.client_id,
            "scope": scope_str,
            "redirect_uri": self.redirect_uri,
            "show_dialog": "true" if show_dialog else "false",
        }
        return f"{SPOTIFY_AUTHORIZE_URL}?{urllib.parse.urlencode(params)}"

    def exchange_code_for_token(self, code: str) -> AccessCredential:
        payload = self._post_form(
            SPOTIFY_TOKEN_URL,
            {
                "code": code,
                "redirect_uri": self.redirect_uri,
                "grant_type": "authorization_code",
            },
        )
        credential = AccessCredential.from_spotify_token_response(payload)
        if not credential.access_token:
            raise TokenExchangeFailed("Spotify token response did not contain an access_token.", url=SPOTIFY_TOKEN_URL)

        logger.debug("Obtained access token (scope: %s)", credential.scope)
        return credential

    def _post_form(self, url: str, form: Dict[str, Any]) -> Dict[str, Any]:
        data = {k: str(v) for k, v in (form or {}).items() if v is not None}
        headers = {
            "Authorization": basic_auth_header(self.client_id, self.client_secret),
            "Content-Type": "application/x-www-form-urlencoded",
        }

        timeout = float(self.config.get("http_timeout_seconds", 30))
        try:
            if self.http_client is not None:
                resp = self.http_client.post(url, data=data, headers=headers)
            else:
                with httpx.Client(timeout=timeout, follow_redirects=False) as client:
                    resp = client.post(url, data=data, headers=headers)
        except httpx.HTTPError as e:
            raise TokenExchangeFailed(f"Spotify token request failed: {e}", url=url) from e

        if resp.status_code >= 400:
            raise TokenExchangeFailed(
                f"Spotify token request failed (HTTP {resp.status_code}): {resp.text}",
                url=url,
                status_code=resp.status_code,
            )

        try:
            payload = resp.json()
        except json.JSONDecodeError as e:
            raise TokenExchangeFailed(f"Spotify token response was not JSON: {resp.text}", url=url) from e

        if not isinstance(payload, dict):
            raise TokenExchangeFailed(f"Spotify token response was not an object: {payload}", url=url)

        return payload

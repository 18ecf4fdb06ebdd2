"""Spotify Web API integration (OAuth authorization code + paged reads).

- auth: authorize URL, token exchange, credential checks
- callback_server: loopback redirect listener + browser handshake
- client / data_loader: cursor-following fetches, Playlist and Track records
"""

from .auth import SpotifyAuth
from .callback_server import AuthorizationHandshake, CallbackServer, HandshakeState
from .client import SpotifyClient, fetch_all_pages
from .credentials import AccessCredential
from .data_loader import SpotifyDataLoader
from .models import Playlist, Track, ms_to_time

__all__ = [
    "SpotifyAuth",
    "AuthorizationHandshake",
    "CallbackServer",
    "HandshakeState",
    "SpotifyClient",
    "fetch_all_pages",
    "AccessCredential",
    "SpotifyDataLoader",
    "Playlist",
    "Track",
    "ms_to_time",
]

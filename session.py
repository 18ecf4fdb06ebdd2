import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from spotify_api.client import PageCallback, SpotifyClient
from spotify_api.credentials import AccessCredential
from spotify_api.data_loader import SpotifyDataLoader
from spotify_api.models import Playlist, Track

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """State for one interactive run, passed explicitly to each menu step.

    Filled once: the credential after the handshake, the playlists after the
    first fetch. Tracks are not kept; they are loaded per selection.
    """

    config: Dict[str, Any]
    credential: Optional[AccessCredential] = None
    playlists: List[Playlist] = field(default_factory=list)
    client: Optional[SpotifyClient] = None
    _playlists_loaded: bool = field(default=False, init=False, repr=False)

    @property
    def authenticated(self) -> bool:
        return self.credential is not None

    def authenticate(self, credential: AccessCredential, *, client: Optional[SpotifyClient] = None) -> None:
        if self.credential is not None:
            raise RuntimeError("Session is already authenticated.")
        self.credential = credential
        self.client = client or SpotifyClient(
            credential,
            timeout=float(self.config.get("http_timeout_seconds", 30)),
        )

    def _loader(self) -> SpotifyDataLoader:
        if self.client is None:
            raise RuntimeError("Session is not authenticated.")
        return SpotifyDataLoader(self.client)

    def load_playlists(self, *, on_page: Optional[PageCallback] = None) -> List[Playlist]:
        if not self._playlists_loaded:
            self.playlists = self._loader().list_all_playlists(on_page=on_page)
            self._playlists_loaded = True
            logger.debug("Loaded %d playlist(s)", len(self.playlists))
        return self.playlists

    def load_tracks(self, playlist: Playlist, *, on_page: Optional[PageCallback] = None) -> List[Track]:
        return self._loader().load_playlist_tracks(playlist, on_page=on_page)

    def close(self) -> None:
        if self.client is not None:
            self.client.close()

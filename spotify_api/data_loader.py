import logging
from typing import Any, Dict, List, Optional

from .client import PageCallback, SpotifyClient
from .models import Playlist, Track

logger = logging.getLogger(__name__)


class SpotifyDataLoader:
    """Turns raw Web API pages into Playlist and Track records.

    Track records carry exactly what the table and the CSV export show:
    title, duration, primary artist, album, release date and Spotify URL.
    """

    def __init__(self, client: SpotifyClient):
        self.client = client

    def list_all_playlists(self, *, on_page: Optional[PageCallback] = None) -> List[Playlist]:
        playlists: List[Playlist] = []
        for p in self.client.current_user_playlists(on_page=on_page):
            playlist = self._normalize_playlist(p)
            if playlist is not None:
                playlists.append(playlist)
        return playlists

    def load_playlist_tracks(self, playlist: Playlist, *, on_page: Optional[PageCallback] = None) -> List[Track]:
        tracks: List[Track] = []
        skipped = 0
        for item in self.client.playlist_tracks(playlist.tracks_href, on_page=on_page):
            track_obj = item.get("track") if isinstance(item, dict) else None
            track = self._normalize_track(track_obj)
            if track is None:
                skipped += 1
                continue
            tracks.append(track)

        if skipped:
            logger.debug("Skipped %d unavailable item(s) in playlist %r", skipped, playlist.name)
        return tracks

    @staticmethod
    def _normalize_playlist(obj: Any) -> Optional[Playlist]:
        if not isinstance(obj, dict):
            return None

        tracks = obj.get("tracks") or {}
        href = tracks.get("href") if isinstance(tracks, dict) else None
        if not href:
            return None

        owner = obj.get("owner")
        total = tracks.get("total")
        return Playlist(
            name=str(obj.get("name") or ""),
            tracks_href=str(href),
            tracks_total=int(total) if isinstance(total, int) else None,
            owner=owner.get("display_name") if isinstance(owner, dict) else None,
        )

    @staticmethod
    def _primary_artist(artists: Any) -> str:
        if not isinstance(artists, list):
            return ""
        for a in artists:
            if isinstance(a, dict) and a.get("name"):
                return str(a.get("name")).strip()
        return ""

    @classmethod
    def _normalize_track(cls, track_obj: Any) -> Optional[Track]:
        # Removed tracks come back as `"track": null`.
        if not isinstance(track_obj, dict):
            return None

        album = track_obj.get("album")
        if not isinstance(album, dict):
            album = {}
        external_urls = track_obj.get("external_urls")
        if not isinstance(external_urls, dict):
            external_urls = {}

        duration_ms = track_obj.get("duration_ms")
        return Track(
            title=str(track_obj.get("name") or ""),
            duration_ms=int(duration_ms) if isinstance(duration_ms, (int, float)) else 0,
            artist=cls._primary_artist(track_obj.get("artists")),
            album=str(album.get("name") or ""),
            release_date=str(album.get("release_date") or ""),
            external_url=str(external_urls.get("spotify") or ""),
        )

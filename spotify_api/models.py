from dataclasses import dataclass
from typing import Any, Dict, Optional


def ms_to_time(duration_ms: Optional[int]) -> str:
    """Format a millisecond duration as zero-padded HH:MM:SS (hours wrap at 24)."""

    try:
        duration = int(duration_ms or 0)
    except (TypeError, ValueError):
        duration = 0
    if duration < 0:
        duration = 0

    seconds = (duration // 1000) % 60
    minutes = (duration // (1000 * 60)) % 60
    hours = (duration // (1000 * 60 * 60)) % 24
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


@dataclass(frozen=True)
class Playlist:
    name: str
    tracks_href: str
    tracks_total: Optional[int] = None
    owner: Optional[str] = None

    @property
    def label(self) -> str:
        """Menu label: name, then owner and track count when Spotify reports them."""
        details = []
        if self.owner:
            details.append(f"by {self.owner}")
        if self.tracks_total is not None:
            details.append(f"{self.tracks_total} tracks")
        if not details:
            return self.name
        return f"{self.name} ({', '.join(details)})"


@dataclass(frozen=True)
class Track:
    title: str
    duration_ms: int
    artist: str
    album: str
    release_date: str
    external_url: str

    @property
    def duration(self) -> str:
        return ms_to_time(self.duration_ms)

    def to_row(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "duration": self.duration,
            "artist": self.artist,
            "album": self.album,
            "release_date": self.release_date,
            "external_url": self.external_url,
        }

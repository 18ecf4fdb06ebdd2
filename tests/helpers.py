"""Shared fakes for the test suite: questionary stand-in, module patching, fake API client."""

from __future__ import annotations

import sys
import types
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from spotify_api.errors import FetchFailed  # noqa: E402


# -------------------------
# Simple questionary mocks
# -------------------------

@dataclass
class _Askable:
    """Mimic questionary prompt objects that return a value from .ask()."""

    value: Any

    def ask(self):
        return self.value


class QuestionaryMock:
    """A minimal questionary stub that returns queued answers and captures args."""

    def __init__(self):
        # Preserve the real Choice constructor so production code can build choices.
        import questionary as _real_questionary

        self.Choice = _real_questionary.Choice

        self._queue: list[Any] = []
        self.select_calls: list[tuple[str, list[Any]]] = []
        self.confirm_messages: list[str] = []

    def queue(self, *answers: Any) -> None:
        self._queue.extend(list(answers))

    @property
    def remaining(self) -> int:
        return len(self._queue)

    def _pop(self) -> Any:
        if not self._queue:
            raise AssertionError("QuestionaryMock queue exhausted")
        return self._queue.pop(0)

    def select(self, message: str, choices: list[Any], **kwargs: Any):
        self.select_calls.append((message, list(choices)))
        return _Askable(self._pop())

    def confirm(self, message: str, default: bool = True, **kwargs: Any):
        self.confirm_messages.append(message)
        return _Askable(self._pop())


class PatchModuleAttr:
    """Context manager to temporarily patch module attributes."""

    def __init__(self, module: types.ModuleType, attr: str, value: Any):
        self.module = module
        self.attr = attr
        self.value = value
        self._old = None

    def __enter__(self):
        self._old = getattr(self.module, self.attr)
        setattr(self.module, self.attr, self.value)

    def __exit__(self, exc_type, exc, tb):
        setattr(self.module, self.attr, self._old)


def choice_title(choice: Any) -> str:
    for attr in ("title", "name"):
        if hasattr(choice, attr):
            return str(getattr(choice, attr))
    return str(choice)


# -------------------------
# Spotify payload builders
# -------------------------

def track_item(idx: int, *, duration_ms: int = 180000) -> Dict[str, Any]:
    return {
        "added_at": "2020-01-01T00:00:00Z",
        "track": {
            "id": f"t{idx}",
            "name": f"Song {idx}",
            "duration_ms": duration_ms,
            "artists": [{"name": f"Artist {idx}"}, {"name": "Featured"}],
            "album": {"name": f"Album {idx}", "release_date": "2020-01-01"},
            "external_urls": {"spotify": f"https://open.spotify.com/track/t{idx}"},
        },
    }


def playlist_item(idx: int, *, name: Optional[str] = None) -> Dict[str, Any]:
    return {
        "id": f"pl{idx}",
        "name": name or f"Playlist {idx}",
        "owner": {"display_name": "Me"},
        "tracks": {"href": f"https://api.spotify.com/v1/playlists/pl{idx}/tracks", "total": 2},
    }


class FakeSpotifyClient:
    """Stands in for SpotifyClient; records every call so tests can count requests."""

    def __init__(self, *, playlists: int = 2, tracks_per_playlist: int = 2, fail_first: Optional[str] = None):
        self.playlists = [playlist_item(i) for i in range(playlists)]
        self.tracks_per_playlist = tracks_per_playlist
        self.fail_first = fail_first
        self.calls: List[tuple] = []
        self.closed = False

    def _maybe_fail(self, what: str) -> None:
        if self.fail_first == what:
            self.fail_first = None
            raise FetchFailed("Spotify API error 503: unavailable", status_code=503)

    def current_user_playlists(self, *, on_page=None):
        self.calls.append(("playlists",))
        self._maybe_fail("playlists")
        if on_page is not None:
            on_page(1, len(self.playlists))
        return list(self.playlists)

    def playlist_tracks(self, tracks_href: str, *, on_page=None):
        self.calls.append(("tracks", tracks_href))
        self._maybe_fail("tracks")
        items = [track_item(i) for i in range(self.tracks_per_playlist)]
        if on_page is not None:
            on_page(1, len(items))
        return items

    def close(self) -> None:
        self.closed = True

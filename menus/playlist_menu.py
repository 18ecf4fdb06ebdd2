from typing import Callable, List, Optional, TypeVar

import questionary
from tqdm import tqdm

from config import resolve_export_dir
from constants import CHOICE_ANOTHER, CHOICE_DONE, CHOICE_EXPORT
from session import Session
from spotify_api.errors import FetchFailed, UserAbort
from spotify_api.models import Playlist, Track
from menus.prompts import ask
from utils.display import display_tracks
from utils.exporter import export_tracks_to_csv
from utils.logger import log_info, log_success, log_warning, log_error

T = TypeVar("T")


def _load_with_retry(what: str, load: Callable[[Callable[[int, int], None]], T]) -> T:
    """Run a paged load behind a progress bar; on failure offer a retry or quit."""
    while True:
        try:
            with tqdm(desc=f"Loading {what}", unit=" page", leave=False) as bar:
                def on_page(pages: int, items: int) -> None:
                    bar.update(1)
                    bar.set_postfix(items=items)

                return load(on_page)
        except FetchFailed as e:
            log_error(f"Could not load {what}: {e}")

        if not ask(questionary.confirm("Try again?", default=True)):
            raise UserAbort()


def select_playlist(playlists: List[Playlist]) -> Playlist:
    # Index values keep duplicate playlist names selectable.
    choices = [
        questionary.Choice(title=p.label, value=i)
        for i, p in enumerate(playlists)
    ]
    index = ask(questionary.select("Noice! Now select a playlist:", choices=choices))
    return playlists[index]


def export_playlist(session: Session, playlist: Playlist, tracks: List[Track]) -> Optional[str]:
    export_dir = resolve_export_dir(session.config)
    try:
        file_path = export_tracks_to_csv(playlist.name, tracks, export_dir)
    except OSError as e:
        log_error(f"Could not export playlist to {export_dir}: {e}")
        return None

    log_success(f"Boom! Your playlist was exported successfully, take a look at: {file_path}")
    return file_path


def ask_whats_next(session: Session, playlist: Playlist, tracks: List[Track]) -> None:
    """Offer export / another playlist / done. Returns when the user wants another playlist."""
    can_export = True

    while True:
        choices = [CHOICE_EXPORT] if can_export else []
        choices += [CHOICE_ANOTHER, CHOICE_DONE]

        answer = ask(questionary.select("What's next?", choices=choices))

        if answer == CHOICE_EXPORT:
            if export_playlist(session, playlist, tracks):
                can_export = False
            continue

        if answer == CHOICE_ANOTHER:
            log_info("")
            return

        raise UserAbort()


def playlist_menu(session: Session) -> None:
    """Browse playlists until the user is done (raises UserAbort to finish)."""
    playlists = _load_with_retry("playlists", lambda on_page: session.load_playlists(on_page=on_page))
    if not playlists:
        log_warning("No playlists found on this account. Nothing to show.")
        return

    while True:
        playlist = select_playlist(playlists)
        tracks = _load_with_retry(
            f"tracks of '{playlist.name}'",
            lambda on_page: session.load_tracks(playlist, on_page=on_page),
        )

        if tracks:
            display_tracks(playlist.name, tracks)
        else:
            log_warning(f"Playlist '{playlist.name}' has no tracks.")

        ask_whats_next(session, playlist, tracks)

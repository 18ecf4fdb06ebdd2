import webbrowser
from typing import Any, Callable, Dict

import questionary

from session import Session
from spotify_api.callback_server import CallbackServer
from spotify_api.errors import UserAbort
from menus.auth_menu import authorize_account
from menus.playlist_menu import playlist_menu
from menus.prompts import ask
from utils.logger import log_info


def main_menu(
    config: Dict[str, Any],
    *,
    server: CallbackServer,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> None:
    """Welcome -> Spotify login -> playlist browsing. Ends by raising UserAbort."""
    log_info("\n" + "=" * 72)
    log_info("PLAYLIST EXTRACTOR")
    log_info("=" * 72)
    log_info(
        "\nWelcome! To get started you'll need to grant Spotify permissions "
        "so I can access your playlists.\n"
    )

    if not ask(questionary.confirm("Let's do it?!", default=True)):
        raise UserAbort()

    session = Session(config)
    try:
        authorize_account(session, server, open_browser=open_browser)
        playlist_menu(session)
    finally:
        session.close()

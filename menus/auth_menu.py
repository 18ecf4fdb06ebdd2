import webbrowser
from typing import Callable

import questionary

from session import Session
from spotify_api.auth import SpotifyAuth
from spotify_api.callback_server import AuthorizationHandshake, CallbackServer
from spotify_api.credentials import AccessCredential
from spotify_api.errors import (
    AuthorizationDenied,
    AuthorizationTimeout,
    TokenExchangeFailed,
    UserAbort,
)
from menus.prompts import ask
from utils.logger import log_info, log_success, log_warning, log_error


def authorize_account(
    session: Session,
    server: CallbackServer,
    *,
    open_browser: Callable[[str], bool] = webbrowser.open,
) -> AccessCredential:
    """Run the browser handshake until it yields a token or the user gives up.

    Every retry opens the browser again; the callback server stays up throughout.
    """

    config = session.config
    auth = SpotifyAuth(config)
    handshake = AuthorizationHandshake(
        auth,
        server,
        open_browser=open_browser,
        timeout=float(config.get("auth_timeout_seconds", 300)),
    )

    while True:
        log_info("\n⏳ Waiting for some action to happen in your browser..")
        try:
            credential = handshake.run()
        except AuthorizationDenied:
            log_warning("Sorry, without the permissions there is not a lot I can do..")
        except AuthorizationTimeout as e:
            log_warning(f"{e} Did the browser tab open?")
            if handshake.authorize_url:
                log_info(f"Authorize URL:\n{handshake.authorize_url}")
        except TokenExchangeFailed as e:
            log_error(f"Spotify accepted the login but the token exchange failed: {e}")
        else:
            session.authenticate(credential)
            log_success("Connected to Spotify.")
            return credential

        if not ask(questionary.confirm("Try again?", default=True)):
            raise UserAbort()

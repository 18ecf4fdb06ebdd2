import logging
import sys
import webbrowser

from config import load_config
from menus.main_menu import main_menu
from spotify_api.auth import check_spotify_credentials, spotify_app_setup_instructions
from spotify_api.callback_server import CallbackServer
from spotify_api.errors import ConfigError, SpotifyError, UserAbort
from utils.logger import LOG_FILE, setup_logging, log_info, log_error

logger = logging.getLogger(__name__)


def _no_browser(url: str) -> bool:
    return False


def run() -> int:
    setup_logging()

    try:
        config = load_config()
    except ConfigError as e:
        log_error(str(e))
        return 1

    creds = check_spotify_credentials(config)
    if not creds["ok"]:
        log_error(creds["message"])
        log_info("")
        log_info(spotify_app_setup_instructions(redirect_uri=creds["redirect_uri"]))
        return 1

    try:
        server = CallbackServer(config["spotify_redirect_uri"]).start()
    except ValueError as e:
        log_error(str(e))
        return 1
    except OSError as e:
        log_error(f"Could not listen on {config['spotify_redirect_uri']}: {e}. Is the port already in use?")
        return 1

    open_browser = webbrowser.open if config.get("open_browser", True) else _no_browser

    try:
        main_menu(config, server=server, open_browser=open_browser)
    except (UserAbort, KeyboardInterrupt):
        log_info("\n  Ok, byeee! 🍻\n")
    except SpotifyError as e:
        log_error(str(e))
        return 1
    except Exception as e:
        logger.debug("Unhandled exception", exc_info=True)
        log_error(f"Unexpected error: {e}. Check '{LOG_FILE}' for details.")
        return 1
    finally:
        server.close()

    return 0


if __name__ == "__main__":
    sys.exit(run())

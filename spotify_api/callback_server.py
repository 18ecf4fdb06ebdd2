"""Local OAuth callback listener and the browser handshake built on it.

The listener is started once and stays bound for the whole run. Each handshake
attempt arms a fresh CallbackSignal; the first callback that reaches the
listener resolves it, later ones only get the static page back.
"""

import ipaddress
import logging
import os
import threading
import webbrowser
from enum import Enum
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from typing import Callable, Dict, Optional
from urllib.parse import urlparse

from constants import BACK_TO_CLI_PAGE
from .auth import SpotifyAuth, extract_callback_params
from .credentials import AccessCredential
from .errors import AuthorizationDenied, AuthorizationTimeout

logger = logging.getLogger(__name__)

VIEWS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "views")

DEFAULT_AUTH_TIMEOUT = 300.0


class HandshakeState(str, Enum):
    AWAITING_REDIRECT = "awaiting_redirect"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class CallbackSignal:
    """Single-slot completion signal, resolved at most once."""

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self._params: Optional[Dict[str, str]] = None

    def resolve(self, params: Dict[str, str]) -> bool:
        """Store params and wake the waiter. Returns False if already resolved."""
        with self._lock:
            if self._event.is_set():
                return False
            self._params = dict(params or {})
            self._event.set()
            return True

    def wait(self, timeout: Optional[float] = None) -> Optional[Dict[str, str]]:
        if not self._event.wait(timeout):
            return None
        return self._params


def _loopback_bind_host(host: Optional[str]) -> str:
    host = (host or "").strip()
    if host == "localhost":
        return "127.0.0.1"
    try:
        addr = ipaddress.IPv4Address(host)
    except ValueError:
        raise ValueError(f"Redirect URI host must be 127.0.0.1 or localhost, got {host!r}") from None
    if not addr.is_loopback:
        raise ValueError(f"Redirect URI host must be a loopback address, got {host!r}")
    return host


class _CallbackRequestHandler(SimpleHTTPRequestHandler):
    server: "_CallbackHTTPServer"

    def do_GET(self):
        if urlparse(self.path).path != self.server.callback_path:
            super().do_GET()
            return

        body = self.server.back_to_cli_page()
        self.send_response(200)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)
        self.wfile.flush()

        # Page is written before the waiting handshake is woken up.
        self.server.deliver(extract_callback_params(self.path))

    def log_message(self, format, *args):
        logger.debug("callback server: %s - %s", self.address_string(), format % args)


class _CallbackHTTPServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, server_address, handler, *, callback_path: str, views_dir: str):
        self.callback_path = callback_path
        self.views_dir = views_dir
        self._signal_lock = threading.Lock()
        self._signal: Optional[CallbackSignal] = None
        super().__init__(server_address, handler)

    def back_to_cli_page(self) -> bytes:
        path = os.path.join(self.views_dir, BACK_TO_CLI_PAGE)
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError:
            logger.warning("Callback page %s is missing; serving a plain message.", path)
            return b"<html><body><h1>You can go back to the terminal now.</h1></body></html>"

    def arm(self) -> CallbackSignal:
        with self._signal_lock:
            self._signal = CallbackSignal()
            return self._signal

    def disarm(self, signal: CallbackSignal) -> None:
        with self._signal_lock:
            if self._signal is signal:
                self._signal = None

    def deliver(self, params: Dict[str, str]) -> bool:
        with self._signal_lock:
            signal = self._signal
        if signal is None:
            logger.debug("Callback received with no handshake in progress; ignoring.")
            return False
        if not signal.resolve(params):
            logger.debug("Duplicate callback ignored.")
            return False
        logger.debug("Callback received (code present: %s)", "code" in params)
        return True


class CallbackServer:
    """Loopback HTTP listener for the OAuth redirect.

    The host, port and callback path come from the redirect URI; `port` overrides
    the URI's port (0 picks a free one, which tests rely on).
    """

    def __init__(self, redirect_uri: str, *, port: Optional[int] = None, views_dir: str = VIEWS_DIR):
        parsed = urlparse(redirect_uri)
        self.host = _loopback_bind_host(parsed.hostname)
        self.port = int(parsed.port or 80) if port is None else int(port)
        self.callback_path = parsed.path or "/"
        self.views_dir = views_dir
        self._httpd: Optional[_CallbackHTTPServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def base_url(self) -> str:
        if self._httpd is None:
            raise RuntimeError("Callback server is not running.")
        host, port = self._httpd.server_address[:2]
        return f"http://{host}:{port}"

    @property
    def callback_url(self) -> str:
        return f"{self.base_url}{self.callback_path}"

    def start(self) -> "CallbackServer":
        if self._httpd is not None:
            return self

        handler = partial(_CallbackRequestHandler, directory=self.views_dir)
        self._httpd = _CallbackHTTPServer(
            (self.host, self.port),
            handler,
            callback_path=self.callback_path,
            views_dir=self.views_dir,
        )
        self._thread = threading.Thread(
            target=self._httpd.serve_forever,
            name="oauth-callback-server",
            daemon=True,
        )
        self._thread.start()
        logger.info("Listening for the Spotify redirect on %s", self.callback_url)
        return self

    def arm(self) -> CallbackSignal:
        if self._httpd is None:
            raise RuntimeError("Callback server is not running.")
        return self._httpd.arm()

    def disarm(self, signal: CallbackSignal) -> None:
        if self._httpd is not None:
            self._httpd.disarm(signal)

    def close(self) -> None:
        if self._httpd is None:
            return
        self._httpd.shutdown()
        self._httpd.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._httpd = None
        self._thread = None
        logger.debug("Callback server stopped.")


class AuthorizationHandshake:
    """One browser round-trip: AWAITING_REDIRECT -> SUCCEEDED | FAILED."""

    def __init__(
        self,
        auth: SpotifyAuth,
        server: CallbackServer,
        *,
        open_browser: Callable[[str], bool] = webbrowser.open,
        timeout: float = DEFAULT_AUTH_TIMEOUT,
    ):
        self.auth = auth
        self.server = server
        self.open_browser = open_browser
        self.timeout = timeout
        self.state: Optional[HandshakeState] = None
        self.authorize_url: Optional[str] = None

    def run(self, *, timeout: Optional[float] = None) -> AccessCredential:
        """Open the browser, wait for the redirect and exchange the code.

        Raises AuthorizationDenied, AuthorizationTimeout or TokenExchangeFailed.
        `state` reflects only the redirect outcome: it is SUCCEEDED as soon as a
        code arrives, even if the token exchange that follows fails.
        """

        timeout = self.timeout if timeout is None else timeout
        signal = self.server.arm()
        self.state = HandshakeState.AWAITING_REDIRECT

        try:
            self.authorize_url = self.auth.get_authorize_url()
            self._open(self.authorize_url)
            params = signal.wait(timeout)
        finally:
            self.server.disarm(signal)

        if params is None:
            self.state = HandshakeState.FAILED
            raise AuthorizationTimeout(timeout)

        code = params.get("code")
        if not code:
            self.state = HandshakeState.FAILED
            raise AuthorizationDenied(params.get("error"))

        self.state = HandshakeState.SUCCEEDED
        return self.auth.exchange_code_for_token(code)

    def _open(self, url: str) -> None:
        try:
            opened = self.open_browser(url)
        except Exception as e:
            logger.warning("Could not open a browser (%s).", e)
            opened = False
        if opened is False:
            logger.warning("Open this URL in your browser to continue:\n%s", url)

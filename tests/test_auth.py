import base64
import unittest
import urllib.parse

import httpx

from tests.helpers import PROJECT_ROOT  # noqa: F401

from spotify_api.auth import SpotifyAuth, check_spotify_credentials, extract_callback_params
from spotify_api.errors import ConfigError, TokenExchangeFailed

CONFIG = {
    "spotify_client_id": "example-client-id",
    "spotify_client_secret": "example-secret",
    "spotify_redirect_uri": "http://127.0.0.1:8888/callback",
    "spotify_scopes": ["user-read-private", "playlist-read-private", "playlist-read-collaborative"],
}


def _auth_with(handler, requests):
    def recording(request):
        requests.append(request)
        return handler(request)

    return SpotifyAuth(CONFIG, http_client=httpx.Client(transport=httpx.MockTransport(recording)))


class TestAuthorizeUrl(unittest.TestCase):
    def test_authorize_url_carries_required_params(self):
        url = SpotifyAuth(CONFIG).get_authorize_url()
        parsed = urllib.parse.urlparse(url)
        params = dict(urllib.parse.parse_qsl(parsed.query))

        self.assertEqual(f"{parsed.scheme}://{parsed.netloc}{parsed.path}", "https://accounts.spotify.com/authorize")
        self.assertEqual(params["response_type"], "code")
        self.assertEqual(params["client_id"], "example-client-id")
        self.assertEqual(params["scope"], "user-read-private playlist-read-private playlist-read-collaborative")
        self.assertEqual(params["redirect_uri"], "http://127.0.0.1:8888/callback")
        self.assertEqual(params["show_dialog"], "false")

    def test_missing_secret_fails_fast(self):
        with self.assertRaises(ConfigError):
            SpotifyAuth({**CONFIG, "spotify_client_secret": ""})

    def test_check_spotify_credentials_lists_missing_values(self):
        status = check_spotify_credentials({"spotify_redirect_uri": "http://127.0.0.1:8888/callback"})
        self.assertFalse(status["ok"])
        self.assertEqual(status["missing"], ["CLIENT_ID", "CLIENT_SECRET"])
        self.assertTrue(check_spotify_credentials(CONFIG)["ok"])


class TestTokenExchange(unittest.TestCase):
    def test_exchange_posts_basic_auth_and_form(self):
        requests = []
        auth = _auth_with(
            lambda r: httpx.Response(200, json={"access_token": "AT", "token_type": "Bearer", "expires_in": 3600}),
            requests,
        )

        credential = auth.exchange_code_for_token("the-code")

        self.assertEqual(credential.access_token, "AT")
        self.assertEqual(len(requests), 1)
        request = requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(str(request.url), "https://accounts.spotify.com/api/token")
        expected = base64.b64encode(b"example-client-id:example-secret").decode("ascii")
        self.assertEqual(request.headers["Authorization"], f"Basic {expected}")
        self.assertEqual(request.headers["Content-Type"], "application/x-www-form-urlencoded")
        form = dict(urllib.parse.parse_qsl(request.content.decode("utf-8")))
        self.assertEqual(
            form,
            {"code": "the-code", "redirect_uri": "http://127.0.0.1:8888/callback", "grant_type": "authorization_code"},
        )

    def test_http_error_raises_token_exchange_failed(self):
        auth = _auth_with(lambda r: httpx.Response(400, json={"error": "invalid_grant"}), [])

        with self.assertRaises(TokenExchangeFailed) as ctx:
            auth.exchange_code_for_token("bad")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_response_without_access_token_is_a_failure(self):
        auth = _auth_with(lambda r: httpx.Response(200, json={"token_type": "Bearer"}), [])

        with self.assertRaises(TokenExchangeFailed):
            auth.exchange_code_for_token("code")

    def test_unreadable_expires_in_is_dropped(self):
        auth = _auth_with(lambda r: httpx.Response(200, json={"access_token": "AT", "expires_in": "soon"}), [])

        credential = auth.exchange_code_for_token("code")

        self.assertEqual(credential.access_token, "AT")
        self.assertIsNone(credential.expires_in)


class TestCallbackParams(unittest.TestCase):
    def test_extract_code_and_state(self):
        self.assertEqual(
            extract_callback_params("/callback?code=AAA&state=BBB"),
            {"code": "AAA", "state": "BBB"},
        )

    def test_denied_callback_has_error_and_no_code(self):
        self.assertEqual(extract_callback_params("/callback?error=access_denied"), {"error": "access_denied"})

    def test_empty_code_is_dropped(self):
        self.assertEqual(extract_callback_params("/callback?code="), {})


if __name__ == "__main__":
    unittest.main(verbosity=2)

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar

import httpx

from constants import CURRENT_USER_PLAYLISTS_URL
from .credentials import AccessCredential
from .errors import FetchFailed

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageExtractor = Callable[[Dict[str, Any]], Tuple[Sequence[T], Optional[str]]]
PageCallback = Callable[[int, int], None]

DEFAULT_TIMEOUT = 30.0


def extract_items(body: Dict[str, Any]) -> Tuple[List[Any], Optional[str]]:
    """Default page extractor for {items: [...], next: url|null} responses."""

    items = body.get("items") or []
    if not isinstance(items, list):
        items = []
    return items, body.get("next") or None


def get_json(url: str, credential: AccessCredential, *, http_client: httpx.Client) -> Dict[str, Any]:
    """GET one resource URL with the bearer credential and return its JSON object."""

    try:
        resp = http_client.get(
            url,
            headers={
                "Authorization": credential.authorization_header,
                "Accept": "application/json",
            },
        )
    except httpx.HTTPError as e:
        raise FetchFailed(f"Spotify API request failed: {e}", url=url) from e

    if resp.status_code >= 400:
        raise FetchFailed(
            f"Spotify API error {resp.status_code}: {resp.text}",
            url=url,
            status_code=resp.status_code,
        )

    try:
        payload = resp.json()
    except ValueError as e:
        raise FetchFailed(
            f"Spotify API response was not JSON (status {resp.status_code}): {resp.text}",
            url=url,
            status_code=resp.status_code,
        ) from e

    if not isinstance(payload, dict):
        raise FetchFailed(f"Spotify API response was not an object: {payload}", url=url, status_code=resp.status_code)

    return payload


def fetch_all_pages(
    start_url: str,
    credential: AccessCredential,
    extract_page: PageExtractor = extract_items,
    *,
    http_client: Optional[httpx.Client] = None,
    on_page: Optional[PageCallback] = None,
) -> List[T]:
    """Follow the `next` cursor from start_url until it runs out and return every item.

    Items keep the service's order: pages in fetch order, then items within a page.
    Any failed request raises FetchFailed and nothing is returned.
    """

    owns_client = http_client is None
    client = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)

    out: List[T] = []
    seen = set()
    url: Optional[str] = start_url
    pages = 0

    try:
        while url:
            seen.add(url)
            body = get_json(url, credential, http_client=client)
            items, next_url = extract_page(body)
            out.extend(items)
            pages += 1

            if on_page is not None:
                on_page(pages, len(out))

            if next_url and next_url in seen:
                logger.warning("Pagination cursor repeated %s; stopping after %d page(s).", next_url, pages)
                break
            url = next_url
    finally:
        if owns_client:
            client.close()

    logger.debug("Fetched %d item(s) in %d page(s) from %s", len(out), pages, start_url)
    return out


class SpotifyClient:
    """Thin Spotify Web API client bound to one access credential.

    No retries and no rate limiting: any failure surfaces as FetchFailed.
    """

    def __init__(
        self,
        credential: AccessCredential,
        *,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.credential = credential
        self._owns_client = http_client is None
        self.http = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self.http.close()

    def __enter__(self) -> "SpotifyClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # -----------------
    # HTTP helpers
    # -----------------

    def get_json(self, url: str) -> Dict[str, Any]:
        return get_json(url, self.credential, http_client=self.http)

    def fetch_all_pages(
        self,
        url: str,
        extract_page: PageExtractor = extract_items,
        *,
        on_page: Optional[PageCallback] = None,
    ) -> List[Any]:
        return fetch_all_pages(url, self.credential, extract_page, http_client=self.http, on_page=on_page)

    # -----------------
    # Endpoints (fully paged)
    # -----------------

    def current_user_playlists(self, *, on_page: Optional[PageCallback] = None) -> List[Dict[str, Any]]:
        return self.fetch_all_pages(CURRENT_USER_PLAYLISTS_URL, on_page=on_page)

    def playlist_tracks(self, tracks_href: str, *, on_page: Optional[PageCallback] = None) -> List[Dict[str, Any]]:
        # Endpoint shape: {items: [{added_at, track: {...}}], next, ...}
        return self.fetch_all_pages(tracks_href, on_page=on_page)

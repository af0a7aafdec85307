"""HTTP client for the song API.

Song records are JSON objects; the ``content`` field holds the ChordPro
text that :class:`~songbook.parser.ChordProParser` reads.

Endpoints::

    GET {api_url}/songs/{id}                      → song record
    GET {api_url}/songs/{id}/transpose/{n}        → song record, chords shifted
"""

import logging

import httpx

from .config import Settings
from .exceptions import FetchError

logger = logging.getLogger(__name__)

_HEADERS = {
    "Accept": "application/json",
    "User-Agent": "songbook",
}


class SongApiClient:
    """Thin wrapper over :mod:`httpx` for fetching song records."""

    def __init__(self, settings: Settings | None = None, transport: httpx.BaseTransport | None = None):
        self.settings = settings or Settings()
        self._http = httpx.Client(
            headers=_HEADERS,
            timeout=self.settings.timeout,
            follow_redirects=True,
            transport=transport,
        )

    def __enter__(self) -> "SongApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    def get_song(self, song_id: str) -> dict:
        """Return the song record for *song_id*."""
        return self._get_json(f"{self.settings.api_url}/songs/{song_id}")

    def get_transposed_song(self, song_id: str, semitones: int) -> dict:
        """Return the song record for *song_id* transposed server-side."""
        return self._get_json(f"{self.settings.api_url}/songs/{song_id}/transpose/{semitones}")

    def _get_json(self, url: str) -> dict:
        logger.debug("GET %s", url)
        try:
            resp = self._http.get(url)
        except httpx.RequestError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise FetchError(url, 0) from exc
        if resp.status_code != 200:
            logger.warning("GET %s returned HTTP %d", url, resp.status_code)
            raise FetchError(url, resp.status_code)
        try:
            data = resp.json()
        except ValueError as exc:  # json.JSONDecodeError, UnicodeDecodeError
            logger.warning("GET %s returned a body that is not JSON", url)
            raise FetchError(url, resp.status_code) from exc
        if not isinstance(data, dict):
            logger.warning("GET %s returned JSON that is not an object", url)
            raise FetchError(url, resp.status_code)
        return data

"""One-shot HTTP GET transport for the Battlefields endpoints.

Every request carries a browser User-Agent because the upstream refuses
requests made with library default agents. There is no retry
loop here: failures are handled (and optionally cached) by the caller.
"""
from __future__ import annotations

import threading
from typing import Any, Dict, Optional

import httpx

from battlefields.connectors.errors import DeserializationError, HttpStatusError

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 6.1; WOW64) AppleWebKit/537.11 "
    "(KHTML, like Gecko) Chrome/23.0.1271.95 Safari/537.11"
)


class HttpTransport:
    """Thin synchronous wrapper around ``httpx.Client``.

    The client is created lazily, once, and is safe to share between worker
    threads.
    """

    def __init__(self, client: Optional[httpx.Client] = None):
        self._client = client
        self._lock = threading.Lock()

    def _client_instance(self) -> httpx.Client:
        with self._lock:
            if self._client is None:
                self._client = httpx.Client()
            return self._client

    def _headers(self) -> Dict[str, str]:
        return {"User-Agent": USER_AGENT}

    def _get(self, url: str) -> httpx.Response:
        resp = self._client_instance().get(url, headers=self._headers())
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise HttpStatusError(url, exc.response.status_code, exc.response.reason_phrase) from exc
        return resp

    def fetch_bytes(self, url: str) -> bytes:
        """GET ``url`` and return the raw body.

        Raises:
            HttpStatusError: the response status is not 2xx.
            httpx.HTTPError: the request itself failed.
        """
        return self._get(url).content

    def fetch_json(self, url: str) -> Any:
        resp = self._get(url)
        try:
            return resp.json()
        except ValueError as exc:
            raise DeserializationError(f"Invalid JSON from '{url}': {exc}") from exc

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                self._client = None

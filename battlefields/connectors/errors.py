"""Exceptions raised while talking to the Battlefields API.

None of these escape the public connector methods: they are raised inside a
fetch, reported to the failure sink and replaced by the endpoint's default.
"""
from __future__ import annotations

from typing import Optional


class BattlefieldsError(Exception):
    """Base class for every connector failure."""


class MalformedQueryError(BattlefieldsError):
    def __init__(self, query: str):
        super().__init__(f"Invalid query: {query!r}")
        self.query = query


class HttpStatusError(BattlefieldsError):
    """The upstream answered with a non-2xx status code."""

    def __init__(self, url: str, status_code: int, reason: Optional[str] = None):
        super().__init__(f"Failed to connect to '{url}'. {status_code} {reason or ''}".rstrip())
        self.url = url
        self.status_code = status_code
        self.reason = reason


class UpstreamRejectedError(BattlefieldsError):
    """The response envelope carried ``status: false``."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to connect to Battlefields API: {detail}")
        self.detail = detail


class MalformedResponseError(BattlefieldsError):
    """The payload does not have the structure the endpoint promises."""


class DeserializationError(BattlefieldsError):
    """The payload could not be turned into the endpoint's record type."""

"""Helpers for the ``{"status": bool, "detail": ...}`` response envelope."""
from __future__ import annotations

from typing import Any, List

from battlefields.connectors.errors import MalformedResponseError, UpstreamRejectedError
from battlefields.connectors.records import ServerStatus


def unwrap_detail(document: Any) -> List[Any]:
    """Return the ``detail`` array of a successful envelope.

    Raises:
        UpstreamRejectedError: ``status`` is false; ``detail`` is the reason.
        MalformedResponseError: the document is not an envelope, or a
            successful envelope does not carry an array.
    """
    if not isinstance(document, dict) or "status" not in document or "detail" not in document:
        raise MalformedResponseError(f"Expected a status/detail envelope: {document!r}")
    if not document["status"]:
        raise UpstreamRejectedError(str(document["detail"]))
    detail = document["detail"]
    if not isinstance(detail, list):
        raise MalformedResponseError(f"Expected detail to be an array: {detail!r}")
    return detail


def flatten_server_status(detail: List[Any]) -> List[ServerStatus]:
    """``[{"host1": "green"}, ...]`` -> ``[ServerStatus("host1", "green"), ...]``."""
    servers: List[ServerStatus] = []
    for item in detail:
        if not isinstance(item, dict) or len(item) != 1:
            raise MalformedResponseError(f"Expected a single entry: {item!r}")
        ((hostname, status),) = item.items()
        if isinstance(status, (dict, list)) or status is None:
            raise MalformedResponseError(f"Expected a status string for {hostname}: {status!r}")
        servers.append(ServerStatus(hostname, str(status)))
    return servers

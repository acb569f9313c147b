"""Query-string and cache-key helpers for the table endpoint.

The table endpoint is addressed as ``<base>?type=<table>&key=value...``.
Filters are passed around as ``"key=value"`` strings, in caller order, and the
encoded suffix doubles as part of the cache key.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Union
from urllib.parse import quote_plus

from battlefields.connectors.errors import MalformedQueryError


class BattlefieldsTable(str, Enum):
    KILLS = "kills"
    WINS = "wins"
    PLAYERS = "players"
    MATCHES = "matches"
    MATCH_PARTICIPANTS = "match_participants"
    MATCH_KILLS = "match_kills"
    ACCESSORIES = "accessories"
    ACCESSORY_TYPES = "accessory_types"
    OWNED_ACCESSORIES = "owned_accessories"
    EMOTES = "emotes"
    OWNED_EMOTES = "owned_emotes"
    LINKED_DISCORD = "linked_discord"
    WEAPONS = "weapons"
    WEAPON_STATS = "weapon_stats"


def encode_queries(queries: Iterable[str]) -> str:
    """Turn ``["a=1", "b=2"]`` into ``"&a=1&b=2"``.

    Keys and values are form-encoded separately; only the first ``=`` splits.

    Raises:
        MalformedQueryError: an entry has no ``=``.
    """
    parts = []
    for query in queries:
        key, sep, value = query.partition("=")
        if not sep:
            raise MalformedQueryError(query)
        parts.append(f"&{quote_plus(key)}={quote_plus(value)}")
    return "".join(parts)


def table_name(table: Union[BattlefieldsTable, str]) -> str:
    return table.value if isinstance(table, BattlefieldsTable) else str(table)


def request_url(base_url: str, table: Union[BattlefieldsTable, str], query: str) -> str:
    return f"{base_url}?type={table_name(table)}{query}"


def field_key(name: str, query: str) -> str:
    return f"{name}-{query}"

"""Record shapes returned by the Battlefields API and their deserializers.

Table rows are returned as plain dicts holding every column the API sends.
Only ``KillRecord`` declares required keys, which are checked on the way in.
The columns listed on the other TypedDicts are illustrative: they name the
usual fields for editor hints and are neither required nor exhaustive.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Tuple, TypedDict

from battlefields.connectors.errors import DeserializationError


class KillRecord(TypedDict):
    """Kill count for one player."""

    uuid: str
    kills: int


class WinRecord(TypedDict, total=False):
    """Win count for one player. Columns are illustrative."""

    uuid: str
    wins: int


class PlayerRecord(TypedDict, total=False):
    """A known player. Columns are illustrative."""

    uuid: str
    username: str


class MatchRecord(TypedDict, total=False):
    """One played match. Columns are illustrative."""

    match_id: str
    map: str


class MatchParticipantRecord(TypedDict, total=False):
    """A player taking part in a match. Columns are illustrative."""

    match_id: str
    uuid: str


class KillInfoRecord(TypedDict, total=False):
    """A single kill inside a match. Columns are illustrative."""

    match_id: str
    killer: str
    victim: str


class AccessoryRecord(TypedDict, total=False):
    """A cosmetic accessory. Columns are illustrative."""

    id: str
    name: str


class AccessoryTypeRecord(TypedDict, total=False):
    """A category of accessories. Columns are illustrative."""

    id: str
    name: str


class OwnedAccessoryRecord(TypedDict, total=False):
    """An accessory unlocked by a player. Columns are illustrative."""

    uuid: str
    accessory_id: str


class EmoteRecord(TypedDict, total=False):
    """An emote. Columns are illustrative."""

    id: str
    name: str


class OwnedEmoteRecord(TypedDict, total=False):
    """An emote unlocked by a player. Columns are illustrative."""

    uuid: str
    emote_id: str


class LinkedDiscordRecord(TypedDict, total=False):
    """A player linked to a Discord account. Columns are illustrative."""

    uuid: str
    discord_id: str


class WeaponRecord(TypedDict, total=False):
    """A weapon. Columns are illustrative."""

    id: str
    name: str


class WeaponStatsRecord(TypedDict, total=False):
    """Per-player statistics for one weapon. Columns are illustrative."""

    uuid: str
    weapon: str


class ServerStatus(NamedTuple):
    hostname: str
    status: str


@dataclass(frozen=True)
class ServerInfo:
    """Live state of a game server, as reported by the server query service."""

    ip: str
    port: Optional[int]
    online: bool
    hostname: Optional[str] = None
    version: Optional[str] = None
    players_online: int = 0
    players_max: int = 0
    motd: Tuple[str, ...] = ()

    @classmethod
    def from_json(cls, data: Any) -> "ServerInfo":
        if not isinstance(data, dict):
            raise DeserializationError(f"Expected a server info object: {data!r}")
        players = data.get("players") or {}
        motd = data.get("motd") or {}
        if not isinstance(players, dict) or not isinstance(motd, dict):
            raise DeserializationError(f"Unexpected server info layout: {data!r}")
        lines = motd.get("clean") or ()
        if isinstance(lines, str):
            lines = (lines,)
        try:
            port = data.get("port")
            return cls(
                ip=str(data.get("ip") or ""),
                port=int(port) if port is not None else None,
                online=bool(data.get("online", False)),
                hostname=data.get("hostname"),
                version=data.get("version"),
                players_online=int(players.get("online") or 0),
                players_max=int(players.get("max") or 0),
                motd=tuple(str(line) for line in lines),
            )
        except (TypeError, ValueError) as exc:
            raise DeserializationError(f"Unexpected server info values: {exc}") from exc


def records(kind: type) -> Callable[[List[Any]], List[Dict[str, Any]]]:
    """Build a deserializer turning a ``detail`` array into ``kind`` rows."""
    required = getattr(kind, "__required_keys__", frozenset())

    def deserialize(detail: List[Any]) -> List[Dict[str, Any]]:
        rows = []
        for item in detail:
            if not isinstance(item, dict):
                raise DeserializationError(f"Expected {kind.__name__} object, got {item!r}")
            missing = required - item.keys()
            if missing:
                raise DeserializationError(f"{kind.__name__} is missing {sorted(missing)}: {item!r}")
            rows.append(item)
        return rows

    return deserialize


def string_list(data: Any) -> List[str]:
    if not isinstance(data, list) or not all(isinstance(s, str) for s in data):
        raise DeserializationError(f"Expected an array of strings: {data!r}")
    return data

"""Battlefields API connector.

Wraps the Battlefields statistics API (kills, wins, players, matches,
cosmetics, server status, ...) behind a TTL cache. Every public method fails
soft: network, status and payload errors are reported to ``on_error`` and the
caller gets an empty list (or ``None`` for single-object lookups).

The connector does not start threads of its own. Callers that want requests
off their thread submit them to ``connector.executor`` (or ``submit``), and
``shutdown()`` drains that pool.

Example usage:
    with create_connector() as api:
        future = api.submit(api.get_kills, "uuid=069a79f4-44e9-4726-a5be-fca90e38aaf5")
        kills = future.result()
"""
from __future__ import annotations

import json
import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from battlefields.config import Settings, load_settings
from battlefields.connectors.cache import CacheConfig, ErrorSink, RetrievalCache
from battlefields.connectors.envelope import flatten_server_status, unwrap_detail
from battlefields.connectors.errors import DeserializationError, MalformedQueryError
from battlefields.connectors.query import (
    BattlefieldsTable,
    encode_queries,
    field_key,
    request_url,
    table_name,
)
from battlefields.connectors.records import (
    AccessoryRecord,
    AccessoryTypeRecord,
    EmoteRecord,
    KillInfoRecord,
    KillRecord,
    LinkedDiscordRecord,
    MatchParticipantRecord,
    MatchRecord,
    OwnedAccessoryRecord,
    OwnedEmoteRecord,
    PlayerRecord,
    ServerInfo,
    ServerStatus,
    WeaponRecord,
    WeaponStatsRecord,
    WinRecord,
    records,
    string_list,
)
from battlefields.connectors.transport import HttpTransport
from battlefields.logger import log_failure, setup_logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


class BattlefieldsConnector:
    """Cached, fail-soft client for the Battlefields API.

    Args:
        executor: worker pool used for off-thread requests and drained by
            ``shutdown()``.
        on_error: called with every swallowed exception. Defaults to logging
            a warning.
        shutdown_timeout: seconds ``shutdown()`` waits for in-flight work.
        cache_time: seconds a result stays cached; ``<= 0`` disables caching.
        cache_errors: keep failed fields in a cooldown for ``cache_time``.
        transport: HTTP transport, mainly for tests.
        clock: time source for the cache, mainly for tests.
    """

    def __init__(
        self,
        executor: Executor,
        on_error: Optional[ErrorSink] = None,
        shutdown_timeout: float = 10.0,
        cache_time: float = 60.0,
        cache_errors: bool = True,
        api_url: str = Settings.API_URL,
        server_list_url: str = Settings.SERVER_LIST_URL,
        server_status_url: str = Settings.SERVER_STATUS_URL,
        server_info_url: str = Settings.SERVER_INFO_URL,
        cosmetic_url: str = Settings.COSMETIC_URL,
        transport: Optional[HttpTransport] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._executor = executor
        self._on_error = on_error or log_failure
        self.shutdown_timeout = shutdown_timeout
        self.api_url = api_url
        self.server_list_url = server_list_url
        self.server_status_url = server_status_url
        self.server_info_url = server_info_url
        self.cosmetic_url = cosmetic_url
        self._transport = transport or HttpTransport()
        self._cache: RetrievalCache[Any] = RetrievalCache(
            CacheConfig(ttl=cache_time, cache_errors=cache_errors), self._on_error, clock=clock
        )
        self._drain: Optional[threading.Thread] = None

    # -- generic retrieval -------------------------------------------------

    def _fetch_table(
        self,
        table: Union[BattlefieldsTable, str],
        queries: Sequence[str],
        deserialize: Callable[[List[Any]], T],
        default: Callable[[], T],
        name: Optional[str] = None,
    ) -> T:
        try:
            query = encode_queries(queries)
        except MalformedQueryError as exc:
            # no cache key can be built for a bad query, so it never reaches the cache
            self._on_error(exc)
            return default()
        url = request_url(self.api_url, table, query)
        field = field_key(name or table_name(table), query)
        return self._cache.retrieve(
            field,
            lambda: deserialize(unwrap_detail(self._transport.fetch_json(url))),
            default,
        )

    # -- table endpoints ---------------------------------------------------

    def get(self, table: Union[BattlefieldsTable, str], *queries: str) -> Optional[List[Any]]:
        """Raw ``detail`` rows of any table, or ``None`` on failure."""
        return self._fetch_table(
            table, queries, lambda detail: detail, lambda: None, name=f"custom_{table_name(table)}"
        )

    def get_kills(self, *queries: str) -> List[KillRecord]:
        return self._fetch_table(BattlefieldsTable.KILLS, queries, records(KillRecord), list)

    def get_wins(self, *queries: str) -> List[WinRecord]:
        return self._fetch_table(BattlefieldsTable.WINS, queries, records(WinRecord), list)

    def get_players(self, *queries: str) -> List[PlayerRecord]:
        return self._fetch_table(BattlefieldsTable.PLAYERS, queries, records(PlayerRecord), list)

    def get_matches(self, *queries: str) -> List[MatchRecord]:
        return self._fetch_table(BattlefieldsTable.MATCHES, queries, records(MatchRecord), list)

    def get_match_participants(self, *queries: str) -> List[MatchParticipantRecord]:
        return self._fetch_table(
            BattlefieldsTable.MATCH_PARTICIPANTS, queries, records(MatchParticipantRecord), list
        )

    def get_match_kills(self, *queries: str) -> List[KillInfoRecord]:
        return self._fetch_table(BattlefieldsTable.MATCH_KILLS, queries, records(KillInfoRecord), list)

    def get_accessories(self, *queries: str) -> List[AccessoryRecord]:
        return self._fetch_table(BattlefieldsTable.ACCESSORIES, queries, records(AccessoryRecord), list)

    def get_accessory_types(self, *queries: str) -> List[AccessoryTypeRecord]:
        return self._fetch_table(
            BattlefieldsTable.ACCESSORY_TYPES, queries, records(AccessoryTypeRecord), list
        )

    def get_owned_accessories(self, *queries: str) -> List[OwnedAccessoryRecord]:
        return self._fetch_table(
            BattlefieldsTable.OWNED_ACCESSORIES, queries, records(OwnedAccessoryRecord), list
        )

    def get_emotes(self, *queries: str) -> List[EmoteRecord]:
        return self._fetch_table(BattlefieldsTable.EMOTES, queries, records(EmoteRecord), list)

    def get_owned_emotes(self, *queries: str) -> List[OwnedEmoteRecord]:
        return self._fetch_table(BattlefieldsTable.OWNED_EMOTES, queries, records(OwnedEmoteRecord), list)

    def get_linked_discord(self, *queries: str) -> List[LinkedDiscordRecord]:
        return self._fetch_table(
            BattlefieldsTable.LINKED_DISCORD, queries, records(LinkedDiscordRecord), list
        )

    def get_weapons(self, *queries: str) -> List[WeaponRecord]:
        return self._fetch_table(BattlefieldsTable.WEAPONS, queries, records(WeaponRecord), list)

    def get_weapon_stats(self, *queries: str) -> List[WeaponStatsRecord]:
        return self._fetch_table(BattlefieldsTable.WEAPON_STATS, queries, records(WeaponStatsRecord), list)

    # -- servers -----------------------------------------------------------

    def get_server_list(self) -> List[str]:
        return self._cache.retrieve(
            "server_list", lambda: string_list(self._transport.fetch_json(self.server_list_url)), list
        )

    def get_server_status(self) -> List[ServerStatus]:
        """Status colour (``green``, ``red``, ...) of every known hostname."""
        return self._cache.retrieve(
            "server_status",
            lambda: flatten_server_status(unwrap_detail(self._transport.fetch_json(self.server_status_url))),
            list,
        )

    def get_server_info(self, ip: str) -> Optional[ServerInfo]:
        return self._cache.retrieve(
            f"server_info-{ip}",
            lambda: ServerInfo.from_json(self._transport.fetch_json(self.server_info_url + ip)),
            lambda: None,
        )

    # -- cosmetics ---------------------------------------------------------

    def _cosmetic_model(self, url: str) -> Dict[str, Any]:
        try:
            model = json.loads(self._transport.fetch_bytes(url))
        except ValueError as exc:
            raise DeserializationError(f"Invalid model JSON from '{url}': {exc}") from exc
        if not isinstance(model, dict):
            raise DeserializationError(f"Expected a model object from '{url}'")
        return model

    def _text(self, url: str) -> str:
        return self._transport.fetch_bytes(url).decode("utf-8").strip()

    def get_cosmetic_model(self, model_name: str) -> Optional[Dict[str, Any]]:
        url = f"{self.cosmetic_url}model/{model_name}.json"
        return self._cache.retrieve(f"cosmetic_model-{model_name}", lambda: self._cosmetic_model(url), lambda: None)

    def get_cosmetic_model_hash(self, model_name: str) -> Optional[str]:
        url = f"{self.cosmetic_url}model/{model_name}.json.md5"
        return self._cache.retrieve(f"cosmetic_model_hash-{model_name}", lambda: self._text(url), lambda: None)

    def get_cosmetic_texture(self, texture_name: str) -> Optional[bytes]:
        """PNG bytes of a cosmetic texture."""
        url = f"{self.cosmetic_url}texture/{texture_name}.png"
        return self._cache.retrieve(
            f"cosmetic_texture-{texture_name}", lambda: self._transport.fetch_bytes(url), lambda: None
        )

    def get_cosmetic_texture_hash(self, texture_name: str) -> Optional[str]:
        url = f"{self.cosmetic_url}texture/{texture_name}.png.md5"
        return self._cache.retrieve(
            f"cosmetic_texture_hash-{texture_name}", lambda: self._text(url), lambda: None
        )

    # -- lifecycle ---------------------------------------------------------

    def clear_cache(self) -> None:
        self._cache.clear()

    def cache_info(self) -> Dict[str, Any]:
        return self._cache.cache_info()

    @property
    def executor(self) -> Executor:
        return self._executor

    def submit(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "Future[T]":
        return self._executor.submit(fn, *args, **kwargs)

    def shutdown(self) -> bool:
        """Stop the worker pool and wait up to ``shutdown_timeout`` for it to drain.

        Returns False if work was still running when the wait ran out; the
        caller may then decide to abandon it. Calling again waits again.
        """
        if self._drain is None:
            self._executor.shutdown(wait=False)
            self._drain = threading.Thread(
                target=self._executor.shutdown,
                kwargs={"wait": True},
                name="battlefields-shutdown",
                daemon=True,
            )
            self._drain.start()
        self._drain.join(self.shutdown_timeout)
        finished = not self._drain.is_alive()
        if finished:
            self._transport.close()
        else:
            logger.warning("Worker pool still busy after %.1fs", self.shutdown_timeout)
        return finished

    def __enter__(self) -> "BattlefieldsConnector":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.shutdown()


def create_connector(
    settings: Optional[Settings] = None, on_error: Optional[ErrorSink] = None
) -> BattlefieldsConnector:
    """Build a connector with its own thread pool from ``settings`` (or the environment)."""
    settings = settings or load_settings()
    setup_logging(settings.LOG_LEVEL)
    executor = ThreadPoolExecutor(max_workers=settings.WORKERS, thread_name_prefix="battlefields")
    return BattlefieldsConnector(
        executor,
        on_error=on_error,
        shutdown_timeout=settings.SHUTDOWN_TIMEOUT,
        cache_time=settings.CACHE_TIME,
        cache_errors=settings.CACHE_ERRORS,
        api_url=settings.API_URL,
        server_list_url=settings.SERVER_LIST_URL,
        server_status_url=settings.SERVER_STATUS_URL,
        server_info_url=settings.SERVER_INFO_URL,
        cosmetic_url=settings.COSMETIC_URL,
    )

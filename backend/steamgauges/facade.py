"""Typed queries over the cached steamgaug.es status document."""

from threading import Lock
from typing import Any, Iterable, Optional

from steamgauges import config
from steamgauges.cache import CacheSnapshot, StatusCache
from steamgauges.errors import StatUnavailableError, UnsupportedGameError
from steamgauges.models import (
    GAME_IDS,
    Game,
    GameCoordinatorStatus,
    GameStats,
    ServiceStatus,
    StatusDocument,
)
from steamgauges.upstream import fetch_status_document

NO_ERROR = "No Error"

ALL_GAMES = frozenset(Game)
PLAYERS_SEARCHING_GAMES = frozenset({Game.COUNTER_STRIKE, Game.DOTA_TWO})


def is_online(flag: int) -> bool:
    return flag == 1


def has_error(error: Optional[str]) -> bool:
    return error is not None and error != NO_ERROR


def _require_game(game: Any, supported: Iterable[Game], query: str) -> str:
    """Return the upstream key for *game*, or raise if *query* does not cover it."""
    if not isinstance(game, Game) or game not in supported:
        raise UnsupportedGameError(game, query)
    return GAME_IDS[game]


class SteamgaugesClient:
    """Facade over a StatusCache.

    Each query asks the cache for a current document (which may fetch from
    steamgaug.es) before reading fields, so every method can raise
    ``UpstreamUnavailableError``. Passing ``document`` answers from that
    document instead, which lets one caller read several facts from the same
    snapshot.
    """

    def __init__(self, cache: StatusCache) -> None:
        self.cache = cache

    @classmethod
    def from_config(cls) -> "SteamgaugesClient":
        cache = StatusCache(
            fetch_status_document,
            ttl_seconds=config.CACHE_TTL_SECONDS,
            retry_cooldown_seconds=config.RETRY_COOLDOWN_SECONDS,
        )
        return cls(cache)

    def snapshot(self) -> CacheSnapshot:
        return self.cache.get_snapshot()

    def document(self, document: Optional[StatusDocument] = None) -> StatusDocument:
        if document is not None:
            return document
        return self.cache.get_document()

    # --- Steam services ---

    def is_client_online(self, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.document(document).client.online)

    def is_community_online(self, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.document(document).community.online)

    def is_store_online(self, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.document(document).store.online)

    def is_user_online(self, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.document(document).user.online)

    def community_response_time(self, document: Optional[StatusDocument] = None) -> int:
        return self.document(document).community.time

    def store_response_time(self, document: Optional[StatusDocument] = None) -> int:
        return self.document(document).store.time

    def user_response_time(self, document: Optional[StatusDocument] = None) -> int:
        return self.document(document).user.time

    def community_has_error(self, document: Optional[StatusDocument] = None) -> bool:
        return has_error(self.document(document).community.error)

    def store_has_error(self, document: Optional[StatusDocument] = None) -> bool:
        return has_error(self.document(document).store.error)

    def user_has_error(self, document: Optional[StatusDocument] = None) -> bool:
        return has_error(self.document(document).user.error)

    # --- Item economy ---

    def economy(
        self,
        game: Game,
        query: str = "economy status",
        document: Optional[StatusDocument] = None,
    ) -> ServiceStatus:
        """Return the raw economy record for *game*."""
        document = self.document(document)
        game_id = _require_game(game, ALL_GAMES, query)
        entry = document.econ_items.get(game_id)
        if entry is None:
            raise StatUnavailableError(game, query)
        return entry

    def is_economy_online(self, game: Game, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.economy(game, "economy status", document).online)

    def economy_response_time(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self.economy(game, "economy response time", document).time

    def economy_has_error(self, game: Game, document: Optional[StatusDocument] = None) -> bool:
        return has_error(self.economy(game, "economy error", document).error)

    # --- Game coordinator ---

    def game_coordinator(
        self,
        game: Game,
        supported: Iterable[Game] = ALL_GAMES,
        query: str = "game coordinator status",
        document: Optional[StatusDocument] = None,
    ) -> GameCoordinatorStatus:
        """Return the raw game coordinator record for *game*."""
        document = self.document(document)
        game_id = _require_game(game, supported, query)
        entry = document.game_coordinator.get(game_id)
        if entry is None:
            raise StatUnavailableError(game, query)
        return entry

    def is_game_coordinator_online(self, game: Game, document: Optional[StatusDocument] = None) -> bool:
        return is_online(self.game_coordinator(game, ALL_GAMES, "game coordinator status", document).online)

    def game_coordinator_has_error(self, game: Game, document: Optional[StatusDocument] = None) -> bool:
        return has_error(self.game_coordinator(game, ALL_GAMES, "game coordinator error", document).error)

    def _stat(
        self,
        game: Game,
        supported: Iterable[Game],
        stat: str,
        field: str,
        document: Optional[StatusDocument],
    ) -> Any:
        entry = self.game_coordinator(game, supported, stat, document)
        stats: Optional[GameStats] = entry.stats
        value = getattr(stats, field) if stats is not None else None
        if value is None:
            raise StatUnavailableError(game, stat)
        return value

    def get_schema(self, game: Game, document: Optional[StatusDocument] = None) -> str:
        schema_url = self.game_coordinator(game, {Game.TEAM_FORTRESS}, "schema", document).schema_url
        if schema_url is None:
            raise StatUnavailableError(game, "schema")
        return schema_url

    def get_spy_score(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.TEAM_FORTRESS}, "spy score", "spy_score", document)

    def get_engineer_score(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.TEAM_FORTRESS}, "engineer score", "engi_score", document)

    def get_players_searching(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, PLAYERS_SEARCHING_GAMES, "players searching", "players_searching", document)

    def get_average_wait_time(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.DOTA_TWO}, "average wait time", "average_wait", document)

    def get_ongoing_matches(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.DOTA_TWO}, "ongoing matches", "ongoing_matches", document)

    def get_servers_available(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.DOTA_TWO}, "servers available", "servers_available", document)

    def get_menu_url(self, game: Game, document: Optional[StatusDocument] = None) -> str:
        return self._stat(game, {Game.DOTA_TWO}, "menu url", "menu_url", document)

    def get_players_online(self, game: Game, document: Optional[StatusDocument] = None) -> int:
        return self._stat(game, {Game.DOTA_TWO}, "players online", "players_online", document)


_default_client: Optional[SteamgaugesClient] = None
_default_lock = Lock()


def get_default_client() -> SteamgaugesClient:
    """Return the process-wide client, creating it on first use."""
    global _default_client
    if _default_client is None:
        with _default_lock:
            if _default_client is None:
                _default_client = SteamgaugesClient.from_config()
    return _default_client


def reset_default_client() -> None:
    global _default_client
    with _default_lock:
        _default_client = None

import pytest

import steamgauges.facade as facade_module
from steamgauges.cache import StatusCache
from steamgauges.errors import StatUnavailableError, UnsupportedGameError, UpstreamUnavailableError
from steamgauges.facade import SteamgaugesClient, get_default_client, has_error, is_online, reset_default_client
from steamgauges.models import Game, StatusDocument


def _payload() -> dict:
    return {
        "ISteamClient": {"online": 1},
        "SteamCommunity": {"online": 1, "time": 120, "error": "No Error"},
        "SteamStore": {"online": 2, "time": 340, "error": "Timed out"},
        "ISteamUser": {"online": 0, "time": 55, "error": "No Error"},
        "ISteamGameCoordinator": {
            "440": {
                "online": 1,
                "error": "No Error",
                "schema": "http://media.steampowered.com/apps/440/scripts/items/items_game.txt",
                "stats": {"spyScore": "54", "engiScore": 46},
            },
            "570": {"online": 0, "error": "Internal Server Error", "stats": {"players_searching": 0}},
            "730": {
                "online": 1,
                "error": "No Error",
                "stats": {
                    "players_searching": 4012,
                    "average_wait": 38,
                    "ongoing_matches": 120000,
                    "servers_available": 0,
                    "menu_url": "http://www.dota2.com/news",
                    "players_online": 600123,
                },
            },
        },
        "IEconItems": {
            "440": {"online": 1, "time": 210, "error": "No Error"},
            "570": {"online": 1, "time": 190, "error": ""},
            "730": {"online": 0, "time": 880, "error": "No Error"},
        },
    }


def _client(payload: dict | None = None) -> SteamgaugesClient:
    document = StatusDocument.model_validate(_payload() if payload is None else payload)
    return SteamgaugesClient(StatusCache(lambda: document, ttl_seconds=10))


class FailingFetch:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        raise UpstreamUnavailableError("down")


@pytest.mark.parametrize("flag, expected", [(1, True), (0, False), (2, False), (-1, False)])
def test_is_online_only_for_flag_one(flag, expected):
    assert is_online(flag) is expected


@pytest.mark.parametrize(
    "text, expected",
    [("No Error", False), ("", True), ("no error", True), ("Timed out", True), (None, False)],
)
def test_has_error_compares_with_sentinel(text, expected):
    assert has_error(text) is expected


def test_community_scenario():
    client = _client()

    assert client.is_community_online() is True
    assert client.community_response_time() == 120
    assert client.community_has_error() is False


def test_global_services():
    client = _client()

    assert client.is_client_online() is True
    assert client.is_store_online() is False
    assert client.store_response_time() == 340
    assert client.store_has_error() is True
    assert client.is_user_online() is False
    assert client.user_response_time() == 55
    assert client.user_has_error() is False


def test_economy_queries_use_time_field_for_every_game():
    client = _client()

    assert client.economy_response_time(Game.TEAM_FORTRESS) == 210
    assert client.economy_response_time(Game.COUNTER_STRIKE) == 190
    assert client.economy_response_time(Game.DOTA_TWO) == 880
    assert client.is_economy_online(Game.DOTA_TWO) is False
    assert client.economy_has_error(Game.COUNTER_STRIKE) is True
    assert client.economy_has_error(Game.TEAM_FORTRESS) is False


def test_game_coordinator_queries():
    client = _client()

    assert client.is_game_coordinator_online(Game.TEAM_FORTRESS) is True
    assert client.is_game_coordinator_online(Game.COUNTER_STRIKE) is False
    assert client.game_coordinator_has_error(Game.COUNTER_STRIKE) is True
    assert client.game_coordinator_has_error(Game.DOTA_TWO) is False


def test_team_fortress_stats():
    client = _client()

    assert client.get_schema(Game.TEAM_FORTRESS).endswith("items_game.txt")
    assert client.get_spy_score(Game.TEAM_FORTRESS) == 54
    assert client.get_engineer_score(Game.TEAM_FORTRESS) == 46


def test_matchmaking_stats():
    client = _client()

    assert client.get_players_searching(Game.DOTA_TWO) == 4012
    assert client.get_average_wait_time(Game.DOTA_TWO) == 38
    assert client.get_ongoing_matches(Game.DOTA_TWO) == 120000
    assert client.get_menu_url(Game.DOTA_TWO) == "http://www.dota2.com/news"
    assert client.get_players_online(Game.DOTA_TWO) == 600123


def test_present_zero_is_not_treated_as_absent():
    client = _client()

    assert client.get_servers_available(Game.DOTA_TWO) == 0
    assert client.get_players_searching(Game.COUNTER_STRIKE) == 0


def test_absent_stat_raises_stat_unavailable():
    payload = _payload()
    payload["ISteamGameCoordinator"]["730"]["stats"] = {"average_wait": 10}
    client = _client(payload)

    with pytest.raises(StatUnavailableError) as exc_info:
        client.get_players_searching(Game.DOTA_TWO)
    assert exc_info.value.stat == "players searching"
    assert exc_info.value.game is Game.DOTA_TWO


def test_missing_stats_block_raises_stat_unavailable():
    payload = _payload()
    del payload["ISteamGameCoordinator"]["440"]["stats"]
    del payload["ISteamGameCoordinator"]["440"]["schema"]
    client = _client(payload)

    with pytest.raises(StatUnavailableError):
        client.get_spy_score(Game.TEAM_FORTRESS)
    with pytest.raises(StatUnavailableError):
        client.get_schema(Game.TEAM_FORTRESS)


def test_missing_game_entry_raises_stat_unavailable():
    payload = _payload()
    del payload["IEconItems"]["570"]
    client = _client(payload)

    with pytest.raises(StatUnavailableError):
        client.is_economy_online(Game.COUNTER_STRIKE)


@pytest.mark.parametrize(
    "method, game",
    [
        ("get_schema", Game.DOTA_TWO),
        ("get_spy_score", Game.COUNTER_STRIKE),
        ("get_engineer_score", Game.DOTA_TWO),
        ("get_players_searching", Game.TEAM_FORTRESS),
        ("get_average_wait_time", Game.COUNTER_STRIKE),
        ("get_ongoing_matches", Game.TEAM_FORTRESS),
        ("get_servers_available", Game.COUNTER_STRIKE),
        ("get_menu_url", Game.TEAM_FORTRESS),
        ("get_players_online", Game.COUNTER_STRIKE),
    ],
)
def test_stat_queries_reject_unsupported_games(method, game):
    client = _client()

    with pytest.raises(UnsupportedGameError) as exc_info:
        getattr(client, method)(game)
    assert exc_info.value.game is game


def test_unsupported_game_is_rejected_before_field_lookup():
    payload = _payload()
    payload["ISteamGameCoordinator"] = {}
    client = _client(payload)

    with pytest.raises(UnsupportedGameError):
        client.get_engineer_score(Game.DOTA_TWO)


def test_values_outside_the_enumeration_are_rejected():
    client = _client()

    with pytest.raises(UnsupportedGameError):
        client.is_economy_online("440")
    with pytest.raises(UnsupportedGameError):
        client.is_game_coordinator_online(None)


def test_every_query_propagates_upstream_failure():
    client = SteamgaugesClient(StatusCache(FailingFetch(), ttl_seconds=10, retry_cooldown_seconds=0))

    with pytest.raises(UpstreamUnavailableError):
        client.is_client_online()
    with pytest.raises(UpstreamUnavailableError):
        client.get_spy_score(Game.TEAM_FORTRESS)


def test_document_is_fetched_before_game_validation():
    fetch = FailingFetch()
    client = SteamgaugesClient(StatusCache(fetch, ttl_seconds=10, retry_cooldown_seconds=0))

    with pytest.raises(UpstreamUnavailableError):
        client.get_spy_score(Game.DOTA_TWO)
    assert fetch.calls == 1


def test_default_client_is_created_once(monkeypatch):
    created = []

    def fake_from_config():
        client = _client()
        created.append(client)
        return client

    monkeypatch.setattr(facade_module.SteamgaugesClient, "from_config", staticmethod(fake_from_config))
    reset_default_client()
    try:
        first = get_default_client()
        second = get_default_client()
    finally:
        reset_default_client()

    assert first is second
    assert len(created) == 1


def test_non_numeric_score_only_affects_that_stat():
    payload = _payload()
    payload["ISteamGameCoordinator"]["440"]["stats"]["spyScore"] = ""
    client = _client(payload)

    assert client.is_client_online() is True
    assert client.get_engineer_score(Game.TEAM_FORTRESS) == 46
    with pytest.raises(StatUnavailableError):
        client.get_spy_score(Game.TEAM_FORTRESS)


def test_callers_cannot_change_the_cached_document():
    client = _client()

    with pytest.raises(TypeError):
        client.document().econ_items.clear()
    with pytest.raises(TypeError):
        del client.document().game_coordinator["440"]

    assert client.is_economy_online(Game.TEAM_FORTRESS) is True
    assert client.get_spy_score(Game.TEAM_FORTRESS) == 54


def test_queries_answer_from_a_given_document_without_the_cache():
    fetch = FailingFetch()
    client = SteamgaugesClient(StatusCache(fetch, ttl_seconds=10))
    document = StatusDocument.model_validate(_payload())

    assert client.is_community_online(document) is True
    assert client.economy_response_time(Game.DOTA_TWO, document=document) == 880
    assert client.game_coordinator(Game.COUNTER_STRIKE, document=document).error == "Internal Server Error"
    assert client.economy(Game.TEAM_FORTRESS, document=document).time == 210
    assert client.get_players_online(Game.DOTA_TWO, document=document) == 600123
    assert fetch.calls == 0

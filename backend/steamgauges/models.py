"""Status document models and response models for the status API."""

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Game(str, Enum):
    TEAM_FORTRESS = "tf2"
    COUNTER_STRIKE = "csgo"
    DOTA_TWO = "dota2"


# Keys used by steamgaug.es in ISteamGameCoordinator and IEconItems.
GAME_IDS: dict[Game, str] = {
    Game.TEAM_FORTRESS: "440",
    Game.COUNTER_STRIKE: "570",
    Game.DOTA_TWO: "730",
}


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class ClientStatus(_Frozen):
    online: int = 0


class ServiceStatus(_Frozen):
    online: int = 0
    time: int = 0
    error: Optional[str] = None


class GameStats(_Frozen):
    spy_score: Optional[int] = Field(default=None, alias="spyScore")
    engi_score: Optional[int] = Field(default=None, alias="engiScore")
    players_searching: Optional[int] = None
    average_wait: Optional[int] = None
    ongoing_matches: Optional[int] = None
    servers_available: Optional[int] = None
    menu_url: Optional[str] = None
    players_online: Optional[int] = None

    @field_validator("spy_score", "engi_score", mode="before")
    @classmethod
    def blank_score_is_unreported(cls, value: Any) -> Any:
        # Scores arrive as strings; anything non-numeric counts as not reported.
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return None
        return value


class GameCoordinatorStatus(_Frozen):
    online: int = 0
    error: Optional[str] = None
    schema_url: Optional[str] = Field(default=None, alias="schema")
    stats: Optional[GameStats] = None


class StatusDocument(_Frozen):
    """One steamgaug.es payload. Missing sections default to empty."""

    client: ClientStatus = Field(default_factory=ClientStatus, alias="ISteamClient")
    community: ServiceStatus = Field(default_factory=ServiceStatus, alias="SteamCommunity")
    store: ServiceStatus = Field(default_factory=ServiceStatus, alias="SteamStore")
    user: ServiceStatus = Field(default_factory=ServiceStatus, alias="ISteamUser")
    game_coordinator: Mapping[str, GameCoordinatorStatus] = Field(
        default_factory=lambda: MappingProxyType({}), alias="ISteamGameCoordinator"
    )
    econ_items: Mapping[str, ServiceStatus] = Field(
        default_factory=lambda: MappingProxyType({}), alias="IEconItems"
    )

    @field_validator("game_coordinator", "econ_items", mode="after")
    @classmethod
    def read_only_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))


# --- Status API responses ---


class ServiceReport(BaseModel):
    online: bool
    response_time_ms: Optional[int] = None
    has_error: bool = False
    error: Optional[str] = None


class SteamOverview(BaseModel):
    client: ServiceReport
    community: ServiceReport
    store: ServiceReport
    user: ServiceReport
    fetched_at: Optional[datetime] = None


class GameOverview(BaseModel):
    game: Game
    game_coordinator: ServiceReport
    economy: ServiceReport
    fetched_at: Optional[datetime] = None


class StatValue(BaseModel):
    game: Game
    stat: str
    value: Union[int, str]

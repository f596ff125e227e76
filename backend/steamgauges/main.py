"""steamgauges status API — main application."""

import logging

from fastapi import Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from steamgauges import config
from steamgauges.errors import StatUnavailableError, UnsupportedGameError, UpstreamUnavailableError
from steamgauges.facade import SteamgaugesClient, get_default_client, has_error, is_online
from steamgauges.models import (
    ClientStatus,
    Game,
    GameCoordinatorStatus,
    GameOverview,
    ServiceReport,
    ServiceStatus,
    StatValue,
    SteamOverview,
)

# --- Logging ---
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logger = logging.getLogger("steamgauges.api")

STAT_QUERIES: dict[str, str] = {
    "schema": "get_schema",
    "spy_score": "get_spy_score",
    "engineer_score": "get_engineer_score",
    "players_searching": "get_players_searching",
    "average_wait_time": "get_average_wait_time",
    "ongoing_matches": "get_ongoing_matches",
    "servers_available": "get_servers_available",
    "menu_url": "get_menu_url",
    "players_online": "get_players_online",
}


def get_client() -> SteamgaugesClient:
    return get_default_client()


def _report(entry: ServiceStatus) -> ServiceReport:
    return ServiceReport(
        online=is_online(entry.online),
        response_time_ms=entry.time,
        has_error=has_error(entry.error),
        error=entry.error,
    )


def _client_report(entry: ClientStatus) -> ServiceReport:
    return ServiceReport(online=is_online(entry.online))


def _coordinator_report(entry: GameCoordinatorStatus) -> ServiceReport:
    return ServiceReport(
        online=is_online(entry.online),
        has_error=has_error(entry.error),
        error=entry.error,
    )


# --- App ---
app = FastAPI(
    title="steamgauges",
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)

if config.CORS_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )


@app.exception_handler(UnsupportedGameError)
async def _unsupported_game_handler(_: Request, exc: UnsupportedGameError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(StatUnavailableError)
async def _stat_unavailable_handler(_: Request, exc: StatUnavailableError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(UpstreamUnavailableError)
async def _upstream_unavailable_handler(request: Request, exc: UpstreamUnavailableError) -> JSONResponse:
    logger.warning("Upstream unavailable for %s", request.url.path)
    return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)})


@app.get("/api/steam", response_model=SteamOverview)
def steam_overview(client: SteamgaugesClient = Depends(get_client)):
    snapshot = client.snapshot()
    document = snapshot.document
    return SteamOverview(
        client=_client_report(document.client),
        community=_report(document.community),
        store=_report(document.store),
        user=_report(document.user),
        fetched_at=snapshot.fetched_at_utc,
    )


@app.get("/api/games/{game}", response_model=GameOverview)
def game_overview(game: Game, client: SteamgaugesClient = Depends(get_client)):
    snapshot = client.snapshot()
    coordinator = client.game_coordinator(game, document=snapshot.document)
    economy = client.economy(game, document=snapshot.document)
    return GameOverview(
        game=game,
        game_coordinator=_coordinator_report(coordinator),
        economy=_report(economy),
        fetched_at=snapshot.fetched_at_utc,
    )


@app.get("/api/games/{game}/stats/{stat}", response_model=StatValue)
def game_stat(game: Game, stat: str, client: SteamgaugesClient = Depends(get_client)):
    method_name = STAT_QUERIES.get(stat)
    if method_name is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown stat")
    value = getattr(client, method_name)(game)
    return StatValue(game=game, stat=stat, value=value)


@app.get("/healthz")
async def healthz():
    return {"ok": True}

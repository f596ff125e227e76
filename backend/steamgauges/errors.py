"""Errors raised by the steamgaug.es client."""

from typing import Any


class SteamgaugesError(Exception):
    """Base error for the steamgaug.es client."""


class UnsupportedGameError(SteamgaugesError):
    """Raised when a query does not apply to the requested game."""

    def __init__(self, game: Any, query: str) -> None:
        self.game = game
        self.query = query
        label = getattr(game, "value", game)
        super().__init__(f"{query} is not available for game {label!r}")


class UpstreamUnavailableError(SteamgaugesError):
    """Raised when steamgaug.es could not be fetched or returned an unusable payload.

    The cached snapshot is never modified when this is raised.
    """


class StatUnavailableError(SteamgaugesError):
    """Raised when a statistic is absent from an otherwise valid status document."""

    def __init__(self, game: Any, stat: str) -> None:
        self.game = game
        self.stat = stat
        label = getattr(game, "value", game)
        super().__init__(f"{stat} is not reported for game {label!r}")

"""Game instance storage, injected wherever games are looked up by id."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterator

from .game import SetAndSeizeGame


class GameNotFound(KeyError):
    """Raised when no game is stored under the requested id."""


class GameRepository(ABC):
    @abstractmethod
    def create(self, game: SetAndSeizeGame) -> SetAndSeizeGame:
        """Store a new game under its ``game_id``."""

    @abstractmethod
    def get(self, game_id: str) -> SetAndSeizeGame:
        """Return the stored game or raise GameNotFound."""

    @abstractmethod
    def remove(self, game_id: str) -> None:
        """Forget a game; unknown ids are ignored."""


class InMemoryGameRepository(GameRepository):
    def __init__(self) -> None:
        self._games: Dict[str, SetAndSeizeGame] = {}

    def create(self, game: SetAndSeizeGame) -> SetAndSeizeGame:
        if game.game_id in self._games:
            raise ValueError(f"Game {game.game_id} already exists.")
        self._games[game.game_id] = game
        return game

    def get(self, game_id: str) -> SetAndSeizeGame:
        try:
            return self._games[game_id]
        except KeyError as exc:
            raise GameNotFound(game_id) from exc

    def remove(self, game_id: str) -> None:
        self._games.pop(game_id, None)

    def __len__(self) -> int:
        return len(self._games)

    def __iter__(self) -> Iterator[str]:
        return iter(self._games)

from .config import config
from .dice import Dice, FixedDice
from .lobby import Lobby
from .player import Player
from .registry import RoomRegistry
from .room import Room
from .types import (
    BoardState,
    DiceRolled,
    Event,
    GameOver,
    Outcome,
    RollPending,
    RoomCreated,
    RoomState,
    RoomUpdate,
    TurnChanged,
)

__all__ = [
    "config",
    "Dice",
    "FixedDice",
    "Lobby",
    "Player",
    "RoomRegistry",
    "Room",
    "BoardState",
    "DiceRolled",
    "Event",
    "GameOver",
    "Outcome",
    "RollPending",
    "RoomCreated",
    "RoomState",
    "RoomUpdate",
    "TurnChanged",
]

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union


class RoomState(str, Enum):
    WAITING = "waiting"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"


@dataclass(slots=True, frozen=True)
class RollPending:
    """A roll waiting to be spent on one of the movable pieces."""

    value: int
    movable: tuple[int, ...]


# --- Outbound events ---


@dataclass(slots=True, frozen=True)
class RoomCreated:
    type: ClassVar[str] = "room_created"
    code: str
    link: str

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "code": self.code, "link": self.link}


@dataclass(slots=True, frozen=True)
class RoomUpdate:
    type: ClassVar[str] = "room_update"
    code: str
    players: List[Dict[str, str]]
    started: bool
    turn: Optional[str]
    log: List[str]

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "code": self.code,
            "players": self.players,
            "started": self.started,
            "turn": self.turn,
            "log": self.log,
        }


@dataclass(slots=True, frozen=True)
class DiceRolled:
    type: ClassVar[str] = "dice"
    player: str
    roll: int
    movable: List[int]

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "player": self.player,
            "roll": self.roll,
            "movable": self.movable,
        }


@dataclass(slots=True, frozen=True)
class BoardState:
    type: ClassVar[str] = "state"
    code: str
    players: List[Dict[str, Any]]
    log: List[str]

    def to_message(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "code": self.code,
            "players": self.players,
            "log": self.log,
        }


@dataclass(slots=True, frozen=True)
class TurnChanged:
    type: ClassVar[str] = "turn"
    id: Optional[str]

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "id": self.id}


@dataclass(slots=True, frozen=True)
class GameOver:
    type: ClassVar[str] = "game_over"
    winner: Dict[str, str]

    def to_message(self) -> Dict[str, Any]:
        return {"type": self.type, "winner": self.winner}


Event = Union[RoomCreated, RoomUpdate, DiceRolled, BoardState, TurnChanged, GameOver]


@dataclass(slots=True)
class Outcome:
    """Result of one lobby command: return values plus events to broadcast."""

    events: List[Event] = field(default_factory=list)
    code: Optional[str] = None
    player_id: Optional[str] = None
    value: Optional[int] = None
    movable: List[int] = field(default_factory=list)

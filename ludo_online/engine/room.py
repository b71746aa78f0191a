from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from . import board
from .config import config
from .dice import DiceSource
from .errors import (
    DiceAlreadyRolled,
    GameFinished,
    GameNotStarted,
    IllegalMove,
    NoDiceRolled,
    NotEnoughPlayers,
    NotYourTurn,
    PlayerNotInRoom,
    RoomFull,
)
from .player import Player, display_name
from .types import (
    BoardState,
    DiceRolled,
    Event,
    GameOver,
    RollPending,
    RoomState,
    RoomUpdate,
    TurnChanged,
)


@dataclass(slots=True)
class Room:
    """State machine for a single room.

    Every public method validates against the current state first and raises
    a ``LudoError`` without touching anything when the request is rejected.
    On success it returns the events to broadcast to the room. Callers are
    expected to serialise calls per room.
    """

    code: str
    dice: DiceSource
    players: Dict[str, Player] = field(default_factory=dict)
    turn_order: List[str] = field(default_factory=list)
    turn_index: int = 0
    turn: Optional[str] = None
    pending: Optional[RollPending] = None
    state: RoomState = RoomState.WAITING
    winner: Optional[str] = None
    host_id: Optional[str] = None
    log: List[str] = field(default_factory=list)

    @property
    def started(self) -> bool:
        return self.state is not RoomState.WAITING

    @property
    def is_empty(self) -> bool:
        return not self.players

    # --- Snapshots ---
    def room_update(self) -> RoomUpdate:
        return RoomUpdate(
            code=self.code,
            players=[p.summary() for p in self.players.values()],
            started=self.started,
            turn=self.turn,
            log=list(self.log),
        )

    def board_state(self) -> BoardState:
        return BoardState(
            code=self.code,
            players=[p.snapshot() for p in self.players.values()],
            log=list(self.log),
        )

    # --- Roster ---
    def _free_color(self) -> str:
        used = {p.color for p in self.players.values()}
        return next(c for c in config.COLORS if c not in used)

    def join(self, player_id: str, name: str | None = None) -> List[Event]:
        if player_id in self.players:
            return [self.room_update()]
        if len(self.players) >= config.MAX_PLAYERS:
            raise RoomFull()

        player = Player(id=player_id, name=display_name(name), color=self._free_color())
        self.players[player_id] = player
        if self.host_id is None:
            self.host_id = player_id
        self.log.append(f"{player.name} joined as {player.color}")
        logger.info(f"Player {player_id} joined room {self.code} as {player.color}")

        self._start_if_possible()
        return [self.room_update()]

    def start(self, requester_id: str) -> List[Event]:
        if len(self.players) < config.MIN_PLAYERS:
            raise NotEnoughPlayers()
        if requester_id not in self.players:
            raise PlayerNotInRoom()
        self._start_if_possible()
        return [self.room_update()]

    def _start_if_possible(self) -> None:
        if self.started or len(self.players) < config.MIN_PLAYERS:
            return
        self.state = RoomState.IN_PROGRESS
        self.turn_order = list(self.players)
        self.turn_index = 0
        self.turn = self.turn_order[0]
        self.log.append("Game started!")
        logger.info(f"Room {self.code} started with {len(self.turn_order)} players")

    def leave(self, player_id: str) -> List[Event]:
        player = self.players.pop(player_id, None)
        if player is None:
            return []
        self.turn_order = [pid for pid in self.turn_order if pid != player_id]
        self.log.append(f"{player.name} left")
        logger.info(f"Player {player_id} left room {self.code}")

        if self.is_empty:
            self.turn = None
            self.pending = None
            return []

        if not self.turn_order:
            # only late joiners remain, nobody holds a seat
            self.turn = None
            self.pending = None
            self.turn_index = 0
        elif self.turn == player_id:
            self.pending = None
            self.turn_index = self.turn_index % len(self.turn_order)
            self.turn = self.turn_order[self.turn_index]
        elif self.turn is not None:
            # earlier seats may have shifted the cursor
            self.turn_index = self.turn_order.index(self.turn)
        return [self.room_update()]

    # --- Turn actions ---
    def _require_turn(self, requester_id: str) -> Player:
        if self.state is RoomState.WAITING:
            raise GameNotStarted()
        if self.state is RoomState.FINISHED:
            raise GameFinished()
        if self.turn != requester_id:
            raise NotYourTurn()
        return self.players[requester_id]

    def roll(self, requester_id: str) -> List[Event]:
        player = self._require_turn(requester_id)
        if self.pending is not None:
            raise DiceAlreadyRolled()

        value = self.dice.roll()
        movable = board.movable_pieces(player.pieces, value)
        logger.debug(f"Room {self.code}: {player.name} rolled {value}, movable={movable}")
        events: List[Event] = [DiceRolled(player=player.id, roll=value, movable=movable)]

        if not movable:
            self.log.append(f"{player.name} rolled {value} and cannot move")
            # a six without a legal move does not earn another roll
            self._next_turn(rolled_six=False, player=player)
            events.append(TurnChanged(id=self.turn))
            return events

        self.pending = RollPending(value=value, movable=tuple(movable))
        return events

    def move(self, requester_id: str, piece_index: int) -> List[Event]:
        player = self._require_turn(requester_id)
        pending = self.pending
        if pending is None:
            raise NoDiceRolled()
        if piece_index not in pending.movable:
            raise IllegalMove()
        old = player.pieces[piece_index]
        if not board.can_move(old, pending.value):
            raise IllegalMove()

        new = board.destination(old, pending.value)
        player.pieces[piece_index] = new
        logger.debug(f"Room {self.code}: {player.name} piece {piece_index} {old} -> {new}")
        self._resolve_captures(player, new)

        if player.check_won():
            self.pending = None
            self.state = RoomState.FINISHED
            self.winner = player.id
            self.log.append(f"{player.name} has won the game!")
            logger.info(f"Room {self.code} won by {player.id} ({player.name})")
            return [self.board_state(), GameOver(winner=player.summary())]

        self.pending = None
        events: List[Event] = [self.board_state()]
        self._next_turn(rolled_six=pending.value == config.EXIT_ROLL, player=player)
        events.append(TurnChanged(id=self.turn))
        return events

    def _resolve_captures(self, mover: Player, new_pos: int) -> None:
        abs_pos = board.absolute_position(mover.color, new_pos)
        if abs_pos is None or board.is_safe_tile(abs_pos):
            return
        for pid, opponent in self.players.items():
            if pid == mover.id:
                continue
            for i, rel in enumerate(opponent.pieces):
                if board.absolute_position(opponent.color, rel) == abs_pos:
                    opponent.pieces[i] = config.BASE
                    self.log.append(f"{opponent.name}'s piece captured by {mover.name}")

    def _next_turn(self, rolled_six: bool, player: Player) -> None:
        if rolled_six:
            self.log.append(f"{player.name} rolls a six and goes again")
            return
        self.turn_index = (self.turn_index + 1) % len(self.turn_order)
        self.turn = self.turn_order[self.turn_index]

"""Command interface wrapped by the transport.

Each command resolves the room, takes its lock for the whole action and
returns an ``Outcome``. Rejections surface as ``LudoError`` subclasses.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .errors import RoomNotFound
from .registry import RoomRegistry, normalize_code
from .room import Room
from .types import Outcome, RoomCreated


def new_player_id() -> str:
    return uuid.uuid4().hex


def join_link(origin: str, code: str) -> str:
    return f"{(origin or '').rstrip('/')}/?room={code}"


@dataclass(slots=True)
class Lobby:
    registry: RoomRegistry = field(default_factory=RoomRegistry)

    @contextmanager
    def _locked(self, code: str) -> Iterator[Room]:
        key = normalize_code(code)
        with self.registry.lock_for(key):
            # the room may have been torn down while we waited on its lock
            room = self.registry.lookup(key)
            yield room

    def create_room(self, origin: str = "") -> Outcome:
        code = self.registry.create_room()
        return Outcome(
            code=code, events=[RoomCreated(code=code, link=join_link(origin, code))]
        )

    def join_room(
        self, code: str, name: Optional[str] = None, player_id: Optional[str] = None
    ) -> Outcome:
        player_id = player_id or new_player_id()
        with self._locked(code) as room:
            events = room.join(player_id, name)
        return Outcome(code=room.code, player_id=player_id, events=events)

    def start_game(self, code: str, requester_id: str) -> Outcome:
        with self._locked(code) as room:
            events = room.start(requester_id)
        return Outcome(code=room.code, events=events)

    def roll_dice(self, code: str, requester_id: str) -> Outcome:
        with self._locked(code) as room:
            events = room.roll(requester_id)
        rolled = events[0]
        return Outcome(
            code=room.code, value=rolled.roll, movable=list(rolled.movable), events=events
        )

    def move_piece(self, code: str, requester_id: str, piece_index: int) -> Outcome:
        with self._locked(code) as room:
            events = room.move(requester_id, piece_index)
        return Outcome(code=room.code, events=events)

    def disconnect(self, code: str, player_id: str) -> Outcome:
        try:
            with self._locked(code) as room:
                events = room.leave(player_id)
                self.registry.remove_if_empty(room.code)
        except RoomNotFound:
            return Outcome()
        return Outcome(code=room.code, events=events)

    def discard_room(self, code: str) -> bool:
        """Drop a room nobody is in, e.g. one whose creator never joined."""
        try:
            with self._locked(code) as room:
                return self.registry.remove_if_empty(room.code)
        except RoomNotFound:
            return False

    def room(self, code: str) -> Room:
        return self.registry.lookup(code)

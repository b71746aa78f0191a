from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass, field
from typing import Dict

from loguru import logger

from .config import config
from .dice import Dice, DiceSource
from .errors import RoomNotFound
from .room import Room


def generate_room_code() -> str:
    """Random code over the configured alphabet; uniqueness is the caller's job."""
    return "".join(
        secrets.choice(config.ROOM_CODE_ALPHABET) for _ in range(config.ROOM_CODE_LENGTH)
    )


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


@dataclass(slots=True)
class RoomRegistry:
    """Owns every live room and the lock that serialises actions on it."""

    dice: DiceSource = field(default_factory=Dice)
    _rooms: Dict[str, Room] = field(default_factory=dict, init=False, repr=False)
    _locks: Dict[str, threading.RLock] = field(default_factory=dict, init=False, repr=False)
    _guard: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def create_room(self) -> str:
        with self._guard:
            code = generate_room_code()
            while code in self._rooms:
                logger.warning(f"Room code collision detected, regenerating: {code}")
                code = generate_room_code()
            self._rooms[code] = Room(code=code, dice=self.dice)
            self._locks[code] = threading.RLock()
        logger.info(f"Created room {code}")
        return code

    def lookup(self, code: str) -> Room:
        key = normalize_code(code)
        with self._guard:
            room = self._rooms.get(key)
        if room is None:
            raise RoomNotFound(key)
        return room

    def lock_for(self, code: str) -> threading.RLock:
        key = normalize_code(code)
        with self._guard:
            lock = self._locks.get(key)
        if lock is None:
            raise RoomNotFound(key)
        return lock

    def remove_if_empty(self, code: str) -> bool:
        key = normalize_code(code)
        with self._guard:
            room = self._rooms.get(key)
            if room is None or not room.is_empty:
                return False
            del self._rooms[key]
            del self._locks[key]
        logger.info(f"Removed empty room {key}")
        return True

    def __contains__(self, code: str) -> bool:
        with self._guard:
            return normalize_code(code) in self._rooms

    def __len__(self) -> int:
        with self._guard:
            return len(self._rooms)

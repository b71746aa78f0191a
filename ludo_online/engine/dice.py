from __future__ import annotations

import random
import threading
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger

from .config import config


class DiceSource(Protocol):
    def roll(self) -> int:
        ...


@dataclass(slots=True)
class Dice:
    """Uniform d6 shared by every room.

    Uses the OS entropy pool when it is available and falls back to a
    Mersenne Twister otherwise. The fallback generator keeps internal state,
    so draws from it are serialised.
    """

    faces: int = config.DICE_FACES
    _rng: random.Random = field(init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    secure: bool = field(default=True, init=False)

    def __post_init__(self) -> None:
        rng = random.SystemRandom()
        try:
            rng.random()
        except NotImplementedError:
            logger.warning("OS randomness unavailable, falling back to random.Random")
            rng = random.Random()
            self.secure = False
        self._rng = rng

    def roll(self) -> int:
        if self.secure:
            return self._rng.randint(1, self.faces)
        with self._lock:
            return self._rng.randint(1, self.faces)


@dataclass(slots=True)
class FixedDice:
    """Replays a scripted sequence of rolls; used to drive deterministic games."""

    values: list[int] = field(default_factory=list)

    def push(self, *values: int) -> None:
        self.values.extend(values)

    def roll(self) -> int:
        if not self.values:
            raise IndexError("FixedDice has no scripted rolls left")
        return self.values.pop(0)

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from . import board
from .config import config


@dataclass(slots=True)
class Player:
    id: str
    name: str
    color: str
    pieces: list[int] = field(init=False)

    def __post_init__(self) -> None:
        self.pieces = [config.BASE] * config.PIECES_PER_PLAYER

    def check_won(self) -> bool:
        return all(board.is_finished(p) for p in self.pieces)

    def summary(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "color": self.color}

    def snapshot(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "pieces": list(self.pieces),
        }


def display_name(name: str | None) -> str:
    cleaned = (name or "").strip()
    return cleaned or config.DEFAULT_PLAYER_NAME

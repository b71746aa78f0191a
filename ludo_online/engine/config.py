import os
import string
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass(slots=True)
class Config:
    # --- Constants ---
    MAX_PLAYERS: int = 4
    MIN_PLAYERS: int = 2
    PIECES_PER_PLAYER: int = 4

    # -1=base, 0-51=ring (relative to own entry), 52-57=home stretch, 58=finished
    BASE: int = -1
    RING_SIZE: int = 52
    HOME_STRETCH_START: int = 52
    HOME_FINAL: int = 57
    FINISHED: int = 58
    EXIT_ROLL: int = 6
    DICE_FACES: int = 6

    COLORS: list[str] = field(
        default_factory=lambda: ["red", "green", "yellow", "blue"]
    )
    # Entry tile of each color on the absolute 0..51 ring
    COLOR_OFFSETS: dict[str, int] = field(
        default_factory=lambda: {"red": 0, "green": 13, "yellow": 26, "blue": 39}
    )
    SAFE_TILES: frozenset[int] = field(
        default_factory=lambda: frozenset({0, 8, 13, 21, 26, 34, 39, 47})
    )

    ROOM_CODE_LENGTH: int = int(os.getenv("ROOM_CODE_LENGTH", 6))
    ROOM_CODE_ALPHABET: str = string.ascii_uppercase + string.digits
    DEFAULT_PLAYER_NAME: str = os.getenv("DEFAULT_PLAYER_NAME", "Player")

    # Derived (populated in __post_init__ due to slots)
    RING_END: int = 0

    def __post_init__(self):
        self.RING_END = self.RING_SIZE - 1

        if self.ROOM_CODE_LENGTH < 6:
            raise ValueError("ROOM_CODE_LENGTH must be at least 6")
        if len(set(self.ROOM_CODE_ALPHABET)) < 32:
            raise ValueError("ROOM_CODE_ALPHABET needs at least 32 symbols")


@dataclass(slots=True)
class ServerConfig:
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", 8080))
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


config = Config()
server_config = ServerConfig()

"""Pure movement rules over the unified piece coordinate.

A piece position is relative to its owner's entry tile: ``-1`` base,
``0..51`` shared ring, ``52..57`` private home stretch, ``58`` finished.
Nothing here mutates state; the room engine applies the results.
"""

from __future__ import annotations

from .config import config


def on_ring(rel_pos: int) -> bool:
    return 0 <= rel_pos <= config.RING_END


def in_home_stretch(rel_pos: int) -> bool:
    return config.HOME_STRETCH_START <= rel_pos <= config.HOME_FINAL


def is_finished(rel_pos: int) -> bool:
    return rel_pos == config.FINISHED


def absolute_position(color: str, rel_pos: int) -> int | None:
    """Map a ring position to its absolute tile (0..51), or None off the ring."""
    if not on_ring(rel_pos):
        return None
    return (config.COLOR_OFFSETS[color] + rel_pos) % config.RING_SIZE


def is_safe_tile(abs_pos: int) -> bool:
    return abs_pos in config.SAFE_TILES


def can_move(rel_pos: int, roll: int) -> bool:
    if rel_pos == config.BASE:
        return roll == config.EXIT_ROLL
    if on_ring(rel_pos) or in_home_stretch(rel_pos):
        # may run from the ring into the home stretch, never past the final cell
        return rel_pos + roll <= config.HOME_FINAL
    return False


def destination(rel_pos: int, roll: int) -> int:
    """Position after moving ``roll`` steps; only meaningful when ``can_move``.

    Leaving base always lands on the entry tile. Reaching the final home
    cell finishes the piece.
    """
    if rel_pos == config.BASE:
        return 0
    nxt = rel_pos + roll
    if on_ring(rel_pos) and nxt <= config.RING_END:
        return nxt
    nxt = min(config.HOME_FINAL, nxt)
    if nxt == config.HOME_FINAL:
        return config.FINISHED
    return nxt


def movable_pieces(pieces: list[int], roll: int) -> list[int]:
    return [i for i, pos in enumerate(pieces) if can_move(pos, roll)]

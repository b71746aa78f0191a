"""Errors raised by the room engine.

None of them is fatal: each one is reported to the requesting player only
and leaves room state untouched.
"""


class LudoError(Exception):
    """Base exception for rejected player actions."""

    message = "Request rejected"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class RoomNotFound(LudoError):
    message = "Room not found"

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Room {code} not found")


class RoomFull(LudoError):
    message = "Room is full (maximum 4 players)"


class NotEnoughPlayers(LudoError):
    message = "Need at least 2 players to start"


class PlayerNotInRoom(LudoError):
    message = "You are not in this room"


class GameNotStarted(LudoError):
    message = "Game not started"


class GameFinished(LudoError):
    message = "Game is over"


class NotYourTurn(LudoError):
    message = "Not your turn"


class DiceAlreadyRolled(LudoError):
    message = "Dice already rolled, move a piece"


class NoDiceRolled(LudoError):
    message = "No dice roll available"


class IllegalMove(LudoError):
    message = "Invalid move"

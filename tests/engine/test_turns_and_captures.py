import unittest

from ludo_online.engine.config import config
from ludo_online.engine.dice import FixedDice
from ludo_online.engine.errors import (
    DiceAlreadyRolled,
    GameFinished,
    GameNotStarted,
    IllegalMove,
    NoDiceRolled,
    NotYourTurn,
)
from ludo_online.engine.player import Player
from ludo_online.engine.room import Room
from ludo_online.engine.types import (
    BoardState,
    DiceRolled,
    GameOver,
    RoomState,
    TurnChanged,
)


def make_room(*names: str) -> Room:
    """Started room seating the given players in order (red, green, ...)."""
    room = Room(code="GAME01", dice=FixedDice())
    for name, color in zip(names, config.COLORS):
        pid = name.lower()
        room.players[pid] = Player(id=pid, name=name, color=color)
    room.start(names[0].lower())
    return room


class TestRolling(unittest.TestCase):
    def setUp(self):
        self.room = make_room("Alice", "Bob")
        self.dice: FixedDice = self.room.dice

    def test_roll_before_start(self):
        room = Room(code="WAIT01", dice=FixedDice([6]))
        room.join("alice", "Alice")
        with self.assertRaises(GameNotStarted):
            room.roll("alice")

    def test_roll_out_of_turn(self):
        self.dice.push(6)
        with self.assertRaises(NotYourTurn):
            self.room.roll("bob")
        self.assertIsNone(self.room.pending)
        self.assertEqual(self.dice.values, [6])

    def test_six_offers_every_base_piece(self):
        self.dice.push(6)
        events = self.room.roll("alice")
        self.assertEqual(events, [DiceRolled(player="alice", roll=6, movable=[0, 1, 2, 3])])
        self.assertEqual(self.room.pending.value, 6)
        self.assertEqual(self.room.turn, "alice")

    def test_no_legal_move_skips_turn(self):
        self.dice.push(4)
        events = self.room.roll("alice")
        self.assertEqual(events[0].movable, [])
        self.assertEqual(events[-1], TurnChanged(id="bob"))
        self.assertEqual(self.room.turn, "bob")
        self.assertEqual(self.room.turn_index, 1)
        self.assertIsNone(self.room.pending)
        self.assertIn("Alice rolled 4 and cannot move", self.room.log)

    def test_six_without_legal_move_still_passes(self):
        self.room.players["alice"].pieces = [52, 53, 54, 55]
        self.dice.push(6)
        self.room.roll("alice")
        self.assertEqual(self.room.turn, "bob")
        self.assertIsNone(self.room.pending)

    def test_cannot_reroll_pending(self):
        self.dice.push(6, 6)
        self.room.roll("alice")
        with self.assertRaises(DiceAlreadyRolled):
            self.room.roll("alice")
        self.assertEqual(self.dice.values, [6])


class TestMoving(unittest.TestCase):
    def setUp(self):
        self.room = make_room("Alice", "Bob")
        self.dice: FixedDice = self.room.dice
        self.alice = self.room.players["alice"]
        self.bob = self.room.players["bob"]

    def test_move_without_roll(self):
        with self.assertRaises(NoDiceRolled):
            self.room.move("alice", 0)

    def test_move_out_of_turn(self):
        self.dice.push(6)
        self.room.roll("alice")
        with self.assertRaises(NotYourTurn):
            self.room.move("bob", 0)

    def test_piece_not_in_movable_set(self):
        self.alice.pieces = [config.BASE, 10, config.FINISHED, config.BASE]
        self.dice.push(3)
        self.room.roll("alice")
        for bad in (0, 2, 3, 7, -1):
            with self.assertRaises(IllegalMove):
                self.room.move("alice", bad)
        self.assertEqual(self.alice.pieces, [config.BASE, 10, config.FINISHED, config.BASE])
        self.assertIsNotNone(self.room.pending)

    def test_exit_base_and_go_again(self):
        self.dice.push(6)
        self.room.roll("alice")
        events = self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], 0)
        self.assertIsInstance(events[0], BoardState)
        self.assertEqual(events[-1], TurnChanged(id="alice"))
        self.assertEqual(self.room.turn, "alice")
        self.assertIsNone(self.room.pending)
        self.assertIn("Alice rolls a six and goes again", self.room.log)

    def test_non_six_advances(self):
        self.alice.pieces[0] = 0
        self.dice.push(4)
        self.room.roll("alice")
        events = self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], 4)
        self.assertEqual(events[-1], TurnChanged(id="bob"))
        self.assertEqual(self.room.turn, "bob")

    def test_turn_wraps_around(self):
        self.dice.push(2, 2)
        self.room.roll("alice")
        self.room.roll("bob")
        self.assertEqual(self.room.turn, "alice")
        self.assertEqual(self.room.turn_index, 0)

    def test_board_state_lists_pieces(self):
        self.alice.pieces[0] = 0
        self.dice.push(5)
        self.room.roll("alice")
        state = self.room.move("alice", 0)[0]
        pieces = {p["id"]: p["pieces"] for p in state.players}
        self.assertEqual(pieces["alice"], [5, -1, -1, -1])
        self.assertEqual(pieces["bob"], [-1, -1, -1, -1])


class TestCaptures(unittest.TestCase):
    def setUp(self):
        self.room = make_room("Alice", "Bob", "Carol")
        self.dice: FixedDice = self.room.dice
        self.alice = self.room.players["alice"]  # red, offset 0
        self.bob = self.room.players["bob"]  # green, offset 13
        self.carol = self.room.players["carol"]  # yellow, offset 26

    def test_capture_on_plain_tile(self):
        self.alice.pieces[0] = 6
        self.bob.pieces[2] = 49  # absolute tile 10
        self.dice.push(4)
        self.room.roll("alice")
        log_len = len(self.room.log)
        self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], 10)
        self.assertEqual(self.bob.pieces[2], config.BASE)
        captures = [e for e in self.room.log[log_len:] if "captured" in e]
        self.assertEqual(captures, ["Bob's piece captured by Alice"])

    def test_no_capture_on_safe_tile(self):
        self.alice.pieces[0] = 4
        self.bob.pieces[0] = 47  # absolute tile 8
        self.dice.push(4)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], 8)
        self.assertEqual(self.bob.pieces[0], 47)
        self.assertFalse(any("captured" in e for e in self.room.log))

    def test_every_opponent_on_tile_is_captured(self):
        self.alice.pieces[0] = 6
        self.bob.pieces[0] = 49  # absolute 10
        self.carol.pieces[1] = 36  # absolute 10
        self.dice.push(4)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.bob.pieces[0], config.BASE)
        self.assertEqual(self.carol.pieces[1], config.BASE)
        self.assertEqual(sum("captured by Alice" in e for e in self.room.log), 2)

    def test_own_pieces_are_never_captured(self):
        self.alice.pieces[0] = 6
        self.alice.pieces[1] = 10
        self.dice.push(4)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[:2], [10, 10])

    def test_home_stretch_landing_never_captures(self):
        self.alice.pieces[0] = 50
        self.bob.pieces[0] = 42  # absolute tile 3
        self.dice.push(5)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], 55)
        self.assertEqual(self.bob.pieces[0], 42)

    def test_capture_after_six_keeps_turn(self):
        self.alice.pieces[0] = 4
        self.bob.pieces[0] = 49  # absolute 10
        self.dice.push(6)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.bob.pieces[0], config.BASE)
        self.assertEqual(self.room.turn, "alice")


class TestWinning(unittest.TestCase):
    def setUp(self):
        self.room = make_room("Alice", "Bob")
        self.dice: FixedDice = self.room.dice
        self.alice = self.room.players["alice"]

    def test_last_piece_home_wins(self):
        self.alice.pieces = [config.FINISHED] * 3 + [52]
        self.dice.push(5)
        self.assertEqual(self.room.roll("alice")[0].movable, [3])
        events = self.room.move("alice", 3)
        self.assertEqual(self.alice.pieces, [config.FINISHED] * 4)
        self.assertIsInstance(events[0], BoardState)
        self.assertEqual(
            events[-1],
            GameOver(winner={"id": "alice", "name": "Alice", "color": "red"}),
        )
        self.assertEqual(self.room.state, RoomState.FINISHED)
        self.assertEqual(self.room.winner, "alice")
        self.assertIsNone(self.room.pending)
        self.assertIn("Alice has won the game!", self.room.log)

    def test_reaching_final_cell_counts_as_finished(self):
        self.alice.pieces = [51, config.BASE, config.BASE, config.BASE]
        self.dice.push(6)
        self.room.roll("alice")
        self.room.move("alice", 0)
        self.assertEqual(self.alice.pieces[0], config.FINISHED)
        self.assertEqual(self.room.state, RoomState.IN_PROGRESS)

    def test_no_turns_after_game_over(self):
        self.alice.pieces = [config.FINISHED] * 3 + [56]
        self.dice.push(1)
        self.room.roll("alice")
        self.room.move("alice", 3)
        with self.assertRaises(GameFinished):
            self.room.roll("alice")
        with self.assertRaises(GameFinished):
            self.room.roll("bob")
        with self.assertRaises(GameFinished):
            self.room.move("alice", 0)


if __name__ == "__main__":
    unittest.main()

"""
Tests for the episode terminator.
"""

from hnqai.game import ATTACKER, DEFENDER, KING, Player
from hnqai.mdp import BoardState
from hnqai.termination import DEFAULT_MAX_GAME_LENGTH, HnefataflTerminator


def test_single_ply_budget_stops_immediately():
    terminator = HnefataflTerminator(1)
    assert terminator.should_stop(BoardState())
    assert terminator.remaining == 0


def test_counter_runs_down():
    terminator = HnefataflTerminator(3)
    state = BoardState()
    assert not terminator.should_stop(state)
    assert not terminator.should_stop(state)
    assert terminator.remaining == 1
    assert terminator.should_stop(state)


def test_default_length():
    terminator = HnefataflTerminator()
    assert terminator.remaining == DEFAULT_MAX_GAME_LENGTH
    assert not terminator.should_stop(BoardState())
    assert terminator.remaining == DEFAULT_MAX_GAME_LENGTH - 1


def test_stops_on_capture(board_factory):
    state = BoardState(board_factory({"c3": ATTACKER, "e5": DEFENDER}))
    assert HnefataflTerminator(100).should_stop(state)


def test_stops_on_escape(board_factory):
    state = BoardState(board_factory({"a11": KING, "c3": ATTACKER}))
    assert HnefataflTerminator(100).should_stop(state)


def test_stops_when_side_to_move_is_blocked(board_factory):
    # Attacker to move but has no pieces
    state = BoardState(board_factory({"f6": KING, "e5": DEFENDER}, turn=Player.ATTACKER))
    assert HnefataflTerminator(100).should_stop(state)


def test_instances_are_independent():
    a = HnefataflTerminator(2)
    b = HnefataflTerminator(2)
    state = BoardState()
    assert not a.should_stop(state)
    assert a.should_stop(state)
    assert not b.should_stop(state)

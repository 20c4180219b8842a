"""
Tests for the Hnefatafl rules: setup, notation, moves and captures.
"""

import pytest

from hnqai.game import (
    ATTACKER,
    CENTER,
    DEFENDER,
    KING,
    RESTRICTED,
    START_HNFEN,
    Board,
    IllegalMoveError,
    Move,
    Player,
    Position,
    possible_moves,
)


def test_default_board_setup():
    board = Board.default()
    assert len(board.pieces(Player.ATTACKER)) == 24
    assert len(board.pieces(Player.DEFENDER)) == 12
    assert board.king() == CENTER
    assert board.turn is Player.ATTACKER
    assert not board.king_escaped()


def test_hnfen_round_trip():
    board = Board.default()
    assert board.to_hnfen() == START_HNFEN
    assert Board.from_hnfen(board.to_hnfen()) == board


@pytest.mark.parametrize("text", [
    "",
    "11/11 a",
    "3aaaaa3/5a5/11/a4d4a/a3ddd3a/aa1ddkdd1aa/a3ddd3a/a4d4a/11/5a5/3aaaaa2 a",
    "3aaaaa3/5a5/11/a4d4a/a3ddd3a/aa1ddkdd1aa/a3ddd3a/a4d4a/11/5a5/3aaaaa3 x",
    "3aaaaa3/5a5/11/a4d4a/a3ddd3a/aa1ddkdd1aa/a3ddd3a/a4d4a/11/5a5/3aaqaa3 a",
    "k10/11/11/11/11/11/11/11/11/11/10k a",
])
def test_hnfen_rejects_malformed(text):
    with pytest.raises(ValueError):
        Board.from_hnfen(text)


def test_position_and_move_notation():
    assert Position.from_hnfen("f6") == CENTER
    assert str(Position(0, 10)) == "a11"
    move = Move.from_hnfen("d1-d5")
    assert move == Move(Position(3, 0), Position(3, 4))
    assert Move.from_hnfen("d1d5") == move
    assert str(move) == "d1-d5"
    with pytest.raises(ValueError):
        Move.from_hnfen("z1-z2")
    with pytest.raises(ValueError):
        Position.from_hnfen("a12")


def test_default_moves_belong_to_attackers():
    board = Board.default()
    moves = possible_moves(board)
    assert moves
    for m in moves:
        assert board.at(m.src) == ATTACKER
        assert m.dst not in RESTRICTED


def test_apply_passes_turn_and_moves_piece():
    board = Board.default()
    move = Move.from_hnfen("d11-d9")
    board.apply(move)
    assert board.turn is Player.DEFENDER
    assert board.at(Position.from_hnfen("d9")) == ATTACKER
    assert board.at(Position.from_hnfen("d11")) == 0


def test_apply_rejects_illegal_moves():
    board = Board.default()
    with pytest.raises(IllegalMoveError):
        board.apply(Move.from_hnfen("f8-f9"))  # defender on attacker's turn
    with pytest.raises(IllegalMoveError):
        board.apply(Move.from_hnfen("d11-c10"))  # diagonal
    with pytest.raises(IllegalMoveError):
        board.apply(Move.from_hnfen("a6-c6"))  # blocked by b6
    assert board == Board.default()


def test_throne_can_be_crossed_but_not_occupied(board_factory):
    board = board_factory({"f2": ATTACKER, "a5": KING})
    dests = {m.dst for m in possible_moves(board)}
    assert CENTER not in dests
    assert Position.from_hnfen("f10") in dests
    with pytest.raises(IllegalMoveError):
        board.copy().apply(Move.from_hnfen("f2-f6"))
    board.apply(Move.from_hnfen("f2-f10"))
    assert board.at(Position.from_hnfen("f10")) == ATTACKER


def test_custodial_capture(board_factory):
    board = board_factory({"e4": ATTACKER, "e5": DEFENDER, "e8": ATTACKER, "h2": KING})
    board.apply(Move.from_hnfen("e8-e6"))
    assert board.at(Position.from_hnfen("e5")) == 0
    assert len(board.pieces(Player.DEFENDER)) == 0


def test_corner_is_hostile(board_factory):
    board = board_factory({"b1": DEFENDER, "c5": ATTACKER, "h8": KING})
    board.apply(Move.from_hnfen("c5-c1"))
    assert board.at(Position.from_hnfen("b1")) == 0


def test_king_helps_capture(board_factory):
    board = board_factory({"d4": ATTACKER, "c4": KING, "e9": DEFENDER}, turn=Player.DEFENDER)
    board.apply(Move.from_hnfen("e9-e4"))
    assert board.at(Position.from_hnfen("d4")) == 0


def test_king_captured_when_surrounded(board_factory):
    board = board_factory({
        "f8": KING,
        "e8": ATTACKER,
        "g8": ATTACKER,
        "f9": ATTACKER,
        "h7": ATTACKER,
    })
    board.apply(Move.from_hnfen("h7-f7"))
    assert board.king() is None


def test_king_on_edge_not_captured(board_factory):
    board = board_factory({
        "f1": KING,
        "e1": ATTACKER,
        "g1": ATTACKER,
        "h2": ATTACKER,
    })
    board.apply(Move.from_hnfen("h2-f2"))
    assert board.king() == Position.from_hnfen("f1")


def test_king_escapes_to_corner(board_factory):
    board = board_factory({"a5": KING, "k11": ATTACKER}, turn=Player.DEFENDER)
    assert Move.from_hnfen("a5-a1") in possible_moves(board)
    board.apply(Move.from_hnfen("a5-a1"))
    assert board.king_escaped()


def test_board_copy_is_independent():
    board = Board.default()
    other = board.copy()
    other.apply(Move.from_hnfen("d11-d9"))
    assert board == Board.default()
    assert board != other
    assert hash(board) == hash(Board.default())


def test_pretty_marks_restricted_cells(board_factory):
    text = board_factory({"b2": KING}).pretty()
    lines = text.splitlines()
    assert lines[0].startswith("11 #")
    assert "k" in lines[9]
    assert lines[-1] == "attacker to move"

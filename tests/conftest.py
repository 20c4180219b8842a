import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from hnqai.game import SIZE, EMPTY, Board, Player, Position  # noqa: E402


def make_board(pieces, turn=Player.ATTACKER):
    """Build a board from {'f6': piece, ...}."""
    cells = [EMPTY] * (SIZE * SIZE)
    for cell, piece in pieces.items():
        cells[Position.from_hnfen(cell).index] = piece
    return Board(cells, turn)


@pytest.fixture
def board_factory():
    return make_board

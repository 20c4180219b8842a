"""
Episode termination.
"""

from .game import possible_moves
from .mdp import BoardState

DEFAULT_MAX_GAME_LENGTH = 1000


class HnefataflTerminator:
    """
    Stops a game on capture, escape, no legal moves, or after a fixed number
    of inspections. Holds per-episode state: create one per game.
    """

    def __init__(self, max_game_length: int = DEFAULT_MAX_GAME_LENGTH):
        self.remaining = max_game_length

    def should_stop(self, state: BoardState) -> bool:
        self.remaining -= 1
        board = state.board
        return (
            board.king() is None
            or board.king_escaped()
            or not possible_moves(board)
            or self.remaining <= 0
        )

"""
Learning problem for the Q-tables: states, actions and the reward signal.

A BoardState is a position seen from one side (its `player`). The same board
can be keyed differently for the attacker and the defender, and the number
of half-moves played is part of the key.
"""

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from .game import CENTER, Board, Move, Player, Position, possible_moves

WIN_REWARD = 1000.0

# King proximity is measured against this many nearest attackers
N_CLOSEST = 10


@dataclass(frozen=True)
class BoardMove:
    """Action: one piece move."""
    piece_move: Move

    @classmethod
    def from_hnfen(cls, text: str) -> "BoardMove":
        return cls(Move.from_hnfen(text))

    def __str__(self) -> str:
        return str(self.piece_move)


# Zero-length move offered when the game is over
NO_MOVE = BoardMove(Move(Position(0, 0), Position(0, 0)))


def king_proximity(king: Position, attackers: List[Position], n: int = N_CLOSEST) -> int:
    """Sum of Manhattan distances from the king to its n nearest attackers."""
    if not attackers:
        return 0
    dists = np.abs(np.asarray(attackers) - np.asarray(king)).sum(axis=1)
    return int(np.sort(dists)[:n].sum())


def centre_distance(pos: Position) -> int:
    return abs(CENTER.x - pos.x) + abs(CENTER.y - pos.y)


class BoardState:
    """Q-table key: board layout, perspective and half-move count."""

    def __init__(
        self,
        board: Optional[Board] = None,
        player: Player = Player.ATTACKER,
        num_moves: int = 0,
    ):
        self.board = board if board is not None else Board.default()
        self.player = player
        self.num_moves = num_moves

    def key(self):
        return self.board.layout(), self.player, self.num_moves

    def __eq__(self, other) -> bool:
        if not isinstance(other, BoardState):
            return NotImplemented
        return (
            self.player is other.player
            and self.num_moves == other.num_moves
            and self.board == other.board
        )

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        return f"BoardState({self.board.to_hnfen()!r}, {self.player}, {self.num_moves})"

    def clone(self) -> "BoardState":
        return BoardState(self.board.copy(), self.player, self.num_moves)

    def viewed_by(self, player: Player) -> "BoardState":
        """Same position seen by `player`. Shares the board, use for lookups only."""
        if player is self.player:
            return self
        return BoardState(self.board, player, self.num_moves)

    def is_terminal(self) -> bool:
        return self.board.king() is None or self.board.king_escaped()

    def reward(self) -> float:
        king = self.board.king()
        defending = self.player is Player.DEFENDER

        if self.board.king_escaped():
            return WIN_REWARD if defending else -WIN_REWARD
        if king is None:
            return -WIN_REWARD if defending else WIN_REWARD

        attackers = self.board.pieces(Player.ATTACKER)
        n_att = len(attackers)
        # Penalise long games
        urgency = self.num_moves / 4

        if defending:
            return centre_distance(king) * 10.0 - n_att - urgency

        kd = king_proximity(king, attackers)
        return n_att + (min(N_CLOSEST, n_att) * 10.0 - kd) * 2.0 - urgency

    def actions(self) -> List[BoardMove]:
        if self.is_terminal():
            return [NO_MOVE]
        # A blocked side still gets the sentinel, the learner needs one action
        return [BoardMove(m) for m in possible_moves(self.board)] or [NO_MOVE]

    def to_key(self) -> str:
        """Text form used in save files."""
        return f"{self.board.to_hnfen()}|{self.player.value}|{self.num_moves}"

    @classmethod
    def from_key(cls, text: str) -> "BoardState":
        hnfen, player, num_moves = text.split("|")
        return cls(Board.from_hnfen(hnfen), Player(player), int(num_moves))

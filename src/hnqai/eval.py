"""
Evaluation functions.

Plays the trained tables against each other and against a random opponent,
and tracks how both sides' rewards evolve over a game.
"""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .game import Board, Player
from .mdp import BoardMove, BoardState
from .policy import apply_best_action
from .termination import DEFAULT_MAX_GAME_LENGTH, HnefataflTerminator
from .train import Trainers, classify_outcome


@dataclass
class GameTrace:
    """Boards of one game and the move leading to each following board."""
    boards: List[BoardState] = field(default_factory=list)
    moves: List[Optional[BoardMove]] = field(default_factory=list)


def run_best_game(
    trainers: Trainers,
    max_game_length: int = DEFAULT_MAX_GAME_LENGTH,
    rng: Optional[random.Random] = None,
) -> GameTrace:
    """Play attacker table against defender table from the initial position."""
    state = BoardState(Board.default(), Player.ATTACKER, 0)
    terminator = HnefataflTerminator(max_game_length)
    trace = GameTrace()
    trace.boards.append(state.clone())

    while True:
        move = trainers.apply_best(state, rng)
        if move is not None:
            state.num_moves += 1
        trace.moves.append(move)
        trace.boards.append(state.clone())
        if move is None or terminator.should_stop(state):
            return trace


def reward_progression(trace: GameTrace) -> Dict[str, List[float]]:
    """Attacker and defender reward of every board in a trace."""
    return {
        "attack": [s.viewed_by(Player.ATTACKER).reward() for s in trace.boards],
        "defense": [s.viewed_by(Player.DEFENDER).reward() for s in trace.boards],
    }


def play_vs_random(
    trainers: Trainers,
    trained_side: Player,
    max_game_length: int = DEFAULT_MAX_GAME_LENGTH,
    rng: Optional[random.Random] = None,
) -> str:
    """
    One game of a trained side against a random mover.

    Returns:
        'capture', 'escape' or 'draw'
    """
    state = BoardState(Board.default(), Player.ATTACKER, 0)
    terminator = HnefataflTerminator(max_game_length)
    trained = trainers.for_player(trained_side)

    while True:
        trainer = trained if state.board.turn is trained_side else None
        if apply_best_action(state, trainer, rng) is None:
            break
        state.num_moves += 1
        if terminator.should_stop(state):
            break
    return classify_outcome(state.board)


def eval_vs_random(
    trainers: Trainers,
    games: int = 100,
    max_game_length: int = DEFAULT_MAX_GAME_LENGTH,
    rng: Optional[random.Random] = None,
) -> Dict[str, float]:
    """
    Evaluate both tables against a random opponent, alternating sides.

    Returns:
        Dict with '<side>_w', '<side>_d', '<side>_l' rates and '<side>_games'
    """
    wins = {Player.ATTACKER: 0, Player.DEFENDER: 0}
    draws = {Player.ATTACKER: 0, Player.DEFENDER: 0}
    played = {Player.ATTACKER: 0, Player.DEFENDER: 0}
    winning_outcome = {Player.ATTACKER: "capture", Player.DEFENDER: "escape"}

    for g in range(games):
        side = Player.ATTACKER if g % 2 == 0 else Player.DEFENDER
        outcome = play_vs_random(trainers, side, max_game_length, rng)
        played[side] += 1
        if outcome == "draw":
            draws[side] += 1
        elif outcome == winning_outcome[side]:
            wins[side] += 1

    results = {}
    for side in (Player.ATTACKER, Player.DEFENDER):
        n = played[side]
        name = str(side)
        results[f"{name}_games"] = n
        results[f"{name}_w"] = wins[side] / n if n else 0.0
        results[f"{name}_d"] = draws[side] / n if n else 0.0
        results[f"{name}_l"] = (n - wins[side] - draws[side]) / n if n else 0.0
    return results

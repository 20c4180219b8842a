"""
Move selection from a learned Q-table.

Values within TIE_TOLERANCE of the best stored value are treated as equal and
the move is drawn at random among them. Moves the table has never seen are
only considered when no move has a stored value.
"""

import random
from typing import List, Optional

from .mdp import NO_MOVE, BoardMove, BoardState
from .qlearning import AgentTrainer

TIE_TOLERANCE = 0.01


def best_actions(state: BoardState, trainer: AgentTrainer, actions: List[BoardMove]) -> List[BoardMove]:
    """
    Pool the best-valued actions for the side to move.

    The table is queried with the state seen by the side to move, which is
    how an agent's own table is keyed during training.
    """
    view = state.viewed_by(state.board.turn)
    known = []
    unvisited: List[BoardMove] = []

    for action in actions:
        value = trainer.expected_value(view, action)
        if value is None:
            unvisited.append(action)
        else:
            known.append((action, value))

    if not known:
        return unvisited

    best = max(value for _, value in known)
    return [action for action, value in known if best - value <= TIE_TOLERANCE]


def apply_best_action(
    state: BoardState,
    trainer: Optional[AgentTrainer] = None,
    rng: Optional[random.Random] = None,
) -> Optional[BoardMove]:
    """
    Choose a move, apply it to state.board in place and return it.

    With no trainer the move is uniform random. Returns None, leaving the
    board untouched, when the game is over or there is nothing to play.
    state.num_moves is left to the caller.
    """
    if rng is None:
        rng = random

    actions = [a for a in state.actions() if a != NO_MOVE]
    if not actions:
        return None

    if trainer is not None:
        actions = best_actions(state, trainer, actions)

    chosen = rng.choice(actions)
    state.board.apply(chosen.piece_move)
    return chosen

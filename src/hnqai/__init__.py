"""
hnqai - Q-learning attacker and defender agents for Hnefatafl.

Two tabular agents are trained against each other by self-play and their
value tables are saved for later games.
"""

from .game import Board, Move, Player, Position, IllegalMoveError, possible_moves
from .mdp import BoardState, BoardMove, NO_MOVE
from .termination import HnefataflTerminator, DEFAULT_MAX_GAME_LENGTH
from .qlearning import AgentTrainer, QLearning, RandomExploration
from .policy import apply_best_action, best_actions, TIE_TOLERANCE
from .train import (
    SAVE_FILE,
    TrainConfig,
    Trainers,
    SelfPlayAgent,
    Outcomes,
    train_epoch,
    train_self_play,
)
from .persist import AIs, load_state, load_trainers, save_state, save_trainers
from .eval import GameTrace, run_best_game, reward_progression, eval_vs_random

__version__ = "0.1.0"
__all__ = [
    "Board",
    "Move",
    "Player",
    "Position",
    "IllegalMoveError",
    "possible_moves",
    "BoardState",
    "BoardMove",
    "NO_MOVE",
    "HnefataflTerminator",
    "DEFAULT_MAX_GAME_LENGTH",
    "AgentTrainer",
    "QLearning",
    "RandomExploration",
    "apply_best_action",
    "best_actions",
    "TIE_TOLERANCE",
    "SAVE_FILE",
    "TrainConfig",
    "Trainers",
    "SelfPlayAgent",
    "Outcomes",
    "train_epoch",
    "train_self_play",
    "AIs",
    "load_state",
    "load_trainers",
    "save_state",
    "save_trainers",
    "GameTrace",
    "run_best_game",
    "reward_progression",
    "eval_vs_random",
]

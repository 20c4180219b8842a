"""
Self-play training: configuration, agents and the epoch loop.
"""

import random
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

from tqdm.auto import trange, tqdm

from .game import Board, Player
from .mdp import NO_MOVE, BoardMove, BoardState
from .policy import apply_best_action
from .qlearning import AgentTrainer, QLearning, RandomExploration
from .termination import HnefataflTerminator

SAVE_FILE = "qstates.json"


@dataclass
class TrainConfig:
    """Training configuration."""

    # Random seed
    seed: int = 0

    # Outer iterations
    epochs: int = 500

    # Attacker games and defender games per epoch (each)
    games_per_epoch: int = 50

    # Hard cap on training steps per game
    max_ply: int = 5000

    # Q-learning
    alpha: float = 0.2  # Few opponent replies are random
    gamma: float = 1.0 - 1.0 / 50.0  # Typical games last about 50 rounds
    initial_value: float = 2.0

    # Paths
    save_path: str = SAVE_FILE
    save_dir: str = "runs"


class Trainers:
    """The attacker's and the defender's tables."""

    def __init__(self, attacker: Optional[AgentTrainer] = None, defender: Optional[AgentTrainer] = None):
        self.attacker = attacker if attacker is not None else AgentTrainer()
        self.defender = defender if defender is not None else AgentTrainer()

    def for_player(self, player: Player) -> AgentTrainer:
        return self.attacker if player is Player.ATTACKER else self.defender

    def apply_best(self, state: BoardState, rng: Optional[random.Random] = None) -> Optional[BoardMove]:
        """Play the best known move for whichever side is to move."""
        return apply_best_action(state, self.for_player(state.board.turn), rng)


class SelfPlayAgent:
    """
    Learner's view of a game: each action is answered at once by the
    opponent, so one step covers two half-moves. The opponent's table is only
    read; with no opponent table the reply is random.
    """

    def __init__(
        self,
        state: BoardState,
        opponent: Optional[AgentTrainer] = None,
        rng: Optional[random.Random] = None,
    ):
        self.state = state
        self.opponent = opponent
        self.rng = rng

    def current_state(self) -> BoardState:
        return self.state

    def take_action(self, action: BoardMove) -> None:
        if action == NO_MOVE:
            return
        self.state.board.apply(action.piece_move)
        self.state.num_moves += 1
        if apply_best_action(self.state, self.opponent, self.rng) is not None:
            self.state.num_moves += 1


def classify_outcome(board: Board) -> str:
    if board.king() is None:
        return "capture"
    if board.king_escaped():
        return "escape"
    return "draw"


@dataclass
class Outcomes:
    """Running game results."""
    escape_wins: int = 0
    capture_wins: int = 0
    draws: int = 0

    def record(self, board: Board) -> str:
        outcome = classify_outcome(board)
        if outcome == "capture":
            self.capture_wins += 1
        elif outcome == "escape":
            self.escape_wins += 1
        else:
            self.draws += 1
        return outcome

    @property
    def total(self) -> int:
        return self.escape_wins + self.capture_wins + self.draws


def play_training_game(
    learner: AgentTrainer,
    opponent: Optional[AgentTrainer],
    start: BoardState,
    config: TrainConfig,
    rng: random.Random,
) -> BoardState:
    """Train `learner` on one game from `start`. Returns the final state."""
    agent = SelfPlayAgent(start, opponent, rng)
    learner.train(
        agent,
        QLearning(config.alpha, config.gamma, config.initial_value),
        HnefataflTerminator(config.max_ply),
        RandomExploration(rng),
    )
    return agent.state


def defender_start(attacker: AgentTrainer, rng: random.Random) -> BoardState:
    """Initial position after the attacker's best opening move."""
    state = BoardState(Board.default(), Player.ATTACKER, 0)
    if apply_best_action(state, attacker, rng) is not None:
        state.num_moves += 1
    state.player = Player.DEFENDER
    return state


def train_epoch(trainers: Trainers, config: TrainConfig, rng: random.Random, outcomes: Outcomes) -> None:
    """One epoch: attacker games then defender games, smart and random opponents alternating."""
    for g in range(1, config.games_per_epoch + 1):
        opponent = trainers.defender if g % 2 == 1 else None
        start = BoardState(Board.default(), Player.ATTACKER, 0)
        final = play_training_game(trainers.attacker, opponent, start, config, rng)
        outcomes.record(final.board)

    for g in range(1, config.games_per_epoch + 1):
        opponent = trainers.attacker if g % 2 == 1 else None
        start = defender_start(trainers.attacker, rng)
        final = play_training_game(trainers.defender, opponent, start, config, rng)
        outcomes.record(final.board)


def train_self_play(
    trainers: Trainers,
    config: TrainConfig,
    rng: Optional[random.Random] = None,
    history: Optional[List[Dict]] = None,
    progress: bool = True,
) -> List[Dict]:
    """
    Run config.epochs epochs of self-play.

    One row per finished epoch is appended to `history` (a new list if not
    given), so a caller interrupting the run keeps the rows collected so far.
    """
    if rng is None:
        rng = random.Random(config.seed)
    if history is None:
        history = []
    outcomes = Outcomes()

    for epoch in trange(1, config.epochs + 1, desc="Training", disable=not progress):
        t0 = time.perf_counter()
        train_epoch(trainers, config, rng, outcomes)

        history.append({
            "epoch": epoch,
            "games": outcomes.total,
            "escape_wins": outcomes.escape_wins,
            "capture_wins": outcomes.capture_wins,
            "draws": outcomes.draws,
            "attacker_states": len(trainers.attacker),
            "defender_states": len(trainers.defender),
            "epoch_s": time.perf_counter() - t0,
        })
        if progress:
            tqdm.write(
                f"Epoch {epoch} ({outcomes.total} total games): "
                f"{outcomes.escape_wins} wins by escape, "
                f"{outcomes.capture_wins} wins by attack, "
                f"{outcomes.draws} draws"
            )

    return history

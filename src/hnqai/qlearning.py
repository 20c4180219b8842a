"""
Tabular Q-learning: value store, update rule and exploration.

The trainer is generic over the state type. A state must be hashable and
provide clone(), actions() and reward(). An agent wraps the environment and
provides current_state() and take_action(action).
"""

import random
from typing import Dict, Hashable, Optional

QTable = Dict[Hashable, Dict[Hashable, float]]


class QLearning:
    """
    Q-learning update:

        Q(s, a) <- (1 - alpha) * Q(s, a) + alpha * (r + gamma * max_a' Q(s', a'))

    Unseen values (Q(s, a) and the next-state maximum) start at initial_value.
    """

    def __init__(self, alpha: float, gamma: float, initial_value: float):
        self.alpha = alpha
        self.gamma = gamma
        self.initial_value = initial_value

    def value(
        self,
        next_action_values: Optional[Dict[Hashable, float]],
        current_value: Optional[float],
        reward: float,
    ) -> float:
        if next_action_values:
            max_next = max(next_action_values.values())
        else:
            max_next = self.initial_value
        old = self.initial_value if current_value is None else current_value
        return (1.0 - self.alpha) * old + self.alpha * (reward + self.gamma * max_next)


class RandomExploration:
    """Pick uniformly among the current state's actions."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    def pick_action(self, agent):
        action = self.rng.choice(agent.current_state().actions())
        agent.take_action(action)
        return action


class AgentTrainer:
    """Owns one Q-table and trains it from episodes played by an agent."""

    def __init__(self):
        self.q: QTable = {}

    def __len__(self) -> int:
        return len(self.q)

    def expected_values(self, state) -> Optional[Dict[Hashable, float]]:
        return self.q.get(state)

    def expected_value(self, state, action) -> Optional[float]:
        values = self.q.get(state)
        if values is None:
            return None
        return values.get(action)

    def export_state(self) -> QTable:
        return self.q

    def import_state(self, q: QTable) -> None:
        self.q = q

    def train(self, agent, learning_strategy, termination_strategy, exploration_strategy) -> int:
        """
        Play one episode, updating the table after every step.

        Returns:
            Number of steps taken
        """
        steps = 0
        while True:
            s_t = agent.current_state().clone()
            action = exploration_strategy.pick_action(agent)
            steps += 1

            s_next = agent.current_state()
            r_next = s_next.reward()
            v = learning_strategy.value(
                self.q.get(s_next),
                self.expected_value(s_t, action),
                r_next,
            )
            self.q.setdefault(s_t, {})[action] = v

            if termination_strategy.should_stop(s_next):
                return steps

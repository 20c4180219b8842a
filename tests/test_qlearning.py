"""
Tests for the Q-value store, update rule and exploration.
"""

import random

import pytest

from hnqai.qlearning import AgentTrainer, QLearning, RandomExploration


class CounterState:
    """Toy state: a counter whose reward is its value."""

    def __init__(self, n=0):
        self.n = n

    def __eq__(self, other):
        return isinstance(other, CounterState) and self.n == other.n

    def __hash__(self):
        return hash(self.n)

    def clone(self):
        return CounterState(self.n)

    def actions(self):
        return ["inc", "stay"]

    def reward(self):
        return float(self.n)


class CounterAgent:
    def __init__(self):
        self.state = CounterState()
        self.taken = []

    def current_state(self):
        return self.state

    def take_action(self, action):
        self.taken.append(action)
        self.state.n += 1


class StopAt:
    def __init__(self, n):
        self.n = n

    def should_stop(self, state):
        return state.n >= self.n


class AlwaysInc:
    def pick_action(self, agent):
        agent.take_action("inc")
        return "inc"


def test_update_without_history():
    q = QLearning(alpha=0.5, gamma=0.5, initial_value=2.0)
    assert q.value(None, None, 10.0) == pytest.approx(0.5 * 2.0 + 0.5 * (10.0 + 0.5 * 2.0))


def test_update_uses_best_next_value():
    q = QLearning(alpha=0.5, gamma=0.5, initial_value=2.0)
    assert q.value({"x": 4.0, "y": 8.0}, 1.0, 10.0) == pytest.approx(0.5 * 1.0 + 0.5 * (10.0 + 4.0))


def test_expected_value_unknown():
    trainer = AgentTrainer()
    assert trainer.expected_value(CounterState(), "inc") is None
    trainer.q[CounterState()] = {"inc": 1.5}
    assert trainer.expected_value(CounterState(), "inc") == 1.5
    assert trainer.expected_value(CounterState(), "stay") is None
    assert trainer.expected_values(CounterState(1)) is None


def test_train_episode_updates_each_step():
    trainer = AgentTrainer()
    learning = QLearning(alpha=0.5, gamma=0.5, initial_value=0.0)
    steps = trainer.train(CounterAgent(), learning, StopAt(3), AlwaysInc())

    assert steps == 3
    assert set(trainer.q) == {CounterState(0), CounterState(1), CounterState(2)}
    assert trainer.expected_value(CounterState(0), "inc") == pytest.approx(0.5)
    assert trainer.expected_value(CounterState(1), "inc") == pytest.approx(1.0)
    assert trainer.expected_value(CounterState(2), "inc") == pytest.approx(1.5)

    # Second episode bootstraps from the values learned above
    trainer.train(CounterAgent(), learning, StopAt(3), AlwaysInc())
    assert trainer.expected_value(CounterState(0), "inc") == pytest.approx(0.25 + 0.5 * (1.0 + 0.5 * 1.0))


def test_keys_are_snapshots():
    trainer = AgentTrainer()
    agent = CounterAgent()
    trainer.train(agent, QLearning(0.5, 0.5, 0.0), StopAt(2), AlwaysInc())
    assert agent.state.n == 2
    assert CounterState(0) in trainer.q


def test_random_exploration_takes_action():
    agent = CounterAgent()
    exploration = RandomExploration(random.Random(0))
    seen = {exploration.pick_action(agent) for _ in range(50)}
    assert seen == {"inc", "stay"}
    assert len(agent.taken) == 50


def test_import_export():
    trainer = AgentTrainer()
    table = {CounterState(4): {"inc": 0.25}}
    trainer.import_state(table)
    assert trainer.export_state() is table
    assert len(trainer) == 1

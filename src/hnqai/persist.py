"""
Saving and loading the two Q-tables.

File layout (JSON):
    {"attacker": {state_key: {move: value, ...}, ...},
     "defender": {...}}

State keys are BoardState.to_key() strings and moves are 'src-dst'. Floats
are written with repr precision, so a load followed by a save reproduces the
file byte for byte.
"""

import contextlib
import json
import os
import tempfile
from dataclasses import dataclass
from typing import Dict, Optional

from tqdm.auto import tqdm

from .mdp import BoardMove, BoardState
from .qlearning import AgentTrainer, QTable
from .train import Trainers


@dataclass
class AIs:
    attacker: QTable
    defender: QTable


def encode_table(table: QTable) -> Dict[str, Dict[str, float]]:
    return {
        state.to_key(): {str(move): float(value) for move, value in values.items()}
        for state, values in table.items()
    }


def decode_table(raw) -> QTable:
    """Inverse of encode_table. Raises ValueError on anything unexpected."""
    if not isinstance(raw, dict):
        raise ValueError(f"Expected a table, got {type(raw).__name__}")
    table: QTable = {}
    for state_key, values in raw.items():
        if not isinstance(values, dict):
            raise ValueError(f"Expected move values for {state_key!r}")
        moves = {}
        for move_key, value in values.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Bad value for {state_key!r} {move_key!r}: {value!r}")
            moves[BoardMove.from_hnfen(move_key)] = float(value)
        table[BoardState.from_key(state_key)] = moves
    return table


def load_state(path: str) -> Optional[AIs]:
    """Read both tables. Returns None if the file is missing or malformed."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        return AIs(
            attacker=decode_table(raw["attacker"]),
            defender=decode_table(raw["defender"]),
        )
    except (OSError, ValueError, KeyError, TypeError):
        return None


def load_trainers(path: str) -> Trainers:
    state = load_state(path)
    if state is None:
        tqdm.write(f"Loading trainers from {path} failed, returning new trainers!")
        return Trainers()

    attacker = AgentTrainer()
    defender = AgentTrainer()
    attacker.import_state(state.attacker)
    defender.import_state(state.defender)
    return Trainers(attacker, defender)


def save_state(path: str, attacker: QTable, defender: QTable) -> bool:
    """
    Write both tables, replacing the file at `path` atomically.

    Failures are reported and swallowed. Returns whether the save succeeded.
    """
    tmp_path = None
    try:
        record = {"attacker": encode_table(attacker), "defender": encode_table(defender)}
        directory = os.path.dirname(os.path.abspath(path))
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, suffix=".tmp", delete=False
        ) as f:
            tmp_path = f.name
            json.dump(record, f)
        os.replace(tmp_path, path)
        return True
    except (OSError, ValueError, TypeError) as e:
        tqdm.write(f"Saving trainers to {path} failed: {e}")
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
        return False


def save_trainers(path: str, trainers: Trainers) -> bool:
    return save_state(path, trainers.attacker.export_state(), trainers.defender.export_state())

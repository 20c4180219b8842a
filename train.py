#!/usr/bin/env python3
"""
Train the Hnefatafl attacker and defender Q-tables by self-play.

Loads existing tables from the save file (or starts fresh), trains, then
saves the tables and writes the run's config, history and plots.

Usage:
    python train.py                    # Full training (500 epochs)
    python train.py --epochs 5         # Quick demo
    python train.py --epochs 100 --games-per-epoch 20 --max-ply 2000
"""

import sys
import json
import random
import argparse
from dataclasses import asdict
from pathlib import Path

import numpy as np
from tqdm.auto import tqdm

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from hnqai import (
    SAVE_FILE,
    TrainConfig,
    load_trainers,
    save_trainers,
    train_self_play,
)


def set_seed(seed: int):
    """Set random seeds for reproducibility."""
    random.seed(seed)


def create_all_plots(history: list, output_dir: Path):
    """Create training plots from the per-epoch history."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    pd = __import__('pandas')
    df = pd.DataFrame(history)

    # 1. Outcome totals
    plt.figure(figsize=(10, 6))
    plt.plot(df['epoch'], df['escape_wins'], label='Escape wins', linewidth=2)
    plt.plot(df['epoch'], df['capture_wins'], label='Capture wins', linewidth=2)
    plt.plot(df['epoch'], df['draws'], label='Draws', linewidth=2)
    plt.title('Game Outcomes (cumulative)', fontsize=14, fontweight='bold')
    plt.xlabel('Epoch', fontsize=12)
    plt.ylabel('Games', fontsize=12)
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_dir / 'plot_1_outcomes.png', dpi=150, bbox_inches='tight')
    plt.close()

    # 2. Per-epoch outcome rates
    per_epoch = df[['escape_wins', 'capture_wins', 'draws']].diff().fillna(df[['escape_wins', 'capture_wins', 'draws']])
    games = per_epoch.sum(axis=1).replace(0, np.nan)
    plt.figure(figsize=(10, 6))
    for col, label in [('escape_wins', 'Escape'), ('capture_wins', 'Capture'), ('draws', 'Draw')]:
        plt.plot(df['epoch'], per_epoch[col] / games, label=label, linewidth=2)
    plt.title('Outcome Rate per Epoch', fontsize=14, fontweight='bold')
    plt.xlabel('Epoch', fontsize=12)
    plt.ylabel('Rate', fontsize=12)
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_dir / 'plot_2_outcome_rates.png', dpi=150, bbox_inches='tight')
    plt.close()

    # 3. Table sizes
    plt.figure(figsize=(10, 6))
    plt.plot(df['epoch'], df['attacker_states'], label='Attacker', linewidth=2)
    plt.plot(df['epoch'], df['defender_states'], label='Defender', linewidth=2)
    plt.title('Q-table Size (states)', fontsize=14, fontweight='bold')
    plt.xlabel('Epoch', fontsize=12)
    plt.ylabel('States', fontsize=12)
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_dir / 'plot_3_table_size.png', dpi=150, bbox_inches='tight')
    plt.close()

    # 4. Epoch time
    plt.figure(figsize=(10, 6))
    plt.plot(df['epoch'], df['epoch_s'], linewidth=2)
    plt.title('Epoch Time', fontsize=14, fontweight='bold')
    plt.xlabel('Epoch', fontsize=12)
    plt.ylabel('Seconds', fontsize=12)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(output_dir / 'plot_4_epoch_time.png', dpi=150, bbox_inches='tight')
    plt.close()


def main():
    parser = argparse.ArgumentParser(description="Train Hnefatafl Q-tables by self-play")
    parser.add_argument("-e", "--epochs", type=int, default=500, help="Number of epochs to run")
    parser.add_argument("--games-per-epoch", type=int, default=50, help="Attacker and defender games per epoch")
    parser.add_argument("--max-ply", type=int, default=5000, help="Maximum training steps per game")
    parser.add_argument("--alpha", type=float, default=0.2, help="Learning rate")
    parser.add_argument("--gamma", type=float, default=1.0 - 1.0 / 50.0, help="Discount factor")
    parser.add_argument("--initial-value", type=float, default=2.0, help="Initial Q-value")
    parser.add_argument("--save-file", type=str, default=SAVE_FILE, help="Q-table save file")
    parser.add_argument("--run-name", type=str, default="hnqai_run", help="Run name for reports")
    parser.add_argument("--save-dir", type=str, default="runs", help="Report directory")
    parser.add_argument("--seed", type=int, default=0, help="Random seed")
    parser.add_argument("--no-plots", action="store_true", help="Skip plot generation")

    args = parser.parse_args()

    set_seed(args.seed)

    # Config
    config = TrainConfig(
        seed=args.seed,
        epochs=args.epochs,
        games_per_epoch=args.games_per_epoch,
        max_ply=args.max_ply,
        alpha=args.alpha,
        gamma=args.gamma,
        initial_value=args.initial_value,
        save_path=args.save_file,
        save_dir=args.save_dir,
    )

    # Create run directory
    run_dir = Path(args.save_dir) / args.run_name
    run_dir.mkdir(parents=True, exist_ok=True)

    with open(run_dir / "config.json", "w") as f:
        json.dump(asdict(config), f, indent=2)

    print(f"Loading trainers from {config.save_path}")
    trainers = load_trainers(config.save_path)
    print(f"Attacker states: {len(trainers.attacker):,} | Defender states: {len(trainers.defender):,}")

    print("\n=== Training ===")
    history = []
    try:
        train_self_play(trainers, config, random.Random(config.seed), history)
    except KeyboardInterrupt:
        tqdm.write(f"Interrupted after {len(history)} epochs, saving what was learned")

    print("\n=== Saving ===")
    if save_trainers(config.save_path, trainers):
        print(f"✓ Q-tables saved to {config.save_path}")

    if not history:
        return

    import pandas as pd
    pd.DataFrame(history).to_csv(run_dir / "history.csv", index=False)
    print(f"✓ History saved to {run_dir / 'history.csv'}")

    if not args.no_plots:
        plots_dir = run_dir / "plots"
        plots_dir.mkdir(exist_ok=True)
        create_all_plots(history, plots_dir)
        print(f"✓ Plots saved to {plots_dir}")

    final = history[-1]
    print("\n=== Final Results ===")
    print(f"Games:    {final['games']}")
    print(f"Escapes:  {final['escape_wins']}")
    print(f"Captures: {final['capture_wins']}")
    print(f"Draws:    {final['draws']}")


if __name__ == "__main__":
    main()

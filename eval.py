#!/usr/bin/env python3
"""
Evaluate trained Hnefatafl Q-tables, or play against them.

Usage:
    python eval.py                              # vs random opponent
    python eval.py --report                     # best-vs-best game and reward plot
    python eval.py --play                       # interactive game
    python eval.py --save-file qstates.json --games 200
"""

import sys
import random
import argparse
from pathlib import Path

# Add src to path
sys.path = [str(Path(__file__).parent / "src")] + sys.path

from hnqai import (
    SAVE_FILE,
    DEFAULT_MAX_GAME_LENGTH,
    load_trainers,
    run_best_game,
    reward_progression,
    eval_vs_random,
)


def query(msg: str) -> str:
    return input(f"{msg} ").strip()


def play_interactive(trainers, rng):
    """Play games against the trained tables until the user quits."""
    from hnqai import Board, BoardState, HnefataflTerminator, Move, Player

    while True:
        answer = query("Use default board? [Y/n]")
        if answer in ("n", "N"):
            try:
                board = Board.from_hnfen(query("Enter board hnfen:"))
            except ValueError as e:
                print(e)
                continue
        else:
            print("Using default board")
            board = Board.default()
        state = BoardState(board, board.turn, 0)

        answer = query("Is the human player (a)ttacker or (d)efender? [a/d]")
        if answer in ("a", "A"):
            human = Player.ATTACKER
        elif answer in ("d", "D"):
            human = Player.DEFENDER
        else:
            print("Unknown player")
            continue

        terminator = HnefataflTerminator(DEFAULT_MAX_GAME_LENGTH)
        print("\n=== Interactive Game ===")
        print(state.board.pretty())

        game_over = terminator.should_stop(state)
        while not game_over:
            if state.board.turn is human:
                text = query("Human move:")
                if text in ("q", "quit"):
                    break
                try:
                    move = Move.from_hnfen(text)
                    state.board.apply(move)
                except ValueError as e:
                    print(f"Interpreting move failed, try again: {e}")
                    continue
                state.num_moves += 1
                print(f"Player's move: {move}\n{state.board.pretty()}")
                game_over = terminator.should_stop(state)
            else:
                cpu_move = trainers.apply_best(state, rng)
                if cpu_move is None:
                    break
                state.num_moves += 1
                print(f"CPU's move: {cpu_move}\n{state.board.pretty()}")
                game_over = terminator.should_stop(state)

        if state.board.king_escaped():
            print("\nGame over: defender won")
        elif state.board.king() is None:
            print("\nGame over: attacker won")
        else:
            print("\nGame over: draw")

        if query("Quit? [q]") in ("Q", "q", "quit"):
            return


def report_best_game(trainers, max_game_length, out_path: Path, rng):
    """Print a best-vs-best game with rewards and plot the reward progression."""
    trace = run_best_game(trainers, max_game_length, rng)
    rewards = reward_progression(trace)

    for i, state in enumerate(trace.boards):
        print(state.board.pretty())
        print(f"attack reward = {rewards['attack'][i]}, defense reward = {rewards['defense'][i]}")
        if i < len(trace.moves) and trace.moves[i] is not None:
            print(f"{i + 1}. {trace.moves[i]}")
        else:
            print(f"{i + 1}: No move")

    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt

    plt.figure(figsize=(10, 6))
    plt.plot(rewards['attack'], color='red', label='Attacker', linewidth=2)
    plt.plot(rewards['defense'], color='blue', label='Defender', linewidth=2)
    plt.title('Reward progression', fontsize=14, fontweight='bold')
    plt.xlabel('Half-move', fontsize=12)
    plt.ylabel('Reward', fontsize=12)
    plt.legend()
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    plt.savefig(out_path, dpi=150, bbox_inches='tight')
    plt.close()
    print(f"\n✓ Reward plot saved to {out_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate Hnefatafl Q-tables")
    parser.add_argument("--save-file", type=str, default=SAVE_FILE, help="Q-table save file")
    parser.add_argument("--play", action="store_true", help="Play interactive game")
    parser.add_argument("--report", action="store_true", help="Print best-vs-best game and plot rewards")
    parser.add_argument("--plot", type=str, default="reward_progression.png", help="Reward plot path")
    parser.add_argument("--games", type=int, default=100, help="Number of eval games")
    parser.add_argument("--max-game-length", type=int, default=DEFAULT_MAX_GAME_LENGTH, help="Half-move limit")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()
    rng = random.Random(args.seed)

    print("Loading trainers into memory")
    trainers = load_trainers(args.save_file)
    print(f"Done loading: {len(trainers.attacker):,} attacker / {len(trainers.defender):,} defender states")

    if args.play:
        play_interactive(trainers, rng)
        return

    if args.report:
        report_best_game(trainers, args.max_game_length, Path(args.plot), rng)
        return

    print(f"\nvs Random ({args.games} games)...")
    results = eval_vs_random(trainers, games=args.games, max_game_length=args.max_game_length, rng=rng)
    for side in ("attacker", "defender"):
        print(f"  {side.capitalize()} ({results[f'{side}_games']} games)")
        print(f"    Wins:   {results[f'{side}_w']:.2%}")
        print(f"    Draws:  {results[f'{side}_d']:.2%}")
        print(f"    Losses: {results[f'{side}_l']:.2%}")


if __name__ == "__main__":
    main()

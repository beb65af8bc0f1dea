"""
Main entry point for the 3D Queens puzzle engine.

Runs a game session driven by text commands (from a file or stdin), or
checks a competition-format placement against the level target.

Usage:
    python main.py --config config.yaml
    python main.py --level 4 --commands moves.txt
    python main.py --level 4 --solution placement.txt --method hash
"""

import argparse
import sys

from cubequeens.board import Board
from cubequeens.config import Config
from cubequeens.conflicts import analyze, count_attacking_pairs
from cubequeens.controls import CommandError, OrbitCamera, execute_command
from cubequeens.logging_config import setup_logging
from cubequeens.persistence import JsonProgressStore
from cubequeens.progress import ProgressState
from cubequeens.session import GameSession, SessionSnapshot
from cubequeens.utils import get_level_target, is_target_exact
from cubequeens.visualize import save_snapshot, visualize_snapshot

# =============================================================================
# Runner
# =============================================================================

class SessionRunner:
    """
    Drives a GameSession from text commands and reports each step.
    """

    def __init__(self, config: Config):
        """
        Initialize runner with configuration.

        Args:
            config: Configuration instance
        """
        self.config = config
        store = JsonProgressStore(config.progress_file) if config.progress_file else None
        self.session = GameSession(store=store, config=config)
        self.camera = OrbitCamera()

    def run(self, lines) -> SessionSnapshot:
        """
        Load the session and execute commands.

        Args:
            lines: Iterable of command lines

        Returns:
            Final session snapshot
        """
        snapshot = self.session.load()
        self._print_snapshot(snapshot)

        for lineno, line in enumerate(lines, start=1):
            try:
                result = execute_command(self.session, self.camera, line)
            except CommandError as e:
                print(f"  line {lineno}: {e}")
                continue
            if result is None:
                continue

            self._print_snapshot(result)
            if result.just_achieved:
                if result.record:
                    print(f"  ★ New Record! You found {result.queen_count}!")
                else:
                    print("  ★ Perfect! Target reached!")
            if line.split()[0].lower() == 'show':
                self._output(result)

        return self.session.snapshot()

    def _output(self, snapshot: SessionSnapshot) -> None:
        if self.config.save:
            saved = save_snapshot(self.config.output_dir, snapshot, self.session.board.to_text())
            print(f"  Saved to {saved['folder']}/")
        if self.config.show:
            visualize_snapshot(snapshot, show=True)

    def _print_snapshot(self, snapshot: SessionSnapshot) -> None:
        target = '∞' if snapshot.target is None else snapshot.target
        ranges = self.session.visible_ranges()
        layer_info = ', '.join(
            f"{axis.upper()}: {lo}-{hi}" for axis, (lo, hi) in ranges.items()
            if (lo, hi) != (0, snapshot.N - 1)
        ) or 'All'
        status = "✓" if snapshot.state is ProgressState.ACHIEVED else " "
        print(f"[{status}] Level {snapshot.level}: queens={snapshot.queen_count} "
              f"conflicts={snapshot.conflict_count} target={target} "
              f"best={snapshot.best_score} layers={layer_info}"
              + (" (offline)" if snapshot.offline else ""))


def check_solution(path: str, N: int, method: str) -> int:
    """
    Check a competition-format placement.

    Returns:
        Process exit code (0 when the placement meets the target).
    """
    with open(path, 'r') as f:
        board = Board.from_text(N, f.read())

    report = analyze(board.get_queens(), method)
    target = get_level_target(N)

    print(f"\nPlacement check for N={N}:")
    print(f"  Queens: {report.queen_count}")
    print(f"  Attacking pairs: {count_attacking_pairs(report.queens)}")
    print(f"  Conflicting queens: {report.conflict_count}")
    print(f"  Target: {target}" + ("" if is_target_exact(N) else " (estimated)"))

    if report.is_conflict_free and report.queen_count >= target:
        print("  ✓ TARGET MET")
        return 0
    print("  ✗ Target not met")
    return 1


# =============================================================================
# CLI Interface
# =============================================================================

def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description='3D Queens Puzzle Engine',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        default='config.yaml',
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--level', '-n',
        type=int,
        help='Start level / board size N (overrides config)'
    )

    parser.add_argument(
        '--method', '-m',
        type=str,
        choices=['iter', 'hash', 'jit'],
        help='Conflict computation method (overrides config)'
    )

    parser.add_argument(
        '--progress-file',
        type=str,
        help='JSON file for best scores and the last session (overrides config)'
    )

    parser.add_argument(
        '--no-persist',
        action='store_true',
        help='Keep progress in memory only'
    )

    parser.add_argument(
        '--creative',
        action='store_true',
        help='Start in creative mode'
    )

    parser.add_argument(
        '--unlock-at-n',
        action='store_true',
        help='Also unlock the next level at N non-attacking queens'
    )

    parser.add_argument(
        '--commands',
        type=str,
        help='File of commands to run (default: read stdin)'
    )

    parser.add_argument(
        '--solution',
        type=str,
        help='Check a competition-format placement file instead of playing'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Verbose output'
    )

    parser.add_argument(
        '--save',
        action='store_true',
        help='Save snapshots on "show"'
    )

    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        help='Output directory for saved snapshots'
    )

    parser.add_argument(
        '--show',
        action='store_true',
        help='Show snapshots interactively on "show"'
    )

    return parser.parse_args()


def load_config_with_overrides(args: argparse.Namespace) -> Config:
    """
    Load configuration from file and apply CLI overrides.

    Args:
        args: Parsed command line arguments

    Returns:
        Configuration with overrides applied
    """
    try:
        config = Config.from_yaml(args.config)
    except FileNotFoundError:
        print(f"Warning: Config file '{args.config}' not found, using defaults")
        config = Config()
    except Exception as e:
        print(f"Error loading config: {e}")
        sys.exit(1)

    if args.level is not None:
        config.start_level = args.level
    if args.method:
        config.conflict_method = args.method
    if args.progress_file:
        config.progress_file = args.progress_file
    if args.no_persist:
        config.progress_file = None
    if args.creative:
        config.creative_mode = True
    if args.unlock_at_n:
        config.unlock_at_n_queens = True
    if args.verbose:
        config.log_level = 'DEBUG'
    if args.save:
        config.save = True
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.show:
        config.show = True

    return config


def main():
    """Main entry point."""
    args = parse_args()

    config = load_config_with_overrides(args)

    errors = config.validate()
    if errors:
        print("Configuration errors:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    setup_logging(config.log_level, config.log_file)
    config.print_summary()

    if args.solution:
        try:
            sys.exit(check_solution(args.solution, config.start_level, config.conflict_method))
        except (OSError, ValueError) as e:
            print(f"Error reading placement: {e}")
            sys.exit(1)

    runner = SessionRunner(config)
    if args.commands:
        with open(args.commands, 'r') as f:
            final = runner.run(f)
    else:
        final = runner.run(sys.stdin)

    print(f"\n{'#'*60}")
    print("# Final State")
    print(f"{'#'*60}")
    print(f"Level {final.level}: {final.state.value}, "
          f"{final.queen_count} queens, {final.conflict_count} in conflict")
    for size, score in sorted(runner.session.best_scores.items()):
        print(f"  Best N={size}: {score}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Simultaneous Kelly CLI

Command-line interface for the simultaneous Kelly optimizer.
"""

import argparse
import sys
from pathlib import Path
import json
from typing import List

import pandas as pd

from simultaneous_kelly.utils.logging import setup_logging, get_logger
from simultaneous_kelly.config.settings import CONFIG
from simultaneous_kelly.optimization.kelly import (
    Bet,
    SimultaneousKellySolver,
    expected_log_wealth
)

logger = get_logger(__name__)


def parse_bet(text: str) -> Bet:
    """Parse a `P,B` or `P,B,L` command-line bet."""
    try:
        values = [float(v) for v in text.split(',')]
    except ValueError:
        raise ValueError(f"Invalid bet {text!r}: expected P,B or P,B,L")
    return Bet.from_tuple(values)


def load_bets(path: Path) -> List[Bet]:
    """
    Load bets from a JSON file.

    Accepts a list of objects with `win_probability`, `win_multiplier`
    and optional `loss_fraction`, or a list of [p, b] / [p, b, l] arrays.
    """
    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of bets")

    bets = []
    for entry in data:
        if isinstance(entry, dict):
            try:
                bets.append(Bet(
                    win_probability=float(entry['win_probability']),
                    win_multiplier=float(entry['win_multiplier']),
                    loss_fraction=float(entry.get('loss_fraction', 1.0))
                ))
            except TypeError:
                raise ValueError(f"{path}: bet fields must be numbers, got {entry!r}")
        else:
            bets.append(Bet.from_tuple(entry))

    return bets


def _bets_from_args(args) -> List[Bet]:
    if args.bets:
        return load_bets(Path(args.bets))
    if args.bet:
        return [parse_bet(b) for b in args.bet]
    raise ValueError("No bets given: use --bets FILE or --bet P,B[,L]")


def _print_result(title: str, result) -> None:
    print(f"\n{title}")
    print("=" * 50)
    print(f"Optimized value of the objective function: {result.objective_value}")
    print(f"Optimal fractions of wealth to be wagered on each bet: "
          f"{[float(x) for x in result.allocation]}")

    with pd.option_context('display.float_format', '{:.6f}'.format):
        print()
        print(result.to_frame().to_string())


def cmd_sample(args):
    """Optimize the built-in sample slates."""
    solver = SimultaneousKellySolver(args.learning_rate, args.max_iterations)

    uniform = [Bet.from_tuple(b) for b in CONFIG.sample.bets]
    defined = [Bet.from_tuple(b) for b in CONFIG.sample.defined_loss_bets]

    _print_result("Full-stake losses", solver.optimize(uniform))
    _print_result("Defined losses", solver.optimize(defined))


def cmd_optimize(args):
    """Optimize a user-supplied slate."""
    bets = _bets_from_args(args)
    solver = SimultaneousKellySolver(args.learning_rate, args.max_iterations)

    result = solver.optimize(bets)

    print(result.summary())

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(result.to_dict(), f, indent=2)
        print(f"\nResults saved to {args.output}")


def cmd_evaluate(args):
    """Evaluate expected log wealth at a given allocation."""
    bets = _bets_from_args(args)

    value, grad = expected_log_wealth(bets, args.allocation)

    print(f"Expected log wealth: {value}")
    print(f"Gradient: {[float(g) for g in grad]}")


def _add_bet_arguments(parser):
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '--bets', type=str,
        help='JSON file with the bets to size'
    )
    group.add_argument(
        '--bet', type=str, action='append',
        help='Bet as P,B or P,B,L (repeatable)'
    )


def _add_solver_arguments(parser):
    parser.add_argument(
        '--learning-rate', type=float, default=CONFIG.optimization.learning_rate,
        help='Gradient step scale'
    )
    parser.add_argument(
        '--max-iterations', type=int, default=CONFIG.optimization.max_iterations,
        help='Iteration budget'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simultaneous Kelly - optimal stakes across independent bets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Optimize the built-in sample slates
  python -m simultaneous_kelly sample

  # Optimize two bets given inline
  python -m simultaneous_kelly optimize --bet 0.6,1.0 --bet 0.3,12.8,0.5

  # Optimize bets from a file and save the result
  python -m simultaneous_kelly optimize --bets bets.json -o result.json

  # Evaluate a fixed allocation
  python -m simultaneous_kelly evaluate --bet 0.6,1.0 --allocation 0.2
        """
    )

    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    parser.add_argument(
        '--log-file',
        type=str,
        help='Log file path'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    sample_parser = subparsers.add_parser('sample', help='Optimize the built-in sample slates')
    _add_solver_arguments(sample_parser)

    optimize_parser = subparsers.add_parser('optimize', help='Optimize a slate of bets')
    _add_bet_arguments(optimize_parser)
    _add_solver_arguments(optimize_parser)
    optimize_parser.add_argument(
        '--output', '-o', type=str,
        help='Output file for results'
    )

    evaluate_parser = subparsers.add_parser('evaluate', help='Evaluate an allocation')
    _add_bet_arguments(evaluate_parser)
    evaluate_parser.add_argument(
        '--allocation', type=float, nargs='+', required=True,
        help='Fraction of wealth staked on each bet'
    )

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    log_level = 'DEBUG' if args.verbose else CONFIG.logging.level
    log_file = Path(args.log_file) if args.log_file else None
    setup_logging(level=log_level, log_file=log_file)

    commands = {
        'sample': cmd_sample,
        'optimize': cmd_optimize,
        'evaluate': cmd_evaluate,
    }

    if args.command not in commands:
        parser.print_help()
        sys.exit(1)

    try:
        commands[args.command](args)
    except (ValueError, KeyError, OSError) as e:
        logger.error(f"Invalid input: {e}")
        sys.exit(2)


if __name__ == '__main__':
    main()

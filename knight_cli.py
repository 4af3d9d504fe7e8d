#!/usr/bin/env python3
"""
Command-line entry point for the knight search.

Usage:
    knight-search play [options]            talk to a game harness on stdin/stdout
    knight-search simulate [options]        play against a local hidden target

Options:
    --config        JSON configuration file
    --strategy      Probing strategy (bisection or axis)
    --plot          Save a PNG of the search history
    --log-level     Diagnostics level (written to stderr)

Example:
    knight-search simulate --width 50 --height 50 --turns 12 --start 0 0 --target 31 17 --plot run.png
"""

import sys
import argparse
import logging

from config import SearchConfig, STRATEGY_NAMES, LOG_LEVELS
from protocol import GameSetup, ProtocolError, run_protocol
from simulator import simulate
from polygon import ConvexityError
from visualizer import plot_search


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='knight-search',
        description='Locate a hidden cell from warmer/colder feedback',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s play < game_input.txt
  %(prog)s simulate --width 8 --height 8 --turns 10 --start 0 0 --target 6 5
  %(prog)s simulate --width 40 --height 10 --turns 15 --start 0 0 --target 33 2 --strategy axis
        """
    )
    parser.add_argument('--config', help='JSON configuration file')
    parser.add_argument('--strategy', choices=STRATEGY_NAMES,
                        help='Probing strategy (overrides config)')
    parser.add_argument('--plot', help='Save a PNG of the search history')
    parser.add_argument('--log-level', choices=LOG_LEVELS,
                        help='Diagnostics level (overrides config)')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('play', help='Play against a harness on stdin/stdout')

    sim = sub.add_parser('simulate', help='Play against a local hidden target')
    sim.add_argument('--width', type=int, required=True, help='Board width in cells')
    sim.add_argument('--height', type=int, required=True, help='Board height in cells')
    sim.add_argument('--turns', type=int, required=True, help='Turn budget')
    sim.add_argument('--start', type=int, nargs=2, metavar=('X', 'Y'), required=True,
                     help='Starting position')
    sim.add_argument('--target', type=int, nargs=2, metavar=('X', 'Y'), required=True,
                     help='Hidden target cell')
    return parser


def load_config(args) -> SearchConfig:
    config = SearchConfig.load(args.config) if args.config else SearchConfig()
    if args.strategy:
        config.strategy = args.strategy
    if args.log_level:
        config.log_level = args.log_level
    if args.plot:
        config.plot_path = args.plot
    return config


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValueError) as e:
        print(f"ERROR: Could not read config: {e}", file=sys.stderr)
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"ERROR: {error}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(name)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )

    try:
        if args.command == 'play':
            controller = run_protocol(sys.stdin, sys.stdout, config)
            states, width, height, target = controller.history, controller.width, controller.height, None
        else:
            setup = GameSetup(args.width, args.height, args.turns, tuple(args.start))
            target = tuple(args.target)
            result = simulate(setup, target, config)
            states, width, height = result.states, args.width, args.height

            status = "FOUND" if result.found else "NOT FOUND"
            print(f"{status}: target {target[0]} {target[1]} after {result.turns_used} probe(s)")
            for x, y in result.probes:
                print(f"  {x} {y}")
            left, top, right, bottom = result.final_region.bounds()
            print(f"Final region: {len(result.final_region)} vertices, "
                  f"area {result.final_region.area:.2f}, "
                  f"bounds [{left:.1f},{top:.1f} {right:.1f},{bottom:.1f}]")

        if config.plot_path:
            saved = plot_search(states, width, height, config.plot_path, target=target)
            print(f"Saved plot to {saved}", file=sys.stderr)

    except (ProtocolError, ConvexityError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
ioplacer CLI

Command-line interface for I/O pin slot assignment.

Usage:
    ioplacer place <problem.yaml> [options]
    ioplacer check <problem.yaml> <result.yaml>
"""

import argparse
import logging
import sys
from pathlib import Path

from . import __version__


def setup_logging(verbose: bool):
    """Configure root logging for CLI runs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s %(name)s: %(message)s',
    )


def cmd_place(args):
    """Run slot assignment on a problem file."""
    from .config import PlacerConfig
    from .errors import IOPlacerError, MirrorPositionError
    from .placer import IOPlacer
    from .problem import load_problem, save_result
    from .validation import PlacementValidator

    try:
        config = PlacerConfig.from_yaml(args.config) if args.config else PlacerConfig()
        if args.slots_per_section is not None:
            config.slots_per_section = args.slots_per_section
        if args.lenient_mirroring:
            config.strict_mirroring = False
        config.validate()
        problem = load_problem(args.problem)
    except (IOPlacerError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print(f"Loaded problem: {args.problem}")
    print(f"  Slots:  {len(problem.arena)}")
    print(f"  Pins:   {len(problem.pins)}")
    print(f"  Groups: {len(problem.pins.groups)}")

    blocked_before = {i for i, slot in enumerate(problem.arena) if slot.blocked}
    placer = IOPlacer(
        problem.arena,
        problem.pins,
        problem.oracle,
        reflect=problem.core.mirrored_position,
        config=config,
    )

    print("\nAssigning pins to slots...")
    try:
        result = placer.run()
    except MirrorPositionError as e:
        print(f"Error: {e}")
        return 1

    print(result.summary())
    for diag in result.warnings:
        print(f"  Warning: {diag.message}")

    validator = PlacementValidator(
        problem.arena,
        problem.pins,
        reflect=problem.core.mirrored_position,
        blocked_before=blocked_before,
    )
    ok, issues = validator.validate()
    for issue in issues:
        if issue.severity == "error":
            print(f"  Error [{issue.category}]: {issue.message}")

    if args.output:
        output_path = Path(args.output)
    else:
        output_path = Path(args.problem).with_suffix('.placed.yaml')

    if not args.dry_run:
        save_result(output_path, problem.pins, result)
        print(f"\nSaved result to: {output_path}")
    else:
        print("\nDry run - not saving result")

    return 0 if result.success and ok else 1


def cmd_check(args):
    """Validate a stored result against its problem file."""
    from .errors import IOPlacerError
    from .problem import apply_result, load_problem, load_result
    from .validation import PlacementValidator

    try:
        problem = load_problem(args.problem)
        blocked_before = {i for i, slot in enumerate(problem.arena) if slot.blocked}
        apply_result(problem, load_result(args.result))
    except IOPlacerError as e:
        print(f"Error: {e}")
        return 1

    validator = PlacementValidator(
        problem.arena,
        problem.pins,
        reflect=problem.core.mirrored_position,
        blocked_before=blocked_before,
    )
    ok, issues = validator.validate()

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]
    print(f"Checked {args.result}: {len(errors)} errors, {len(warnings)} warnings")
    for issue in issues:
        print(f"  {issue.severity.upper()} [{issue.category}] {issue.location}: {issue.message}")

    return 0 if ok else 1


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="ioplacer - I/O pin slot assignment",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ioplacer place design.yaml
  ioplacer place design.yaml -o design.placed.yaml --slots-per-section 100
  ioplacer place design.yaml --config placer.yaml -v
  ioplacer check design.yaml design.placed.yaml
        """,
    )

    parser.add_argument('--version', action='version', version=f'ioplacer {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Place command
    place_parser = subparsers.add_parser('place', help='Assign pins to boundary slots')
    place_parser.add_argument('problem', help='Path to YAML problem file')
    place_parser.add_argument('-o', '--output', help='Output result file path')
    place_parser.add_argument('--config', help='YAML placer configuration')
    place_parser.add_argument('--slots-per-section', type=int,
                              help='Max slots optimized together (default: 200)')
    place_parser.add_argument('--lenient-mirroring', action='store_true',
                              help='Report unplaceable mirrored pins instead of failing')
    place_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    place_parser.add_argument('--dry-run', action='store_true', help="Don't save the result")

    # Check command
    check_parser = subparsers.add_parser('check', help='Validate a result file')
    check_parser.add_argument('problem', help='Path to YAML problem file')
    check_parser.add_argument('result', help='Path to YAML result file')
    check_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    # Dispatch command
    commands = {
        'place': cmd_place,
        'check': cmd_check,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())

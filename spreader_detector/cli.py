#!/usr/bin/env python3
"""
Spreader Detector command-line interface.

Usage:
    spreader-detector <Path to People.in> <Path to Meetings.in>
    spreader-detector people.in meetings.in --config my_config.yaml --verbose

Every failure prints a single diagnostic line to stderr and exits with 1.
"""
import argparse
import sys
import warnings
from typing import List, NoReturn, Optional

from spreader_detector.common.errors import ArgumentError, SpreaderDetectorError
from spreader_detector.config import load_params
from spreader_detector.pipeline import run_pipeline

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class DetectorArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage problems as ArgumentError."""

    def error(self, message: str) -> NoReturn:
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = DetectorArgumentParser(
        prog='spreader-detector',
        description='Estimate infection probabilities along a contact chain and triage every person'
    )
    parser.add_argument('people', help='Path to the people file (<name> <id> <age> per line)')
    parser.add_argument('meetings', help='Path to the meetings file')
    parser.add_argument('--config', type=str, default=None,
                        help='YAML file overriding the packaged defaults')
    parser.add_argument('--output', type=str, default=None,
                        help='Report path (default: io.output_file from config)')
    parser.add_argument('--verbose', action='store_true',
                        help='Print progress and a run summary')
    return parser


def print_data_warnings(caught: List[warnings.WarningMessage]) -> None:
    for w in caught:
        print(f"WARNING: {w.message}")


def main(argv: Optional[List[str]] = None) -> int:
    verbose = False
    exit_code = EXIT_SUCCESS
    diagnostic = None

    # Data-quality warnings stay off stderr; --verbose shows them on stdout.
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        try:
            args = build_parser().parse_args(argv)
            verbose = args.verbose
            params = load_params(args.config)
            run_pipeline(
                args.people,
                args.meetings,
                params,
                output_path=args.output,
                verbose=verbose,
            )
        except SpreaderDetectorError as e:
            diagnostic = e.diagnostic
            exit_code = EXIT_FAILURE
        except MemoryError:
            diagnostic = SpreaderDetectorError.message
            exit_code = EXIT_FAILURE

    if verbose:
        print_data_warnings(caught)
    if diagnostic is not None:
        print(diagnostic, file=sys.stderr)

    return exit_code


if __name__ == '__main__':
    sys.exit(main())

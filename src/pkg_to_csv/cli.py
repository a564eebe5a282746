"""Command-line entrypoint.

Usage:
  pkg-to-csv [-i PATH] [-o [FILE]] [--latest] [--license] [--description]
             [--npm-link] [--deps-only | --dev-only] [--recursive]
             [--interactive]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import click

from .config import DEFAULT_INPUT, ConfigError, RunConfig, load_settings
from .core import run
from .errors import PkgToCsvError
from .interactive import prompt_config
from .log import setup_logging

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG = 2
EXIT_ABORTED = 130


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-to-csv",
        description="Export package.json dependencies to CSV or a console table.",
    )
    parser.add_argument(
        "-i",
        "--input",
        default=DEFAULT_INPUT,
        help="Path to package.json or a directory containing package.json files",
    )
    parser.add_argument(
        "-o",
        "--output",
        nargs="?",
        const=True,
        default=None,
        help="Output CSV file (default when given without a value: packages.csv)",
    )
    parser.add_argument("--latest", action="store_true", help="Include latest version from npm")
    parser.add_argument("--license", action="store_true", help="Include license from npm")
    parser.add_argument(
        "--description", action="store_true", help="Include description from npm"
    )
    parser.add_argument("--npm-link", action="store_true", help="Include npm package link")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--deps-only",
        action="store_true",
        help="Include only dependencies (exclude devDependencies)",
    )
    scope.add_argument(
        "--dev-only",
        action="store_true",
        help="Include only devDependencies (exclude dependencies)",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Recursively search for package.json files in subdirectories",
    )
    parser.add_argument("--interactive", action="store_true", help="Launch interactive mode")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Diagnostic log level on stderr (overrides PKG_TO_CSV_LOG_LEVEL)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    cwd = Path.cwd()

    try:
        settings = load_settings()
        setup_logging(settings, level=args.log_level)
        config = RunConfig.from_flags(
            input_path=args.input,
            output=args.output,
            latest=args.latest,
            license=args.license,
            description=args.description,
            npm_link=args.npm_link,
            deps_only=args.deps_only,
            dev_only=args.dev_only,
            recursive=args.recursive,
            cwd=cwd,
        )
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    if args.interactive:
        try:
            config = prompt_config(config, cwd=cwd)
        except click.Abort:
            print("Aborted.", file=sys.stderr)
            return EXIT_ABORTED

    try:
        run(config, settings=settings, cwd=cwd)
    except PkgToCsvError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

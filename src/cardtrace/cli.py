"""
cardtrace.cli - Command-line interface.

Main entry point for the cardtrace CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cardtrace import __version__
from cardtrace.commands import convert, links, validate
from cardtrace.config import get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cardtrace",
        description="Document-to-card conversion and trace consistency tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cardtrace convert srs.md -o srs.cards.json     # Split a document into cards
  cardtrace convert notes.txt --plain            # Numbered-heading plain text
  cardtrace links trace.json                     # Expand relations into links
  cardtrace links trace.json --swap              # Files shown in reverse order
  cardtrace validate project.msp                 # Check trace references

Configuration:
  cardtrace looks for .cardtrace.toml in the current directory or parent
  directories. Values can be overridden with CARDTRACE_<SECTION>_<KEY>
  environment variables, e.g. CARDTRACE_CONVERSION_MAX_TITLE_LENGTH=40.

For detailed command help: cardtrace <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"cardtrace {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a Markdown or plain-text document into cards",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Markdown is assumed for .md/.markdown files, plain text otherwise.
Plain-text headings are numbered lines such as "1 Intro" or "2.1) Scope".
""",
    )
    convert_parser.add_argument("file", type=Path, help="Document to convert")
    grammar = convert_parser.add_mutually_exclusive_group()
    grammar.add_argument(
        "--markdown",
        action="store_true",
        help="Force the Markdown grammar",
    )
    grammar.add_argument(
        "--plain",
        action="store_true",
        help="Force the plain-text grammar",
    )
    convert_parser.add_argument(
        "--max-title-length",
        type=int,
        metavar="N",
        help="Maximum card title length (default from config: 20)",
    )
    convert_parser.add_argument(
        "--now",
        metavar="ISO",
        help="Timestamp to stamp on every card (ISO-8601)",
    )
    convert_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="PATH",
        help="Write the card snapshot here instead of stdout",
    )

    # links command
    links_parser = subparsers.add_parser(
        "links",
        help="Expand a trace file's relations into atomic links",
    )
    links_parser.add_argument("trace_file", type=Path, help="Trace file (JSON)")
    links_parser.add_argument(
        "--swap",
        action="store_true",
        help="Show the right file on the left (inverts link directions)",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Check trace files for missing card files and card IDs",
    )
    validate_parser.add_argument("project_file", type=Path, help="Project descriptor (JSON)")
    validate_parser.add_argument(
        "--dir",
        type=Path,
        metavar="PATH",
        help="Directory holding the card and trace files",
    )
    validate_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON for tooling",
    )

    # version command
    subparsers.add_parser(
        "version",
        help="Show version",
    )

    return parser


def configure_logging(verbose: bool, level_name: str) -> None:
    """Configure root logging for a CLI run."""
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install cardtrace[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.command == "version":
        print(f"cardtrace {__version__}")
        return 0

    try:
        config = get_config(args.config)
        configure_logging(args.verbose, config.get("logging", {}).get("level", "WARNING"))

        if args.command == "convert":
            return convert.run(args, config)
        elif args.command == "links":
            return links.run(args, config)
        elif args.command == "validate":
            return validate.run(args, config)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

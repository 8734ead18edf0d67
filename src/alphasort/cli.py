"""Command-line interface for alphasort.

Provides the alphasort command. Text is processed line by line with the
selected alphabet table, except for winmac replacement, which rewrites the
whole input at once.
"""

import argparse
import json
import logging
import sys
from typing import Callable, Dict, List, Optional

from rich.logging import RichHandler

from . import __version__
from .alphabet import (
    Alphabet,
    audit_alphabet,
    replace_winmac,
    sort_value,
    sorted_by_alphabet,
    split_symbols,
    strip_accents,
    to_lower_case,
    to_upper_case,
)
from .data_loader import default_alphabet_name, list_alphabets, load_alphabet
from .errors import AlphabetError

logger = logging.getLogger(__name__)

LineTransform = Callable[[Alphabet, str], str]

_LINE_COMMANDS: Dict[str, LineTransform] = {
    "split": lambda alphabet, line: json.dumps(
        split_symbols(alphabet, line), ensure_ascii=False
    ),
    "sort-key": sort_value,
    "upper": to_upper_case,
    "lower": to_lower_case,
    "strip-accents": strip_accents,
}


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration.

    Args:
        verbose: Enable debug logging
    """
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(show_time=False, show_path=False)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
    )


def read_input(source: Optional[str]) -> str:
    """Read input text from a file, or stdin when ``source`` is ``-`` or None.

    Raises:
        SystemExit: If the file cannot be read
    """
    if not source or source == "-":
        return sys.stdin.read()
    try:
        with open(source, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        print(f"Error: Input file not found: {source}", file=sys.stderr)
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(f"Error: Cannot decode file {source}: {e}", file=sys.stderr)
        sys.exit(1)


def transform_lines(alphabet: Alphabet, text: str, transform: LineTransform) -> List[str]:
    """Apply ``transform`` to each line of ``text`` (line endings excluded)."""
    return [transform(alphabet, line) for line in text.splitlines()]


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser.

    Returns:
        Configured ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="alphasort",
        description="Tokenize, sort, recase and strip accents using an alphabet table",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  alphasort sort-key words.txt
  alphasort -a ./my_alphabet.json upper input.txt
  echo "Tłích'á" | alphasort strip-accents
  alphasort -a my_alphabet check
""",
    )

    parser.add_argument(
        "-a", "--alphabet",
        default=None,
        help=f"Alphabet name or JSON file (default: {default_alphabet_name()})",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    help_texts = {
        "split": "print the symbols of each line as a JSON array",
        "sort-key": "print the sort key of each line",
        "upper": "convert each line to uppercase",
        "lower": "convert each line to lowercase",
        "strip-accents": "remove accents from each line",
        "winmac": "replace legacy winmac sequences in the whole input",
        "sort": "print the input lines in alphabet order",
    }
    for name, help_text in help_texts.items():
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "input",
            nargs="?",
            help="Input file path (use '-' or omit for stdin)",
        )

    subparsers.add_parser("check", help="report inconsistencies in the alphabet table")
    subparsers.add_parser("list", help="list available alphabets")

    return parser


def run(args: argparse.Namespace) -> int:
    """Execute a parsed command and return the exit status."""
    if args.command == "list":
        for name, path in list_alphabets().items():
            print(f"{name}\t{path}")
        return 0

    alphabet = load_alphabet(args.alphabet)

    if args.command == "check":
        problems = audit_alphabet(alphabet)
        for problem in problems:
            print(problem)
        if problems:
            logger.warning(f"{len(problems)} problem(s) found")
            return 1
        print(f"OK: {len(alphabet)} symbols")
        return 0

    text = read_input(args.input)
    if not text.strip():
        logger.warning("No input text provided")
        return 0

    if args.command == "winmac":
        # Patterns may span lines or match line-break characters
        sys.stdout.write(replace_winmac(alphabet, text))
        return 0

    if args.command == "sort":
        lines = sorted_by_alphabet(alphabet, text.splitlines())
    else:
        lines = transform_lines(alphabet, text, _LINE_COMMANDS[args.command])

    for line in lines:
        print(line)
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    try:
        status = run(args)
    except KeyboardInterrupt:
        print("\nOperation cancelled", file=sys.stderr)
        sys.exit(130)
    except (AlphabetError, FileNotFoundError) as e:
        logging.error(str(e))
        sys.exit(1)

    if status:
        sys.exit(status)


if __name__ == "__main__":
    main()

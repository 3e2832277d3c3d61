"""Command-line entry point for the Parker MCP package."""
import argparse
import logging
import sys
from typing import List, Optional

from .config import DEFAULT_LOG_LEVEL, DEFAULT_VAL_MAX, LOG_LEVELS
from .logging_config import setup_logging
from .roman import convert_roman_numeral
from .server import run_server
from .squares import SELECTIONS, SquareSearchExhausted, format_square_of_squares, run_search

logger = logging.getLogger(__name__)

# Arguments exercised by the demo, covering valid input and each kind of error
ROMAN_NUMERAL_DEMO_ARGS = [
    6,            # Valid number
    "6",          # Valid number as string
    20,           # Valid number
    "L",          # Valid roman numeral
    True,         # Invalid input type
    "6.5",        # Invalid string input
    "3859",       # Valid number as string
    -1,           # Out of number range
    2.5,          # Float, invalid number type
    4000,         # Out of number range
    "IL",         # Invalid roman numeral
    3999,         # Upper bound of numbers
    1,            # Lower bound of numbers
    "MMMCMXCIX",  # Valid roman numeral, converts to 3999
    "I",          # Lower bound of valid roman numerals
    "MMMM",       # Invalid roman numeral
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="parker_mcp",
        description="Semi-magic squares of squares and Roman numeral conversion",
    )
    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo = subparsers.add_parser("demo", help="Run the converter and square search demonstration")
    demo.add_argument(
        "--val-max",
        type=int,
        default=DEFAULT_VAL_MAX,
        help="Exclusive upper bound of the searched values (default: %(default)s)",
    )

    search = subparsers.add_parser("search", help="Search for a semi-magic square of squares")
    search.add_argument(
        "--val-max",
        type=int,
        default=DEFAULT_VAL_MAX,
        help="Exclusive upper bound of the searched values (default: %(default)s)",
    )
    search.add_argument("--selection", choices=SELECTIONS, default="last")

    roman = subparsers.add_parser("roman", help="Convert a number or a Roman numeral")
    roman.add_argument("value", help="An integer in [1, 3999] or a Roman numeral")

    subparsers.add_parser("serve", help="Run the MCP server")
    return parser


def print_search_result(val_max: int, selection: str = "last") -> None:
    """Search and print the selected square with its magic number."""
    result = run_search(val_max, selection)
    print(format_square_of_squares(result.square))
    print(f"Has magic number of {result.magic_number}")


def run_demo(val_max: int = DEFAULT_VAL_MAX) -> None:
    """Run every demonstration case, printing errors instead of stopping on them."""
    print("--------TESTING convert_roman_numeral--------")
    for arg in ROMAN_NUMERAL_DEMO_ARGS:
        print("---------")
        print(f"Result of passing {arg!r}: ")
        try:
            print(convert_roman_numeral(arg))
        except (TypeError, ValueError) as e:
            print(e)

    print("\n--------TESTING generate_magic_square_of_squares--------")
    try:
        print_search_result(val_max)
    except (SquareSearchExhausted, ValueError) as e:
        print(e)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "demo":
        run_demo(args.val_max)
        return 0

    if args.command == "search":
        try:
            print_search_result(args.val_max, args.selection)
        except (SquareSearchExhausted, ValueError) as e:
            print(f"Error: {e}")
            return 1
        return 0

    if args.command == "roman":
        try:
            print(convert_roman_numeral(args.value))
        except (TypeError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        return 0

    logger.info("Starting MCP server")
    run_server()
    return 0


if __name__ == "__main__":
    sys.exit(main())

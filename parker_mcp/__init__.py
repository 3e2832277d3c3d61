"""Parker MCP package: semi-magic squares of squares and Roman numerals over MCP."""

from .roman import (
    RomanNumeralFormatError,
    RomanNumeralRangeError,
    convert_int_to_roman,
    convert_roman_numeral,
    convert_roman_to_int,
)
from .squares import (
    PARKER_SQUARE,
    VAL_MAX,
    SemiMagicSquareResult,
    SquareSearchExhausted,
    find_semi_magic_squares,
    format_square_of_squares,
    generate_magic_square_of_squares,
    get_magic_number,
    is_semi_magic_square_of_squares,
    run_search,
    satisfies_parker_constraints,
)
from .server import app

__all__ = [
    "app",
    "PARKER_SQUARE",
    "VAL_MAX",
    "SemiMagicSquareResult",
    "SquareSearchExhausted",
    "find_semi_magic_squares",
    "format_square_of_squares",
    "generate_magic_square_of_squares",
    "get_magic_number",
    "is_semi_magic_square_of_squares",
    "run_search",
    "satisfies_parker_constraints",
    "RomanNumeralFormatError",
    "RomanNumeralRangeError",
    "convert_int_to_roman",
    "convert_roman_numeral",
    "convert_roman_to_int",
]

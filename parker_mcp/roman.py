"""Bidirectional conversion between Roman numerals and integers."""

from __future__ import annotations

import re
from numbers import Integral, Real
from typing import Any, Union

NUM_LOWER_BOUND = 1
NUM_UPPER_BOUND = 3999

# Integers passed as strings, e.g. "3859".
_VALID_INTEGER_RE = re.compile(r"[0-9]+")
_ROMAN_NUMERAL_RE = re.compile(r"M{0,3}(CM|CD|D?C{0,3})(XC|XL|L?X{0,3})(IX|IV|V?I{0,3})")

# Descending, subtractive pairs included.
INT_TO_ROMAN = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)

ROMAN_TO_INT = {
    "I": 1,
    "V": 5,
    "X": 10,
    "L": 50,
    "C": 100,
    "D": 500,
    "M": 1000,
}


class RomanNumeralRangeError(ValueError):
    """A number falls outside the range Roman numerals can express."""


class RomanNumeralFormatError(ValueError):
    """A string is not a canonical Roman numeral."""


def convert_roman_numeral(value: Any) -> Union[int, str]:
    """Convert a number to a Roman numeral, or a Roman numeral to an integer.

    Parameters
    ----------
    value:
        An integer in ``[1, 3999]`` (an integral float or a string of digits
        is accepted too), or a canonical Roman numeral.

    Returns
    -------
    int or str
        The numeral for a number, the integer for a numeral.

    Raises
    ------
    TypeError
        If *value* is neither a number nor a string, or is a non-integral
        number.
    RomanNumeralRangeError
        If the number is outside ``[1, 3999]``.
    RomanNumeralFormatError
        If the string is not a valid numeral.
    """

    if isinstance(value, str):
        if _VALID_INTEGER_RE.fullmatch(value):
            return convert_int_to_roman(int(value))
        return convert_roman_to_int(value)

    if isinstance(value, Real) and not isinstance(value, bool):
        return convert_int_to_roman(value)

    raise TypeError(
        "Cannot give non-integer number or non-string input to convert_roman_numeral"
    )


def convert_int_to_roman(num: Any) -> str:
    """Convert a whole number in ``[1, 3999]`` to an upper-case Roman numeral."""

    if isinstance(num, bool) or not isinstance(num, Real):
        raise TypeError("Can only convert numbers to roman numerals")
    if not isinstance(num, Integral):
        if not float(num).is_integer():
            raise TypeError("Cannot convert floats to roman numeral")
    num = int(num)

    if num < NUM_LOWER_BOUND or num > NUM_UPPER_BOUND:
        raise RomanNumeralRangeError(
            f"{num} is out of valid range for roman numerals "
            f"[{NUM_LOWER_BOUND}, {NUM_UPPER_BOUND}]"
        )

    result = []
    for value, numeral in INT_TO_ROMAN:
        count, num = divmod(num, value)
        result.append(numeral * count)
    return "".join(result)


def convert_roman_to_int(roman: str) -> int:
    """Convert a canonical Roman numeral to its integer value.

    Characters must appear in non-increasing order of value, apart from the
    subtractive pairs IV, IX, XL, XC, CD and CM.
    """

    if not isinstance(roman, str):
        raise TypeError("Can only convert strings to integers")
    if not roman or not _ROMAN_NUMERAL_RE.fullmatch(roman):
        raise RomanNumeralFormatError(
            f"Cannot convert {roman!r}: not a valid roman numeral"
        )

    total = 0
    for current, following in zip(roman, roman[1:] + " "):
        value = ROMAN_TO_INT[current]
        # A smaller numeral ahead of a larger one is subtracted (IV = 4).
        if following != " " and value < ROMAN_TO_INT[following]:
            total -= value
        else:
            total += value
    return total

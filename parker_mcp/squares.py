"""Brute-force search for semi-magic squares of squares shaped like the Parker Square.

The Parker Square repeats three of its values, which fixes the template::

    [a², b², c²          [a², b², c²
     d², e², f²    ===    d², e², b²
     g², h², i²]          g², d², a²]

Equating the magic sums of the rows, columns and the anti-diagonal of that
template reduces to the constraint ``2a² - b² - d² = 0``. Triples ``(a, b, d)``
satisfying it prune the outer search; the free values ``c``, ``e`` and ``g``
are then searched exhaustively.
"""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Exclusive upper bound of the values searched through.
VAL_MAX = 100

# Largest val_max a search accepts; the outer loop alone is O(val_max³).
MAX_VAL_MAX = 200

# Three squared cells must still sum inside int64.
MAX_CELL_VALUE = 1_000_000_000

PARKER_SQUARE = np.array(
    [
        [29, 1, 47],
        [41, 37, 1],
        [23, 41, 29],
    ],
    dtype=np.int64,
)

# Thresholds taken from the amount of repetition in the Parker Square.
MIN_UNIQUE_VALUES = 6
MAX_VALUE_REPEAT = 2

SELECTIONS = ("last", "best")

Triple = Tuple[int, int, int]

_ANTI_DIAGONAL = (np.array([2, 1, 0]), np.array([0, 1, 2]))
_MAIN_DIAGONAL = (np.array([0, 1, 2]), np.array([0, 1, 2]))


class SquareSearchExhausted(RuntimeError):
    """Raised when no semi-magic square of squares exists in the searched range."""

    def __init__(self, val_max: int) -> None:
        self.val_max = val_max
        super().__init__(
            f"No semi-magic squares found in the range of values [1, {val_max}]"
        )


@dataclass(slots=True)
class SemiMagicSquareResult:
    """Outcome of a search, shaped for the MCP tools.

    Attributes
    ----------
    square:
        The selected semi-magic square of squares.
    magic_number:
        Sum of the squares of the first row.
    val_max:
        Exclusive upper bound of the searched values.
    match_count:
        How many qualifying squares the search found in total.
    """

    square: np.ndarray
    magic_number: int
    val_max: int
    match_count: int

    def as_dict(self) -> Dict[str, Any]:
        """Serialize the result into JSON-friendly primitives."""

        return {
            "square": self.square.tolist(),
            "magic_number": self.magic_number,
            "val_max": self.val_max,
            "match_count": self.match_count,
            "rendered": format_square_of_squares(self.square),
        }


def as_square(square: Any) -> np.ndarray:
    """Coerce *square* into a 3 x 3 integer array, rejecting anything else."""

    array = np.asarray(square)
    if array.shape != (3, 3):
        raise ValueError(f"Expected a 3 x 3 square, got shape {array.shape}.")
    if not np.issubdtype(array.dtype, np.integer):
        raise ValueError("Square entries must be integers.")
    if np.any(array > MAX_CELL_VALUE) or np.any(array < -MAX_CELL_VALUE):
        raise ValueError(
            f"Square entries must lie within [-{MAX_CELL_VALUE}, {MAX_CELL_VALUE}]."
        )
    return array.astype(np.int64, copy=False)


def sum_squared(values: Iterable[int]) -> int:
    """Return the sum of each entry squared."""

    return int(sum(int(value) ** 2 for value in values))


def get_magic_number(square: Any) -> int:
    """Return the magic number of *square*: its first row's entries squared and summed."""

    return sum_squared(as_square(square)[0])


def satisfies_parker_constraints(a: int, b: int, d: int) -> bool:
    """Whether *a*, *b* and *d* are unique and satisfy ``2a² - b² - d² = 0``."""

    return a != b and b != d and d != a and 2 * a**2 - b**2 - d**2 == 0


def parker_triples(val_max: int = VAL_MAX) -> Iterator[Triple]:
    """Yield every ``(a, b, d)`` in ``[1, val_max)`` passing the Parker constraint."""

    values = range(1, val_max)
    for a, b, d in itertools.product(values, values, values):
        if satisfies_parker_constraints(a, b, d):
            yield a, b, d


def has_minimal_repeating_values(square: Any) -> bool:
    """Whether *square* repeats values no more than the Parker Square does.

    That is at least :data:`MIN_UNIQUE_VALUES` distinct values, none of them
    appearing more than :data:`MAX_VALUE_REPEAT` times.
    """

    _, counts = np.unique(as_square(square), return_counts=True)
    return len(counts) >= MIN_UNIQUE_VALUES and bool(np.all(counts <= MAX_VALUE_REPEAT))


def is_magic_for_rows_and_columns(square: Any, magic_number: int) -> bool:
    """Whether every row and column squared-sums to *magic_number*."""

    squared = as_square(square) ** 2
    return bool(
        np.all(squared.sum(axis=1) == magic_number)
        and np.all(squared.sum(axis=0) == magic_number)
    )


def _diagonal_sums(square: np.ndarray) -> Tuple[int, int]:
    squared = square**2
    return int(squared[_ANTI_DIAGONAL].sum()), int(squared[_MAIN_DIAGONAL].sum())


def is_magic_for_a_diagonal(square: Any, magic_number: int) -> bool:
    """Whether the anti-diagonal or the main diagonal squared-sums to *magic_number*."""

    return magic_number in _diagonal_sums(as_square(square))


def count_magic_diagonals(square: Any) -> int:
    """Return how many of the two diagonals squared-sum to the magic number."""

    array = as_square(square)
    magic_number = get_magic_number(array)
    return sum(total == magic_number for total in _diagonal_sums(array))


def is_semi_magic_square_of_squares(square: Any) -> bool:
    """Return whether *square* is a semi-magic square of squares.

    A square qualifies when all of its rows and columns, and at least one of
    its diagonals, sum to the magic number once each entry is squared, and it
    has no more repeated values than the Parker Square.
    """

    array = as_square(square)
    magic_number = get_magic_number(array)

    return (
        has_minimal_repeating_values(array)
        and is_magic_for_a_diagonal(array, magic_number)
        and is_magic_for_rows_and_columns(array, magic_number)
    )


def qualifying_mask(squares: np.ndarray) -> np.ndarray:
    """Apply :func:`is_semi_magic_square_of_squares` to a ``(n, 3, 3)`` stack."""

    squares = np.asarray(squares, dtype=np.int64)
    if squares.ndim != 3 or squares.shape[1:] != (3, 3):
        raise ValueError(f"Expected a stack of 3 x 3 squares, got shape {squares.shape}.")
    if np.any(np.abs(squares) > MAX_CELL_VALUE):
        raise ValueError(
            f"Square entries must lie within [-{MAX_CELL_VALUE}, {MAX_CELL_VALUE}]."
        )

    # Repeats: sorted cells have at least MIN_UNIQUE_VALUES runs, none of
    # them longer than MAX_VALUE_REPEAT.
    cells = np.sort(squares.reshape(len(squares), 9), axis=1)
    unique_values = 1 + np.count_nonzero(np.diff(cells, axis=1), axis=1)
    overlong_run = np.any(
        cells[:, MAX_VALUE_REPEAT:] == cells[:, :-MAX_VALUE_REPEAT], axis=1
    )
    minimal_repeats = (unique_values >= MIN_UNIQUE_VALUES) & ~overlong_run

    squared = squares**2
    magic_number = squared[:, 0, :].sum(axis=1)[:, None]
    rows_and_columns = np.all(squared.sum(axis=2) == magic_number, axis=1) & np.all(
        squared.sum(axis=1) == magic_number, axis=1
    )
    anti = squared[:, _ANTI_DIAGONAL[0], _ANTI_DIAGONAL[1]].sum(axis=1)
    main = squared[:, _MAIN_DIAGONAL[0], _MAIN_DIAGONAL[1]].sum(axis=1)
    diagonal = (anti == magic_number[:, 0]) | (main == magic_number[:, 0])

    return minimal_repeats & diagonal & rows_and_columns


def build_template_squares(triple: Triple, c: int, e: np.ndarray, g: np.ndarray) -> np.ndarray:
    """Stack the Parker-shaped squares for one *c* and the paired *e*, *g* values."""

    a, b, d = triple
    count = len(e)
    squares = np.empty((count, 3, 3), dtype=np.int64)
    squares[:, 0] = (a, b, c)
    squares[:, 1, 0] = d
    squares[:, 1, 1] = e
    squares[:, 1, 2] = b
    squares[:, 2, 0] = g
    squares[:, 2, 1:] = (d, a)
    return squares


def search_squares(triple: Triple, val_max: int = VAL_MAX) -> List[np.ndarray]:
    """Search the free values of the template built from *triple*.

    Every ``c``, ``e`` and ``g`` in ``[1, val_max)`` is tried, and the squares
    that qualify are returned in generation order (``c``, then ``e``, then
    ``g`` ascending).
    """

    values = np.arange(1, val_max, dtype=np.int64)
    e_grid, g_grid = np.meshgrid(values, values, indexing="ij")
    e_values, g_values = e_grid.ravel(), g_grid.ravel()

    found: List[np.ndarray] = []
    for c in values:
        squares = build_template_squares(triple, int(c), e_values, g_values)
        found.extend(squares[qualifying_mask(squares)])
    return found


def find_semi_magic_squares(val_max: int = VAL_MAX) -> List[np.ndarray]:
    """Return every Parker-shaped semi-magic square of squares below *val_max*."""

    _check_val_max(val_max)

    found: List[np.ndarray] = []
    for triple in parker_triples(val_max):
        matches = search_squares(triple, val_max)
        logger.debug("Triple %s yielded %d squares", triple, len(matches))
        found.extend(matches)
    return found


def score_square(square: Any) -> Tuple[int, int]:
    """Rank a square by magic diagonals, then by distinct values."""

    array = as_square(square)
    return count_magic_diagonals(array), len(np.unique(array))


def select_square(found: Sequence[np.ndarray], selection: str = "last") -> np.ndarray:
    """Pick one square out of the ordered search results."""

    if selection not in SELECTIONS:
        raise ValueError(f"Selection must be one of {', '.join(SELECTIONS)}.")
    if selection == "last":
        return found[-1]

    # max() keeps the first maximum, so walk backwards to prefer later squares.
    return max(reversed(found), key=score_square)


def generate_magic_square_of_squares(
    val_max: int = VAL_MAX, selection: str = "last"
) -> np.ndarray:
    """Search for a semi-magic square of squares in the structure of a Parker Square.

    By default the last square found is returned, since the first few are
    rotations of the Parker Square itself.

    Raises
    ------
    SquareSearchExhausted
        If no square in ``[1, val_max)`` qualifies.
    """

    return run_search(val_max, selection).square


def run_search(val_max: int = VAL_MAX, selection: str = "last") -> SemiMagicSquareResult:
    """Run the search and describe the selected square."""

    _check_val_max(val_max)
    if selection not in SELECTIONS:
        raise ValueError(f"Selection must be one of {', '.join(SELECTIONS)}.")

    logger.info("Searching for semi-magic squares of squares in [1, %d)", val_max)
    found = find_semi_magic_squares(val_max)
    if not found:
        logger.info("Search over [1, %d) found nothing", val_max)
        raise SquareSearchExhausted(val_max)

    square = select_square(found, selection)
    magic_number = get_magic_number(square)
    logger.info(
        "Found %d squares, selected one with magic number %d", len(found), magic_number
    )
    return SemiMagicSquareResult(
        square=square,
        magic_number=magic_number,
        val_max=val_max,
        match_count=len(found),
    )


def format_square_of_squares(square: Any) -> str:
    """Render *square* as a square of squares, one bracketed matrix row per line."""

    array = as_square(square)
    lines = []
    last = len(array) - 1
    for i, row in enumerate(array):
        cells = ", ".join(f"{int(num)}²" for num in row)
        lines.append(f"{'[' if i == 0 else ''}{cells}{']' if i == last else ''}")
    return "\n".join(lines)


def _check_val_max(val_max: int) -> None:
    if isinstance(val_max, bool) or not isinstance(val_max, (int, np.integer)):
        raise ValueError("val_max must be an integer.")
    if val_max < 2:
        raise ValueError("val_max must be at least 2.")
    if val_max > MAX_VAL_MAX:
        raise ValueError(f"val_max must be at most {MAX_VAL_MAX}.")

"""MCP server implementation that exposes the square of squares and Roman numeral tools."""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Union

import numpy as np
from mcp.server.fastmcp import FastMCP
from pydantic import Field

from .config import DEFAULT_VAL_MAX, SERVER_TRANSPORT
from .roman import convert_roman_numeral
from .squares import (
    MAX_VAL_MAX,
    as_square,
    format_square_of_squares,
    get_magic_number,
    is_semi_magic_square_of_squares,
    run_search,
)

Square = List[List[int]]


def _parse_square(square: Any) -> np.ndarray:
    """Validate a square received from a client and turn it into an array."""

    if not isinstance(square, list) or not all(isinstance(row, list) for row in square):
        raise ValueError("Square must be given as a list of rows.")
    if not all(
        isinstance(cell, int) and not isinstance(cell, bool) for row in square for cell in row
    ):
        raise ValueError("Square entries must be integers.")
    return as_square(square)


def _describe_square(square: np.ndarray) -> Dict[str, Any]:
    """Collect the squared line sums of *square* and whether it qualifies."""

    squared = square**2
    return {
        "magic_number": get_magic_number(square),
        "row_sums": squared.sum(axis=1).tolist(),
        "column_sums": squared.sum(axis=0).tolist(),
        # Anti-diagonal first, then the main diagonal.
        "diagonal_sums": [
            int(np.fliplr(squared).trace()),
            int(squared.trace()),
        ],
        "is_semi_magic": is_semi_magic_square_of_squares(square),
    }


app = FastMCP(
    name="Parker MCP",
    instructions=(
        "Search for semi-magic squares of squares shaped like the Parker "
        "Square, inspect candidate squares and convert Roman numerals."
    ),
    stateless_http=True,
)


@app.tool(
    title="Find Semi-Magic Square of Squares",
    description=(
        "Brute force search for a 3 x 3 semi-magic square of squares with the "
        "repeated-value structure of the Parker Square."
    ),
)
def find_semi_magic_square(
    val_max: Annotated[
        int,
        Field(
            ge=2,
            le=MAX_VAL_MAX,
            description="Exclusive upper bound of the values searched through.",
        ),
    ] = DEFAULT_VAL_MAX,
    selection: Annotated[
        str,
        Field(description="'last' for the last square found, 'best' for the most magic one."),
    ] = "last",
) -> Dict[str, Any]:
    """Search squares with entries in ``[1, val_max)`` and describe the chosen one."""

    return run_search(val_max, selection).as_dict()


@app.tool(
    title="Magic Number",
    description="Sum of the squares of the first row of a 3 x 3 square.",
)
def magic_number(
    square: Annotated[Square, Field(description="A 3 x 3 square given as a list of rows.")],
) -> Dict[str, Any]:
    """Return the magic number of *square*."""

    return {"magic_number": get_magic_number(_parse_square(square))}


@app.tool(
    title="Check Square",
    description="Report the squared row, column and diagonal sums of a 3 x 3 square.",
)
def check_square(
    square: Annotated[Square, Field(description="A 3 x 3 square given as a list of rows.")],
) -> Dict[str, Any]:
    """Describe how close *square* is to a magic square of squares."""

    return _describe_square(_parse_square(square))


@app.tool(
    title="Format Square",
    description="Render a 3 x 3 square as a square of squares.",
)
def format_square(
    square: Annotated[Square, Field(description="A 3 x 3 square given as a list of rows.")],
) -> Dict[str, Any]:
    """Render *square* with each entry annotated as squared."""

    return {"rendered": format_square_of_squares(_parse_square(square))}


@app.tool(
    title="Convert Roman Numeral",
    description="Convert an integer in [1, 3999] to a Roman numeral or back.",
)
def convert_roman(
    value: Annotated[
        Union[int, str],
        Field(description="An integer, a string of digits, or a Roman numeral."),
    ],
) -> Dict[str, Any]:
    """Convert *value* between Roman numerals and integers."""

    return {"input": value, "result": convert_roman_numeral(value)}


def run_server() -> None:
    """Serve the tools over the configured transport."""

    app.run(transport=SERVER_TRANSPORT)


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    run_server()

from __future__ import annotations

import numpy as np
import pytest

from conftest import require_slow
from parker_mcp.squares import (
    MAX_CELL_VALUE,
    MAX_VAL_MAX,
    MAX_VALUE_REPEAT,
    MIN_UNIQUE_VALUES,
    PARKER_SQUARE,
    SquareSearchExhausted,
    build_template_squares,
    count_magic_diagonals,
    find_semi_magic_squares,
    format_square_of_squares,
    generate_magic_square_of_squares,
    get_magic_number,
    has_minimal_repeating_values,
    is_magic_for_a_diagonal,
    is_magic_for_rows_and_columns,
    is_semi_magic_square_of_squares,
    parker_triples,
    qualifying_mask,
    run_search,
    satisfies_parker_constraints,
    score_square,
    search_squares,
    select_square,
    sum_squared,
)


def test_parker_constraint_examples():
    assert satisfies_parker_constraints(5, 1, 7)
    assert satisfies_parker_constraints(5, 7, 1)
    assert satisfies_parker_constraints(29, 1, 41)
    # 2 - 1 - 1 == 0 but the values are not unique.
    assert not satisfies_parker_constraints(1, 1, 1)
    assert not satisfies_parker_constraints(5, 1, 6)


def test_parker_triples_are_unique_and_constrained():
    triples = list(parker_triples(50))
    assert triples
    for a, b, d in triples:
        assert a != b and b != d and d != a
        assert 2 * a**2 - b**2 - d**2 == 0
        assert max(a, b, d) < 50
    assert triples == sorted(triples)


def test_no_triples_in_trivial_range():
    assert list(parker_triples(2)) == []


def test_parker_square_magic_number():
    assert sum_squared([29, 1, 47]) == 3051
    assert get_magic_number(PARKER_SQUARE) == 3051
    assert get_magic_number(PARKER_SQUARE.tolist()) == 3051


def test_parker_square_rows_columns_and_one_diagonal():
    squared = PARKER_SQUARE**2
    assert squared.sum(axis=1).tolist() == [3051, 3051, 3051]
    assert squared.sum(axis=0).tolist() == [3051, 3051, 3051]
    assert int(squared.trace()) == 3051
    assert int(np.fliplr(squared).trace()) == 4107

    assert is_magic_for_rows_and_columns(PARKER_SQUARE, 3051)
    assert is_magic_for_a_diagonal(PARKER_SQUARE, 3051)
    assert count_magic_diagonals(PARKER_SQUARE) == 1


def test_parker_square_repeats():
    values, counts = np.unique(PARKER_SQUARE, return_counts=True)
    assert set(values.tolist()) == {1, 23, 29, 37, 41, 47}
    assert len(values) == MIN_UNIQUE_VALUES
    assert counts.max() == MAX_VALUE_REPEAT
    assert has_minimal_repeating_values(PARKER_SQUARE)


def test_parker_square_qualifies_every_time():
    results = {is_semi_magic_square_of_squares(PARKER_SQUARE) for _ in range(3)}
    assert results == {True}


def test_too_many_repeats_never_qualifies():
    # Trivially magic for every line, but only a single value.
    ones = [[1, 1, 1], [1, 1, 1], [1, 1, 1]]
    assert is_magic_for_rows_and_columns(ones, 3)
    assert not has_minimal_repeating_values(ones)
    assert not is_semi_magic_square_of_squares(ones)

    # 29 appears three times.
    tripled = [[29, 1, 47], [41, 29, 1], [23, 41, 29]]
    assert not has_minimal_repeating_values(tripled)
    assert not is_semi_magic_square_of_squares(tripled)


def test_broken_square_fails():
    square = PARKER_SQUARE.copy()
    square[1, 1] = 36
    assert not is_semi_magic_square_of_squares(square)


def test_rejects_non_square_input():
    with pytest.raises(ValueError):
        get_magic_number([[1, 2], [3, 4]])
    with pytest.raises(ValueError):
        is_semi_magic_square_of_squares([[1.5, 2, 3], [4, 5, 6], [7, 8, 9]])


def test_template_matches_parker_square():
    squares = build_template_squares((29, 1, 41), 47, np.array([37]), np.array([23]))
    assert squares.shape == (1, 3, 3)
    np.testing.assert_array_equal(squares[0], PARKER_SQUARE)


def test_mask_agrees_with_scalar_predicate():
    values = np.arange(1, 48)
    e, g = np.meshgrid(values, values, indexing="ij")
    squares = build_template_squares((29, 1, 41), 47, e.ravel(), g.ravel())
    squares = np.concatenate([squares, PARKER_SQUARE[None], np.ones((1, 3, 3), dtype=np.int64)])

    mask = qualifying_mask(squares)
    expected = [is_semi_magic_square_of_squares(square) for square in squares]
    assert mask.tolist() == expected
    assert mask[-2] and not mask[-1]


def test_mask_rejects_bad_shape():
    with pytest.raises(ValueError):
        qualifying_mask(np.ones((4, 2, 3), dtype=np.int64))


def test_search_squares_finds_parker_square():
    found = search_squares((29, 1, 41), 48)
    assert any(np.array_equal(square, PARKER_SQUARE) for square in found)
    for square in found:
        assert square[0, 0] == 29 and square[2, 2] == 29
        assert square[0, 1] == 1 and square[1, 2] == 1
        assert square[1, 0] == 41 and square[2, 1] == 41


def test_search_squares_order():
    found = search_squares((29, 1, 41), 48)
    keys = [(int(s[0, 2]), int(s[1, 1]), int(s[2, 0])) for s in found]
    assert keys == sorted(keys)


def test_found_squares_all_qualify(squares_below_48):
    assert len(squares_below_48) >= 2
    for square in squares_below_48:
        assert is_semi_magic_square_of_squares(square)
        assert square.min() >= 1
        assert square.max() <= 47


def test_found_squares_include_parker_square_and_its_transpose(squares_below_48):
    def index_of(target):
        return next(i for i, s in enumerate(squares_below_48) if np.array_equal(s, target))

    # (29, 1, 41) is enumerated before (29, 41, 1).
    assert index_of(PARKER_SQUARE) < index_of(PARKER_SQUARE.T)


def test_generate_returns_last_found(squares_below_48):
    square = generate_magic_square_of_squares(48)
    np.testing.assert_array_equal(square, squares_below_48[-1])


def test_best_selection_has_top_score(squares_below_48):
    best = select_square(squares_below_48, "best")
    top = max(score_square(square) for square in squares_below_48)
    assert score_square(best) == top


def test_select_square_prefers_later_ties():
    first = PARKER_SQUARE
    second = PARKER_SQUARE.T.copy()
    assert score_square(first) == score_square(second)
    assert select_square([first, second], "best") is second
    assert select_square([first, second], "last") is second


def test_select_square_rejects_unknown_selection():
    with pytest.raises(ValueError):
        select_square([PARKER_SQUARE], "first")


def test_run_search_result(squares_below_48):
    result = run_search(48)
    assert result.val_max == 48
    assert result.match_count == len(squares_below_48)
    assert result.magic_number == get_magic_number(result.square)

    data = result.as_dict()
    assert data["square"] == result.square.tolist()
    assert data["rendered"] == format_square_of_squares(result.square)


def test_exhausted_search_reports_range():
    with pytest.raises(SquareSearchExhausted) as excinfo:
        generate_magic_square_of_squares(2)
    assert excinfo.value.val_max == 2
    assert "[1, 2]" in str(excinfo.value)


@pytest.mark.parametrize("val_max", [0, 1, True, 2.5])
def test_invalid_range_rejected(val_max):
    with pytest.raises(ValueError):
        generate_magic_square_of_squares(val_max)


def test_format_square_of_squares():
    assert format_square_of_squares(PARKER_SQUARE) == (
        "[29², 1², 47²\n"
        "41², 37², 1²\n"
        "23², 41², 29²]"
    )


def test_full_range_search_supersedes_parker_square():
    require_slow()

    square = generate_magic_square_of_squares()
    assert not np.array_equal(square, PARKER_SQUARE)
    assert is_semi_magic_square_of_squares(square)
    assert square.max() <= 99


def test_rows_and_columns_magic_without_a_magic_diagonal():
    # Parker Square with its first two rows swapped.
    square = PARKER_SQUARE[[1, 0, 2]]
    np.testing.assert_array_equal(square, [[41, 37, 1], [29, 1, 47], [23, 41, 29]])

    squared = square**2
    assert int(squared.trace()) == 2523
    assert int(np.fliplr(squared).trace()) == 531
    assert get_magic_number(square) == 3051
    assert is_magic_for_rows_and_columns(square, 3051)
    assert has_minimal_repeating_values(square)

    assert not is_magic_for_a_diagonal(square, 3051)
    assert count_magic_diagonals(square) == 0
    assert not is_semi_magic_square_of_squares(square)
    assert qualifying_mask(square[None]).tolist() == [False]


def test_large_entries_are_rejected_instead_of_overflowing():
    square = [[2**32, 1, 1], [1, 2**32, 1], [1, 1, 2**32]]
    with pytest.raises(ValueError):
        get_magic_number(square)
    with pytest.raises(ValueError):
        is_magic_for_rows_and_columns(square, 2**64 + 2)
    with pytest.raises(ValueError):
        qualifying_mask(np.array([square], dtype=np.int64))


def test_largest_allowed_entries_sum_exactly():
    big = MAX_CELL_VALUE
    square = [[big, 1, 1], [1, big, 1], [1, 1, big]]
    assert get_magic_number(square) == big**2 + 2
    assert is_magic_for_rows_and_columns(square, big**2 + 2)


def test_oversized_range_rejected():
    with pytest.raises(ValueError, match="at most"):
        generate_magic_square_of_squares(MAX_VAL_MAX + 1)
    with pytest.raises(ValueError):
        find_semi_magic_squares(20000)

import itertools

import numpy as np
import pytest

from pla_espresso.errors import InvalidValue, NotPowerOfTwo, TooLong
from pla_espresso.expression import evaluate, synthesize
from pla_espresso.truth_vector import (
    coverage,
    degenerate_pattern,
    format_patterns,
    format_truth_vector,
    from_pattern_matrix,
    karnaugh_map,
    literal_cost,
    parse_truth_vector,
    to_matrices,
)


def test_to_matrices_is_msb_first():
    ind, dep = to_matrices("0101")
    assert ind.tolist() == [[0, 0], [0, 1], [1, 0], [1, 1]]
    assert dep.tolist() == [[0], [1], [0], [1]]


def test_numeric_and_boolean_vectors():
    assert parse_truth_vector([0, 1, 2, 1]).tolist() == [0, 1, 2, 1]
    assert parse_truth_vector(np.array([True, False])).tolist() == [1, 0]
    assert parse_truth_vector(np.array([[0], [1]])).tolist() == [0, 1]
    assert parse_truth_vector("01?-").tolist() == [0, 1, 2, 2]


def test_length_must_be_power_of_two():
    with pytest.raises(NotPowerOfTwo):
        parse_truth_vector("01010")


def test_bad_elements_rejected():
    with pytest.raises(InvalidValue):
        parse_truth_vector("01x1")
    with pytest.raises(InvalidValue):
        parse_truth_vector([0, 3])
    with pytest.raises(InvalidValue):
        parse_truth_vector("")
    with pytest.raises(InvalidValue):
        parse_truth_vector(np.zeros((2, 2)))


def test_too_long_vector_rejected():
    with pytest.raises(TooLong):
        parse_truth_vector(np.broadcast_to(np.uint8(0), (2 ** 53,)))


def test_degenerate_patterns():
    false_pattern = degenerate_pattern(0)
    assert false_pattern.num_rows == 0
    assert false_pattern.dep.shape == (0, 1)

    true_pattern = degenerate_pattern(1)
    assert true_pattern.ind.shape == (1, 0)
    assert true_pattern.dep.tolist() == [[1]]


def test_coverage_and_minimized_vector():
    patterns = np.array([[0, 1, 2], [0, 2, 0]])
    sets, minimized = from_pattern_matrix(patterns, "1-11-000")
    assert sets == [[2, 3], [0, 2]]
    assert minimized.tolist() == [1, 0, 1, 1, 0, 0, 0, 0]


def test_preserve_dc_keeps_unused_dont_cares():
    patterns = np.array([[0, 1, 2], [0, 2, 0]])
    _, minimized = from_pattern_matrix(patterns, "1-11-000", preserve_dc=True)
    assert minimized.tolist() == [1, 2, 1, 1, 2, 0, 0, 0]


def test_dont_cares_used_by_a_pattern_become_true():
    sets, minimized = from_pattern_matrix(np.array([[1, 2, 2]]), "----1111")
    assert sets == [[4, 5, 6, 7]]
    assert minimized.tolist() == [0, 0, 0, 0, 1, 1, 1, 1]


def test_minimized_vector_is_idempotent_without_dont_cares():
    tt = "01100111"
    ind, dep = to_matrices(tt)
    on_rows = ind[dep[:, 0] == 1]
    _, minimized = from_pattern_matrix(on_rows, tt)
    assert format_truth_vector(minimized) == tt


def test_pattern_width_must_match():
    with pytest.raises(InvalidValue):
        from_pattern_matrix(np.array([[1, 2]]), "01010101")


def test_coverage_of_no_patterns():
    assert coverage(np.zeros((0, 3), dtype=np.uint8), 3) == []


def test_literal_cost():
    assert literal_cost(np.array([[0, 1, 2], [0, 2, 0]])).total == 6
    assert literal_cost(np.array([[1, 2, 2], [2, 1, 2]])).total == 2
    cost = literal_cost(np.array([[1, 1]]))
    assert (cost.and_inputs, cost.or_inputs) == (2, 0)
    assert literal_cost(np.zeros((0, 3))).total == 0


def test_format_patterns():
    assert format_patterns(np.array([[0, 1, 2], [2, 2, 1]])) == ["01-", "--1"]


@pytest.mark.parametrize("preserve_dc", [False, True])
@pytest.mark.parametrize(
    "tt, patterns",
    [
        ("1-11-000", [[0, 1, 2], [0, 2, 0]]),
        ("1-11-000", [[0, 2, 2]]),
        ("01110111", [[2, 2, 1], [2, 1, 2]]),
        ("----1111", [[1, 2, 2]]),
        ("1--0-0-1", [[0, 0, 2], [1, 1, 2]]),
        ("10000000000-0001", [[0, 0, 0, 0], [1, 2, 1, 1]]),
    ],
)
def test_expression_true_exactly_on_covered_positions(tt, patterns, preserve_dc):
    n_bits = len(tt).bit_length() - 1
    names = list("ABCD"[:n_bits])
    ind = np.array(patterns)
    line = synthesize(ind, np.ones((len(patterns), 1)), names, ["Z"])
    sets, minimized = from_pattern_matrix(ind, tt, preserve_dc=preserve_dc)
    covered = {k for positions in sets for k in positions}

    for k, bits in enumerate(itertools.product([0, 1], repeat=n_bits)):
        value = evaluate(line, dict(zip(names, bits)))
        assert value == (k in covered)
        assert value == (minimized[k] == 1)
        if tt[k] != "-":
            assert value == (tt[k] == "1")


def test_karnaugh_map_three_variables():
    codes = parse_truth_vector("1-11-000")
    _, minimized = from_pattern_matrix(np.array([[0, 2, 2]]), codes)
    assert karnaugh_map(codes, minimized) == [
        "  /  0  1  3  2 \\   / 1 = 1 1 \\",
        "  \\  4  5  7  6 /   \\ - . . . /",
    ]


def test_karnaugh_map_four_variables():
    codes = parse_truth_vector("000000000000-001")
    _, minimized = from_pattern_matrix(np.array([[1, 1, 1, 1]]), codes, preserve_dc=True)
    assert karnaugh_map(codes, minimized) == [
        "  /  0  1  3  2 \\   / . . . . \\",
        "  |  4  5  7  6 |   | . . . . |",
        "  | 12 13 15 14 |   | - . 1 . |",
        "  \\  8  9 11 10 /   \\ . . . . /",
    ]


def test_karnaugh_map_only_for_three_or_four_variables():
    assert karnaugh_map([0, 1, 1, 0], [0, 1, 1, 0]) == []
    assert karnaugh_map([0] * 32, [0] * 32) == []

import numpy as np

from pla_espresso.expression import evaluate, product_term, simplify, synthesize


def test_two_single_literal_terms():
    ind = np.array([[1, 2, 2], [2, 1, 2]])
    dep = np.array([[1], [1]])
    assert synthesize(ind, dep, ["A", "B", "C"], ["Z"]) == "Z = A | B"


def test_custom_names():
    assert synthesize([[1, 0]], [[1]], ["hello", "world"], ["out"]) == "out = (hello & ~world)"


def test_three_term_expression():
    ind = np.array([[1, 1, 0], [1, 0, 1], [0, 1, 1]])
    dep = np.ones((3, 1))
    assert synthesize(ind, dep, ["A", "B", "C"], ["Z"]) == (
        "Z = (A & B & ~C) | (A & ~B & C) | (~A & B & C)"
    )


def test_constant_functions():
    assert synthesize(np.zeros((0, 2)), np.zeros((0, 1)), ["A", "B"], ["Z"]) == "Z = 0"
    assert synthesize([[2, 2]], [[1]], ["A", "B"], ["Z"]) == "Z = 1"


def test_each_function_only_gets_its_own_patterns():
    ind = np.array([[1, 2], [2, 0]])
    dep = np.array([[1, 2], [0, 1]])
    assert synthesize(ind, dep, ["A", "B"], ["F", "G"]) == "F = A\nG = ~B"


def test_product_term_shapes():
    assert product_term([2, 2], ["A", "B"]) == "1"
    assert product_term([0, 2], ["A", "B"]) == "~A"
    assert product_term([0, 1], ["A", "B"]) == "(~A & B)"


def test_evaluate_matches_truth_table():
    line = "Z = (A & ~B) | C"
    assert evaluate(line, {"A": True, "B": False, "C": False})
    assert not evaluate(line, {"A": True, "B": True, "C": False})
    assert evaluate(line, {"A": False, "B": True, "C": True})
    assert not evaluate("Z = 0", {})
    assert evaluate("Z = 1", {})


def test_simplify_merges_terms():
    assert simplify("Z = (A & B) | (A & ~B)") == "Z = A"


def test_simplify_constants():
    assert simplify("Z = A | ~A") == "Z = 1"
    assert simplify("Z = 0") == "Z = 0"


def test_simplify_keeps_every_line():
    out = simplify("F = (A & B) | (A & ~B)\nG = B").splitlines()
    assert out == ["F = A", "G = B"]

"""
Verification of covering patterns against the truth table they came from.

Ensures every true row of every function is covered and no false row is.
Rows may contain don't-care inputs, so each row is a cube rather than a
single assignment; containment of an ON cube in the cover is checked with a
SAT query.
"""

from typing import Optional, Sequence

import numpy as np
from pysat.solvers import Solver

from .codec import DONT_CARE
from .pla import PatternMatrix


def pattern_covers(row: Sequence[int], assignment: Sequence[int]) -> bool:
    """Check if a covering pattern matches a full 0/1 assignment."""
    return all(code == DONT_CARE or code == value for code, value in zip(row, assignment))


def evaluate_cover(pattern: PatternMatrix, column: int, assignment: Sequence[int]) -> bool:
    """Evaluate a sum-of-products on a specific input (OR of AND terms)."""
    rows = np.flatnonzero(pattern.dep[:, column] == 1)
    return any(pattern_covers(pattern.ind[k].tolist(), assignment) for k in rows)


def _cubes_intersect(a: Sequence[int], b: Sequence[int]) -> bool:
    return all(x == DONT_CARE or y == DONT_CARE or x == y for x, y in zip(a, b))


def _literals(row: Sequence[int]) -> list[int]:
    """DIMACS literals for the fixed columns of a cube (variable k+1 is column k)."""
    return [k + 1 if code == 1 else -(k + 1) for k, code in enumerate(row) if code != DONT_CARE]


def _cube_contained(cube: Sequence[int], terms: list[list[int]], solver_name: str) -> bool:
    """True if every assignment in `cube` satisfies at least one term."""
    if any(not _literals(term) for term in terms):
        return True
    with Solver(name=solver_name) as solver:
        for var in range(1, len(cube) + 1):
            # declare every variable so assumptions on unconstrained ones are valid
            solver.add_clause([var, -var])
        for term in terms:
            # block every assignment this term covers
            solver.add_clause([-lit for lit in _literals(term)])
        return not solver.solve(assumptions=_literals(cube))


def verify_cover(
    ind: np.ndarray,
    dep: np.ndarray,
    pattern: PatternMatrix,
    dep_names: Optional[Sequence[str]] = None,
    solver_name: str = "g3",
) -> tuple[bool, list[str]]:
    """
    Verify that covering patterns reproduce a truth table.

    Args:
        ind: Canonical independent matrix of the source table
        dep: Canonical dependent matrix (aliases folded)
        pattern: Patterns returned by the solver
        dep_names: Names used in error messages
        solver_name: pysat solver backend

    Returns:
        Tuple of (all_correct, list of error messages)
    """
    ind = np.asarray(ind)
    dep = np.asarray(dep)
    if dep_names is None:
        dep_names = [f"F{j + 1}" for j in range(dep.shape[1])]

    errors = []
    for j, name in enumerate(dep_names):
        terms = [pattern.ind[k].tolist() for k in np.flatnonzero(pattern.dep[:, j] == 1)]

        for r in range(ind.shape[0]):
            cube = ind[r].tolist()
            code = int(dep[r, j])
            text = "".join("01-"[c] for c in cube)

            if code == 0:
                hits = [t for t in terms if _cubes_intersect(cube, t)]
                if hits:
                    errors.append(f"{name}, row {r} ({text}): false row is covered")
            elif code == 1 and not _cube_contained(cube, terms, solver_name):
                errors.append(f"{name}, row {r} ({text}): true row is not fully covered")

    return len(errors) == 0, errors


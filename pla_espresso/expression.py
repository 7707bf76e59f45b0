"""
Sum-of-products expressions built from covering patterns.

Each dependent variable gets one line ``name = term | term | ...`` where a
product term is a bare literal, ``1`` (no literals), or a parenthesised
conjunction such as ``(A & ~B)``. A function with no covering pattern is
``0``.
"""

from enum import Enum
from typing import Mapping, Sequence

import numpy as np
from sympy import And, Not, Or, Symbol, false, simplify_logic, true

ALWAYS_FALSE = "0"
ALWAYS_TRUE = "1"


class LiteralCode(Enum):
    NEGATED = 0
    PLAIN = 1
    OMIT = 2

    @classmethod
    def from_code(cls, code: int) -> "LiteralCode":
        return cls(int(code)) if code in (0, 1) else cls.OMIT


def product_term(row: Sequence[int], ind_names: Sequence[str]) -> str:
    """Render one covering pattern as a product term."""
    literals = []
    for code, name in zip(row, ind_names):
        lit = LiteralCode.from_code(code)
        if lit is LiteralCode.NEGATED:
            literals.append(f"~{name}")
        elif lit is LiteralCode.PLAIN:
            literals.append(name)

    if not literals:
        return ALWAYS_TRUE
    if len(literals) == 1:
        return literals[0]
    return "(" + " & ".join(literals) + ")"


def synthesize(
    ind_out: np.ndarray,
    dep_out: np.ndarray,
    ind_names: Sequence[str],
    dep_names: Sequence[str],
) -> str:
    """
    Build one sum-of-products line per dependent variable.

    Only patterns whose code for that function is 1 contribute; patterns that
    are don't-care or false for the function are skipped even when they
    cover another function.
    """
    ind_out = np.asarray(ind_out)
    dep_out = np.asarray(dep_out)
    lines = []
    for j, dep_name in enumerate(dep_names):
        rows = np.flatnonzero(dep_out[:, j] == 1) if dep_out.shape[0] else []
        terms = [product_term(ind_out[k].tolist(), ind_names) for k in rows]
        rhs = " | ".join(terms) if terms else ALWAYS_FALSE
        lines.append(f"{dep_name} = {rhs}")
    return "\n".join(lines)


def _split_line(line: str) -> tuple[str, str]:
    name, sep, rhs = line.partition("=")
    if not sep:
        raise ValueError(f"Not an assignment: {line!r}")
    return name.strip(), rhs.strip()


def _terms(rhs: str) -> list[list[tuple[str, bool]]]:
    """Split a sum-of-products right-hand side into (name, positive) literals."""
    if rhs == ALWAYS_FALSE:
        return []
    terms = []
    for term in rhs.split("|"):
        term = term.strip().strip("()").strip()
        if term == ALWAYS_TRUE:
            terms.append([])
            continue
        literals = []
        for lit in term.split("&"):
            lit = lit.strip()
            if lit.startswith("~"):
                literals.append((lit[1:].strip(), False))
            else:
                literals.append((lit, True))
        terms.append(literals)
    return terms


def evaluate(line: str, assignment: Mapping[str, bool]) -> bool:
    """Evaluate one synthesized ``name = expr`` line for a variable assignment."""
    _, rhs = _split_line(line)
    return any(
        all(bool(assignment[name]) == positive for name, positive in term)
        for term in _terms(rhs)
    )


def to_sympy(rhs: str, symbols: Mapping[str, Symbol]):
    terms = []
    for term in _terms(rhs):
        literals = [symbols[name] if positive else Not(symbols[name]) for name, positive in term]
        terms.append(And(*literals) if literals else true)
    return Or(*terms) if terms else false


def simplify(expr: str, force: bool = False) -> str:
    """
    Symbolically simplify every line of a synthesized expression.

    The result is logically equivalent but may no longer be a sum of
    products (e.g. ``Z = A & (B | C)``).
    """
    out = []
    for line in expr.splitlines():
        if not line.strip():
            continue
        name, rhs = _split_line(line)
        names = {lit for term in _terms(rhs) for lit, _ in term}
        symbols = {n: Symbol(n) for n in names}
        simplified = simplify_logic(to_sympy(rhs, symbols), force=force)
        if simplified is true:
            text = ALWAYS_TRUE
        elif simplified is false:
            text = ALWAYS_FALSE
        else:
            text = str(simplified)
        out.append(f"{name} = {text}")
    return "\n".join(out)

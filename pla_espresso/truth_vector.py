"""
Flat truth-vector adapter.

A truth vector of length 2^N lists one function's value for every
assignment of N independent variables. Position k is the assignment given
by the binary digits of k, most significant bit first:

    tt = '0101'   (N = 2, variables A B)

    k=0 -> 00 -> 0
    k=1 -> 01 -> 1
    k=2 -> 10 -> 0
    k=3 -> 11 -> 1

so column 1 of the independent matrix is bit N-1 of the index and column N
is bit 0.
"""

import logging
from dataclasses import dataclass
from typing import Union

import numpy as np

from .codec import DONT_CARE, Encoding, encode_independent
from .errors import InvalidValue, NotPowerOfTwo, TooLong
from .pla import PatternMatrix

logger = logging.getLogger(__name__)

MAX_BITS = 52
TT_CHARS = {"0": 0, "1": 1, "2": 2, "-": 2, "?": 2}
ROLE = "truth vector"


@dataclass
class CostBreakdown:
    """Rough gate-input estimate for a sum-of-products cover."""

    and_inputs: int  # Literals of multi-literal terms (single literals are wires)
    or_inputs: int   # One per term when more than one term is ORed

    @property
    def total(self) -> int:
        return self.and_inputs + self.or_inputs


def _check_length(length: int) -> int:
    if length == 0:
        raise InvalidValue(ROLE, "must not be empty")
    if length & (length - 1):
        raise NotPowerOfTwo(f"Length of a truth vector must be a power of 2, got {length}")
    n_bits = length.bit_length() - 1
    if n_bits > MAX_BITS:
        raise TooLong(f"Truth vector must not be longer than 2^{MAX_BITS} elements, got 2^{n_bits}")
    return n_bits


def parse_truth_vector(tt) -> np.ndarray:
    """Validate a truth vector and return its codes (0/1/2) as a uint8 vector."""
    if isinstance(tt, str):
        _check_length(len(tt))
        bad = sorted({ch for ch in tt if ch not in TT_CHARS})
        if bad:
            raise InvalidValue(ROLE, f"characters {bad} not among '0', '1', '2', '-', '?'")
        return np.array([TT_CHARS[ch] for ch in tt], dtype=np.uint8)

    arr = np.asarray(tt)
    if arr.ndim > 1 and sum(dim != 1 for dim in arr.shape) > 1:
        raise InvalidValue(ROLE, f"must be a vector, got shape {arr.shape}")
    _check_length(arr.size)
    arr = arr.ravel()

    if arr.dtype.kind == "b":
        return arr.astype(np.uint8)
    if arr.dtype.kind not in "iuf":
        raise InvalidValue(ROLE, f"unsupported element type {arr.dtype}")
    if not np.all(np.isin(arr, (0, 1, 2))):
        raise InvalidValue(ROLE, "values must be 0/false, 1/true or 2 (don't-care)")
    return arr.astype(np.uint8)


def bit_width(tt_codes: np.ndarray) -> int:
    return _check_length(len(tt_codes))


def _bit_column(positions: np.ndarray, n_bits: int, col: int) -> np.ndarray:
    """Bit of every position feeding independent column `col` (0 = MSB)."""
    shift = np.uint64(n_bits - 1 - col)
    return ((positions >> shift) & np.uint64(1)).astype(np.uint8)


def to_matrices(tt) -> tuple[np.ndarray, np.ndarray]:
    """Expand a truth vector into an independent matrix and a one-column dependent matrix."""
    codes = parse_truth_vector(tt)
    n_bits = bit_width(codes)
    positions = np.arange(len(codes), dtype=np.uint64)
    ind = np.empty((len(codes), n_bits), dtype=np.uint8)
    for col in range(n_bits):
        ind[:, col] = _bit_column(positions, n_bits, col)
    return ind, codes.reshape(-1, 1).copy()


def degenerate_pattern(value: int) -> PatternMatrix:
    """
    Covering patterns for a zero-variable function (truth vector of length 1).

    0 is constant false (no pattern); 1 and don't-care are both treated as
    constant true (one pattern without literals).
    """
    logger.debug("Zero-variable truth vector %d, solver not invoked", value)
    if value == 0:
        return PatternMatrix.empty(0, 1)
    return PatternMatrix(
        ind=np.zeros((1, 0), dtype=np.uint8),
        dep=np.ones((1, 1), dtype=np.uint8),
    )


def coverage(ind_out: np.ndarray, n_bits: int) -> list[list[int]]:
    """Positions (0-indexed) covered by each pattern, in pattern order."""
    ind_out = np.asarray(ind_out)
    positions = np.arange(2 ** n_bits, dtype=np.uint64)
    covered = []
    for row in ind_out.tolist():
        mask = np.ones(len(positions), dtype=bool)
        for col, code in enumerate(row):
            if code != DONT_CARE:
                mask &= _bit_column(positions, n_bits, col) == code
        covered.append(np.flatnonzero(mask).tolist())
    return covered


def from_pattern_matrix(
    pattern: Union[PatternMatrix, np.ndarray],
    tt,
    preserve_dc: bool = False,
) -> tuple[list[list[int]], np.ndarray]:
    """
    Map covering patterns back onto the original truth vector.

    Returns the coverage set of every pattern and the minimized truth vector.
    With ``preserve_dc=False`` the minimized vector is true exactly on the
    covered positions. With ``preserve_dc=True`` the original vector is kept
    and only covered positions are set true, so unused don't-cares stay 2.
    """
    codes = parse_truth_vector(tt)
    n_bits = bit_width(codes)
    ind_out = pattern.ind if isinstance(pattern, PatternMatrix) else np.asarray(pattern)
    if ind_out.ndim != 2 or (ind_out.shape[0] and ind_out.shape[1] != n_bits):
        raise InvalidValue("independent", f"patterns must have {n_bits} columns, got shape {ind_out.shape}")

    sets = coverage(ind_out, n_bits)
    covered = np.zeros(len(codes), dtype=bool)
    for positions in sets:
        covered[positions] = True

    if preserve_dc:
        minimized = codes.copy()
        minimized[covered] = 1
    else:
        minimized = covered.astype(np.uint8)
    return sets, minimized


def literal_cost(ind_out: np.ndarray) -> CostBreakdown:
    """
    Gate-input estimate for a set of covering patterns.

    Multi-literal patterns need an AND gate with one input per literal;
    single literals are free. With more than one pattern each one feeds the
    final OR gate.
    """
    ind_out = np.asarray(ind_out)
    rows = ind_out.shape[0]
    counts = (ind_out != DONT_CARE).sum(axis=1) if rows else np.zeros(0, dtype=int)
    and_inputs = int(counts[counts > 1].sum())
    or_inputs = rows if rows > 1 else 0
    return CostBreakdown(and_inputs=and_inputs, or_inputs=or_inputs)


KMAP_INDEX = ((0, 1, 3, 2), (4, 5, 7, 6), (12, 13, 15, 14), (8, 9, 11, 10))
_KMAP_EDGES = {3: "/\\", 4: "/||\\"}


def _kmap_mark(source: int, minimized: int) -> str:
    if source == 0:
        return "."
    if source == DONT_CARE:
        return "=" if minimized == 1 else "-"
    return "01-"[minimized]


def karnaugh_map(codes, minimized) -> list[str]:
    """
    Karnaugh map lines for a 3- or 4-variable truth vector.

    Each line shows the Gray-coded positions of one map row next to their
    values: '.' false, '1' true, '-' a don't-care left unused and '=' a
    don't-care the cover used as true. Other widths give no lines.
    """
    codes = np.asarray(codes).ravel().tolist()
    minimized = np.asarray(minimized).ravel().tolist()
    n_bits = bit_width(codes)
    if n_bits not in _KMAP_EDGES:
        return []

    edges = _KMAP_EDGES[n_bits]
    lines = []
    for y, row in enumerate(KMAP_INDEX[: 2 ** (n_bits - 2)]):
        left, right = edges[y], edges[-1 - y]
        numbers = " ".join(f"{k:2d}" for k in row)
        marks = " ".join(_kmap_mark(codes[k], minimized[k]) for k in row)
        lines.append(f"  {left} {numbers} {right}   {left} {marks} {right}")
    return lines


def format_truth_vector(codes: np.ndarray) -> str:
    return "".join("01-"[v] for v in np.asarray(codes).tolist())


def format_patterns(ind_out: np.ndarray) -> list[str]:
    return encode_independent(ind_out, Encoding.CHARACTER)

"""
Conversion between user-facing truth-table encodings and canonical codes.

Canonical independent codes:
- 0 = false, 1 = true, 2 = don't-care

Canonical dependent codes:
- 0 = false, 1 = true, 2 = don't-care, 5 = ignore (row does not constrain
  this function)
- 3 and 4 are accepted as aliases of 0 and 1 and folded on decode

Four input families are supported, each as its own table type: boolean,
integer, single-character and categorical (case-insensitive labels).
`as_table` picks the family once; everything after that works on
canonical ``numpy.uint8`` matrices.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np

from .errors import InvalidValue


IND_MAX = 2
DEP_MAX = 5
DONT_CARE = 2
IGNORE = 5

DEFAULT_CATEGORIES = ("off", "on", "DC")
IGNORED_LABEL = "ignored"

IND_CHARS = {"0": 0, "1": 1, "2": 2, "-": 2, "?": 2}
DEP_CHARS = {**IND_CHARS, "3": 3, "4": 4, "5": 5, "~": 5}

_DC_LABELS = {"2": 2, "-": 2, "?": 2, "dc": 2, "dontcare": 2, "maybe": 2}
IND_LABELS = {
    "0": 0, "off": 0, "no": 0, "false": 0,
    "1": 1, "on": 1, "yes": 1, "true": 1,
    **_DC_LABELS,
}
DEP_LABELS = {**IND_LABELS, "3": 3, "4": 4, "5": 5, "~": 5, IGNORED_LABEL: 5}


class Encoding(Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    CHARACTER = "character"
    CATEGORICAL = "categorical"


@dataclass(frozen=True, eq=False)
class BooleanTable:
    values: np.ndarray
    encoding = Encoding.BOOLEAN


@dataclass(frozen=True, eq=False)
class IntegerTable:
    values: np.ndarray
    encoding = Encoding.INTEGER


@dataclass(frozen=True)
class CharTable:
    rows: tuple[str, ...]
    encoding = Encoding.CHARACTER


@dataclass(frozen=True)
class CategoricalTable:
    """
    Label matrix plus the three labels used for false, true and don't-care.

    The fixed labels (off/on/no/yes/dc/...) are always recognised; the
    caller's labels take precedence when they overlap.
    """

    cells: tuple[tuple[str, ...], ...]
    labels: tuple[str, str, str] = DEFAULT_CATEGORIES
    encoding = Encoding.CATEGORICAL

    @property
    def shape(self) -> tuple[int, int]:
        return len(self.cells), len(self.cells[0]) if self.cells else 0


Table = Union[BooleanTable, IntegerTable, CharTable, CategoricalTable]
_TABLE_TYPES = (BooleanTable, IntegerTable, CharTable, CategoricalTable)


def _as_2d(arr: np.ndarray, role: str) -> np.ndarray:
    if arr.ndim == 0:
        return arr.reshape(1, 1)
    if arr.ndim == 1:
        return arr.reshape(-1, 1)
    if arr.ndim == 2:
        return arr
    raise InvalidValue(role, f"expected a matrix, got {arr.ndim} dimensions")


def _is_char_row(text: str) -> bool:
    return all(ch in DEP_CHARS for ch in text)


def _from_strings(arr: np.ndarray, role: str) -> Table:
    if arr.ndim == 1 and all(_is_char_row(s) for s in arr.tolist()):
        return CharTable(tuple(s.strip() for s in arr.tolist()))
    arr = _as_2d(arr, role)
    if all(len(s) <= 1 for s in arr.ravel().tolist()):
        return CharTable(tuple("".join(row) for row in arr.tolist()))
    return CategoricalTable(tuple(tuple(str(c) for c in row) for row in arr.tolist()))


def as_table(raw, role: str = "independent") -> Table:
    """Classify a raw input into one of the four table families."""
    if isinstance(raw, _TABLE_TYPES):
        return raw
    if isinstance(raw, str):
        return CharTable(tuple(line.strip() for line in raw.splitlines() if line.strip()))

    try:
        arr = np.asarray(raw)
    except ValueError as exc:
        raise InvalidValue(role, f"not a rectangular matrix ({exc})") from exc

    if arr.dtype.kind == "O":
        items = arr.ravel().tolist()
        if items and all(isinstance(v, (bool, np.bool_)) for v in items):
            arr = arr.astype(bool)
        elif items and all(isinstance(v, (int, np.integer)) for v in items):
            arr = arr.astype(np.int64)
        elif items and all(isinstance(v, str) for v in items):
            arr = arr.astype(str)
        else:
            raise InvalidValue(role, "mixed or unsupported element types")

    kind = arr.dtype.kind
    if kind == "b":
        return BooleanTable(_as_2d(arr, role))
    if kind in "iu":
        return IntegerTable(_as_2d(arr.astype(np.int64), role))
    if kind == "f":
        if not np.all(np.isfinite(arr)) or not np.all(arr == np.round(arr)):
            raise InvalidValue(role, "numeric codes must be whole numbers")
        return IntegerTable(_as_2d(arr.astype(np.int64), role))
    if kind in "US":
        return _from_strings(arr.astype(str), role)
    raise InvalidValue(role, f"unsupported element type {arr.dtype}")


def encoding_of(raw) -> Encoding:
    return as_table(raw).encoding


def _decode(table: Table, role: str, chars: dict, labels: dict, max_code: int) -> np.ndarray:
    if isinstance(table, BooleanTable):
        return table.values.astype(np.uint8)

    if isinstance(table, IntegerTable):
        values = table.values
        bad = (values < 0) | (values > max_code)
        if bad.any():
            found = sorted(set(values[bad].tolist()))
            raise InvalidValue(role, f"codes must lie in 0..{max_code}, found {found}")
        return values.astype(np.uint8)

    if isinstance(table, CharTable):
        widths = {len(row) for row in table.rows}
        if len(widths) > 1:
            raise InvalidValue(role, f"rows have different lengths {sorted(widths)}")
        width = widths.pop() if widths else 0
        out = np.empty((len(table.rows), width), dtype=np.uint8)
        for i, row in enumerate(table.rows):
            for j, ch in enumerate(row):
                if ch not in chars:
                    allowed = " ".join(repr(c) for c in chars)
                    raise InvalidValue(role, f"character {ch!r} not one of {allowed}")
                out[i, j] = chars[ch]
        return out

    lookup = dict(labels)
    for code, label in enumerate(table.labels):
        lookup[label.strip().lower()] = code
    rows, cols = table.shape
    out = np.empty((rows, cols), dtype=np.uint8)
    for i, row in enumerate(table.cells):
        if len(row) != cols:
            raise InvalidValue(role, "categorical rows have different lengths")
        for j, cell in enumerate(row):
            code = lookup.get(cell.strip().lower())
            if code is None:
                supported = ", ".join(sorted(lookup))
                raise InvalidValue(role, f"unsupported category {cell!r}; supported: {supported}")
            out[i, j] = code
    return out


def decode_independent(raw) -> np.ndarray:
    """Decode any supported representation into codes 0/1/2."""
    return _decode(as_table(raw, "independent"), "independent", IND_CHARS, IND_LABELS, IND_MAX)


def decode_dependent(raw) -> np.ndarray:
    """Decode any supported representation into codes 0/1/2/5 (aliases folded)."""
    out = _decode(as_table(raw, "dependent"), "dependent", DEP_CHARS, DEP_LABELS, DEP_MAX)
    out[out == 3] = 0
    out[out == 4] = 1
    return out


def _canonical(matrix, role: str, max_code: int) -> np.ndarray:
    arr = _as_2d(np.asarray(matrix), role)
    if arr.size and arr.dtype.kind not in "biu":
        raise InvalidValue(role, f"canonical matrix must be integer, got {arr.dtype}")
    arr = arr.astype(np.int64)
    bad = (arr < 0) | (arr > max_code)
    if bad.any():
        raise InvalidValue(role, f"codes must lie in 0..{max_code}")
    return arr.astype(np.uint8)


def _encode(m: np.ndarray, role: str, encoding: Encoding, labels: Optional[Sequence[str]]):
    if encoding is Encoding.INTEGER:
        return m.copy()

    if encoding is Encoding.BOOLEAN:
        if (m > 1).any():
            raise InvalidValue(role, "boolean encoding cannot carry don't-care or ignore codes")
        return m.astype(bool)

    if encoding is Encoding.CHARACTER:
        return ["".join("01"[v] if v < 2 else "-" for v in row) for row in m.tolist()]

    labels = tuple(labels) if labels is not None else DEFAULT_CATEGORIES
    if len(labels) != 3:
        raise InvalidValue(role, "categorical encoding needs exactly three labels (false, true, don't-care)")
    names = (labels[0], labels[1], labels[2], labels[0], labels[1], IGNORED_LABEL)
    cells = tuple(tuple(names[v] for v in row) for row in m.tolist())
    return CategoricalTable(cells, labels)


def encode_independent(matrix, encoding: Encoding = Encoding.INTEGER, labels: Optional[Sequence[str]] = None):
    """
    Render a canonical independent matrix in the requested family.

    Returns a uint8 array (integer), bool array (boolean, 0/1 only), list of
    row strings over '0', '1', '-' (character) or a CategoricalTable.
    """
    return _encode(_canonical(matrix, "independent", IND_MAX), "independent", encoding, labels)


def encode_dependent(matrix, encoding: Encoding = Encoding.INTEGER, labels: Optional[Sequence[str]] = None):
    """Dependent counterpart of `encode_independent`; ignore renders as 'ignored'."""
    return _encode(_canonical(matrix, "dependent", DEP_MAX), "dependent", encoding, labels)

"""
Reading and writing Espresso's PLA cover-set text format.

The document written for Espresso looks like:

    .i 3
    .o 1
    .ilb A B C
    .ob Z
    .p 2
    010 1
    011 1
    .d 0
    .r 1
    100 0
    .e

Rows are grouped per occurrence: a row whose dependent columns disagree
(true for one function, don't-care for another) is listed in every group it
belongs to.
"""

import logging
import re
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .codec import DEP_MAX, IGNORE, IND_MAX
from .errors import EmptyTable, InvalidValue, MalformedResult, NameCountMismatch, RowCountMismatch
from .names import validate_names

logger = logging.getLogger(__name__)

# (directive, target code) in document order: ON, DC, OFF
SECTIONS = ((".p", 1), (".d", 2), (".r", 0))

_ROW_RE = re.compile(r"^([-012?]+)\s+([-~012345]+)$")


@dataclass(frozen=True)
class CoverSetDocument:
    """Header plus the ON/DC/OFF row groups of a PLA cover set."""

    ind_names: tuple[str, ...]
    dep_names: tuple[str, ...]
    on_rows: tuple[str, ...]
    dc_rows: tuple[str, ...]
    off_rows: tuple[str, ...]

    @property
    def ind_count(self) -> int:
        return len(self.ind_names)

    @property
    def dep_count(self) -> int:
        return len(self.dep_names)

    def groups(self) -> list[tuple[str, tuple[str, ...]]]:
        return [(".p", self.on_rows), (".d", self.dc_rows), (".r", self.off_rows)]

    def to_text(self) -> str:
        lines = [
            f".i {self.ind_count}",
            f".o {self.dep_count}",
            ".ilb " + " ".join(self.ind_names),
            ".ob " + " ".join(self.dep_names),
        ]
        for directive, rows in self.groups():
            lines.append(f"{directive} {len(rows)}")
            lines.extend(rows)
        lines.append(".e")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text()


@dataclass(frozen=True, eq=False)
class PatternMatrix:
    """
    Covering patterns returned by the solver.

    - ind: P x K codes in {0, 1, 2}
    - dep: P x M codes, which functions each pattern belongs to
    """

    ind: np.ndarray
    dep: np.ndarray

    @property
    def num_rows(self) -> int:
        return self.ind.shape[0]

    @classmethod
    def empty(cls, ind_count: int, dep_count: int) -> "PatternMatrix":
        return cls(
            ind=np.zeros((0, ind_count), dtype=np.uint8),
            dep=np.zeros((0, dep_count), dtype=np.uint8),
        )


def _render_ind(row) -> str:
    return "".join(str(v) for v in row)


def _render_dep(row) -> str:
    return "".join("~" if v == IGNORE else str(v) for v in row)


def write(
    ind: np.ndarray,
    dep: np.ndarray,
    ind_names: Sequence[str],
    dep_names: Sequence[str],
) -> CoverSetDocument:
    """
    Build the cover-set document for canonical independent/dependent matrices.

    `dep` must already have its aliases folded (codes 0, 1, 2, 5).
    """
    ind = np.asarray(ind, dtype=np.uint8)
    dep = np.asarray(dep, dtype=np.uint8)

    if ind.shape[0] != dep.shape[0]:
        raise RowCountMismatch(
            f"Independent and dependent data must have the same number of rows "
            f"({ind.shape[0]} != {dep.shape[0]})"
        )
    if ind.shape[0] == 0:
        raise EmptyTable("The truth table must contain at least one row")
    if ind.ndim != 2 or dep.ndim != 2 or ind.shape[1] == 0 or dep.shape[1] == 0:
        raise EmptyTable(
            f"The truth table needs at least one independent and one dependent column "
            f"(got shapes {ind.shape} and {dep.shape})"
        )
    if len(ind_names) != ind.shape[1] or len(dep_names) != dep.shape[1]:
        raise NameCountMismatch("Each column needs exactly one name")
    validate_names(ind_names, dep_names)
    if (ind > IND_MAX).any():
        raise InvalidValue("independent", "codes must lie in 0..2")
    if np.isin(dep, (3, 4)).any() or (dep > DEP_MAX).any():
        raise InvalidValue("dependent", "codes must be 0, 1, 2 or 5 (fold aliases first)")

    ind_chars = [_render_ind(row) for row in ind.tolist()]
    dep_chars = [_render_dep(row) for row in dep.tolist()]

    groups = []
    for _, target in SECTIONS:
        selected = np.flatnonzero((dep == target).any(axis=1))
        groups.append(tuple(f"{ind_chars[k]} {dep_chars[k]}" for k in selected))

    doc = CoverSetDocument(
        ind_names=tuple(ind_names),
        dep_names=tuple(dep_names),
        on_rows=groups[0],
        dc_rows=groups[1],
        off_rows=groups[2],
    )
    logger.debug(
        "PLA document: %d on, %d dc, %d off rows",
        len(doc.on_rows), len(doc.dc_rows), len(doc.off_rows),
    )
    return doc


def _decode_segment(segment: str, max_code: int, role: str, line: str) -> list[int]:
    codes = []
    for ch in segment:
        if ch in "-?":
            codes.append(2)
        elif ch == "~":
            codes.append(IGNORE)
        else:
            codes.append(int(ch))
    allowed = (0, 1, 2) if max_code == IND_MAX else (0, 1, 2, IGNORE)
    if any(code not in allowed for code in codes):
        raise MalformedResult(f"Unexpected {role} code in result line: {line!r}")
    return codes


def parse(raw_text: str, ind_count: int, dep_count: int) -> PatternMatrix:
    """
    Extract the covering patterns from Espresso's output.

    Banner, directive and diagnostic lines are skipped. If nothing matches,
    the function is constant false and an empty matrix is returned.
    """
    rows_ind = []
    rows_dep = []

    for raw in re.split(r"[\r\n]+", raw_text):
        line = raw.strip()
        match = _ROW_RE.match(line)
        if not match:
            continue
        ind_seg, dep_seg = match.group(1), match.group(2)
        if len(ind_seg) != ind_count or len(dep_seg) != dep_count:
            raise MalformedResult(
                f"Result line {line!r} does not have {ind_count} inputs and {dep_count} outputs"
            )
        rows_ind.append(_decode_segment(ind_seg, IND_MAX, "independent", line))
        rows_dep.append(_decode_segment(dep_seg, DEP_MAX, "dependent", line))

    if not rows_ind:
        logger.debug("No covering patterns in solver output")
        return PatternMatrix.empty(ind_count, dep_count)

    logger.debug("Parsed %d covering patterns", len(rows_ind))
    return PatternMatrix(
        ind=np.array(rows_ind, dtype=np.uint8).reshape(len(rows_ind), ind_count),
        dep=np.array(rows_dep, dtype=np.uint8).reshape(len(rows_dep), dep_count),
    )

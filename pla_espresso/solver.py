"""
Truth-table minimization by delegation to the Espresso executable.

This module wires the pieces together:
1. decode the caller's tables into canonical codes
2. write the PLA cover set and hand it to Espresso with the option flags
3. parse the covering patterns Espresso prints back
4. synthesize the sum-of-products expressions and re-encode the patterns in
   the caller's representation

The minimization itself is Espresso's job; this side only guarantees the
translation in and out is lossless.
"""

import logging
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol, Sequence

import numpy as np

from . import pla
from .codec import (
    Encoding,
    as_table,
    decode_dependent,
    decode_independent,
    encode_dependent,
    encode_independent,
)
from .errors import (
    DuplicateOption,
    EmptyTable,
    RowCountMismatch,
    SolverAccessError,
    SolverEmptyOutput,
    SolverLogicError,
    SolverTerminated,
    SolverTransportFailure,
    SolverUnknownStatus,
)
from .expression import simplify, synthesize
from .names import resolve_names
from .options import EspressoOptions, as_bool
from .pla import PatternMatrix
from .truth_vector import (
    CostBreakdown,
    bit_width,
    degenerate_pattern,
    format_patterns,
    format_truth_vector,
    from_pattern_matrix,
    literal_cost,
    parse_truth_vector,
    to_matrices,
)

logger = logging.getLogger(__name__)

EXECUTABLE_NAMES = ("espresso", "Espresso")


@dataclass
class SolverResponse:
    status: int
    output: str


class SolverProcess(Protocol):
    def invoke(self, text: str, flags: Sequence[str]) -> SolverResponse:
        ...


def find_espresso(exe_path: Optional[str] = None) -> str:
    """Return the executable to run: the explicit path, else the first match on PATH."""
    if exe_path:
        return exe_path
    for name in EXECUTABLE_NAMES:
        found = shutil.which(name)
        if found:
            return found
    raise SolverTransportFailure(
        "Espresso executable not found on PATH. Install it or set the exe_path option."
    )


class EspressoProcess:
    """Runs Espresso once per call, feeding the cover set on stdin."""

    def __init__(self, exe_path: Optional[str] = None, timeout: Optional[float] = None):
        self.exe_path = exe_path
        self.timeout = timeout

    def invoke(self, text: str, flags: Sequence[str]) -> SolverResponse:
        cmd = [find_espresso(self.exe_path), *flags]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd,
                input=text,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise SolverTransportFailure(f"Espresso timed out after {self.timeout} s") from exc
        except OSError as exc:
            raise SolverTransportFailure(f"Could not run Espresso: {exc}") from exc
        return SolverResponse(status=proc.returncode, output=proc.stdout + proc.stderr)


def check_response(response: SolverResponse) -> None:
    """Raise the matching SolverReportedFailure for a failed run."""
    status = response.status
    output = response.output
    detail = output.strip()

    if status == 0:
        if not detail:
            raise SolverEmptyOutput(
                "Espresso executed successfully but returned no output", status, output
            )
        return
    if status == 1:
        raise SolverLogicError(f"Espresso input/logic error (status 1): {detail}", status, output)
    if status in (2, 126, 127):
        raise SolverAccessError(
            f"Espresso could not be accessed or executed (status {status}): {detail}", status, output
        )
    if status < 0 or status in (9, 130, 137, 139):
        raise SolverTerminated(f"Espresso was terminated (status {status})", status, output)
    raise SolverUnknownStatus(f"Espresso failed with unknown status {status}: {detail}", status, output)


@dataclass
class MinimizationResult:
    """Result of minimizing a truth table."""

    ind_out: Any  # Patterns over the independent variables, caller's encoding
    dep_out: Any  # Which functions each pattern covers, caller's encoding
    expression: str
    pattern: PatternMatrix
    ind_names: list[str]
    dep_names: list[str]
    debug: dict = field(default_factory=dict)


@dataclass
class VectorResult:
    """Result of minimizing a single truth vector."""

    patterns: Any            # Covering patterns (strings for text input)
    cost: CostBreakdown
    coverage: list[list[int]]  # 0-indexed positions covered by each pattern
    minimized: Any           # Minimized truth vector (string for text input)
    expression: str
    pattern: PatternMatrix
    debug: dict = field(default_factory=dict)

    @property
    def literal_cost(self) -> int:
        return self.cost.total


def _output_encoding(ind_enc: Encoding, dep_enc: Optional[Encoding]) -> Encoding:
    chosen = ind_enc
    if dep_enc in (Encoding.CATEGORICAL, Encoding.CHARACTER):
        chosen = dep_enc
    # Booleans cannot carry don't-care patterns
    return Encoding.INTEGER if chosen is Encoding.BOOLEAN else chosen


class EspressoSolver:
    """
    Truth-table minimizer backed by an external Espresso process.

    `process` is anything with ``invoke(text, flags) -> SolverResponse``;
    by default a fresh EspressoProcess is built per call from the options.
    """

    def __init__(self, process: Optional[SolverProcess] = None):
        self.process = process

    def _process_for(self, opts: EspressoOptions) -> SolverProcess:
        if self.process is not None:
            return self.process
        return EspressoProcess(opts.exe_path, opts.timeout)

    def minimize(self, ind, dep=None, options: Optional[EspressoOptions] = None, **overrides) -> MinimizationResult:
        """
        Minimize a truth table.

        `ind` holds the independent variables, `dep` the dependent variables.
        When `dep` is omitted every row of `ind` is a true case of a single
        function and all other combinations are implicitly false.
        """
        started = time.perf_counter()
        opts = EspressoOptions.from_mapping(overrides, base=options or EspressoOptions())

        ind_table = as_table(ind, "independent")
        ind_codes = decode_independent(ind_table)
        if dep is None:
            dep_enc = None
            dep_codes = np.ones((ind_codes.shape[0], 1), dtype=np.uint8)
        else:
            dep_table = as_table(dep, "dependent")
            dep_enc = dep_table.encoding
            dep_codes = decode_dependent(dep_table)

        if ind_codes.shape[0] == 0:
            raise EmptyTable("Independent data must contain at least one row")
        if ind_codes.shape[0] != dep_codes.shape[0]:
            raise RowCountMismatch(
                f"Independent and dependent data must have the same number of rows "
                f"({ind_codes.shape[0]} != {dep_codes.shape[0]})"
            )

        ind_count = ind_codes.shape[1]
        dep_count = dep_codes.shape[1]
        ind_names, dep_names = resolve_names(opts.ind_names, opts.dep_names, ind_count, dep_count)

        document = pla.write(ind_codes, dep_codes, ind_names, dep_names)
        text = document.to_text()
        flags = opts.flags()

        run_started = time.perf_counter()
        response = self._process_for(opts).invoke(text, flags)
        run_time = time.perf_counter() - run_started
        logger.debug("Espresso finished with status %d in %.3f s", response.status, run_time)

        check_response(response)
        pattern = pla.parse(response.output, ind_count, dep_count)

        expression = synthesize(pattern.ind, pattern.dep, ind_names, dep_names)
        if opts.simplify:
            expression = simplify(expression)

        encoding = _output_encoding(ind_table.encoding, dep_enc)
        ind_out = encode_independent(pattern.ind, encoding, opts.out_categories)
        dep_out = encode_dependent(pattern.dep, encoding, opts.out_categories)

        if dep_count > 1:
            logger.debug("%d dependent variables share %d patterns", dep_count, pattern.num_rows)

        debug = {
            "document": text,
            "flags": flags,
            "status": response.status,
            "output": response.output,
            "options": opts,
            "time": {"espresso": run_time, "total": time.perf_counter() - started},
        }
        return MinimizationResult(
            ind_out=ind_out,
            dep_out=dep_out,
            expression=expression,
            pattern=pattern,
            ind_names=list(ind_names),
            dep_names=list(dep_names),
            debug=debug,
        )

    def minimize_vector(
        self,
        tt,
        options: Optional[EspressoOptions] = None,
        preserve_dc: Optional[bool] = None,
        **overrides,
    ) -> VectorResult:
        """
        Minimize a single function given as a truth vector of length 2^N.

        Text input ('0', '1', '2'/'-'/'?') returns text patterns and a text
        minimized vector; numeric or boolean input returns uint8 arrays.
        """
        spellings = [k for k in overrides if k.lower().replace("_", "") == "preservedc"]
        if preserve_dc is not None:
            spellings.insert(0, "preserve_dc")
            overrides["preserve_dc"] = preserve_dc
        if len(spellings) > 1:
            names = ", ".join(f"<{k}>" for k in spellings)
            raise DuplicateOption(f"Duplicate option names: {names}")
        preserve_dc = as_bool(spellings[0], overrides.pop(spellings[0])) if spellings else False
        opts = EspressoOptions.from_mapping(overrides, base=options or EspressoOptions())

        codes = parse_truth_vector(tt)
        n_bits = bit_width(codes)

        if n_bits == 0:
            pattern = degenerate_pattern(int(codes[0]))
            ind_names, dep_names = resolve_names(opts.ind_names, opts.dep_names, 0, 1)
            expression = synthesize(pattern.ind, pattern.dep, ind_names, dep_names)
            debug = {}
        else:
            ind, dep = to_matrices(codes)
            result = self.minimize(ind, dep, opts)
            pattern = result.pattern
            expression = result.expression
            debug = result.debug

        coverage, minimized = from_pattern_matrix(pattern, codes, preserve_dc)
        cost = literal_cost(pattern.ind)

        if isinstance(tt, str):
            patterns = format_patterns(pattern.ind)
            minimized = format_truth_vector(minimized)
        else:
            patterns = pattern.ind.copy()

        return VectorResult(
            patterns=patterns,
            cost=cost,
            coverage=coverage,
            minimized=minimized,
            expression=expression,
            pattern=pattern,
            debug=debug,
        )

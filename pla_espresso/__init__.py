"""Boolean truth-table minimization with the Espresso heuristic logic minimizer."""

from .codec import (
    Encoding,
    decode_dependent,
    decode_independent,
    encode_dependent,
    encode_independent,
)
from .pla import CoverSetDocument, PatternMatrix, parse, write
from .expression import synthesize, simplify
from .truth_vector import from_pattern_matrix, literal_cost, to_matrices
from .options import EspressoOptions
from .solver import EspressoSolver, EspressoProcess, MinimizationResult, VectorResult
from .verify import verify_cover

__all__ = [
    "Encoding",
    "decode_independent",
    "decode_dependent",
    "encode_independent",
    "encode_dependent",
    "CoverSetDocument",
    "PatternMatrix",
    "write",
    "parse",
    "synthesize",
    "simplify",
    "to_matrices",
    "from_pattern_matrix",
    "literal_cost",
    "EspressoOptions",
    "EspressoSolver",
    "EspressoProcess",
    "MinimizationResult",
    "VectorResult",
    "verify_cover",
]
__version__ = "0.1.0"

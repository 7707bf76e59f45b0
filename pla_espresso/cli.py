"""Command-line interface for Espresso truth-table minimization."""

import argparse
import logging
import sys

from . import pla
from .codec import decode_dependent, decode_independent
from .errors import EspressoError
from .names import resolve_names
from .options import EspressoOptions
from .solver import EspressoSolver
from .truth_vector import karnaugh_map, parse_truth_vector, to_matrices


def read_table(path: str) -> tuple[list[str], list[str]]:
    """Read a table file with one '<ind chars> <dep chars>' row per line."""
    ind_rows = []
    dep_rows = []
    with open(path, "r", encoding="utf-8") as handle:
        for lineno, raw in enumerate(handle, 1):
            line = raw.split("#", 1)[0].strip()
            if not line:
                continue
            parts = line.split()
            if len(parts) != 2:
                raise ValueError(f"{path}:{lineno}: expected '<inputs> <outputs>', got {raw.strip()!r}")
            ind_rows.append(parts[0])
            dep_rows.append(parts[1])
    return ind_rows, dep_rows


def _options(args) -> EspressoOptions:
    return EspressoOptions(
        check=args.check,
        exact=args.exact,
        phase_opt=args.phase_opt,
        pair_opt=args.pair_opt,
        fast=args.fast,
        output_sets=args.output_sets,
        ind_names=args.ind_names or (),
        dep_names=args.dep_names or (),
        exe_path=args.espresso,
        simplify=args.simplify,
        timeout=args.timeout,
    )


def print_document(ind, dep, opts: EspressoOptions):
    """Print the PLA document that would be sent to Espresso, without running it."""
    ind_names, dep_names = resolve_names(opts.ind_names, opts.dep_names, ind.shape[1], dep.shape[1])
    print(pla.write(ind, dep, ind_names, dep_names), end="")


def print_vector_result(result, tt: str):
    """Print a truth-vector result: Karnaugh map, terms, expression and complexity."""
    kmap = karnaugh_map(parse_truth_vector(tt), parse_truth_vector(result.minimized))
    if kmap:
        print("Karnaugh map (index to left, -:unused don't-care, =:used don't-care):")
        for line in kmap:
            print(line)
        print()
    print("All terms:")
    for k, (bins, covered) in enumerate(zip(result.patterns, result.coverage), 1):
        print(f"  T({k:2d}): \"{bins}\" <-> {{{' '.join(map(str, covered))}}}")
    print()
    print(result.expression)
    print()
    print(f"Logical complexity: {result.literal_cost} inputs")
    print(f"Input  tt: \"{tt}\"")
    print(f"Output tt: \"{result.minimized}\"")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Minimize Boolean truth tables with the Espresso logic minimizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pla-espresso vector 0101                  Minimize a truth vector
  pla-espresso vector 1-11-000 --exact      Exact minimization
  pla-espresso vector ----1111 --preserve-dc
  pla-espresso table table.txt              Minimize a '<inputs> <outputs>' table
  pla-espresso table table.txt -f pla       Print the PLA sent to Espresso
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    vec = sub.add_parser("vector", help="Minimize a truth vector of length 2^N")
    vec.add_argument("tt", help="Truth vector over '0', '1', '2'/'-'/'?'")
    vec.add_argument(
        "--preserve-dc",
        action="store_true",
        help="Keep unused don't-cares in the minimized truth vector",
    )

    tbl = sub.add_parser("table", help="Minimize a table file")
    tbl.add_argument("file", help="File with one '<inputs> <outputs>' row per line")

    for p in (vec, tbl):
        p.add_argument("--ind-names", nargs="+", help="Independent-variable names")
        p.add_argument("--dep-names", nargs="+", help="Dependent-variable names")
        p.add_argument("--check", action="store_true", help="Consistency check (-Dcheck)")
        p.add_argument("--exact", action="store_true", help="Exact minimization (-Dexact)")
        p.add_argument("--phase-opt", action="store_true", help="Phase assignment optimization (-Dopo)")
        p.add_argument("--pair-opt", action="store_true", help="Pair minimization (-Dpair)")
        p.add_argument("--fast", action="store_true", help="Fast mode (-efast)")
        p.add_argument(
            "--output-sets", "-o",
            default="f",
            help="Sets to report: any of f, d, r in that order (default: f)",
        )
        p.add_argument("--simplify", action="store_true", help="Simplify expressions with sympy")
        p.add_argument("--espresso", help="Path to the Espresso executable")
        p.add_argument("--timeout", type=float, help="Seconds before the solver is abandoned")
        p.add_argument(
            "--format", "-f",
            choices=["text", "equations", "pla"],
            default="text",
            help="Output format (default: text)",
        )
        p.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    solver = EspressoSolver()

    try:
        opts = _options(args)

        if args.command == "vector":
            if args.format == "pla":
                ind, dep = to_matrices(args.tt)
                if ind.shape[1] == 0:
                    # a zero-variable vector is a constant and never reaches Espresso
                    print("# no cover set for a zero-variable truth vector")
                    print(solver.minimize_vector(args.tt, opts).expression)
                    return 0
                print_document(ind, dep, opts)
                return 0
            result = solver.minimize_vector(args.tt, opts, preserve_dc=args.preserve_dc)
            if args.format == "equations":
                print(result.expression)
            else:
                print_vector_result(result, args.tt)
            return 0

        ind_rows, dep_rows = read_table(args.file)
        if args.format == "pla":
            print_document(decode_independent(ind_rows), decode_dependent(dep_rows), opts)
            return 0

        result = solver.minimize(ind_rows, dep_rows, opts)
        if args.format == "equations":
            print(result.expression)
        else:
            print("Covering patterns:")
            for ind_row, dep_row in zip(result.ind_out, result.dep_out):
                print(f"  {ind_row} {dep_row}")
            print()
            print(result.expression)
        return 0

    except (EspressoError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

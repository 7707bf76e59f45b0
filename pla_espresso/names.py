"""Variable-name validation and default-name generation."""

import keyword
import string
from typing import Optional, Sequence

from .errors import EmptyName, InvalidIdentifier, NameCountMismatch, NotUnique


def is_identifier(name: str) -> bool:
    """True if `name` is an ASCII identifier usable in the PLA header and expressions."""
    if not isinstance(name, str):
        return False
    return name.isascii() and name.isidentifier() and not keyword.iskeyword(name)


def validate_names(ind_names: Sequence[str], dep_names: Sequence[str]) -> None:
    """Check names are non-empty, identifier-safe and unique across both sets."""
    used = list(ind_names) + list(dep_names)

    if any(isinstance(name, str) and not name for name in used):
        raise EmptyName("Variable names cannot be empty")

    bad = [name for name in used if not is_identifier(name)]
    if bad:
        raise InvalidIdentifier(f"Variable names must be valid identifiers: {', '.join(map(repr, bad))}")

    seen = set()
    repeated = []
    for name in used:
        if name in seen and name not in repeated:
            repeated.append(name)
        seen.add(name)
    if repeated:
        raise NotUnique(f"Variable names must be unique, repeated: {', '.join(repeated)}")


def _numbered(count: int, used: Sequence[str], prefix: str) -> list[str]:
    taken = {name.lower() for name in used}
    names = []
    k = 1
    while len(names) < count:
        candidate = f"{prefix}{k}"
        if candidate.lower() not in taken:
            names.append(candidate)
        k += 1
    return names


def resolve_names(
    ind_names: Optional[Sequence[str]],
    dep_names: Optional[Sequence[str]],
    ind_count: int,
    dep_count: int,
) -> tuple[list[str], list[str]]:
    """
    Validate user-supplied names and generate any that are missing.

    Generated names use the letters A-Z not already taken (case-insensitive):
    independent variables take the first free letters, dependent variables the
    last ones. When there are not enough free letters, numbered names
    X1, X2, ... and F1, F2, ... are used instead.
    """
    ind_names = list(ind_names or [])
    dep_names = list(dep_names or [])

    if ind_names and len(ind_names) != ind_count:
        raise NameCountMismatch(
            f"Expected {ind_count} independent-variable names, got {len(ind_names)}"
        )
    if dep_names and len(dep_names) != dep_count:
        raise NameCountMismatch(
            f"Expected {dep_count} dependent-variable names, got {len(dep_names)}"
        )

    validate_names(ind_names, dep_names)

    used = ind_names + dep_names
    need_ind = 0 if ind_names else ind_count
    need_dep = 0 if dep_names else dep_count
    if need_ind + need_dep == 0:
        return ind_names, dep_names

    taken = {name.upper() for name in used}
    free = [ch for ch in string.ascii_uppercase if ch not in taken]

    if len(free) >= need_ind + need_dep:
        if need_ind:
            ind_names = free[:need_ind]
        if need_dep:
            dep_names = free[len(free) - need_dep:]
    else:
        if need_ind:
            ind_names = _numbered(need_ind, used, "X")
        if need_dep:
            dep_names = _numbered(need_dep, used, "F")

    return ind_names, dep_names

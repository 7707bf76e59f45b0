"""
Options controlling an Espresso run.

Options are an immutable value passed into every call. User mappings may use
either the Python field names or the classic option spellings (``Dexact``,
``Eout``, ``indNames``, ...); lookup is case-insensitive.
"""

import re
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

import numpy as np

from .codec import DEFAULT_CATEGORIES
from .errors import ConflictingFlags, DuplicateOption, InvalidOption, UnknownOption

_OUTPUT_SETS_RE = re.compile(r"^f?d?r?$")

ALIASES = {
    "dcheck": "check",
    "dexact": "exact",
    "dopo": "phase_opt",
    "dpair": "pair_opt",
    "efast": "fast",
    "eout": "output_sets",
    "indnames": "ind_names",
    "depnames": "dep_names",
    "outcats": "out_categories",
    "exepath": "exe_path",
}

_BOOL_FIELDS = ("check", "exact", "phase_opt", "pair_opt", "fast", "simplify")
_NAME_FIELDS = ("ind_names", "dep_names")


def as_bool(name: str, value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)) and value in (0, 1):
        return bool(value)
    raise InvalidOption(f"Option <{name}> must be a scalar logical, got {value!r}")


def _as_names(name: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split()
    try:
        items = tuple(value)
    except TypeError:
        raise InvalidOption(f"Option <{name}> must be a sequence of strings") from None
    if not all(isinstance(item, str) for item in items):
        raise InvalidOption(f"Option <{name}> must be a sequence of strings")
    return tuple(item.strip() for item in items)


@dataclass(frozen=True)
class EspressoOptions:
    """
    Solver flags and wrapper settings.

    - check:       -Dcheck consistency check
    - exact:       -Dexact exact minimization (slower, optimal)
    - phase_opt:   -Dopo phase assignment optimization
    - pair_opt:    -Dpair pair minimization
    - fast:        -efast fast mode (conflicts with exact)
    - output_sets: -o argument, any of 'f', 'd', 'r' in that order
    """

    check: bool = False
    exact: bool = False
    phase_opt: bool = False
    pair_opt: bool = False
    fast: bool = False
    output_sets: str = "f"
    ind_names: tuple[str, ...] = ()
    dep_names: tuple[str, ...] = ()
    out_categories: tuple[str, str, str] = DEFAULT_CATEGORIES
    exe_path: Optional[str] = None
    simplify: bool = False
    timeout: Optional[float] = None

    def __post_init__(self):
        for name in _BOOL_FIELDS:
            object.__setattr__(self, name, as_bool(name, getattr(self, name)))
        for name in _NAME_FIELDS:
            object.__setattr__(self, name, _as_names(name, getattr(self, name)))

        cats = _as_names("out_categories", self.out_categories)
        if len(cats) != 3:
            raise InvalidOption(
                "Option <out_categories> needs three labels corresponding to [false, true, don't-care]"
            )
        object.__setattr__(self, "out_categories", cats)

        if not isinstance(self.output_sets, str):
            raise InvalidOption("Option <output_sets> must be a string")
        sets = self.output_sets.lower()
        if not sets or not _OUTPUT_SETS_RE.match(sets):
            raise InvalidOption(
                "Option <output_sets> must contain any of 'f', 'd', 'r', in that order"
            )
        object.__setattr__(self, "output_sets", sets)

        if self.exe_path is not None and not isinstance(self.exe_path, str):
            raise InvalidOption("Option <exe_path> must be a string")
        if self.timeout is not None and (not isinstance(self.timeout, (int, float)) or self.timeout <= 0):
            raise InvalidOption("Option <timeout> must be a positive number of seconds")

        if self.exact and self.fast:
            raise ConflictingFlags("Options <exact> and <fast> cannot both be true")

    @classmethod
    def field_for(cls, key: str) -> str:
        """Resolve a user option name to a field name (case-insensitive)."""
        known = {f.name.lower(): f.name for f in fields(cls)}
        lowered = key.lower()
        if lowered in known:
            return known[lowered]
        if lowered in ALIASES:
            return ALIASES[lowered]
        names = ", ".join(f"<{name}>" for name in sorted(known.values()))
        raise UnknownOption(f"Unknown option: <{key}>. Options are: {names}")

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]] = None, base: Optional["EspressoOptions"] = None):
        """Build options from a user mapping, rejecting unknown and repeated names."""
        resolved: dict[str, Any] = {}
        origin: dict[str, str] = {}
        for key, value in (mapping or {}).items():
            name = cls.field_for(key)
            if name in resolved:
                raise DuplicateOption(f"Duplicate option names: <{origin[name]}>, <{key}>")
            resolved[name] = value
            origin[name] = key
        return replace(base, **resolved) if base is not None else cls(**resolved)

    def flags(self) -> list[str]:
        """Command-line arguments for the Espresso executable."""
        args = ["-o", self.output_sets]
        if self.check:
            args.append("-Dcheck")
        if self.exact:
            args.append("-Dexact")
        if self.phase_opt:
            args.append("-Dopo")
        if self.pair_opt:
            args.append("-Dpair")
        if self.fast:
            args.append("-efast")
        return args

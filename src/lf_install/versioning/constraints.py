"""Version constraint sets such as ``>= 1.0.0, < 1.0.10`` or ``~> 1.3``."""
from __future__ import annotations

import re
from typing import Callable, Dict, Iterator, List, Tuple

from ..errors import MalformedConstraintError, MalformedVersionError
from .version import Version

# Longest operators first so ">=" is not read as ">".
OPERATORS = ("~>", ">=", "<=", "!=", ">", "<", "=")

CONSTRAINT_RE = re.compile(
    r"^\s*(?P<op>" + "|".join(re.escape(op) for op in OPERATORS) + r")?\s*(?P<version>\S+)\s*$"
)


def _prerelease_check(v: Version, c: Version) -> bool:
    """Gate ordering operators on prerelease compatibility.

    A prerelease version only satisfies a constraint that itself names a
    prerelease of the same segments.
    """
    if v.prerelease and c.prerelease:
        return v.padded_segments == c.padded_segments
    if v.prerelease and not c.prerelease:
        return False
    return True


def _equal(v: Version, c: Version) -> bool:
    return v.compare(c) == 0


def _not_equal(v: Version, c: Version) -> bool:
    return v.compare(c) != 0


def _greater(v: Version, c: Version) -> bool:
    return _prerelease_check(v, c) and v.compare(c) > 0


def _less(v: Version, c: Version) -> bool:
    return _prerelease_check(v, c) and v.compare(c) < 0


def _greater_equal(v: Version, c: Version) -> bool:
    return _prerelease_check(v, c) and v.compare(c) >= 0


def _less_equal(v: Version, c: Version) -> bool:
    return _prerelease_check(v, c) and v.compare(c) <= 0


def _pessimistic(v: Version, c: Version) -> bool:
    """``~> X.Y.Z``: at least X.Y.Z, below the next increment of the second-to-last given segment."""
    if not _prerelease_check(v, c) or (c.prerelease and not v.prerelease):
        return False
    if v.compare(c) < 0:
        return False

    v_segments = v.padded_segments
    c_segments = c.padded_segments
    if len(c_segments) > len(v_segments):
        return False

    for i in range(len(c.segments) - 1):
        if v_segments[i] != c_segments[i]:
            return False

    last = len(c_segments) - 1
    return c_segments[last] <= v_segments[last]


_CHECKS: Dict[str, Callable[[Version, Version], bool]] = {
    "": _equal,
    "=": _equal,
    "!=": _not_equal,
    ">": _greater,
    "<": _less,
    ">=": _greater_equal,
    "<=": _less_equal,
    "~>": _pessimistic,
}


class Constraint:
    """A single operator/version pair."""

    __slots__ = ("operator", "version", "original")

    def __init__(self, operator: str, version: Version, original: str = ""):
        if operator not in _CHECKS:
            raise MalformedConstraintError(original or operator, f"unknown operator {operator!r}")
        self.operator = operator
        self.version = version
        self.original = original or str(self)

    @classmethod
    def parse(cls, text: str) -> "Constraint":
        match = CONSTRAINT_RE.match(text)
        if match is None:
            raise MalformedConstraintError(text)
        try:
            version = Version.parse(match.group("version"))
        except MalformedVersionError as exc:
            raise MalformedConstraintError(text, str(exc)) from exc
        return cls(match.group("op") or "", version, original=text.strip())

    def check(self, version: Version) -> bool:
        return _CHECKS[self.operator](version, self.version)

    def __str__(self) -> str:
        op = self.operator or "="
        return f"{op} {self.version}"

    def __repr__(self) -> str:
        return f"Constraint({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return (self.operator or "=") == (other.operator or "=") and self.version == other.version

    def __hash__(self) -> int:
        return hash((self.operator or "=", self.version))


class Constraints:
    """Ordered set of constraints; a version must satisfy all of them.

    An empty set matches every version.
    """

    def __init__(self, constraints: Tuple[Constraint, ...] = ()):
        self._constraints: Tuple[Constraint, ...] = tuple(constraints)

    @classmethod
    def parse(cls, text: str) -> "Constraints":
        """Parse a comma-separated constraint string.

        Raises:
            MalformedConstraintError: If any part is malformed.
        """
        if not isinstance(text, str):
            raise MalformedConstraintError(repr(text), "expected a string")
        if not text.strip():
            return cls()
        parsed: List[Constraint] = []
        for part in text.split(","):
            if not part.strip():
                raise MalformedConstraintError(text, "empty constraint")
            parsed.append(Constraint.parse(part))
        return cls(tuple(parsed))

    def check(self, version: Version) -> bool:
        return all(c.check(version) for c in self._constraints)

    def __iter__(self) -> Iterator[Constraint]:
        return iter(self._constraints)

    def __len__(self) -> int:
        return len(self._constraints)

    def __bool__(self) -> bool:
        return bool(self._constraints)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraints):
            return NotImplemented
        return self._constraints == other._constraints

    def __hash__(self) -> int:
        return hash(self._constraints)

    def __str__(self) -> str:
        return ", ".join(str(c) for c in self._constraints)

    def __repr__(self) -> str:
        return f"Constraints({str(self)!r})"


def parse_constraints(text: str) -> Constraints:
    """Parse ``text`` into a Constraints set (see ``Constraints.parse``)."""
    return Constraints.parse(text)

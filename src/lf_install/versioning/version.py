"""Release version value type.

Versions are dot-separated numeric segments with an optional prerelease
label and optional build metadata, e.g. ``1.9.8``, ``0.15.0-rc2`` or
``1.9.8+ent.hsm``. Metadata is part of a version's identity (two versions
differing only in metadata are distinct releases) but never of its ordering.
"""
from __future__ import annotations

import re
from typing import List, Optional, Tuple, Union

from ..errors import MalformedVersionError

_IDENT = r"[0-9A-Za-z\-~]+"

VERSION_RE = re.compile(
    r"^v?(?P<segments>[0-9]+(?:\.[0-9]+)*)"
    rf"(?:-(?P<pre>[0-9]+[0-9A-Za-z\-~]*(?:\.{_IDENT})*)"
    rf"|-?(?P<pre_alpha>[A-Za-z\-~]+[0-9A-Za-z\-~]*(?:\.{_IDENT})*))?"
    rf"(?:\+(?P<meta>{_IDENT}(?:\.{_IDENT})*))?$"
)

# Segments are padded to at least this many places for comparison.
MIN_SEGMENTS = 3


def _compare_prerelease_part(left: str, right: str) -> int:
    """Compare one dot-separated prerelease identifier.

    An identifier missing on one side loses to a numeric identifier and wins
    over an alphanumeric one.
    """
    if left == right:
        return 0
    left_numeric = left.isdigit()
    right_numeric = right.isdigit()

    if left == "":
        return -1 if right_numeric else 1
    if right == "":
        return 1 if left_numeric else -1

    if left_numeric and not right_numeric:
        return -1
    if right_numeric and not left_numeric:
        return 1
    if left_numeric:
        return (int(left) > int(right)) - (int(left) < int(right))
    return 1 if left > right else -1


def _compare_prerelease(left: str, right: str) -> int:
    if left == right:
        return 0
    if not left:
        return 1
    if not right:
        return -1

    left_parts = left.split(".")
    right_parts = right.split(".")
    for i in range(max(len(left_parts), len(right_parts))):
        a = left_parts[i] if i < len(left_parts) else ""
        b = right_parts[i] if i < len(right_parts) else ""
        result = _compare_prerelease_part(a, b)
        if result:
            return result
    return 0


def _prerelease_key(prerelease: str) -> Tuple[Union[int, str], ...]:
    """Hashable form of a prerelease label under which equal labels coincide."""
    if not prerelease:
        return ()
    parts: List[Union[int, str]] = [int(p) if p.isdigit() else p for p in prerelease.split(".")]
    while parts and parts[-1] == "":
        parts.pop()
    return tuple(parts)


class Version:
    """Parsed release version.

    Attributes:
        segments: Numeric segments as parsed (not padded)
        prerelease: Prerelease label without the leading dash, or ""
        metadata: Build metadata without the leading plus, or ""
        original: The raw text this version was parsed from
    """

    __slots__ = ("segments", "prerelease", "metadata", "original")

    def __init__(
        self,
        segments: Tuple[int, ...],
        prerelease: str = "",
        metadata: str = "",
        original: Optional[str] = None,
    ):
        if not segments:
            raise MalformedVersionError(original or "", "no numeric segments")
        self.segments = tuple(int(s) for s in segments)
        self.prerelease = prerelease or ""
        self.metadata = metadata or ""
        self.original = original if original is not None else self._render()

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string.

        Raises:
            MalformedVersionError: If ``text`` is not a valid version.
        """
        if not isinstance(text, str):
            raise MalformedVersionError(repr(text), "expected a string")
        raw = text.strip()
        match = VERSION_RE.match(raw)
        if match is None:
            raise MalformedVersionError(text)
        segments = tuple(int(s) for s in match.group("segments").split("."))
        prerelease = match.group("pre") or match.group("pre_alpha") or ""
        return cls(segments, prerelease, match.group("meta") or "", original=raw)

    def _render(self) -> str:
        out = ".".join(str(s) for s in self.segments)
        if self.prerelease:
            out += f"-{self.prerelease}"
        if self.metadata:
            out += f"+{self.metadata}"
        return out

    @property
    def padded_segments(self) -> Tuple[int, ...]:
        missing = MIN_SEGMENTS - len(self.segments)
        return self.segments + (0,) * missing if missing > 0 else self.segments

    @property
    def core(self) -> "Version":
        """The same version without prerelease or metadata."""
        return Version(self.segments)

    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    def with_metadata(self, metadata: str) -> "Version":
        """Return a copy of this version carrying ``metadata`` instead."""
        return Version(self.segments, self.prerelease, metadata)

    def compare(self, other: "Version") -> int:
        """Compare ordering with ``other``, ignoring metadata.

        Returns:
            -1, 0 or 1.
        """
        left = self.padded_segments
        right = other.padded_segments
        width = max(len(left), len(right))
        left = left + (0,) * (width - len(left))
        right = right + (0,) * (width - len(right))
        if left != right:
            return -1 if left < right else 1
        return _compare_prerelease(self.prerelease, other.prerelease)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0 and self.metadata == other.metadata

    def __lt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) < 0

    def __le__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) <= 0

    def __gt__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) > 0

    def __ge__(self, other: "Version") -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) >= 0

    def __hash__(self) -> int:
        significant = list(self.segments)
        while len(significant) > 1 and significant[-1] == 0:
            significant.pop()
        return hash((tuple(significant), _prerelease_key(self.prerelease), self.metadata))

    def __str__(self) -> str:
        return self._render()

    def __repr__(self) -> str:
        return f"Version({self._render()!r})"


def parse_version(text: str) -> Version:
    """Parse ``text`` into a Version (see ``Version.parse``)."""
    return Version.parse(text)

"""Release index data model and payload parsing.

The index for a product is served as ``{base_url}/{product}/index.json``::

    {
      "name": "tofu",
      "versions": {
        "0.14.11": {
          "name": "tofu",
          "version": "0.14.11",
          "shasums": "tofu_0.14.11_SHA256SUMS",
          "shasums_signature": "tofu_0.14.11_SHA256SUMS.sig",
          "builds": [
            {"os": "linux", "arch": "amd64",
             "filename": "tofu_0.14.11_linux_amd64.zip",
             "url": "https://.../tofu_0.14.11_linux_amd64.zip"}
          ]
        }
      }
    }
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..constants import Constants
from ..errors import IndexParseError, MalformedVersionError
from ..versioning.version import Version

logger = logging.getLogger(__name__)

Platform = Tuple[str, str]


@dataclass(frozen=True)
class Build:
    """A single downloadable archive for one version and platform."""
    os: str
    arch: str
    filename: str
    url: str


@dataclass(frozen=True)
class ProductVersion:
    """One row of the release index."""
    name: str
    version: Version
    shasums: str = ""
    shasums_signature: str = ""
    builds: Mapping[Platform, Build] = field(default_factory=dict)

    @property
    def raw_version(self) -> str:
        return str(self.version)

    def find_build(self, os_name: str, arch: str) -> Optional[Build]:
        """Return the ZIP build for ``os_name``/``arch`` if one is published."""
        build = self.builds.get((os_name, arch))
        if build is None or not build.filename.endswith(Constants.ARCHIVE_EXTENSION):
            return None
        return build


class ReleaseIndex(Mapping[str, ProductVersion]):
    """Read-only mapping of canonical version string to ProductVersion.

    Iteration follows the order entries appeared in the index payload.
    """

    def __init__(self, product: str, entries: Mapping[str, ProductVersion]):
        self.product = product
        self._entries = MappingProxyType(dict(entries))

    @classmethod
    def from_versions(cls, product: str, versions: List[ProductVersion]) -> "ReleaseIndex":
        return cls(product, {str(pv.version): pv for pv in versions})

    def __getitem__(self, key: str) -> ProductVersion:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, version: Version) -> Optional[ProductVersion]:
        """Find the entry whose canonical string equals ``version``'s."""
        return self._entries.get(str(version))

    def __repr__(self) -> str:
        return f"ReleaseIndex({self.product!r}, {len(self)} versions)"


def _require_str(obj: Dict[str, Any], key: str, where: str, url: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str) or not value:
        raise IndexParseError(url, f"{where}: missing or invalid {key!r}")
    return value


def _parse_builds(raw_builds: Any, where: str, url: str) -> Dict[Platform, Build]:
    if raw_builds is None:
        return {}
    if not isinstance(raw_builds, list):
        raise IndexParseError(url, f"{where}: 'builds' must be a list")
    builds: Dict[Platform, Build] = {}
    for raw in raw_builds:
        if not isinstance(raw, dict):
            raise IndexParseError(url, f"{where}: build entries must be objects")
        build = Build(
            os=_require_str(raw, "os", where, url),
            arch=_require_str(raw, "arch", where, url),
            filename=_require_str(raw, "filename", where, url),
            url=raw.get("url") if isinstance(raw.get("url"), str) else "",
        )
        # Prefer the ZIP archive when several formats are published for one platform.
        existing = builds.get((build.os, build.arch))
        if existing is None or not existing.filename.endswith(Constants.ARCHIVE_EXTENSION):
            builds[(build.os, build.arch)] = build
    return builds


def _signature_filename(raw: Dict[str, Any]) -> str:
    sig = raw.get("shasums_signature")
    if isinstance(sig, str) and sig:
        return sig
    sigs = raw.get("shasums_signatures")
    if isinstance(sigs, list):
        for candidate in sigs:
            if isinstance(candidate, str) and candidate:
                return candidate
    return ""


def parse_release_index(product: str, payload: Any, url: str = "") -> ReleaseIndex:
    """Build a ReleaseIndex from a decoded index payload.

    Version keys that do not parse are skipped; structural problems raise.

    Raises:
        IndexParseError: If the payload does not have the index shape.
    """
    if not isinstance(payload, dict):
        raise IndexParseError(url, "top-level value must be an object")
    raw_versions = payload.get("versions")
    if not isinstance(raw_versions, dict):
        raise IndexParseError(url, "missing or invalid 'versions' object")

    name = payload.get("name") if isinstance(payload.get("name"), str) else product
    entries: Dict[str, ProductVersion] = {}
    for raw_key, raw in raw_versions.items():
        if not isinstance(raw, dict):
            raise IndexParseError(url, f"version {raw_key!r}: entry must be an object")
        try:
            version = Version.parse(raw_key)
        except MalformedVersionError:
            logger.debug("Skipping unparsable version %r in %s index", raw_key, product)
            continue

        where = f"version {raw_key!r}"
        pv = ProductVersion(
            name=raw.get("name") if isinstance(raw.get("name"), str) else name,
            version=version,
            shasums=raw.get("shasums") if isinstance(raw.get("shasums"), str) else "",
            shasums_signature=_signature_filename(raw),
            builds=MappingProxyType(_parse_builds(raw.get("builds"), where, url)),
        )
        entries[str(version)] = pv

    return ReleaseIndex(product, entries)

"""Exact version selection."""

from typing import Optional

from ...errors import VersionNotFoundError
from ...releases.index import ProductVersion, ReleaseIndex
from ..models import EnterpriseOptions, ResolutionMode, enterprise_version_metadata
from ..version import Version
from .base import VersionResolver


def target_version(version: Version, enterprise: Optional[EnterpriseOptions]) -> Version:
    """Version string to look up: enterprise requests swap in the edition metadata."""
    if enterprise is None:
        return version
    return version.core.with_metadata(enterprise_version_metadata(enterprise))


def find_exact_version(
    index: ReleaseIndex,
    version: Version,
    enterprise: Optional[EnterpriseOptions] = None,
) -> ProductVersion:
    """Return the index entry for ``version`` (and edition).

    Raises:
        VersionNotFoundError: If the index has no such entry.
    """
    wanted = target_version(version, enterprise)
    pv = index.lookup(wanted)
    if pv is None:
        raise VersionNotFoundError(index.product, str(wanted))
    return pv


class ExactVersionResolver(VersionResolver):
    """Resolver returning one literal version."""

    def __init__(self, version: Version, enterprise: Optional[EnterpriseOptions] = None):
        self.version = version
        self.enterprise = enterprise

    @property
    def mode(self) -> ResolutionMode:
        return ResolutionMode.EXACT

    def pick(self, index: ReleaseIndex) -> ProductVersion:
        return find_exact_version(index, self.version, self.enterprise)

"""Latest-matching version selection."""

from typing import List, Optional

from ...errors import NoMatchingVersionError
from ...releases.index import ProductVersion, ReleaseIndex
from ..constraints import Constraints
from ..models import EnterpriseOptions, ResolutionMode, enterprise_version_metadata
from .base import VersionResolver


def find_matching_versions(
    index: ReleaseIndex,
    constraints: Optional[Constraints] = None,
    include_prereleases: bool = False,
    enterprise: Optional[EnterpriseOptions] = None,
) -> List[ProductVersion]:
    """Return eligible entries sorted ascending.

    An entry is eligible when it is not a prerelease (unless allowed), its
    metadata equals the expected edition metadata exactly, and it satisfies
    every constraint. The sort is stable, so entries that compare equal keep
    their index order.
    """
    expected_metadata = enterprise_version_metadata(enterprise)
    eligible: List[ProductVersion] = []
    for pv in index.values():
        if not include_prereleases and pv.version.is_prerelease():
            continue
        if pv.version.metadata != expected_metadata:
            continue
        if constraints is not None and not constraints.check(pv.version):
            continue
        eligible.append(pv)

    return sorted(eligible, key=lambda pv: pv.version)


def find_latest_matching_version(
    index: ReleaseIndex,
    constraints: Optional[Constraints] = None,
    include_prereleases: bool = False,
    enterprise: Optional[EnterpriseOptions] = None,
) -> ProductVersion:
    """Return the highest eligible entry; ties go to the one later in the index.

    Raises:
        NoMatchingVersionError: If nothing is eligible.
    """
    eligible = find_matching_versions(index, constraints, include_prereleases, enterprise)
    if not eligible:
        raise NoMatchingVersionError(
            index.product, constraints if constraints is not None else Constraints(), include_prereleases
        )
    return eligible[-1]


class LatestVersionResolver(VersionResolver):
    """Resolver picking the newest release matching constraints."""

    def __init__(
        self,
        constraints: Optional[Constraints] = None,
        include_prereleases: bool = False,
        enterprise: Optional[EnterpriseOptions] = None,
    ):
        self.constraints = constraints if constraints is not None else Constraints()
        self.include_prereleases = include_prereleases
        self.enterprise = enterprise

    @property
    def mode(self) -> ResolutionMode:
        return ResolutionMode.LATEST

    def pick(self, index: ReleaseIndex) -> ProductVersion:
        return find_latest_matching_version(
            index, self.constraints, self.include_prereleases, self.enterprise
        )

    def candidates(self, index: ReleaseIndex) -> List[ProductVersion]:
        return find_matching_versions(
            index, self.constraints, self.include_prereleases, self.enterprise
        )

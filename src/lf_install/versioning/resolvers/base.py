"""Base class for release selection policies."""

from abc import ABC, abstractmethod
from typing import List

from ...releases.index import ProductVersion, ReleaseIndex
from ..models import ResolutionMode


class VersionResolver(ABC):
    """Pure selection of one release from a fetched index."""

    @property
    @abstractmethod
    def mode(self) -> ResolutionMode:
        """Selection policy implemented by this resolver."""

    @abstractmethod
    def pick(self, index: ReleaseIndex) -> ProductVersion:
        """Select exactly one entry from ``index``.

        Raises:
            ResolutionError: If no entry satisfies the policy.
        """

    def candidates(self, index: ReleaseIndex) -> List[ProductVersion]:
        """All entries eligible under this policy, lowest version first."""
        return [self.pick(index)]

"""Data models for version selection."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..constants import Constants


class ResolutionMode(Enum):
    """Selection policy used to pick a release."""
    EXACT = "exact"
    LATEST = "latest"


@dataclass(frozen=True)
class EnterpriseOptions:
    """Marker requesting an enterprise edition.

    ``meta`` is the edition tag (e.g. "hsm"); leave it empty for the plain
    enterprise edition.
    """
    meta: str = ""

    def version_metadata(self) -> str:
        if self.meta:
            return f"{Constants.ENTERPRISE_METADATA}.{self.meta}"
        return Constants.ENTERPRISE_METADATA


def enterprise_version_metadata(enterprise: Optional[EnterpriseOptions]) -> str:
    """Build metadata expected on releases for the given selector ("" for community)."""
    if enterprise is None:
        return ""
    return enterprise.version_metadata()

"""Release selection policies."""

from .base import VersionResolver
from .exact import ExactVersionResolver, find_exact_version
from .latest import LatestVersionResolver, find_latest_matching_version, find_matching_versions

__all__ = [
    "VersionResolver",
    "ExactVersionResolver",
    "LatestVersionResolver",
    "find_exact_version",
    "find_latest_matching_version",
    "find_matching_versions",
]

"""Version model, constraint sets and release selection."""

from .constraints import Constraint, Constraints, parse_constraints
from .models import EnterpriseOptions, ResolutionMode, enterprise_version_metadata
from .version import Version, parse_version

__all__ = [
    "Constraint",
    "Constraints",
    "EnterpriseOptions",
    "ResolutionMode",
    "Version",
    "enterprise_version_metadata",
    "parse_constraints",
    "parse_version",
]

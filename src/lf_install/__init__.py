"""Acquire verified product binaries from a release host.

Typical use::

    from lf_install import LatestVersion, OPENTOFU

    src = LatestVersion(OPENTOFU, ">= 1.6, < 1.7")
    path = src.install()
    ...
    src.remove()
"""

from .config import Settings, load_settings
from .errors import LfInstallError
from .product import OPENBAO, OPENTOFU, PRODUCTS, Product
from .releases.exact_version import ExactVersion
from .releases.latest_version import LatestVersion
from .releases.versions import InstallationOptions, Versions
from .versioning import Constraints, EnterpriseOptions, Version

__version__ = "0.1.0"

__all__ = [
    "Constraints",
    "EnterpriseOptions",
    "ExactVersion",
    "InstallationOptions",
    "LatestVersion",
    "LfInstallError",
    "OPENBAO",
    "OPENTOFU",
    "PRODUCTS",
    "Product",
    "Settings",
    "Version",
    "Versions",
    "load_settings",
]

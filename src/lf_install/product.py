"""Static product records.

A product is a plain record of its release name, a binary-name accessor and
a version probe. The set is closed; new products are new records, not
subclasses.
"""
from __future__ import annotations

import logging
import re
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import MalformedVersionError
from .versioning.version import Version

logger = logging.getLogger(__name__)

SIMPLE_VERSION_RE = r"v?(?P<version>[0-9]+(?:\.[0-9]+)*(?:-[A-Za-z0-9\.]+)?)"

VERSION_PROBE_TIMEOUT = 10


@dataclass(frozen=True)
class Product:
    """Release name, executable name and version probe for one product."""
    name: str
    binary_name: Callable[[], str]
    get_version: Callable[..., Version]


def _binary_name(base: str) -> Callable[[], str]:
    def binary_name() -> str:
        if sys.platform.startswith("win"):
            return f"{base}.exe"
        return base
    return binary_name


def _version_probe(banner: str) -> Callable[..., Version]:
    output_re = re.compile(re.escape(banner) + " " + SIMPLE_VERSION_RE)

    def get_version(path: str, timeout: Optional[float] = VERSION_PROBE_TIMEOUT) -> Version:
        """Run ``<path> version`` and parse the reported version.

        Raises:
            subprocess.CalledProcessError, subprocess.TimeoutExpired: From the probe.
            MalformedVersionError: If the output carries no version.
        """
        logger.debug("running %s version", path)
        out = subprocess.run(
            [path, "version"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=True,
        ).stdout.strip()
        match = output_re.search(out)
        if match is None:
            raise MalformedVersionError(out, f"no {banner} version in output")
        return Version.parse(match.group("version"))

    return get_version


OPENTOFU = Product(
    name="tofu",
    binary_name=_binary_name("tofu"),
    get_version=_version_probe("OpenTofu"),
)

OPENBAO = Product(
    name="vault",
    binary_name=_binary_name("vault"),
    get_version=_version_probe("OpenBao"),
)

PRODUCTS = {p.name: p for p in (OPENTOFU, OPENBAO)}

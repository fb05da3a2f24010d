"""Shared install/remove machinery for release-backed sources.

``ExactVersion`` and ``LatestVersion`` differ only in how they pick a
release from the index; everything else (validation, settings, deadline,
temp directory handling, download and cleanup) lives here.
"""
from __future__ import annotations

import logging
import tempfile
import threading
from abc import ABC, abstractmethod
from typing import Optional

from ..common.http_client import Deadline
from ..common.logging_utils import Timer, discard_logger
from ..config import Settings, load_settings
from ..errors import ValidationError
from ..product import Product
from ..validators import is_binary_name_valid, is_product_name_valid
from ..versioning.models import EnterpriseOptions
from ..versioning.resolvers.base import VersionResolver
from .client import ReleasesClient
from .downloader import Downloader
from .lifecycle import InstallationRecord


def validate_product(product: Optional[Product]) -> None:
    """Reject products whose names cannot be used in URLs or file paths.

    Raises:
        ValidationError: Naming the offending field.
    """
    if product is None:
        raise ValidationError("product must be provided", field="product")
    if not is_product_name_valid(product.name):
        raise ValidationError(f"invalid product name: {product.name!r}", field="product.name")
    binary_name = product.binary_name()
    if not is_binary_name_valid(binary_name):
        raise ValidationError(f"invalid binary name: {binary_name!r}", field="product.binary_name")


def validate_enterprise_options(enterprise: Optional[EnterpriseOptions], license_dir: str) -> None:
    """Enterprise installs need somewhere to put the license.

    Raises:
        ValidationError: If ``enterprise`` is set and ``license_dir`` is empty.
    """
    if enterprise is None:
        return
    if not license_dir:
        raise ValidationError(
            "license dir must be provided when requesting enterprise versions",
            field="license_dir",
        )


class ReleaseSource(ABC):
    """Base for sources that install a product from a release host.

    Fields left as None (or empty) fall back to ``settings``, which in turn
    is loaded from the YAML file and environment when not supplied.
    """

    def __init__(
        self,
        product: Product,
        install_dir: str = "",
        timeout: Optional[float] = None,
        license_dir: str = "",
        enterprise: Optional[EnterpriseOptions] = None,
        skip_checksum_verification: Optional[bool] = None,
        armored_public_key: str = "",
        api_base_url: str = "",
        os_name: Optional[str] = None,
        arch: Optional[str] = None,
        settings: Optional[Settings] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.product = product
        self.install_dir = install_dir
        self.timeout = timeout
        self.license_dir = license_dir
        self.enterprise = enterprise
        self.skip_checksum_verification = skip_checksum_verification
        self.armored_public_key = armored_public_key
        self.api_base_url = api_base_url
        self.os_name = os_name
        self.arch = arch
        self.settings = settings
        self.cancel_event = cancel_event
        self._logger: Optional[logging.Logger] = None
        self._record: Optional[InstallationRecord] = None

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def log(self) -> logging.Logger:
        return self._logger or discard_logger()

    @property
    def installed_paths(self):
        """Paths currently recorded for removal."""
        return self._record.paths if self._record is not None else []

    def validate(self) -> None:
        """Check product configuration before any I/O.

        Raises:
            ValidationError: Naming the offending field.
        """
        validate_product(self.product)
        validate_enterprise_options(self.enterprise, self.license_dir)

    @abstractmethod
    def _resolver(self) -> VersionResolver:
        """Resolver that picks the release to install from the index."""

    def _effective_settings(self) -> Settings:
        return self.settings if self.settings is not None else load_settings()

    def install(self) -> str:
        """Resolve, download, verify and unpack the product.

        Returns:
            str: Absolute path of the installed executable.

        Raises:
            LfInstallError: Any failure; paths created before it stay
                recorded so ``remove()`` can clean up.
        """
        self.validate()
        resolver = self._resolver()
        settings = self._effective_settings()

        timeout = self.timeout if self.timeout and self.timeout > 0 else settings.timeout
        deadline = Deadline(timeout, self.cancel_event)
        base_url = self.api_base_url or settings.base_url
        skip = (
            self.skip_checksum_verification
            if self.skip_checksum_verification is not None
            else settings.skip_checksum_verification
        )
        if skip:
            self.log.warning("checksum verification disabled for %s", self.product.name)

        if self._record is None:
            self._record = InstallationRecord(log=self.log)

        with Timer() as t:
            client = ReleasesClient(base_url=base_url, deadline=deadline, log=self.log)
            index = client.list_product_versions(self.product.name)
            pv = resolver.pick(index)
            self.log.info("selected %s %s", self.product.name, pv.raw_version)

            downloader = Downloader(
                base_url=base_url,
                verify_checksum=not skip,
                armored_public_key=self.armored_public_key or settings.armored_public_key,
                os_name=self.os_name,
                arch=self.arch,
                deadline=deadline,
                log=self.log,
            )

            install_dir = self.install_dir
            if not install_dir:
                install_dir = tempfile.mkdtemp(prefix=f"{self.product.name}_")
                self._record.add(install_dir)
                self.log.info("created new temp dir at %s", install_dir)
            self.log.info("will install into dir at %s", install_dir)

            unpacked = downloader.download_and_unpack(
                pv,
                install_dir,
                self.product.binary_name(),
                self._record,
                license_dir=self.license_dir,
                require_license=self.enterprise is not None,
            )

        self.log.info(
            "installed %s %s to %s in %d ms",
            self.product.name,
            pv.raw_version,
            unpacked.executable,
            t.duration_ms(),
        )
        return unpacked.executable

    def remove(self) -> None:
        """Delete everything this source installed. Safe to call repeatedly.

        Raises:
            CleanupError: If some paths could not be removed.
        """
        if self._record is None:
            return
        self._record.remove_all()

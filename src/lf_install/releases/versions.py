"""List every installable release of a product matching a constraint set."""
from __future__ import annotations

import dataclasses
import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Union

from ..common.http_client import Deadline
from ..common.logging_utils import discard_logger
from ..config import Settings, load_settings
from ..product import Product
from ..versioning.constraints import Constraints
from ..versioning.models import EnterpriseOptions
from ..versioning.resolvers.latest import find_matching_versions
from .client import ReleasesClient
from .exact_version import ExactVersion
from .source import validate_enterprise_options, validate_product


@dataclass
class InstallationOptions:
    """Install settings handed to every ExactVersion produced by ``Versions.list``."""
    install_dir: str = ""
    license_dir: str = ""
    timeout: Optional[float] = None
    skip_checksum_verification: Optional[bool] = None
    armored_public_key: str = ""


class Versions:
    """Lister producing one ExactVersion source per matching release."""

    def __init__(
        self,
        product: Product,
        constraints: Optional[Union[Constraints, str]] = None,
        enterprise: Optional[EnterpriseOptions] = None,
        install: Optional[InstallationOptions] = None,
        list_timeout: Optional[float] = None,
        include_prereleases: bool = False,
        api_base_url: str = "",
        settings: Optional[Settings] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        self.product = product
        self.constraints = constraints
        self.enterprise = enterprise
        self.install = install if install is not None else InstallationOptions()
        self.list_timeout = list_timeout
        self.include_prereleases = include_prereleases
        self.api_base_url = api_base_url
        self.settings = settings
        self.cancel_event = cancel_event
        self._logger: Optional[logging.Logger] = None

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def log(self) -> logging.Logger:
        return self._logger or discard_logger()

    def _parsed_constraints(self) -> Constraints:
        if self.constraints is None:
            return Constraints()
        if isinstance(self.constraints, Constraints):
            return self.constraints
        return Constraints.parse(str(self.constraints))

    def list(self) -> List[ExactVersion]:
        """Return sources for every matching release, oldest first.

        Raises:
            ValidationError: Bad product, constraints or enterprise options.
            LfInstallError: Any failure fetching or parsing the index.
        """
        validate_product(self.product)
        constraints = self._parsed_constraints()
        validate_enterprise_options(self.enterprise, self.install.license_dir)

        settings = self.settings if self.settings is not None else load_settings()
        timeout = self.list_timeout if self.list_timeout and self.list_timeout > 0 else settings.timeout
        base_url = self.api_base_url or settings.base_url

        client = ReleasesClient(
            base_url=base_url,
            deadline=Deadline(timeout, self.cancel_event),
            log=self.log,
        )
        index = client.list_product_versions(self.product.name)
        matching = find_matching_versions(
            index, constraints, self.include_prereleases, self.enterprise
        )

        sources: List[ExactVersion] = []
        for pv in matching:
            src = ExactVersion(
                self.product,
                pv.version,
                install_dir=self.install.install_dir,
                timeout=self.install.timeout,
                license_dir=self.install.license_dir,
                enterprise=dataclasses.replace(self.enterprise) if self.enterprise is not None else None,
                skip_checksum_verification=self.install.skip_checksum_verification,
                armored_public_key=self.install.armored_public_key,
                api_base_url=self.api_base_url,
                settings=settings,
                cancel_event=self.cancel_event,
            )
            if self._logger is not None:
                src.set_logger(self._logger)
            sources.append(src)
        self.log.debug("listed %d matching versions of %s", len(sources), self.product.name)
        return sources

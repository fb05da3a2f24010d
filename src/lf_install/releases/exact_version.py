"""Install one literal version of a product."""
from __future__ import annotations

from typing import Optional, Union

from ..errors import ValidationError
from ..product import Product
from ..versioning.resolvers.exact import ExactVersionResolver
from ..versioning.version import Version
from .source import ReleaseSource


class ExactVersion(ReleaseSource):
    """Source installing exactly ``version`` (plus the enterprise edition, if requested).

    Example:
        >>> src = ExactVersion(OPENTOFU, "1.6.2")
        >>> path = src.install()
        >>> src.remove()
    """

    def __init__(self, product: Product, version: Optional[Union[Version, str]] = None, **options):
        super().__init__(product, **options)
        self.version = version

    def _parsed_version(self) -> Version:
        if self.version is None or self.version == "":
            raise ValidationError("unknown version", field="version")
        if isinstance(self.version, Version):
            return self.version
        return Version.parse(str(self.version))

    def validate(self) -> None:
        super().validate()
        self._parsed_version()

    def _resolver(self) -> ExactVersionResolver:
        return ExactVersionResolver(self._parsed_version(), self.enterprise)

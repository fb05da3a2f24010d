"""Install the newest version of a product matching a constraint set."""
from __future__ import annotations

from typing import Optional, Union

from ..product import Product
from ..versioning.constraints import Constraints
from ..versioning.resolvers.latest import LatestVersionResolver
from .source import ReleaseSource


class LatestVersion(ReleaseSource):
    """Source installing the highest release satisfying ``constraints``.

    Prereleases are only eligible with ``include_prereleases``; with
    ``enterprise`` set only releases of that edition are considered.
    """

    def __init__(
        self,
        product: Product,
        constraints: Optional[Union[Constraints, str]] = None,
        include_prereleases: bool = False,
        **options,
    ):
        super().__init__(product, **options)
        self.constraints = constraints
        self.include_prereleases = include_prereleases

    def _parsed_constraints(self) -> Constraints:
        if self.constraints is None:
            return Constraints()
        if isinstance(self.constraints, Constraints):
            return self.constraints
        return Constraints.parse(str(self.constraints))

    def validate(self) -> None:
        super().validate()
        self._parsed_constraints()

    def _resolver(self) -> LatestVersionResolver:
        return LatestVersionResolver(
            self._parsed_constraints(), self.include_prereleases, self.enterprise
        )

"""Release index client: fetch the list of versions published for a product."""
from __future__ import annotations

import io
import json
import logging
import urllib.parse
from typing import Optional

from ..common.http_client import Deadline, safe_get, stream_to
from ..common.logging_utils import Timer, extra_context, is_debug_enabled, safe_url
from ..constants import Constants
from ..errors import EmptyIndexError, IndexFetchError, IndexParseError, ProductNotFoundError
from .index import ReleaseIndex, parse_release_index

logger = logging.getLogger(__name__)

HEADERS_JSON = {"Accept": "application/json"}


class ReleasesClient:
    """Client for a release host laid out as ``{base_url}/{product}/index.json``."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        deadline: Optional[Deadline] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.base_url = (base_url or Constants.DEFAULT_BASE_URL).rstrip("/")
        self.deadline = deadline or Deadline()
        self.log = log or logger

    def index_url(self, product_name: str) -> str:
        return f"{self.base_url}/{urllib.parse.quote(product_name)}/{Constants.INDEX_FILENAME}"

    def list_product_versions(self, product_name: str) -> ReleaseIndex:
        """Fetch and parse the release index for ``product_name``.

        Raises:
            IndexFetchError: Transport failure or unexpected HTTP status.
            ProductNotFoundError: The host has no index for the product.
            IndexParseError: The payload is not a valid index.
            EmptyIndexError: The index lists no usable versions.
            InstallTimeoutError, InstallCancelledError: Deadline or cancel.
        """
        url = self.index_url(product_name)
        self.log.debug("fetching release index from %s", safe_url(url))

        context = f"{product_name} index"
        error_factory = lambda reason: IndexFetchError(url, reason)  # noqa: E731
        body = io.BytesIO()
        with Timer() as t:
            res = safe_get(
                url,
                context=context,
                deadline=self.deadline,
                error_factory=error_factory,
                stream=True,
                headers=HEADERS_JSON,
            )
            if res.status_code != 200:
                res.close()
                if res.status_code == 404:
                    raise ProductNotFoundError(product_name, url)
                raise IndexFetchError(url, f"unexpected status code {res.status_code}")
            stream_to(res, body, context=context, deadline=self.deadline, error_factory=error_factory)

        try:
            payload = json.loads(body.getvalue())
        except ValueError as exc:
            raise IndexParseError(url, f"invalid JSON: {exc}") from exc

        index = parse_release_index(product_name, payload, url)
        if is_debug_enabled(logger):
            logger.debug(
                "Parsed release index",
                extra=extra_context(
                    event="parse",
                    component="releases_client",
                    action="list_product_versions",
                    outcome="success",
                    target=safe_url(url),
                    count=len(index),
                    duration_ms=t.duration_ms(),
                ),
            )
        if len(index) == 0:
            raise EmptyIndexError(product_name)

        self.log.info("found %d versions of %s", len(index), product_name)
        return index

"""Validation of product configuration, run before any network access."""

import re

_PRODUCT_NAME_RE = re.compile(r"^[a-z0-9-]+$")
_BINARY_NAME_RE = re.compile(r"^[.a-zA-Z0-9_-]+$")


def is_product_name_valid(name: str) -> bool:
    return isinstance(name, str) and bool(_PRODUCT_NAME_RE.match(name))


def is_binary_name_valid(name: str) -> bool:
    return isinstance(name, str) and bool(_BINARY_NAME_RE.match(name)) and name not in (".", "..")

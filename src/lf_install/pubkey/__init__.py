"""Built-in public key used to verify release checksum signatures.

The key ships as package data (``default.asc``) and is read once at import.
Callers that mirror releases signed with another key pass their own armored
key instead; the default is never modified at runtime.
"""

from importlib import resources

DEFAULT_PUBLIC_KEY_FILE = "default.asc"

DEFAULT_PUBLIC_KEY: str = (
    resources.files(__name__).joinpath(DEFAULT_PUBLIC_KEY_FILE).read_text(encoding="utf-8")
)

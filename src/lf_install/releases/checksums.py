"""Checksum manifest parsing and signature verification.

A manifest lists ``<hex sha256>  <filename>`` lines for every artifact of a
release. Its authenticity is established by a detached OpenPGP signature,
checked with python-gnupg against a throwaway keyring holding only the
configured public key.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from typing import Dict, Optional

import gnupg

from ..errors import ChecksumMismatchError, SignatureVerificationError
from ..pubkey import DEFAULT_PUBLIC_KEY

logger = logging.getLogger(__name__)

_HEX_DIGEST = re.compile(r"^[0-9a-fA-F]{64}$")


def parse_checksums(text: str) -> Dict[str, str]:
    """Parse manifest text into a filename -> lowercase hex digest map.

    Lines that do not look like ``<digest> <filename>`` are ignored. The
    binary-mode marker (``*filename``) written by some tools is stripped.
    """
    checksums: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.strip().split(None, 1)
        if len(parts) != 2 or not _HEX_DIGEST.match(parts[0]):
            continue
        filename = parts[1].strip().lstrip("*")
        checksums[filename] = parts[0].lower()
    return checksums


def verify_checksum(filename: str, computed: str, checksums: Dict[str, str]) -> None:
    """Require ``computed`` to equal the manifest digest for ``filename``.

    Raises:
        ChecksumMismatchError: On a missing entry or any difference.
    """
    expected = checksums.get(filename)
    if expected is None or expected.lower() != computed.lower():
        raise ChecksumMismatchError(filename, expected, computed.lower())
    logger.debug("Checksum verified for %s (%s)", filename, computed)


class SignatureVerifier:
    """Verifies detached signatures against one ASCII-armored public key."""

    def __init__(self, armored_public_key: str, gpgbinary: str = "gpg"):
        self.armored_public_key = armored_public_key
        self.gpgbinary = gpgbinary

    def verify(self, data: bytes, signature: bytes, filename: str = "checksums") -> str:
        """Check ``signature`` over ``data``.

        Returns:
            str: Fingerprint of the key that made the signature.

        Raises:
            SignatureVerificationError: If the key is unusable or the signature
                is missing, malformed, or made by another key.
        """
        if not self.armored_public_key or not self.armored_public_key.strip():
            raise SignatureVerificationError(filename, "no public key configured")
        if not signature:
            raise SignatureVerificationError(filename, "empty signature")

        with tempfile.TemporaryDirectory(prefix="lf-install-gpg-", ignore_cleanup_errors=True) as home:
            try:
                gpg = gnupg.GPG(gnupghome=home, gpgbinary=self.gpgbinary)
            except (OSError, RuntimeError, ValueError) as exc:
                raise SignatureVerificationError(filename, f"gpg unavailable: {exc}") from exc

            imported = gpg.import_keys(self.armored_public_key)
            fingerprints = {fp.upper() for fp in (imported.fingerprints or []) if fp}
            if not fingerprints:
                raise SignatureVerificationError(filename, "public key could not be imported")

            sig_path = os.path.join(home, "manifest.sig")
            with open(sig_path, "wb") as fh:
                fh.write(signature)
            verified = gpg.verify_data(sig_path, data)

        if not verified.valid:
            reason = verified.status or "signature did not verify"
            raise SignatureVerificationError(filename, reason)

        signer = (verified.pubkey_fingerprint or verified.fingerprint or "").upper()
        if signer not in fingerprints:
            raise SignatureVerificationError(filename, f"signed by unexpected key {signer or 'unknown'}")

        logger.debug("Signature of %s verified with key %s", filename, signer)
        return signer


def verifier_for(armored_public_key: Optional[str]) -> SignatureVerifier:
    """Verifier for ``armored_public_key``, or the built-in key when empty."""
    return SignatureVerifier(armored_public_key or DEFAULT_PUBLIC_KEY)

"""Exception hierarchy for release acquisition.

Every error raised by the library derives from ``LfInstallError``. The
intermediate classes group errors by kind so callers can decide on retry
policy without matching individual types:

- ValidationError: bad configuration, raised before any I/O
- ResolutionError: nothing in the index fits the request
- TransportError: network failures, including timeout and cancellation
- TrustError / IntegrityError: signature and checksum failures, always terminal
- FilesystemError: extraction, license and cleanup failures
"""
from __future__ import annotations

from typing import List, Optional, Tuple


class LfInstallError(Exception):
    """Base exception for all release acquisition errors."""


class ValidationError(LfInstallError, ValueError):
    """Invalid configuration rejected before any I/O.

    Attributes:
        field: Name of the offending field (e.g. "product.name")
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class MalformedVersionError(ValidationError):
    """Version string does not follow the version grammar."""

    def __init__(self, raw: str, reason: str = "invalid version"):
        self.raw = raw
        super().__init__(f"malformed version {raw!r}: {reason}", field="version")


class MalformedConstraintError(ValidationError):
    """Constraint string does not follow the constraint grammar."""

    def __init__(self, raw: str, reason: str = "invalid constraint"):
        self.raw = raw
        super().__init__(f"malformed constraint {raw!r}: {reason}", field="constraints")


class ResolutionError(LfInstallError):
    """No index entry satisfies the request."""


class VersionNotFoundError(ResolutionError):
    """The exact version requested is not in the release index."""

    def __init__(self, product: str, version: str):
        self.product = product
        self.version = version
        super().__init__(f"version {version} of {product!r} not found in release index")


class NoMatchingVersionError(ResolutionError):
    """No version in the index satisfies the constraints.

    Attributes:
        constraints: The constraint set that was applied
        include_prereleases: Whether prereleases were eligible
    """

    def __init__(self, product: str, constraints, include_prereleases: bool):
        self.product = product
        self.constraints = constraints
        self.include_prereleases = include_prereleases
        qualifier = "including" if include_prereleases else "excluding"
        super().__init__(
            f"no matching version found for {product!r} with constraints "
            f"{str(constraints) or '(none)'!r} ({qualifier} prereleases)"
        )


class UnsupportedPlatformError(ResolutionError):
    """The selected version has no artifact for the requested platform."""

    def __init__(self, product: str, version: str, os_name: str, arch: str):
        self.product = product
        self.version = version
        self.os_name = os_name
        self.arch = arch
        super().__init__(f"no ZIP archive found for {product} {version} {os_name}/{arch}")


class TransportError(LfInstallError):
    """Network failure while talking to the release host."""


class IndexFetchError(TransportError):
    """The release index could not be retrieved."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch release index {url}: {reason}")


class DownloadError(TransportError):
    """One of the artifact, manifest or signature downloads failed.

    Attributes:
        filename: Name of the file that failed to download
    """

    def __init__(self, filename: str, url: str, reason: str):
        self.filename = filename
        self.url = url
        self.reason = reason
        super().__init__(f"failed to download {filename} from {url}: {reason}")


class InstallTimeoutError(TransportError):
    """The caller supplied deadline elapsed."""

    def __init__(self, operation: str, timeout: Optional[float] = None):
        self.operation = operation
        self.timeout = timeout
        suffix = f" after {timeout:g}s" if timeout is not None else ""
        super().__init__(f"{operation} timed out{suffix}")


class InstallCancelledError(TransportError):
    """The caller cancelled the operation."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"{operation} was cancelled")


class IndexParseError(LfInstallError):
    """The release index payload is malformed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to parse release index {url}: {reason}")


class EmptyIndexError(LfInstallError):
    """The release index lists no versions."""

    def __init__(self, product: str, message: Optional[str] = None):
        self.product = product
        super().__init__(message or f"no versions found for {product!r}")


class ProductNotFoundError(EmptyIndexError):
    """The release host has no index for the product."""

    def __init__(self, product: str, url: str):
        self.url = url
        super().__init__(product, f"product {product!r} not found at {url}")


class TrustError(LfInstallError):
    """Authenticity of release metadata could not be established."""


class SignatureVerificationError(TrustError):
    """The checksum manifest signature did not verify against the public key."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"unable to verify signature of {filename}: {reason}")


class IntegrityError(LfInstallError):
    """Downloaded content does not match its published digest."""


class ChecksumMismatchError(IntegrityError):
    """The artifact digest differs from the manifest entry."""

    def __init__(self, filename: str, expected: Optional[str], computed: str):
        self.filename = filename
        self.expected = expected
        self.computed = computed
        super().__init__(
            f"checksum mismatch for {filename} (expected: {expected!r}, got: {computed!r})"
        )


class FilesystemError(LfInstallError):
    """Local filesystem operation failed."""


class ExtractionError(FilesystemError):
    """The archive could not be unpacked safely."""

    def __init__(self, archive: str, reason: str, member: Optional[str] = None):
        self.archive = archive
        self.member = member
        self.reason = reason
        where = f" (entry {member!r})" if member else ""
        super().__init__(f"failed to extract {archive}{where}: {reason}")


class LicenseNotFoundError(FilesystemError):
    """An enterprise archive did not contain the expected license file."""

    def __init__(self, archive: str, license_dir: str):
        self.archive = archive
        self.license_dir = license_dir
        super().__init__(f"no license file found in {archive} to copy into {license_dir}")


class CleanupError(FilesystemError):
    """One or more recorded paths could not be removed.

    Attributes:
        failures: (path, error) pairs for every path that failed
    """

    def __init__(self, failures: List[Tuple[str, OSError]]):
        self.failures = list(failures)
        details = "; ".join(f"{path}: {exc}" for path, exc in self.failures)
        super().__init__(f"failed to remove {len(self.failures)} path(s): {details}")

"""Verified download of a release artifact.

Turns one selected ProductVersion into an unpacked, verified executable:
select the platform build, fetch the archive with its checksum manifest and
signature, verify both, unpack, and mark the binary executable. Every path
created along the way is appended to the caller's InstallationRecord, so a
failure at any step still leaves the caller able to clean up.
"""
from __future__ import annotations

import hashlib
import io
import logging
import os
import platform
import urllib.parse
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..common.http_client import Deadline, download_to
from ..common.logging_utils import safe_url
from ..constants import Constants
from ..errors import (
    DownloadError,
    ExtractionError,
    LicenseNotFoundError,
    SignatureVerificationError,
    UnsupportedPlatformError,
)
from .archive import ensure_dir, extract_zip
from .checksums import SignatureVerifier, parse_checksums, verifier_for, verify_checksum
from .index import Build, ProductVersion
from .lifecycle import InstallationRecord

logger = logging.getLogger(__name__)

_OS_ALIASES = {"win32": "windows", "cygwin": "windows", "msys": "windows"}
_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "armv7l": "arm",
    "armv6l": "arm",
}


def current_platform() -> Tuple[str, str]:
    """Return the running (os, arch) pair in release-index naming."""
    system = platform.system().lower()
    machine = platform.machine().lower()
    return _OS_ALIASES.get(system, system), _ARCH_ALIASES.get(machine, machine)


@dataclass
class UnpackedProduct:
    """Outcome of a successful download_and_unpack."""
    executable: str
    install_dir: str
    files: List[str] = field(default_factory=list)
    license_files: List[str] = field(default_factory=list)
    checksum_verified: bool = False


class Downloader:
    """Downloads, verifies and unpacks one release artifact.

    Args:
        base_url: Release host; a non-default host also serves the archives.
        verify_checksum: Verify the manifest signature and artifact digest.
        armored_public_key: Key for signature checks (built-in default when empty).
        verifier: Pre-built verifier, overriding ``armored_public_key``.
        os_name, arch: Target platform (the running one when omitted).
        deadline: Time budget and cancel signal for all downloads.
        log: Logger to report progress to.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        verify_checksum: bool = True,
        armored_public_key: Optional[str] = None,
        verifier: Optional[SignatureVerifier] = None,
        os_name: Optional[str] = None,
        arch: Optional[str] = None,
        deadline: Optional[Deadline] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.base_url = (base_url or Constants.DEFAULT_BASE_URL).rstrip("/")
        self.verify_checksum = verify_checksum
        self.verifier = verifier or verifier_for(armored_public_key)
        detected_os, detected_arch = current_platform()
        self.os_name = os_name or detected_os
        self.arch = arch or detected_arch
        self.deadline = deadline or Deadline()
        self.log = log or logger

    @property
    def custom_host(self) -> bool:
        return self.base_url != Constants.DEFAULT_BASE_URL

    def file_url(self, pv: ProductVersion, filename: str) -> str:
        path = "/".join(
            urllib.parse.quote(part, safe="+~")
            for part in (pv.name, pv.raw_version, filename)
        )
        return f"{self.base_url}/{path}"

    def artifact_url(self, pv: ProductVersion, build: Build) -> str:
        if build.url and not self.custom_host:
            return build.url
        return self.file_url(pv, build.filename)

    def _fetch_bytes(self, pv: ProductVersion, filename: str) -> bytes:
        url = self.file_url(pv, filename)
        self.log.debug("downloading %s", safe_url(url))
        buf = io.BytesIO()
        download_to(
            url,
            buf,
            context=f"download of {filename}",
            deadline=self.deadline,
            error_factory=lambda reason: DownloadError(filename, url, reason),
        )
        return buf.getvalue()

    def _fetch_archive(self, url: str, filename: str, dest: str, record: InstallationRecord) -> str:
        hasher = hashlib.sha256()
        record.add(dest)
        self.log.debug("downloading %s to %s", safe_url(url), dest)
        with open(dest, "wb") as fh:
            size = download_to(
                url,
                fh,
                context=f"download of {filename}",
                deadline=self.deadline,
                error_factory=lambda reason: DownloadError(filename, url, reason),
                on_chunk=hasher.update,
            )
        self.log.debug("downloaded %d bytes for %s", size, filename)
        return hasher.hexdigest()

    def _fetch_manifest(self, pv: ProductVersion) -> Tuple[bytes, bytes]:
        if not pv.shasums or not pv.shasums_signature:
            raise SignatureVerificationError(
                pv.shasums or f"{pv.name} {pv.raw_version}",
                "release does not publish a signed checksum manifest",
            )
        return self._fetch_bytes(pv, pv.shasums), self._fetch_bytes(pv, pv.shasums_signature)

    def _verify_manifest(self, pv: ProductVersion, manifest: bytes, signature: bytes) -> Dict[str, str]:
        self.verifier.verify(manifest, signature, filename=pv.shasums)
        self.log.info("verified signature of %s", pv.shasums)
        return parse_checksums(manifest.decode("utf-8", errors="replace"))

    def download_and_unpack(
        self,
        pv: ProductVersion,
        install_dir: str,
        binary_name: str,
        record: InstallationRecord,
        license_dir: str = "",
        require_license: bool = False,
    ) -> UnpackedProduct:
        """Download, verify and unpack ``pv`` into ``install_dir``.

        Args:
            pv: Selected release.
            install_dir: Directory receiving the archive contents, created if missing.
            binary_name: Executable expected at the archive root.
            record: Receives every path created.
            license_dir: Optional separate directory for license files.
            require_license: Fail when no license file is found (enterprise).

        Returns:
            UnpackedProduct: with the absolute executable path.
        """
        build = pv.find_build(self.os_name, self.arch)
        if build is None:
            raise UnsupportedPlatformError(pv.name, pv.raw_version, self.os_name, self.arch)

        signed = self._fetch_manifest(pv) if self.verify_checksum else None

        url = self.artifact_url(pv, build)
        ensure_dir(install_dir, record)
        scratch = os.path.join(install_dir, f".{build.filename}.download")
        digest = self._fetch_archive(url, build.filename, scratch, record)

        checksums = None
        if signed is not None:
            checksums = self._verify_manifest(pv, *signed)
            verify_checksum(build.filename, digest, checksums)
            self.log.info("verified checksum of %s", build.filename)

        extracted = extract_zip(scratch, install_dir, record, license_dir=license_dir or None)

        try:
            os.remove(scratch)
        except OSError as exc:
            raise ExtractionError(scratch, f"could not remove downloaded archive: {exc}") from exc
        record.discard(scratch)

        if license_dir and require_license and not extracted.license_files:
            raise LicenseNotFoundError(build.filename, license_dir)

        executable = os.path.abspath(os.path.join(install_dir, binary_name))
        if not os.path.isfile(executable):
            raise ExtractionError(build.filename, f"executable {binary_name!r} not found in archive")
        self.log.debug("changing perms of %s", executable)
        os.chmod(executable, Constants.EXECUTABLE_MODE)
        record.add(executable)

        return UnpackedProduct(
            executable=executable,
            install_dir=install_dir,
            files=extracted.files,
            license_files=extracted.license_files,
            checksum_verified=checksums is not None,
        )

"""Safe extraction of release ZIP archives."""
from __future__ import annotations

import logging
import ntpath
import os
import posixpath
import shutil
import zipfile
import zlib
from dataclasses import dataclass, field
from typing import List, Optional

from ..constants import Constants
from ..errors import ExtractionError
from .lifecycle import InstallationRecord

logger = logging.getLogger(__name__)


@dataclass
class ExtractedFiles:
    """Files written while unpacking one archive."""
    files: List[str] = field(default_factory=list)
    license_files: List[str] = field(default_factory=list)


def is_license_file(name: str) -> bool:
    return posixpath.basename(name.replace("\\", "/")).lower() in Constants.LICENSE_FILENAMES


def _is_within(path: str, root: str) -> bool:
    real_root = os.path.realpath(root)
    real_path = os.path.realpath(path)
    return real_path == real_root or real_path.startswith(real_root + os.sep)


def resolve_member_path(name: str, target_dir: str, archive: str = "") -> str:
    """Destination of archive member ``name`` under ``target_dir``.

    Raises:
        ExtractionError: If the member would land outside ``target_dir``.
    """
    normalized = name.replace("\\", "/")
    if (
        not normalized
        or normalized.startswith("/")
        or ntpath.splitdrive(name)[0]
        or ".." in normalized.split("/")
    ):
        raise ExtractionError(archive or target_dir, "illegal path in archive", member=name)
    dest = os.path.join(target_dir, *[p for p in normalized.split("/") if p])
    if not _is_within(dest, target_dir):
        raise ExtractionError(archive or target_dir, "path escapes target directory", member=name)
    return dest


def ensure_dir(path: str, record: InstallationRecord) -> None:
    """Create ``path`` and any missing parents, recording each one created."""
    missing = []
    current = path
    while current and not os.path.isdir(current):
        missing.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent
    for directory in reversed(missing):
        os.mkdir(directory)
        record.add(directory)


def extract_zip(
    archive_path: str,
    install_dir: str,
    record: InstallationRecord,
    license_dir: Optional[str] = None,
) -> ExtractedFiles:
    """Unpack ``archive_path`` into ``install_dir``.

    Every member path is checked before anything is written, so a single
    bad entry aborts extraction with no files created. License files go to
    ``license_dir`` when one is given. Each written path is recorded.

    Raises:
        ExtractionError: On a corrupt archive or an unsafe member path.
    """
    result = ExtractedFiles()
    try:
        with zipfile.ZipFile(archive_path) as zf:
            plan = []
            for info in zf.infolist():
                to_license = bool(license_dir) and is_license_file(info.filename) and not info.is_dir()
                root = license_dir if to_license else install_dir
                plan.append((info, resolve_member_path(info.filename, root, archive_path), to_license))

            for info, dest, to_license in plan:
                if info.is_dir():
                    ensure_dir(dest, record)
                    continue
                ensure_dir(os.path.dirname(dest), record)
                record.add(dest)
                with zf.open(info) as src, open(dest, "wb") as dst:
                    shutil.copyfileobj(src, dst)
                logger.debug("extracted %s to %s", info.filename, dest)
                if to_license or is_license_file(info.filename):
                    result.license_files.append(dest)
                else:
                    result.files.append(dest)
    except ExtractionError:
        raise
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise ExtractionError(archive_path, f"corrupt archive: {exc}") from exc
    except OSError as exc:
        raise ExtractionError(archive_path, str(exc)) from exc
    return result

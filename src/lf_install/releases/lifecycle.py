"""Bookkeeping of paths created by an install so it can be undone."""
from __future__ import annotations

import logging
import os
import shutil
from typing import List, Optional, Tuple

from ..errors import CleanupError

logger = logging.getLogger(__name__)


def remove_path(path: str) -> bool:
    """Delete a file, symlink or directory tree.

    Returns:
        bool: False when the path was already gone.

    Raises:
        OSError: For any failure other than the path being absent.
    """
    try:
        if os.path.isdir(path) and not os.path.islink(path):
            shutil.rmtree(path)
        else:
            os.remove(path)
    except FileNotFoundError:
        return False
    return True


class InstallationRecord:
    """Paths created during one install, owned by a single source adapter.

    Not thread-safe: one record tracks one install/remove lifecycle.
    """

    def __init__(self, log: Optional[logging.Logger] = None):
        self._paths: List[str] = []
        self._log = log or logger

    @property
    def paths(self) -> List[str]:
        return list(self._paths)

    def add(self, path: str) -> None:
        if path and path not in self._paths:
            self._paths.append(path)

    def discard(self, path: str) -> None:
        """Forget a path that was already removed by the step that created it."""
        if path in self._paths:
            self._paths.remove(path)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def remove_all(self) -> None:
        """Delete every recorded path, attempting all of them.

        Paths that no longer exist are ignored. Removed paths are forgotten;
        paths that fail stay recorded so a later call can retry them.

        Raises:
            CleanupError: Listing every path that could not be removed.
        """
        failures: List[Tuple[str, OSError]] = []
        remaining: List[str] = []
        # Newest first so files go before the directories that hold them.
        for path in reversed(self._paths):
            try:
                if remove_path(path):
                    self._log.debug("removed %s", path)
            except OSError as exc:
                self._log.warning("failed to remove %s: %s", path, exc)
                failures.append((path, exc))
                remaining.append(path)

        self._paths = list(reversed(remaining))
        if failures:
            raise CleanupError(failures)

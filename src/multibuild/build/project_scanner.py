"""
Recursive file scanner for project discovery.

The scanner walks a root directory depth-first and returns every regular
file beneath it. It knows nothing about entry-file conventions; callers
filter the result.
"""

import logging
import os
from pathlib import Path
from typing import List

from ..paths import NotFoundError, PathLike

logger = logging.getLogger(__name__)


class ScanRootNotFoundError(NotFoundError):
    """Raised when the directory to scan does not exist."""

    def __init__(self, path: PathLike):
        super().__init__(path, f"Scan root does not exist: {path}")


class ProjectScanner:
    """
    Produces absolute paths to every file nested under a root directory.

    Traversal is depth-first. Sibling order is sorted by name so repeated
    scans of an unchanged tree give the same list, but callers must not rely
    on any particular order.
    """

    def __init__(self, root: PathLike):
        """
        Initialize scanner.

        Args:
            root: Directory to scan
        """
        self.root = Path(root)

    def scan(self) -> List[Path]:
        """
        Scan the root directory.

        Returns:
            Absolute paths of all files beneath the root

        Raises:
            ScanRootNotFoundError: If the root does not exist or is not a directory
            OSError: If a directory cannot be read mid-walk (no partial result)
        """
        root = self.root.resolve()
        if not root.is_dir():
            raise ScanRootNotFoundError(self.root)

        files: List[Path] = []
        self._walk(root, files)
        logger.debug(f"Scanned {root}: {len(files)} file(s)")
        return files

    def _walk(self, directory: Path, files: List[Path]) -> None:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda e: e.name)

        for entry in entries:
            path = directory / entry.name
            if entry.is_dir(follow_symlinks=False):
                self._walk(path, files)
            elif entry.is_file():
                files.append(path)

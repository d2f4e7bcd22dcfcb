"""Per-project distribution manifest loading.

A project may place an ``output.json`` beside its entry file listing extra
destinations for its compiled artifact:

    [
        {"dir": "server/static/js", "filename": "alpha.min.js"},
        {"dir": "/srv/www/drop"}
    ]

``filename`` is optional; without it the artifact keeps its own name.
Relative ``dir`` values are resolved against the loader's base directory
(the repository root for a build pass), falling back to the current
working directory.

A missing manifest is not an error. An unreadable or malformed manifest
raises ManifestError, which the caller confines to that one project.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

from ..paths import PathLike, target_exists

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_NAME = "output.json"


class ManifestError(Exception):
    """Raised when a distribution manifest cannot be read or parsed.

    Attributes:
        path: The manifest file that failed.
    """

    def __init__(self, path: PathLike, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Invalid manifest {self.path}: {reason}")


@dataclass(frozen=True)
class ManifestRecord:
    """One extra destination for a project's artifact.

    Attributes:
        directory: Destination directory (absolute)
        filename: Override filename, or None to keep the artifact's name
    """

    directory: Path
    filename: Optional[str] = None

    def resolve_filename(self, artifact_name: str) -> str:
        return self.filename or artifact_name


class DistributionManifestLoader:
    """Loads the optional distribution manifest of a project."""

    def __init__(self, manifest_name: str = DEFAULT_MANIFEST_NAME, base_dir: Optional[PathLike] = None):
        """
        Args:
            manifest_name: File name of the manifest inside a project directory
            base_dir: Directory relative "dir" values are resolved against
        """
        self.manifest_name = manifest_name
        self.base_dir = Path(base_dir) if base_dir is not None else None

    def manifest_path(self, build_dir: PathLike) -> Path:
        return Path(build_dir) / self.manifest_name

    def load(self, build_dir: PathLike) -> List[ManifestRecord]:
        """Load the manifest beside a project's build.

        Args:
            build_dir: The project directory holding the entry file

        Returns:
            Manifest records in file order; empty if there is no manifest

        Raises:
            ManifestError: If the manifest is unreadable or malformed
        """
        path = self.manifest_path(build_dir)
        if not target_exists(path):
            logger.debug(f"No manifest at {path}")
            return []

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestError(path, f"not valid JSON ({e})") from e
        except (OSError, UnicodeDecodeError) as e:
            raise ManifestError(path, f"cannot be read ({e})") from e

        records = self._parse(path, data)
        logger.debug(f"Loaded {len(records)} destination(s) from {path}")
        return records

    def _parse(self, path: Path, data: Any) -> List[ManifestRecord]:
        if not isinstance(data, list):
            raise ManifestError(path, f"expected a JSON array, got {type(data).__name__}")

        base_dir = self.base_dir if self.base_dir is not None else Path.cwd()
        records: List[ManifestRecord] = []
        for index, item in enumerate(data):
            if not isinstance(item, dict):
                raise ManifestError(path, f"entry {index} is not an object")

            directory = item.get("dir")
            if not isinstance(directory, str) or not directory.strip():
                raise ManifestError(path, f"entry {index} has no 'dir'")

            filename = item.get("filename")
            if filename is not None and (not isinstance(filename, str) or not filename.strip()):
                raise ManifestError(path, f"entry {index} has an invalid 'filename'")

            records.append(ManifestRecord(directory=(base_dir / directory).resolve(), filename=filename))

        return records

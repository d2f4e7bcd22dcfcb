"""Path helpers shared by discovery and distribution.

Small, dependency-free functions for existence checks, last-segment
extraction and project identity derivation.
"""

import os
from pathlib import Path, PurePosixPath
from typing import Union

PathLike = Union[str, os.PathLike]


class NotFoundError(FileNotFoundError):
    """Raised when a required file or directory does not exist.

    Attributes:
        path: The path that was looked up.
    """

    def __init__(self, path: PathLike, message: str = ""):
        self.path = Path(path)
        super().__init__(message or f"Path does not exist: {self.path}")


def target_exists(source: PathLike) -> bool:
    """Check if a file or directory exists.

    Only a "not found" outcome maps to False; permission problems and other
    OS errors propagate to the caller.

    Args:
        source: File or directory path

    Returns:
        True if something exists at the path
    """
    try:
        os.stat(source)
    except (FileNotFoundError, NotADirectoryError):
        return False
    return True


def last_path_segment(source: PathLike) -> str:
    """Extract the last non-empty segment of a path.

    Trailing separators are ignored:
        /abc/def/ghi/  -> ghi
        /hoge/fuga/foo.js -> foo.js

    Args:
        source: Path as string or path object

    Returns:
        The last segment, or an empty string for a root/empty path
    """
    text = os.fspath(source).replace("\\", "/").rstrip("/")
    return text.rsplit("/", 1)[-1]


def relative_identity(path: PathLike, root: PathLike) -> str:
    """Derive a project's identity by stripping the source-root prefix.

    Args:
        path: Project directory
        root: Source root the project lives under

    Returns:
        POSIX-style relative path (e.g. "group/alpha")

    Raises:
        ValueError: If path is not located below root
    """
    relative = Path(path).resolve().relative_to(Path(root).resolve())
    identity = PurePosixPath(*relative.parts).as_posix()
    if identity in ("", "."):
        raise ValueError(f"{path} is the source root itself, not a project below it")
    return identity

"""Thread pool for artifact copy tasks.

CopyPool wraps a ThreadPoolExecutor with copy-specific logic: destination
directories are created on demand and the artifact is streamed in fixed
size chunks, so an artifact is never held in memory as a whole.
"""

import logging
import os
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Any

from .models import CopyPhase, CopyTask

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 64 * 1024


class CopyIOError(OSError):
    """Raised when an artifact cannot be copied to its destination.

    Attributes:
        source: Artifact being copied
        destination: Intended destination file
    """

    def __init__(self, source: Path, destination: Path, cause: OSError):
        self.source = source
        self.destination = destination
        self.cause = cause
        super().__init__(f"Failed to copy {source} to {destination}: {cause.strerror or cause}")
        self.errno = cause.errno


def ensure_directory(directory: Path) -> None:
    """Create a directory and any missing parents.

    Pre-existing directories, including ones created concurrently by another
    task, are not an error.
    """
    directory.mkdir(parents=True, exist_ok=True)


def stream_copy(source: Path, destination: Path, chunk_size: int = _COPY_CHUNK_SIZE) -> int:
    """Copy a file chunk by chunk, always overwriting the destination.

    Args:
        source: File to read
        destination: File to (over)write
        chunk_size: Bytes per read

    Returns:
        Number of bytes written
    """
    written = 0
    with open(source, "rb") as src, open(destination, "wb") as dst:
        while True:
            chunk = src.read(chunk_size)
            if not chunk:
                break
            dst.write(chunk)
            written += len(chunk)
    return written


def _is_same_file(source: Path, destination: Path) -> bool:
    try:
        return os.path.samefile(source, destination)
    except OSError:
        return False


def run_copy_task(task: CopyTask) -> CopyTask:
    """Execute a copy task in the calling thread.

    Creates the destination directory, streams the artifact and updates the
    task's phase. No retries.

    Raises:
        CopyIOError: If the directory cannot be created or the copy fails
    """
    start = time.monotonic()
    task.phase = CopyPhase.COPYING
    destination = task.destination_path
    try:
        if _is_same_file(task.source_artifact_path, destination):
            # Opening the destination for writing would truncate the artifact
            task.bytes_copied = task.source_artifact_path.stat().st_size
            logger.debug(f"Destination {destination} is the artifact itself, nothing to copy")
        else:
            ensure_directory(task.destination_directory)
            task.bytes_copied = stream_copy(task.source_artifact_path, destination)
            logger.debug(f"Copied {task.source_artifact_path} -> {destination} ({task.bytes_copied} bytes)")
    except OSError as e:
        task.elapsed = time.monotonic() - start
        error = CopyIOError(task.source_artifact_path, destination, e)
        task.fail(str(error))
        raise error from e

    task.elapsed = time.monotonic() - start
    task.phase = CopyPhase.DONE
    return task


class CopyPool:
    """Thread pool for copying artifacts to their destinations.

    Args:
        max_workers: Maximum concurrent copy operations.
    """

    def __init__(self, max_workers: int) -> None:
        self._max_workers = max_workers
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="copy")
        self._shutdown = False
        self._lock = threading.Lock()

    def submit_copy(self, task: CopyTask) -> "Future[CopyTask]":
        """Submit a copy task.

        Returns:
            Future resolving to the completed task, or raising CopyIOError.

        Raises:
            RuntimeError: If the pool has been shut down.
        """
        with self._lock:
            if self._shutdown:
                raise RuntimeError("CopyPool has been shut down")
        return self._executor.submit(run_copy_task, task)

    def shutdown(self) -> None:
        """Shut down the thread pool, waiting for all pending copies to finish."""
        with self._lock:
            self._shutdown = True
        self._executor.shutdown(wait=True)

    @property
    def max_workers(self) -> int:
        """Maximum number of concurrent copy workers."""
        return self._max_workers

    def __enter__(self) -> "CopyPool":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.shutdown()

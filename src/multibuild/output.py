"""
Centralized console output module for multibuild.

All output is prefixed with the elapsed time since program launch in
MM:SS.cc format (minutes:seconds.centiseconds), so a build log shows where
time goes between discovery, compilation and distribution.

Example output:
    00:00.03 Discovering projects in src/projects...
    00:00.05      Found 3 project(s)
    00:01.87 [2/3] Compiling...
    00:02.10 ERROR: Invalid manifest src/projects/alpha/output.json: ...

Usage:
    from multibuild.output import log, log_phase, log_detail, log_error

    log("Discovering projects...")
    log_phase(1, 3, "Building entry map...")
    log_detail("alpha -> src/projects/alpha/dist/alpha.js")
"""

import sys
import threading
import time
from types import TracebackType
from typing import Optional, TextIO

# Global state for the timer
_start_time: Optional[float] = None
_output_stream: TextIO = sys.stdout
_verbose: bool = True
_output_file: Optional[TextIO] = None

# Distribution workers log from pool threads
_write_lock = threading.Lock()


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Initialize the program timer.

    If not called explicitly, it is called automatically on first log.

    Args:
        output_stream: Optional output stream (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    if output_stream is not None:
        _output_stream = output_stream


def reset_timer() -> None:
    """Reset the timer epoch to the current time."""
    global _start_time
    _start_time = time.time()


def set_verbose(verbose: bool) -> None:
    """
    Set verbose mode for logging.

    Args:
        verbose: If True, verbose_only messages are printed as well.
    """
    global _verbose
    _verbose = verbose


def is_verbose() -> bool:
    return _verbose


def set_output_file(output_file: Optional[TextIO]) -> None:
    """
    Set a file to receive all log output (in addition to the console).

    Args:
        output_file: File object to receive output, or None to disable file output
    """
    global _output_file
    _output_file = output_file


def get_elapsed() -> float:
    """
    Get elapsed time since timer initialization.

    Returns:
        Elapsed time in seconds
    """
    if _start_time is None:
        init_timer()
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    """Format the current elapsed time as MM:SS.cc."""
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str, end: str = "\n") -> None:
    timestamp = format_timestamp()
    line = f"{timestamp} {message}{end}"
    with _write_lock:
        _output_stream.write(line)
        _output_stream.flush()

        if _output_file is not None:
            _output_file.write(line)
            _output_file.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """
    Log a build phase message.

    Format: [N/M] message
    """
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    """
    Log a detail message (indented).

    Args:
        message: Detail message
        indent: Number of spaces to indent (default 6)
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_copy(source: str, destination: str, verbose_only: bool = True) -> None:
    """
    Log a single artifact copy.

    Format: [copy] source -> destination
    """
    if verbose_only and not _verbose:
        return
    _print(f"      [copy] {source} -> {destination}")


def log_error(message: str) -> None:
    """Log an error message. Never suppressed by verbose mode."""
    _print(f"ERROR: {message}")


def log_warning(message: str) -> None:
    """Log a warning message. Never suppressed by verbose mode."""
    _print(f"WARNING: {message}")


def log_build_complete(build_time: float, verbose_only: bool = False) -> None:
    """
    Log build completion message.

    Args:
        build_time: Total build pass time in seconds
        verbose_only: If True, only print if verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print("")
    _print(f"Build time: {build_time:.2f}s")


class TimedLogger:
    """
    Context manager for logging with elapsed time tracking.

    Usage:
        with TimedLogger("Distributing artifacts", phase=(3, 3)) as timer:
            timer.detail("Copied 4 file(s)")
        # Automatically logs completion time
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        if self.phase:
            log_phase(self.phase[0], self.phase[1], f"{self.operation}...", self.verbose_only)
        else:
            log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=self.verbose_only)
        return None

    def detail(self, message: str) -> None:
        """Log a detail message within this operation."""
        log_detail(message, verbose_only=self.verbose_only)

    def log(self, message: str) -> None:
        """Log a message within this operation."""
        log(message, self.verbose_only)

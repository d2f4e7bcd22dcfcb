"""Progress callback protocol for artifact distribution.

Defines the callback interface the distributor uses to report each
project's movement through the distribution workflow.
"""

from typing import Protocol, runtime_checkable

from .models import ProjectPhase


@runtime_checkable
class DistributionCallback(Protocol):
    """Protocol for receiving distribution progress updates.

    Called from distributor worker threads; implementations must be
    thread-safe.
    """

    def on_progress(self, project: str, phase: ProjectPhase, detail: str) -> None:
        """Called when a project's distribution changes phase.

        Args:
            project: Project identity (e.g. "alpha" or "group/alpha").
            phase: Phase just entered.
            detail: Human-readable status detail (e.g. a destination path).
        """
        ...


class NullCallback:
    """No-op callback implementation for tests and non-interactive use."""

    def on_progress(self, project: str, phase: ProjectPhase, detail: str) -> None:
        """Discard progress update."""
        pass

"""Data models for post-build artifact distribution.

Defines the core dataclasses used by the distributor:
- ProjectPhase: Enum tracking where a project's artifact is in distribution
- CopyPhase: Enum tracking a single copy task
- CopyTask: One artifact copy to one destination
- ProjectDistribution: Per-project record of the distribution workflow
- DistributionResult: Aggregated result of a distribution pass
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class ProjectPhase(Enum):
    """Phase of a project's artifact in the distribution workflow.

    EMITTED -> DEFAULT_COPIED -> MANIFEST_CHECKED -> FAN_OUT_COPYING -> DONE

    A manifest error moves the project to REPORTED before DONE; a failed
    default copy ends in FAILED.
    """

    EMITTED = "emitted"
    DEFAULT_COPIED = "default_copied"
    MANIFEST_CHECKED = "manifest_checked"
    FAN_OUT_COPYING = "fan_out_copying"
    REPORTED = "reported"
    DONE = "done"
    FAILED = "failed"


class CopyKind(Enum):
    """Why a copy task exists."""

    DEFAULT = "default"
    MANIFEST = "manifest"


class CopyPhase(Enum):
    """Phase of a single copy task."""

    PENDING = "pending"
    COPYING = "copying"
    DONE = "done"
    FAILED = "failed"


@dataclass
class CopyTask:
    """A single artifact copy.

    Attributes:
        project: Identity of the project the artifact belongs to
        source_artifact_path: Compiled artifact to copy
        destination_directory: Directory to copy into (created on demand)
        destination_filename: Name of the copy inside destination_directory
        kind: Default mirror copy or manifest-driven copy
        phase: Current task phase
        error_message: Error detail if phase is FAILED
        bytes_copied: Number of bytes written
        elapsed: Seconds spent copying
    """

    project: str
    source_artifact_path: Path
    destination_directory: Path
    destination_filename: str
    kind: CopyKind = CopyKind.MANIFEST
    phase: CopyPhase = CopyPhase.PENDING
    error_message: str = ""
    bytes_copied: int = 0
    elapsed: float = 0.0

    @property
    def destination_path(self) -> Path:
        return self.destination_directory / self.destination_filename

    def fail(self, error: str) -> None:
        """Mark this task as failed with an error message."""
        self.phase = CopyPhase.FAILED
        self.error_message = error

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "project": self.project,
            "source_artifact_path": str(self.source_artifact_path),
            "destination_directory": str(self.destination_directory),
            "destination_filename": self.destination_filename,
            "kind": self.kind.value,
            "phase": self.phase.value,
            "error_message": self.error_message,
            "bytes_copied": self.bytes_copied,
            "elapsed": self.elapsed,
        }


@dataclass
class ProjectDistribution:
    """Distribution state of one project's artifact.

    Attributes:
        project: Project identity (source directory relative to the source root)
        artifact_path: Compiled artifact location
        phase: Current workflow phase
        copy_tasks: Default copy first, then manifest copies in manifest order
        manifest_error: Error detail if the manifest could not be loaded
        error_message: Error detail if the workflow itself failed
        start_time: Monotonic timestamp when the workflow started
        elapsed: Seconds from start to the terminal phase
    """

    project: str
    artifact_path: Path
    phase: ProjectPhase = ProjectPhase.EMITTED
    copy_tasks: list[CopyTask] = field(default_factory=list)
    manifest_error: str = ""
    error_message: str = ""
    start_time: Optional[float] = None
    elapsed: float = 0.0

    def mark_started(self) -> None:
        self.start_time = time.monotonic()

    def finish(self, phase: ProjectPhase = ProjectPhase.DONE) -> None:
        """Move to a terminal phase and record elapsed time."""
        self.phase = phase
        if self.start_time is not None:
            self.elapsed = time.monotonic() - self.start_time

    def fail(self, error: str) -> None:
        self.error_message = error
        self.finish(ProjectPhase.FAILED)


@dataclass
class DistributionResult:
    """Aggregated result of distributing every artifact of a pass.

    Attributes:
        projects: Final state of every project's distribution
        total_elapsed: Total wall-clock time in seconds
        enabled: False when distribution was disabled for the pass
    """

    projects: list[ProjectDistribution] = field(default_factory=list)
    total_elapsed: float = 0.0
    enabled: bool = True

    @property
    def tasks(self) -> list[CopyTask]:
        return [task for project in self.projects for task in project.copy_tasks]

    @property
    def copied_count(self) -> int:
        """Number of copy tasks that completed successfully."""
        return sum(1 for t in self.tasks if t.phase == CopyPhase.DONE)

    @property
    def failed_tasks(self) -> list[CopyTask]:
        """Copy tasks that failed."""
        return [t for t in self.tasks if t.phase == CopyPhase.FAILED]

    @property
    def manifest_errors(self) -> dict[str, str]:
        """Project identity -> manifest error detail."""
        return {p.project: p.manifest_error for p in self.projects if p.manifest_error}

    @property
    def failed_projects(self) -> list[ProjectDistribution]:
        return [p for p in self.projects if p.phase == ProjectPhase.FAILED]

    @property
    def success(self) -> bool:
        """True if every copy succeeded and every manifest loaded."""
        return not self.failed_tasks and not self.manifest_errors and not self.failed_projects

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "enabled": self.enabled,
            "total_elapsed": self.total_elapsed,
            "success": self.success,
            "projects": [
                {
                    "project": p.project,
                    "artifact_path": str(p.artifact_path),
                    "phase": p.phase.value,
                    "manifest_error": p.manifest_error,
                    "error_message": p.error_message,
                    "copy_tasks": [t.to_dict() for t in p.copy_tasks],
                }
                for p in self.projects
            ],
        }

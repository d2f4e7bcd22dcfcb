"""multibuild - multi-project build orchestration.

Discovers project entry points under a source root, hands the resulting
entry map to an external compiler, and distributes each compiled artifact
to a public mirror and to any destinations listed in the project's
``output.json`` manifest.
"""

from .build.build_context import BuildParams
from .build.entry_map import (
    EntryMap,
    EntryMapBuilder,
    EntryMapResult,
    OutputPathCollisionError,
    ProjectEntry,
    ProjectNotFoundError,
)
from .build.orchestrator import BuildOrchestrator, BuildResult, ICompiler
from .build.project_scanner import ProjectScanner, ScanRootNotFoundError
from .distribution.distributor import ArtifactDistributor
from .distribution.manifest import DistributionManifestLoader, ManifestError, ManifestRecord
from .distribution.models import CopyTask, DistributionResult
from .distribution.pools import CopyIOError
from .paths import NotFoundError

__version__ = "0.3.0"

__all__ = [
    "ArtifactDistributor",
    "BuildOrchestrator",
    "BuildParams",
    "BuildResult",
    "CopyIOError",
    "CopyTask",
    "DistributionManifestLoader",
    "DistributionResult",
    "EntryMap",
    "EntryMapBuilder",
    "EntryMapResult",
    "ICompiler",
    "ManifestError",
    "ManifestRecord",
    "NotFoundError",
    "OutputPathCollisionError",
    "ProjectEntry",
    "ProjectNotFoundError",
    "ProjectScanner",
    "ScanRootNotFoundError",
]

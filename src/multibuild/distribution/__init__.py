"""Post-build artifact distribution.

Public API:
    ArtifactDistributor: Copies each compiled artifact to the public mirror
                         and to the destinations in its project's manifest.
    DistributionManifestLoader: Reads a project's optional output.json.
    DistributionSummaryDisplay: Rich summary of a distribution pass.
"""

from .callbacks import DistributionCallback, NullCallback
from .distributor import ArtifactDistributor
from .manifest import DistributionManifestLoader, ManifestError, ManifestRecord
from .models import CopyKind, CopyPhase, CopyTask, DistributionResult, ProjectDistribution, ProjectPhase
from .pools import CopyIOError, CopyPool
from .summary_display import DistributionSummaryDisplay

__all__ = [
    "ArtifactDistributor",
    "CopyIOError",
    "CopyKind",
    "CopyPhase",
    "CopyPool",
    "CopyTask",
    "DistributionCallback",
    "DistributionManifestLoader",
    "DistributionResult",
    "DistributionSummaryDisplay",
    "ManifestError",
    "ManifestRecord",
    "NullCallback",
    "ProjectDistribution",
    "ProjectPhase",
]

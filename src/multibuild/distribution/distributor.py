"""Post-build artifact distribution.

After the compiler finishes a pass, every project's artifact is:
1. Copied to the public mirror: <public_root>/<project identity>/bundle.js
2. Copied to each destination listed in the project's output.json manifest

Projects are distributed concurrently and independently. Within a project
the default copy always happens before the manifest is consulted. A bad
manifest only skips that project's fan-out; a failed copy only fails that
copy. distribute() returns after every copy of the pass has settled.
"""

import _thread
import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from ..build.entry_map import EntryMap, ProjectEntry
from ..output import log_copy, log_detail, log_error
from ..paths import PathLike, relative_identity
from .callbacks import DistributionCallback, NullCallback
from .manifest import DistributionManifestLoader, ManifestError
from .models import CopyKind, CopyTask, DistributionResult, ProjectDistribution, ProjectPhase
from .pools import CopyIOError, CopyPool, run_copy_task

if TYPE_CHECKING:
    from ..build.build_context import BuildParams

logger = logging.getLogger(__name__)

DEFAULT_BUNDLE_STEM = "bundle"
DEFAULT_BUNDLE_FILENAME = f"{DEFAULT_BUNDLE_STEM}.js"


class ArtifactDistributor:
    """
    Distributes compiled artifacts after a build pass.

    The distributor is an explicit value built from the pass configuration;
    when constructed with enabled=False, distribute() has no side effects.

    Args:
        enabled: Whether distribution is enabled for the pass.
        public_root: Destination root for the default mirror copy.
        source_root: Root that project identities are derived against.
        bundle_filename: Name of the default mirror copy.
        manifest_loader: Loader for per-project manifests.
        project_workers: Number of projects distributed concurrently.
        copy_workers: Number of concurrent manifest-driven copies.
        callback: Receives per-project phase updates.
    """

    def __init__(
        self,
        enabled: bool,
        public_root: PathLike,
        source_root: PathLike,
        bundle_filename: str = DEFAULT_BUNDLE_FILENAME,
        manifest_loader: Optional[DistributionManifestLoader] = None,
        project_workers: int = 4,
        copy_workers: int = 8,
        callback: Optional[DistributionCallback] = None,
    ) -> None:
        self.enabled = enabled
        self.public_root = Path(public_root)
        self.source_root = Path(source_root)
        self.bundle_filename = bundle_filename
        self.manifest_loader = manifest_loader if manifest_loader is not None else DistributionManifestLoader()
        self.project_workers = project_workers
        self.copy_workers = copy_workers
        self.callback: DistributionCallback = callback if callback is not None else NullCallback()

    @classmethod
    def from_params(cls, params: "BuildParams", callback: Optional[DistributionCallback] = None) -> "ArtifactDistributor":
        """Create a distributor for a build pass."""
        return cls(
            enabled=params.enable_distribution,
            public_root=params.public_root,
            source_root=params.source_root,
            bundle_filename=params.bundle_filename,
            manifest_loader=DistributionManifestLoader(params.manifest_name, base_dir=params.project_root),
            callback=callback,
        )

    def distribute(self, entry_map: EntryMap) -> DistributionResult:
        """Distribute every artifact in the entry map.

        Call once per pass, after the compiler has finalized all artifacts.

        Args:
            entry_map: The entry map the pass was compiled from

        Returns:
            DistributionResult with every project's final state
        """
        if not self.enabled:
            logger.debug("Distribution disabled for this pass")
            return DistributionResult(enabled=False)

        start_time = time.monotonic()
        entries = entry_map.entries()
        if not entries:
            return DistributionResult()

        futures: List[Future[ProjectDistribution]] = []
        with (
            CopyPool(max_workers=self.copy_workers) as copy_pool,
            ThreadPoolExecutor(max_workers=self.project_workers, thread_name_prefix="distribute") as project_pool,
        ):
            for entry in entries:
                futures.append(project_pool.submit(self._distribute_project, entry, copy_pool))

            projects = [future.result() for future in futures]

        result = DistributionResult(projects=projects, total_elapsed=time.monotonic() - start_time)
        log_detail(
            f"Distributed {len(projects)} artifact(s): {result.copied_count} copied, "
            f"{len(result.failed_tasks)} failed, {len(result.manifest_errors)} manifest error(s)"
        )
        return result

    def _distribute_project(self, entry: ProjectEntry, copy_pool: CopyPool) -> ProjectDistribution:
        """Run one project's workflow in a worker thread."""
        try:
            identity = relative_identity(entry.project_dir, self.source_root)
        except ValueError:
            identity = str(entry.project_dir)
            distribution = ProjectDistribution(project=identity, artifact_path=entry.output_path)
            self._fail(distribution, f"Project {entry.project_dir} is not inside source root {self.source_root}")
            return distribution

        distribution = ProjectDistribution(project=identity, artifact_path=entry.output_path)
        distribution.mark_started()
        try:
            self._run_workflow(distribution, entry, copy_pool)
        except KeyboardInterrupt:
            _thread.interrupt_main()
            raise
        except Exception as e:
            logger.exception(f"Distribution of {identity} failed")
            self._fail(distribution, f"Distribution of {identity} failed: {e}")
        return distribution

    def _run_workflow(self, distribution: ProjectDistribution, entry: ProjectEntry, copy_pool: CopyPool) -> None:
        identity = distribution.project
        artifact = entry.output_path
        self._notify(distribution, ProjectPhase.EMITTED, str(artifact))

        if not artifact.is_file():
            self._fail(distribution, f"Compiled artifact not found: {artifact}")
            return

        # Default mirror copy, always before the manifest is consulted
        default_task = CopyTask(
            project=identity,
            source_artifact_path=artifact,
            destination_directory=self.public_root / identity,
            destination_filename=self.bundle_filename,
            kind=CopyKind.DEFAULT,
        )
        distribution.copy_tasks.append(default_task)
        try:
            run_copy_task(default_task)
            log_copy(str(artifact), str(default_task.destination_path))
            self._notify(distribution, ProjectPhase.DEFAULT_COPIED, str(default_task.destination_path))
        except CopyIOError as e:
            log_error(str(e))

        try:
            records = self.manifest_loader.load(entry.project_dir)
        except ManifestError as e:
            log_error(f"{e}. Skipping extra destinations for {identity}.")
            distribution.manifest_error = str(e)
            self._notify(distribution, ProjectPhase.REPORTED, str(e.path))
            self._finish(distribution)
            return

        self._notify(distribution, ProjectPhase.MANIFEST_CHECKED, f"{len(records)} extra destination(s)")
        if not records:
            self._finish(distribution)
            return

        pending: List[tuple[CopyTask, Future[CopyTask]]] = []
        for record in records:
            task = CopyTask(
                project=identity,
                source_artifact_path=artifact,
                destination_directory=record.directory,
                destination_filename=record.resolve_filename(artifact.name),
            )
            distribution.copy_tasks.append(task)
            pending.append((task, copy_pool.submit_copy(task)))

        self._notify(distribution, ProjectPhase.FAN_OUT_COPYING, f"{len(pending)} copy task(s)")
        for task, future in pending:
            try:
                future.result()
                log_copy(str(artifact), str(task.destination_path))
            except CopyIOError as e:
                log_error(str(e))

        self._finish(distribution)

    def _finish(self, distribution: ProjectDistribution) -> None:
        distribution.finish(ProjectPhase.DONE)
        self._notify(distribution, ProjectPhase.DONE, f"{distribution.elapsed:.2f}s")

    def _fail(self, distribution: ProjectDistribution, message: str) -> None:
        log_error(message)
        distribution.fail(message)
        self._notify(distribution, ProjectPhase.FAILED, message)

    def _notify(self, distribution: ProjectDistribution, phase: ProjectPhase, detail: str) -> None:
        if phase not in (ProjectPhase.DONE, ProjectPhase.FAILED):
            distribution.phase = phase
        self.callback.on_progress(distribution.project, phase, detail)

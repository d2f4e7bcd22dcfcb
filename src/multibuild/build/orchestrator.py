"""
Build pass orchestration.

This module defines the compiler interface and the orchestrator that runs
one build pass:

    [1/3] Building entry map     (discovery or explicit selection)
    [2/3] Compiling              (external compiler, synchronous)
    [3/3] Distributing artifacts (only when enabled and compile succeeded)

The orchestrator owns the pass's EntryMap; the compiler and the
distributor only read it.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from ..distribution.distributor import ArtifactDistributor
from ..distribution.models import DistributionResult
from ..distribution.summary_display import DistributionSummaryDisplay
from ..output import TimedLogger, log_build_complete, log_detail, log_error, log_phase, set_verbose
from .build_context import BuildParams
from .compiler_config import CompilerConfig, create_compiler_config
from .entry_map import EntryMap, EntryMapBuilder, OutputPathCollisionError

logger = logging.getLogger(__name__)

_TOTAL_PHASES = 3


class ICompiler(ABC):
    """Interface for the external compiler.

    compile() must return only after every artifact of the pass has been
    written to its output path.
    """

    @abstractmethod
    def compile(self, config: CompilerConfig) -> bool:
        """Compile every entry of the configuration.

        Args:
            config: Compiler configuration for the pass

        Returns:
            True if compilation succeeded
        """
        pass


@dataclass
class BuildResult:
    """Result of a build pass.

    Attributes:
        success: True if entries were built, compiled and distributed cleanly
        entry_map: Entry map of the pass
        errors: Entry map failures (missing projects, unreadable source tree)
        distribution: Distribution result, or None if distribution did not run
        build_time: Wall-clock time of the pass in seconds
        message: Human-readable summary
    """

    success: bool
    entry_map: EntryMap
    errors: List[OSError] = field(default_factory=list)
    distribution: Optional[DistributionResult] = None
    build_time: float = 0.0
    message: str = ""


class BuildOrchestrator:
    """
    Runs build passes: entry map -> compiler -> distribution.

    Example:
        orchestrator = BuildOrchestrator(MyCompiler())
        result = orchestrator.build(BuildParams.from_env(Path.cwd(), {"target": "alpha"}))
    """

    def __init__(
        self,
        compiler: ICompiler,
        distributor: Optional[ArtifactDistributor] = None,
        summary_display: Optional[DistributionSummaryDisplay] = None,
    ):
        """
        Args:
            compiler: External compiler
            distributor: Distributor to use; built from the pass params when None
            summary_display: Receives progress and renders the distribution summary
        """
        self.compiler = compiler
        self.distributor = distributor
        self.summary_display = summary_display

    def build(self, params: BuildParams) -> BuildResult:
        """Execute one build pass.

        Args:
            params: Pass configuration

        Returns:
            BuildResult for the pass
        """
        start_time = time.time()
        if params.verbose:
            set_verbose(True)

        log_phase(1, _TOTAL_PHASES, "Building entry map...")
        builder = EntryMapBuilder(
            params.source_root,
            entry_filename=params.entry_filename,
            extension=params.extension,
            output_dir_name=params.output_dir_name,
        )
        try:
            entry_result = builder.build(params.project_selector)
        except OutputPathCollisionError as e:
            log_error(str(e))
            return BuildResult(
                success=False,
                entry_map=EntryMap(),
                build_time=time.time() - start_time,
                message=str(e),
            )

        entry_map = entry_result.entry_map
        for output_path, source_path in entry_map.items():
            log_detail(f"{source_path} -> {output_path}", verbose_only=True)
        log_detail(f"{len(entry_map)} project(s), {len(entry_result.errors)} error(s)")

        if not entry_map:
            return BuildResult(
                success=False,
                entry_map=entry_map,
                errors=entry_result.errors,
                build_time=time.time() - start_time,
                message="No projects to build",
            )

        config = create_compiler_config(params, entry_map)
        try:
            with TimedLogger("Compiling", phase=(2, _TOTAL_PHASES)):
                compiled = self.compiler.compile(config)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            logger.debug("Compiler raised", exc_info=True)
            log_error(f"Compilation failed: {e}")
            compiled = False

        if not compiled:
            return BuildResult(
                success=False,
                entry_map=entry_map,
                errors=entry_result.errors,
                build_time=time.time() - start_time,
                message="Compilation failed",
            )

        distribution: Optional[DistributionResult] = None
        if params.enable_distribution:
            distributor = self.distributor or ArtifactDistributor.from_params(params, callback=self.summary_display)
            with TimedLogger("Distributing artifacts", phase=(3, _TOTAL_PHASES)):
                distribution = distributor.distribute(entry_map)
            if self.summary_display is not None:
                self.summary_display.render(distribution)

        build_time = time.time() - start_time
        success = entry_result.ok and (distribution is None or distribution.success)
        log_build_complete(build_time)
        return BuildResult(
            success=success,
            entry_map=entry_map,
            errors=entry_result.errors,
            distribution=distribution,
            build_time=build_time,
            message="Build succeeded" if success else "Build completed with errors",
        )

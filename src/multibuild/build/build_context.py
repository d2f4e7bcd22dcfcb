"""Build Context - Aggregated build pass configuration.

This module defines BuildParams, the configuration consumed from the
surrounding orchestration layer for one build pass.

Design:
    BuildParams is created once per pass (directly, or from the
    orchestration layer's environment mapping) and flows read-only into
    the entry map builder, the compiler configuration and the artifact
    distributor. Changing a value means constructing a new BuildParams for
    a fresh pass.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple

from ..distribution.distributor import DEFAULT_BUNDLE_FILENAME, DEFAULT_BUNDLE_STEM
from ..distribution.manifest import DEFAULT_MANIFEST_NAME
from .entry_map import (
    DEFAULT_ENTRY_FILENAME,
    DEFAULT_EXTENSION,
    DEFAULT_OUTPUT_DIR_NAME,
    parse_project_selector,
)


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class BuildParams:
    """Configuration for a single build pass.

    Attributes:
        project_root: Repository root (compiler output paths are relative to it)
        source_root: Directory containing one subdirectory per project
        public_root: Destination root for the default mirror copy
        project_selector: Project identifiers to build; None means discover all
        enable_distribution: Whether artifacts are distributed after compiling
        shallow_watch: Exclude shared modules from the compiler's watch list
        common_modules: Shared module directories searched by the compiler
        entry_filename: Conventional entry file name of a project
        extension: Artifact file extension (without dot)
        output_dir_name: Per-project directory the compiler writes into
        bundle_filename: Canonical artifact name in the public mirror
        manifest_name: Per-project distribution manifest file name
        verbose: Whether to enable verbose output
    """

    project_root: Path
    source_root: Path
    public_root: Path
    project_selector: Optional[Tuple[str, ...]]
    enable_distribution: bool
    shallow_watch: bool
    common_modules: Tuple[Path, ...]
    entry_filename: str = DEFAULT_ENTRY_FILENAME
    extension: str = DEFAULT_EXTENSION
    output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME
    bundle_filename: str = DEFAULT_BUNDLE_FILENAME
    manifest_name: str = DEFAULT_MANIFEST_NAME
    verbose: bool = False

    @classmethod
    def create(
        cls,
        project_root: Path,
        project_selector: Optional[Sequence[str]] = None,
        enable_distribution: bool = False,
        shallow_watch: bool = False,
        source_root: Optional[Path] = None,
        public_root: Optional[Path] = None,
        common_modules: Optional[Sequence[Path]] = None,
        extension: str = DEFAULT_EXTENSION,
        verbose: bool = False,
    ) -> "BuildParams":
        """Create BuildParams with the conventional directory layout.

        Defaults: sources in ``src/projects``, shared modules in
        ``src/common``, public mirror in ``public``. The mirror copy is named
        ``bundle.<extension>``.
        """
        root = Path(project_root).resolve()
        if common_modules is None:
            common_modules = [root / "src" / "common"]
        return cls(
            project_root=root,
            source_root=Path(source_root) if source_root is not None else root / "src" / "projects",
            public_root=Path(public_root) if public_root is not None else root / "public",
            project_selector=tuple(project_selector) if project_selector else None,
            enable_distribution=enable_distribution,
            shallow_watch=shallow_watch,
            common_modules=tuple(Path(p) for p in common_modules),
            extension=extension,
            bundle_filename=f"{DEFAULT_BUNDLE_STEM}.{extension}",
            verbose=verbose,
        )

    @classmethod
    def from_env(cls, project_root: Path, env: Optional[Mapping[str, Any]]) -> "BuildParams":
        """Create BuildParams from the orchestration layer's environment.

        Recognized keys:
            target: Comma-separated project identifiers ("alpha, beta")
            enableCopy: Enable artifact distribution
            shallowWatch: Exclude shared modules from watching
            verbose: Enable verbose output
        """
        env = env or {}
        return cls.create(
            project_root,
            project_selector=parse_project_selector(env.get("target")),
            enable_distribution=_is_truthy(env.get("enableCopy", False)),
            shallow_watch=_is_truthy(env.get("shallowWatch", False)),
            verbose=_is_truthy(env.get("verbose", False)),
        )

"""Compiler configuration synthesized for a build pass.

The compiler itself is external; this module only assembles what it needs
to know: the entry map, where output paths are anchored, which paths to
ignore while watching, and where shared modules are resolved from.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .build_context import BuildParams
from .entry_map import EntryMap

WATCH_ALWAYS_IGNORED = ("node_modules",)


@dataclass(frozen=True)
class CompilerConfig:
    """Everything the compiler is handed for one pass.

    Attributes:
        entry: Output path -> entry source path (strings)
        output_path: Directory output paths are relative to
        output_filename: Output name template; "[name]" keeps the entry key
        watch_ignored: Paths excluded from watch mode
        module_paths: Directories searched when resolving shared modules
        mode: Compiler mode
    """

    entry: Dict[str, str]
    output_path: Path
    output_filename: str = "[name]"
    watch_ignored: List[str] = field(default_factory=lambda: list(WATCH_ALWAYS_IGNORED))
    module_paths: List[Path] = field(default_factory=list)
    mode: str = "production"


def create_compiler_config(params: BuildParams, entry_map: EntryMap) -> CompilerConfig:
    """Build the compiler configuration for a pass.

    With shallow_watch enabled the shared module directories are excluded
    from watching, so editing them does not trigger a rebuild.
    """
    watch_ignored = list(WATCH_ALWAYS_IGNORED)
    if params.shallow_watch:
        watch_ignored.extend(str(path) for path in params.common_modules)

    return CompilerConfig(
        entry=entry_map.to_compiler_entry(),
        output_path=params.project_root,
        watch_ignored=watch_ignored,
        module_paths=list(params.common_modules),
    )

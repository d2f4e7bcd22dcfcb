"""
Entry map construction.

Turns discovered (or explicitly selected) projects into the canonical
output-path -> source-path mapping that the compiler consumes. Every
project produces exactly one entry:

    <project_dir>/app.js  ->  <project_dir>/dist/<project_dir name>.js

Two modes are supported:
- Explicit: a list of project identifiers resolved against the source root.
  A missing project is reported and skipped; the rest are still mapped.
- Discovery: the whole source root is scanned and every entry file found
  produces a project.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from ..output import log_error, log_warning
from ..paths import NotFoundError, PathLike, last_path_segment
from .project_scanner import ProjectScanner, ScanRootNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_FILENAME = "app.js"
DEFAULT_EXTENSION = "js"
DEFAULT_OUTPUT_DIR_NAME = "dist"


class ProjectNotFoundError(NotFoundError):
    """Raised when an explicitly selected project directory does not exist.

    Attributes:
        identifier: The project identifier as given by the caller.
    """

    def __init__(self, identifier: str, path: PathLike):
        self.identifier = identifier
        super().__init__(path, f"The passed target {path} doesn't exist. Make sure your input.")


class OutputPathCollisionError(ValueError):
    """Raised when two projects would compile to the same output path."""

    def __init__(self, output_path: Path, first_source: Path, second_source: Path):
        self.output_path = output_path
        self.sources = (first_source, second_source)
        super().__init__(f"Output path {output_path} is produced by both {first_source} and {second_source}")


@dataclass(frozen=True)
class ProjectEntry:
    """A single project's compile entry.

    Attributes:
        source_path: The project's entry file
        output_path: Where the compiler writes the artifact
    """

    source_path: Path
    output_path: Path

    @property
    def project_dir(self) -> Path:
        return self.source_path.parent

    @property
    def artifact_name(self) -> str:
        return self.output_path.name

    @classmethod
    def derive(
        cls,
        source_path: PathLike,
        extension: str = DEFAULT_EXTENSION,
        output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME,
    ) -> "ProjectEntry":
        """Create the entry for an entry file, deriving its output path.

        The artifact is named after the entry file's immediate parent
        directory, so sibling trees that share a directory name collide;
        EntryMap rejects such collisions.
        """
        source = Path(source_path)
        project_dir = source.parent
        filename = f"{last_path_segment(project_dir)}.{extension}"
        return cls(source_path=source, output_path=project_dir / output_dir_name / filename)


class EntryMap(Mapping):
    """Immutable mapping from artifact output path to entry source path.

    Built fresh for every build pass. Construction fails fast when two
    entries share an output path.
    """

    def __init__(self, entries: Sequence[ProjectEntry] = ()):
        mapping: Dict[Path, Path] = {}
        for entry in entries:
            existing = mapping.get(entry.output_path)
            if existing is not None and existing != entry.source_path:
                raise OutputPathCollisionError(entry.output_path, existing, entry.source_path)
            mapping[entry.output_path] = entry.source_path
        self._mapping = mapping

    def __getitem__(self, output_path: Path) -> Path:
        return self._mapping[output_path]

    def __iter__(self) -> Iterator[Path]:
        return iter(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)

    def __repr__(self) -> str:
        return f"EntryMap({len(self._mapping)} entries)"

    def entries(self) -> List[ProjectEntry]:
        """Return the map as ProjectEntry values, in insertion order."""
        return [ProjectEntry(source_path=src, output_path=out) for out, src in self._mapping.items()]

    def to_compiler_entry(self) -> Dict[str, str]:
        """Return the mapping as plain strings for the compiler."""
        return {str(out): str(src) for out, src in self._mapping.items()}


@dataclass
class EntryMapResult:
    """Result of building an entry map.

    Attributes:
        entry_map: Entries for every project that resolved
        errors: Missing projects or scan failures (reported, not raised)
    """

    entry_map: EntryMap
    errors: List[OSError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_project_selector(target: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated target string into project identifiers.

    Returns None for an empty/absent string (meaning: discover everything).
    """
    if not target:
        return None
    identifiers = [part.strip() for part in target.split(",")]
    identifiers = [part for part in identifiers if part]
    return identifiers or None


class EntryMapBuilder:
    """
    Builds EntryMaps for a source root.

    Example:
        builder = EntryMapBuilder(Path("src/projects"))
        result = builder.build(["alpha", "beta"])
        for output_path, source_path in result.entry_map.items():
            ...
    """

    def __init__(
        self,
        source_root: PathLike,
        entry_filename: str = DEFAULT_ENTRY_FILENAME,
        extension: str = DEFAULT_EXTENSION,
        output_dir_name: str = DEFAULT_OUTPUT_DIR_NAME,
    ):
        self.source_root = Path(source_root).resolve()
        self.entry_filename = entry_filename
        self.extension = extension
        self.output_dir_name = output_dir_name

    def build(self, project_selector: Optional[Sequence[str]] = None) -> EntryMapResult:
        """Build an entry map in explicit mode when a selector is given, else discovery mode.

        Raises:
            OutputPathCollisionError: If two projects produce the same output path
        """
        if project_selector:
            return self.from_selector(project_selector)
        return self.discover()

    def from_selector(self, project_selector: Sequence[str]) -> EntryMapResult:
        """Resolve each identifier independently against the source root.

        A missing project directory is reported and recorded in the result;
        the remaining identifiers are still processed.
        """
        entries: List[ProjectEntry] = []
        errors: List[OSError] = []
        seen = set()

        for identifier in project_selector:
            identifier = identifier.strip()
            if not identifier or identifier in seen:
                continue
            seen.add(identifier)

            project_dir = self.source_root / identifier
            if not project_dir.is_dir():
                error = ProjectNotFoundError(identifier, project_dir)
                log_error(str(error))
                errors.append(error)
                continue

            source_path = project_dir / self.entry_filename
            if not source_path.is_file():
                log_warning(f"Project {identifier} has no {self.entry_filename} at {source_path}")

            entries.append(self._entry_for(source_path))

        logger.debug(f"Explicit mode resolved {len(entries)}/{len(seen)} project(s)")
        return EntryMapResult(entry_map=EntryMap(entries), errors=errors)

    def discover(self) -> EntryMapResult:
        """Scan the whole source root and map every entry file found.

        A missing or unreadable source tree is reported and yields an empty
        map; the scan is all-or-nothing.
        """
        try:
            files = ProjectScanner(self.source_root).scan()
        except ScanRootNotFoundError as e:
            log_error(str(e))
            return EntryMapResult(entry_map=EntryMap(), errors=[e])
        except OSError as e:
            log_error(f"Failed to scan {self.source_root}: {e}")
            return EntryMapResult(entry_map=EntryMap(), errors=[e])

        entries = [self._entry_for(path) for path in files if self._is_entry_file(path)]
        logger.debug(f"Discovery mode found {len(entries)} project(s) under {self.source_root}")
        return EntryMapResult(entry_map=EntryMap(entries))

    def _is_entry_file(self, path: Path) -> bool:
        if path.name != self.entry_filename:
            return False
        # Compiled output of a project named after the entry file is not a project
        relative = path.relative_to(self.source_root)
        return self.output_dir_name not in relative.parts[:-1]

    def _entry_for(self, source_path: Path) -> ProjectEntry:
        return ProjectEntry.derive(source_path, self.extension, self.output_dir_name)

"""Pytest configuration and fixtures for multibuild tests.

Console output from multibuild.output is redirected into a StringIO per
test so diagnostics can be asserted on and do not clutter the run.
"""

import io
import json
import os
from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from multibuild import output


@pytest.fixture(autouse=True)
def console_output(monkeypatch):
    """Capture timestamped console output for the duration of a test."""
    stream = io.StringIO()
    monkeypatch.setattr(output, "_output_stream", stream)
    monkeypatch.setattr(output, "_output_file", None)
    monkeypatch.setattr(output, "_verbose", True)
    yield stream


@pytest.fixture
def workspace(tmp_path) -> dict[str, Path]:
    """Create the conventional repository layout."""
    root = tmp_path / "repo"
    source_root = root / "src" / "projects"
    source_root.mkdir(parents=True)
    (root / "src" / "common").mkdir()
    return {
        "root": root,
        "source_root": source_root,
        "public_root": root / "public",
    }


@pytest.fixture
def make_project() -> Callable[..., Path]:
    """Factory creating a project directory under a source root.

    Args (of the returned callable):
        source_root: Source root to create the project in
        identifier: Project path relative to the source root ("alpha", "group/beta")
        manifest: Manifest content; a list is written as JSON, a str verbatim
        artifact: If given, also write the compiled artifact with these bytes

    Returns:
        The project directory
    """

    def _make(
        source_root: Path,
        identifier: str,
        manifest: Optional[Any] = None,
        artifact: Optional[bytes] = None,
    ) -> Path:
        project_dir = source_root / identifier
        project_dir.mkdir(parents=True, exist_ok=True)
        (project_dir / "app.js").write_text(f"console.log('{identifier}');\n")

        if manifest is not None:
            content = manifest if isinstance(manifest, str) else json.dumps(manifest)
            (project_dir / "output.json").write_text(content)

        if artifact is not None:
            dist = project_dir / "dist"
            dist.mkdir(exist_ok=True)
            (dist / f"{project_dir.name}.js").write_bytes(artifact)

        return project_dir

    return _make


@pytest.fixture
def deny_scandir(monkeypatch) -> Callable[[str], None]:
    """Make os.scandir raise PermissionError for directories with a given name.

    Works regardless of the user the tests run as, unlike chmod.
    """
    real_scandir = os.scandir

    def _deny(name: str) -> None:
        def _scandir(path):
            if Path(path).name == name:
                raise PermissionError(13, "Permission denied", str(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", _scandir)

    return _deny

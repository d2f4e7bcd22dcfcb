"""End-to-end build pass: discovery, compilation and distribution.

Scenario:
    src/projects/alpha  (app.js + output.json listing drop/)
    src/projects/beta   (app.js, no manifest)

After one pass with distribution enabled:
    - two project entries
    - public/alpha/bundle.js and public/beta/bundle.js
    - drop/alpha.js for alpha only
"""

from pathlib import Path

from rich.console import Console

from multibuild import ArtifactDistributor, BuildOrchestrator, BuildParams, ICompiler
from multibuild.build.compiler_config import CompilerConfig
from multibuild.distribution.summary_display import DistributionSummaryDisplay


class ConcatCompiler(ICompiler):
    """Writes each entry file's content, prefixed, to its output path."""

    def compile(self, config: CompilerConfig) -> bool:
        for output_path, source_path in config.entry.items():
            out = Path(output_path)
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text("/* bundled */\n" + Path(source_path).read_text())
        return True


def _files(directory: Path) -> list[str]:
    return sorted(p.relative_to(directory).as_posix() for p in directory.rglob("*") if p.is_file())


class TestEndToEnd:
    """Full pass through the public API."""

    def test_alpha_beta_scenario(self, workspace, make_project):
        root = workspace["root"]
        make_project(workspace["source_root"], "alpha", manifest=[{"dir": "drop/"}])
        make_project(workspace["source_root"], "beta")
        params = BuildParams.from_env(root, {"enableCopy": "true"})

        result = BuildOrchestrator(ConcatCompiler()).build(params)

        assert result.success, result.message
        assert len(result.entry_map) == 2
        assert _files(root / "public") == ["alpha/bundle.js", "beta/bundle.js"]
        assert _files(root / "drop") == ["alpha.js"]
        alpha_artifact = workspace["source_root"] / "alpha" / "dist" / "alpha.js"
        assert (root / "public" / "alpha" / "bundle.js").read_bytes() == alpha_artifact.read_bytes()
        assert (root / "drop" / "alpha.js").read_bytes() == alpha_artifact.read_bytes()

    def test_selected_target_only(self, workspace, make_project):
        root = workspace["root"]
        make_project(workspace["source_root"], "alpha", manifest=[{"dir": "drop/"}])
        make_project(workspace["source_root"], "beta")
        params = BuildParams.from_env(root, {"target": "beta", "enableCopy": True})

        result = BuildOrchestrator(ConcatCompiler()).build(params)

        assert result.success
        assert _files(root / "public") == ["beta/bundle.js"]
        assert not (root / "drop").exists()

    def test_repeated_passes_are_idempotent(self, workspace, make_project):
        root = workspace["root"]
        make_project(workspace["source_root"], "alpha", manifest=[{"dir": "drop/", "filename": "a.js"}])
        params = BuildParams.from_env(root, {"enableCopy": True})
        orchestrator = BuildOrchestrator(ConcatCompiler())

        orchestrator.build(params)
        first = {name: (root / name).read_bytes() for name in _files(root)}
        orchestrator.build(params)
        second = {name: (root / name).read_bytes() for name in _files(root)}

        assert first == second

    def test_bad_manifest_does_not_block_other_projects(self, workspace, make_project, console_output):
        root = workspace["root"]
        make_project(workspace["source_root"], "alpha", manifest='[{"dir": ')
        make_project(workspace["source_root"], "beta", manifest=[{"dir": "drop"}])
        params = BuildParams.from_env(root, {"enableCopy": True})
        console = Console(record=True, width=200, color_system=None)

        result = BuildOrchestrator(ConcatCompiler(), summary_display=DistributionSummaryDisplay(console)).build(params)

        assert not result.success
        assert _files(root / "public") == ["alpha/bundle.js", "beta/bundle.js"]
        assert _files(root / "drop") == ["beta.js"]
        assert "Invalid manifest" in console_output.getvalue()
        assert "manifest error (alpha)" in console.export_text()

    def test_distributor_value_without_orchestrator(self, workspace, make_project):
        """The distributor can be driven directly from an entry map."""
        from multibuild import EntryMapBuilder

        make_project(workspace["source_root"], "alpha", artifact=b"prebuilt")
        entry_map = EntryMapBuilder(workspace["source_root"]).build().entry_map
        distributor = ArtifactDistributor(True, workspace["public_root"], workspace["source_root"])

        result = distributor.distribute(entry_map)

        assert result.success
        assert (workspace["public_root"] / "alpha" / "bundle.js").read_bytes() == b"prebuilt"

"""Tests for the Rich distribution summary."""

from pathlib import Path

from rich.console import Console

from multibuild import output
from multibuild.distribution.callbacks import DistributionCallback, NullCallback
from multibuild.distribution.models import (
    CopyKind,
    CopyPhase,
    CopyTask,
    DistributionResult,
    ProjectDistribution,
    ProjectPhase,
)
from multibuild.distribution.summary_display import DistributionSummaryDisplay, _format_size, build_summary_table


def _console() -> Console:
    return Console(record=True, width=200, color_system=None)


def _result() -> DistributionResult:
    done = CopyTask(
        project="alpha",
        source_artifact_path=Path("dist/alpha.js"),
        destination_directory=Path("public/alpha"),
        destination_filename="bundle.js",
        kind=CopyKind.DEFAULT,
        phase=CopyPhase.DONE,
        bytes_copied=2048,
    )
    failed = CopyTask(
        project="alpha",
        source_artifact_path=Path("dist/alpha.js"),
        destination_directory=Path("drop"),
        destination_filename="alpha.js",
        phase=CopyPhase.FAILED,
        error_message="Permission denied",
    )
    alpha = ProjectDistribution(project="alpha", artifact_path=Path("dist/alpha.js"), copy_tasks=[done, failed])
    beta = ProjectDistribution(
        project="beta",
        artifact_path=Path("dist/beta.js"),
        phase=ProjectPhase.FAILED,
        error_message="Compiled artifact not found",
    )
    gamma = ProjectDistribution(project="gamma", artifact_path=Path("dist/gamma.js"), manifest_error="bad json")
    return DistributionResult(projects=[alpha, beta, gamma], total_elapsed=0.25)


class TestFormatSize:
    def test_units(self):
        assert _format_size(12) == "12 B"
        assert _format_size(2048) == "2.0 KB"
        assert _format_size(3 * 1024 * 1024) == "3.0 MB"


class TestBuildSummaryTable:
    """Tests for the summary table."""

    def test_one_row_per_task(self):
        table = build_summary_table(_result())
        # alpha: 2 tasks, beta: failed project row, gamma: no tasks row
        assert table.row_count == 4

    def test_rendered_content(self):
        console = _console()
        console.print(build_summary_table(_result()))
        text = console.export_text()
        assert "public" in text and "bundle.js" in text
        assert "2.0 KB" in text
        assert "Permission denied" in text
        assert "Compiled artifact not found" in text


class TestDistributionSummaryDisplay:
    """Tests for the display."""

    def test_implements_callback_protocol(self):
        assert isinstance(DistributionSummaryDisplay(console=_console()), DistributionCallback)
        assert isinstance(NullCallback(), DistributionCallback)

    def test_render(self):
        console = _console()
        DistributionSummaryDisplay(console=console).render(_result())
        text = console.export_text()
        assert "Artifact distribution" in text
        assert "manifest error (gamma): bad json" in text
        assert "1 copied, 1 failed" in text

    def test_render_disabled(self):
        console = _console()
        DistributionSummaryDisplay(console=console).render(DistributionResult(enabled=False))
        assert "Distribution disabled" in console.export_text()

    def test_render_nothing(self):
        console = _console()
        DistributionSummaryDisplay(console=console).render(DistributionResult())
        assert "Nothing to distribute" in console.export_text()

    def test_progress_quiet_unless_verbose(self, monkeypatch):
        monkeypatch.setattr(output, "_verbose", False)
        console = _console()
        display = DistributionSummaryDisplay(console=console, verbose=False)
        display.on_progress("alpha", ProjectPhase.DEFAULT_COPIED, "public/alpha/bundle.js")
        display.on_progress("beta", ProjectPhase.FAILED, "artifact missing")
        text = console.export_text()
        assert "alpha" not in text
        assert "beta: failed - artifact missing" in text

    def test_progress_verbose(self):
        console = _console()
        display = DistributionSummaryDisplay(console=console, verbose=True)
        display.on_progress("alpha", ProjectPhase.FAN_OUT_COPYING, "2 copy task(s)")
        assert "alpha: fan out copying - 2 copy task(s)" in console.export_text()

    def test_progress_follows_console_verbosity(self, monkeypatch):
        monkeypatch.setattr(output, "_verbose", True)
        console = _console()
        display = DistributionSummaryDisplay(console=console, verbose=False)
        display.on_progress("alpha", ProjectPhase.DEFAULT_COPIED, "public/alpha/bundle.js")
        assert "alpha: default copied" in console.export_text()

    def test_null_callback_accepts_updates(self):
        NullCallback().on_progress("alpha", ProjectPhase.DONE, "")

"""Rich-based distribution summary.

Renders one row per copy task once a pass has been distributed:

    Project   Kind      Destination                      Status
    alpha     default   public/alpha/bundle.js           ✓ 12.3 KB
    alpha     manifest  drop/alpha.js                    ✓ 12.3 KB
    beta      default   public/beta/bundle.js            ✗ Permission denied

Manifest errors are listed below the table. In verbose mode the display
also acts as a DistributionCallback and prints each project's phase
changes as they happen.
"""

import threading

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..output import is_verbose
from .models import CopyPhase, DistributionResult, ProjectPhase

_PHASE_STYLES = {
    ProjectPhase.EMITTED: "dim",
    ProjectPhase.DEFAULT_COPIED: "cyan",
    ProjectPhase.MANIFEST_CHECKED: "cyan",
    ProjectPhase.FAN_OUT_COPYING: "blue",
    ProjectPhase.REPORTED: "yellow",
    ProjectPhase.DONE: "green",
    ProjectPhase.FAILED: "bold red",
}


def _format_size(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.1f} KB"
    return f"{num_bytes / (1024 * 1024):.1f} MB"


def build_summary_table(result: DistributionResult) -> Table:
    """Build a table with one row per copy task."""
    table = Table(title="Artifact distribution", show_lines=False)
    table.add_column("Project", style="bold")
    table.add_column("Kind")
    table.add_column("Destination", overflow="fold")
    table.add_column("Status")

    for project in result.projects:
        if not project.copy_tasks:
            table.add_row(project.project, "-", "-", Text(f"✗ {project.error_message}", style="red"))
            continue
        for task in project.copy_tasks:
            if task.phase == CopyPhase.DONE:
                status = Text(f"✓ {_format_size(task.bytes_copied)}", style="green")
            elif task.phase == CopyPhase.FAILED:
                status = Text(f"✗ {task.error_message}", style="red")
            else:
                status = Text(task.phase.value, style="yellow")
            table.add_row(project.project, task.kind.value, str(task.destination_path), status)

    return table


class DistributionSummaryDisplay:
    """Prints distribution progress and the end-of-pass summary.

    Args:
        console: Rich Console instance for rendering. If None, creates a new one.
        verbose: Print per-project phase changes as they happen. Verbose
            console output (multibuild.output) enables this as well.
    """

    def __init__(self, console: Console | None = None, verbose: bool = False) -> None:
        self._console = console if console is not None else Console()
        self._verbose = verbose
        self._lock = threading.Lock()

    def on_progress(self, project: str, phase: ProjectPhase, detail: str) -> None:
        """Print a phase change. Thread-safe."""
        if not (self._verbose or is_verbose()) and phase != ProjectPhase.FAILED:
            return
        line = Text.assemble(
            ("  ", ""),
            (f"{project}", "bold"),
            (": ", ""),
            (phase.value.replace("_", " "), _PHASE_STYLES.get(phase, "")),
            (f" - {detail}" if detail else "", "dim"),
        )
        with self._lock:
            self._console.print(line)

    def render(self, result: DistributionResult) -> None:
        """Print the summary table and any manifest errors."""
        if not result.enabled:
            self._console.print("[dim]Distribution disabled[/dim]")
            return
        if not result.projects:
            self._console.print("[dim]Nothing to distribute[/dim]")
            return

        self._console.print(build_summary_table(result))
        for project, error in result.manifest_errors.items():
            self._console.print(Text(f"manifest error ({project}): {error}", style="yellow"))

        footer_style = "green" if result.success else "red"
        self._console.print(
            Text(
                f"{result.copied_count} copied, {len(result.failed_tasks)} failed in {result.total_elapsed:.2f}s",
                style=footer_style,
            )
        )

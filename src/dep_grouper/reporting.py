"""
Reporting and output formatting for group assignment results.

Provides console output using the Rich library and a JSON-ready report.
"""

from typing import Any, Dict, List, Optional

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .dependency import Dependency
from .dependency_group import DependencyGroup
from .group_engine import DependencyGroupEngine


def _dependency_row(dependency: Dependency) -> List[str]:
    return [
        escape(dependency.name),
        escape(dependency.version or "-"),
        dependency.dependency_type,
    ]


def build_json_report(engine: DependencyGroupEngine, job_file: str = "") -> Dict[str, Any]:
    """Build a serialisable report of a finished group assignment."""
    groups = [group.to_dict() for group in engine.dependency_groups]
    ungrouped = engine.ungrouped_dependencies()

    return {
        "job_file": job_file,
        "summary": {
            "groups": len(groups),
            "empty_groups": len([g for g in engine.dependency_groups if not g.dependencies]),
            "ungrouped_dependencies": len(ungrouped),
        },
        "groups": groups,
        "ungrouped_dependencies": [
            {"name": dep.name, "version": dep.version} for dep in ungrouped
        ],
    }


class GroupReporter:
    """Formats and displays group assignment results."""

    def __init__(self, console: Optional[Console] = None, show_empty_groups: bool = True):
        self.console = console or Console()
        self.show_empty_groups = show_empty_groups

    def print_assignment_results(
        self, engine: DependencyGroupEngine, job_file: str
    ) -> None:
        """
        Print group assignments in a user-friendly format.

        Args:
            engine: Engine whose dependencies have been assigned
            job_file: Path to the job file
        """
        self.console.print()
        self.console.print(
            Panel(
                f"📦 Dependency Groups: {escape(job_file)}",
                title="[bold blue]Dep-Grouper[/bold blue]",
                border_style="blue",
            )
        )

        for group in engine.dependency_groups:
            if group.dependencies or self.show_empty_groups:
                self._print_group(group)

        self._print_ungrouped(engine.ungrouped_dependencies())
        self._print_summary(engine)

    def _print_group(self, group: DependencyGroup) -> None:
        header = f"[bold]👥 {escape(group.name)}[/bold]"
        if not group.targets_highest_versions_possible():
            ignored = ", ".join(group.ignored_update_types())
            header += f" [yellow](restricted: no {ignored} updates)[/yellow]"
        self.console.print(header)

        if not group.dependencies:
            self.console.print("  [dim]No dependencies matched[/dim]")
            self.console.print()
            return

        table = Table(box=box.ROUNDED)
        table.add_column("Dependency", style="bold")
        table.add_column("Version")
        table.add_column("Type")
        for dependency in group.dependencies:
            table.add_row(*_dependency_row(dependency))

        self.console.print(table)
        self.console.print()

    def _print_ungrouped(self, dependencies: List[Dependency]) -> None:
        if not dependencies:
            self.console.print("✅ Every dependency belongs to a group.", style="green")
            return

        table = Table(
            title="📄 Updated individually", box=box.ROUNDED, title_justify="left"
        )
        table.add_column("Dependency", style="bold")
        table.add_column("Version")
        table.add_column("Type")
        for dependency in dependencies:
            table.add_row(*_dependency_row(dependency))

        self.console.print(table)

    def _print_summary(self, engine: DependencyGroupEngine) -> None:
        empty = [g.name for g in engine.dependency_groups if not g.dependencies]

        table = Table(title="📊 Summary", box=box.ROUNDED, title_style="bold cyan")
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="center")
        table.add_row("Groups", str(len(engine.dependency_groups)))
        table.add_row(
            "Empty groups",
            f"[yellow]{len(empty)}[/yellow]" if empty else "0",
        )
        table.add_row(
            "Individual updates", str(len(engine.ungrouped_dependencies()))
        )

        self.console.print()
        self.console.print(table)

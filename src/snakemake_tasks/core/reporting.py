"""Output formatters for task listings."""

from rich.console import Console
from rich.rule import Rule
from rich.table import Table

from .models import TaskGroup, TaskListing


class TextReporter:
    """Human-readable output using rich library."""

    def __init__(self, console: Console | None = None):
        """Initialize text reporter with optional console."""
        self.console = console or Console()

    def report(self, listing: TaskListing) -> None:
        """
        Generate and print text report.

        Args:
            listing: Task listing to report
        """
        # Header
        self.console.print("Snakemake Task Detector v0.1.0", style="bold")
        self.console.print(f"Workspace: {listing.workspace_root}")
        self.console.print(f"Providers: {', '.join(listing.providers_run) or 'none'}\n")

        if not listing.tasks:
            self.console.print("No tasks found", style="yellow bold")
        else:
            self.console.print(Rule())
            self.console.print(self._build_table(listing))
            self.console.print(Rule())

        summary = listing.summary
        parts = []
        for group, label in (
            (TaskGroup.BUILD, "build"),
            (TaskGroup.TEST, "test"),
            (TaskGroup.NONE, "other"),
        ):
            if summary.get(group.value, 0) > 0:
                parts.append(f"{summary[group.value]} {label}")

        if parts:
            summary_text = f"Summary: {', '.join(parts)} | {summary['total']} tasks in {listing.duration_seconds}s"
        else:
            summary_text = f"Summary: 0 tasks in {listing.duration_seconds}s"

        self.console.print(summary_text)

    def _build_table(self, listing: TaskListing) -> Table:
        group_styles = {
            TaskGroup.BUILD: "green",
            TaskGroup.TEST: "cyan",
            TaskGroup.NONE: "dim",
        }

        table = Table(show_edge=False)
        table.add_column("Task")
        table.add_column("Group")
        table.add_column("Command")

        # Tool order is kept; names are shown verbatim
        for task in listing.tasks:
            style = group_styles[task.classification]
            table.add_row(
                task.name,
                task.classification.value,
                task.command,
                style=style,
            )

        return table


class JsonReporter:
    """JSON output for programmatic consumption."""

    def report(self, listing: TaskListing) -> str:
        """
        Generate JSON report.

        Args:
            listing: Task listing to report

        Returns:
            JSON string
        """
        return listing.model_dump_json(indent=2)

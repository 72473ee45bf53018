# SPDX-License-Identifier: MIT

from rich import box
from rich.console import Console
from rich.table import Table

from kasten.model.markdown import ExportFailure, ImportSummary, ParseIssue, Severity
from kasten.view.util import short_id
from kasten.view.views.header import header


def import_summary_report(summary: ImportSummary) -> None:
    header("import")

    console = Console()
    summary_table = Table(box=box.SIMPLE)
    summary_table.add_column("imported")
    summary_table.add_column("skipped")
    summary_table.add_column("failed")
    summary_table.add_row(
        str(summary["success"]), str(summary["skipped"]), str(summary["failed"])
    )
    console.print(summary_table)

    if summary["failures"]:
        failures_table = Table(box=box.SIMPLE)
        failures_table.add_column("file")
        failures_table.add_column("problem")
        for failure in summary["failures"]:
            failures_table.add_row(failure["name"], "\n".join(failure["messages"]))
        console.print(failures_table)


def validation_report(name: str, issues: list[ParseIssue]) -> None:
    header(f"validate {name}")

    console = Console()
    if not issues:
        console.print(f"[green]{name}: no problems found[/green]")
        return

    issues_table = Table(box=box.SIMPLE)
    issues_table.add_column("line")
    issues_table.add_column("severity")
    issues_table.add_column("message")
    for issue in issues:
        color = "red" if issue["severity"] == Severity.ERROR else "yellow"
        issues_table.add_row(
            str(issue["line"]),
            f"[{color}]{issue['severity']}[/{color}]",
            issue["message"],
        )
    console.print(issues_table)


def export_failures_report(failures: list[ExportFailure]) -> None:
    if not failures:
        return

    console = Console()
    failures_table = Table(box=box.SIMPLE, title="not exported")
    failures_table.add_column("id")
    failures_table.add_column("title")
    failures_table.add_column("problem")
    for failure in failures:
        failures_table.add_row(
            short_id(failure["note_id"]), failure["title"] or "", failure["message"]
        )
    console.print(failures_table)

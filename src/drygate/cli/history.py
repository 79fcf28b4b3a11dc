"""drygate history command - show recorded builds and their warning trend."""

import json
from pathlib import Path

import click
from rich.table import Table

from drygate.actions import DryProjectAction, DryResultAction
from drygate.core.errors import DryError
from drygate.core.progress import get_console
from drygate.history.store import BuildStore


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option("-n", "--limit", type=int, default=20, show_default=True, help="Builds to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def history_command(path: Path, limit: int, as_json: bool) -> None:
    """Show the duplicate code trend of the recorded builds.

    PATH is the workspace root (default: current directory).
    """
    try:
        latest = BuildStore(path.resolve()).load_history()
    except DryError as e:
        raise click.ClickException(str(e)) from e

    if latest is None:
        if as_json:
            click.echo(json.dumps({"builds": []}))
        else:
            click.echo("No builds recorded yet. Run 'drygate publish' first.")
        return

    project = DryProjectAction(latest)
    trend = project.trend(limit)
    statuses = {build.number: build.status.value for build in [latest, *latest.history()]}

    if as_json:
        builds = [
            {
                "build": point.build,
                "status": statuses.get(point.build),
                "high": point.high,
                "normal": point.normal,
                "low": point.low,
                "total": point.total,
                "new": point.new,
                "fixed": point.fixed,
            }
            for point in trend
        ]
        click.echo(json.dumps({"builds": builds}, indent=2))
        return

    table = Table(title=f"{project.display_name} trend", show_header=True, header_style="bold")
    table.add_column("Build", justify="right")
    table.add_column("Status")
    table.add_column("High", justify="right", style="red")
    table.add_column("Normal", justify="right", style="yellow")
    table.add_column("Low", justify="right")
    table.add_column("Total", justify="right", style="bold")
    table.add_column("New", justify="right")
    table.add_column("Fixed", justify="right", style="green")
    for point in trend:
        table.add_row(
            f"#{point.build}",
            statuses.get(point.build, ""),
            str(point.high),
            str(point.normal),
            str(point.low),
            str(point.total),
            str(point.new),
            str(point.fixed),
        )
    get_console().print(table)

    last = latest.get_action(DryResultAction)
    if last is not None and last.health_report is not None:
        click.echo(f"{last.health_report.description} Health: {last.health_report.score}%")

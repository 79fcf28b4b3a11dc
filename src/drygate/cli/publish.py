"""drygate publish command - publish duplicate code results of a build."""

import json
import sys
from pathlib import Path

import click

from drygate.analysis.health import BuildStatus
from drygate.analysis.models import AnnotationCounts
from drygate.build import Build
from drygate.config.loader import load_config
from drygate.core.errors import DryError
from drygate.core.logging import configure_logging
from drygate.core.progress import get_console, make_counts_table, status
from drygate.history.store import BuildStore
from drygate.publisher import DryPublisher
from drygate.result import DryResult
from drygate.workspace import LocalWorkspace, PluginLogger

EXIT_CODES = {
    BuildStatus.SUCCESS: 0,
    BuildStatus.UNSTABLE: 1,
    BuildStatus.FAILURE: 2,
    BuildStatus.ABORTED: 2,
}


def _row(label: str, counts: AnnotationCounts) -> tuple[str, int, int, int]:
    return (label, counts.high, counts.normal, counts.low)


def _print_result(result: DryResult, build: Build) -> None:
    console = get_console()
    rows = [_row("Total", result.counts)]
    if result.reference_build is not None:
        rows += [_row("New", result.new_counts), _row("Fixed", result.fixed_counts)]
    console.print(make_counts_table(f"Duplicate code in {build.display_name}", rows))

    if result.reference_build is not None:
        status(f"Reference build: #{result.reference_build.number}", style="none")
    for message in result.project.error_messages:
        status(message, style="warning")


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Config file to use instead of .drygate/config.yaml",
)
@click.option("--pattern", help="Ant file-set pattern of the report files")
@click.option("--high", "high_threshold", type=int, help="Min duplicated lines for high priority")
@click.option(
    "--normal", "normal_threshold", type=int, help="Min duplicated lines for normal priority"
)
@click.option("--build-number", type=int, help="Build number (default: next in history)")
@click.option(
    "--status",
    "initial_status",
    type=click.Choice([s.value for s in BuildStatus]),
    default=BuildStatus.SUCCESS.value,
    show_default=True,
    help="Status of the build before publishing",
)
@click.option("--maven", is_flag=True, help="Treat the build as a Maven build")
@click.option("--no-history", is_flag=True, help="Do not record the build in the history")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def publish_command(
    ctx: click.Context,
    path: Path,
    config_file: Path | None,
    pattern: str | None,
    high_threshold: int | None,
    normal_threshold: int | None,
    build_number: int | None,
    initial_status: str,
    maven: bool,
    no_history: bool,
    as_json: bool,
) -> None:
    """Publish the duplicate code reports found in a workspace.

    PATH is the workspace root (default: current directory). Exits with 1
    when the build is unstable and 2 when it failed.
    """
    workspace = LocalWorkspace(path)
    try:
        config = load_config(workspace.root, config_file=config_file)
        if not (ctx.obj or {}).get("verbose"):
            configure_logging(config=config.logging)

        overrides = {
            "pattern": pattern,
            "high_threshold": high_threshold,
            "normal_threshold": normal_threshold,
        }
        publisher = DryPublisher(
            config.publisher.model_copy(
                update={k: v for k, v in overrides.items() if v is not None}
            )
        )

        store = BuildStore(workspace.root)
        build = Build(
            number=build_number if build_number is not None else store.next_build_number(),
            job=workspace.root.name,
            status=BuildStatus(initial_status),
            previous=store.load_history(),
            is_maven=maven,
        )

        result = publisher.publish(build, workspace, PluginLogger(sys.stderr))
        if not no_history:
            store.save(build, publisher.config)
    except (DryError, OSError) as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        payload = {
            "build": build.number,
            "status": build.status.value,
            "result": result.to_dict() if result is not None else None,
        }
        click.echo(json.dumps(payload, indent=2))
    elif result is not None:
        _print_result(result, build)

    exit_code = EXIT_CODES[build.status]
    if not as_json:
        style = "success" if exit_code == 0 else "error" if exit_code == 2 else "warning"
        status(f"Build {build.display_name}: {build.status.value}", style=style)
    ctx.exit(exit_code)

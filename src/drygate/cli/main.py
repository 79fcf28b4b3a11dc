"""drygate CLI - drygate command."""

import click

from drygate.cli.history import history_command
from drygate.cli.migrate import migrate_command
from drygate.cli.publish import publish_command
from drygate.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="drygate")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """drygate - Publish duplicate code analysis results of a build."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(publish_command, name="publish")
cli.add_command(migrate_command, name="migrate")
cli.add_command(history_command, name="history")


if __name__ == "__main__":
    cli()

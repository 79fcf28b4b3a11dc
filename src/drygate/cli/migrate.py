"""drygate migrate command - convert legacy publisher records."""

from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from drygate.config.loader import dump_publisher_config
from drygate.config.migration import migrate_config
from drygate.core.errors import DryError
from drygate.core.progress import status


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the migrated record here instead of stdout",
)
def migrate_command(source: Path, output: Path | None) -> None:
    """Upgrade a publisher record to the current config layout.

    SOURCE is a YAML or JSON file holding either a flat legacy record or a
    mapping with a ``publisher`` section. The result is a ``publisher:``
    YAML document that can be used as .drygate/config.yaml.
    """
    try:
        data = yaml.safe_load(source.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise click.ClickException(f"Cannot read {source}: {e}") from e
    if not isinstance(data, dict):
        raise click.ClickException(f"Cannot read {source}: top-level value must be a mapping")

    record = data.get("publisher", data)
    if not isinstance(record, dict):
        raise click.ClickException(f"Cannot read {source}: publisher must be a mapping")
    try:
        config = migrate_config(record)
    except DryError as e:
        raise click.ClickException(str(e)) from e
    except ValidationError as e:
        raise click.ClickException(f"Invalid publisher record in {source}:\n{e}") from e

    text = dump_publisher_config(config)
    if output is None:
        click.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    status(f"Migrated record written to {output}", style="success")

"""CLI entry point for terraconf."""

import click
from pathlib import Path
from typing import Any, Optional
import yaml
from pydantic import ValidationError

from terraconf import __version__
from terraconf.config.loader import load_config
from terraconf.exceptions import (
    FlatmapError,
    FormatError,
    MalformedListError,
    StateReadError,
    UnsupportedValueError,
)
from terraconf.models.config import Config
from terraconf.models.overlay import AttributeOverlay
from terraconf.render.serializer import render_resource_block
from terraconf.state.reader import read_state
from terraconf.utils.logging import configure_logging, get_logger


logger = get_logger(__name__)


def parse_default(assignment: str) -> tuple[str, Any]:
    """
    Parse a NAME=VALUE default assignment.

    The value is read as YAML, so "false" is a bool, "3" an int, "[a, b]" a
    list and "{k: v}" a map. A missing value means the empty string.

    Args:
        assignment: Text of the form NAME=VALUE

    Returns:
        Tuple of (name, value)

    Raises:
        ValueError: If there is no "=" or the name is empty
    """
    name, sep, raw_value = assignment.partition("=")
    name = name.strip()
    if not sep or not name:
        raise ValueError(f"Invalid default '{assignment}'. Expected: NAME=VALUE")

    try:
        value = yaml.safe_load(raw_value)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid value for default '{name}': {e}") from e

    return name, "" if value is None else value


def _defaults_callback(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> dict[str, Any]:
    defaults = {}
    for assignment in values:
        try:
            name, value = parse_default(assignment)
        except ValueError as e:
            raise click.BadParameter(str(e), ctx=ctx, param=param)
        defaults[name] = value
    return defaults


def load_cli_config(config_path: Optional[Path]) -> Config:
    """
    Load configuration for a CLI command.

    Raises:
        click.ClickException: If the config file is invalid
    """
    try:
        config = load_config(config_path)
        logger.info("config_loaded", path=str(config_path) if config_path else None)
        return config
    except (ValueError, ValidationError, yaml.YAMLError) as e:
        logger.error("config_validation_error", error=str(e))
        raise click.ClickException(f"Configuration validation failed:\n{e}")


def load_state_or_abort(state_file: Path):
    try:
        return read_state(state_file)
    except StateReadError as e:
        logger.error("state_read_error", path=e.path, error=e.message)
        raise click.ClickException(str(e))


@click.group()
@click.version_option(version=__version__, prog_name="terraconf")
def cli():
    """terraconf: Generate Terraform resource configuration from state files."""
    configure_logging()


@cli.command()
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file (default: ~/.config/terraconf/config.yaml)",
)
@click.option("--exclude", "-x", multiple=True, help="Attribute name to leave out (repeatable)")
@click.option(
    "--default",
    "-d",
    "defaults",
    multiple=True,
    callback=_defaults_callback,
    help="NAME=VALUE used when state has no value for NAME (repeatable)",
)
@click.option("--type", "-t", "types", multiple=True, help="Only render resources of this type (repeatable)")
@click.option("--lenient", is_flag=True, help="Render unsupported values as 'unknown' instead of failing")
@click.option("--skip-empty", is_flag=True, help="Omit empty lists and maps found in state")
@click.pass_context
def render(
    ctx: click.Context,
    state_file: Path,
    config_path: Optional[Path],
    exclude: tuple[str, ...],
    defaults: dict[str, Any],
    types: tuple[str, ...],
    lenient: bool,
    skip_empty: bool,
):
    """
    Render every resource in STATE_FILE as a resource block.

    Blocks that fail formatting are printed unformatted with a warning, and
    the command exits with status 1 after all resources are printed.

    Examples:
        terraconf render terraform.tfstate
        terraconf render terraform.tfstate -x arn -d monitoring=false
        terraconf render terraform.tfstate --type aws_instance
    """
    logger.info("render_command_started", state_file=str(state_file))

    config = load_cli_config(config_path)
    options = config.render
    if lenient:
        options = options.model_copy(update={"strict": False})
    if skip_empty:
        options = options.model_copy(update={"skip_empty_collections": True})

    cli_overlay = AttributeOverlay(defaults=defaults, excludes=set(exclude))
    state = load_state_or_abort(state_file)

    rendered = 0
    failures = 0
    for address, resource in state.iter_resources():
        if types and resource.type not in types:
            continue

        overlay = config.overlay_for(resource.type).merge(cli_overlay)
        try:
            text = render_resource_block(resource, overlay, options)
        except FormatError as e:
            logger.error("format_failed", address=address, reason=e.reason, line=e.line)
            click.echo(f"Warning: {address}: {e}", err=True)
            text = e.raw_text
            failures += 1
        except (UnsupportedValueError, MalformedListError, FlatmapError) as e:
            logger.error("render_failed", address=address, error=str(e))
            click.echo(f"Error: {address}: {e}", err=True)
            failures += 1
            continue

        click.echo(text)
        rendered += 1

    logger.info("render_command_completed", rendered=rendered, failures=failures)
    if failures:
        ctx.exit(1)


@cli.command()
@click.argument("state_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def resources(state_file: Path):
    """
    List the resources recorded in STATE_FILE.

    Prints one line per resource: address, type and primary ID.
    """
    state = load_state_or_abort(state_file)

    if state.is_empty():
        click.echo("No resources found.")
        return

    for address, resource in state.iter_resources():
        click.echo(f"{address}\t{resource.type}\t{resource.primary_id}")


def main():
    """Main entry point for setuptools console script."""
    cli()


if __name__ == "__main__":
    main()

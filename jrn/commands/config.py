import click

from jrn.cli_utils import JournalContext, format_option, standard_command
from jrn.config import ConfigResolver
from jrn.format_utils import format_output
from jrn.render import render_config


@click.group("config")
def config_cmd():
    """Configuration inspection commands."""
    pass


@config_cmd.command("show")
@format_option
@click.pass_obj
@standard_command()
def show_config(ctx: JournalContext, output_format):
    """Show every setting with its effective value and where it came from."""
    config = ctx.config

    if output_format == "table":
        render_config(config)
        return

    rows = (
        {"key": key, "value": value, "source": scope.label if scope is not None else None}
        for key, value, scope in config.items()
    )
    for line in format_output(rows, output_format):
        click.echo(line)


@config_cmd.command("path")
@standard_command()
def config_path():
    """List config file locations, farthest scope first."""
    for scope, path in ConfigResolver().candidates():
        marker = "found" if path.is_file() else "missing"
        click.echo(f"{scope.label:<8} {marker:<8} {path}")

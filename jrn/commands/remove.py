import click

from jrn.cli_utils import JournalContext, standard_command
from jrn.exit_codes import NoEntriesFoundError


@click.command("rm")
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_obj
@standard_command()
def remove_cmd(ctx: JournalContext, yes):
    """Delete the newest entry."""
    index = ctx.index
    latest = index.latest
    if latest is None:
        raise NoEntriesFoundError()

    name = latest.relative_path(index.root)
    if not yes and not click.confirm(f"Delete {name}?", default=False):
        click.echo("Aborted", err=True)
        return

    index.remove_latest()
    click.echo(f"Removed {name}")

"""
Create a new journal entry.
"""

import click

from jrn.cli_utils import JournalContext, standard_command
from jrn.tokens import split_tokens


def collect_tags(values) -> list:
    """Split every TAGS argument on tag delimiters, keeping order."""
    tags = []
    for value in values:
        for tag in split_tokens(value):
            if tag and tag not in tags:
                tags.append(tag)
    return tags


@click.command("new")
@click.argument("tags", nargs=-1)
@click.option("-q", "--quick", is_flag=True, help="Create the file without opening the editor")
@click.option("-m", "--message", default=None, help="Initial text of the entry")
@click.pass_obj
@standard_command()
def new_cmd(ctx: JournalContext, tags, quick, message):
    """Create an entry stamped with the current time.

    TAGS may be separate arguments or a single delimited string:

    \b
        jrn new work meeting
        jrn new "work,meeting"
        jrn new -q -m "Shipped the release" work
    """
    index = ctx.index
    entry = index.create_entry(collect_tags(tags), content=message, skip_edit=quick)
    if entry is None:
        click.echo("No entry created", err=True)
        return
    click.echo(str(entry.relative_path(index.root)))

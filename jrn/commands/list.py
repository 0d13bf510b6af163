import click

from jrn.cli_utils import JournalContext, format_option, standard_command
from jrn.format_utils import format_output
from jrn.render import render_entries


@click.command("list")
@click.argument("pattern", required=False, default=None)
@click.option("-n", "--number", "limit", type=click.IntRange(min=0), default=None,
              help="Show only the N most recent matches")
@click.option("--fixed", is_flag=True, help="Match PATTERN as plain text, not a regex")
@click.option("-c", "--content", "show_content", is_flag=True, help="Print the text of each entry")
@format_option
@click.pass_obj
@standard_command()
def list_cmd(ctx: JournalContext, pattern, limit, fixed, show_content, output_format):
    """List entries whose file name matches PATTERN, oldest first.

    \b
    Examples:
        jrn list                 # every entry
        jrn list -n 5            # five newest entries
        jrn list '^2024-03'      # entries from March 2024
        jrn list --fixed work    # names containing "work"
    """
    index = ctx.index
    entries = index.list_entries(pattern, limit=limit, fixed=fixed)

    if output_format == "table":
        render_entries(entries, index.root, show_content=show_content)
        return

    for line in format_output((entry.to_dict(index.root) for entry in entries), output_format):
        click.echo(line)

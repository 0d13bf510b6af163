"""
Tag commands for jrn.

`jrn tags` shows how often each tag is used; `jrn tag` adds a tag to an
existing entry by renaming its file.
"""

import click

from jrn.cli_utils import JournalContext, format_option, standard_command
from jrn.format_utils import format_output
from jrn.render import render_tags


@click.command("tags")
@click.argument("pattern", required=False, default=None)
@click.option("--fixed", is_flag=True, help="Match PATTERN as plain text, not a regex")
@format_option
@click.pass_obj
@standard_command()
def tags_cmd(ctx: JournalContext, pattern, fixed, output_format):
    """List tags by how many entries use them.

    \b
    Examples:
        jrn tags
        jrn tags '^proj'
        jrn tags -f jsonl
    """
    counts = ctx.index.list_tags(pattern, fixed=fixed)

    if output_format == "table":
        render_tags(counts)
        return

    for line in format_output(({"tag": item.tag, "count": item.count} for item in counts), output_format):
        click.echo(line)


@click.command("tag")
@click.argument("tag")
@click.option("-e", "--entry", "descriptor", default=None,
              help="Pattern selecting the entry (newest match); newest entry if omitted")
@click.pass_obj
@standard_command()
def tag_cmd(ctx: JournalContext, tag, descriptor):
    """Add TAG to an entry.

    \b
    Examples:
        jrn tag followup
        jrn tag followup --entry '^2024-03-05'
    """
    index = ctx.index
    entry = index.push_tag(tag, descriptor)
    click.echo(str(entry.relative_path(index.root)))

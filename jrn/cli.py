#!/usr/bin/env python3

import logging
import sys

import click

from jrn import __version__
from jrn.cli_utils import JournalContext
from jrn.commands.config import config_cmd
from jrn.commands.list import list_cmd
from jrn.commands.new import new_cmd
from jrn.commands.remove import remove_cmd
from jrn.commands.tag import tag_cmd, tags_cmd


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr, at DEBUG level when verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True
    )


@click.group()
@click.version_option(version=__version__, prog_name="jrn")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging")
@click.option("--set", "overrides", multiple=True, metavar="KEY=VALUE",
              help="Override a config key for this run (repeatable)")
@click.pass_context
def cli(ctx, verbose, overrides):
    """jrn - plain-file journal with tags in the file names.

    Entries live in the current directory as files named
    YYYY-MM-DD_HHMM-tag1_tag2. Settings come from .jrnconfig files in the
    user config directory, the home directory and the current directory.

    \b
    Quick start:
        jrn new work           # write a new entry tagged "work"
        jrn list -n 5          # five newest entries
        jrn tags               # tag usage counts
    """
    configure_logging(verbose)
    ctx.obj = JournalContext(overrides)


cli.add_command(new_cmd)
cli.add_command(list_cmd)
cli.add_command(tags_cmd)
cli.add_command(tag_cmd)
cli.add_command(remove_cmd)
cli.add_command(config_cmd)


def main():
    cli()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3

import click

from vendorbranch.cli_utils import CommandGroup
from vendorbranch.commands.install import install_handler
from vendorbranch.commands.history import history_handler


@click.group(cls=CommandGroup)
@click.version_option(package_name='vendorbranch')
def cli():
    """vendorbranch - Vendor cookbooks into a git repository.

    Each cookbook is imported onto its own vendor branch, committed and
    tagged there, then merged into your default branch.
    """
    pass


cli.add_command(install_handler, name='install')
cli.add_command(history_handler, name='history')


def main():
    cli()

if __name__ == "__main__":
    main()

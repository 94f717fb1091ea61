"""
Handles the 'install' command for importing cookbooks from the cookbook site.

The cookbook is committed to its own vendor-<cookbook> branch, tagged,
and merged into the default branch. Merge conflicts stop the command
with exit code 3 and are left for you to resolve.
"""

import click

from ..config import load_config, set_log_level, split_path_list
from ..cli_utils import handle_errors, output_jsonl
from ..exit_codes import CommandError, UsageError
from ..render import render_import_summary
from ..services.import_service import ImportOrchestrator, ImportOptions


def parse_name_args(names):
    """Exactly one cookbook name is accepted."""
    if not names:
        raise UsageError("please specify a cookbook to download and install")
    if len(names) > 1:
        raise UsageError("Installing multiple cookbooks at once is not supported")
    return names[0]


@click.command('install')
@click.argument('cookbook', nargs=-1)
@click.option('--version', 'version', default=None,
              help='Cookbook version to install (default: latest)')
@click.option('-o', '--cookbook-path', 'cookbook_path', default=None, metavar='PATH:PATH',
              help='A colon-separated path to look for cookbooks in')
@click.option('-d', '--dependencies', is_flag=True,
              help='Grab dependencies automatically')
@click.option('-B', '--branch', 'branch', default=None,
              help='Default branch to work with (default: master)')
@click.option('--json', 'json_output', is_flag=True, help='Output results as JSONL')
@click.option('-v', '--verbose', is_flag=True, help='Log every git command')
@handle_errors
def install_handler(cookbook, version, cookbook_path, dependencies, branch, json_output, verbose):
    """Install a cookbook from the cookbook site into a git repository.

    COOKBOOK is the cookbook name, optionally followed by a version.

    The first directory of the cookbook path must be (or be inside) a git
    repository with a clean working tree and an existing default branch.
    Do not run two installs against the same repository at once.

    Examples:

    \b
        vendorbranch install apache2
        vendorbranch install apache2 1.0.2
        vendorbranch install nginx -d -o ~/chef-repo/cookbooks -B main
    """
    # "install apache2 1.0.2" is the same as "install apache2 --version 1.0.2"
    names = list(cookbook)
    if len(names) == 2 and version is None:
        version = names.pop()
    name = parse_name_args(names)

    config = load_config()
    if not verbose:
        set_log_level(config.get('logging', {}).get('level', 'INFO'))
    paths = split_path_list(cookbook_path) if cookbook_path else config.get('cookbook_path')
    options = ImportOptions.from_config(
        config,
        install_path=paths[0] if paths else None,
        default_branch=branch,
        dependencies=dependencies,
    )

    orchestrator = ImportOrchestrator(options, config=config)
    try:
        summary = orchestrator.run(name, version)
    except CommandError:
        # Cookbooks finished before the failure stay imported; show them
        partial = orchestrator.last_result
        if partial is not None and partial.results:
            show_summary(partial, json_output)
        raise

    show_summary(summary, json_output)


def show_summary(summary, json_output):
    if json_output:
        output_jsonl(summary.results)
        output_jsonl([summary])
    else:
        render_import_summary(summary)

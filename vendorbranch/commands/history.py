"""
Handles the 'history' command: list past cookbook imports.
"""

import os

import click

from ..config import load_config, set_log_level, split_path_list
from ..cli_utils import handle_errors, output_jsonl
from ..exit_codes import GuardFailure, GuardFailureKind
from ..render import render_history_table
from ..services.history_service import ImportHistoryService
from ..services.repository_guard import is_git_repo


@click.command('history')
@click.argument('cookbook', required=False)
@click.option('-o', '--cookbook-path', 'cookbook_path', default=None, metavar='PATH:PATH',
              help='A colon-separated path to look for cookbooks in')
@click.option('--json', 'json_output', is_flag=True, help='Output as JSONL')
@click.option('-v', '--verbose', is_flag=True, help='Log every git command')
@handle_errors
def history_handler(cookbook, cookbook_path, json_output, verbose):
    """Show cookbooks imported into the repository.

    History is read from the import tags and vendor branches in git.

    Examples:

    \b
        vendorbranch history
        vendorbranch history apache2 --json
    """
    config = load_config()
    if not verbose:
        set_log_level(config.get('logging', {}).get('level', 'INFO'))
    paths = split_path_list(cookbook_path) if cookbook_path else config.get('cookbook_path')
    repo_path = os.path.abspath(os.path.expanduser(paths[0] if paths else '.'))

    if not os.path.isdir(repo_path) or not is_git_repo(repo_path):
        raise GuardFailure(
            GuardFailureKind.NOT_A_REPOSITORY,
            f"The cookbook repo {repo_path} is not a git repository.",
            "Pass the repository with --cookbook-path",
        )

    records = ImportHistoryService().records(repo_path, cookbook)

    if json_output:
        output_jsonl(records)
    else:
        render_history_table(records)

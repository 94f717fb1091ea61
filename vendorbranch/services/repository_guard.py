"""
Pre-flight checks for the cookbook repository.

A repository is only imported into when it is a git working tree, its
default branch exists, and it has no uncommitted modifications.
"""

import logging
import os
import re
from typing import Optional

from ..exit_codes import GuardFailure, GuardFailureKind
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

# A porcelain status line for a modified file (staged or not).
# Untracked files ('??') are deliberately not matched.
DIRTY_REPO = re.compile(r'^[ \t]*M', re.MULTILINE)


def is_git_repo(directory: str) -> bool:
    """Check for a .git directory at directory or any of its ancestors."""
    directory = os.path.abspath(directory)
    while True:
        if os.path.isdir(os.path.join(directory, '.git')):
            return True
        parent = os.path.dirname(directory)
        if parent == directory:
            return False
        directory = parent


def is_dirty(status_output: str) -> bool:
    """True if porcelain status output lists a modified file."""
    return bool(DIRTY_REPO.search(status_output))


class RepositoryGuard:
    """
    Validates that a cookbook repository can be imported into.

    Example:
        guard = RepositoryGuard(GitClient())
        guard.validate("/home/me/chef-repo/cookbooks", "master")
    """

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def validate(self, repo_path: str, default_branch: str) -> None:
        """
        Run the pre-flight checks, stopping at the first failure.

        Args:
            repo_path: Path to the cookbook repository
            default_branch: Branch imports are merged into

        Raises:
            GuardFailure: describing the first failed check
        """
        if not os.path.isdir(repo_path):
            raise GuardFailure(
                GuardFailureKind.NOT_A_DIRECTORY,
                f"The cookbook repo path {repo_path} does not exist or is not a directory",
                "Create the directory or pass another one with --cookbook-path",
            )

        if not is_git_repo(repo_path):
            raise GuardFailure(
                GuardFailureKind.NOT_A_REPOSITORY,
                f"The cookbook repo {repo_path} is not a git repository.",
                "Use `git init` to initialize a git repo",
            )

        if not self.git.branch_exists(repo_path, default_branch):
            raise GuardFailure(
                GuardFailureKind.MISSING_DEFAULT_BRANCH,
                f"Your default branch '{default_branch}' does not exist",
                "If this is a new git repo, make sure you have at least one commit "
                "before installing cookbooks",
            )

        # TODO: untracked files in the cookbook directory are removed by the
        # import without warning; decide whether they should fail this check.
        status_output = self.git.status_porcelain(repo_path)
        if is_dirty(status_output):
            raise GuardFailure(
                GuardFailureKind.UNCOMMITTED_CHANGES,
                f"You have uncommitted changes to your cookbook repo ({repo_path}):",
                "Commit or stash your changes before importing cookbooks",
                details=status_output,
            )

        logger.debug(f"Repository {repo_path} passed pre-flight checks")

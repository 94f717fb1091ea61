"""
Vendor branch lifecycle for cookbook imports.

Each cookbook gets a long-lived `vendor-<cookbook>` branch holding its
pristine upstream copies. An import checks that branch out, commits and
tags whatever the new tarball changed, then merges the branch back into
the default branch. Merge conflicts are left for the operator.
"""

import logging
from typing import Optional

from ..domain.operation import ImportState
from ..exit_codes import MergeConflictError
from ..infra.git_client import GitClient

logger = logging.getLogger(__name__)

VENDOR_BRANCH_PREFIX = "vendor-"
IMPORT_TAG_PREFIX = "cookbook-site-imported-"


def vendor_branch_name(cookbook: str) -> str:
    return f"{VENDOR_BRANCH_PREFIX}{cookbook}"


def import_tag_name(cookbook: str, version: str) -> str:
    return f"{IMPORT_TAG_PREFIX}{cookbook}-{version}"


def import_commit_message(cookbook: str, version: str) -> str:
    return f"Import {cookbook} version {version}"


class VendorBranchManager:
    """
    Drives one repository through the vendor-branch workflow.

    The caller is expected to follow the protocol:
    reset_to_default, prepare_import_branch, (extract files),
    finalize_import, reset_to_default, merge_back.

    Example:
        manager = VendorBranchManager("/repo/cookbooks", "master")
        manager.reset_to_default()
        manager.prepare_import_branch("apache2")
        ...  # extract the tarball into /repo/cookbooks/apache2
        if manager.finalize_import("apache2", "1.0.0"):
            manager.reset_to_default()
            manager.merge_back("apache2", "1.0.0")
        else:
            manager.reset_to_default()
    """

    def __init__(self, repo_path: str, default_branch: str = "master",
                 git_client: Optional[GitClient] = None):
        """
        Initialize VendorBranchManager.

        Args:
            repo_path: Path to the cookbook repository
            default_branch: Branch that imports are merged into
            git_client: GitClient instance (creates new if None)
        """
        self.repo_path = repo_path
        self.default_branch = default_branch
        self.git = git_client or GitClient()
        self.state = ImportState.CLEAN
        self.last_change_count = 0

    def reset_to_default(self) -> None:
        """Check out the default branch. Safe to call repeatedly."""
        logger.info(f"Checking out the {self.default_branch} branch.")
        self.git.checkout(self.repo_path, self.default_branch)

    def prepare_import_branch(self, cookbook: str) -> str:
        """
        Switch to the cookbook's vendor branch, creating it from HEAD
        if this is the first import of the cookbook.

        Returns:
            The vendor branch name
        """
        branch = vendor_branch_name(cookbook)
        if self.git.branch_exists(self.repo_path, branch):
            logger.info(f"Pristine copy branch ({branch}) exists, switching to it.")
            self.git.checkout(self.repo_path, branch)
        else:
            logger.info(f"Creating pristine copy branch {branch}")
            self.git.create_branch(self.repo_path, branch)
        self.state = ImportState.ON_IMPORT_BRANCH
        return branch

    def detect_changes(self, cookbook: str) -> Optional[int]:
        """
        Count changed files under the cookbook's directory.

        Returns:
            Number of changed files, or None if nothing changed
        """
        output = self.git.status_porcelain(self.repo_path, pathspec=cookbook, all_untracked=True)
        count = len([line for line in output.splitlines() if line.strip()])
        return count or None

    def finalize_import(self, cookbook: str, version: str) -> bool:
        """
        Commit and tag the extracted cookbook on its vendor branch.

        Returns:
            True if a commit was made, False if the tarball changed nothing
        """
        update_count = self.detect_changes(cookbook)
        if not update_count:
            logger.info(f"No changes made to {cookbook}")
            self.last_change_count = 0
            self.state = ImportState.NO_CHANGE
            return False

        logger.info(f"{update_count} files updated, committing changes")
        self.git.add(self.repo_path, cookbook)
        self.git.commit(self.repo_path, import_commit_message(cookbook, version), cookbook)

        tag = import_tag_name(cookbook, version)
        logger.info(f"Creating tag {tag}")
        self.git.force_tag(self.repo_path, tag)

        self.last_change_count = update_count
        self.state = ImportState.COMMITTED
        return True

    def merge_back(self, cookbook: str, version: str) -> None:
        """
        Merge the vendor branch into the currently checked out branch.

        Raises:
            MergeConflictError: if git could not merge cleanly. The
                working tree is left as the merge left it.
        """
        branch = vendor_branch_name(cookbook)
        result = self.git.merge(self.repo_path, branch)
        if result.ok:
            logger.info(f"Cookbook {cookbook} version {version} successfully installed")
            self.state = ImportState.MERGE_SUCCEEDED
            return

        self.state = ImportState.MERGE_CONFLICT
        status = self.git.status(self.repo_path)
        status_output = status.stdout or status.stderr
        target = self.git.current_branch(self.repo_path)
        # Reported once by the caller, together with the status output
        logger.debug(f"Merge of {branch} into {target} stopped with conflicts")
        raise MergeConflictError(self.repo_path, branch, status_output, target_branch=target)

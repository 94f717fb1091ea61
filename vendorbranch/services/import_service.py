"""
Cookbook import service for vendorbranch.

Runs the full import of a cookbook (and optionally its dependencies)
into a cookbook repository:

    guard -> default branch -> vendor branch -> download -> extract
          -> commit + tag -> default branch -> merge

Dependencies are processed from a worklist; every cookbook is imported
at most once per run, so dependency cycles terminate.
"""

import logging
import os
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config import load_config
from ..domain.operation import ImportResult, ImportSummary
from ..infra import archive
from ..infra.git_client import GitClient
from ..infra.site_client import CookbookSiteClient
from ..metadata import read_dependencies
from .repository_guard import RepositoryGuard
from .vendor_branch import VendorBranchManager, import_tag_name

logger = logging.getLogger(__name__)


@dataclass
class ImportOptions:
    """Options for a cookbook import."""
    install_path: str
    default_branch: str = "master"
    dependencies: bool = False

    def __post_init__(self):
        self.install_path = os.path.abspath(os.path.expanduser(self.install_path))

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides) -> 'ImportOptions':
        """Build options from a config dict; non-None overrides win."""
        cookbook_path = config.get('cookbook_path') or []
        values = {
            'install_path': cookbook_path[0] if cookbook_path else '.',
            'default_branch': config.get('default_branch', 'master'),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class ImportOrchestrator:
    """
    Imports cookbooks into a repository through vendor branches.

    Example:
        orchestrator = ImportOrchestrator(ImportOptions("/repo/cookbooks"))
        summary = orchestrator.run("apache2")
        for result in summary.results:
            print(result.cookbook, result.state.value)
    """

    def __init__(
        self,
        options: ImportOptions,
        config: Optional[Dict[str, Any]] = None,
        git_client: Optional[GitClient] = None,
        site_client: Optional[CookbookSiteClient] = None,
        guard: Optional[RepositoryGuard] = None,
    ):
        """
        Initialize ImportOrchestrator.

        Args:
            options: Import options
            config: Configuration dict (loads default if None)
            git_client: GitClient instance (creates new if None)
            site_client: Cookbook site client (creates new if None)
            guard: Repository guard (creates new if None)
        """
        self.options = options
        self.config = config if config is not None else load_config()
        self.git = git_client or GitClient(
            timeout=(self.config.get('git') or {}).get('timeout_seconds', 300)
        )
        site = self.config.get('site') or {}
        self.site = site_client or CookbookSiteClient(
            site_url=site.get('url', 'https://supermarket.chef.io'),
            timeout=site.get('timeout_seconds', 30),
        )
        self.guard = guard or RepositoryGuard(self.git)
        self.last_result: Optional[ImportSummary] = None

    def run(self, cookbook: str, version: Optional[str] = None) -> ImportSummary:
        """
        Import a cookbook, then its dependencies if enabled.

        Args:
            cookbook: Cookbook name
            version: Version to import, or None for the latest

        Returns:
            ImportSummary with one result per imported cookbook

        Raises:
            GuardFailure, CommandFailure, FetchError, MergeConflictError
        """
        summary = ImportSummary()
        self.last_result = summary

        worklist = deque([(cookbook, version, None)])
        visited = {cookbook}

        while worklist:
            name, wanted_version, parent = worklist.popleft()
            result = self.import_cookbook(name, wanted_version)
            result.dependency_of = parent
            summary.add(result)

            if not self.options.dependencies:
                continue

            # Dependency versions are not pinned; each one imports its latest.
            cookbook_dir = os.path.join(self.options.install_path, name)
            for dependency in read_dependencies(cookbook_dir):
                if dependency in visited:
                    logger.debug(f"Skipping {dependency}, already imported in this run")
                    continue
                visited.add(dependency)
                logger.info(f"Queueing dependency {dependency} of {name}")
                worklist.append((dependency, None, name))

        return summary

    def import_cookbook(self, cookbook: str, version: Optional[str] = None) -> ImportResult:
        """Run the vendor-branch workflow for a single cookbook."""
        install_path = self.options.install_path
        logger.info(f"Installing {cookbook} to {install_path}")

        self.guard.validate(install_path, self.options.default_branch)

        manager = VendorBranchManager(install_path, self.options.default_branch, self.git)
        manager.reset_to_default()
        branch = manager.prepare_import_branch(cookbook)

        upstream_file = os.path.join(install_path, f"{cookbook}.tar.gz")
        downloaded = self.site.download(cookbook, upstream_file, version)
        archive.clear_existing_files(os.path.join(install_path, cookbook))
        archive.extract_cookbook(upstream_file, install_path)
        archive.remove_archive(upstream_file)

        if manager.finalize_import(cookbook, downloaded.version):
            manager.reset_to_default()
            manager.merge_back(cookbook, downloaded.version)
            tag = import_tag_name(cookbook, downloaded.version)
        else:
            manager.reset_to_default()
            tag = None

        return ImportResult(
            cookbook=cookbook,
            version=downloaded.version,
            state=manager.state,
            branch=branch,
            tag=tag,
            files_changed=manager.last_change_count,
        )

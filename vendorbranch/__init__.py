"""
vendorbranch - Import upstream cookbooks into a git repository through
vendor branches.

Each cookbook lives on its own long-lived `vendor-<cookbook>` branch that
only ever holds pristine upstream copies. Importing a new version commits
it there, tags it `cookbook-site-imported-<cookbook>-<version>`, and
merges the branch into your default branch, so local edits are kept by
git's three-way merge and conflicts are left for you to resolve.

Quick Start:
    from vendorbranch import ImportOrchestrator, ImportOptions

    options = ImportOptions("~/chef-repo/cookbooks", dependencies=True)
    summary = ImportOrchestrator(options).run("apache2")
    for result in summary.results:
        print(result.cookbook, result.version, result.state.value)

Services:
    RepositoryGuard - Pre-flight checks (git repo, default branch, clean tree)
    VendorBranchManager - Vendor branch checkout, commit, tag, merge
    ImportOrchestrator - Download, extract and import, with dependencies
    ImportHistoryService - Past imports, read from tags and branches
"""

__version__ = "0.1.0"

from .domain import ImportState, ImportResult, ImportSummary, ImportRecord

from .services import (
    RepositoryGuard,
    VendorBranchManager,
    ImportOrchestrator,
    ImportOptions,
    ImportHistoryService,
)

from .exit_codes import (
    CommandError,
    UsageError,
    GuardFailure,
    GuardFailureKind,
    CommandFailure,
    FetchError,
    MergeConflictError,
)

from .config import load_config

__all__ = [
    "__version__",
    # Domain objects
    "ImportState",
    "ImportResult",
    "ImportSummary",
    "ImportRecord",
    # Services
    "RepositoryGuard",
    "VendorBranchManager",
    "ImportOrchestrator",
    "ImportOptions",
    "ImportHistoryService",
    # Errors
    "CommandError",
    "UsageError",
    "GuardFailure",
    "GuardFailureKind",
    "CommandFailure",
    "FetchError",
    "MergeConflictError",
    # Configuration
    "load_config",
]

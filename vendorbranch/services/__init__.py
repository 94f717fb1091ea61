"""
Service layer for vendorbranch.

Services contain the vendor-branch workflow and orchestrate the
infrastructure layer:
- RepositoryGuard: pre-flight checks on the cookbook repository
- VendorBranchManager: vendor branch checkout, commit, tag and merge
- ImportOrchestrator: full import of a cookbook and its dependencies
- ImportHistoryService: past imports read from tags and branches
"""

from .repository_guard import RepositoryGuard
from .vendor_branch import VendorBranchManager
from .import_service import ImportOrchestrator, ImportOptions
from .history_service import ImportHistoryService

__all__ = [
    'RepositoryGuard',
    'VendorBranchManager',
    'ImportOrchestrator',
    'ImportOptions',
    'ImportHistoryService',
]

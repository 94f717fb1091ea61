"""
Infrastructure layer for vendorbranch.

Contains abstractions for external systems:
- GitClient: Git command execution
- CookbookSiteClient: cookbook site API access and downloads
- archive: tarball extraction and cleanup

These provide clean interfaces that can be mocked for testing.
"""

from .git_client import GitClient, CommandResult
from .site_client import CookbookSiteClient, DownloadedArchive

__all__ = [
    'GitClient',
    'CommandResult',
    'CookbookSiteClient',
    'DownloadedArchive',
]

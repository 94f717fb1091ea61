"""
Import history, read back from the repository itself.

Every committed import leaves a `cookbook-site-imported-<name>-<version>`
tag and a `vendor-<name>` branch, so no separate record is kept.
"""

import re
from typing import List, Optional

from ..domain.operation import ImportRecord
from ..infra.git_client import GitClient
from .vendor_branch import IMPORT_TAG_PREFIX, vendor_branch_name

# Cookbook names may contain dashes; versions start with a digit.
IMPORT_TAG_PATTERN = re.compile(
    rf'^{re.escape(IMPORT_TAG_PREFIX)}(?P<cookbook>.+)-(?P<version>\d[\w.\-+]*)$'
)


def parse_import_tag(tag: str) -> Optional[ImportRecord]:
    """'cookbook-site-imported-apt-1.2.0' -> ImportRecord('apt', '1.2.0')"""
    match = IMPORT_TAG_PATTERN.match(tag)
    if not match:
        return None
    return ImportRecord(
        cookbook=match.group('cookbook'),
        version=match.group('version'),
        tag=tag,
    )


def _version_key(version: str):
    parts = re.split(r'[.\-+]', version)
    return [(0, int(p), '') if p.isdigit() else (1, 0, p) for p in parts]


class ImportHistoryService:
    """Lists past cookbook imports of a repository."""

    def __init__(self, git_client: Optional[GitClient] = None):
        self.git = git_client or GitClient()

    def records(self, repo_path: str, cookbook: Optional[str] = None) -> List[ImportRecord]:
        """
        List imports, sorted by cookbook then version.

        Args:
            repo_path: Path to the cookbook repository
            cookbook: Only list imports of this cookbook
        """
        pattern = f"{IMPORT_TAG_PREFIX}{cookbook}-*" if cookbook else f"{IMPORT_TAG_PREFIX}*"
        branches = set(self.git.branch_names(repo_path))

        records = []
        for tag in self.git.list_tags(repo_path, pattern):
            record = parse_import_tag(tag)
            if record is None:
                continue
            # "apt-1.0" must not pick up "apt-docker-1.0"
            if cookbook and record.cookbook != cookbook:
                continue
            record.branch_exists = vendor_branch_name(record.cookbook) in branches
            records.append(record)

        records.sort(key=lambda r: (r.cookbook, _version_key(r.version)))
        return records

"""
Import result domain objects for vendorbranch.

Provides standardized result types for cookbook imports and for the
import history reconstructed from git tags and branches.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class ImportState(Enum):
    """Where a single import is in the vendor-branch workflow."""
    CLEAN = "clean"
    ON_IMPORT_BRANCH = "on_import_branch"
    COMMITTED = "committed"
    NO_CHANGE = "no_change"
    MERGE_SUCCEEDED = "merge_succeeded"
    MERGE_CONFLICT = "merge_conflict"


@dataclass
class ImportResult:
    """
    Outcome of importing one cookbook.

    `tag` is only set when the import produced a commit.
    """
    cookbook: str
    version: str
    state: ImportState
    branch: str
    tag: Optional[str] = None
    files_changed: int = 0
    dependency_of: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.state in (ImportState.COMMITTED, ImportState.MERGE_SUCCEEDED)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'cookbook': self.cookbook,
            'version': self.version,
            'state': self.state.value,
            'branch': self.branch,
            'files_changed': self.files_changed,
        }
        if self.tag:
            result['tag'] = self.tag
        if self.dependency_of:
            result['dependency_of'] = self.dependency_of
        return result


@dataclass
class ImportSummary:
    """All imports performed by one run, in processing order."""
    results: List[ImportResult] = field(default_factory=list)

    def add(self, result: ImportResult) -> None:
        self.results.append(result)

    @property
    def imported(self) -> int:
        return sum(1 for r in self.results if r.changed)

    @property
    def unchanged(self) -> int:
        return sum(1 for r in self.results if r.state == ImportState.NO_CHANGE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': 'summary',
            'total': len(self.results),
            'imported': self.imported,
            'unchanged': self.unchanged,
        }


@dataclass
class ImportRecord:
    """A past import, read back from an import tag."""
    cookbook: str
    version: str
    tag: str
    branch_exists: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'cookbook': self.cookbook,
            'version': self.version,
            'tag': self.tag,
            'branch_exists': self.branch_exists,
        }

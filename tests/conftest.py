"""
Shared fixtures.
"""

from pathlib import Path

import pytest


@pytest.fixture
def repo_dir(tmp_path) -> Path:
    """A directory that looks like a git working tree to the guard."""
    repo = tmp_path / 'cookbooks'
    repo.mkdir()
    (repo / '.git').mkdir()
    return repo

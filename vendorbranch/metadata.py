#!/usr/bin/env python3

import json
import re
from pathlib import Path
from typing import List, Optional

from .config import logger

# depends "apt"  /  depends 'yum', '>= 3.0'
DEPENDS_PATTERN = re.compile(r'''^\s*depends\s*\(?\s*["']([^"']+)["']''', re.MULTILINE)


def find_metadata_file(cookbook_dir: str) -> Optional[Path]:
    """Find a cookbook's metadata file, preferring the JSON form."""
    for candidate in ['metadata.json', 'metadata.rb']:
        file_path = Path(cookbook_dir) / candidate
        if file_path.is_file():
            return file_path
    return None


def dependencies_from_json(file_path: Path) -> List[str]:
    """Extract dependency names from metadata.json."""
    with open(file_path, 'r') as f:
        data = json.load(f)

    dependencies = data.get('dependencies') or {}
    if isinstance(dependencies, dict):
        return list(dependencies.keys())
    if isinstance(dependencies, list):
        return [str(dep) for dep in dependencies]
    return []


def dependencies_from_rb(file_path: Path) -> List[str]:
    """Extract dependency names from metadata.rb (basic regex parsing)."""
    content = file_path.read_text()
    return DEPENDS_PATTERN.findall(content)


def read_dependencies(cookbook_dir: str) -> List[str]:
    """
    List the cookbooks a cookbook depends on.

    Version constraints are ignored. Names are returned in declaration
    order with duplicates removed.

    Args:
        cookbook_dir: Path to an extracted cookbook

    Returns:
        Dependency names (empty if there is no metadata)
    """
    metadata_file = find_metadata_file(cookbook_dir)
    if metadata_file is None:
        logger.warning(f"No metadata.json or metadata.rb in {cookbook_dir}, skipping dependencies")
        return []

    if metadata_file.suffix == '.json':
        try:
            names = dependencies_from_json(metadata_file)
        except ValueError as e:
            logger.warning(f"Error parsing {metadata_file}: {e}")
            rb_file = metadata_file.with_suffix('.rb')
            names = dependencies_from_rb(rb_file) if rb_file.is_file() else []
    else:
        names = dependencies_from_rb(metadata_file)

    seen = set()
    ordered = []
    for name in names:
        if name not in seen:
            seen.add(name)
            ordered.append(name)
    return ordered

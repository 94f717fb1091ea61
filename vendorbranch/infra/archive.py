"""
Cookbook tarball handling: extract, clear the previous copy, clean up.
"""

import logging
import os
import shutil
import tarfile

from ..exit_codes import FetchError

logger = logging.getLogger(__name__)


def clear_existing_files(cookbook_dir: str) -> bool:
    """
    Remove a previously extracted cookbook directory.

    Returns:
        True if something was removed
    """
    if os.path.isdir(cookbook_dir):
        logger.info("Removing pre-existing version.")
        shutil.rmtree(cookbook_dir)
        return True
    return False


def extract_cookbook(archive_path: str, install_path: str) -> None:
    """
    Uncompress a gzipped cookbook tarball into install_path.

    Tarballs from the cookbook site contain a single top-level
    directory named after the cookbook.
    """
    logger.info(f"Uncompressing {os.path.basename(archive_path)}.")
    try:
        with tarfile.open(archive_path, 'r:gz') as tar:
            tar.extractall(path=install_path, filter='data')
    except (tarfile.TarError, OSError) as e:
        raise FetchError(f"Could not extract {archive_path}: {e}") from e


def remove_archive(archive_path: str) -> None:
    logger.info("removing downloaded tarball")
    os.remove(archive_path)

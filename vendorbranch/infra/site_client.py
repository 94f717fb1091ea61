"""
Cookbook site client infrastructure for vendorbranch.

Downloads cookbook tarballs from a Supermarket-compatible cookbook site:
- Resolves the latest version when none is given
- Maps a version to its API endpoint (dots become underscores)
- Streams the tarball to a local file
"""

import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any

import requests

from ..exit_codes import FetchError

logger = logging.getLogger(__name__)

# Public Chef Supermarket
DEFAULT_SITE_URL = "https://supermarket.chef.io"

DOWNLOAD_CHUNK_SIZE = 64 * 1024


@dataclass
class DownloadedArchive:
    """A cookbook tarball saved to disk."""
    cookbook: str
    version: str
    path: str


def version_endpoint(version: str) -> str:
    """Cookbook site version slug: '1.0.2' -> '1_0_2'."""
    return version.replace('.', '_')


class CookbookSiteClient:
    """
    Client for the cookbook site REST API.

    Example:
        client = CookbookSiteClient()
        archive = client.download("apache2", "/repo/cookbooks/apache2.tar.gz")
        print(archive.version)
    """

    def __init__(self, site_url: str = DEFAULT_SITE_URL, timeout: int = 30):
        """
        Initialize CookbookSiteClient.

        Args:
            site_url: Base URL of the cookbook site
            timeout: HTTP request timeout in seconds
        """
        self.site_url = site_url.rstrip('/')
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Accept': 'application/json',
        })

    def cookbook_url(self, cookbook: str) -> str:
        return f"{self.site_url}/api/v1/cookbooks/{cookbook}"

    def _get_json(self, url: str) -> Dict[str, Any]:
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            raise FetchError(f"Cookbook site request failed: {url} - {e}") from e
        except ValueError as e:
            raise FetchError(f"Cookbook site returned invalid JSON: {url} - {e}") from e

    def version_info(self, cookbook: str, version: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch the version record for a cookbook.

        Args:
            cookbook: Cookbook name
            version: Specific version, or None for the latest

        Returns:
            Version record with at least 'version' and 'file' keys
        """
        if version:
            url = f"{self.cookbook_url(cookbook)}/versions/{version_endpoint(version)}"
        else:
            data = self._get_json(self.cookbook_url(cookbook))
            url = data.get('latest_version')
            if not url:
                raise FetchError(f"Cookbook site has no versions of {cookbook}")

        info = self._get_json(url)
        if not info.get('file'):
            raise FetchError(f"Cookbook site gave no download for {cookbook} ({url})")
        return info

    def download(self, cookbook: str, target: str,
                 version: Optional[str] = None) -> DownloadedArchive:
        """
        Download a cookbook tarball.

        Args:
            cookbook: Cookbook name
            target: File path to write the tarball to
            version: Specific version, or None for the latest

        Returns:
            DownloadedArchive describing the saved file
        """
        info = self.version_info(cookbook, version)
        resolved = str(info.get('version') or version or '')
        logger.info(f"Downloading {cookbook} from the cookbook site at version {resolved} to {target}")

        try:
            with self.session.get(info['file'], stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                with open(target, 'wb') as f:
                    for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except requests.RequestException as e:
            raise FetchError(f"Download of {cookbook} failed: {e}") from e

        logger.info(f"Cookbook saved: {target}")
        return DownloadedArchive(cookbook=cookbook, version=resolved, path=target)

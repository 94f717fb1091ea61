"""
Tests for CookbookSiteClient with mocked HTTP.
"""

from unittest.mock import MagicMock

import pytest
import requests

from vendorbranch.exit_codes import FetchError
from vendorbranch.infra.site_client import CookbookSiteClient, version_endpoint

SITE = "https://cookbooks.example.com"


def json_response(data):
    response = MagicMock()
    response.json.return_value = data
    response.raise_for_status.return_value = None
    return response


def file_response(chunks):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.iter_content.return_value = chunks
    response.__enter__.return_value = response
    response.__exit__.return_value = False
    return response


@pytest.fixture
def client():
    client = CookbookSiteClient(site_url=SITE + "/", timeout=7)
    client.session = MagicMock()
    return client


class TestVersionEndpoint:

    def test_dots_become_underscores(self):
        assert version_endpoint("1.0.2") == "1_0_2"


class TestDownload:

    def test_latest_version(self, client, tmp_path):
        latest_url = f"{SITE}/api/v1/cookbooks/apt/versions/2_0_0"
        client.session.get.side_effect = [
            json_response({'name': 'apt', 'latest_version': latest_url}),
            json_response({'version': '2.0.0', 'file': f"{latest_url}/download"}),
            file_response([b'abc', b'', b'def']),
        ]
        target = tmp_path / 'apt.tar.gz'

        archive = client.download('apt', str(target))

        assert archive.version == '2.0.0'
        assert archive.path == str(target)
        assert target.read_bytes() == b'abcdef'
        urls = [c.args[0] for c in client.session.get.call_args_list]
        assert urls == [f"{SITE}/api/v1/cookbooks/apt", latest_url, f"{latest_url}/download"]

    def test_specific_version(self, client, tmp_path):
        client.session.get.side_effect = [
            json_response({'version': '1.0.2', 'file': "https://files.example.com/apt.tgz"}),
            file_response([b'x']),
        ]

        archive = client.download('apt', str(tmp_path / 'apt.tar.gz'), version='1.0.2')

        assert archive.version == '1.0.2'
        first_call = client.session.get.call_args_list[0]
        assert first_call.args[0] == f"{SITE}/api/v1/cookbooks/apt/versions/1_0_2"
        assert first_call.kwargs['timeout'] == 7

    def test_http_error(self, client, tmp_path):
        client.session.get.side_effect = requests.ConnectionError("no route")

        with pytest.raises(FetchError) as exc_info:
            client.download('apt', str(tmp_path / 'apt.tar.gz'))

        assert 'no route' in str(exc_info.value)
        assert exc_info.value.exit_code == 1

    def test_invalid_json(self, client, tmp_path):
        response = MagicMock()
        response.json.side_effect = ValueError("bad json")
        client.session.get.return_value = response

        with pytest.raises(FetchError):
            client.download('apt', str(tmp_path / 'apt.tar.gz'))

    def test_unknown_cookbook_has_no_versions(self, client, tmp_path):
        client.session.get.return_value = json_response({'name': 'ghost'})

        with pytest.raises(FetchError) as exc_info:
            client.download('ghost', str(tmp_path / 'ghost.tar.gz'))

        assert 'no versions' in str(exc_info.value)

    def test_missing_file_url(self, client, tmp_path):
        client.session.get.return_value = json_response({'version': '1.0.0'})

        with pytest.raises(FetchError):
            client.download('apt', str(tmp_path / 'apt.tar.gz'), version='1.0.0')

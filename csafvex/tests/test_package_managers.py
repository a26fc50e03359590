#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import json
import os
from datetime import datetime
from datetime import timezone
from unittest import mock

import pytest
import requests

from csafvex.package_managers import CratesVersionAPI
from csafvex.package_managers import PackageNotFoundError
from csafvex.package_managers import PackageVersion
from csafvex.package_managers import RegistryUnavailableError
from csafvex.package_managers import StaticVersionAPI
from csafvex.package_managers import get_response

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEST_DATA = os.path.join(BASE_DIR, "test_data", "crates")


def get_crates_response():
    with open(os.path.join(TEST_DATA, "crossbeam-deque.json")) as f:
        return json.load(f)


def test_crates_extract_versions():
    results = CratesVersionAPI.extract_versions(get_crates_response()["versions"])
    assert [version.value for version in results] == ["0.6.3", "0.7.3", "0.8.0", "0.7.4", "0.8.1"]
    assert results[0] == PackageVersion(
        value="0.6.3",
        release_date=datetime(2018, 5, 4, 9, 3, 32, 426233, tzinfo=timezone.utc),
        yanked=True,
    )


def test_crates_extract_versions_without_dates_reverses_listing(caplog):
    versions = [{"num": "1.0.0"}, {"num": "0.9.0"}, {"yanked": False}, {"num": "0.1.0"}]
    results = CratesVersionAPI.extract_versions(versions)
    assert [version.value for version in results] == ["0.1.0", "0.9.0", "1.0.0"]
    assert "Failed to parse crates.io version" in caplog.text


@mock.patch("csafvex.package_managers.get_response")
def test_crates_get_versions(mock_response):
    mock_response.return_value = get_crates_response()
    api = CratesVersionAPI(api_url="https://crates.example.com/api/v1/crates/")
    assert api.get_versions("crossbeam-deque") == ["0.6.3", "0.7.3", "0.8.0", "0.7.4", "0.8.1"]
    mock_response.assert_called_once_with(
        url="https://crates.example.com/api/v1/crates/crossbeam-deque",
        content_type="json",
    )


@mock.patch("csafvex.package_managers.get_response")
def test_crates_get_versions_without_versions(mock_response):
    mock_response.return_value = {"errors": [{"detail": "oops"}]}
    with pytest.raises(RegistryUnavailableError):
        CratesVersionAPI().get_versions("crossbeam-deque")


def get_mock_response(status_code=200, data=None):
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    response.json.return_value = data
    response.text = json.dumps(data)
    return response


@mock.patch("requests.get")
def test_get_response_sends_user_agent(mock_get, monkeypatch):
    monkeypatch.setattr("csafvex.settings.USER_AGENT", "csafvex-tests")
    monkeypatch.setattr("csafvex.settings.REQUEST_TIMEOUT", 5)
    mock_get.return_value = get_mock_response(data={"versions": []})
    assert get_response("https://crates.io/api/v1/crates/foo") == {"versions": []}
    mock_get.assert_called_once_with(
        url="https://crates.io/api/v1/crates/foo",
        headers={"User-Agent": "csafvex-tests"},
        timeout=5,
    )


@mock.patch("requests.get")
def test_get_response_not_found(mock_get):
    mock_get.return_value = get_mock_response(status_code=404)
    with pytest.raises(PackageNotFoundError):
        get_response("https://crates.io/api/v1/crates/does-not-exist")


@mock.patch("requests.get")
def test_get_response_server_error(mock_get, caplog):
    mock_get.return_value = get_mock_response(status_code=503)
    with pytest.raises(RegistryUnavailableError):
        get_response("https://crates.io/api/v1/crates/foo")
    assert "503" in caplog.text


@mock.patch("requests.get")
def test_get_response_connection_error(mock_get):
    mock_get.side_effect = requests.exceptions.ConnectionError("no route to host")
    with pytest.raises(RegistryUnavailableError):
        get_response("https://crates.io/api/v1/crates/foo")


@mock.patch("requests.get")
def test_get_response_invalid_json(mock_get):
    response = get_mock_response()
    response.json.side_effect = ValueError("Expecting value")
    mock_get.return_value = response
    with pytest.raises(RegistryUnavailableError):
        get_response("https://crates.io/api/v1/crates/foo")


def test_static_version_api():
    api = StaticVersionAPI({"demo": ("0.1.0", "0.9.0")})
    assert api.get_versions("demo") == ["0.1.0", "0.9.0"]
    with pytest.raises(PackageNotFoundError):
        api.get_versions("other")


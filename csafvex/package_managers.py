#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses
import logging
from datetime import datetime
from typing import Dict
from typing import Iterable
from typing import List
from typing import Optional

import requests
from dateutil import parser as dateparser

from csafvex import settings

logger = logging.getLogger(__name__)

"""
Utilities to retrieve lists of package versions from remote package
repositories, registries or APIs.
"""


class RegistryError(Exception):
    """
    Raised when the versions of a package cannot be obtained from a registry.
    """


class PackageNotFoundError(RegistryError):
    """
    Raised when a package does not exist in a registry.
    """


class RegistryUnavailableError(RegistryError):
    """
    Raised when a registry cannot be reached or returns an unexpected response.
    """


@dataclasses.dataclass(frozen=True)
class PackageVersion:
    value: str
    release_date: Optional[datetime] = None
    yanked: bool = False


def get_response(url, content_type="json", headers=None, timeout=None):
    """
    Fetch ``url`` and return its content as ``content_type`` which is one of
    binary, text or json.
    Raise a PackageNotFoundError on HTTP 404 and a RegistryUnavailableError on
    any other failure.
    """
    assert content_type in ("binary", "text", "json")

    request_headers = {"User-Agent": settings.USER_AGENT}
    request_headers.update(headers or {})
    timeout = timeout or settings.REQUEST_TIMEOUT

    try:
        resp = requests.get(url=url, headers=request_headers, timeout=timeout)
    except requests.exceptions.RequestException as e:
        logger.error(f"Error while fetching {url!r}: {e!r}")
        raise RegistryUnavailableError(f"Failed to fetch {url!r}: {e}") from e

    if resp.status_code == 404:
        raise PackageNotFoundError(f"Not found: {url!r}")

    if not resp.status_code == 200:
        logger.error(f"Error while fetching {url!r}: {resp.status_code!r}")
        raise RegistryUnavailableError(f"Failed to fetch {url!r}: HTTP {resp.status_code}")

    if content_type == "binary":
        return resp.content
    elif content_type == "text":
        return resp.text
    elif content_type == "json":
        try:
            return resp.json()
        except ValueError as e:
            raise RegistryUnavailableError(f"Invalid JSON response from {url!r}") from e


class VersionAPI:
    """
    Base class for version APIs classes that fetch package versions from remote
    package repositories, registries or APIs.
    """

    def fetch(self, pkg: str) -> Iterable[PackageVersion]:
        """
        Yield PackageVersion versions given a ``pkg`` package name.
        Subclasses must override this method.
        """
        raise NotImplementedError

    def get_versions(self, pkg: str) -> List[str]:
        """
        Return a list of version strings for a ``pkg`` package name in the
        order provided by the registry.
        """
        return [version.value for version in self.fetch(pkg)]


class CratesVersionAPI(VersionAPI):
    """
    Fetch versions of Rust cargo packages from the crates.io API.
    """

    def __init__(self, api_url=None):
        self.api_url = (api_url or settings.CRATES_API_URL).rstrip("/")

    def fetch(self, pkg):
        url = f"{self.api_url}/{pkg}"
        response = get_response(url=url, content_type="json")
        versions = response.get("versions")
        if versions is None:
            raise RegistryUnavailableError(f"No versions in crates.io response for {pkg!r}")
        yield from self.extract_versions(versions)

    @staticmethod
    def extract_versions(versions: List[dict]) -> List[PackageVersion]:
        """
        Return a list of PackageVersion from a list of crates.io ``versions``
        mappings in publication order, oldest first. The API lists versions
        from the highest to the lowest.
        """
        package_versions = []
        for version_info in versions:
            number = version_info.get("num")
            if not number:
                logger.error(f"Failed to parse crates.io version {version_info!r}")
                continue
            created_at = version_info.get("created_at")
            package_versions.append(
                PackageVersion(
                    value=number,
                    release_date=created_at and dateparser.parse(created_at) or None,
                    yanked=bool(version_info.get("yanked")),
                )
            )
        package_versions.reverse()
        if all(version.release_date for version in package_versions):
            package_versions.sort(key=lambda version: version.release_date)
        return package_versions


class StaticVersionAPI(VersionAPI):
    """
    Provide versions from an in-memory mapping of {package name: [versions]}.
    """

    def __init__(self, versions_by_package: Dict[str, Iterable[str]]):
        self.versions_by_package = {
            package: list(versions) for package, versions in versions_by_package.items()
        }

    def fetch(self, pkg):
        if pkg not in self.versions_by_package:
            raise PackageNotFoundError(f"Unknown package: {pkg!r}")
        for version in self.versions_by_package[pkg]:
            yield PackageVersion(value=version)

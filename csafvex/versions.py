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
from enum import Enum
from typing import Iterable
from typing import List
from typing import Optional

from univers.versions import SemverVersion

from csafvex.advisory import Versions
from csafvex.cargo import to_semver
from csafvex.csaf import FullProductName
from csafvex.products import build_product

logger = logging.getLogger(__name__)


class VersionClassificationError(Exception):
    """
    Raised when a registry version of a package cannot be classified.
    """


class VersionStatus(Enum):
    PATCHED = "patched"
    UNAFFECTED = "unaffected"
    VULNERABLE = "vulnerable"


@dataclasses.dataclass(frozen=True)
class ClassifiedVersion:
    version: str
    status: VersionStatus
    product: FullProductName

    @property
    def product_id(self) -> str:
        return self.product.product_id


@dataclasses.dataclass
class VersionClassification:
    """
    The registry versions of a package partitioned in patched, unaffected and
    vulnerable versions. Each list keeps the registry order.
    """

    package_name: str
    patched: List[ClassifiedVersion] = dataclasses.field(default_factory=list)
    unaffected: List[ClassifiedVersion] = dataclasses.field(default_factory=list)
    vulnerable: List[ClassifiedVersion] = dataclasses.field(default_factory=list)

    def get_bucket(self, status: VersionStatus) -> List[ClassifiedVersion]:
        return {
            VersionStatus.PATCHED: self.patched,
            VersionStatus.UNAFFECTED: self.unaffected,
            VersionStatus.VULNERABLE: self.vulnerable,
        }[status]

    def add(self, classified: ClassifiedVersion):
        self.get_bucket(classified.status).append(classified)

    def product_ids(self, status: VersionStatus) -> List[str]:
        return [classified.product_id for classified in self.get_bucket(status)]

    def __len__(self):
        return len(self.patched) + len(self.unaffected) + len(self.vulnerable)


def classify_version(version: SemverVersion, versions: Versions) -> Optional[VersionStatus]:
    """
    Return the VersionStatus of a ``version`` given the ``versions`` ranges of
    an advisory or None if the version is in none of them. Unaffected ranges
    take precedence over patched ranges.

    >>> from csafvex.cargo import CargoVersionRequirement as Req
    >>> versions = Versions(
    ...     patched=[Req.from_string(">= 0.3")],
    ...     unaffected=[Req.from_string("< 0.4")],
    ... )
    >>> classify_version(to_semver("0.3.5"), versions)
    <VersionStatus.UNAFFECTED: 'unaffected'>
    >>> classify_version(to_semver("0.4.0"), versions)
    <VersionStatus.PATCHED: 'patched'>
    """
    if versions.is_unaffected(version):
        return VersionStatus.UNAFFECTED
    if versions.is_patched(version):
        return VersionStatus.PATCHED
    if versions.is_vulnerable(version):
        return VersionStatus.VULNERABLE


def classify_versions(
    package_name: str,
    versions: Versions,
    registry_versions: Iterable[str],
) -> VersionClassification:
    """
    Return a VersionClassification of the ``registry_versions`` of
    ``package_name`` against an advisory ``versions`` ranges.

    Versions are visited once in registry order and each kept version is
    assigned the next product counter, starting at 1. Dropped versions do not
    use a counter value.
    """
    classification = VersionClassification(package_name=package_name)
    counter = 1
    for registry_version in registry_versions:
        try:
            version = to_semver(registry_version)
        except ValueError as e:
            raise VersionClassificationError(
                f"Invalid version {registry_version!r} of package {package_name!r}: {e}"
            ) from e

        status = classify_version(version, versions)
        if not status:
            logger.debug(f"Skipping {package_name} {registry_version}: not in any advisory range")
            continue

        product = build_product(package_name=package_name, version=registry_version, counter=counter)
        classification.add(
            ClassifiedVersion(version=registry_version, status=status, product=product)
        )
        counter += 1

    return classification

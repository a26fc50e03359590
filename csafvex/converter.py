#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import datetime
import logging
from typing import Iterable
from typing import List

from pydantic import ValidationError

from csafvex import __version__
from csafvex.advisory import Advisory
from csafvex.csaf import Csaf
from csafvex.csaf import CsafVersion
from csafvex.csaf import Document
from csafvex.csaf import Engine
from csafvex.csaf import Generator
from csafvex.csaf import Publisher
from csafvex.csaf import PublisherCategory
from csafvex.csaf import Reference
from csafvex.csaf import Revision
from csafvex.csaf import Tracking
from csafvex.csaf import TrackingStatus
from csafvex.package_managers import RegistryError
from csafvex.package_managers import VersionAPI
from csafvex.products import build_product_tree
from csafvex.utils import dedupe
from csafvex.versions import VersionClassificationError
from csafvex.versions import classify_versions
from csafvex.vulnerability import build_vulnerability

logger = logging.getLogger(__name__)

"""
Convert a RustSec advisory and the registry versions of its crate to a CSAF
document with the VEX profile.
See https://docs.oasis-open.org/csaf/csaf/v2.0/csaf-v2.0.html#45-profile-5-vex
"""

DOCUMENT_CATEGORY = "vex"

PUBLISHER_NAME = "RUSTSEC"
PUBLISHER_NAMESPACE = "https://rustsec.org/"

REVISION_SUMMARY = "RUSTSEC Advisory"

GENERATOR_ENGINE = "csafvex"


class ConversionError(Exception):
    """
    Raised when an advisory cannot be converted to a CSAF document.
    """


def get_release_date(advisory: Advisory) -> datetime.datetime:
    """
    Return the advisory date at midnight UTC.

    >>> from csafvex.advisory import AdvisoryId
    >>> advisory = Advisory(id=AdvisoryId("RUSTSEC-2021-0093"), package="crossbeam-deque",
    ...     date=datetime.date(2021, 7, 30))
    >>> get_release_date(advisory).isoformat()
    '2021-07-30T00:00:00+00:00'
    """
    date = advisory.date
    return datetime.datetime(date.year, date.month, date.day, tzinfo=datetime.timezone.utc)


def build_references(advisory: Advisory) -> List[Reference]:
    urls = list(advisory.references)
    if advisory.url:
        urls.append(advisory.url)
    return [Reference(url=url, summary=url) for url in dedupe(urls)]


def build_tracking(advisory: Advisory) -> Tracking:
    release_date = get_release_date(advisory)
    return Tracking(
        current_release_date=release_date,
        id=advisory.id.text,
        initial_release_date=release_date,
        # advisories have no history: the current release is the initial one
        revision_history=[Revision(date=release_date, number="1", summary=REVISION_SUMMARY)],
        status=TrackingStatus.final,
        version="1",
        aliases=[alias.text for alias in advisory.aliases],
        generator=Generator(engine=Engine(name=GENERATOR_ENGINE, version=__version__)),
    )


def build_document(advisory: Advisory) -> Document:
    """
    Return the CSAF Document metadata of an ``advisory``.
    """
    return Document(
        category=DOCUMENT_CATEGORY,
        csaf_version=CsafVersion.two_dot_zero,
        publisher=Publisher(
            category=PublisherCategory.coordinator,
            name=PUBLISHER_NAME,
            namespace=PUBLISHER_NAMESPACE,
        ),
        title=advisory.title,
        tracking=build_tracking(advisory),
        references=build_references(advisory),
    )


def advisory_to_csaf(advisory: Advisory, registry_versions: Iterable[str]) -> Csaf:
    """
    Return a Csaf VEX document built from an ``advisory`` and the ordered
    ``registry_versions`` of its package.
    """
    classification = classify_versions(
        package_name=advisory.package,
        versions=advisory.versions,
        registry_versions=registry_versions,
    )
    logger.info(
        f"{advisory.id}: {len(classification.patched)} patched, "
        f"{len(classification.unaffected)} unaffected and "
        f"{len(classification.vulnerable)} vulnerable versions of {advisory.package!r}"
    )
    return Csaf(
        document=build_document(advisory),
        product_tree=build_product_tree(advisory.package, classification),
        vulnerabilities=[build_vulnerability(advisory, classification)],
    )


def convert(advisory: Advisory, version_api: VersionAPI) -> Csaf:
    """
    Return a Csaf VEX document for an ``advisory`` using a ``version_api`` to
    fetch the versions of its package.
    Raise a ConversionError if the registry versions cannot be fetched or
    classified, or if the advisory data is not valid CSAF data.
    """
    try:
        registry_versions = version_api.get_versions(advisory.package)
        return advisory_to_csaf(advisory, registry_versions)
    except (RegistryError, VersionClassificationError, ValidationError) as e:
        raise ConversionError(
            f"could not convert advisory {advisory.id} for package {advisory.package!r}: {e}"
        ) from e

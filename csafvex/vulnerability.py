#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import logging
from typing import List
from typing import Optional

from csafvex import settings
from csafvex.advisory import CVE
from csafvex.advisory import GHSA
from csafvex.advisory import RUSTSEC
from csafvex.advisory import TALOS
from csafvex.advisory import Advisory
from csafvex.advisory import AdvisoryId
from csafvex.csaf import CvssV3
from csafvex.csaf import Id
from csafvex.csaf import Note
from csafvex.csaf import NoteCategory
from csafvex.csaf import ProductStatus
from csafvex.csaf import Remediation
from csafvex.csaf import RemediationCategory
from csafvex.csaf import Score
from csafvex.csaf import Vulnerability
from csafvex.severity_systems import get_cvss3_scoring_system
from csafvex.versions import VersionClassification
from csafvex.versions import VersionStatus

logger = logging.getLogger(__name__)

SYSTEM_NAMES = {
    RUSTSEC: "RUSTSEC",
    CVE: "CVE",
    GHSA: "GHSA",
    TALOS: "Talos",
}

VENDOR_FIX_DETAILS = "Updated crate versions available"

# product id used in a score when no version is vulnerable
INVALID_PRODUCT_ID = "INVALID"


def get_system_name(advisory_id: AdvisoryId) -> str:
    """
    Return the name of the naming authority of an ``advisory_id``.

    >>> get_system_name(AdvisoryId("RUSTSEC-2021-0093"))
    'RUSTSEC'
    >>> get_system_name(AdvisoryId("TALOS-2020-1234"))
    'Talos'
    >>> get_system_name(AdvisoryId("OSV-2021-1"))
    'Other'
    """
    return SYSTEM_NAMES.get(advisory_id.kind, "Other")


def build_product_status(classification: VersionClassification) -> Optional[ProductStatus]:
    product_status = ProductStatus(
        fixed=classification.product_ids(VersionStatus.PATCHED),
        known_affected=classification.product_ids(VersionStatus.VULNERABLE),
        known_not_affected=classification.product_ids(VersionStatus.UNAFFECTED),
    )
    if product_status.is_empty():
        return
    return product_status


def build_remediations(classification: VersionClassification) -> List[Remediation]:
    """
    Return a vendor fix Remediation for the vulnerable products when there is
    at least one patched version, or an empty list.
    """
    if not classification.patched:
        return []
    return [
        Remediation(
            category=RemediationCategory.vendor_fix,
            details=VENDOR_FIX_DETAILS,
            product_ids=classification.product_ids(VersionStatus.VULNERABLE),
        )
    ]


def build_scores(advisory: Advisory, classification: VersionClassification) -> List[Score]:
    if not advisory.cvss:
        return []

    products = classification.product_ids(VersionStatus.VULNERABLE)
    if not products:
        if not settings.EMIT_INVALID_SCORE_PRODUCT:
            logger.warning(
                f"{advisory.id}: no vulnerable version of {advisory.package!r}, "
                f"omitting CVSS score"
            )
            return []
        logger.warning(
            f"{advisory.id}: no vulnerable version of {advisory.package!r}, "
            f"scoring the {INVALID_PRODUCT_ID!r} product"
        )
        products = [INVALID_PRODUCT_ID]

    scoring_system = get_cvss3_scoring_system(advisory.cvss)
    cvss_v3 = CvssV3(**scoring_system.get_csaf_score(advisory.cvss))
    return [Score(products=products, cvss_v3=cvss_v3)]


def build_vulnerability(
    advisory: Advisory,
    classification: VersionClassification,
) -> Vulnerability:
    """
    Return the single Vulnerability of the CSAF document of an ``advisory``
    given the ``classification`` of the registry versions of its package.
    """
    return Vulnerability(
        cve=advisory.id.text if advisory.id.is_cve() else None,
        ids=[Id(system_name=get_system_name(advisory.id), text=advisory.id.text)],
        notes=[Note(category=NoteCategory.description, text=advisory.description)],
        product_status=build_product_status(classification),
        remediations=build_remediations(classification),
        scores=build_scores(advisory, classification),
        title=advisory.title or None,
    )

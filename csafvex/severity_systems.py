#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses

from cvss import CVSS3
from cvss.exceptions import CVSSError

"""
Vulnerability scoring systems define scales, values and approach to score a
vulnerability severity.
"""


class InvalidScoringElements(ValueError):
    """
    Raised when a vector string cannot be scored by a scoring system.
    """


@dataclasses.dataclass(order=True)
class ScoringSystem:
    # a short identifier for the scoring system.
    identifier: str
    # a name which represents the scoring system such as `CVSSv3.1 Base Score`.
    # This is for human understanding
    name: str
    # a url to documentation about that scoring system
    url: str
    # the CVSS version string used in CSAF score payloads
    version: str = ""
    # notes about that scoring system
    notes: str = ""

    def compute(self, scoring_elements: str) -> str:
        """
        Return a normalized numeric score as a string for this scoring system
        given a ``scoring_elements`` string value.
        """
        raise NotImplementedError

    def get_csaf_score(self, scoring_elements: str) -> dict:
        """
        Return a mapping of CSAF score payload data for a ``scoring_elements``
        vector string.
        """
        raise NotImplementedError


@dataclasses.dataclass(order=True)
class Cvssv3ScoringSystem(ScoringSystem):
    def compute(self, scoring_elements: str) -> str:
        """
        Return a CVSSv3 or CVSSv3.1 base score.

        >>> CVSSV31.compute("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:L/A:H")
        '8.6'
        """
        return str(self.parse(scoring_elements).base_score)

    def parse(self, scoring_elements: str) -> CVSS3:
        try:
            return CVSS3(vector=scoring_elements)
        except CVSSError as e:
            raise InvalidScoringElements(f"Invalid CVSSv3 vector {scoring_elements!r}: {e}") from e

    def get_csaf_score(self, scoring_elements: str) -> dict:
        """
        Return a mapping of CSAF ``cvss_v3`` data for a CVSSv3 vector.

        >>> CVSSV31.get_csaf_score("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:L/I:L/A:H")["baseSeverity"]
        'HIGH'
        """
        cvss = self.parse(scoring_elements)
        base_severity, _temporal, _environmental = cvss.severities()
        return {
            "version": self.version,
            "vectorString": cvss.clean_vector(),
            "baseScore": float(cvss.base_score),
            "baseSeverity": base_severity.upper(),
        }


CVSSV3 = Cvssv3ScoringSystem(
    identifier="cvssv3",
    name="CVSSv3 Base Score",
    url="https://www.first.org/cvss/v3-0/",
    version="3.0",
    notes="CVSSv3 base score and vector",
)

CVSSV31 = Cvssv3ScoringSystem(
    identifier="cvssv3.1",
    name="CVSSv3.1 Base Score",
    url="https://www.first.org/cvss/v3-1/",
    version="3.1",
    notes="CVSSv3.1 base score and vector",
)


def get_cvss3_scoring_system(vector: str) -> Cvssv3ScoringSystem:
    """
    Return the CVSSv3 scoring system matching the version prefix of a CVSSv3
    ``vector`` string.

    >>> get_cvss3_scoring_system("CVSS:3.0/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H").identifier
    'cvssv3'
    >>> get_cvss3_scoring_system("CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H").identifier
    'cvssv3.1'
    """
    if vector.startswith("CVSS:3.0/"):
        return CVSSV3
    if vector.startswith("CVSS:3.1/"):
        return CVSSV31
    raise InvalidScoringElements(f"Not a CVSSv3 vector: {vector!r}")

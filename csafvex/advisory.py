#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses
import datetime
import logging
from itertools import chain
from typing import Iterable
from typing import List
from typing import Optional

from dateutil import parser as dateparser
from pydantic import AnyUrl
from pydantic import TypeAdapter
from pydantic import ValidationError
from toml import TomlDecodeError

from csafvex.cargo import CargoVersionRequirement
from csafvex.cargo import InvalidVersionRequirement
from csafvex.severity_systems import InvalidScoringElements
from csafvex.severity_systems import get_cvss3_scoring_system
from csafvex.utils import data_from_toml
from csafvex.utils import get_item
from csafvex.utils import is_advisory_id
from csafvex.utils import is_cve
from csafvex.utils import is_ghsa
from csafvex.utils import is_rustsec
from csafvex.utils import is_talos
from csafvex.utils import split_markdown_title
from csafvex.utils import split_toml_front_matter

logger = logging.getLogger(__name__)

"""
RustSec advisories are Markdown files starting with a block of TOML
"front matter" identified as the text inside a triple-backtick TOML block.
See https://github.com/RustSec/advisory-db#advisory-format
"""

RUSTSEC = "rustsec"
CVE = "cve"
GHSA = "ghsa"
TALOS = "talos"
OTHER = "other"

# prefixes of the known naming authorities
KNOWN_PREFIXES = ("RUSTSEC-", "CVE-", "GHSA-", "TALOS-")


class InvalidAdvisoryError(Exception):
    """
    Raised when an advisory record cannot be parsed or misses required data.
    """


@dataclasses.dataclass(frozen=True, order=True)
class AdvisoryId:
    """
    An advisory or alias identifier such as RUSTSEC-2021-0093, CVE-2021-32810
    or GHSA-pqqp-xmhj-wgcw.
    """

    text: str

    def __post_init__(self):
        """
        Raise an InvalidAdvisoryError unless the text is a well-formed
        identifier. Identifiers of a known naming authority must use its
        canonical form.
        """
        if not isinstance(self.text, str) or not is_advisory_id(self.text):
            raise InvalidAdvisoryError(f"Invalid advisory identifier: {self.text!r}")

        prefix = self.text.upper().partition("-")[0] + "-"
        if prefix in KNOWN_PREFIXES and self.kind == OTHER:
            raise InvalidAdvisoryError(f"Invalid {prefix[:-1]} identifier: {self.text!r}")

    @property
    def kind(self) -> str:
        """
        Return the naming authority kind of this identifier.

        >>> AdvisoryId("RUSTSEC-2021-0093").kind
        'rustsec'
        >>> AdvisoryId("CVE-2021-32810").kind
        'cve'
        >>> AdvisoryId("GHSA-pqqp-xmhj-wgcw").kind
        'ghsa'
        >>> AdvisoryId("OSV-2020-123").kind
        'other'
        """
        if is_rustsec(self.text):
            return RUSTSEC
        if is_cve(self.text):
            return CVE
        if is_ghsa(self.text):
            return GHSA
        if is_talos(self.text):
            return TALOS
        return OTHER

    def is_cve(self) -> bool:
        return self.kind == CVE

    def __str__(self):
        return self.text


@dataclasses.dataclass
class Versions:
    """
    The version ranges of an advisory: ``unaffected`` versions were never
    vulnerable, ``patched`` versions contain a fix. When ``affected`` ranges
    are provided, only versions matching one of them are vulnerable.
    """

    patched: List[CargoVersionRequirement] = dataclasses.field(default_factory=list)
    unaffected: List[CargoVersionRequirement] = dataclasses.field(default_factory=list)
    affected: List[CargoVersionRequirement] = dataclasses.field(default_factory=list)

    def is_unaffected(self, version) -> bool:
        return any(requirement.matches(version) for requirement in self.unaffected)

    def is_patched(self, version) -> bool:
        return any(requirement.matches(version) for requirement in self.patched)

    def is_vulnerable(self, version) -> bool:
        """
        Return True if ``version`` is vulnerable: it is neither unaffected nor
        patched and, if affected ranges are known, it is in one of them.

        >>> versions = Versions(
        ...     patched=[CargoVersionRequirement.from_string(">= 1.0.0")],
        ...     unaffected=[CargoVersionRequirement.from_string("< 0.2.0")],
        ... )
        >>> versions.is_vulnerable("0.5.0"), versions.is_vulnerable("1.0.1")
        (True, False)
        """
        if self.is_unaffected(version) or self.is_patched(version):
            return False
        if self.affected:
            return any(requirement.matches(version) for requirement in self.affected)
        return True


@dataclasses.dataclass
class Advisory:
    """
    A RustSec security advisory for a single crate ``package``.
    """

    id: AdvisoryId
    package: str
    date: datetime.date
    title: str = ""
    description: str = ""
    aliases: List[AdvisoryId] = dataclasses.field(default_factory=list)
    references: List[str] = dataclasses.field(default_factory=list)
    url: Optional[str] = None
    # a CVSS v3 vector string
    cvss: Optional[str] = None
    versions: Versions = dataclasses.field(default_factory=Versions)
    categories: List[str] = dataclasses.field(default_factory=list)
    keywords: List[str] = dataclasses.field(default_factory=list)
    withdrawn: Optional[datetime.date] = None


def get_requirements(values: Iterable[str], field_name: str) -> List[CargoVersionRequirement]:
    requirements = []
    for value in values or []:
        try:
            requirements.append(CargoVersionRequirement.from_string(value))
        except InvalidVersionRequirement as e:
            raise InvalidAdvisoryError(f"Invalid {field_name} version requirement: {e}") from e
    return requirements


def get_date(value, field_name: str) -> Optional[datetime.date]:
    """
    Return a date from a TOML ``value`` which is either a date or a string.

    >>> get_date("2021-07-30", "date")
    datetime.date(2021, 7, 30)
    >>> get_date(None, "date")
    """
    if not value:
        return
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    try:
        return dateparser.parse(str(value)).date()
    except (ValueError, OverflowError) as e:
        raise InvalidAdvisoryError(f"Invalid advisory {field_name}: {value!r}") from e


def get_cvss(value) -> Optional[str]:
    if not value:
        return
    try:
        get_cvss3_scoring_system(value).parse(value)
    except InvalidScoringElements as e:
        raise InvalidAdvisoryError(f"Invalid advisory cvss: {e}") from e
    return value


url_adapter = TypeAdapter(AnyUrl)


def get_url(value, field_name: str) -> str:
    """
    Return a ``value`` URL string or raise an InvalidAdvisoryError if it is not
    an absolute URL.

    >>> get_url("https://rustsec.org/advisories/RUSTSEC-2021-0093", "url")
    'https://rustsec.org/advisories/RUSTSEC-2021-0093'
    """
    try:
        url_adapter.validate_python(value)
    except ValidationError as e:
        raise InvalidAdvisoryError(f"Invalid advisory {field_name} URL: {value!r}") from e
    return value


def get_versions(record: dict) -> Versions:
    versions = record.get("versions") or {}
    affected_functions = get_item(record, "affected", "functions") or {}
    return Versions(
        patched=get_requirements(versions.get("patched"), "patched"),
        unaffected=get_requirements(versions.get("unaffected"), "unaffected"),
        affected=get_requirements(
            chain.from_iterable(affected_functions.values()),
            "affected",
        ),
    )


def advisory_from_record(record: dict, markdown: str = "") -> Advisory:
    """
    Return an Advisory from a mapping of RustSec TOML ``record`` data and the
    ``markdown`` body of the advisory file.
    """
    advisory = record.get("advisory") or {}
    for required in ("id", "package", "date"):
        if not advisory.get(required):
            raise InvalidAdvisoryError(f"Advisory is missing the required {required!r} field")

    title, description = split_markdown_title(markdown)
    # legacy advisories carry title and description in the TOML front matter
    title = advisory.get("title") or title
    description = advisory.get("description") or description
    if not title.strip():
        raise InvalidAdvisoryError(f"Advisory {advisory['id']} has no title")

    return Advisory(
        id=AdvisoryId(advisory["id"]),
        package=advisory["package"],
        date=get_date(advisory["date"], "date"),
        title=title.strip(),
        description=description.strip(),
        aliases=[AdvisoryId(alias) for alias in advisory.get("aliases") or []],
        references=[get_url(url, "references") for url in advisory.get("references") or []],
        url=advisory.get("url") and get_url(advisory["url"], "url") or None,
        cvss=get_cvss(advisory.get("cvss")),
        versions=get_versions(record),
        categories=list(advisory.get("categories") or []),
        keywords=list(advisory.get("keywords") or []),
        withdrawn=get_date(advisory.get("withdrawn"), "withdrawn"),
    )


def parse_advisory(text: str) -> Advisory:
    """
    Return an Advisory parsed from a RustSec advisory Markdown ``text``.
    """
    front_matter, markdown = split_toml_front_matter(text)
    if not front_matter:
        raise InvalidAdvisoryError("Advisory has no TOML front matter")

    try:
        record = data_from_toml(front_matter)
    except TomlDecodeError as e:
        raise InvalidAdvisoryError(f"Invalid advisory TOML front matter: {e}") from e

    return advisory_from_record(record, markdown)


def load_advisory(location) -> Advisory:
    """
    Return an Advisory loaded from a RustSec advisory file at ``location``.
    """
    with open(location) as f:
        advisory = parse_advisory(f.read())
    logger.debug(f"Loaded advisory {advisory.id} for {advisory.package!r} from {location}")
    return advisory

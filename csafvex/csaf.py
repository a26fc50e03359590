#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated
from typing import List
from typing import Optional

from pydantic import AnyUrl
from pydantic import BaseModel
from pydantic import BeforeValidator
from pydantic import ConfigDict
from pydantic import Field

"""
Models for the subset of the Common Security Advisory Framework (CSAF) 2.0
used to express VEX documents.
See https://docs.oasis-open.org/csaf/csaf/v2.0/csaf-v2.0.html
"""


def none_if_empty(value):
    """
    Return None for an empty list so that empty and absent fields are both
    omitted when serialized.
    """
    if isinstance(value, (list, tuple)) and not value:
        return None
    return value


omit_empty = BeforeValidator(none_if_empty)

ProductIds = Annotated[Optional[List[str]], omit_empty]


class CsafModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict:
        """
        Return a JSON-serializable mapping of this model with absent fields
        omitted.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    @classmethod
    def from_dict(cls, data: dict):
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, text: str):
        return cls.model_validate_json(text)


class CsafVersion(str, Enum):
    """
    Gives the version of the CSAF specification which the document was generated for.
    """

    two_dot_zero = "2.0"


class PublisherCategory(str, Enum):
    coordinator = "coordinator"
    discoverer = "discoverer"
    other = "other"
    translator = "translator"
    user = "user"
    vendor = "vendor"


class TrackingStatus(str, Enum):
    draft = "draft"
    final = "final"
    interim = "interim"


class NoteCategory(str, Enum):
    description = "description"
    details = "details"
    faq = "faq"
    general = "general"
    legal_disclaimer = "legal_disclaimer"
    other = "other"
    summary = "summary"


class ReferenceCategory(str, Enum):
    external = "external"
    field_self = "self"


class BranchCategory(str, Enum):
    architecture = "architecture"
    host_name = "host_name"
    language = "language"
    legacy = "legacy"
    patch_level = "patch_level"
    product_family = "product_family"
    product_name = "product_name"
    product_version = "product_version"
    service_pack = "service_pack"
    specification = "specification"
    vendor = "vendor"


class RemediationCategory(str, Enum):
    mitigation = "mitigation"
    no_fix_planned = "no_fix_planned"
    none_available = "none_available"
    vendor_fix = "vendor_fix"
    workaround = "workaround"


class ThreatCategory(str, Enum):
    exploit_status = "exploit_status"
    impact = "impact"
    target_set = "target_set"


class FlagLabel(str, Enum):
    component_not_present = "component_not_present"
    inline_mitigations_already_exist = "inline_mitigations_already_exist"
    vulnerable_code_cannot_be_controlled_by_adversary = (
        "vulnerable_code_cannot_be_controlled_by_adversary"
    )
    vulnerable_code_not_in_execute_path = "vulnerable_code_not_in_execute_path"
    vulnerable_code_not_present = "vulnerable_code_not_present"


class Publisher(CsafModel):
    """
    Provides information about the publisher of the document.
    """

    category: PublisherCategory
    name: str = Field(..., min_length=1)
    namespace: AnyUrl
    contact_details: Optional[str] = None
    issuing_authority: Optional[str] = None


class Engine(CsafModel):
    name: str = Field(..., min_length=1)
    version: Optional[str] = None


class Generator(CsafModel):
    """
    Holds the elements related to the generation of the document.
    """

    engine: Engine
    date: Optional[datetime] = None


class Revision(CsafModel):
    date: datetime
    number: str
    summary: str
    legacy_version: Optional[str] = None


class Tracking(CsafModel):
    """
    Is a container designated to hold all management attributes necessary to
    track a CSAF document as a whole.
    """

    current_release_date: datetime
    id: str = Field(..., min_length=1)
    initial_release_date: datetime
    revision_history: List[Revision] = Field(..., min_length=1)
    status: TrackingStatus
    version: str
    aliases: Annotated[Optional[List[str]], omit_empty] = None
    generator: Optional[Generator] = None


class Note(CsafModel):
    category: NoteCategory
    text: str
    audience: Optional[str] = None
    title: Optional[str] = None


class Reference(CsafModel):
    url: AnyUrl
    summary: str
    category: Optional[ReferenceCategory] = None


class Document(CsafModel):
    """
    Captures the meta-data about this document describing a particular set of
    security advisories.
    """

    category: str = Field(..., min_length=1)
    csaf_version: CsafVersion = CsafVersion.two_dot_zero
    publisher: Publisher
    title: str = Field(..., min_length=1)
    tracking: Tracking
    lang: Optional[str] = None
    source_lang: Optional[str] = None
    notes: Annotated[Optional[List[Note]], omit_empty] = None
    references: Annotated[Optional[List[Reference]], omit_empty] = None


class ProductIdentificationHelper(CsafModel):
    cpe: Optional[str] = None
    purl: Optional[str] = None


class FullProductName(CsafModel):
    """
    Specifies information about the product and assigns the product_id.
    """

    name: str = Field(..., min_length=1)
    product_id: str = Field(..., min_length=1)
    product_identification_helper: Optional[ProductIdentificationHelper] = None


class Branch(CsafModel):
    """
    A node of the product tree: either a leaf with a ``product`` or a grouping
    of ``branches``.
    """

    category: BranchCategory
    name: str = Field(..., min_length=1)
    branches: Annotated[Optional[List[Branch]], omit_empty] = None
    product: Optional[FullProductName] = None


class ProductTree(CsafModel):
    branches: Annotated[Optional[List[Branch]], omit_empty] = None
    full_product_names: Annotated[Optional[List[FullProductName]], omit_empty] = None


class Id(CsafModel):
    """
    Contains a single unique label or tracking ID for the vulnerability.
    """

    system_name: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)


class ProductStatus(CsafModel):
    """
    Contains different lists of product_ids which provide details on the
    status of the referenced product related to the current vulnerability.
    An empty list is never serialized.
    """

    first_affected: ProductIds = None
    first_fixed: ProductIds = None
    fixed: ProductIds = None
    known_affected: ProductIds = None
    known_not_affected: ProductIds = None
    last_affected: ProductIds = None
    recommended: ProductIds = None
    under_investigation: ProductIds = None

    def is_empty(self) -> bool:
        return not any(getattr(self, field) for field in type(self).model_fields)


class Remediation(CsafModel):
    """
    Specifies details on how to handle (and presumably, fix) a vulnerability.
    """

    category: RemediationCategory
    details: str = Field(..., min_length=1)
    date: Optional[datetime] = None
    group_ids: ProductIds = None
    product_ids: ProductIds = None
    url: Optional[AnyUrl] = None


class CvssV3(CsafModel):
    version: str
    vector_string: str = Field(..., alias="vectorString")
    base_score: float = Field(..., alias="baseScore", ge=0.0, le=10.0)
    base_severity: str = Field(..., alias="baseSeverity")


class Score(CsafModel):
    """
    Specifies information about (at least one) score of the vulnerability and
    for which products the given value applies.
    """

    products: List[str] = Field(..., min_length=1)
    cvss_v3: Optional[CvssV3] = None


class Threat(CsafModel):
    category: ThreatCategory
    details: str = Field(..., min_length=1)
    date: Optional[datetime] = None
    group_ids: ProductIds = None
    product_ids: ProductIds = None


class Flag(CsafModel):
    """
    Contains product specific information in regard to this vulnerability as
    a single machine readable flag.
    """

    label: FlagLabel
    date: Optional[datetime] = None
    group_ids: ProductIds = None
    product_ids: ProductIds = None


class Vulnerability(CsafModel):
    """
    Is a container for the aggregation of all fields that are related to a
    single vulnerability in the document.
    """

    cve: Optional[str] = Field(default=None, pattern=r"^CVE-[0-9]{4}-[0-9]{4,}$")
    ids: Annotated[Optional[List[Id]], omit_empty] = None
    notes: Annotated[Optional[List[Note]], omit_empty] = None
    flags: Annotated[Optional[List[Flag]], omit_empty] = None
    discovery_date: Optional[datetime] = None
    release_date: Optional[datetime] = None
    product_status: Optional[ProductStatus] = None
    references: Annotated[Optional[List[Reference]], omit_empty] = None
    remediations: Annotated[Optional[List[Remediation]], omit_empty] = None
    scores: Annotated[Optional[List[Score]], omit_empty] = None
    threats: Annotated[Optional[List[Threat]], omit_empty] = None
    title: Optional[str] = None


class Csaf(CsafModel):
    """
    Top level CSAF document.
    """

    document: Document
    product_tree: Optional[ProductTree] = None
    vulnerabilities: Annotated[Optional[List[Vulnerability]], omit_empty] = None


Branch.model_rebuild()

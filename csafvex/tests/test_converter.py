#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import datetime
import os
from unittest import mock

import pytest

from csafvex.advisory import Advisory
from csafvex.advisory import AdvisoryId
from csafvex.advisory import Versions
from csafvex.cargo import CargoVersionRequirement
from csafvex.converter import ConversionError
from csafvex.converter import advisory_to_csaf
from csafvex.converter import build_document
from csafvex.converter import convert
from csafvex.csaf import Csaf
from csafvex.package_managers import CratesVersionAPI
from csafvex.package_managers import RegistryUnavailableError
from csafvex.package_managers import StaticVersionAPI
from csafvex.tests import util_tests

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEST_DATA = os.path.join(BASE_DIR, "test_data")

CROSSBEAM_VERSIONS = ["0.6.3", "0.7.3", "0.8.0", "0.7.4", "0.8.1"]


def test_advisory_to_csaf(crossbeam_advisory):
    expected_file = os.path.join(TEST_DATA, "csaf", "RUSTSEC-2021-0093-expected.json")
    result = advisory_to_csaf(crossbeam_advisory, CROSSBEAM_VERSIONS).to_dict()
    util_tests.check_results_against_json(result, expected_file)


def test_convert_with_crates_api(crossbeam_advisory, no_network):
    expected_file = os.path.join(TEST_DATA, "csaf", "RUSTSEC-2021-0093-expected.json")
    with mock.patch("csafvex.package_managers.CratesVersionAPI.get_versions") as get_versions:
        get_versions.return_value = CROSSBEAM_VERSIONS
        result = convert(crossbeam_advisory, CratesVersionAPI()).to_dict()
    util_tests.check_results_against_json(result, expected_file)


def test_convert_round_trip(crossbeam_advisory):
    csaf = convert(crossbeam_advisory, StaticVersionAPI({"crossbeam-deque": CROSSBEAM_VERSIONS}))
    assert Csaf.from_json(csaf.to_json()) == csaf
    assert Csaf.from_dict(csaf.to_dict()) == csaf


def test_convert_round_trip_with_all_statuses():
    advisory = Advisory(
        id=AdvisoryId("RUSTSEC-2022-0002"),
        package="demo",
        date=datetime.date(2022, 2, 2),
        title="Demo",
        description="Demo is vulnerable.",
        cvss="CVSS:3.1/AV:N/AC:L/PR:N/UI:N/S:U/C:H/I:H/A:H",
        versions=Versions(
            patched=[CargoVersionRequirement.from_string(">= 1.0.0")],
            unaffected=[CargoVersionRequirement.from_string("< 0.2.0")],
        ),
    )
    version_api = StaticVersionAPI({"demo": ["0.1.0", "0.9.0", "1.0.0", "1.0.1"]})
    csaf = convert(advisory, version_api)

    product_status = csaf.to_dict()["vulnerabilities"][0]["product_status"]
    assert product_status == {
        "fixed": ["DEMO-3", "DEMO-4"],
        "known_affected": ["DEMO-2"],
        "known_not_affected": ["DEMO-1"],
    }
    assert Csaf.from_json(csaf.to_json()) == csaf
    assert Csaf.from_dict(csaf.to_dict()) == csaf


def test_convert_with_unknown_package(crossbeam_advisory):
    with pytest.raises(ConversionError, match="crossbeam-deque"):
        convert(crossbeam_advisory, StaticVersionAPI({}))


def test_convert_with_unavailable_registry(crossbeam_advisory):
    version_api = mock.Mock(spec=CratesVersionAPI)
    version_api.get_versions.side_effect = RegistryUnavailableError("crates.io is down")
    with pytest.raises(ConversionError) as excinfo:
        convert(crossbeam_advisory, version_api)
    assert isinstance(excinfo.value.__cause__, RegistryUnavailableError)
    assert "could not convert advisory RUSTSEC-2021-0093" in str(excinfo.value)


def test_convert_with_invalid_registry_version(crossbeam_advisory):
    version_api = StaticVersionAPI({"crossbeam-deque": ["0.8.1", "latest"]})
    with pytest.raises(ConversionError, match="latest"):
        convert(crossbeam_advisory, version_api)


def test_advisory_to_csaf_without_matching_versions():
    advisory = Advisory(
        id=AdvisoryId("RUSTSEC-2022-0002"),
        package="demo",
        date=datetime.date(2022, 2, 2),
        title="Nothing to see",
    )
    csaf = advisory_to_csaf(advisory, []).to_dict()
    assert csaf["product_tree"] == {"branches": [{"category": "product_name", "name": "demo"}]}
    vulnerability = csaf["vulnerabilities"][0]
    assert "product_status" not in vulnerability
    assert "remediations" not in vulnerability


def test_build_document_references_and_aliases():
    advisory = Advisory(
        id=AdvisoryId("RUSTSEC-2019-0013"),
        package="spin",
        date=datetime.date(2019, 8, 27),
        title="Wrong memory orderings in RwLock",
        url="https://github.com/mvdnes/spin-rs/issues/65",
        references=[
            "https://github.com/mvdnes/spin-rs/pull/66",
            "https://github.com/mvdnes/spin-rs/issues/65",
        ],
    )
    document = build_document(advisory).to_dict()
    assert document["references"] == [
        {
            "url": "https://github.com/mvdnes/spin-rs/pull/66",
            "summary": "https://github.com/mvdnes/spin-rs/pull/66",
        },
        {
            "url": "https://github.com/mvdnes/spin-rs/issues/65",
            "summary": "https://github.com/mvdnes/spin-rs/issues/65",
        },
    ]
    assert "aliases" not in document["tracking"]
    assert document["tracking"]["initial_release_date"] == "2019-08-27T00:00:00Z"
    assert document["publisher"] == {
        "category": "coordinator",
        "name": "RUSTSEC",
        "namespace": "https://rustsec.org/",
    }


def test_build_document_without_references():
    advisory = Advisory(
        id=AdvisoryId("RUSTSEC-2022-0003"),
        package="demo",
        date=datetime.date(2022, 3, 3),
        title="No references",
    )
    document = build_document(advisory).to_dict()
    assert "references" not in document
    assert document["category"] == "vex"
    assert document["csaf_version"] == "2.0"
    assert document["tracking"]["revision_history"] == [
        {"date": "2022-03-03T00:00:00Z", "number": "1", "summary": "RUSTSEC Advisory"}
    ]


def test_convert_with_invalid_reference_url():
    advisory = Advisory(
        id=AdvisoryId("RUSTSEC-2022-0003"),
        package="demo",
        date=datetime.date(2022, 3, 3),
        title="Invalid reference",
        references=["see the mailing list"],
    )
    with pytest.raises(ConversionError, match="RUSTSEC-2022-0003"):
        convert(advisory, StaticVersionAPI({"demo": ["1.0.0"]}))

#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import pytest

from csafvex.cargo import CargoVersionRequirement
from csafvex.cargo import InvalidVersionRequirement


@pytest.mark.parametrize(
    "requirement,version,expected",
    [
        (">= 1.2.3", "1.2.3", True),
        (">= 1.2.3", "1.2.2", False),
        ("> 1.2.3", "1.2.3", False),
        ("< 0.7", "0.6.99", True),
        ("< 0.7", "0.7.0", False),
        ("<= 1.2", "1.2.9", True),
        ("<= 1.2", "1.3.0", False),
        ("= 1.0.0", "1.0.0", True),
        ("= 1.0.0", "1.0.1", False),
        ("^1.2.3", "1.9.0", True),
        ("^1.2.3", "2.0.0", False),
        ("^0.2.3", "0.2.9", True),
        ("^0.2.3", "0.3.0", False),
        ("^0.0.3", "0.0.4", False),
        ("1.2.3", "1.4.0", True),
        ("~1.2.3", "1.2.9", True),
        ("~1.2.3", "1.3.0", False),
        ("~1", "1.9.9", True),
        ("1.*", "1.5.0", True),
        ("1.*", "2.0.0", False),
        ("1.2.x", "1.2.7", True),
        ("*", "42.0.0", True),
        (">= 0.7.4, < 0.8.0", "0.7.5", True),
        (">= 0.7.4, < 0.8.0", "0.8.0", False),
    ],
)
def test_cargo_version_requirement_matches(requirement, version, expected):
    assert CargoVersionRequirement.from_string(requirement).matches(version) == expected


def test_cargo_version_requirement_contains():
    requirement = CargoVersionRequirement.from_string(">= 0.8.1")
    assert "0.8.1" in requirement
    assert "0.8.0" not in requirement


def test_cargo_version_requirement_excludes_prereleases_by_default():
    requirement = CargoVersionRequirement.from_string(">= 1.0.0")
    assert not requirement.matches("2.0.0-alpha.1")
    assert requirement.matches("2.0.0")


def test_cargo_version_requirement_matches_prereleases_on_same_triple():
    requirement = CargoVersionRequirement.from_string(">= 1.0.0-beta.2")
    assert requirement.matches("1.0.0-beta.3")
    assert requirement.matches("1.0.0")
    assert not requirement.matches("1.0.0-beta.1")
    assert not requirement.matches("1.1.0-alpha")


def test_cargo_version_requirement_str():
    requirement = CargoVersionRequirement.from_string("  >= 0.5.2, < 0.7 ")
    assert str(requirement) == ">= 0.5.2, < 0.7"


@pytest.mark.parametrize(
    "requirement",
    ["", "   ", "foo", ">= 1.2.3.4", ">= 1.*", "1.2-alpha", "~>1.0", ">= 1.0,"],
)
def test_cargo_version_requirement_invalid(requirement):
    with pytest.raises(InvalidVersionRequirement):
        CargoVersionRequirement.from_string(requirement)

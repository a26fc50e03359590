#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import os

import pytest

from csafvex.advisory import load_advisory

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
TEST_DATA = os.path.join(BASE_DIR, "test_data")


@pytest.fixture
def no_network(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("Network access is not allowed in tests")

    monkeypatch.setattr("requests.get", fail)


@pytest.fixture
def crossbeam_advisory():
    return load_advisory(os.path.join(TEST_DATA, "rustsec", "RUSTSEC-2021-0093.md"))


@pytest.fixture
def emit_invalid_score_product(monkeypatch):
    monkeypatch.setattr("csafvex.settings.EMIT_INVALID_SCORE_PRODUCT", True)

#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from itertools import chain

from packageurl import PackageURL

from csafvex.csaf import Branch
from csafvex.csaf import BranchCategory
from csafvex.csaf import FullProductName
from csafvex.csaf import ProductIdentificationHelper
from csafvex.csaf import ProductTree

"""
Build the CSAF products and product tree of a single crate. Each kept
registry version of the crate is a product identified as ``<PACKAGE>-<n>``.
"""


def get_product_id(package_name: str, counter: int) -> str:
    """
    Return a product id for the ``counter``-th product of ``package_name``.

    >>> get_product_id("tokio", 3)
    'TOKIO-3'
    >>> get_product_id("serde_json", 12)
    'SERDE_JSON-12'
    """
    return f"{package_name.upper()}-{counter}"


def get_purl(package_name: str, version: str) -> str:
    """
    >>> get_purl("tokio", "1.8.1")
    'pkg:cargo/tokio@1.8.1'
    """
    return PackageURL(type="cargo", name=package_name, version=version).to_string()


def build_product(package_name: str, version: str, counter: int) -> FullProductName:
    return FullProductName(
        name=f"{package_name} {version}",
        product_id=get_product_id(package_name, counter),
        product_identification_helper=ProductIdentificationHelper(
            purl=get_purl(package_name, version)
        ),
    )


def build_branch(classified) -> Branch:
    """
    Return a product_version leaf Branch for a ``classified`` version.
    """
    return Branch(
        category=BranchCategory.product_version,
        name=classified.version,
        product=classified.product,
    )


def build_product_tree(package_name: str, classification) -> ProductTree:
    """
    Return a ProductTree with a single product_name branch for
    ``package_name`` whose version branches are the patched, then unaffected,
    then vulnerable versions of a VersionClassification.
    """
    classified_versions = chain(
        classification.patched,
        classification.unaffected,
        classification.vulnerable,
    )
    branches = [build_branch(classified) for classified in classified_versions]
    package_branch = Branch(
        category=BranchCategory.product_name,
        name=package_name,
        branches=branches,
    )
    return ProductTree(branches=[package_branch])

#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import dataclasses
import operator
import re
from typing import FrozenSet
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from univers.version_constraint import VersionConstraint
from univers.versions import SemverVersion

"""
Cargo version requirements as used in RustSec advisories `patched` and
`unaffected` lists, such as ">= 1.2.3", "^0.3" or ">= 0.5, < 0.7.1".
See https://doc.rust-lang.org/cargo/reference/specifying-dependencies.html
"""

COMPARATORS = {
    "=": operator.eq,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}

comparator_regex = re.compile(
    r"""
    ^\s*
    (?P<op>>=|<=|=|>|<|~|\^)?
    \s*
    v?(?P<major>\d+)
    (?:\.(?P<minor>\d+|\*|x|X))?
    (?:\.(?P<patch>\d+|\*|x|X))?
    (?:-(?P<pre>[0-9A-Za-z.-]+))?
    (?:\+(?P<build>[0-9A-Za-z.-]+))?
    \s*$
    """,
    re.VERBOSE,
)

WILDCARDS = ("*", "x", "X")


class InvalidVersionRequirement(ValueError):
    """
    Raised when a Cargo version requirement string cannot be parsed.
    """


def semver(major: int, minor: int, patch: int, pre: Optional[str] = None) -> SemverVersion:
    """
    Return a SemverVersion built from its components.

    >>> str(semver(1, 2, 3))
    '1.2.3'
    >>> str(semver(0, 1, 0, "alpha.1"))
    '0.1.0-alpha.1'
    """
    version = f"{major}.{minor}.{patch}"
    if pre:
        version = f"{version}-{pre}"
    return SemverVersion(version)


def to_semver(version: Union[str, SemverVersion]) -> SemverVersion:
    if isinstance(version, SemverVersion):
        return version
    return SemverVersion(str(version))


def get_constraints(
    op: str,
    major: int,
    minor: Optional[int],
    patch: Optional[int],
    pre: Optional[str] = None,
) -> List[VersionConstraint]:
    """
    Return a list of VersionConstraint that must all be satisfied for a
    single Cargo comparator made of an ``op`` operator and a possibly partial
    version. A missing ``minor`` or ``patch`` is None.

    >>> [str(c) for c in get_constraints("^", 1, 2, 3)]
    ['>=1.2.3', '<2.0.0']
    >>> [str(c) for c in get_constraints("^", 0, 2, 3)]
    ['>=0.2.3', '<0.3.0']
    >>> [str(c) for c in get_constraints("~", 1, 2, None)]
    ['>=1.2.0', '<1.3.0']
    >>> [str(c) for c in get_constraints("<=", 1, None, None)]
    ['<2.0.0']
    """

    def constraint(comparator, version):
        return VersionConstraint(comparator=comparator, version=version)

    if (op in ("=", "~") and (minor is None or patch is None)) or (op == "^" and minor is None):
        # a partial version matches everything sharing its defined components
        if minor is None:
            return [
                constraint(">=", semver(major, 0, 0)),
                constraint("<", semver(major + 1, 0, 0)),
            ]
        return [
            constraint(">=", semver(major, minor, 0)),
            constraint("<", semver(major, minor + 1, 0)),
        ]

    if op == "=":
        return [constraint("=", semver(major, minor, patch, pre))]

    if op == "~":
        return [
            constraint(">=", semver(major, minor, patch, pre)),
            constraint("<", semver(major, minor + 1, 0)),
        ]

    if op == "^":
        lower = semver(major, minor, patch or 0, pre)
        if major > 0:
            return [constraint(">=", lower), constraint("<", semver(major + 1, 0, 0))]
        if minor > 0 or patch is None:
            return [constraint(">=", lower), constraint("<", semver(0, minor + 1, 0))]
        return [constraint("=", lower)]

    if op == ">":
        if minor is None:
            return [constraint(">=", semver(major + 1, 0, 0))]
        if patch is None:
            return [constraint(">=", semver(major, minor + 1, 0))]
        return [constraint(">", semver(major, minor, patch, pre))]

    if op == ">=":
        return [constraint(">=", semver(major, minor or 0, patch or 0, pre))]

    if op == "<":
        return [constraint("<", semver(major, minor or 0, patch or 0, pre))]

    if op == "<=":
        if minor is None:
            return [constraint("<", semver(major + 1, 0, 0))]
        if patch is None:
            return [constraint("<", semver(major, minor + 1, 0))]
        return [constraint("<=", semver(major, minor, patch, pre))]

    raise InvalidVersionRequirement(f"Unknown comparator operator: {op!r}")


@dataclasses.dataclass(frozen=True)
class CargoVersionRequirement:
    """
    A Cargo version requirement: a conjunction of comparators. A version
    matches when it satisfies every constraint. Pre-release versions only
    match when one of the comparators carries a pre-release on the same
    major.minor.patch.
    """

    requirement: str
    constraints: Tuple[VersionConstraint, ...] = tuple()
    prerelease_triples: FrozenSet[Tuple[int, int, int]] = frozenset()

    @classmethod
    def from_string(cls, requirement: str) -> "CargoVersionRequirement":
        """
        Return a CargoVersionRequirement parsed from a ``requirement`` string.

        >>> req = CargoVersionRequirement.from_string(">= 0.5.2, < 0.7")
        >>> [str(c) for c in req.constraints]
        ['>=0.5.2', '<0.7.0']
        >>> CargoVersionRequirement.from_string("*").constraints
        ()
        """
        if not isinstance(requirement, str) or not requirement.strip():
            raise InvalidVersionRequirement(f"Empty version requirement: {requirement!r}")

        constraints = []
        prerelease_triples = set()
        for comparator in requirement.split(","):
            comparator = comparator.strip()
            if comparator in WILDCARDS:
                continue

            match = comparator_regex.match(comparator)
            if not match:
                raise InvalidVersionRequirement(
                    f"Invalid version requirement {requirement!r}: cannot parse {comparator!r}"
                )

            op = match.group("op") or "^"
            major = int(match.group("major"))
            minor = match.group("minor")
            patch = match.group("patch")
            pre = match.group("pre")

            if minor in WILDCARDS:
                minor = patch = None
                if op not in ("^", "="):
                    raise InvalidVersionRequirement(
                        f"Invalid version requirement {requirement!r}: "
                        f"wildcard with operator {op!r}"
                    )
                op = "="
            elif patch in WILDCARDS:
                patch = None
                if op not in ("^", "="):
                    raise InvalidVersionRequirement(
                        f"Invalid version requirement {requirement!r}: "
                        f"wildcard with operator {op!r}"
                    )
                op = "="

            minor = int(minor) if minor is not None else None
            patch = int(patch) if patch is not None else None

            if pre and patch is None:
                raise InvalidVersionRequirement(
                    f"Invalid version requirement {requirement!r}: "
                    f"pre-release on a partial version"
                )
            if pre:
                prerelease_triples.add((major, minor, patch))

            try:
                constraints.extend(get_constraints(op, major, minor, patch, pre))
            except ValueError as e:
                raise InvalidVersionRequirement(
                    f"Invalid version requirement {requirement!r}: {e}"
                ) from e

        return cls(
            requirement=requirement.strip(),
            constraints=tuple(constraints),
            prerelease_triples=frozenset(prerelease_triples),
        )

    def matches(self, version: Union[str, SemverVersion]) -> bool:
        """
        Return True if ``version`` satisfies this requirement.

        >>> req = CargoVersionRequirement.from_string("^0.3.1")
        >>> req.matches("0.3.9"), req.matches("0.4.0"), req.matches("0.3.0")
        (True, False, False)
        >>> req.matches("0.3.2-alpha")
        False
        >>> CargoVersionRequirement.from_string(">= 0.3.2-alpha").matches("0.3.2-beta")
        True
        """
        version = to_semver(version)
        for constraint in self.constraints:
            compare = COMPARATORS[constraint.comparator]
            if not compare(version, constraint.version):
                return False

        semantic_version = version.value
        if semantic_version.prerelease:
            triple = (semantic_version.major, semantic_version.minor, semantic_version.patch)
            return triple in self.prerelease_triples
        return True

    def __contains__(self, version) -> bool:
        return self.matches(version)

    def __str__(self):
        return self.requirement

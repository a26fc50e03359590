#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import logging
import re
from typing import Iterable
from typing import Tuple

import toml

logger = logging.getLogger(__name__)

# identifiers are matched whole and in their canonical case
cve_regex = re.compile(r"CVE-[0-9]{4}-[0-9]{4,19}")
is_cve = cve_regex.fullmatch

ghsa_regex = re.compile(r"GHSA-[0-9a-z]{4}-[0-9a-z]{4}-[0-9a-z]{4}")
is_ghsa = ghsa_regex.fullmatch

rustsec_regex = re.compile(r"RUSTSEC-[0-9]{4}-[0-9]{4}")
is_rustsec = rustsec_regex.fullmatch

talos_regex = re.compile(r"TALOS-[0-9]{4}-[0-9]{4}")
is_talos = talos_regex.fullmatch

# any other identifier such as OSV-2021-1 or PYSEC-2021-13
advisory_id_regex = re.compile(r"[A-Za-z][A-Za-z0-9]*(?:[-_.:][A-Za-z0-9]+)+")
is_advisory_id = advisory_id_regex.fullmatch


def get_toml_lines(lines: Iterable[str]) -> Iterable[str]:
    """
    Yield lines of TOML extracted from an iterable of text ``lines``.
    The lines are expected to be from a RustSec Markdown advisory file with
    embedded TOML metadata.

    For example::

    >>> text = '''
    ... ```toml
    ... [advisory]
    ... id = "RUST-001"
    ...
    ... [versions]
    ... patched = [">= 1.2.1"]
    ... ```
    ... # Use-after-free with objects returned by `Stream`'s `get_format_info`
    ...
    ... Affected versions contained a pair of use-after-free issues with the objects.
    ... '''
    >>> list(get_toml_lines(text.splitlines()))
    ['', '[advisory]', 'id = "RUST-001"', '', '[versions]', 'patched = [">= 1.2.1"]']
    """

    for line in lines:
        line = line.strip()
        if line.startswith("```toml"):
            continue
        elif line.endswith("```"):
            break
        else:
            yield line


def split_toml_front_matter(text: str) -> Tuple[str, str]:
    """
    Return a tuple of (TOML front matter, markdown body) strings split from a
    RustSec advisory ``text``. The front matter is the content of the leading
    triple-backtick TOML block. Each can be an empty string.

    For example::

    >>> split_toml_front_matter('```toml\\n[advisory]\\nid = "X"\\n```\\n\\n# Title\\n')
    ('[advisory]\\nid = "X"', '# Title')
    >>> split_toml_front_matter("no front matter")
    ('', 'no front matter')
    """
    lines = text.strip().splitlines()
    if not lines or not lines[0].strip().startswith("```toml"):
        return "", text.strip()

    for index, line in enumerate(lines[1:], start=1):
        if line.strip().endswith("```"):
            front_matter = "\n".join(get_toml_lines(lines[: index + 1]))
            markdown = "\n".join(lines[index + 1 :])
            return front_matter.strip(), markdown.strip()

    return "", text.strip()


def data_from_toml(text: str) -> dict:
    """
    Return a mapping of data from a TOML ``text``.

    For example::

    >>> data_from_toml('[advisory]\\nid = "RUST1"\\n\\n[versions]\\npatched = [">= 1"]')
    {'advisory': {'id': 'RUST1'}, 'versions': {'patched': ['>= 1']}}
    """
    return toml.loads(text)


def split_markdown_title(markdown: str) -> Tuple[str, str]:
    """
    Return a tuple of (title, body) from a ``markdown`` string where the title
    is the first level-one heading. The title is empty if there is no such
    heading before the body.

    For example::

    >>> split_markdown_title("# Title of it\\n\\nSome body text.\\n\\nMore.")
    ('Title of it', 'Some body text.\\n\\nMore.')
    >>> split_markdown_title("Only a body.")
    ('', 'Only a body.')
    """
    lines = markdown.strip().splitlines()
    if lines and lines[0].startswith("# "):
        title = lines[0][2:].strip()
        body = "\n".join(lines[1:]).strip()
        return title, body
    return "", markdown.strip()


def get_item(dictionary: dict, *attributes):
    """
    Return `item` by going through all the `attributes` present in the `dictionary`

    Do a DFS for the `item` in the `dictionary` by traversing the `attributes`
    and return None if can not traverse through the `attributes`
    For example:
    >>> get_item({'a': {'b': {'c': 'd'}}}, 'a', 'b', 'c')
    'd'
    >>> assert(get_item({'a': {'b': {'c': 'd'}}}, 'a', 'b', 'e')) == None
    """
    for attribute in attributes:
        if not dictionary:
            return
        if not isinstance(dictionary, dict):
            logger.error("dictionary must be of type `dict`")
            return
        if attribute not in dictionary:
            logger.debug(f"Missing attribute {attribute} in {dictionary}")
            return
        dictionary = dictionary[attribute]
    return dictionary


def dedupe(items):
    """
    Return a list of ``items`` without duplicates, keeping the first
    occurrence order.

    >>> dedupe(["a", "b", "a", "c", "b"])
    ['a', 'b', 'c']
    """
    return list(dict.fromkeys(items))

#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

import json
import logging

import click
import saneyaml

from csafvex import __version__
from csafvex import settings
from csafvex.advisory import InvalidAdvisoryError
from csafvex.advisory import load_advisory
from csafvex.converter import ConversionError
from csafvex.converter import convert
from csafvex.package_managers import CratesVersionAPI
from csafvex.package_managers import StaticVersionAPI

logger = logging.getLogger(__name__)


def read_version_list(version_list):
    """
    Return a list of versions from a ``version_list`` file object with one
    version per line. Blank lines and lines starting with # are ignored.
    """
    versions = []
    for line in version_list:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        versions.append(line)
    return versions


def get_version_api(package_name, version_list=None):
    if version_list:
        versions = read_version_list(version_list)
        logger.debug(f"Read {len(versions)} versions of {package_name!r} from {version_list.name}")
        return StaticVersionAPI({package_name: versions})
    logger.debug(f"Fetching versions of {package_name!r} from crates.io")
    return CratesVersionAPI()


def write_output(csaf, output, as_yaml=False, indent=2):
    data = csaf.to_dict()
    if as_yaml:
        output.write(saneyaml.dump(data))
    else:
        json.dump(data, output, indent=indent)
        output.write("\n")


@click.command()
@click.argument(
    "advisory",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    metavar="ADVISORY",
)
@click.option(
    "--version-list",
    "version_list",
    type=click.File("r"),
    required=False,
    metavar="FILE",
    help="Read the package versions from FILE with one version per line, "
    "oldest first, instead of fetching them from crates.io.",
)
@click.option(
    "-o",
    "--output",
    "output",
    type=click.File("w"),
    default="-",
    metavar="FILE",
    help="Write the CSAF document to FILE. Use '-' to print on screen. [default: '-']",
)
@click.option(
    "--yaml",
    "as_yaml",
    is_flag=True,
    help="Write the CSAF document as YAML instead of JSON.",
)
@click.option(
    "--indent",
    "indent",
    type=click.IntRange(min=0),
    default=2,
    show_default=True,
    help="Indentation of the JSON output.",
)
@click.version_option(version=__version__)
@click.help_option("-h", "--help")
def handler(advisory, version_list, output, as_yaml, indent):
    """
    Convert the RustSec ADVISORY Markdown file to a CSAF VEX document.
    """
    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    try:
        rustsec_advisory = load_advisory(advisory)
    except InvalidAdvisoryError as e:
        raise click.ClickException(f"Invalid advisory {advisory}: {e}") from e

    version_api = get_version_api(rustsec_advisory.package, version_list)
    try:
        csaf = convert(rustsec_advisory, version_api)
    except ConversionError as e:
        raise click.ClickException(str(e)) from e

    write_output(csaf, output, as_yaml=as_yaml, indent=indent)


if __name__ == "__main__":
    handler()

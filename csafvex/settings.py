#
# Copyright (c) nexB Inc. and others. All rights reserved.
# VulnerableCode is a trademark of nexB Inc.
# SPDX-License-Identifier: Apache-2.0
# See http://www.apache.org/licenses/LICENSE-2.0 for the license text.
# See https://github.com/aboutcode-org/vulnerablecode for support or download.
# See https://aboutcode.org for more information about nexB OSS projects.
#

from pathlib import Path

import environ

from csafvex import __version__

CSAFVEX_VERSION = __version__

PROJECT_DIR = Path(__file__).resolve().parent
ROOT_DIR = PROJECT_DIR.parent

# Environment

ENV_FILE = "/etc/csafvex/.env"
if not Path(ENV_FILE).exists():
    ENV_FILE = ROOT_DIR / ".env"

env = environ.Env()
environ.Env.read_env(str(ENV_FILE))

# Registry

CRATES_API_URL = env.str("CSAFVEX_CRATES_API_URL", default="https://crates.io/api/v1/crates")

# crates.io rejects requests without a descriptive User-Agent
USER_AGENT = env.str("CSAFVEX_USER_AGENT", default=f"csafvex/{CSAFVEX_VERSION}")

REQUEST_TIMEOUT = env.int("CSAFVEX_REQUEST_TIMEOUT", default=30)

# Logging

LOG_LEVEL = env.str("CSAFVEX_LOG_LEVEL", default="INFO")

# Conversion

# Emit a score pointing at the "INVALID" product id when an advisory has a
# CVSS vector but no registry version is vulnerable, instead of omitting it.
EMIT_INVALID_SCORE_PRODUCT = env.bool("CSAFVEX_EMIT_INVALID_SCORE_PRODUCT", default=False)

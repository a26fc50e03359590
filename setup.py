#!/usr/bin/env python
# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

requirements = [
    r.strip() for r in open("requirements.txt") if r.strip() and not r.strip().startswith("#")
]

desc = "Convert RustSec security advisories to CSAF VEX documents."

setup(
    name="csafvex",
    version="0.4.0",
    license="Apache-2.0",
    description=desc,
    long_description=desc,
    author="nexB Inc. and others",
    author_email="info@aboutcode.org",
    url="https://github.com/aboutcode-org/vulnerablecode",
    packages=find_packages(),
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Security",
        "Topic :: Utilities",
    ],
    keywords=[
        "open source",
        "vulnerability",
        "csaf",
        "vex",
        "rustsec",
    ],
    python_requires=">=3.9",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest >= 7.0.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "csafvex=csafvex.cli:handler",
        ],
    },
)

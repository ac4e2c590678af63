# File: capicefilter/setup.py
# Location: capicefilter/setup.py
"""
Setup script for capicefilter.

This file configures how the package is built, installed, and what
dependencies are required.
"""

import os
from setuptools import setup, find_packages

# Load version from version.py without importing the module
version = {}
with open(os.path.join("capicefilter", "version.py")) as f:
    exec(f.read(), version)

# Read the README for the long description
this_dir = os.path.abspath(os.path.dirname(__file__))
with open(os.path.join(this_dir, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="capicefilter",
    version=version["__version__"],
    description=(
        "Quick filtering of CAPICE and GnomAD annotated VCF files and validation "
        "of precomputed CAPICE score tables."
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["capicefilter", "capicefilter.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pandas",
        "jinja2",
    ],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "capicefilter=capicefilter.cli:main",
            "capice-precomp-validator=capicefilter.cli:validate_main",
        ]
    },
    include_package_data=True,
    package_data={"capicefilter": ["config.json", "templates/*.txt"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
    ],
)

# File: capicefilter/__init__.py
# Location: capicefilter/capicefilter/__init__.py

"""
capicefilter Package.

This package provides a quick filter that reports potentially clinically
interesting variants from CAPICE and GnomAD annotated VCF files, and a
validator for precomputed CAPICE score tables.
"""

from .version import __version__

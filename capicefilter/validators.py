# File: capicefilter/validators.py
# Location: capicefilter/capicefilter/validators.py

"""
Validation module for capicefilter command-line arguments.

This module provides functions to validate:
- Input files (suffix, existence)
- Output files (must not exist yet)
- Thresholds (decimal numbers between 0.0 and 1.0)
- Case and control sample IDs (non-empty)

A failed validation logs the reason and exits with status 0 before any
input is read.
"""

import logging
import os
import sys
from typing import List, Optional

logger = logging.getLogger("capicefilter")


def _reject(message: str) -> None:
    logger.error(message)
    sys.exit(0)


def validate_input_file(path: str, suffix: str, description: str) -> None:
    """
    Validate that an input file has the expected suffix and exists.

    Parameters
    ----------
    path : str
        Path to the input file.
    suffix : str
        Required file name ending, e.g. '.vcf.gz'.
    description : str
        Human-readable name of the file used in messages.

    Raises
    ------
    SystemExit
        If the file name has the wrong suffix or the file does not exist.
    """
    name = os.path.basename(path)
    if not name.endswith(suffix):
        _reject(
            f"Input {description} file name '{name}' does not end in '{suffix}'. "
            "Are you sure this is a valid input?"
        )
    if not os.path.exists(path):
        _reject(f"Input {description} file not found at {os.path.abspath(path)}.")


def validate_output_file(path: str) -> None:
    """Validate that the output file does not exist yet."""
    if os.path.exists(path):
        _reject(
            f"Output file already exists at {os.path.abspath(path)}. "
            "Please delete it first, or supply a different output file name."
        )


def validate_threshold(value: str, name: str) -> float:
    """
    Parse and range-check a threshold given on the command line.

    Parameters
    ----------
    value : str
        Raw argument value.
    name : str
        Threshold name used in messages ('CAPICE' or 'GnomAD').

    Returns
    -------
    float
        The threshold, between 0.0 and 1.0 inclusive.
    """
    try:
        threshold = float(value)
    except ValueError:
        _reject(f"{name} threshold is not a decimal number: {value}")
    if not 0.0 <= threshold <= 1.0:
        _reject(f"{name} threshold must be between 0.0 and 1.0 instead of {threshold}")
    return threshold


def validate_sample_ids(case_id: str, control_ids: Optional[str]) -> List[str]:
    """Validate the case sample ID and split the comma-separated control IDs."""
    if not case_id:
        _reject("Case sample ID may not be empty.")
    if control_ids is None:
        return []
    controls = control_ids.split(",")
    if any(not control for control in controls):
        _reject("Control sample ID may not be empty.")
    return controls

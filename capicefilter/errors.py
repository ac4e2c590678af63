"""
Exception classes for capicefilter.

Two kinds of failure exist:
- configuration errors (unknown samples, unreadable configuration), raised
  before any record is processed
- data-consistency errors (malformed annotation, genotype, VCF line or score
  table row, or a classifier state outside the covered cases), raised as soon
  as the offending line is seen

Neither is recovered from; both propagate to the command-line entry points.
"""

from typing import Dict, Optional


class CapiceFilterError(Exception):
    """Base exception for all capicefilter errors."""

    def __init__(self, message: str, details: Optional[Dict] = None):
        """Initialize capicefilter error.

        Parameters
        ----------
        message : str
            Error message
        details : dict, optional
            Additional error details
        """
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(CapiceFilterError):
    """Raised when the run is configured with values the input cannot satisfy."""


class DataValidationError(CapiceFilterError):
    """Raised when input data violates the expected contract."""

    def __init__(self, message: str, line: Optional[str] = None, details: Optional[Dict] = None):
        """Initialize data validation error, appending the offending line if given."""
        if line is not None:
            message = f"{message} at line: {line}"
        super().__init__(message, details)
        self.line = line


class AnnotationFormatError(DataValidationError):
    """Raised when a CSQ or CAPICE annotation cannot be read."""


class GenotypeFormatError(DataValidationError):
    """Raised when a genotype call is not a diploid call on the record's alleles."""


class VcfFormatError(DataValidationError):
    """Raised when a VCF header or data line is malformed."""


class InconsistentStateError(DataValidationError):
    """Raised when a record reaches a classification state that should not exist."""


class ScoreTableValidationError(DataValidationError):
    """Raised when a precomputed score table violates its structure."""

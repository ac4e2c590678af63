"""
Genotype utility functions for variant classification.

This module provides functions to parse genotype strings found in VCF files
and to count the alternative alleles a sample carries.
"""

import re
from typing import List, Sequence, Tuple

from .errors import GenotypeFormatError

AUTOSOME_RE = re.compile(r"\d+(\.\d+)?")


def parse_genotype(gt: str) -> Tuple[str, ...]:
    """
    Split a genotype string into allele index tokens.

    Parameters
    ----------
    gt : str
        Genotype string (e.g., "0/1", "1|1", "./.")

    Returns
    -------
    Tuple[str, ...]
        Allele index tokens, "." for a missing allele. A bare "." or an
        empty value is read as a missing diploid call.
    """
    if not gt or gt == ".":
        return (".", ".")

    # Handle both / and | separators
    return tuple(re.split(r"[/|]", gt))


def genotype_alleles(gt: str, ref: str, alts: Sequence[str], missing: str = ".") -> List[str]:
    """
    Translate a genotype string into the alleles it calls.

    Parameters
    ----------
    gt : str
        Genotype string
    ref : str
        Reference allele of the record
    alts : Sequence[str]
        Alternative alleles of the record, in ALT column order
    missing : str
        Marker used for a missing allele

    Returns
    -------
    List[str]
        One entry per allele slot: the reference allele, an alternative
        allele, or the missing marker.

    Raises
    ------
    GenotypeFormatError
        If an allele index is not a number or points outside the ALT column.
    """
    alleles = []
    for token in parse_genotype(gt):
        if token == ".":
            alleles.append(missing)
            continue
        if not token.isdigit():
            raise GenotypeFormatError(f"Allele index '{token}' in genotype '{gt}' is not a number")
        index = int(token)
        if index == 0:
            alleles.append(ref)
        elif index <= len(alts):
            alleles.append(alts[index - 1])
        else:
            raise GenotypeFormatError(
                f"Allele index {index} in genotype '{gt}' exceeds the {len(alts)} ALT allele(s)"
            )
    return alleles


def alt_allele_count(alleles: Sequence[str], ref: str, missing: str = ".") -> int:
    """
    Count the alleles that are neither missing nor the reference allele.

    Only diploid calls are supported; any other number of alleles is an
    input contract violation.

    Parameters
    ----------
    alleles : Sequence[str]
        Alleles called for one sample
    ref : str
        Reference allele of the record
    missing : str
        Marker used for a missing allele

    Returns
    -------
    int
        Number of alternate alleles (0, 1, or 2)
    """
    if len(alleles) != 2:
        raise GenotypeFormatError(
            f"Expected a diploid genotype but found {len(alleles)} allele(s): {list(alleles)}"
        )
    return sum(1 for allele in alleles if allele != missing and allele != ref)


def is_autosomal(chrom: str) -> bool:
    """Check if a chromosome name is a plain number, optionally with a decimal suffix."""
    return AUTOSOME_RE.fullmatch(chrom) is not None

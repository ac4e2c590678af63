# File: capicefilter/stats.py
# Location: capicefilter/capicefilter/stats.py

"""
Statistics module for capicefilter.

Provides functions to compute:
- Run statistics of the quick filter (processed, reported and dropped counts).
- Per-chromosome position ranges found by the score table validator.

All functions return DataFrames that can be written as TSV.
"""

import logging
from typing import Mapping

import pandas as pd

from .context import REPORT_CATEGORY_ORDER, ClassificationContext, DropReason

logger = logging.getLogger("capicefilter")


def compute_run_stats(context: ClassificationContext) -> pd.DataFrame:
    """
    Compute summary statistics of a resolved quick filter run.

    Parameters
    ----------
    context : ClassificationContext
        Context after compound heterozygote resolution.

    Returns
    -------
    pd.DataFrame
        A DataFrame with 'metric' and 'value' columns.
    """
    logger.debug("Computing run stats...")
    counters = context.counters
    metric_rows = [
        ["Variants processed", counters.total_processed],
        ["Candidates reported", context.total_reported],
        ["Variants dropped", counters.total_dropped],
    ]
    for category in REPORT_CATEGORY_ORDER:
        metric_rows.append([f"Reported_{category.name.lower()}", len(context.reported[category])])
    for reason in DropReason:
        metric_rows.append([f"Dropped_{reason.name.lower()}", counters.dropped[reason]])
    metric_rows.append(["Variants without GnomAD", counters.without_gnomad])
    metric_rows.append(["Variants without CAPICE", counters.without_capice])

    stats_df = pd.DataFrame(metric_rows, columns=["metric", "value"])
    logger.debug("Run stats computed.")
    return stats_df


def compute_chromosome_ranges(ranges: Mapping) -> pd.DataFrame:
    """
    Tabulate the position range of each validated chromosome.

    Parameters
    ----------
    ranges : Mapping[str, ChromosomeRange]
        Ranges in the order the chromosomes were encountered.

    Returns
    -------
    pd.DataFrame
        Columns CHROM, MIN_POS and MAX_POS.
    """
    rows = [[r.chrom, r.min_pos, r.max_pos] for r in ranges.values()]
    return pd.DataFrame(rows, columns=["CHROM", "MIN_POS", "MAX_POS"])


def write_stats(df: pd.DataFrame, output_file: str) -> None:
    """Write a statistics DataFrame as TSV."""
    df.to_csv(output_file, sep="\t", index=False, header=True, mode="w")
    logger.info(f"Statistics written to {output_file}")

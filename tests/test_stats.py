"""Tests for run statistics and validator summaries."""

import pandas as pd

from capicefilter.context import ClassificationContext, DropReason, ReportCategory, SampleIndex
from capicefilter.precomputed_validator import ChromosomeRange
from capicefilter.stats import compute_chromosome_ranges, compute_run_stats, write_stats


def test_compute_run_stats(make_record):
    context = ClassificationContext(SampleIndex.resolve(["S1"], "S1"))
    context.counters.total_processed = 3
    context.report(ReportCategory.DE_NOVO, make_record(genotypes=("0/1",)))
    context.drop(DropReason.COMMON_GNOMAD)
    context.drop(DropReason.COMMON_GNOMAD)
    context.counters.without_capice = 2

    df = compute_run_stats(context)
    stats = dict(zip(df["metric"], df["value"]))

    assert list(df.columns) == ["metric", "value"]
    assert stats["Variants processed"] == 3
    assert stats["Candidates reported"] == 1
    assert stats["Variants dropped"] == 2
    assert stats["Reported_de_novo"] == 1
    assert stats["Reported_compound_het"] == 0
    assert stats["Dropped_common_gnomad"] == 2
    assert stats["Dropped_no_second_hit"] == 0
    assert stats["Variants without CAPICE"] == 2
    assert stats["Variants without GnomAD"] == 0


def test_compute_chromosome_ranges():
    ranges = {"1": ChromosomeRange("1", 10, 20), "X": ChromosomeRange("X", 1, 5)}
    df = compute_chromosome_ranges(ranges)
    assert list(df.columns) == ["CHROM", "MIN_POS", "MAX_POS"]
    assert df.values.tolist() == [["1", 10, 20], ["X", 1, 5]]


def test_write_stats(tmp_path):
    output = tmp_path / "stats.tsv"
    write_stats(pd.DataFrame([["a", 1], ["b", 2]], columns=["metric", "value"]), str(output))
    assert output.read_text().splitlines() == ["metric\tvalue", "a\t1", "b\t2"]

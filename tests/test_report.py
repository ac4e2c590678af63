"""Tests for the candidates report."""

import pytest

from capicefilter.comp_het import resolve_compound_hets
from capicefilter.context import ClassificationContext, DropReason, ReportCategory, SampleIndex
from capicefilter.quick_filter import QuickFilterSettings
from capicefilter.report import preview, render_report, retain_sample_columns, write_report


@pytest.fixture
def settings(tmp_path):
    return QuickFilterSettings(
        input_path=str(tmp_path / "input.vcf.gz"),
        output_path=str(tmp_path / "report.vcf"),
        capice_threshold=0.2,
        gnomad_threshold=0.05,
        case_id="S2",
        control_ids=["S3"],
    )


@pytest.fixture
def context(make_record):
    """Resolved context over four samples with case S2 and control S3."""
    index = SampleIndex.resolve(["S1", "S2", "S3", "S4"], "S2", ["S3"])
    context = ClassificationContext(index)
    context.counters.total_processed = 4
    context.report(
        ReportCategory.NON_AUTOSOMAL,
        make_record(chrom="X", pos=10, genotypes=("0/0", "1/1", "0/0", "0/1")),
    )
    context.report(
        ReportCategory.HOMOZYGOUS_ALT,
        make_record(chrom="2", pos=20, genotypes=("0/0", "1/1", "0/1", "0/0")),
    )
    context.drop(DropReason.LOW_CAPICE)
    context.drop(DropReason.CASE_NOT_INFORMATIVE)
    context.counters.without_gnomad = 1
    resolve_compound_hets(context)
    return context


class TestRetainSampleColumns:
    def test_keeps_fixed_and_selected_columns(self):
        line = "\t".join(["1", "5", ".", "A", "T", ".", "PASS", ".", "GT", "0/0", "0/1", "1/1"])
        assert retain_sample_columns(line, [2, 0]).split("\t")[9:] == ["0/0", "1/1"]
        assert retain_sample_columns(line, [1]).split("\t")[:9] == line.split("\t")[:9]

    def test_no_samples(self):
        line = "1\t5\t.\tA\tT\t.\tPASS\t.\tGT\t0/1"
        assert retain_sample_columns(line, []) == "1\t5\t.\tA\tT\t.\tPASS\t.\tGT"


class TestPreview:
    def test_shortens_and_replaces_tabs(self):
        line = "1\t12345\t.\tA\tT\t" + "x" * 100
        shortened = preview(line)
        assert len(shortened) == 50
        assert "\t" not in shortened
        assert shortened.startswith("1 12345 . A T ")

    def test_short_line_untouched(self):
        assert preview("1\t2", width=10) == "1 2"


def candidate_previews(text):
    lines = text.splitlines()
    start = next(i for i, line in enumerate(lines) if line.startswith("## Potential candidates"))
    end = next(i for i, line in enumerate(lines) if line.startswith("#CHROM"))
    return lines[start + 1 : end]


class TestRenderReport:
    def test_metadata_block(self, context, settings):
        lines = render_report(context, settings).splitlines()
        assert lines[0].startswith("## Output of capicefilter")
        assert "## - CAPICE threshold: 0.2" in lines
        assert "## - GnomAD threshold: 0.05" in lines
        assert "## - Case sample ID: S2" in lines
        assert "## - Control sample IDs: [S3]" in lines
        assert "## Total number of variants processed: 4" in lines
        assert "## Total number of potential candidates found: 2" in lines
        assert "## Total number of variants dropped: 2" in lines
        assert "## - Variants without GnomAD annotation: 1" in lines
        assert "## - Variants without CAPICE annotation: 0" in lines

    def test_paths_are_absolute(self, context, settings, tmp_path):
        text = render_report(context, settings)
        assert f"## - Input file: {(tmp_path / 'input.vcf.gz').resolve()}" in text

    def test_breakdowns_use_labels(self, context, settings):
        lines = render_report(context, settings).splitlines()
        assert "## - " + ReportCategory.HOMOZYGOUS_ALT.label + "1" in lines
        assert "## - " + ReportCategory.COMPOUND_HET.label + "0" in lines
        assert "## - " + DropReason.LOW_CAPICE.label + "1" in lines
        assert "## - " + DropReason.NO_SECOND_HIT.label + "0" in lines

    def test_header_has_retained_samples_only(self, context, settings):
        lines = render_report(context, settings).splitlines()
        header = [line for line in lines if line.startswith("#CHROM")]
        assert header == [
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS2\tS3"
        ]

    def test_candidates_in_category_order(self, context, settings):
        lines = render_report(context, settings).splitlines()
        start = next(i for i, line in enumerate(lines) if line.startswith("#CHROM"))
        body = lines[start + 1 :]
        assert [line.split("\t")[0] for line in body] == ["2", "X"]
        assert [line.split("\t")[9:] for line in body] == [["1/1", "0/1"], ["1/1", "0/0"]]

    def test_previews_precede_header(self, context, settings):
        previews = candidate_previews(render_report(context, settings))
        assert previews[0].startswith("## " + ReportCategory.HOMOZYGOUS_ALT.label + "2 20 ")
        assert previews[1].startswith("## " + ReportCategory.NON_AUTOSOMAL.label + "X 10 ")

    def test_preview_width_from_config(self, context, settings):
        text = render_report(context, settings, {"report_preview_width": 4})
        previews = candidate_previews(text)
        assert len(previews) == 2
        assert previews[0] == "## " + ReportCategory.HOMOZYGOUS_ALT.label + "2 20"

    def test_no_controls(self, settings):
        index = SampleIndex.resolve(["S1"], "S1")
        context = ClassificationContext(index)
        resolve_compound_hets(context)
        settings.case_id = "S1"
        settings.control_ids = []
        text = render_report(context, settings)
        assert "## - Control sample IDs: []" in text
        assert text.rstrip("\n").splitlines()[-1] == (
            "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tS1"
        )


def test_write_report(context, settings):
    write_report(settings.output_path, context, settings)
    with open(settings.output_path, encoding="utf-8") as handle:
        content = handle.read()
    assert content == render_report(context, settings)
    assert content.endswith("\n")

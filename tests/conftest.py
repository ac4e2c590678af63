"""Shared pytest fixtures for all test modules."""

import gzip
from pathlib import Path
from typing import Optional, Sequence

import pytest

from capicefilter.vcf_reader import VariantRecord

# VEP CSQ layout used throughout the tests: SYMBOL at 3, gnomAD_AF at 26.
CSQ_N_FIELDS = 30
CSQ_GENE_INDEX = 3
CSQ_GNOMAD_AF_INDEX = 26

VCF_META = [
    "##fileformat=VCFv4.2",
    '##INFO=<ID=CAPICE,Number=A,Type=Float,Description="CAPICE pathogenicity prediction">',
    '##INFO=<ID=CSQ,Number=.,Type=String,Description="Consequence annotations from Ensembl VEP">',
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">',
]


def build_csq_entry(gene: str = "", gnomad_af: str = "", n_fields: int = CSQ_N_FIELDS) -> str:
    """Build one pipe-delimited CSQ transcript record."""
    fields = [""] * n_fields
    fields[0] = "T"
    fields[1] = "missense_variant"
    fields[2] = "MODERATE"
    if n_fields > CSQ_GENE_INDEX:
        fields[CSQ_GENE_INDEX] = gene
    if n_fields > CSQ_GNOMAD_AF_INDEX:
        fields[CSQ_GNOMAD_AF_INDEX] = gnomad_af
    return "|".join(fields)


def build_info(
    capice: Optional[str] = "0.5", genes: Sequence[str] = ("GENE1",), gnomad_af: str = "0.001"
) -> str:
    """Build an INFO column with a CAPICE entry and one CSQ record per gene."""
    entries = []
    if capice is not None:
        entries.append(f"CAPICE={capice}")
    if genes:
        entries.append("CSQ=" + ",".join(build_csq_entry(g, gnomad_af) for g in genes))
    return ";".join(entries) if entries else "."


def build_vcf_line(
    chrom: str = "1",
    pos: int = 100,
    ref: str = "A",
    alt: str = "T",
    info: str = ".",
    genotypes: Sequence[str] = ("0/1", "0/0"),
    variant_id: str = ".",
) -> str:
    columns = [chrom, str(pos), variant_id, ref, alt, "50", "PASS", info, "GT", *genotypes]
    return "\t".join(columns)


@pytest.fixture
def csq_entry():
    """Factory for CSQ transcript records."""
    return build_csq_entry


@pytest.fixture
def make_line():
    """Factory for VCF data lines with CAPICE and CSQ annotations."""

    def _make_line(
        chrom="1",
        pos=100,
        ref="A",
        alt="T",
        capice="0.5",
        genes=("GENE1",),
        gnomad_af="0.001",
        genotypes=("0/1", "0/0"),
        variant_id=".",
    ) -> str:
        info = build_info(capice, genes, gnomad_af)
        return build_vcf_line(chrom, pos, ref, alt, info, genotypes, variant_id)

    return _make_line


@pytest.fixture
def make_record(make_line):
    """Factory for VariantRecord objects; accepts the same arguments as make_line."""

    def _make_record(**kwargs) -> VariantRecord:
        return VariantRecord.from_line(make_line(**kwargs))

    return _make_record


@pytest.fixture
def write_vcf(tmp_path):
    """Factory writing a gzip compressed VCF with the given samples and data lines."""

    def _write_vcf(
        lines: Sequence[str], samples: Sequence[str] = ("S1", "S2"), name: str = "input.vcf.gz"
    ) -> Path:
        path = tmp_path / name
        header = "\t".join(
            ["#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT", *samples]
        )
        with gzip.open(path, "wt", encoding="utf-8") as handle:
            for meta in VCF_META:
                handle.write(meta + "\n")
            handle.write(header + "\n")
            for line in lines:
                handle.write(line + "\n")
        return path

    return _write_vcf


@pytest.fixture
def write_score_table(tmp_path):
    """Factory writing a gzip compressed precomputed score table."""

    def _write_score_table(rows: Sequence[str], name: str = "scores.tsv.gz") -> Path:
        path = tmp_path / name
        with gzip.open(path, "wt", encoding="utf-8") as handle:
            handle.write("## CAPICE precomputed SNV scores\n")
            handle.write("#Chr\tPos\tRef\tAlt\tPHRED\n")
            for row in rows:
                handle.write(row + "\n")
        return path

    return _write_score_table

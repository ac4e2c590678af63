"""
ClassificationContext - run-scoped state of one quick filter run.

The context is created once per input file, passed by reference into the
classifier for every record, and finalized by compound heterozygote
resolution after the last record has been read. It carries the sample
offsets, the counters, the report buckets and the per-gene deferred records.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Sequence

from .errors import ConfigurationError
from .vcf_reader import VariantRecord

logger = logging.getLogger(__name__)


class ReportCategory(Enum):
    """Categories of reported candidates, with their report labels."""

    HOMOZYGOUS_ALT = "Potential homozygous                    : "
    DE_NOVO = "Potential de novo/uncontrolled hetzygote: "
    COMPOUND_HET = "Potential compound heterozygote         : "
    NON_AUTOSOMAL = "Potential non-autosomal                 : "

    @property
    def label(self) -> str:
        return self.value


# Output order of categories in the report; part of the report format.
REPORT_CATEGORY_ORDER = (
    ReportCategory.HOMOZYGOUS_ALT,
    ReportCategory.DE_NOVO,
    ReportCategory.COMPOUND_HET,
    ReportCategory.NON_AUTOSOMAL,
)


class DropReason(Enum):
    """Reasons for dropping a variant, with their report descriptions."""

    LOW_CAPICE = "CAPICE score below threshold = "
    COMMON_GNOMAD = "GnomAD allele frequency over threshold = "
    CASE_NOT_INFORMATIVE = "Case genotype null or reference = "
    HOMOZYGOUS_CONTROL = "Homozygous control was present = "
    NO_SECOND_HIT = "Flagged for compound but no second hit: "

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class SampleIndex:
    """Case and control sample offsets into the VCF sample columns.

    Attributes
    ----------
    sample_names : List[str]
        Sample names in VCF column order
    case_offset : int
        Offset of the case sample
    control_offsets : List[int]
        Offsets of the control samples, in the order they were given
    """

    sample_names: List[str]
    case_offset: int
    control_offsets: List[int]

    @classmethod
    def resolve(
        cls, sample_names: Sequence[str], case_id: str, control_ids: Sequence[str] = ()
    ) -> "SampleIndex":
        """Look up the case and control sample IDs among the VCF sample names.

        Raises
        ------
        ConfigurationError
            If a sample ID is not in the VCF.

        Notes
        -----
        A control ID equal to the case ID is ignored, as are repeated control IDs.
        """
        names = list(sample_names)
        if case_id not in names:
            raise ConfigurationError(f"index sample id not found: {case_id}")
        control_offsets = []
        for control in control_ids:
            if control not in names:
                raise ConfigurationError(f"control sample id not found: {control}")
            if control == case_id:
                logger.warning("Case sample %s also given as control, ignored as control", control)
                continue
            offset = names.index(control)
            if offset not in control_offsets:
                control_offsets.append(offset)
        return cls(names, names.index(case_id), control_offsets)

    @property
    def retained_offsets(self) -> List[int]:
        """Sorted offsets of the case and all controls."""
        return sorted({self.case_offset, *self.control_offsets})

    @property
    def retained_names(self) -> List[str]:
        return [self.sample_names[i] for i in self.retained_offsets]


@dataclass
class RunCounters:
    """Counters aggregated over one run."""

    total_processed: int = 0
    dropped: Dict[DropReason, int] = field(
        default_factory=lambda: {reason: 0 for reason in DropReason}
    )
    without_capice: int = 0
    without_gnomad: int = 0

    @property
    def total_dropped(self) -> int:
        return sum(self.dropped.values())


@dataclass
class ClassificationContext:
    """Mutable state of one classification run.

    Attributes
    ----------
    sample_index : SampleIndex
        Resolved case and control offsets
    counters : RunCounters
        Processed, dropped and missing-annotation counters
    reported : Dict[ReportCategory, List[VariantRecord]]
        Reported records per category, in declared category order
    gene_buckets : Dict[str, List[VariantRecord]]
        Deferred heterozygous records per gene symbol, in insertion order
    deferred_without_gene : List[VariantRecord]
        Deferred records without any gene symbol; they cannot be promoted
    resolved : bool
        Whether compound heterozygote resolution has run
    """

    sample_index: SampleIndex
    counters: RunCounters = field(default_factory=RunCounters)
    reported: Dict[ReportCategory, List[VariantRecord]] = field(
        default_factory=lambda: {category: [] for category in REPORT_CATEGORY_ORDER}
    )
    gene_buckets: Dict[str, List[VariantRecord]] = field(default_factory=dict)
    deferred_without_gene: List[VariantRecord] = field(default_factory=list)
    resolved: bool = False

    def report(self, category: ReportCategory, record: VariantRecord) -> None:
        self.reported[category].append(record)

    def drop(self, reason: DropReason) -> None:
        self.counters.dropped[reason] += 1

    def defer(self, record: VariantRecord, genes) -> None:
        """File a heterozygous record under every gene symbol it is annotated with."""
        if not genes:
            logger.debug("Deferred record without gene symbol: %s:%s", record.chrom, record.pos)
            self.deferred_without_gene.append(record)
            return
        for gene in sorted(genes):
            self.gene_buckets.setdefault(gene, []).append(record)

    @property
    def reported_counts(self) -> Dict[ReportCategory, int]:
        return {category: len(self.reported[category]) for category in REPORT_CATEGORY_ORDER}

    @property
    def total_reported(self) -> int:
        return sum(self.reported_counts.values())

    @property
    def deferred_count(self) -> int:
        """Number of distinct records waiting for resolution."""
        keys = {record.line for bucket in self.gene_buckets.values() for record in bucket}
        return len(keys) + len(self.deferred_without_gene)

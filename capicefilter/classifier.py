"""
Variant classifier for the quick filter.

Each record is inspected once, in file order, and receives exactly one
decision:

- ``Dropped``: removed for a reason (score, frequency, genotypes)
- ``Reported``: reported immediately in a candidate category
- ``Deferred``: a heterozygous candidate whose fate depends on other
  heterozygous candidates in the same gene; see :mod:`capicefilter.comp_het`
- ``Inconsistent``: a state the rules do not cover; the caller aborts

Rules are evaluated in a fixed order and the first matching rule wins.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union

from .annotation import AnnotationExtractor
from .context import ClassificationContext, DropReason, ReportCategory, SampleIndex
from .errors import DataValidationError, InconsistentStateError
from .genotype_utils import alt_allele_count, is_autosomal
from .vcf_reader import VariantRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dropped:
    reason: DropReason


@dataclass(frozen=True)
class Reported:
    category: ReportCategory


@dataclass(frozen=True)
class Deferred:
    genes: FrozenSet[str]


@dataclass(frozen=True)
class Inconsistent:
    record: VariantRecord


Decision = Union[Dropped, Reported, Deferred, Inconsistent]


class VariantClassifier:
    """Assign CAPICE/GnomAD annotated records to report categories or drop reasons.

    Parameters
    ----------
    capice_threshold : float
        Records whose highest CAPICE score is below this value are dropped.
    gnomad_threshold : float
        Records whose lowest gnomAD allele frequency is above this value are dropped.
    sample_index : SampleIndex
        Offsets of the case and control samples.
    extractor : AnnotationExtractor, optional
        Annotation extractor; the default reads ``CSQ`` and ``CAPICE``.
    missing_allele : str
        Marker of a missing allele in genotype calls.
    """

    def __init__(
        self,
        capice_threshold: float,
        gnomad_threshold: float,
        sample_index: SampleIndex,
        extractor: Optional[AnnotationExtractor] = None,
        missing_allele: str = ".",
    ):
        self.capice_threshold = capice_threshold
        self.gnomad_threshold = gnomad_threshold
        self.sample_index = sample_index
        self.extractor = extractor or AnnotationExtractor()
        self.missing_allele = missing_allele

    def _alt_count(self, record: VariantRecord, offset: int) -> int:
        alleles = record.genotype(offset, self.missing_allele)
        return alt_allele_count(alleles, record.ref, self.missing_allele)

    def decide(
        self, record: VariantRecord, score: Optional[float], frequency: Optional[float]
    ) -> Decision:
        """Apply the classification rules to one record without side effects."""
        if score is not None and score < self.capice_threshold:
            return Dropped(DropReason.LOW_CAPICE)
        if frequency is not None and frequency > self.gnomad_threshold:
            return Dropped(DropReason.COMMON_GNOMAD)

        case_alt_count = self._alt_count(record, self.sample_index.case_offset)
        if case_alt_count == 0:
            return Dropped(DropReason.CASE_NOT_INFORMATIVE)

        # A homozygous control rules the variant out regardless of the case.
        het_control = False
        for offset in self.sample_index.control_offsets:
            control_alt_count = self._alt_count(record, offset)
            if control_alt_count == 2:
                return Dropped(DropReason.HOMOZYGOUS_CONTROL)
            if control_alt_count == 1:
                het_control = True

        autosomal = is_autosomal(record.chrom)
        if case_alt_count == 2:
            return Reported(
                ReportCategory.HOMOZYGOUS_ALT if autosomal else ReportCategory.NON_AUTOSOMAL
            )
        if case_alt_count == 1 and not het_control:
            return Reported(ReportCategory.DE_NOVO if autosomal else ReportCategory.NON_AUTOSOMAL)
        if case_alt_count == 1:
            if not autosomal:
                return Reported(ReportCategory.NON_AUTOSOMAL)
            return Deferred(frozenset(self.extractor.extract_genes(record.info)))

        return Inconsistent(record)

    def classify(self, record: VariantRecord, context: ClassificationContext) -> Decision:
        """
        Classify one record and record the outcome in the context.

        Missing CAPICE or gnomAD annotations are tallied whatever the
        decision. Dropped and reported records update exactly one counter or
        report bucket; deferred records are filed under their genes.
        ``Inconsistent`` decisions are returned untouched for the caller to
        handle.

        Parameters
        ----------
        record : VariantRecord
            Record to classify
        context : ClassificationContext
            Run-scoped state, updated in place

        Returns
        -------
        Decision
            The decision taken for the record
        """
        score = self.extractor.extract_highest_score(record.info)
        frequency = self.extractor.extract_lowest_frequency(record.info)
        if score is None:
            context.counters.without_capice += 1
        if frequency is None:
            context.counters.without_gnomad += 1

        decision = self.decide(record, score, frequency)
        if isinstance(decision, Dropped):
            context.drop(decision.reason)
        elif isinstance(decision, Reported):
            context.report(decision.category, record)
        elif isinstance(decision, Deferred):
            context.defer(record, decision.genes)
        return decision

    def process(self, records: Iterable[VariantRecord], context: ClassificationContext) -> None:
        """
        Run the forward pass over all records.

        Raises
        ------
        InconsistentStateError
            If a record is not covered by the classification rules.
        DataValidationError
            If a record carries malformed annotations or genotypes.
        """
        if context.resolved:
            raise InconsistentStateError("Cannot classify records after compound het resolution")

        for record in records:
            context.counters.total_processed += 1
            try:
                decision = self.classify(record, context)
            except DataValidationError as e:
                if e.line is None:
                    raise type(e)(str(e), record.line, e.details) from e
                raise
            if isinstance(decision, Inconsistent):
                raise InconsistentStateError(
                    "Bad state: all possibilities should be covered by now", decision.record.line
                )
            logger.debug("%s:%s -> %s", record.chrom, record.pos, decision)

        logger.info(
            "Classified %d variants (%d reported, %d dropped, %d deferred)",
            context.counters.total_processed,
            context.total_reported,
            context.counters.total_dropped,
            context.deferred_count,
        )

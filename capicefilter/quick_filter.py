"""
Quick filter run: read, classify, resolve, report.

With only CAPICE and GnomAD annotations, perform basic but effective
filtering and reporting of potentially clinically interesting variants for
one case sample, optionally controlled by unaffected relatives.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .annotation import AnnotationExtractor
from .classifier import VariantClassifier
from .comp_het import resolve_compound_hets
from .context import REPORT_CATEGORY_ORDER, ClassificationContext, DropReason, SampleIndex
from .report import write_report
from .stats import compute_run_stats, write_stats
from .vcf_reader import VcfReader

logger = logging.getLogger("capicefilter")


@dataclass
class QuickFilterSettings:
    """Validated settings of one quick filter run."""

    input_path: str
    output_path: str
    capice_threshold: float
    gnomad_threshold: float
    case_id: str
    control_ids: List[str] = field(default_factory=list)
    stats_output_file: Optional[str] = None


def log_summary(context: ClassificationContext) -> None:
    """Log the counts of a resolved run."""
    counters = context.counters
    logger.info(f"Total number of variants processed: {counters.total_processed}")
    logger.info(f"Total number of potential candidates found: {context.total_reported}")
    for category in REPORT_CATEGORY_ORDER:
        logger.info(f"  {category.label}{len(context.reported[category])}")
    logger.info(f"Total number of variants dropped: {counters.total_dropped}")
    for reason in DropReason:
        logger.info(f"  {reason.label}{counters.dropped[reason]}")
    if counters.without_capice or counters.without_gnomad:
        logger.warning(
            f"Variants without CAPICE annotation: {counters.without_capice}; "
            f"without GnomAD annotation: {counters.without_gnomad}"
        )


def run_quick_filter(
    settings: QuickFilterSettings, cfg: Optional[Dict[str, Any]] = None
) -> ClassificationContext:
    """
    Run the quick filter from input VCF to written report.

    Parameters
    ----------
    settings : QuickFilterSettings
        Input and output paths, thresholds and sample IDs
    cfg : Dict[str, Any], optional
        Loaded configuration (annotation keys and offsets, report options)

    Returns
    -------
    ClassificationContext
        The resolved context, for callers that want the counts

    Raises
    ------
    ConfigurationError
        If the case or a control sample is not in the VCF.
    DataValidationError
        If a record violates the input contract.
    """
    cfg = cfg or {}
    extractor = AnnotationExtractor.from_config(cfg)

    with VcfReader(settings.input_path) as reader:
        sample_index = SampleIndex.resolve(
            reader.sample_names, settings.case_id, settings.control_ids
        )
        logger.info(
            "Case sample %s at offset %d, controls at offsets %s",
            settings.case_id,
            sample_index.case_offset,
            sample_index.control_offsets,
        )
        context = ClassificationContext(sample_index)
        classifier = VariantClassifier(
            settings.capice_threshold,
            settings.gnomad_threshold,
            sample_index,
            extractor=extractor,
            missing_allele=cfg.get("missing_allele", "."),
        )
        classifier.process(reader, context)

    resolve_compound_hets(context)
    write_report(settings.output_path, context, settings, cfg)
    if settings.stats_output_file:
        write_stats(compute_run_stats(context), settings.stats_output_file)
    log_summary(context)
    return context

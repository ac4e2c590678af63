"""
Compound heterozygous resolution for deferred candidates.

During the forward pass, autosomal variants that are heterozygous in the
case and in at least one control are filed per gene. Once all variants have
been read, a gene holding two or more of them makes each a potential
compound heterozygote; a variant that is alone in all of its genes has no
second hit and is dropped.

Because one variant can be annotated with several genes, both promotion and
dropping are deduplicated by the full record, never by gene.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Set

from .context import ClassificationContext, DropReason, ReportCategory
from .errors import InconsistentStateError
from .vcf_reader import VariantRecord

logger = logging.getLogger(__name__)


@dataclass
class CompHetResolution:
    """Outcome of compound heterozygote resolution."""

    promoted: Set[str] = field(default_factory=set)
    dropped: Set[str] = field(default_factory=set)
    genes_with_comp_het: List[str] = field(default_factory=list)


def create_variant_key(record: VariantRecord) -> str:
    """
    Create a unique key for a variant.

    The full VCF line is used so that two genes sharing one record resolve
    to the same key while distinct records at one position stay apart.

    Args:
        record: Deferred record

    Returns:
        Unique variant identifier
    """
    return record.line


def resolve_compound_hets(context: ClassificationContext) -> CompHetResolution:
    """
    Promote or drop every deferred record in the context.

    Must run after the last record has been classified, and only once.

    Args:
        context: Classification context after the forward pass

    Returns:
        CompHetResolution with the promoted and dropped record keys

    Raises:
        InconsistentStateError: If the context was already resolved
    """
    if context.resolved:
        raise InconsistentStateError("Compound heterozygote resolution has already run")

    resolution = CompHetResolution()

    for gene, records in context.gene_buckets.items():
        if len(records) < 2:
            continue
        resolution.genes_with_comp_het.append(gene)
        logger.debug("Gene %s has %d heterozygous candidates", gene, len(records))
        for record in records:
            key = create_variant_key(record)
            if key not in resolution.promoted:
                context.report(ReportCategory.COMPOUND_HET, record)
                resolution.promoted.add(key)

    # Leftovers, counted once even when they are alone in several genes
    leftovers = [records[0] for records in context.gene_buckets.values() if len(records) == 1]
    for record in leftovers + context.deferred_without_gene:
        key = create_variant_key(record)
        if key not in resolution.promoted and key not in resolution.dropped:
            context.drop(DropReason.NO_SECOND_HIT)
            resolution.dropped.add(key)

    context.resolved = True
    logger.info(
        "Compound heterozygote resolution: %d promoted in %d gene(s), %d without second hit",
        len(resolution.promoted),
        len(resolution.genes_with_comp_het),
        len(resolution.dropped),
    )
    return resolution

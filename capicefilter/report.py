# File: capicefilter/report.py
# Location: capicefilter/capicefilter/report.py

"""
Text report of the quick filter.

The report is a VCF-like file: a ``##`` block with the settings, the
counts and a short preview of each candidate, followed by a ``#CHROM``
header line and the full candidate lines. Only the fixed VCF columns and
the case and control sample columns are kept. Candidates are grouped by
category in the declared category order.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from .context import REPORT_CATEGORY_ORDER, ClassificationContext, DropReason
from .vcf_reader import FIXED_COLUMNS, N_FIXED
from .version import __version__

logger = logging.getLogger("capicefilter")

TEMPLATE_NAME = "candidates_report.txt"


def retain_sample_columns(line: str, offsets: Sequence[int]) -> str:
    """
    Return a VCF line with only the genotype columns at the given sample offsets.

    Parameters
    ----------
    line : str
        Tab-separated VCF data line
    offsets : Sequence[int]
        Sample offsets to keep; columns keep their original order

    Returns
    -------
    str
        The reduced line
    """
    keep = set(offsets)
    columns = line.split("\t")
    return "\t".join(
        column for i, column in enumerate(columns) if i < N_FIXED or (i - N_FIXED) in keep
    )


def preview(line: str, width: int = 50) -> str:
    """Shorten a line to ``width`` characters with tabs replaced by spaces."""
    return line[:width].replace("\t", " ")


def _environment() -> Environment:
    templates_dir = Path(__file__).parent / "templates"
    if not templates_dir.exists():
        raise FileNotFoundError(f"Templates directory not found at: {templates_dir}")

    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["preview"] = preview
    return env


def render_report(
    context: ClassificationContext, settings: Any, cfg: Optional[Dict[str, Any]] = None
) -> str:
    """
    Render the candidates report of a resolved classification run.

    Parameters
    ----------
    context : ClassificationContext
        Context after compound heterozygote resolution
    settings : QuickFilterSettings
        Run settings echoed in the report header
    cfg : Dict[str, Any], optional
        Configuration; ``report_preview_width`` sets the preview length

    Returns
    -------
    str
        Report text
    """
    cfg = cfg or {}
    offsets = context.sample_index.retained_offsets
    sections: List = [
        (category, [retain_sample_columns(r.line, offsets) for r in context.reported[category]])
        for category in REPORT_CATEGORY_ORDER
    ]
    header = "\t".join(FIXED_COLUMNS + tuple(context.sample_index.retained_names))

    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(
        version=__version__,
        input_path=Path(settings.input_path).resolve(),
        output_path=Path(settings.output_path).resolve(),
        capice_threshold=settings.capice_threshold,
        gnomad_threshold=settings.gnomad_threshold,
        case_id=settings.case_id,
        control_ids=list(settings.control_ids),
        total_processed=context.counters.total_processed,
        total_reported=context.total_reported,
        reported_counts=list(context.reported_counts.items()),
        total_dropped=context.counters.total_dropped,
        dropped_counts=[(reason, context.counters.dropped[reason]) for reason in DropReason],
        without_gnomad=context.counters.without_gnomad,
        without_capice=context.counters.without_capice,
        sections=sections,
        header=header,
        preview_width=int(cfg.get("report_preview_width", 50)),
    )


def write_report(
    output_path: str,
    context: ClassificationContext,
    settings: Any,
    cfg: Optional[Dict[str, Any]] = None,
) -> None:
    """Render the report and write it to ``output_path``."""
    content = render_report(context, settings, cfg)
    with open(output_path, "w", encoding="utf-8") as out_f:
        out_f.write(content)
    logger.info("Report written to %s", output_path)

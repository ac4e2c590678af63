"""Command-line interface for capicefilter."""

import argparse
import datetime
import logging
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import load_config
from .errors import CapiceFilterError
from .precomputed_validator import validate_precomputed_file
from .quick_filter import QuickFilterSettings, run_quick_filter
from .stats import compute_chromosome_ranges, write_stats
from .utils import elapsed_ms
from .validators import (
    validate_input_file,
    validate_output_file,
    validate_sample_ids,
    validate_threshold,
)
from .version import __version__

logger = logging.getLogger("capicefilter")

LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}


class CapiceArgumentParser(argparse.ArgumentParser):
    """Argument parser that ends a run with status 0 on a usage error.

    Matches the exit status of the other argument checks in
    :mod:`capicefilter.validators`.
    """

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        logger.error(f"{self.prog}: {message}")
        sys.exit(0)


def _add_general_options(parser: argparse.ArgumentParser) -> None:
    general_group = parser.add_argument_group("General Options")
    general_group.add_argument(
        "--version",
        action="version",
        version=f"capicefilter {__version__}",
        help="Show the current version and exit",
    )
    general_group.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        default="INFO",
        help="Set the logging level",
    )
    general_group.add_argument(
        "--log-file", help="Path to a file to write logs to (in addition to stderr)."
    )
    general_group.add_argument(
        "-c",
        "--config",
        help="Path to configuration file",
        default=None,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the capicefilter CLI."""
    parser = CapiceArgumentParser(
        description=(
            "capicefilter: report potentially clinically interesting variants "
            "from a CAPICE and GnomAD annotated VCF file."
        )
    )
    _add_general_options(parser)

    io_group = parser.add_argument_group("Core Input/Output")
    io_group.add_argument("input", help="File location of your input .vcf.gz file.")
    io_group.add_argument("output", help="Output file location. May not exist yet.")
    io_group.add_argument(
        "--stats-output-file", help="File to write run statistics to (TSV)", default=None
    )

    threshold_group = parser.add_argument_group("Thresholds")
    threshold_group.add_argument(
        "capice_threshold",
        help="CAPICE score threshold. Lower scoring variants are dropped. "
        "Suggesting 0.2 for 90%% sensitivity.",
    )
    threshold_group.add_argument(
        "gnomad_threshold",
        help="GnomAD allele frequency threshold. Higher frequency variants are dropped. "
        "Suggesting 0.05 to be safe.",
    )

    sample_group = parser.add_argument_group("Samples")
    sample_group.add_argument("case_sample", help="Case sample ID (ie. proband, index).")
    sample_group.add_argument(
        "control_samples",
        nargs="?",
        default=None,
        help="[optional] Control sample ID(s), comma-separated if multiple.",
    )
    return parser


def create_validator_parser() -> argparse.ArgumentParser:
    """Create and return the argument parser for the score table validator CLI."""
    parser = CapiceArgumentParser(
        description="capice-precomp-validator: validate a precomputed CAPICE SNV score file."
    )
    _add_general_options(parser)
    parser.add_argument("input", help="File location of your CAPICE precomputed scores file.")
    parser.add_argument(
        "--summary-file",
        help="File to write the per-chromosome position ranges to (TSV)",
        default=None,
    )
    return parser


def configure_logging(args: argparse.Namespace) -> None:
    """Set the package log level and attach a file handler if requested."""
    logging.getLogger("capicefilter").setLevel(LOG_LEVEL_MAP[args.log_level])

    if args.log_file:
        # Ensure the log file directory exists
        log_file_path = Path(args.log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)

        fh = logging.FileHandler(args.log_file)
        fh.setLevel(LOG_LEVEL_MAP[args.log_level])
        fh.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(fh)
        logger.debug(f"Logging to file enabled: {args.log_file}")


def _init_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_config_or_exit(config_file: Optional[str]) -> Dict[str, Any]:
    try:
        cfg = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Failed to load configuration: {e}")
        sys.exit(1)
    logger.debug(f"Configuration loaded: {cfg}")
    return cfg


def main(args_list: Optional[List[str]] = None) -> int:
    """Run main entry point for the capicefilter CLI.

    Steps:
        1. Parse arguments.
        2. Configure logging and load config.
        3. Validate input and output files, thresholds and sample IDs.
        4. Run the quick filter and write the report.
    """
    _init_logging()

    parser = create_parser()
    args: argparse.Namespace = parser.parse_args(args_list)
    configure_logging(args)
    logger.debug(f"CLI arguments: {args}")

    cfg = _load_config_or_exit(args.config)

    validate_input_file(args.input, ".vcf.gz", "GZipped VCF")
    validate_output_file(args.output)
    capice_threshold = validate_threshold(args.capice_threshold, "CAPICE")
    gnomad_threshold = validate_threshold(args.gnomad_threshold, "GnomAD")
    control_ids = validate_sample_ids(args.case_sample, args.control_samples)

    settings = QuickFilterSettings(
        input_path=args.input,
        output_path=args.output,
        capice_threshold=capice_threshold,
        gnomad_threshold=gnomad_threshold,
        case_id=args.case_sample,
        control_ids=control_ids,
        stats_output_file=args.stats_output_file,
    )

    logger.info("Arguments OK. Starting...")
    start = time.perf_counter()
    logger.debug(f"Run started at {datetime.datetime.now().isoformat()}")
    try:
        run_quick_filter(settings, cfg)
    except CapiceFilterError as e:
        logger.error(f"Quick filter failed: {e}")
        return 1
    logger.info(f"...completed in {elapsed_ms(start)}ms.")
    return 0


def validate_main(args_list: Optional[List[str]] = None) -> int:
    """Run main entry point for the precomputed score table validator CLI."""
    _init_logging()

    parser = create_validator_parser()
    args: argparse.Namespace = parser.parse_args(args_list)
    configure_logging(args)

    cfg = _load_config_or_exit(args.config)
    validate_input_file(args.input, ".gz", "CAPICE precomputed scores")

    logger.info("Arguments OK. Starting...")
    start = time.perf_counter()
    try:
        ranges = validate_precomputed_file(args.input, cfg)
    except CapiceFilterError as e:
        logger.error(f"Validation failed: {e}")
        return 1

    for chrom_range in ranges.values():
        print(f"{chrom_range.chrom} -> {chrom_range.min_pos} to {chrom_range.max_pos}")
    if args.summary_file:
        write_stats(compute_chromosome_ranges(ranges), args.summary_file)
    logger.info(f"...completed in {elapsed_ms(start)}ms.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

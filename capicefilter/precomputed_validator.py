"""
Validator for precomputed CAPICE SNV score tables.

A precomputed table lists, for every genomic position, one row per possible
single-nucleotide substitution::

    #Chr  Pos  Ref  Alt  PHRED
    1     100  A    T    0.12
    1     100  A    G    0.08
    1     100  A    C    0.31
    1     101  C    A    0.02
    ...

The table is expected to be sorted by chromosome and then position, each
chromosome forming one contiguous block, positions increasing by exactly
one, and each position holding exactly three rows with one reference base
and three distinct alternative bases. The validator checks these invariants
in a single pass and stops at the first violation.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Set

from .errors import ScoreTableValidationError
from .utils import read_lines

logger = logging.getLogger(__name__)

N_FIELDS = 5
NUCLEOTIDES = frozenset("ATGC")
ROWS_PER_POSITION = 3


@dataclass(frozen=True)
class ScoreTableRow:
    chrom: str
    pos: int
    ref: str
    alt: str
    score: float

    @classmethod
    def from_line(cls, line: str) -> "ScoreTableRow":
        """Parse and range-check one table row."""
        fields = line.split("\t")
        if len(fields) != N_FIELDS:
            raise ScoreTableValidationError(
                f"Expected length == {N_FIELDS} but found {len(fields)}", line
            )
        chrom, pos_str, ref, alt, score_str = fields
        try:
            pos = int(pos_str)
        except ValueError:
            raise ScoreTableValidationError(f"Position is not an integer: '{pos_str}'", line)
        try:
            score = float(score_str)
        except ValueError:
            raise ScoreTableValidationError(f"CAPICE score is not a number: '{score_str}'", line)

        if not 0.0 <= score <= 1.0:
            raise ScoreTableValidationError(f"CAPICE score outside 0-1 range: {score}", line)
        if pos < 0:
            raise ScoreTableValidationError(f"Position negative: {pos}", line)
        if len(ref) != 1:
            raise ScoreTableValidationError("Ref not 1 char", line)
        if len(alt) != 1:
            raise ScoreTableValidationError("Alt not 1 char", line)
        if ref not in NUCLEOTIDES:
            raise ScoreTableValidationError("Ref does not equal A, T, G or C", line)
        if alt not in NUCLEOTIDES:
            raise ScoreTableValidationError("Alt does not equal A, T, G or C", line)
        return cls(chrom, pos, ref, alt, score)


@dataclass
class ChromosomeRange:
    chrom: str
    min_pos: int
    max_pos: Optional[int] = None


class ScoreTableValidator:
    """Sequential invariant checker over the rows of a sorted score table.

    Feed lines in file order with :meth:`feed` and call :meth:`finish` at
    end of input, or use :meth:`validate` for both. Leading lines (headers,
    comments) are skipped until the first row of ``start_chromosome``.
    """

    def __init__(self, start_chromosome: str = "1", progress_interval: int = 1_000_000):
        self.start_chromosome = start_chromosome
        self.progress_interval = progress_interval
        self.rows_checked = 0
        self.ranges: Dict[str, ChromosomeRange] = {}
        self._started = False
        self._stale: Set[str] = set()
        self._chrom: Optional[str] = None
        self._pos: Optional[int] = None
        self._refs: Set[str] = set()
        self._alts: Set[str] = set()
        self._rows_at_pos = 0
        self._last_line: Optional[str] = None

    def _check_position_shape(self) -> None:
        """Check the rows collected for the position that just ended.

        Errors point at the last row read for that position.
        """
        line = self._last_line
        if self._rows_at_pos != ROWS_PER_POSITION:
            raise ScoreTableValidationError(
                f"Expecting {ROWS_PER_POSITION} lines per unique position but found "
                f"{self._rows_at_pos}",
                line,
            )
        if len(self._refs) != 1:
            raise ScoreTableValidationError("Non-unique ref", line)
        if len(self._alts) != ROWS_PER_POSITION:
            raise ScoreTableValidationError(
                f"Expected {ROWS_PER_POSITION} alts but found {len(self._alts)}", line
            )

    def _reset_position(self) -> None:
        self._refs = set()
        self._alts = set()
        self._rows_at_pos = 0

    def feed(self, line: str) -> None:
        """Validate the next line of the table."""
        if not self._started:
            if line.split("\t", 1)[0] != self.start_chromosome:
                return
            self._started = True

        row = ScoreTableRow.from_line(line)

        if self._chrom is not None and row.chrom != self._chrom:
            if row.chrom in self._stale:
                raise ScoreTableValidationError(
                    "Current chrom seen before, is your ordering correct?", line
                )
            self._check_position_shape()
            self.ranges[self._chrom].max_pos = self._pos
            self._stale.add(self._chrom)
            self._pos = None
            self._reset_position()

        if row.chrom not in self.ranges:
            self.ranges[row.chrom] = ChromosomeRange(row.chrom, row.pos)

        if self._pos is not None and row.pos != self._pos:
            if row.pos < self._pos:
                raise ScoreTableValidationError(
                    f"Current pos precedes previous pos: {row.pos} < {self._pos}", line
                )
            if row.pos - self._pos != 1:
                raise ScoreTableValidationError("Position increment not 1", line)
            self._check_position_shape()
            self._reset_position()

        self._refs.add(row.ref)
        self._alts.add(row.alt)
        self._rows_at_pos += 1
        self._chrom = row.chrom
        self._pos = row.pos
        self._last_line = line
        self.rows_checked += 1

        if self.progress_interval and self.rows_checked % self.progress_interval == 0:
            logger.info(f"Processed {self.rows_checked} lines...")

    def finish(self) -> Dict[str, ChromosomeRange]:
        """Close the last position and chromosome and return the per-chromosome ranges."""
        if self._chrom is not None:
            self._check_position_shape()
            self.ranges[self._chrom].max_pos = self._pos
        logger.info(f"Done checking {self.rows_checked} lines (excl. header)")
        return self.ranges

    def validate(self, lines: Iterable[str]) -> Dict[str, ChromosomeRange]:
        """Validate all lines and return the per-chromosome ranges."""
        for line in lines:
            self.feed(line)
        return self.finish()


def validate_precomputed_file(
    path: str, cfg: Optional[Dict[str, Any]] = None
) -> Dict[str, ChromosomeRange]:
    """
    Validate a (gzip compressed) precomputed CAPICE score table.

    Parameters
    ----------
    path : str
        Path to the table
    cfg : Dict[str, Any], optional
        Configuration with ``validator_start_chromosome`` and
        ``validator_progress_interval``

    Returns
    -------
    Dict[str, ChromosomeRange]
        Position range per chromosome, in input order

    Raises
    ------
    ScoreTableValidationError
        On the first line that violates the table structure.
    """
    cfg = cfg or {}
    validator = ScoreTableValidator(
        start_chromosome=str(cfg.get("validator_start_chromosome", "1")),
        progress_interval=int(cfg.get("validator_progress_interval", 1_000_000)),
    )
    logger.debug(f"Validating precomputed scores in {os.fspath(path)}")
    return validator.validate(read_lines(path))

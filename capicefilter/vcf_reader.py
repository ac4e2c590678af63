"""VCF record source for the quick filter.

Reads a (bgzip) compressed VCF line by line. Only the parts of the VCF
grammar the classifier needs are interpreted: the ``#CHROM`` header for
sample names, the fixed columns, the INFO key/value pairs and the GT field
of each sample. Records are yielded in file order.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterator, Optional

from .errors import VcfFormatError
from .genotype_utils import genotype_alleles
from .utils import smart_open

logger = logging.getLogger("capicefilter")

FIXED_COLUMNS = ("#CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT")
N_FIXED = len(FIXED_COLUMNS)


def parse_info(text: str) -> tuple[tuple[str, Optional[str]], ...]:
    """Split an INFO column into (key, value) pairs, keeping repeats and order.

    Flags carry a value of ``None``; a ``.`` column holds no pairs.
    """
    if not text or text == ".":
        return ()
    pairs = []
    for entry in text.split(";"):
        if not entry:
            continue
        key, sep, value = entry.partition("=")
        pairs.append((key, value if sep else None))
    return tuple(pairs)


@dataclass(frozen=True)
class VariantRecord:
    """A single VCF data line with its sample columns left unparsed."""

    chrom: str
    pos: int
    id: str
    ref: str
    alts: tuple[str, ...]
    qual: str
    filter: str
    info: tuple[tuple[str, Optional[str]], ...]
    format: tuple[str, ...]
    samples: tuple[str, ...]
    line: str = field(repr=False)

    @classmethod
    def from_line(cls, line: str, n_samples: Optional[int] = None) -> "VariantRecord":
        """Parse one tab-separated VCF data line."""
        columns = line.split("\t")
        if len(columns) < N_FIXED - 1:
            raise VcfFormatError(
                f"Expected at least {N_FIXED - 1} columns but found {len(columns)}", line
            )
        if n_samples and len(columns) != N_FIXED + n_samples:
            raise VcfFormatError(
                f"Expected {N_FIXED + n_samples} columns but found {len(columns)}", line
            )
        try:
            pos = int(columns[1])
        except ValueError:
            raise VcfFormatError(f"Position '{columns[1]}' is not an integer", line)

        alts = tuple(columns[4].split(",")) if columns[4] != "." else ()
        fmt = tuple(columns[8].split(":")) if len(columns) > 8 else ()
        return cls(
            chrom=columns[0],
            pos=pos,
            id=columns[2],
            ref=columns[3],
            alts=alts,
            qual=columns[5],
            filter=columns[6],
            info=parse_info(columns[7]),
            format=fmt,
            samples=tuple(columns[N_FIXED:]),
            line=line,
        )

    def genotype_string(self, offset: int) -> str:
        """Return the raw GT value of the sample at ``offset``."""
        try:
            gt_index = self.format.index("GT")
        except ValueError:
            raise VcfFormatError("FORMAT column has no GT field", self.line)
        fields = self.samples[offset].split(":")
        return fields[gt_index] if gt_index < len(fields) else "."

    def genotype(self, offset: int, missing: str = ".") -> list[str]:
        """Return the alleles called for the sample at ``offset``."""
        return genotype_alleles(self.genotype_string(offset), self.ref, self.alts, missing)


class VcfReader:
    """Iterate over the records of a VCF file.

    Header lines are consumed on construction so that ``sample_names`` is
    available before the first record is requested.

    Examples
    --------
    >>> with VcfReader("input.vcf.gz") as reader:
    ...     names = reader.sample_names
    ...     for record in reader:
    ...         ...
    """

    def __init__(self, path: str | os.PathLike):
        self.path = os.fspath(path)
        self.meta_lines: list[str] = []
        self.sample_names: list[str] = []
        self._handle = smart_open(self.path)
        try:
            self._read_header()
        except Exception:
            self._handle.close()
            raise

    def _read_header(self) -> None:
        for raw in self._handle:
            line = raw.rstrip("\r\n")
            if line.startswith("##"):
                self.meta_lines.append(line)
                continue
            if line.startswith("#CHROM"):
                columns = line.split("\t")
                self.sample_names = columns[N_FIXED:]
                logger.debug(
                    "Read %d meta lines and %d samples from %s",
                    len(self.meta_lines),
                    len(self.sample_names),
                    self.path,
                )
                return
            raise VcfFormatError("Data found before the #CHROM header line", line)
        raise VcfFormatError(f"No #CHROM header line found in {self.path}")

    def __iter__(self) -> Iterator[VariantRecord]:
        n_samples = len(self.sample_names)
        for raw in self._handle:
            line = raw.rstrip("\r\n")
            if not line:
                continue
            yield VariantRecord.from_line(line, n_samples)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "VcfReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

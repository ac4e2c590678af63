"""
Annotation extraction for CAPICE and VEP annotated VCF records.

VEP writes one ``CSQ`` INFO entry whose value is a comma-separated list of
transcript consequences, each a pipe-delimited record in the order declared
by the ``##INFO=<ID=CSQ,...Format: ...>`` header. The gene symbol and the
gnomAD allele frequency are read from fixed offsets in that record.
CAPICE writes a ``CAPICE`` INFO entry with one score per ALT allele.

None of the extractors align values to a particular ALT allele or
transcript: a record is retained for further inspection if any of its
values passes.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .errors import AnnotationFormatError

InfoPairs = Iterable[Tuple[str, Optional[str]]]


def _parse_float(value: str, key: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise AnnotationFormatError(f"{key} value '{value}' is not a number")


class AnnotationExtractor:
    """Pull the gene symbols, CAPICE score and gnomAD frequency out of INFO pairs."""

    def __init__(
        self,
        csq_key: str = "CSQ",
        capice_key: str = "CAPICE",
        gene_index: int = 3,
        gnomad_af_index: int = 26,
    ):
        self.csq_key = csq_key
        self.capice_key = capice_key
        self.gene_index = gene_index
        self.gnomad_af_index = gnomad_af_index
        self._min_csq_fields = max(gene_index, gnomad_af_index) + 1

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "AnnotationExtractor":
        """Build an extractor from the keys of a loaded configuration."""
        return cls(
            csq_key=cfg.get("csq_info_key", "CSQ"),
            capice_key=cfg.get("capice_info_key", "CAPICE"),
            gene_index=int(cfg.get("csq_gene_symbol_index", 3)),
            gnomad_af_index=int(cfg.get("csq_gnomad_af_index", 26)),
        )

    def _values(self, info: InfoPairs, key: str) -> Iterator[str]:
        """Yield every comma-separated value of every entry for ``key``."""
        for info_key, value in info:
            if info_key == key:
                yield from (value or "").split(",")

    def _csq_records(self, info: InfoPairs) -> Iterator[List[str]]:
        for transcript in self._values(info, self.csq_key):
            fields = transcript.split("|")
            if len(fields) < self._min_csq_fields:
                raise AnnotationFormatError(
                    f"{self.csq_key} record has {len(fields)} fields but at least "
                    f"{self._min_csq_fields} are required: '{transcript}'"
                )
            yield fields

    def extract_genes(self, info: InfoPairs) -> Set[str]:
        """Return the non-empty gene symbols of all transcript consequences."""
        genes = set()
        for fields in self._csq_records(info):
            gene = fields[self.gene_index]
            if gene:
                genes.add(gene)
        return genes

    def extract_highest_score(self, info: InfoPairs) -> Optional[float]:
        """
        Get the highest CAPICE score, or None if CAPICE is not present.

        Parameters
        ----------
        info : iterable of (key, value)
            INFO pairs of one record; keys may repeat.

        Returns
        -------
        float or None
            Maximum over all entries and all comma-separated values.

        Raises
        ------
        AnnotationFormatError
            If any value is not a number.
        """
        highest = None
        for value in self._values(info, self.capice_key):
            score = _parse_float(value, self.capice_key)
            if highest is None or score > highest:
                highest = score
        return highest

    def extract_lowest_frequency(self, info: InfoPairs) -> Optional[float]:
        """
        Get the lowest gnomAD allele frequency, or None if never populated.

        Empty frequency fields (transcripts without a gnomAD match) are skipped.
        """
        lowest = None
        for fields in self._csq_records(info):
            af_value = fields[self.gnomad_af_index]
            if not af_value:
                continue
            frequency = _parse_float(af_value, f"{self.csq_key} gnomAD AF")
            if lowest is None or frequency < lowest:
                lowest = frequency
        return lowest

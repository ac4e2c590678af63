# File: capicefilter/utils.py
# Location: capicefilter/capicefilter/utils.py

"""
Utility functions module.

Provides helpers shared by the quick filter and the score table validator
for opening (optionally gzip/bgzip compressed) text inputs and for timing runs.
"""

import gzip
import os
import time
from typing import Iterator, TextIO, Union


def smart_open(
    filename: Union[str, os.PathLike], mode: str = "r", encoding: str = "utf-8"
) -> TextIO:
    """
    Open a file with automatic gzip support based on file extension.

    Block-gzipped (bgzip) files are valid multi-member gzip streams and are
    read by the gzip module without an index.

    Parameters
    ----------
    filename : str or PathLike
        Path to the file
    mode : str
        File opening mode ('r', 'w', 'rt', 'wt')
    encoding : str
        Text encoding

    Returns
    -------
    file object
        Opened text file handle
    """
    filename = os.fspath(filename)
    if "b" in mode:
        raise ValueError("smart_open only supports text modes")
    if filename.endswith(".gz"):
        # Ensure text mode for gzip
        if "t" not in mode:
            mode = mode + "t"
        return gzip.open(filename, mode, encoding=encoding)
    return open(filename, mode, encoding=encoding)


def read_lines(filename: Union[str, os.PathLike]) -> Iterator[str]:
    """Yield the lines of a (possibly compressed) text file without line terminators."""
    with smart_open(filename) as handle:
        for line in handle:
            yield line.rstrip("\r\n")


def elapsed_ms(start: float) -> int:
    """Milliseconds elapsed since a time.perf_counter() reading."""
    return int((time.perf_counter() - start) * 1000)

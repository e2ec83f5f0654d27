"""
Line-oriented plain text reader.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from ..models import ReaderConfig
from .base import SourceReader


class TextLineReader(SourceReader):
    """
    Reader that treats every line of a text file as one chain.
    """

    reader_id = "text-lines"
    suffixes = ("txt",)

    def read_texts(self, path: Path, *, config: ReaderConfig) -> Iterator[str]:
        with path.open("r", encoding=config.encoding) as handle:
            for line in handle:
                yield line.rstrip("\r\n")

"""
Source reader interface for markovgraph.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterator, List, Tuple

from ..models import ReaderConfig
from ..tokenization import to_words


class SourceReader(ABC):
    """
    Abstract interface for readers that turn a source file into token chains.

    :ivar reader_id: Identifier string for the reader.
    :vartype reader_id: str
    :ivar suffixes: Lower-case file suffixes handled by the reader, without the dot.
    :vartype suffixes: tuple[str, ...]
    """

    reader_id: ClassVar[str]
    suffixes: ClassVar[Tuple[str, ...]]

    @abstractmethod
    def read_texts(self, path: Path, *, config: ReaderConfig) -> Iterator[str]:
        """
        Yield the text payloads of a source.

        :param path: Source file path.
        :type path: pathlib.Path
        :param config: Reader configuration.
        :type config: ReaderConfig
        :return: Iterator of text payloads.
        :rtype: Iterator[str]
        :raises OSError: If the file cannot be read.
        :raises markovgraph.errors.MalformedSourceError: If the document cannot be parsed.
        """
        raise NotImplementedError

    def read_chains(self, path: Path, *, config: ReaderConfig) -> Iterator[List[str]]:
        """
        Yield token chains for every text long enough to ingest.

        Empty texts and texts with fewer than ``config.min_tokens`` tokens are dropped.

        :param path: Source file path.
        :type path: pathlib.Path
        :param config: Reader configuration.
        :type config: ReaderConfig
        :return: Iterator of token chains.
        :rtype: Iterator[list[str]]
        """
        for text in self.read_texts(path, config=config):
            if not text:
                continue
            words = to_words(text)
            if words and len(words) >= config.min_tokens:
                yield words

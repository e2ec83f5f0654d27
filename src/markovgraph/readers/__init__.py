"""
Source reader registry for markovgraph.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Type, Union

from ..errors import UnsupportedSourceError
from .base import SourceReader


def available_source_readers() -> Dict[str, Type[SourceReader]]:
    """
    Return the registered source readers.

    :return: Mapping of reader identifiers to reader classes.
    :rtype: dict[str, Type[SourceReader]]
    """
    from .message_archive import MessageArchiveReader
    from .text_lines import TextLineReader

    return {
        TextLineReader.reader_id: TextLineReader,
        MessageArchiveReader.reader_id: MessageArchiveReader,
    }


def file_type(path: Union[str, Path]) -> str:
    """
    Sniff the file type of a source from its name.

    :param path: Source path.
    :type path: str or pathlib.Path
    :return: Lower-case suffix without the dot, or an empty string.
    :rtype: str
    """
    return Path(path).suffix.lower().lstrip(".")


def get_source_reader_for_path(path: Union[str, Path]) -> SourceReader:
    """
    Instantiate the reader that handles a source path.

    :param path: Source path.
    :type path: str or pathlib.Path
    :return: Reader instance.
    :rtype: SourceReader
    :raises UnsupportedSourceError: If no reader handles the file type.
    """
    sniffed = file_type(path)
    for reader_class in available_source_readers().values():
        if sniffed in reader_class.suffixes:
            return reader_class()
    raise UnsupportedSourceError(source=str(path), file_type=sniffed)


__all__ = [
    "SourceReader",
    "available_source_readers",
    "file_type",
    "get_source_reader_for_path",
]

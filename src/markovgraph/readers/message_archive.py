"""
Structured message archive reader.

Chat exports store messages as a top-level array of records, each with a text field.
Only records whose text payload is a plain string are used; rich-text payloads (arrays
of fragments) are skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

from ..errors import MalformedSourceError
from ..models import ReaderConfig
from .base import SourceReader


class MessageArchiveReader(SourceReader):
    """
    Reader for JavaScript Object Notation message archives.
    """

    reader_id = "message-archive"
    suffixes = ("json",)

    def read_texts(self, path: Path, *, config: ReaderConfig) -> Iterator[str]:
        raw = path.read_text(encoding=config.encoding)
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise MalformedSourceError(source=str(path), reason=f"Parsing failed: {exc}") from exc
        if not isinstance(document, dict):
            raise MalformedSourceError(source=str(path), reason="document root must be an object")
        records = document.get(config.messages_field)
        if not isinstance(records, list):
            raise MalformedSourceError(
                source=str(path),
                reason=f"field {config.messages_field!r} must be an array",
            )
        for record in records:
            if not isinstance(record, dict):
                continue
            text = record.get(config.text_field)
            if isinstance(text, str):
                yield text

"""
Error types for markovgraph.
"""

from __future__ import annotations


class GraphInvariantError(RuntimeError):
    """
    Transition graph invariant violation.

    Raised when the graph is asked to do something that a correctly populated graph can never
    require, such as sampling from an empty distribution. It indicates a construction bug and is
    never a recoverable runtime condition.
    """


class MalformedSourceError(ValueError):
    """
    Source document could not be parsed into text payloads.

    :param source: Path or identifier of the source.
    :type source: str
    :param reason: Human-readable parse failure description.
    :type reason: str
    """

    def __init__(self, *, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Malformed source {source!r}: {reason}")


class UnsupportedSourceError(ValueError):
    """
    Source file type has no registered reader.

    :param source: Path or identifier of the source.
    :type source: str
    :param file_type: File type sniffed from the source name.
    :type file_type: str
    """

    def __init__(self, *, source: str, file_type: str) -> None:
        self.source = source
        self.file_type = file_type
        shown = file_type or "(none)"
        super().__init__(f"Unknown {shown!r} file type for {source!r}")

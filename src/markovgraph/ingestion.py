"""
Ingestion runner that feeds source files into a transition graph.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterable, Optional, Union

from .constants import LOG_PREFIX
from .errors import MalformedSourceError, UnsupportedSourceError
from .graph import TransitionGraph
from .models import IngestReport, ReaderConfig, SourceIngestResult, SourceIngestStatus
from .readers import get_source_reader_for_path


def ingest_source(
    graph: TransitionGraph,
    source: Union[str, Path],
    *,
    config: ReaderConfig,
) -> SourceIngestResult:
    """
    Ingest a single source file.

    Unknown file types, malformed documents and unreadable files are reported on standard
    error and returned as skipped results; they never reach the graph.

    :param graph: Graph that receives the chains.
    :type graph: TransitionGraph
    :param source: Source file path.
    :type source: str or pathlib.Path
    :param config: Reader configuration.
    :type config: ReaderConfig
    :return: Ingestion result for the source.
    :rtype: SourceIngestResult
    """
    source_name = str(source)
    print(f'{LOG_PREFIX} parsing "{source_name}"', file=sys.stderr, flush=True)
    reader_id: Optional[str] = None
    try:
        reader = get_source_reader_for_path(source)
        reader_id = reader.reader_id
        # Materialize first so a source that fails halfway contributes nothing.
        chains = list(reader.read_chains(Path(source), config=config))
    except (MalformedSourceError, UnsupportedSourceError, UnicodeDecodeError, OSError) as exc:
        reason = _skip_reason(exc)
        print(f'{LOG_PREFIX} skipping "{source_name}": {reason}', file=sys.stderr, flush=True)
        return SourceIngestResult(
            source=source_name,
            reader_id=reader_id,
            status=SourceIngestStatus.SKIPPED,
            reason=reason,
        )
    for chain in chains:
        graph.add_chain(chain)
    return SourceIngestResult(
        source=source_name,
        reader_id=reader_id,
        status=SourceIngestStatus.INGESTED,
        chains_added=len(chains),
    )


def ingest_sources(
    graph: TransitionGraph,
    sources: Iterable[Union[str, Path]],
    *,
    config: Optional[ReaderConfig] = None,
) -> IngestReport:
    """
    Ingest every source in order, skipping the ones that fail.

    :param graph: Graph that receives the chains.
    :type graph: TransitionGraph
    :param sources: Source file paths.
    :type sources: Iterable[str or pathlib.Path]
    :param config: Optional reader configuration.
    :type config: ReaderConfig or None
    :return: Ingestion report.
    :rtype: IngestReport
    """
    reader_config = config or ReaderConfig()
    results = [ingest_source(graph, source, config=reader_config) for source in sources]
    report = IngestReport(sources=results)
    print(
        f"{LOG_PREFIX} ingested {report.chains_added} chains from "
        f"{len(results) - len(report.skipped)} of {len(results)} sources",
        file=sys.stderr,
        flush=True,
    )
    return report


def _skip_reason(exc: Exception) -> str:
    if isinstance(exc, (MalformedSourceError, UnsupportedSourceError)):
        return str(exc)
    if isinstance(exc, OSError) and exc.strerror:
        return exc.strerror
    return str(exc) or exc.__class__.__name__

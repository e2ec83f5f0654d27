"""
Ingestion runner tests for markovgraph.
"""

from __future__ import annotations

import json

from markovgraph.graph import TransitionGraph
from markovgraph.ingestion import ingest_source, ingest_sources
from markovgraph.models import ReaderConfig, SourceIngestStatus


def _write_sources(tmp_path):
    text_path = tmp_path / "book.txt"
    text_path.write_text(
        "the cat sat on the mat\ntoo short\nthe dog sat on the rug\n", encoding="utf-8"
    )
    json_path = tmp_path / "chat.json"
    json_path.write_text(
        json.dumps({"messages": [{"text": "the bird sat on the fence today"}]}),
        encoding="utf-8",
    )
    broken_path = tmp_path / "broken.json"
    broken_path.write_text("{oops", encoding="utf-8")
    unknown_path = tmp_path / "table.csv"
    unknown_path.write_text("a,b,c\n", encoding="utf-8")
    return text_path, json_path, broken_path, unknown_path


def test_ingest_sources_skips_failures_and_continues(tmp_path, capsys):
    """
    Malformed, unknown and missing sources are reported and skipped while the others load.
    """
    text_path, json_path, broken_path, unknown_path = _write_sources(tmp_path)
    missing_path = tmp_path / "missing.txt"
    graph = TransitionGraph()

    report = ingest_sources(
        graph,
        [broken_path, text_path, unknown_path, missing_path, json_path],
    )

    statuses = [result.status for result in report.sources]
    assert statuses == [
        SourceIngestStatus.SKIPPED,
        SourceIngestStatus.INGESTED,
        SourceIngestStatus.SKIPPED,
        SourceIngestStatus.SKIPPED,
        SourceIngestStatus.INGESTED,
    ]
    assert report.chains_added == 3
    assert graph.chain_count == 3
    assert graph.start_count("the") == 3
    assert graph.edge_count("sat", "on") == 3
    assert len(report.skipped) == 3

    err = capsys.readouterr().err
    assert f'[markovgraph] parsing "{text_path}"' in err
    assert f'[markovgraph] skipping "{broken_path}": Malformed source' in err
    assert f'[markovgraph] skipping "{unknown_path}": Unknown \'csv\' file type' in err
    assert f'[markovgraph] skipping "{missing_path}"' in err
    assert "[markovgraph] ingested 3 chains from 2 of 5 sources" in err


def test_skipped_source_contributes_nothing(tmp_path):
    """
    A source that fails while decoding adds no chains at all.
    """
    path = tmp_path / "latin1.txt"
    path.write_bytes(
        "one two three four five\n".encode("utf-8") + "caf\xe9 au lait avec du sucre\n".encode("latin-1")
    )
    graph = TransitionGraph()
    result = ingest_source(graph, path, config=ReaderConfig())
    assert result.status == SourceIngestStatus.SKIPPED
    assert result.reader_id == "text-lines"
    assert result.chains_added == 0
    assert graph.is_empty


def test_ingest_source_honours_reader_configuration(tmp_path):
    """
    Reader settings flow through to the readers.
    """
    path = tmp_path / "short.txt"
    path.write_text("hello world\n", encoding="utf-8")
    graph = TransitionGraph()
    result = ingest_source(graph, path, config=ReaderConfig(min_tokens=2))
    assert result.status == SourceIngestStatus.INGESTED
    assert result.chains_added == 1
    assert graph.generate() == ["hello", "world"]

"""
Command-line interface tests for markovgraph.
"""

from __future__ import annotations

import json

import pytest

from markovgraph import generation as generation_module
from markovgraph.cli import build_parser, main


@pytest.fixture
def story(tmp_path):
    path = tmp_path / "story.txt"
    path.write_text("the cat sat on the mat\n", encoding="utf-8")
    return path


def test_generate_prints_chains_and_writes_graph(tmp_path, story, capsys, monkeypatch):
    """
    The generate command writes markov.dot and prints each chain followed by the delimiter.
    """
    monkeypatch.chdir(tmp_path)
    code = main(["generate", str(story), "--count", "2", "--min-tokens", "1"])
    assert code == 0
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert len(lines) == 4
    for chain_line, delimiter in zip(lines[0::2], lines[1::2]):
        tokens = chain_line.split(" ")
        assert tokens[0] == "the"
        assert tokens[-1] == "mat"
        assert delimiter == "-------------------"
    dot = (tmp_path / "markov.dot").read_text(encoding="utf-8")
    assert dot.startswith("digraph markov {")
    assert '[label="cat"]' in dot
    assert '[markovgraph] wrote graph to "markov.dot"' in captured.err


def test_generate_single_line_round_trip(tmp_path, capsys):
    """
    A single ingested line without repeated words is reproduced exactly.
    """
    path = tmp_path / "line.txt"
    path.write_text("one two three four five\n", encoding="utf-8")
    code = main(["generate", str(path), "--count", "3", "--no-graph", "--separator", "+"])
    assert code == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0::2] == ["one+two+three+four+five"] * 3
    assert not (tmp_path / "markov.dot").exists()


def test_generate_respects_graph_output_and_max_tokens(tmp_path, story, capsys):
    """
    Graph output path and per-chain token cap come from the flags.
    """
    graph_path = tmp_path / "graphs" / "story.dot"
    code = main(
        [
            "generate",
            str(story),
            "--count",
            "1",
            "--max-tokens",
            "1",
            "--graph-output",
            str(graph_path),
        ]
    )
    assert code == 0
    assert capsys.readouterr().out.splitlines()[0] == "the"
    assert graph_path.exists()


def test_generate_with_configuration_file(tmp_path, capsys):
    """
    Configuration files and overrides control readers and output.
    """
    config_path = tmp_path / "markovgraph.yml"
    config_path.write_text(
        "reader:\n  min_tokens: 2\ngraphviz:\n  enabled: false\ngeneration:\n  count: 1\n  delimiter: '==='\n",
        encoding="utf-8",
    )
    source = tmp_path / "chat.json"
    source.write_text(json.dumps({"messages": [{"text": "hello there"}]}), encoding="utf-8")
    code = main(
        [
            "generate",
            str(source),
            "--configuration",
            str(config_path),
            "--override",
            "generation.separator=-",
        ]
    )
    assert code == 0
    assert capsys.readouterr().out.splitlines() == ["hello-there", "==="]


def test_generate_without_chains_fails_cleanly(tmp_path, capsys):
    """
    Nothing to learn from is reported with exit code 2 instead of a crash.
    """
    path = tmp_path / "short.txt"
    path.write_text("too short\n", encoding="utf-8")
    code = main(["generate", str(path), "--count", "1", "--no-graph"])
    assert code == 2
    assert "No chains were ingested" in capsys.readouterr().err


def test_generate_stops_on_interrupt(tmp_path, story, capsys, monkeypatch):
    """
    Interrupting the endless loop ends the command normally.
    """
    original_walk = generation_module.ChainGenerator.walk
    calls = {"count": 0}

    def interrupting_walk(self):
        calls["count"] += 1
        if calls["count"] > 2:
            raise KeyboardInterrupt
        return original_walk(self)

    monkeypatch.setattr(generation_module.ChainGenerator, "walk", interrupting_walk)
    code = main(["generate", str(story), "--no-graph"])
    assert code == 0
    captured = capsys.readouterr()
    assert captured.out.count("-------------------") == 2
    assert "[markovgraph] interrupted" in captured.err



def test_generate_stops_quietly_when_output_pipe_closes(tmp_path, story, capsys, monkeypatch):
    """
    A reader that stops consuming output (such as `head`) ends the command normally.
    """
    original_walk = generation_module.ChainGenerator.walk
    calls = {"count": 0}

    def closing_walk(self):
        calls["count"] += 1
        if calls["count"] > 1:
            raise BrokenPipeError
        return original_walk(self)

    monkeypatch.setattr(generation_module.ChainGenerator, "walk", closing_walk)
    code = main(["generate", str(story), "--no-graph"])
    assert code == 0
    assert capsys.readouterr().out.count("-------------------") == 1


def test_generate_keeps_digit_and_space_text_overrides(tmp_path, story, capsys):
    """
    Text settings given as overrides are printed verbatim.
    """
    code = main(
        [
            "generate",
            str(story),
            "--count",
            "1",
            "--no-graph",
            "--override",
            "generation.delimiter=0000",
            "--override",
            "generation.separator= ",
        ]
    )
    assert code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[-1] == "0000"
    assert lines[0].split(" ")[0] == "the"

def test_export_writes_to_stdout(tmp_path, story, capsys):
    """
    Export without an output path prints the DOT document.
    """
    code = main(["export", str(story)])
    assert code == 0
    out = capsys.readouterr().out
    assert out.startswith("digraph markov {")
    assert '  start -> 0 [label="1", weight=1];' in out
    assert '  4 -> end [label="1", weight=1];' in out


def test_export_writes_to_file(tmp_path, story):
    """
    Export with an output path writes the DOT file.
    """
    output = tmp_path / "out.dot"
    assert main(["export", str(story), "--output", str(output)]) == 0
    assert output.read_text(encoding="utf-8").rstrip().endswith("}")


def test_stats_reports_summary_and_skips(tmp_path, story, capsys):
    """
    Stats prints a JSON summary including the ingestion report.
    """
    missing = tmp_path / "missing.json"
    code = main(["stats", str(story), str(missing)])
    assert code == 0
    summary = json.loads(capsys.readouterr().out)
    assert summary["node_count"] == 5
    assert summary["chain_count"] == 1
    assert summary["edge_count"] == 6
    sources = summary["ingest"]["sources"]
    assert [source["status"] for source in sources] == ["ingested", "skipped"]


def test_invalid_override_is_reported(tmp_path, story, capsys):
    """
    Invalid configuration values exit with code 2 and a message.
    """
    code = main(["stats", str(story), "--override", "graphviz.min_edge_weight=0"])
    assert code == 2
    assert "Invalid markovgraph configuration" in capsys.readouterr().err


def test_parser_requires_sources():
    """
    Every command needs at least one source.
    """
    with pytest.raises(SystemExit):
        build_parser().parse_args(["generate"])


def test_unknown_encoding_is_reported(tmp_path, story, capsys):
    """
    An unknown reader encoding is a configuration error, not a crash.
    """
    code = main(["stats", str(story), "--override", "reader.encoding=bogus-enc"])
    assert code == 2
    assert "unknown text encoding" in capsys.readouterr().err

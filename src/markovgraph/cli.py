"""
Command-line interface for markovgraph.
"""

from __future__ import annotations

import argparse
import itertools
import os
import sys
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from .configuration import load_configuration, parse_dotted_overrides
from .constants import LOG_PREFIX
from .errors import GraphInvariantError
from .export import render_graphviz, write_graphviz
from .graph import TransitionGraph
from .ingestion import ingest_sources
from .models import IngestReport, MarkovGraphConfiguration


def _add_common_source_args(parser: argparse.ArgumentParser) -> None:
    """
    Add the source list and configuration arguments shared by every command.

    :param parser: Argument parser to modify.
    :type parser: argparse.ArgumentParser
    :return: None.
    :rtype: None
    """
    parser.add_argument(
        "sources",
        nargs="+",
        help="Source files to ingest (.txt files are read line by line, .json files as message archives).",
    )
    parser.add_argument(
        "--configuration",
        action="append",
        default=None,
        help="Path to a YAML configuration file. Repeatable; later files take precedence.",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=None,
        help="Override key=value pairs applied after composing configurations (supports dotted keys).",
    )
    parser.add_argument(
        "--min-tokens",
        type=int,
        default=None,
        dest="min_tokens",
        help="Minimum tokens a line or message needs to be ingested (defaults to 5).",
    )


def _flag_overrides(arguments: argparse.Namespace) -> Dict[str, object]:
    flag_keys = {
        "min_tokens": "reader.min_tokens",
        "count": "generation.count",
        "max_tokens": "generation.max_tokens",
        "separator": "generation.separator",
        "graph_output": "graphviz.output_path",
    }
    overrides: Dict[str, object] = {}
    for attribute, dotted_key in flag_keys.items():
        value = getattr(arguments, attribute, None)
        if value is not None:
            overrides[dotted_key] = value
    if getattr(arguments, "no_graph", False):
        overrides["graphviz.enabled"] = False
    return overrides


def _configuration_from_args(arguments: argparse.Namespace) -> MarkovGraphConfiguration:
    """
    Compose the run configuration from files, overrides and flags.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Validated configuration.
    :rtype: MarkovGraphConfiguration
    """
    overrides = parse_dotted_overrides(arguments.override)
    overrides.update(_flag_overrides(arguments))
    try:
        return load_configuration(arguments.configuration, overrides=overrides)
    except ValidationError as exc:
        raise ValueError(f"Invalid markovgraph configuration: {exc}") from exc


def _build_graph(
    sources: Iterable[str], config: MarkovGraphConfiguration
) -> Tuple[TransitionGraph, IngestReport]:
    graph = TransitionGraph()
    report = ingest_sources(graph, sources, config=config.reader)
    return graph, report


def _chain_budget(count: Optional[int]) -> Iterable[int]:
    if count is None:
        return itertools.count()
    return range(count)


def _discard_stdout() -> None:
    try:
        fileno = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fileno)
    os.close(devnull)


def cmd_generate(arguments: argparse.Namespace) -> int:
    """
    Ingest sources, write the graph file and print generated chains.

    Chains are printed until ``generation.count`` is reached, or until interrupted when no
    count is configured. A closed output pipe also ends the command normally.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    :raises ValueError: If no chains were ingested.
    """
    config = _configuration_from_args(arguments)
    graph, _report = _build_graph(arguments.sources, config)
    if graph.is_empty:
        raise ValueError("No chains were ingested; nothing to generate")
    if config.graphviz.enabled:
        path = write_graphviz(graph, config.graphviz.output_path, config=config.graphviz)
        print(f'{LOG_PREFIX} wrote graph to "{path}"', file=sys.stderr, flush=True)

    generation = config.generation
    generator = graph.generator()
    try:
        for _ in _chain_budget(generation.count):
            tokens: Iterable[object] = generator.walk()
            if generation.max_tokens is not None:
                tokens = itertools.islice(tokens, generation.max_tokens)
            print(generation.separator.join(str(token) for token in tokens))
            print(generation.delimiter, flush=True)
    except KeyboardInterrupt:
        print(f"{LOG_PREFIX} interrupted", file=sys.stderr, flush=True)
    except BrokenPipeError:
        # The reader closed the pipe (for example `| head`); later flushes must not fail.
        _discard_stdout()
    return 0


def cmd_export(arguments: argparse.Namespace) -> int:
    """
    Ingest sources and export the graph as GraphViz DOT text.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    config = _configuration_from_args(arguments)
    graph, _report = _build_graph(arguments.sources, config)
    if arguments.output:
        path = write_graphviz(graph, arguments.output, config=config.graphviz)
        print(f'{LOG_PREFIX} wrote graph to "{path}"', file=sys.stderr, flush=True)
    else:
        sys.stdout.write(render_graphviz(graph, config=config.graphviz))
    return 0


def cmd_stats(arguments: argparse.Namespace) -> int:
    """
    Ingest sources and print a graph summary.

    :param arguments: Parsed command-line interface arguments.
    :type arguments: argparse.Namespace
    :return: Exit code.
    :rtype: int
    """
    config = _configuration_from_args(arguments)
    graph, report = _build_graph(arguments.sources, config)
    print(graph.summary(ingest=report).model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line interface argument parser.

    :return: Argument parser instance.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="markovgraph",
        description="Build a word transition graph from text sources and generate new text from it.",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_generate = sub.add_parser(
        "generate", help="Ingest sources, write the graph file and print generated chains."
    )
    _add_common_source_args(p_generate)
    p_generate.add_argument(
        "--count",
        type=int,
        default=None,
        help="Number of chains to print (defaults to printing until interrupted).",
    )
    p_generate.add_argument(
        "--max-tokens",
        type=int,
        default=None,
        dest="max_tokens",
        help="Stop each generated chain after this many tokens.",
    )
    p_generate.add_argument(
        "--separator",
        default=None,
        help="String placed between generated tokens (defaults to a single space).",
    )
    p_generate.add_argument(
        "--graph-output",
        default=None,
        dest="graph_output",
        help="Path of the GraphViz file to write (defaults to markov.dot).",
    )
    p_generate.add_argument(
        "--no-graph",
        action="store_true",
        dest="no_graph",
        help="Do not write the GraphViz file.",
    )
    p_generate.set_defaults(func=cmd_generate)

    p_export = sub.add_parser("export", help="Ingest sources and export the graph as GraphViz DOT.")
    _add_common_source_args(p_export)
    p_export.add_argument(
        "--output",
        default=None,
        help="Destination path (defaults to standard output).",
    )
    p_export.set_defaults(func=cmd_export)

    p_stats = sub.add_parser("stats", help="Ingest sources and print a graph summary.")
    _add_common_source_args(p_stats)
    p_stats.set_defaults(func=cmd_stats)

    return parser


def main(argument_list: Optional[List[str]] = None) -> int:
    """
    Entry point for the markovgraph command-line interface.

    :param argument_list: Optional command-line interface arguments.
    :type argument_list: list[str] or None
    :return: Exit code.
    :rtype: int
    """
    parser = build_parser()
    arguments = parser.parse_args(argument_list)
    try:
        return int(arguments.func(arguments))
    except (
        FileNotFoundError,
        ValueError,
        GraphInvariantError,
        ValidationError,
    ) as exception:
        message = exception.args[0] if getattr(exception, "args", None) else str(exception)
        print(str(message), file=sys.stderr)
        return 2

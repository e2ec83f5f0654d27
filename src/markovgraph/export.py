"""
GraphViz export for transition graphs.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from .graph import Endpoint, TransitionGraph
from .models import GraphVizConfig


def _escape_label(value: object) -> str:
    return str(value).replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def _endpoint_name(endpoint: Endpoint) -> str:
    if endpoint.is_node:
        return str(endpoint.index)
    return endpoint.kind.value


def render_graphviz(graph: TransitionGraph, *, config: Optional[GraphVizConfig] = None) -> str:
    """
    Render a transition graph as GraphViz DOT text.

    The output declares the ``start`` and ``end`` pseudo-nodes, one node per token labelled
    with the token value, then ``start -> node``, ``node -> node`` and ``node -> end`` edges.
    Every edge label is the integer transition count. Edges lighter than
    ``config.min_edge_weight`` are omitted; node declarations are always kept.

    :param graph: Graph to render. It is only read.
    :type graph: TransitionGraph
    :param config: Optional GraphViz configuration.
    :type config: GraphVizConfig or None
    :return: DOT document text ending with a newline.
    :rtype: str
    """
    graphviz = config or GraphVizConfig()
    lines: List[str] = []
    lines.append("digraph markov {")
    lines.append(f'  rankdir="{graphviz.rankdir}";')
    lines.append('  start [shape="Msquare"];')
    lines.append('  end [shape="Msquare"];')
    lines.append("  { rank=min; start; }")
    lines.append("  { rank=max; end; }")
    for node in graph.nodes:
        lines.append(f'  {node.id} [label="{_escape_label(node.value)}"];')
    for source, target, count in graph.iter_transitions():
        if count < graphviz.min_edge_weight:
            continue
        lines.append(
            f'  {_endpoint_name(source)} -> {_endpoint_name(target)} [label="{count}", weight={count}];'
        )
    lines.append("}")
    return "\n".join(lines) + "\n"


def write_graphviz(
    graph: TransitionGraph,
    path: Union[str, Path],
    *,
    config: Optional[GraphVizConfig] = None,
) -> Path:
    """
    Write GraphViz DOT output for a transition graph.

    :param graph: Graph to render.
    :type graph: TransitionGraph
    :param path: Destination file path.
    :type path: str or pathlib.Path
    :param config: Optional GraphViz configuration.
    :type config: GraphVizConfig or None
    :return: Path that was written.
    :rtype: pathlib.Path
    """
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(render_graphviz(graph, config=config), encoding="utf-8")
    return destination

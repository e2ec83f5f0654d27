"""
Chain generation by weighted random walk over a transition graph.
"""

from __future__ import annotations

from typing import Hashable, Iterator, List, Optional

from .errors import GraphInvariantError
from .graph import START, TransitionGraph
from .sampling import WeightedSampler


class ChainGenerator:
    """
    Generate token sequences from a transition graph.

    Each walk samples the start distribution, then follows sampled edges until the end
    marker is drawn. The walk has no step limit; callers that need a bound can slice
    :meth:`walk`.

    :param graph: Populated transition graph.
    :type graph: TransitionGraph
    :param sampler: Optional weighted sampler.
    :type sampler: WeightedSampler or None
    """

    def __init__(self, graph: TransitionGraph, *, sampler: Optional[WeightedSampler] = None) -> None:
        self._graph = graph
        self._sampler = sampler if sampler is not None else WeightedSampler()

    @property
    def graph(self) -> TransitionGraph:
        return self._graph

    def walk(self) -> Iterator[Hashable]:
        """
        Lazily yield the tokens of one fresh random walk.

        :return: Iterator over generated tokens.
        :rtype: Iterator[Hashable]
        :raises GraphInvariantError: If the graph has no ingested chains.
        """
        if self._graph.is_empty:
            raise GraphInvariantError("Cannot generate from a graph with no ingested chains")
        current = self._sampler.sample(self._graph.distribution_for(START))
        while current.is_node:
            node = self._graph.node(current.index)
            yield node.value
            current = self._sampler.sample(node.edges)

    def generate(self) -> List[Hashable]:
        """
        Generate one complete token sequence.

        :return: Generated tokens, possibly empty when an empty chain was ingested.
        :rtype: list[Hashable]
        """
        return list(self.walk())

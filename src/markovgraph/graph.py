"""
Transition graph for markovgraph.

The graph is an arena of nodes addressed by integer index. Each node stores the
observed transition counts to its successors, keyed by :class:`Endpoint`. A virtual
start distribution records which nodes began a chain, and the ``END`` endpoint
records where chains terminated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Tuple

from .errors import GraphInvariantError

if TYPE_CHECKING:
    from .generation import ChainGenerator
    from .models import GraphSummary, IngestReport
    from .sampling import WeightedSampler


class EndpointKind(str, Enum):
    """
    Kinds of positions a transition can start from or lead to.
    """

    START = "start"
    NODE = "node"
    END = "end"


@dataclass(frozen=True)
class Endpoint:
    """
    Tagged transition endpoint: the start cursor, a real node, or the end marker.

    :ivar kind: Endpoint kind.
    :vartype kind: EndpointKind
    :ivar index: Arena index of the node for ``NODE`` endpoints, otherwise None.
    :vartype index: int or None
    """

    kind: EndpointKind
    index: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind is EndpointKind.NODE:
            if self.index is None or self.index < 0:
                raise GraphInvariantError(f"Node endpoints need a non-negative index (got {self.index!r})")
        elif self.index is not None:
            raise GraphInvariantError(f"{self.kind.value} endpoints carry no index")

    @classmethod
    def for_node(cls, index: int) -> "Endpoint":
        """
        Build the endpoint that refers to a node in the arena.

        :param index: Arena index of the node.
        :type index: int
        :return: Node endpoint.
        :rtype: Endpoint
        """
        return cls(EndpointKind.NODE, index)

    @property
    def is_start(self) -> bool:
        return self.kind is EndpointKind.START

    @property
    def is_node(self) -> bool:
        return self.kind is EndpointKind.NODE

    @property
    def is_end(self) -> bool:
        return self.kind is EndpointKind.END

    def __repr__(self) -> str:
        if self.is_node:
            return f"Endpoint.for_node({self.index})"
        return f"Endpoint.{self.kind.name}"


START = Endpoint(EndpointKind.START)
END = Endpoint(EndpointKind.END)


class Node:
    """
    One distinct token value in the graph.

    Nodes are owned by a single :class:`TransitionGraph` and are referenced, never copied.

    :ivar id: Arena index assigned in creation order.
    :vartype id: int
    :ivar value: Token value represented by the node.
    :vartype value: Hashable
    """

    __slots__ = ("id", "value", "_edges")

    def __init__(self, node_id: int, value: Hashable) -> None:
        self.id = node_id
        self.value = value
        self._edges: Dict[Endpoint, int] = {}

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint.for_node(self.id)

    @property
    def edges(self) -> Mapping[Endpoint, int]:
        """
        Read-only view of outgoing transition counts.

        :return: Mapping of successor endpoint to observed count.
        :rtype: Mapping[Endpoint, int]
        """
        return MappingProxyType(self._edges)

    def __copy__(self) -> "Node":
        raise TypeError("Graph nodes are shared by reference and cannot be copied")

    def __deepcopy__(self, memo: dict) -> "Node":
        raise TypeError("Graph nodes are shared by reference and cannot be copied")

    def __repr__(self) -> str:
        return f"Node(id={self.id}, value={self.value!r}, edges={len(self._edges)})"


class TransitionGraph:
    """
    Weighted directed transition graph built from token chains.

    Counts only ever grow: every call to :meth:`add_chain` merges its transitions into the
    same graph, exactly as if all chains were a single training signal.
    """

    def __init__(self) -> None:
        self._nodes: List[Node] = []
        self._index: Dict[Hashable, int] = {}
        self._start: Dict[Endpoint, int] = {}
        self._chain_count = 0

    @classmethod
    def from_chains(cls, chains: Iterable[Iterable[Hashable]]) -> "TransitionGraph":
        """
        Build a graph from an iterable of chains.

        :param chains: Token chains to ingest in order.
        :type chains: Iterable[Iterable[Hashable]]
        :return: Populated transition graph.
        :rtype: TransitionGraph
        """
        graph = cls()
        for chain in chains:
            graph.add_chain(chain)
        return graph

    def get_or_create(self, value: Hashable) -> Node:
        """
        Return the node registered for a token, creating it when the token is new.

        :param value: Token value.
        :type value: Hashable
        :return: Node for the token.
        :rtype: Node
        """
        index = self._index.get(value)
        if index is not None:
            return self._nodes[index]
        node = Node(len(self._nodes), value)
        self._nodes.append(node)
        self._index[value] = node.id
        return node

    def add_chain(self, tokens: Iterable[Hashable]) -> None:
        """
        Ingest one chain of tokens.

        Every adjacent pair increments its edge count, the first token increments the start
        distribution and the last token increments its count toward ``END``. An empty chain
        records a single vacuous start-to-end transition and creates no nodes.

        :param tokens: Ordered tokens of the chain.
        :type tokens: Iterable[Hashable]
        :return: None.
        :rtype: None
        """
        cursor = START
        for token in tokens:
            target = self.get_or_create(token).endpoint
            self._record_transition(cursor, target)
            cursor = target
        self._record_transition(cursor, END)
        self._chain_count += 1

    def _record_transition(self, source: Endpoint, target: Endpoint) -> None:
        if target.is_start:
            raise GraphInvariantError("Transitions cannot lead back to the start cursor")
        if source.is_start:
            self._start[target] = self._start.get(target, 0) + 1
            return
        if source.is_end:
            raise GraphInvariantError("Transitions cannot originate at the end marker")
        edges = self.node(source.index)._edges
        edges[target] = edges.get(target, 0) + 1

    def node(self, index: Optional[int]) -> Node:
        """
        Look up a node by arena index.

        :param index: Arena index.
        :type index: int
        :return: Node at the index.
        :rtype: Node
        :raises GraphInvariantError: If the index does not name a node in this graph.
        """
        if index is None or not 0 <= index < len(self._nodes):
            raise GraphInvariantError(f"Unknown node index: {index!r}")
        return self._nodes[index]

    def node_for(self, value: Hashable) -> Optional[Node]:
        index = self._index.get(value)
        return None if index is None else self._nodes[index]

    def distribution_for(self, endpoint: Endpoint) -> Mapping[Endpoint, int]:
        """
        Return the outgoing distribution of an endpoint.

        :param endpoint: ``START`` or a node endpoint.
        :type endpoint: Endpoint
        :return: Read-only mapping of successor endpoint to count.
        :rtype: Mapping[Endpoint, int]
        :raises GraphInvariantError: If the endpoint is ``END``.
        """
        if endpoint.is_start:
            return self.start_distribution
        if endpoint.is_end:
            raise GraphInvariantError("The end marker has no outgoing transitions")
        return self.node(endpoint.index).edges

    @property
    def nodes(self) -> Tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def start_distribution(self) -> Mapping[Endpoint, int]:
        return MappingProxyType(self._start)

    @property
    def chain_count(self) -> int:
        return self._chain_count

    @property
    def is_empty(self) -> bool:
        return not self._start

    def start_count(self, value: Hashable) -> int:
        node = self.node_for(value)
        return 0 if node is None else self._start.get(node.endpoint, 0)

    def end_count(self, value: Hashable) -> int:
        node = self.node_for(value)
        return 0 if node is None else node._edges.get(END, 0)

    def edge_count(self, source: Hashable, target: Hashable) -> int:
        source_node = self.node_for(source)
        target_node = self.node_for(target)
        if source_node is None or target_node is None:
            return 0
        return source_node._edges.get(target_node.endpoint, 0)

    def iter_transitions(self) -> Iterator[Tuple[Endpoint, Endpoint, int]]:
        """
        Iterate every recorded transition.

        Start transitions come first, followed by each node's edges in node id order.

        :return: Iterator of ``(source, target, count)`` triples.
        :rtype: Iterator[tuple[Endpoint, Endpoint, int]]
        """
        for target, count in self._start.items():
            yield START, target, count
        for node in self._nodes:
            for target, count in node._edges.items():
                yield node.endpoint, target, count

    def generate(self, *, sampler: Optional["WeightedSampler"] = None) -> List[Hashable]:
        """
        Generate one token sequence by weighted random walk.

        :param sampler: Optional sampler, mainly for tests that need a seeded source.
        :type sampler: WeightedSampler or None
        :return: Generated tokens.
        :rtype: list[Hashable]
        """
        return self.generator(sampler=sampler).generate()

    def generator(self, *, sampler: Optional["WeightedSampler"] = None) -> "ChainGenerator":
        from .generation import ChainGenerator

        return ChainGenerator(self, sampler=sampler)

    def summary(self, *, ingest: Optional["IngestReport"] = None) -> "GraphSummary":
        """
        Summarize graph size for reporting.

        :param ingest: Optional ingestion report to embed.
        :type ingest: IngestReport or None
        :return: Graph summary model.
        :rtype: GraphSummary
        """
        from .models import GraphSummary

        edge_count = 0
        end_edge_count = 0
        transition_count = 0
        for source, target, count in self.iter_transitions():
            transition_count += count
            if source.is_start:
                continue
            edge_count += 1
            if target.is_end:
                end_edge_count += 1
        return GraphSummary(
            node_count=len(self._nodes),
            edge_count=edge_count,
            end_edge_count=end_edge_count,
            start_entry_count=len(self._start),
            chain_count=self._chain_count,
            transition_count=transition_count,
            ingest=ingest,
        )

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, value: object) -> bool:
        try:
            return value in self._index
        except TypeError:
            return False

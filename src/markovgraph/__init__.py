"""
markovgraph public package interface.
"""

from .errors import GraphInvariantError, MalformedSourceError, UnsupportedSourceError
from .export import render_graphviz, write_graphviz
from .generation import ChainGenerator
from .graph import END, START, Endpoint, EndpointKind, Node, TransitionGraph
from .ingestion import ingest_source, ingest_sources
from .models import (
    GenerationConfig,
    GraphSummary,
    GraphVizConfig,
    IngestReport,
    MarkovGraphConfiguration,
    ReaderConfig,
    SourceIngestResult,
    SourceIngestStatus,
)
from .sampling import WeightedSampler

__all__ = [
    "__version__",
    "ChainGenerator",
    "END",
    "Endpoint",
    "EndpointKind",
    "GenerationConfig",
    "GraphInvariantError",
    "GraphSummary",
    "GraphVizConfig",
    "IngestReport",
    "MalformedSourceError",
    "MarkovGraphConfiguration",
    "Node",
    "ReaderConfig",
    "START",
    "SourceIngestResult",
    "SourceIngestStatus",
    "TransitionGraph",
    "UnsupportedSourceError",
    "WeightedSampler",
    "ingest_source",
    "ingest_sources",
    "render_graphviz",
    "write_graphviz",
]

__version__ = "0.1.0"

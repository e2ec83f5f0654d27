"""
Pydantic models for markovgraph configuration and reports.
"""

from __future__ import annotations

import codecs
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_CHAIN_DELIMITER,
    DEFAULT_GRAPH_FILENAME,
    DEFAULT_MESSAGES_FIELD,
    DEFAULT_MIN_TOKENS,
    DEFAULT_TEXT_FIELD,
)


class SchemaModel(BaseModel):
    """
    Base model that rejects unknown fields.
    """

    model_config = ConfigDict(extra="forbid")


class ReaderConfig(SchemaModel):
    """
    Source reader configuration.

    :ivar min_tokens: Minimum number of tokens a text needs to become a chain.
    :vartype min_tokens: int
    :ivar messages_field: Top-level array field holding records in structured documents.
    :vartype messages_field: str
    :ivar text_field: Record field holding the text payload.
    :vartype text_field: str
    :ivar encoding: Text encoding used to read sources.
    :vartype encoding: str
    """

    min_tokens: int = Field(default=DEFAULT_MIN_TOKENS, ge=0)
    messages_field: str = Field(default=DEFAULT_MESSAGES_FIELD, min_length=1)
    text_field: str = Field(default=DEFAULT_TEXT_FIELD, min_length=1)
    encoding: str = Field(default="utf-8", min_length=1)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"unknown text encoding: {value!r}") from exc
        return value


class GraphVizConfig(SchemaModel):
    """
    GraphViz export configuration.

    :ivar enabled: Whether the generate command writes the graph file.
    :vartype enabled: bool
    :ivar output_path: Path of the graph file written by the generate command.
    :vartype output_path: str
    :ivar rankdir: GraphViz rank direction (e.g., LR or TB).
    :vartype rankdir: str
    :ivar min_edge_weight: Minimum transition count for an edge to be drawn.
    :vartype min_edge_weight: int
    """

    enabled: bool = Field(default=True)
    output_path: str = Field(default=DEFAULT_GRAPH_FILENAME, min_length=1)
    rankdir: str = Field(default="LR", min_length=1)
    min_edge_weight: int = Field(default=1, ge=1)

    @field_validator("rankdir")
    @classmethod
    def _normalize_rankdir(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"LR", "RL", "TB", "BT"}:
            raise ValueError(f"rankdir must be one of LR, RL, TB, BT (got {value!r})")
        return normalized


class GenerationConfig(SchemaModel):
    """
    Output configuration for the generate command.

    :ivar separator: String placed between generated tokens.
    :vartype separator: str
    :ivar delimiter: Line printed after each generated chain.
    :vartype delimiter: str
    :ivar count: Number of chains to print, or None to print until interrupted.
    :vartype count: int or None
    :ivar max_tokens: Optional cap on tokens taken from each walk.
    :vartype max_tokens: int or None
    """

    separator: str = " "
    delimiter: str = DEFAULT_CHAIN_DELIMITER
    count: Optional[int] = Field(default=None, ge=0)
    max_tokens: Optional[int] = Field(default=None, ge=1)


class MarkovGraphConfiguration(SchemaModel):
    """
    Complete configuration for a markovgraph run.

    :ivar reader: Source reader settings.
    :vartype reader: ReaderConfig
    :ivar graphviz: GraphViz export settings.
    :vartype graphviz: GraphVizConfig
    :ivar generation: Generation output settings.
    :vartype generation: GenerationConfig
    """

    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    graphviz: GraphVizConfig = Field(default_factory=GraphVizConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)


class SourceIngestStatus(str, Enum):
    """
    Outcome of ingesting one source.
    """

    INGESTED = "ingested"
    SKIPPED = "skipped"


class SourceIngestResult(SchemaModel):
    """
    Ingestion outcome for a single source.

    :ivar source: Source path as given.
    :vartype source: str
    :ivar reader_id: Reader used for the source, if one was found.
    :vartype reader_id: str or None
    :ivar status: Ingestion status.
    :vartype status: SourceIngestStatus
    :ivar chains_added: Number of chains added to the graph.
    :vartype chains_added: int
    :ivar reason: Skip reason for skipped sources.
    :vartype reason: str or None
    """

    source: str
    reader_id: Optional[str] = None
    status: SourceIngestStatus
    chains_added: int = Field(default=0, ge=0)
    reason: Optional[str] = None


class IngestReport(SchemaModel):
    """
    Ingestion outcome for a batch of sources.

    :ivar sources: Per-source results in input order.
    :vartype sources: list[SourceIngestResult]
    """

    sources: List[SourceIngestResult] = Field(default_factory=list)

    @property
    def chains_added(self) -> int:
        return sum(result.chains_added for result in self.sources)

    @property
    def skipped(self) -> List[SourceIngestResult]:
        return [result for result in self.sources if result.status == SourceIngestStatus.SKIPPED]


class GraphSummary(SchemaModel):
    """
    Size summary of a transition graph.

    :ivar node_count: Number of distinct tokens.
    :vartype node_count: int
    :ivar edge_count: Number of node-to-node and node-to-end edges.
    :vartype edge_count: int
    :ivar end_edge_count: Number of node-to-end edges.
    :vartype end_edge_count: int
    :ivar start_entry_count: Number of entries in the start distribution.
    :vartype start_entry_count: int
    :ivar chain_count: Number of chains ingested.
    :vartype chain_count: int
    :ivar transition_count: Sum of all recorded transition counts, start transitions included.
    :vartype transition_count: int
    :ivar ingest: Optional ingestion report for the sources behind the graph.
    :vartype ingest: IngestReport or None
    """

    node_count: int
    edge_count: int
    end_edge_count: int
    start_entry_count: int
    chain_count: int
    transition_count: int
    ingest: Optional[IngestReport] = None

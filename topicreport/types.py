from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class CatchwordEntry:
    word_id: int
    term: str
    threshold: float


@dataclass
class ClusterInput:
    topic_id: int
    distsq: float
    catchwords: list[int]
    closest_docs: list[int]
    coherence: float
    raw_coherence: float


@dataclass
class ClusterSummary:
    topic_id: int
    size: int
    distsq: float
    raw_coherence: float
    coherence: float
    num_catchwords: int


@dataclass
class ReportRun:
    vocabulary: list[str]
    catch_thresholds: list[float]
    clusters: list[ClusterInput] = field(default_factory=list)
    eigenvalues: list[float] = field(default_factory=list)

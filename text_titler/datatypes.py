from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

ORDER_BY_RANK = "rank"
ORDER_BY_OCCURRENCE = "occurrence"

@dataclass(frozen=True)
class Sentence:
    idx: int
    text: str
    tokens: Tuple[str, ...] = ()
    position: int = 0

@dataclass
class Edge:
    i: int
    j: int
    weight: float  # similarity

@dataclass
class Graph:
    nodes: List[Sentence]
    edges: List[Edge]  # undirected weighted edges

@dataclass
class RankResult:
    scores: List[float]
    iterations: int
    converged: bool

@dataclass
class SummaryResult:
    sentences: List[Sentence]
    scores: List[float] = field(default_factory=list)  # score of each selected sentence
    iterations: int = 0
    converged: bool = True

    @property
    def texts(self) -> List[str]:
        return [s.text for s in self.sentences]

@dataclass
class ExtractionResult:
    context: str
    sentences: List[str] = field(default_factory=list)
    fallback_reason: Optional[str] = None  # "no_sentences" | "summarizer_error"

    @property
    def used_fallback(self) -> bool:
        return self.fallback_reason is not None

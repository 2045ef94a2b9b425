from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence
from .datatypes import ORDER_BY_OCCURRENCE, ORDER_BY_RANK, Sentence, SummaryResult
from .features import Similarity, compute_similarity_matrix, sorensen_dice
from .graphing import build_graph
from .preprocessing import PreprocessConfig, parse_sentences
from .scoring import score_graph

@dataclass
class SummarizerConfig:
    damping: float = 0.85
    max_iter: int = 200
    tolerance: float = 1e-6
    ordering: str = ORDER_BY_OCCURRENCE  # "occurrence" keeps narrative flow in the prompt

    def __post_init__(self):
        if self.ordering not in (ORDER_BY_RANK, ORDER_BY_OCCURRENCE):
            raise ValueError(f"Unknown ordering: {self.ordering}")
        if not 0.0 <= self.damping <= 1.0:
            raise ValueError(f"Damping must be within [0, 1], got {self.damping}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be positive, got {self.max_iter}")

def select_top(sentences: Sequence[Sentence], scores: Sequence[float], k: int,
               ordering: str = ORDER_BY_OCCURRENCE) -> List[int]:
    """Indices of the top-k sentences; ties go to the earlier sentence."""
    ranked = sorted(range(len(sentences)), key=lambda i: (-scores[i], sentences[i].position))
    selected = ranked[:k]
    if ordering == ORDER_BY_OCCURRENCE:
        selected.sort(key=lambda i: sentences[i].position)  # restore original order
    return selected

def summarize_sentences(sentences: Sequence[Sentence], k: int,
                        cfg: Optional[SummarizerConfig] = None,
                        similarity: Similarity = sorensen_dice) -> SummaryResult:
    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise ValueError(f"Sentence count must be a positive integer, got {k!r}")
    cfg = cfg or SummarizerConfig()
    if not sentences:
        return SummaryResult(sentences=[], iterations=0, converged=True)

    simM = compute_similarity_matrix(sentences, similarity)
    graph = build_graph(sentences, simM)
    rank = score_graph(graph, damping=cfg.damping, max_iter=cfg.max_iter, tolerance=cfg.tolerance)

    selected = select_top(sentences, rank.scores, k, ordering=cfg.ordering)
    return SummaryResult(
        sentences=[sentences[i] for i in selected],
        scores=[rank.scores[i] for i in selected],
        iterations=rank.iterations,
        converged=rank.converged,
    )

def summarize(text: str, k: int,
              cfg: Optional[SummarizerConfig] = None,
              preprocess: Optional[PreprocessConfig] = None,
              similarity: Similarity = sorensen_dice) -> SummaryResult:
    # Pipeline glue
    sentences = parse_sentences(text, preprocess)
    return summarize_sentences(sentences, k, cfg=cfg, similarity=similarity)

from __future__ import annotations
import numpy as np
import structlog
from .datatypes import Graph, RankResult
from .graphing import weight_matrix

logger = structlog.get_logger()

def textrank_scores(W: np.ndarray,
                    damping: float = 0.85,
                    max_iter: int = 200,
                    tolerance: float = 1e-6) -> RankResult:
    """
    Weighted TextRank over a symmetric edge-weight matrix.

    Formula: TR(Si) = (1-d) + d × Σ_j [ w(i,j) / Σ_k w(j,k) ] × TR(Sj)

    Args:
        W: N×N edge weights (zero diagonal)
        damping: Damping factor (typically 0.85)
        max_iter: Maximum number of full passes
        tolerance: Stop once the largest per-sentence change drops below this

    Returns:
        RankResult with one score per sentence
    """
    n = W.shape[0]
    if n == 0:
        return RankResult(scores=[], iterations=0, converged=True)

    scores = np.ones(n, dtype=float)

    out_weight = W.sum(axis=1)
    # isolated sinks contribute nothing; only their own column is skipped
    norm = np.divide(1.0, out_weight, out=np.zeros(n, dtype=float), where=out_weight > 0)
    T = W * norm[np.newaxis, :]

    converged = False
    iterations = 0
    for iterations in range(1, max_iter + 1):
        new_scores = (1.0 - damping) + damping * (T @ scores)
        delta = float(np.max(np.abs(new_scores - scores)))
        scores = new_scores
        if delta < tolerance:
            converged = True
            break

    if not converged:
        logger.debug("textrank_not_converged", iterations=iterations, sentences=n)
    return RankResult(scores=scores.tolist(), iterations=iterations, converged=converged)

def score_graph(graph: Graph, damping: float = 0.85, max_iter: int = 200, tolerance: float = 1e-6) -> RankResult:
    return textrank_scores(weight_matrix(graph), damping=damping, max_iter=max_iter, tolerance=tolerance)

from __future__ import annotations
from typing import Callable, Iterable, Sequence
import numpy as np
from .datatypes import Sentence

Similarity = Callable[[Iterable[str], Iterable[str]], float]

def sorensen_dice(a: Iterable[str], b: Iterable[str]) -> float:
    """
    Sørensen–Dice overlap of two token collections:
      sim(A, B) = 2·|A∩B| / (|A| + |B|)
    computed on unique tokens; 0.0 when either side is empty.
    """
    sa, sb = set(a), set(b)
    if not sa or not sb:
        return 0.0
    return 2.0 * len(sa & sb) / (len(sa) + len(sb))

def compute_similarity_matrix(sentences: Sequence[Sentence],
                              similarity: Similarity = sorensen_dice) -> np.ndarray:
    """Symmetric N×N edge-weight matrix with a zero diagonal."""
    n = len(sentences)
    M = np.zeros((n, n), dtype=float)
    for i in range(n):
        for j in range(i+1, n):
            M[i, j] = M[j, i] = similarity(sentences[i].tokens, sentences[j].tokens)
    return M

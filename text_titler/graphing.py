from __future__ import annotations
from typing import List, Sequence
import networkx as nx
import numpy as np
from .datatypes import Edge, Graph, Sentence

def build_graph(sentences: Sequence[Sentence], simM: np.ndarray, threshold: float = 0.0) -> Graph:
    """Undirected graph with an edge for every pair whose weight exceeds `threshold`."""
    nodes = list(sentences)
    edges: List[Edge] = []
    n = len(nodes)
    for i in range(n):
        for j in range(i+1, n):
            w = float(simM[i, j])
            if w > threshold:
                edges.append(Edge(i=i, j=j, weight=w))
    return Graph(nodes=nodes, edges=edges)

def weight_matrix(graph: Graph) -> np.ndarray:
    n = len(graph.nodes)
    W = np.zeros((n, n), dtype=float)
    for e in graph.edges:
        W[e.i, e.j] = e.weight
        W[e.j, e.i] = e.weight
    return W

def to_networkx(graph: Graph) -> nx.Graph:
    G = nx.Graph()
    for s in graph.nodes:
        G.add_node(s.idx, label=f"S{s.idx+1}", text=s.text)
    for e in graph.edges:
        G.add_edge(e.i, e.j, weight=e.weight)
    return G

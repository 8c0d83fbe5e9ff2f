# src/formflow/core/dag/cycles.py
"""Reachability check used to keep the form graph acyclic."""

from __future__ import annotations

from collections.abc import Iterable

import networkx as nx

from formflow.contracts.graph import Edge
from formflow.contracts.types import NodeID


def adjacency_view(edges: Iterable[Edge]) -> nx.DiGraph[str]:
    """Directed graph of the edge set. Nodes appear only via edges."""
    graph: nx.DiGraph[str] = nx.DiGraph()
    graph.add_edges_from((edge.source, edge.target) for edge in edges)
    return graph


def would_create_cycle(source: NodeID, target: NodeID, edges: Iterable[Edge]) -> bool:
    """Would adding ``source -> target`` close a cycle?

    Adds the hypothetical edge to an adjacency view of the existing edges and
    searches from ``target``; reaching ``source`` means the new edge closes a
    loop. networkx visits each node at most once, so this terminates on any
    input (including graphs that already contain a cycle) in time linear in
    the number of edges.
    """
    if source == target:
        return True
    graph = adjacency_view(edges)
    graph.add_edge(source, target)
    return source in nx.descendants(graph, target)


def has_cycle(edges: Iterable[Edge]) -> bool:
    """Does the edge set already contain a cycle (self-loops included)?"""
    return not nx.is_directed_acyclic_graph(adjacency_view(edges))

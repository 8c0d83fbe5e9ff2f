# tests/strategies/__init__.py
"""Hypothesis strategies for property-based tests.

Re-exports commonly used strategies for convenience:
    from tests.strategies import flat_fields, graphs_with_random_edges
"""

from tests.strategies.graphs import (
    connection_attempts,
    flat_fields,
    graphs_with_random_edges,
    node_sets,
    positions,
)

__all__ = [
    "connection_attempts",
    "flat_fields",
    "graphs_with_random_edges",
    "node_sets",
    "positions",
]

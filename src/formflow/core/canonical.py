# src/formflow/core/canonical.py
"""
Canonical JSON serialization for structural fingerprints.

Derivations (ordering, structural warnings) are pure functions of the
current nodes and edges. The builder memoizes them on a fingerprint of the
graph so repeated reads between mutations do not recompute.

Two-phase approach:
1. Normalize: dump pydantic models to JSON-mode primitives (our code)
2. Serialize: produce deterministic JSON per RFC 8785/JCS (rfc8785 package)
"""

from __future__ import annotations

import hashlib
from collections.abc import Sequence
from typing import Any

import rfc8785
from pydantic import BaseModel

from formflow.contracts.graph import Edge, Node

CANONICAL_VERSION = "sha256-rfc8785-v1"


def _normalize(obj: Any) -> Any:
    """Convert models, tuples and nested containers to JSON-safe primitives."""
    if isinstance(obj, BaseModel):
        return obj.model_dump(by_alias=True, mode="json")
    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, list | tuple):
        return [_normalize(v) for v in obj]
    return obj


def canonical_json(obj: Any) -> str:
    """Produce canonical JSON for hashing.

    Returns:
        Canonical JSON string (no whitespace, sorted keys)

    Raises:
        rfc8785.CanonicalizationError: If data contains types that cannot be serialized
    """
    result: bytes = rfc8785.dumps(_normalize(obj))
    return result.decode("utf-8")


def stable_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical JSON of ``obj``."""
    return hashlib.sha256(canonical_json(obj).encode("utf-8")).hexdigest()


def graph_fingerprint(nodes: Sequence[Node], edges: Sequence[Edge]) -> str:
    """Hash of everything a derivation can observe.

    Node order is part of the fingerprint: the export fallback emits fields
    in insertion order, so reordering nodes can change derived output.
    """
    return stable_hash({"nodes": list(nodes), "edges": list(edges)})

# tests/conftest.py
"""Shared test fixtures and helpers.

Graph builders:
- ``scenario_a`` is the smallest complete form:
  start -> static_1 -> text_1 -> end -> submit

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import os
from collections.abc import Iterator
from typing import Any

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from formflow.contracts.graph import Edge, Node
from formflow.core.events import EventBus
from formflow.core.identifiers import IdAllocator
from tests.helpers.clock import ManualClock
from tests.helpers.graphs import chain, make_edge, make_field_node, make_structural

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def scenario_a() -> tuple[list[Node], list[Edge]]:
    """start -> static_1 -> text_1 -> end -> submit."""
    nodes: list[Node] = [
        make_structural("start", y=0),
        make_field_node("static_1", "static", y=100),
        make_field_node("text_1", y=200),
        make_structural("end", y=300),
        make_structural("submit", y=400),
    ]
    return nodes, chain("start", "static_1", "text_1", "end", "submit")


@pytest.fixture
def two_sections() -> tuple[list[Node], list[Edge]]:
    """Two sections from Start; section_b is drawn first but sits lower on the canvas.

    start -> static_2 (y=500) -> text_3 -> end
    start -> static_1 (y=100) -> text_1 -> text_2 -> end
    end -> submit
    """
    nodes: list[Node] = [
        make_structural("start", y=0),
        make_field_node("static_2", "static", label="Section B", y=500),
        make_field_node("text_3", y=600),
        make_field_node("static_1", "static", label="Section A", y=100),
        make_field_node("text_1", y=200),
        make_field_node("text_2", y=300),
        make_structural("end", y=700),
        make_structural("submit", y=800),
    ]
    edges = [
        make_edge("start", "static_2"),
        make_edge("static_2", "text_3"),
        make_edge("text_3", "end"),
        make_edge("start", "static_1"),
        *chain("static_1", "text_1", "text_2", "end"),
        make_edge("end", "submit"),
    ]
    return nodes, edges


@pytest.fixture
def allocator() -> IdAllocator:
    return IdAllocator()


@pytest.fixture
def manual_clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def captured_logs() -> Iterator[list[dict[str, Any]]]:
    """Capture structlog events emitted during a test."""
    with structlog.testing.capture_logs() as logs:
        yield logs


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))

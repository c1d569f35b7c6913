from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_path = str(src_root)
    if src_path not in sys.path:
        sys.path.insert(0, src_path)


@pytest.fixture
def linear_graph():
    from algoframe.graph import Graph

    return Graph.from_edges([("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")])


@pytest.fixture
def two_triangles():
    """Two triangles joined by the single bridge C-D."""
    from algoframe.graph import Graph

    return Graph.from_edges(
        [
            ("A", "B"),
            ("B", "C"),
            ("C", "A"),
            ("C", "D"),
            ("D", "E"),
            ("E", "F"),
            ("F", "D"),
        ]
    )

import pytest

from algoframe.errors import NodeNotFoundError, ValidationError
from algoframe.graph import Graph
from algoframe.io_utils import load_graph, save_graph


def test_add_edge_creates_endpoints_and_keys() -> None:
    graph = Graph()

    edge = graph.add_edge("A", "B", {"weight": 2})

    assert edge.key == "A:B"
    assert "A" in graph and "B" in graph
    assert graph.edge_count() == 1


def test_parallel_edges_get_suffixed_keys() -> None:
    graph = Graph()
    graph.add_edge("A", "B")
    second = graph.add_edge("A", "B")

    assert second.key == "A:B#1"
    assert len(graph.find_edges("A", "B")) == 2


def test_invalid_node_ids_are_rejected() -> None:
    graph = Graph()

    with pytest.raises(ValidationError):
        graph.add_node(True)
    with pytest.raises(ValidationError):
        graph.add_node(1.5)


def test_get_node_raises_not_found() -> None:
    with pytest.raises(NodeNotFoundError) as exc:
        Graph().get_node("missing")

    assert "missing" in str(exc.value)


def test_remove_node_drops_incident_edges() -> None:
    graph = Graph.from_edges([("A", "B"), ("B", "C")])

    graph.remove_node("B")

    assert graph.node_count() == 2
    assert graph.edge_count() == 0


def test_node_link_payload_is_loaded(tmp_path) -> None:
    payload = {
        "directed": True,
        "nodes": [{"id": "A", "kind": "source"}, {"id": "B"}, {"id": "C"}],
        "links": [{"source": "A", "target": "B", "capacity": 3}],
    }

    graph = Graph.from_dict(payload)

    assert graph.directed is True
    assert graph.get_node("A").data == {"kind": "source"}
    assert graph.get_edge("A:B").data == {"capacity": 3}
    assert graph.node_count() == 3

    path = tmp_path / "graph.json"
    save_graph(path, graph)
    loaded = load_graph(path)
    assert loaded.to_dict() == graph.to_dict()


def test_yaml_graph_files_are_supported(tmp_path) -> None:
    path = tmp_path / "graph.yaml"
    path.write_text(
        "nodes:\n  - id: 1\n  - id: 2\nedges:\n  - {source: 1, target: 2, weight: 0.5}\n",
        encoding="utf-8",
    )

    graph = load_graph(path, directed=True)

    assert graph.directed is True
    assert graph.get_edge("1:2").data == {"weight": 0.5}


def test_malformed_edges_raise_validation_error() -> None:
    with pytest.raises(ValidationError):
        Graph.from_dict({"nodes": [], "links": [{"source": "A"}]})

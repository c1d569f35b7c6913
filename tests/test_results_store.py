import pytest

from algoframe.graph import Graph
from algoframe.results import (
    clear_results,
    collect_results,
    get_result,
    lookup_path,
    result_path,
    set_result,
    split_result_path,
)


def test_set_and_get_nested_result() -> None:
    tree: dict = {}

    set_result(tree, "algoframe", "degree", "degree", 3)

    assert tree == {"algoframe": {"degree": {"degree": 3}}}
    assert get_result(tree, "algoframe", "degree", "degree") == 3
    assert get_result(tree, "algoframe", "pagerank", "rank", default=-1) == -1


def test_clear_only_touches_own_subtree() -> None:
    tree: dict = {}
    set_result(tree, "algoframe", "degree", "degree", 3)
    set_result(tree, "algoframe", "bfs", "level", 1)
    set_result(tree, "custom", "score", "value", 0.5)

    assert clear_results(tree, "algoframe", "degree") is True
    assert tree == {"algoframe": {"bfs": {"level": 1}}, "custom": {"score": {"value": 0.5}}}

    assert clear_results(tree, "custom", "score") is True
    assert "custom" not in tree
    assert clear_results(tree, "custom", "score") is False


def test_result_path_format_and_split() -> None:
    path = result_path("algoframe", "bellman-ford", "distancePct")

    assert path == "algorithmResults.algoframe.bellman-ford.distancePct"
    assert split_result_path(path) == ("algoframe", "bellman-ford", "distancePct")
    with pytest.raises(ValueError):
        split_result_path("results.algoframe.degree")


def test_lookup_path_on_record_and_serialized_form() -> None:
    graph = Graph()
    node = graph.add_node("A")
    set_result(node.algorithm_results, "algoframe", "degree", "degree", 2)
    path = "algorithmResults.algoframe.degree.degree"

    assert lookup_path(node, path) == 2
    assert lookup_path(node.to_dict(), path) == 2
    assert lookup_path(graph.add_node("B"), path) is None


def test_collect_results_includes_every_entity() -> None:
    graph = Graph.from_edges([("A", "B")], nodes=["A", "B", "C"])
    set_result(graph.get_node("A").algorithm_results, "ns", "t", "k", 1)
    set_result(graph.graph_results, "ns", "t", "total", 1)

    results = collect_results(graph)

    assert set(results["node"]) == {"A", "B", "C"}
    assert results["node"]["A"] == {"ns": {"t": {"k": 1}}}
    assert results["node"]["C"] == {}
    assert set(results["edge"]) == {"A:B"}
    assert results["graph"] == {"ns": {"t": {"total": 1}}}


def test_collect_results_projection_and_copy() -> None:
    graph = Graph.from_edges([("A", "B")])
    set_result(graph.get_node("A").algorithm_results, "ns", "t", "k", 1)
    set_result(graph.get_node("A").algorithm_results, "ns", "other", "k", 2)

    projected = collect_results(graph, namespace="ns", algorithm_type="t")
    projected["node"]["A"]["k"] = 99

    assert projected["node"]["B"] == {}
    assert get_result(graph.get_node("A").algorithm_results, "ns", "t", "k") == 1

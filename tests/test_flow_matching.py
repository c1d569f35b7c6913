import pytest

from algoframe.algorithms.flow import MaxFlowAlgorithm, MinCutAlgorithm
from algoframe.algorithms.matching import BipartiteMatchingAlgorithm
from algoframe.graph import Graph


def _network() -> Graph:
    return Graph.from_edges(
        [
            ("s", "a", {"capacity": 3}),
            ("s", "b", {"capacity": 2}),
            ("a", "t", {"capacity": 2}),
            ("b", "t", {"capacity": 3}),
            ("a", "b", {"capacity": 1}),
        ],
        directed=True,
    )


def _edge(graph: Graph, algorithm_type: str, key: str) -> dict:
    return {
        edge.key: edge.algorithm_results["algoframe"][algorithm_type][key]
        for edge in graph.edges
    }


def _node(graph: Graph, algorithm_type: str, key: str) -> dict:
    return {
        node.id: node.algorithm_results["algoframe"][algorithm_type][key]
        for node in graph.nodes
    }


def test_max_flow_defaults_to_first_and_last_node() -> None:
    graph = _network()

    MaxFlowAlgorithm(graph).run()

    results = graph.graph_results["algoframe"]["max-flow"]
    assert results["maxFlow"] == 5.0
    assert results["source"] == "s"
    assert results["sink"] == "t"
    assert results["sourcePartition"] == ["s"]
    assert results["sinkPartition"] == ["a", "b", "t"]
    assert _edge(graph, "max-flow", "flow") == {
        "s:a": 3.0,
        "s:b": 2.0,
        "a:t": 2.0,
        "b:t": 3.0,
        "a:b": 1.0,
    }
    assert _edge(graph, "max-flow", "flowPct")["s:b"] == pytest.approx(2 / 3)
    assert all(_edge(graph, "max-flow", "isSaturated").values())
    assert _node(graph, "max-flow", "netFlow") == {"s": 5.0, "a": 0.0, "b": 0.0, "t": -5.0}
    assert _node(graph, "max-flow", "isSource")["s"] is True


def test_tied_cuts_take_the_source_residual_side() -> None:
    graph = Graph.from_edges(
        [("s", "a", {"capacity": 1}), ("a", "t", {"capacity": 1})],
        directed=True,
    )

    MaxFlowAlgorithm(graph).run()
    MinCutAlgorithm(graph).run()

    max_flow = graph.graph_results["algoframe"]["max-flow"]
    assert max_flow["sourcePartition"] == ["s"]
    assert max_flow["sinkPartition"] == ["a", "t"]
    assert graph.graph_results["algoframe"]["min-cut"]["partition1"] == ["s"]


def test_max_flow_splits_parallel_edges_by_capacity() -> None:
    graph = Graph(directed=True)
    graph.add_edge("s", "t", {"capacity": 1})
    graph.add_edge("s", "t", {"capacity": 3})

    MaxFlowAlgorithm(graph).run()

    assert graph.graph_results["algoframe"]["max-flow"]["maxFlow"] == 4.0
    assert _edge(graph, "max-flow", "flow") == {"s:t": 1.0, "s:t#1": 3.0}
    assert _edge(graph, "max-flow", "utilization") == {"s:t": 1.0, "s:t#1": 1.0}


def test_max_flow_same_source_and_sink_is_zero() -> None:
    graph = _network()

    MaxFlowAlgorithm(graph, {"source": "a", "sink": "a"}).run()

    assert graph.graph_results["algoframe"]["max-flow"]["maxFlow"] == 0.0
    assert set(_edge(graph, "max-flow", "flow").values()) == {0.0}


def test_min_cut_between_source_and_sink(two_triangles) -> None:
    MinCutAlgorithm(two_triangles).run()

    assert _edge(two_triangles, "min-cut", "inCut")["C:D"] is True
    assert sum(_edge(two_triangles, "min-cut", "inCut").values()) == 1
    assert _node(two_triangles, "min-cut", "partition") == {
        "A": "1",
        "B": "1",
        "C": "1",
        "D": "2",
        "E": "2",
        "F": "2",
    }
    results = two_triangles.graph_results["algoframe"]["min-cut"]
    assert results["method"] == "source-sink"
    assert results["cutValue"] == 1.0
    assert results["source"] == "A"
    assert results["sink"] == "F"


def test_global_min_cut(two_triangles) -> None:
    MinCutAlgorithm(two_triangles, {"useGlobalMinCut": True}).run()

    results = two_triangles.graph_results["algoframe"]["min-cut"]
    assert results["method"] == "stoer-wagner"
    assert results["cutValue"] == 1.0
    assert results["partition1"] == ["A", "B", "C"]
    assert results["partition2"] == ["D", "E", "F"]
    assert "source" not in results


def test_global_min_cut_on_disconnected_graph() -> None:
    graph = Graph.from_edges([("A", "B"), ("C", "D")])

    MinCutAlgorithm(graph, {"useGlobalMinCut": True}).run()

    results = graph.graph_results["algoframe"]["min-cut"]
    assert results["cutValue"] == 0.0
    assert results["partition1"] == ["A", "B"]
    assert results["cutEdgeCount"] == 0


def test_bipartite_matching_on_path() -> None:
    graph = Graph.from_edges([("A", "B"), ("B", "C"), ("C", "D")])

    BipartiteMatchingAlgorithm(graph).run()

    assert _edge(graph, "bipartite-matching", "inMatching") == {
        "A:B": True,
        "B:C": False,
        "C:D": True,
    }
    assert all(_node(graph, "bipartite-matching", "isMatched").values())
    results = graph.graph_results["algoframe"]["bipartite-matching"]
    assert results["isBipartite"] is True
    assert results["matchingSize"] == 2
    assert results["leftSize"] + results["rightSize"] == 4


def test_bipartite_matching_on_triangle_reports_non_bipartite() -> None:
    graph = Graph.from_edges([("A", "B"), ("B", "C"), ("C", "A")])
    algorithm = BipartiteMatchingAlgorithm(graph)

    algorithm.run()

    assert algorithm.results["graph"]["algoframe"]["bipartite-matching"] == {
        "isBipartite": False,
        "matchingSize": 0,
    }
    assert algorithm.results["node"]["A"] == {}

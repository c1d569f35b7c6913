import pytest

from algoframe.algorithms.centrality import (
    BetweennessCentralityAlgorithm,
    ClosenessCentralityAlgorithm,
    DegreeAlgorithm,
    EigenvectorCentralityAlgorithm,
    HITSAlgorithm,
    KatzCentralityAlgorithm,
    PageRankAlgorithm,
)
from algoframe.errors import OptionValidationError
from algoframe.graph import Graph


def _node_values(graph: Graph, algorithm_type: str, key: str) -> dict:
    return {
        node.id: node.algorithm_results["algoframe"][algorithm_type][key]
        for node in graph.nodes
    }


def _graph_value(graph: Graph, algorithm_type: str, key: str):
    return graph.graph_results["algoframe"][algorithm_type][key]


def test_degree_follows_edge_direction() -> None:
    graph = Graph.from_edges([("A", "B"), ("A", "C")], directed=True)

    DegreeAlgorithm(graph).run()

    assert _node_values(graph, "degree", "outDegree") == {"A": 2, "B": 0, "C": 0}
    assert _node_values(graph, "degree", "inDegree") == {"A": 0, "B": 1, "C": 1}
    assert _node_values(graph, "degree", "degreePct") == {"A": 1.0, "B": 0.5, "C": 0.5}
    assert _graph_value(graph, "degree", "maxOutDegree") == 2


def test_degree_on_undirected_graph_counts_each_edge_once(linear_graph) -> None:
    DegreeAlgorithm(linear_graph).run()

    degree = _node_values(linear_graph, "degree", "degree")
    assert degree == {"A": 1, "B": 2, "C": 2, "D": 2, "E": 1}
    assert _graph_value(linear_graph, "degree", "maxDegree") == 2


def test_pagerank_ranks_bridge_nodes_highest(two_triangles) -> None:
    PageRankAlgorithm(two_triangles).run()

    ranks = _node_values(two_triangles, "pagerank", "rank")
    pct = _node_values(two_triangles, "pagerank", "rankPct")
    assert sum(ranks.values()) == pytest.approx(1.0)
    assert ranks["C"] == pytest.approx(ranks["D"])
    assert ranks["C"] > ranks["A"]
    assert pct["C"] == pytest.approx(1.0)
    assert pct["A"] == pytest.approx(0.0)
    assert _graph_value(two_triangles, "pagerank", "converged") is True
    assert _graph_value(two_triangles, "pagerank", "dampingFactor") == 0.85


def test_pagerank_rejects_damping_factor_above_one() -> None:
    with pytest.raises(OptionValidationError) as exc:
        PageRankAlgorithm(Graph(), {"dampingFactor": 1.5})

    assert "<= 1" in str(exc.value)


def test_pagerank_falls_back_to_uniform_ranks_without_convergence(caplog) -> None:
    graph = Graph.from_edges([("A", "B"), ("A", "C"), ("A", "D")])

    with caplog.at_level("WARNING", logger="algoframe.run.algoframe.pagerank"):
        PageRankAlgorithm(graph, {"maxIterations": 1, "tolerance": 1e-10}).run()

    assert _graph_value(graph, "pagerank", "converged") is False
    assert set(_node_values(graph, "pagerank", "rank").values()) == {0.25}
    assert set(_node_values(graph, "pagerank", "rankPct").values()) == {0.0}
    assert any("did not converge" in record.getMessage() for record in caplog.records)


def test_betweenness_on_path(linear_graph) -> None:
    BetweennessCentralityAlgorithm(linear_graph).run()

    scores = _node_values(linear_graph, "betweenness", "score")
    pct = _node_values(linear_graph, "betweenness", "scorePct")
    assert scores["A"] == 0.0
    assert scores["B"] == pytest.approx(0.5)
    assert scores["C"] == pytest.approx(2 / 3)
    assert pct["C"] == pytest.approx(1.0)
    assert pct["E"] == pytest.approx(0.0)


def test_closeness_peaks_in_the_middle(linear_graph) -> None:
    ClosenessCentralityAlgorithm(linear_graph).run()

    scores = _node_values(linear_graph, "closeness", "score")
    assert scores["C"] == pytest.approx(4 / 6)
    assert scores["A"] == pytest.approx(scores["E"])
    assert _node_values(linear_graph, "closeness", "scorePct")["C"] == pytest.approx(1.0)


def test_betweenness_and_closeness_ignore_direction() -> None:
    graph = Graph.from_edges([("A", "B"), ("C", "B")], directed=True)

    BetweennessCentralityAlgorithm(graph).run()
    ClosenessCentralityAlgorithm(graph).run()

    assert _node_values(graph, "betweenness", "score")["B"] == pytest.approx(1.0)
    assert _node_values(graph, "closeness", "score")["A"] == pytest.approx(2 / 3)


def test_eigenvector_is_symmetric_across_bridge(two_triangles) -> None:
    EigenvectorCentralityAlgorithm(two_triangles).run()

    scores = _node_values(two_triangles, "eigenvector", "score")
    assert scores["C"] == pytest.approx(scores["D"], rel=1e-4)
    assert scores["C"] > scores["A"]
    assert _graph_value(two_triangles, "eigenvector", "converged") is True


def test_katz_favours_central_nodes(linear_graph) -> None:
    KatzCentralityAlgorithm(linear_graph, {"alpha": 0.1}).run()

    scores = _node_values(linear_graph, "katz", "score")
    assert scores["A"] == pytest.approx(scores["E"])
    assert scores["C"] > scores["B"] > scores["A"]


def test_hits_separates_hubs_and_authorities() -> None:
    graph = Graph.from_edges([("A", "B"), ("A", "C")], directed=True)

    HITSAlgorithm(graph).run()

    hubs = _node_values(graph, "hits", "hubScore")
    authorities = _node_values(graph, "hits", "authorityScore")
    combined = _node_values(graph, "hits", "combinedScore")
    assert hubs["A"] == pytest.approx(1.0, abs=1e-6)
    assert hubs["B"] == pytest.approx(0.0, abs=1e-6)
    assert authorities["B"] == pytest.approx(0.5, abs=1e-6)
    assert authorities["A"] == pytest.approx(0.0, abs=1e-6)
    assert combined["A"] == pytest.approx(0.5, abs=1e-6)


def test_hits_without_normalization_scales_to_max_one() -> None:
    graph = Graph.from_edges([("A", "B"), ("A", "C")], directed=True)

    HITSAlgorithm(graph, {"normalized": False}).run()

    assert _node_values(graph, "hits", "hubScore")["A"] == pytest.approx(1.0, abs=1e-6)
    assert _node_values(graph, "hits", "authorityScore")["B"] == pytest.approx(1.0, abs=1e-6)


def test_hits_without_edges_scores_zero() -> None:
    graph = Graph()
    graph.add_nodes(["A", "B"])

    HITSAlgorithm(graph).run()

    assert set(_node_values(graph, "hits", "hubScore").values()) == {0.0}
    assert set(_node_values(graph, "hits", "combinedScorePct").values()) == {0.0}

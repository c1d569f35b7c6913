"""Centrality measures."""

from __future__ import annotations

import networkx as nx

from algoframe.algorithms.base import Algorithm
from algoframe.algorithms.common import (
    max_iterations_option,
    node_metric_styles,
    tolerance_option,
)
from algoframe.normalization import max_normalize, min_max_normalize
from algoframe.registry import register


@register
class DegreeAlgorithm(Algorithm):
    """In, out and total degree of every node, following edge direction."""

    type = "degree"
    suggested_styles = node_metric_styles(
        "degree",
        "degreePct",
        name="Degree",
        description="Node size and color by number of connections",
    )

    def execute(self) -> None:
        g = self.algorithm_graph(directed=True, add_reverse_edges=False)
        ids = self.node_ids()
        in_degree = dict(g.in_degree())
        out_degree = dict(g.out_degree())
        degree = {n: in_degree[n] + out_degree[n] for n in ids}

        for key, values in (("inDegree", in_degree), ("outDegree", out_degree), ("degree", degree)):
            pct = max_normalize(values, ids)
            for node_id in ids:
                self.add_node_result(node_id, key, values[node_id])
                self.add_node_result(node_id, f"{key}Pct", pct[node_id])

        self.add_graph_result("maxInDegree", max(in_degree.values()))
        self.add_graph_result("maxOutDegree", max(out_degree.values()))
        self.add_graph_result("maxDegree", max(degree.values()))


@register
class PageRankAlgorithm(Algorithm):
    """PageRank via power iteration."""

    type = "pagerank"
    options_schema = {
        "dampingFactor": {
            "type": "number",
            "default": 0.85,
            "label": "Damping Factor",
            "description": "Probability of following a link rather than jumping to a random node",
            "min": 0,
            "max": 1,
            "step": 0.05,
        },
        "maxIterations": max_iterations_option(),
        "tolerance": tolerance_option(),
        "weighted": {
            "type": "boolean",
            "default": False,
            "label": "Use Edge Weights",
            "description": "Follow links in proportion to their weight",
        },
    }
    suggested_styles = node_metric_styles(
        "pagerank",
        "rankPct",
        name="PageRank",
        description="Node importance by random-walk visit probability",
        palette="plasma",
    )

    def execute(self) -> None:
        g = self.algorithm_graph(directed=self.is_directed(), allow_parallel_edges=False)
        ids = self.node_ids()
        damping = self.option("dampingFactor")
        converged = True
        try:
            ranks = nx.pagerank(
                g,
                alpha=damping,
                max_iter=self.option("maxIterations"),
                tol=self.option("tolerance"),
                weight="weight" if self.option("weighted") else None,
            )
        except nx.PowerIterationFailedConvergence:
            self.logger.warning(
                "PageRank did not converge within %s iterations.", self.option("maxIterations")
            )
            converged = False
            ranks = {n: 1.0 / len(ids) for n in ids}

        self.write_node_scores("rank", ranks, pct_key="rankPct")
        self.add_graph_result("dampingFactor", damping)
        self.add_graph_result("converged", converged)


@register
class BetweennessCentralityAlgorithm(Algorithm):
    """Share of shortest paths passing through each node."""

    type = "betweenness"
    options_schema = {
        "normalized": {
            "type": "boolean",
            "default": True,
            "label": "Normalized",
            "description": "Divide by the number of node pairs",
        },
        "endpoints": {
            "type": "boolean",
            "default": False,
            "label": "Count Endpoints",
            "description": "Include path endpoints in the counts",
            "advanced": True,
        },
    }
    suggested_styles = node_metric_styles(
        "betweenness",
        "scorePct",
        name="Betweenness",
        description="Highlights bridge nodes between regions of the graph",
        palette="inferno",
    )

    def execute(self) -> None:
        scores = nx.betweenness_centrality(
            self.simple_graph(directed=False),
            normalized=self.option("normalized"),
            endpoints=self.option("endpoints"),
        )
        self.write_node_scores("score", scores, pct_key="scorePct")


@register
class ClosenessCentralityAlgorithm(Algorithm):
    """Inverse average distance to every reachable node."""

    type = "closeness"
    options_schema = {
        "wfImproved": {
            "type": "boolean",
            "default": True,
            "label": "Wasserman-Faust Scaling",
            "description": "Scale by the reachable share of the graph",
            "advanced": True,
        },
    }
    suggested_styles = node_metric_styles(
        "closeness",
        "scorePct",
        name="Closeness",
        description="Nodes close to everything else stand out",
    )

    def execute(self) -> None:
        scores = nx.closeness_centrality(
            self.simple_graph(directed=False), wf_improved=self.option("wfImproved")
        )
        self.write_node_scores("score", scores, pct_key="scorePct")


@register
class EigenvectorCentralityAlgorithm(Algorithm):
    type = "eigenvector"
    options_schema = {
        "maxIterations": max_iterations_option(),
        "tolerance": tolerance_option(),
    }
    suggested_styles = node_metric_styles(
        "eigenvector",
        "scorePct",
        name="Eigenvector",
        description="Influence from being linked to influential nodes",
        palette="magma",
    )

    def execute(self) -> None:
        converged = True
        try:
            scores = nx.eigenvector_centrality(
                self.simple_graph(directed=False),
                max_iter=self.option("maxIterations"),
                tol=self.option("tolerance"),
            )
        except nx.PowerIterationFailedConvergence:
            self.logger.warning("Eigenvector centrality did not converge.")
            converged = False
            scores = {}
        self.write_node_scores("score", scores, pct_key="scorePct")
        self.add_graph_result("converged", converged)


@register
class KatzCentralityAlgorithm(Algorithm):
    type = "katz"
    options_schema = {
        "alpha": {
            "type": "number",
            "default": 0.1,
            "label": "Attenuation Factor",
            "description": "Weight given to longer walks; must stay below 1/lambda_max",
            "min": 0.01,
            "max": 0.5,
            "step": 0.01,
        },
        "beta": {
            "type": "number",
            "default": 1.0,
            "label": "Base Score",
            "description": "Score every node receives regardless of links",
            "min": 0,
            "max": 10,
        },
        "maxIterations": max_iterations_option(),
        "tolerance": tolerance_option(),
        "normalized": {
            "type": "boolean",
            "default": True,
            "label": "Normalized",
            "description": "Scale scores to unit length",
        },
    }
    suggested_styles = node_metric_styles(
        "katz",
        "scorePct",
        name="Katz",
        description="Influence counted over all walks, attenuated by length",
    )

    def execute(self) -> None:
        converged = True
        try:
            scores = nx.katz_centrality(
                self.simple_graph(directed=False),
                alpha=self.option("alpha"),
                beta=self.option("beta"),
                max_iter=self.option("maxIterations"),
                tol=self.option("tolerance"),
                normalized=self.option("normalized"),
            )
        except nx.PowerIterationFailedConvergence:
            self.logger.warning("Katz centrality did not converge; try a smaller alpha.")
            converged = False
            scores = {}
        self.write_node_scores("score", scores, pct_key="scorePct")
        self.add_graph_result("converged", converged)


@register
class HITSAlgorithm(Algorithm):
    """Hub and authority scores along edge direction.

    With ``normalized`` the scores each sum to 1, otherwise the largest
    score is 1.
    """

    type = "hits"
    options_schema = {
        "maxIterations": max_iterations_option(),
        "tolerance": tolerance_option(1e-8),
        "normalized": {
            "type": "boolean",
            "default": True,
            "label": "Normalized",
            "description": "Scale hub and authority scores to sum to 1",
        },
    }
    suggested_styles = node_metric_styles(
        "hits",
        "combinedScorePct",
        name="HITS",
        description="Hubs link to many authorities; authorities are linked from many hubs",
        palette="cividis",
    )

    def execute(self) -> None:
        g = self.simple_graph(directed=True)
        ids = self.node_ids()
        converged = True
        if g.number_of_edges() == 0 or g.number_of_nodes() < 2:
            hubs = {n: 0.0 for n in ids}
            authorities = {n: 0.0 for n in ids}
        else:
            try:
                hubs, authorities = nx.hits(
                    g,
                    max_iter=self.option("maxIterations"),
                    tol=self.option("tolerance"),
                    normalized=True,
                )
            except nx.PowerIterationFailedConvergence:
                self.logger.warning("HITS did not converge.")
                converged = False
                hubs, authorities = {}, {}
            if not self.option("normalized"):
                hubs = max_normalize(hubs, ids)
                authorities = max_normalize(authorities, ids)

        combined = {
            n: (hubs.get(n, 0.0) + authorities.get(n, 0.0)) / 2.0 for n in ids
        }
        for key, scores in (
            ("hubScore", hubs),
            ("authorityScore", authorities),
            ("combinedScore", combined),
        ):
            pct = min_max_normalize(scores, ids)
            for node_id in ids:
                self.add_node_result(node_id, key, float(scores.get(node_id, 0.0)))
                self.add_node_result(node_id, f"{key}Pct", pct[node_id])
        self.add_graph_result("converged", converged)


__all__ = [
    "DegreeAlgorithm",
    "PageRankAlgorithm",
    "BetweennessCentralityAlgorithm",
    "ClosenessCentralityAlgorithm",
    "EigenvectorCentralityAlgorithm",
    "KatzCentralityAlgorithm",
    "HITSAlgorithm",
]
